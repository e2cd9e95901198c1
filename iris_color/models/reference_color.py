from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class ReferenceColor:
    name: str  # dataset name, words joined by "-"
    hex: str   # "#rrggbb"


@dataclass(frozen=True)
class ReferencePalette:
    """
    Immutable, ordered table of named reference colors.
    Loaded once at startup and shared read-only by every analysis.
    """
    colors: Tuple[ReferenceColor, ...] = ()

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[ReferenceColor]:
        return iter(self.colors)


@dataclass(frozen=True)
class ReferenceMatch:
    name: str      # display name, separators replaced by spaces
    hex: str
    distance: int  # CIE76 delta E, rounded

    def to_dict(self) -> dict:
        return {"name": self.name, "hex": self.hex, "distance": self.distance}
