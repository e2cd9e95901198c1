from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
from .reference_color import ReferenceMatch


@dataclass(frozen=True)
class EyeColorCategory:
    name: str
    hex: str


BLUE = EyeColorCategory("Blue", "#4682b4")
GREEN = EyeColorCategory("Green", "#228b22")
HAZEL = EyeColorCategory("Hazel", "#8e7618")
BROWN = EyeColorCategory("Brown", "#634e34")
GRAY = EyeColorCategory("Gray", "#708090")
AMBER = EyeColorCategory("Amber", "#ffbf00")
VIOLET = EyeColorCategory("Violet", "#5a5c9e")

EYE_COLOR_CATEGORIES = {
    "blue": BLUE,
    "green": GREEN,
    "hazel": HAZEL,
    "brown": BROWN,
    "gray": GRAY,
    "amber": AMBER,
    "violet": VIOLET,
}

NEUTRAL_GRAY_HEX = GRAY.hex


@dataclass
class DominantColor:
    """One cluster representative and its share (0-100) of the kept samples."""
    hex: str
    percentage: int

    def to_dict(self) -> dict:
        return {"hex": self.hex, "percentage": self.percentage}


@dataclass
class NamedShade:
    """
    Dominant colors merged under the reference name they are closest to.
    `hex` is the representative of the most recently merged color.
    """
    name: str
    percentage: int
    hex: str

    def to_dict(self) -> dict:
        return {"name": self.name, "percentage": self.percentage, "hex": self.hex}


@dataclass
class ShadeDetail:
    hex: str
    percentage: int
    shade_name: str | None
    reference_matches: List[ReferenceMatch] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "hex": self.hex,
            "percentage": self.percentage,
            "shade_name": self.shade_name,
            "reference_matches": [m.to_dict() for m in self.reference_matches],
        }


@dataclass
class GeneralColor:
    """
    Category picked for the whole iris.
    `hex` is the classified representative color (category color for the hazel override).
    """
    name: str
    hex: str
    category: EyeColorCategory

    def to_dict(self) -> dict:
        return {"name": self.name, "hex": self.hex, "color_code": self.hex}


@dataclass
class AnalysisReport:
    """
    Terminal result of one analysis. Not persisted; handed back to the caller.
    """
    general_color: GeneralColor
    shade_breakdown: List[NamedShade]
    breakdown: List[ShadeDetail]
    reference_matches: List[ReferenceMatch]  # nearest references to the general category color
    sampling_method: str

    @property
    def color_code(self) -> str:
        return self.general_color.hex

    def to_dict(self) -> dict:
        """Plain, JSON-serialisable view of the report."""
        return {
            "general_color": self.general_color.to_dict(),
            "shade_breakdown": [s.to_dict() for s in self.shade_breakdown],
            "breakdown": [d.to_dict() for d in self.breakdown],
            "reference_matches": [m.to_dict() for m in self.reference_matches],
            "sampling_method": self.sampling_method,
            "color_code": self.color_code,
        }
