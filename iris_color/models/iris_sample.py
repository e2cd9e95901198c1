from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import numpy as np


class SamplingMethod(str, Enum):
    ANNULUS = "annulus"                  # ring between pupil and sclera
    CENTER_FALLBACK = "center_fallback"  # central 50% x 50% rectangle
    NONE = "none"                        # nothing usable survived either pass


@dataclass
class IrisSample:
    """
    Pixels gathered for one analysis call, plus how they were gathered.
    """
    pixels: np.ndarray  # Shape (N, 3), dtype uint8, RGB order.
    method: SamplingMethod

    def __len__(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_degenerate(self) -> bool:
        return self.method is SamplingMethod.NONE
