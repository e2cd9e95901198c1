from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
import logging
import os
from dotenv import load_dotenv
from ..models.eye_color import (
    EyeColorCategory, DominantColor, NamedShade, GeneralColor,
    BLUE, GREEN, HAZEL, BROWN, GRAY, AMBER, VIOLET,
)
from .color_space import hex_to_hsl

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HueBand:
    """Hue interval [min_hue, max_hue) (or closed when include_max) mapped to a category."""
    min_hue: float
    max_hue: float
    category: EyeColorCategory
    include_max: bool = False
    saturation_above: Optional[float] = None  # band applies only if s > this
    saturation_below: Optional[float] = None  # band applies only if s < this

    def matches(self, hue: float, saturation: float) -> bool:
        if hue < self.min_hue:
            return False
        if hue > self.max_hue or (hue == self.max_hue and not self.include_max):
            return False
        if self.saturation_above is not None and not saturation > self.saturation_above:
            return False
        if self.saturation_below is not None and not saturation < self.saturation_below:
            return False
        return True


# First match wins.
HUE_BANDS = (
    HueBand(260, 300, VIOLET, include_max=True),
    HueBand(200, 260, BLUE),
    HueBand(170, 200, GREEN, saturation_above=0.15),  # teal
    HueBand(170, 200, BLUE),
    HueBand(80, 170, GREEN),
    HueBand(50, 80, HAZEL),
    HueBand(35, 50, AMBER),
    HueBand(20, 35, BROWN),
    HueBand(0, 20, BROWN),
    HueBand(340, 360, BROWN, include_max=True),
    HueBand(210, 270, BLUE, include_max=True, saturation_below=0.25),  # slate
)

BROWN_KEYWORDS = frozenset({
    "brown", "chocolate", "caramel", "walnut", "mocha", "espresso", "chestnut",
    "sienna", "umber", "sepia", "coffee", "hazel", "hazelnut", "toffee",
    "golden brown", "amber brown", "cocoa", "black olive",
})
GREEN_KEYWORDS = frozenset({
    "green", "sage", "olive", "forest", "sea", "moss", "fern", "jade", "teal",
    "emerald", "celadon", "gray green", "green haze", "pine",
})


class EyeColorClassifierService:
    """
    Hue/saturation heuristics mapping colors to general eye-color categories.
    """
    MIN_SATURATION = 0.1
    CANDIDATE_COUNT = 6  # top dominant colors considered for the representative

    def __init__(self, hue_bands: Sequence[HueBand] = HUE_BANDS, hazel_min_percentage: float | None = None):
        if hazel_min_percentage is None:
            hazel_min_percentage = float(os.getenv("HAZEL_MIN_PERCENTAGE", "15"))
        self.hue_bands = tuple(hue_bands)
        self.HAZEL_MIN_PERCENTAGE = hazel_min_percentage

    def classify(self, hex_color: str) -> EyeColorCategory:
        hsl = hex_to_hsl(hex_color)
        if hsl is None:
            return GRAY
        hue, saturation, _ = hsl
        if saturation < self.MIN_SATURATION:
            return GRAY
        for band in self.hue_bands:
            if band.matches(hue, saturation):
                return band.category
        return GRAY

    @staticmethod
    def _keyword_percentage(named_shades: Iterable[NamedShade], keywords: frozenset) -> int:
        total = 0
        for shade in named_shades:
            name = (shade.name or "").lower()
            if any(keyword in name for keyword in keywords):
                total += shade.percentage or 0
        return total

    def is_hazel_mix(self, named_shades: Iterable[NamedShade]) -> bool:
        """True when brown-named and green-named shades are both significant."""
        named_shades = list(named_shades or [])
        brown_pct = self._keyword_percentage(named_shades, BROWN_KEYWORDS)
        green_pct = self._keyword_percentage(named_shades, GREEN_KEYWORDS)
        logger.debug(f"Named shade mix: brown {brown_pct}%, green {green_pct}%")
        return brown_pct >= self.HAZEL_MIN_PERCENTAGE and green_pct >= self.HAZEL_MIN_PERCENTAGE

    def choose_general_color(
        self,
        dominant_colors: List[DominantColor],
        named_shades: List[NamedShade] | None = None,
    ) -> GeneralColor:
        """
        Pick the general eye color.

        Args:
            dominant_colors (List[DominantColor]): Sorted by percentage, descending.
            named_shades (List[NamedShade]): Named aggregation of the same colors.

        Returns:
            GeneralColor: Hazel when brown and green shades each reach the threshold,
            otherwise the category of the most saturated of the top dominant colors.
        """
        if not dominant_colors:
            return GeneralColor(name=GRAY.name, hex=GRAY.hex, category=GRAY)

        if self.is_hazel_mix(named_shades):
            return GeneralColor(name=HAZEL.name, hex=HAZEL.hex, category=HAZEL)

        best = dominant_colors[0]
        best_saturation = 0.0
        for color in dominant_colors[:self.CANDIDATE_COUNT]:
            hsl = hex_to_hsl(color.hex)
            if hsl is None:
                continue
            if hsl[1] > best_saturation:
                best_saturation = hsl[1]
                best = color

        category = self.classify(best.hex)
        return GeneralColor(name=category.name, hex=best.hex, category=category)
