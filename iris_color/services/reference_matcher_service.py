from __future__ import annotations
from typing import List, Optional
import math
import logging
from ..models.reference_color import ReferencePalette, ReferenceMatch
from ..repositories.reference_color_repository import ReferenceColorRepository
from .color_space import perceptual_distance, round_half_up

logger = logging.getLogger(__name__)


class ReferenceMatcherService:
    """
    Nearest named reference colors by perceptual (CIE76) distance.
    *   The palette is injected (or loaded once) and never mutated.
    *   Stateless per call, so safe to share between concurrent analyses.
    """
    def __init__(self, palette: ReferencePalette | None = None):
        if palette is None:
            palette = ReferenceColorRepository().load()
        self.palette = palette
        logger.debug(f"Reference matcher ready with {len(palette)} colors")

    @staticmethod
    def _display_name(name: str) -> str:
        return name.replace("-", " ")

    def find_nearest(self, hex_color: str, k: int = 3) -> List[ReferenceMatch]:
        """
        Return the k reference colors closest to hex_color, nearest first.

        Args:
            hex_color (str): Color to match.
            k (int): Number of matches. k >= palette size returns the whole palette.

        Returns:
            List[ReferenceMatch]: Ties keep palette order. Empty if hex_color is invalid.
        """
        scored = []
        for ref in self.palette:
            distance = perceptual_distance(hex_color, ref.hex)
            if math.isinf(distance):
                continue
            scored.append((distance, ref))

        scored.sort(key=lambda item: item[0])  # stable: ties keep table order
        return [
            ReferenceMatch(
                name=self._display_name(ref.name),
                hex=ref.hex,
                distance=int(round_half_up(distance)),
            )
            for distance, ref in scored[:max(k, 0)]
        ]

    def best_name(self, hex_color: str) -> Optional[str]:
        matches = self.find_nearest(hex_color, 1)
        return matches[0].name if matches else None
