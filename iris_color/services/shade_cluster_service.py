from __future__ import annotations
from typing import List
import logging
import numpy as np
from ..models.eye_color import DominantColor, NEUTRAL_GRAY_HEX
from .color_space import rgb_to_lab_array, rgb_to_hex, round_half_up

logger = logging.getLogger(__name__)


class ShadeClusterService:
    """
    Groups sampled pixels into representative shades by quantizing Lab space.

    Buckets are finer on lightness (4 L units) than on chroma (16 a/b units):
    lightness banding separates iris shades more than small hue shifts do.
    """
    L_STEP = 4
    AB_STEP = 16
    AB_OFFSET = 128

    def bucket_keys(self, samples: np.ndarray) -> np.ndarray:
        """(N, 3) RGB -> (N, 3) integer bucket keys (L, a, b)."""
        lab = rgb_to_lab_array(samples)
        return np.column_stack([
            np.floor(lab[:, 0] / self.L_STEP),
            np.floor((lab[:, 1] + self.AB_OFFSET) / self.AB_STEP),
            np.floor((lab[:, 2] + self.AB_OFFSET) / self.AB_STEP),
        ]).astype(np.int64)

    def cluster(self, samples: np.ndarray, max_colors: int = 10) -> List[DominantColor]:
        """
        Reduce samples to at most `max_colors` dominant colors.

        Args:
            samples (np.ndarray): (N, 3) RGB pixels.
            max_colors (int): Number of buckets kept.

        Returns:
            List[DominantColor]: Sorted by percentage, descending. Each percentage is
            rounded on its own against the kept total, so the sum is only close to 100.
            Empty input yields a single neutral-gray 100% entry.
        """
        samples = np.asarray(samples).reshape(-1, 3)
        if len(samples) == 0:
            return [DominantColor(hex=NEUTRAL_GRAY_HEX, percentage=100)]

        keys = self.bucket_keys(samples)
        _, first_index, inverse, counts = np.unique(
            keys, axis=0, return_index=True, return_inverse=True, return_counts=True
        )
        inverse = inverse.reshape(-1)

        rgb = samples.astype(np.float64)
        sums = np.column_stack([
            np.bincount(inverse, weights=rgb[:, c], minlength=len(counts)) for c in range(3)
        ])
        means = round_half_up(sums / counts[:, None])

        # discovery order, then count descending (stable)
        discovery = np.argsort(first_index, kind="stable")
        order = discovery[np.argsort(-counts[discovery], kind="stable")][:max_colors]

        kept_total = int(counts[order].sum())
        logger.debug(f"{len(counts)} Lab buckets from {len(samples)} samples, keeping {len(order)}")

        return [
            DominantColor(
                hex=rgb_to_hex(*means[i]),
                percentage=int(round_half_up(counts[i] / kept_total * 100)),
            )
            for i in order
        ]
