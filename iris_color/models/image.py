from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    Simple data object: RGBA working raster (+ native size and optional source path).
    No codec logic outside the image repository.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.
    source_size: tuple[int, int] | None = None  # (width, height) before resizing.
    path: Path | None = None  # Source of the image.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])
