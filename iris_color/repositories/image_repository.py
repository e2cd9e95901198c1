from pathlib import Path
from typing import Tuple, Union
from io import BytesIO
import logging
import os
import numpy as np
import cv2
from PIL import Image as PILImage, UnidentifiedImageError
from dotenv import load_dotenv
from ..models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Input bytes are not a valid or supported image."""


class ImageRepository:
    """
    Handles decoding and resizing of encoded images into RGBA working rasters.
    No color logic here.
    """
    def __init__(self, max_dimension: int | None = None):
        if max_dimension is None:
            max_dimension = int(os.getenv("MAX_WORKING_DIMENSION", "280"))
        self.MAX_DIMENSION = max_dimension

    @staticmethod
    def _open(data: bytes) -> PILImage.Image:
        if not data:
            raise ImageDecodeError("Empty image data")
        try:
            pil_img = PILImage.open(BytesIO(data))
            pil_img.load()  # force full decode so truncated files fail here
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError, PILImage.DecompressionBombError) as err:
            raise ImageDecodeError(f"Unsupported or corrupt image: {err}") from err
        return pil_img

    def read_dimensions(self, data: bytes) -> Tuple[int, int]:
        """Return the native (width, height) of an encoded image."""
        return self._open(data).size

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        """
        Scale so the long axis fits MAX_DIMENSION, keeping aspect ratio.
        Never upscales.
        """
        long_axis = max(width, height)
        if long_axis <= self.MAX_DIMENSION:
            return width, height
        scale = self.MAX_DIMENSION / long_axis
        return max(1, int(round(width * scale))), max(1, int(round(height * scale)))

    def decode(self, data: bytes, path: Union[str, Path] = None) -> Image:
        """
        Decode encoded bytes into a resized RGBA raster (H, W, 4) uint8.

        Raises:
            ImageDecodeError: if the bytes cannot be decoded.
        """
        pil_img = self._open(data)
        native_w, native_h = pil_img.size
        try:
            rgba = np.asarray(pil_img.convert("RGBA"), dtype=np.uint8)
        except (OSError, ValueError) as err:
            raise ImageDecodeError(f"Could not convert image to RGBA: {err}") from err

        new_w, new_h = self.target_size(native_w, native_h)
        if (new_w, new_h) != (native_w, native_h):
            rgba = cv2.resize(rgba, (new_w, new_h), interpolation=cv2.INTER_AREA)
        logger.debug(f"Decoded {native_w}x{native_h} image, working raster {new_w}x{new_h}")

        img = Image(pixels=np.ascontiguousarray(rgba), source_size=(native_w, native_h))
        if path is not None:
            img.path = Path(path)
        return img

    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return path.read_bytes()

    def load(self, path: Union[str, Path]) -> Image:
        return self.decode(self.read_bytes(path), path=path)
