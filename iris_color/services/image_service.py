from pathlib import Path
from ..models.image import Image
from ..repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers.  No color logic."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def decode(self, data: bytes) -> Image:
        """
        Decode encoded image bytes into a resized RGBA working raster.
        Raises ImageDecodeError for corrupt or unsupported input.
        """
        return self.image_repository.decode(data)

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

