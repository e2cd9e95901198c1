from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from iris_color.repositories.image_repository import ImageRepository, ImageDecodeError
from iris_color.services.image_service import ImageService


def encode(pil_img, fmt="PNG"):
    buffer = BytesIO()
    pil_img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def repository():
    return ImageRepository(max_dimension=280)


@pytest.mark.parametrize("size, expected", [
    ((560, 280), (280, 140)),
    ((300, 600), (140, 280)),
    ((200, 120), (200, 120)),   # never upscaled
    ((280, 280), (280, 280)),
])
def test_target_size_bounds_long_axis(repository, size, expected):
    assert repository.target_size(*size) == expected


def test_decode_rgb_png_adds_opaque_alpha(repository):
    data = encode(PILImage.new("RGB", (40, 30), (60, 110, 200)))
    img = repository.decode(data)
    assert img.pixels.shape == (30, 40, 4)
    assert img.pixels.dtype == np.uint8
    assert (img.pixels[..., 3] == 255).all()
    assert (img.pixels[..., :3] == (60, 110, 200)).all()
    assert img.source_size == (40, 30)


def test_decode_resizes_large_images(repository):
    data = encode(PILImage.new("RGBA", (800, 400), (60, 110, 200, 255)))
    img = repository.decode(data)
    assert (img.width, img.height) == (280, 140)
    assert img.source_size == (800, 400)


def test_decode_keeps_transparency(repository):
    data = encode(PILImage.new("RGBA", (20, 20), (0, 0, 0, 0)))
    assert (repository.decode(data).pixels[..., 3] == 0).all()


def test_read_dimensions(repository):
    data = encode(PILImage.new("RGB", (123, 45)), fmt="JPEG")
    assert repository.read_dimensions(data) == (123, 45)


@pytest.mark.parametrize("data", [b"", b"definitely not an image", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16])
def test_decode_rejects_invalid_bytes(repository, data):
    with pytest.raises(ImageDecodeError):
        repository.decode(data)


def test_load_from_disk(tmp_path):
    path = tmp_path / "eye.png"
    PILImage.new("RGB", (10, 12), (99, 78, 52)).save(path)
    img = ImageService(ImageRepository(max_dimension=280)).load(path)
    assert img.path == path
    assert img.pixels.shape == (12, 10, 4)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ImageRepository().load(tmp_path / "missing.jpg")
