import numpy as np
import pytest

from iris_color.models.reference_color import ReferenceColor, ReferencePalette
from iris_color.services.reference_matcher_service import ReferenceMatcherService


@pytest.fixture
def small_palette():
    return ReferencePalette(colors=(
        ReferenceColor("Steel-Blue", "#4682b4"),
        ReferenceColor("Chocolate-Brown", "#4e2e1e"),
        ReferenceColor("Sage-Green", "#8a9a6b"),
        ReferenceColor("Slate-Gray", "#708090"),
    ))


@pytest.fixture
def matcher(small_palette):
    return ReferenceMatcherService(palette=small_palette)


def make_raster(width, height, rgba=(0, 0, 0, 255)):
    """Uniform (H, W, 4) uint8 RGBA raster."""
    raster = np.zeros((height, width, 4), dtype=np.uint8)
    raster[...] = rgba
    return raster


@pytest.fixture
def raster_factory():
    return make_raster
