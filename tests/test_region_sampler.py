import numpy as np
import pytest

from iris_color.models.iris_sample import SamplingMethod
from iris_color.services.region_sampler_service import RegionSamplerService

BLUE = (60, 110, 200)
SKIN = (150, 120, 90)


@pytest.fixture
def sampler():
    return RegionSamplerService()


def _radial_dark_disc(width, height, center, radius, background=SKIN):
    """Background raster with a gray disc whose darkness peaks at `center`."""
    raster = np.zeros((height, width, 4), dtype=np.uint8)
    raster[..., :3] = background
    raster[..., 3] = 255
    ys, xs = np.mgrid[0:height, 0:width]
    dist = np.sqrt((xs - center[0]) ** 2 + (ys - center[1]) ** 2)
    inside = dist <= radius
    value = (10 + 100 * dist / radius).astype(np.uint8)
    for c in range(3):
        raster[..., c][inside] = value[inside]
    return raster


def test_pupil_center_found_near_offset_dark_disc(sampler):
    true_center = (120, 90)
    raster = _radial_dark_disc(200, 200, true_center, radius=40)
    x, y = sampler.find_pupil_center(raster)
    assert abs(x - true_center[0]) <= RegionSamplerService.GRID_STEP
    assert abs(y - true_center[1]) <= RegionSamplerService.GRID_STEP


def test_pupil_center_defaults_to_image_center_when_nothing_is_darker_than_white(sampler, raster_factory):
    raster = raster_factory(200, 100, (255, 255, 255, 255))
    assert sampler.find_pupil_center(raster) == (100.0, 50.0)


def test_annulus_keeps_only_ring_pixels(sampler):
    size = 100
    raster = np.zeros((size, size, 4), dtype=np.uint8)
    raster[..., 3] = 255
    ys, xs = np.mgrid[0:size, 0:size]
    dist = np.sqrt((xs - 50) ** 2 + (ys - 50) ** 2)
    raster[..., :3] = (255, 255, 255)              # sclera
    raster[dist < 42, :3] = BLUE                   # iris
    raster[dist < 8, :3] = (5, 5, 5)               # pupil

    samples = sampler.sample_annulus(raster, (50.0, 50.0))
    assert len(samples) > 1000
    assert (samples == BLUE).all()


def test_annulus_skips_transparent_pixels(sampler, raster_factory):
    raster = raster_factory(80, 80, BLUE + (0,))
    assert len(sampler.sample_annulus(raster, (40.0, 40.0))) == 0


def test_uniform_iris_uses_annulus(sampler, raster_factory):
    sample = sampler.sample_iris(raster_factory(120, 120, BLUE + (255,)))
    assert sample.method is SamplingMethod.ANNULUS
    assert len(sample) >= 20
    assert (sample.pixels == BLUE).all()


def test_falls_back_to_center_rectangle(sampler, raster_factory):
    # White frame with a 6x6 blue patch: the patch sits inside the pupil radius,
    # so the ring only sees white pixels.
    raster = raster_factory(100, 100, (255, 255, 255, 255))
    raster[47:53, 47:53, :3] = BLUE

    sample = sampler.sample_iris(raster)
    assert sample.method is SamplingMethod.CENTER_FALLBACK
    # stride-2 grid over [25, 75) hits 47, 49, 51 on each axis
    assert len(sample) == 9
    assert (sample.pixels == BLUE).all()


def test_fully_transparent_image_is_degenerate(sampler, raster_factory):
    sample = sampler.sample_iris(raster_factory(64, 48, (0, 0, 0, 0)))
    assert sample.method is SamplingMethod.NONE
    assert sample.is_degenerate
    assert sample.pixels.shape == (0, 3)


def test_three_channel_raster_is_treated_as_opaque(sampler):
    raster = np.zeros((60, 60, 3), dtype=np.uint8)
    raster[...] = BLUE
    assert sampler.sample_iris(raster).method is SamplingMethod.ANNULUS
