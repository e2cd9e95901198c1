"""
Tests for color space conversions and delta E.
"""
import math

import numpy as np
import pytest

from iris_color.services.color_space import (
    rgb_to_hex, hex_to_rgb, rgb_to_lab, rgb_to_hsl, rgb_to_hsl_array,
    perceptual_distance, round_half_up,
)


@pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (1, 128, 254), (70, 130, 180), (16, 15, 14)])
def test_hex_round_trip(rgb):
    assert hex_to_rgb(rgb_to_hex(*rgb)) == rgb


def test_rgb_to_hex_clamps_and_rounds():
    assert rgb_to_hex(-5, 300, 127.5) == "#00ff80"
    assert rgb_to_hex(70, 130, 180) == "#4682b4"


def test_hex_to_rgb_accepts_optional_hash_and_any_case():
    assert hex_to_rgb("#FFaa00") == (255, 170, 0)
    assert hex_to_rgb("ffAA00") == (255, 170, 0)


@pytest.mark.parametrize("bad", ["abc", "#12345g", "#1234567", "", "#aabbcc\n", None, 123])
def test_hex_to_rgb_rejects_other_formats(bad):
    assert hex_to_rgb(bad) is None


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    np.testing.assert_array_equal(round_half_up(np.array([0.5, 1.5, 1.4])), [1, 2, 1])


def test_lab_white_and_black():
    assert np.allclose(rgb_to_lab(255, 255, 255), (100.0, 0.0, 0.0), atol=1e-2)
    assert np.allclose(rgb_to_lab(0, 0, 0), (0.0, 0.0, 0.0), atol=1e-9)


def test_lab_srgb_red():
    L, a, b = rgb_to_lab(255, 0, 0)
    assert np.isclose(L, 53.24, atol=0.1)
    assert np.isclose(a, 80.09, atol=0.1)
    assert np.isclose(b, 67.20, atol=0.1)


@pytest.mark.parametrize("rgb, expected", [
    ((255, 0, 0), (0.0, 1.0, 0.5)),
    ((0, 255, 0), (120.0, 1.0, 0.5)),
    ((0, 0, 255), (240.0, 1.0, 0.5)),
    ((255, 255, 0), (60.0, 1.0, 0.5)),
])
def test_hsl_primaries(rgb, expected):
    assert np.allclose(rgb_to_hsl(*rgb), expected)


def test_hsl_gray_has_zero_saturation():
    h, s, l = rgb_to_hsl(128, 128, 128)
    assert h == 0.0 and s == 0.0
    assert np.isclose(l, 128 / 255)


def test_hsl_hue_wraps_below_360():
    h, _, _ = rgb_to_hsl(255, 0, 128)
    assert 0 <= h < 360
    assert np.isclose(h, 360 - 60 * 128 / 255)


def test_hsl_array_matches_scalar():
    pixels = np.array([[[60, 110, 200], [99, 78, 52]], [[10, 10, 10], [200, 40, 160]]], dtype=np.uint8)
    hsl = rgb_to_hsl_array(pixels)
    assert hsl.shape == (2, 2, 3)
    assert np.allclose(hsl[0, 1], rgb_to_hsl(99, 78, 52))


def test_perceptual_distance_identity_and_symmetry():
    assert perceptual_distance("#4682b4", "#4682b4") == 0
    assert perceptual_distance("#4682b4", "#634e34") == perceptual_distance("#634e34", "#4682b4")
    assert np.isclose(perceptual_distance("#ffffff", "#000000"), 100.0, atol=1e-2)


def test_perceptual_distance_is_infinite_for_invalid_color():
    assert math.isinf(perceptual_distance("#4682b4", "not-a-color"))
    assert math.isinf(perceptual_distance(None, "#4682b4"))
