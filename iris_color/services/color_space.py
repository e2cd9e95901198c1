"""
Color space conversions: RGB <-> hex, RGB -> HSL, RGB -> CIE Lab (D65), CIE76 delta E.

The *_array functions operate on (N, 3) RGB arrays (0-255) and are the single
source of truth; the scalar helpers wrap them for one color at a time.
"""
from __future__ import annotations
import math
import re
from typing import Optional, Tuple
import numpy as np

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)

# sRGB -> XYZ (D65)
_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])
_D65_WHITE = np.array([0.95047, 1.0, 1.08883])

_LAB_EPSILON = 0.008856
_LAB_SLOPE = 7.787
_LAB_OFFSET = 16 / 116


def round_half_up(value):
    """Round .5 away from zero for positives (0.5 -> 1, 2.5 -> 3); works on scalars and arrays."""
    if isinstance(value, np.ndarray):
        return np.floor(value + 0.5)
    return math.floor(value + 0.5)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    channels = (int(round_half_up(max(0.0, min(255.0, float(c))))) for c in (r, g, b))
    return "#" + "".join(f"{c:02x}" for c in channels)


def hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    """
    Parse "#rrggbb" / "rrggbb" (any case). Returns None for anything else;
    callers treat None as an invalid color and skip it.
    """
    if not isinstance(hex_color, str):
        return None
    match = _HEX_RE.fullmatch(hex_color)
    if match is None:
        return None
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_lab_array(rgb: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) RGB array (0-255) to an (N, 3) float64 Lab array."""
    rgb_norm = np.asarray(rgb, dtype=np.float64).reshape(-1, 3) / 255.0

    # Gamma decoding
    linear = np.where(rgb_norm <= 0.04045,
                      rgb_norm / 12.92,
                      ((rgb_norm + 0.055) / 1.055) ** 2.4)

    xyz = linear @ _RGB_TO_XYZ.T / _D65_WHITE

    f = np.where(xyz > _LAB_EPSILON,
                 np.cbrt(xyz),
                 _LAB_SLOPE * xyz + _LAB_OFFSET)
    fx, fy, fz = f[:, 0], f[:, 1], f[:, 2]

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b = 200 * (fy - fz)
    return np.column_stack([L, a, b])


def rgb_to_hsl_array(rgb: np.ndarray) -> np.ndarray:
    """
    Convert an (..., 3) RGB array (0-255) to (..., 3) HSL:
    hue in degrees [0, 360), saturation and lightness in [0, 1].
    """
    rgb_norm = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = rgb_norm[..., 0], rgb_norm[..., 1], rgb_norm[..., 2]
    c_max = rgb_norm.max(axis=-1)
    c_min = rgb_norm.min(axis=-1)
    delta = c_max - c_min
    lightness = (c_max + c_min) / 2

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    denom = np.where(lightness > 0.5, 2 - c_max - c_min, c_max + c_min)
    saturation = np.where(chromatic, delta / np.where(chromatic, denom, 1.0), 0.0)

    # Six-sector hue, in units of 60 degrees
    hue = np.where(
        c_max == r, np.mod((g - b) / safe_delta, 6),
        np.where(c_max == g, (b - r) / safe_delta + 2, (r - g) / safe_delta + 4),
    )
    hue = np.where(chromatic, hue * 60.0, 0.0)
    hue = np.where(hue >= 360.0, hue - 360.0, hue)

    return np.stack([hue, saturation, lightness], axis=-1)


def rgb_to_lab(r: float, g: float, b: float) -> Tuple[float, float, float]:
    L, a, b_val = rgb_to_lab_array(np.array([[r, g, b]]))[0]
    return float(L), float(a), float(b_val)


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    h, s, l = rgb_to_hsl_array(np.array([r, g, b]))
    return float(h), float(s), float(l)


def hex_to_lab(hex_color: str) -> Optional[Tuple[float, float, float]]:
    rgb = hex_to_rgb(hex_color)
    return rgb_to_lab(*rgb) if rgb is not None else None


def hex_to_hsl(hex_color: str) -> Optional[Tuple[float, float, float]]:
    rgb = hex_to_rgb(hex_color)
    return rgb_to_hsl(*rgb) if rgb is not None else None


def perceptual_distance(hex_a: str, hex_b: str) -> float:
    """CIE76 delta E between two hex colors; math.inf if either does not parse."""
    lab_a = hex_to_lab(hex_a)
    lab_b = hex_to_lab(hex_b)
    if lab_a is None or lab_b is None:
        return math.inf
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(lab_a, lab_b)))
