from __future__ import annotations
from typing import Tuple
import math
import logging
import numpy as np
from ..models.iris_sample import IrisSample, SamplingMethod
from .color_space import rgb_to_hsl_array, round_half_up

logger = logging.getLogger(__name__)


class RegionSamplerService:
    """
    Approximate-geometry iris sampler for close-up eye photos.

    Assumes the eye is roughly centred and front-lit, so the pupil is the darkest
    compact region near the image centre. No edge or ellipse fitting: the iris is
    taken to be a ring around that dark point, sized from the image dimensions.
    When the ring yields too few usable pixels, the central rectangle is sampled
    instead, and if that is empty too the sample set is empty (degenerate image).
    """
    PUPIL_SEARCH_RATIO = 0.35   # search radius / min(width, height)
    GRID_STEP = 2               # coarse stride, pixels per axis

    IRIS_RADIUS_RATIO = 0.45    # max iris radius / min(width, height)
    INNER_RADIUS_RATIO = 0.22   # of max radius; excludes the pupil
    OUTER_RADIUS_RATIO = 0.85   # of max radius; excludes sclera and skin

    MIN_ALPHA = 200
    ANNULUS_LIGHTNESS = (0.08, 0.88)    # exclusive bounds
    ANNULUS_MIN_SATURATION = 0.04
    CENTER_LIGHTNESS = (0.06, 0.92)     # exclusive bounds
    CENTER_MIN_SATURATION = 0.05

    def __init__(self, min_annulus_samples: int = 20):
        self.min_annulus_samples = min_annulus_samples

    # ---------- private helpers ----------
    @staticmethod
    def _rgb(pixels: np.ndarray) -> np.ndarray:
        return pixels[..., :3]

    @staticmethod
    def _alpha(pixels: np.ndarray) -> np.ndarray:
        if pixels.shape[-1] < 4:
            return np.full(pixels.shape[:-1], 255, dtype=np.uint8)
        return pixels[..., 3]

    def _filter_mask(self, pixels: np.ndarray, lightness_bounds, min_saturation) -> np.ndarray:
        hsl = rgb_to_hsl_array(self._rgb(pixels))
        saturation, lightness = hsl[..., 1], hsl[..., 2]
        low, high = lightness_bounds
        return (
            (self._alpha(pixels) >= self.MIN_ALPHA)
            & (lightness > low) & (lightness < high)
            & (saturation >= min_saturation)
        )

    # ---------- public API ----------
    def find_pupil_center(self, pixels: np.ndarray) -> Tuple[float, float]:
        """
        Darkest grid point (HSL lightness) inside a disc around the image centre.

        Args:
            pixels (np.ndarray): (H, W, 4) RGBA raster.

        Returns:
            (x, y) of the pupil estimate. Ties go to the first point in row-major
            scan order; the image centre is returned if nothing is darker than white.
        """
        height, width = pixels.shape[:2]
        cx, cy = width / 2, height / 2
        radius = min(width, height) * self.PUPIL_SEARCH_RATIO

        n_steps = int(math.floor(2 * radius / self.GRID_STEP)) + 1
        offsets = -radius + self.GRID_STEP * np.arange(n_steps)
        dy, dx = np.meshgrid(offsets, offsets, indexing="ij")  # y outer, x inner
        dy, dx = dy.ravel(), dx.ravel()

        xs = round_half_up(cx + dx).astype(np.int64)
        ys = round_half_up(cy + dy).astype(np.int64)
        valid = (
            (dx * dx + dy * dy <= radius * radius)
            & (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
        )
        if not valid.any():
            return cx, cy

        xs, ys = xs[valid], ys[valid]
        lightness = rgb_to_hsl_array(self._rgb(pixels)[ys, xs])[:, 2]
        best = int(np.argmin(lightness))  # first occurrence on ties
        if lightness[best] >= 1.0:
            return cx, cy
        logger.debug(f"Pupil estimate at ({xs[best]}, {ys[best]}), lightness {lightness[best]:.3f}")
        return float(xs[best]), float(ys[best])

    def sample_annulus(self, pixels: np.ndarray, center: Tuple[float, float]) -> np.ndarray:
        """
        Every pixel in the ring around `center` that passes the iris filters.
        Returns an (N, 3) uint8 RGB array in row-major order.
        """
        height, width = pixels.shape[:2]
        cx, cy = center
        max_radius = min(width, height) * self.IRIS_RADIUS_RATIO
        inner_radius = max_radius * self.INNER_RADIUS_RATIO
        outer_radius = max_radius * self.OUTER_RADIUS_RATIO

        ys, xs = np.mgrid[0:height, 0:width]
        distance = np.sqrt((xs - cx) ** 2 + (ys - cy) ** 2)
        in_ring = (distance >= inner_radius) & (distance <= outer_radius)

        mask = in_ring & self._filter_mask(pixels, self.ANNULUS_LIGHTNESS, self.ANNULUS_MIN_SATURATION)
        return self._rgb(pixels)[mask].astype(np.uint8)

    def sample_center(self, pixels: np.ndarray) -> np.ndarray:
        """
        Coarse-stride sample of the central 50% x 50% rectangle, looser filters.
        Returns an (N, 3) uint8 RGB array in row-major order.
        """
        height, width = pixels.shape[:2]
        x_min, x_max = int(math.floor(width * 0.25)), int(math.floor(width * 0.75))
        y_min, y_max = int(math.floor(height * 0.25)), int(math.floor(height * 0.75))
        region = pixels[y_min:y_max:self.GRID_STEP, x_min:x_max:self.GRID_STEP]

        mask = self._filter_mask(region, self.CENTER_LIGHTNESS, self.CENTER_MIN_SATURATION)
        return self._rgb(region)[mask].astype(np.uint8)

    def sample_iris(self, pixels: np.ndarray) -> IrisSample:
        """
        Annulus sampling with a single center-rectangle fallback.
        An empty result is reported as SamplingMethod.NONE, never raised.
        """
        center = self.find_pupil_center(pixels)
        samples = self.sample_annulus(pixels, center)
        logger.debug(f"Annulus sampling kept {len(samples)} pixels")
        if len(samples) >= self.min_annulus_samples:
            return IrisSample(pixels=samples, method=SamplingMethod.ANNULUS)

        logger.info(f"Only {len(samples)} annulus pixels usable, falling back to center rectangle")
        samples = self.sample_center(pixels)
        if len(samples) == 0:
            logger.warning("No usable pixels in annulus or center rectangle, image is degenerate")
            return IrisSample(pixels=np.empty((0, 3), dtype=np.uint8), method=SamplingMethod.NONE)
        return IrisSample(pixels=samples, method=SamplingMethod.CENTER_FALLBACK)
