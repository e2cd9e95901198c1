# pipeline/eye_color_analyzer.py
from typing import List
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.eye_color import (
    AnalysisReport, DominantColor, GeneralColor, NamedShade, ShadeDetail,
    GRAY, NEUTRAL_GRAY_HEX,
)
from ..services.image_service import ImageService
from ..services.region_sampler_service import RegionSamplerService
from ..services.shade_cluster_service import ShadeClusterService
from ..services.eye_color_classifier_service import EyeColorClassifierService
from ..services.reference_matcher_service import ReferenceMatcherService

# env‑vars
load_dotenv()
NUM_DOMINANT_COLORS = int(os.getenv("NUM_DOMINANT_COLORS", "10"))

# Reference matches per entry
SHADE_MATCH_COUNT = 2
GENERAL_MATCH_COUNT = 5

logger = logging.getLogger(__name__)


def build_named_shade_breakdown(
    dominant_colors: List[DominantColor],
    reference_matcher: ReferenceMatcherService,
) -> List[NamedShade]:
    """
    Merge dominant colors that share the same nearest reference name.

    Percentages are summed per name; the representative hex is the last color
    merged into the entry. Colors with no reference name are keyed by their hex.
    Zero-percent entries are dropped; result is sorted by percentage, descending.
    """
    by_name: dict[str, NamedShade] = {}
    for color in dominant_colors:
        name = reference_matcher.best_name(color.hex)
        key = name or color.hex
        if key not in by_name:
            by_name[key] = NamedShade(name=key, percentage=0, hex=color.hex)
        entry = by_name[key]
        entry.percentage += color.percentage
        entry.hex = color.hex

    shades = [shade for shade in by_name.values() if shade.percentage > 0]
    return sorted(shades, key=lambda shade: shade.percentage, reverse=True)


def analyze_pixels(
    pixels: np.ndarray,
    *,
    region_sampler: RegionSamplerService = RegionSamplerService(),
    shade_cluster_service: ShadeClusterService = ShadeClusterService(),
    classifier: EyeColorClassifierService = EyeColorClassifierService(),
    reference_matcher: ReferenceMatcherService = ReferenceMatcherService(),
    num_colors: int = NUM_DOMINANT_COLORS,
) -> AnalysisReport:
    """
    Run the color analysis on an RGBA working raster:
        • sample the iris annulus (center-rectangle fallback)
        • cluster samples into at most `num_colors` dominant colors
        • aggregate dominant colors into named shades
        • pick the general eye color (hazel override, else most saturated)
        • attach nearest reference colors per shade and for the general color
    Always returns a well-formed report; an image with no usable pixels is Gray.
    """
    sample = region_sampler.sample_iris(pixels)

    if sample.is_degenerate:
        dominant_colors = [DominantColor(hex=NEUTRAL_GRAY_HEX, percentage=100)]
    else:
        dominant_colors = shade_cluster_service.cluster(sample.pixels, max_colors=num_colors)

    shade_breakdown = build_named_shade_breakdown(dominant_colors, reference_matcher)

    if sample.is_degenerate:
        general_color = GeneralColor(name=GRAY.name, hex=NEUTRAL_GRAY_HEX, category=GRAY)
    else:
        general_color = classifier.choose_general_color(dominant_colors, shade_breakdown)

    breakdown = [
        ShadeDetail(
            hex=color.hex,
            percentage=color.percentage,
            shade_name=reference_matcher.best_name(color.hex),
            reference_matches=reference_matcher.find_nearest(color.hex, SHADE_MATCH_COUNT),
        )
        for color in dominant_colors
    ]

    general_matches = reference_matcher.find_nearest(general_color.category.hex, GENERAL_MATCH_COUNT)

    logger.info(f"General color {general_color.name} ({general_color.hex}) from "
                f"{len(sample)} {sample.method.value} samples, {len(dominant_colors)} shades")

    return AnalysisReport(
        general_color=general_color,
        shade_breakdown=shade_breakdown,
        breakdown=breakdown,
        reference_matches=general_matches,
        sampling_method=sample.method.value,
    )


def analyze_eye_color(
    image_bytes: bytes,
    *,
    image_service: ImageService = ImageService(),
    **services,
) -> AnalysisReport:
    """
    Decode an encoded eye photo (JPEG/PNG/WebP...) and analyze its iris color.

    Raises:
        ImageDecodeError: if the bytes are not a decodable image. No partial report is produced.
    """
    img = image_service.decode(image_bytes)
    logger.debug(f"Analyzing {img.width}x{img.height} raster (native {img.source_size})")
    return analyze_pixels(img.pixels, **services)
