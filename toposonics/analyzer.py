"""Image analysis entry points.

Each function runs the feature extractors needed by one mapping mode and
packages the profiles into an ``ImageAnalysisResult``. Profiles produced by
a single call always share one sample count.
"""

import logging
import time

from toposonics.image_processing import (
    PixelBuffer,
    brightness_profile,
    depth_profile,
    detect_ridges,
    downsample_profile,
    horizon_contour,
    smooth_profile,
    texture_profile,
)
from toposonics.models import AnalysisParams, ImageAnalysisResult

logger = logging.getLogger(__name__)


def _metadata(params: AnalysisParams, height: int, method: str) -> dict:
    row_index = height // 2 if params.row_index is None else params.row_index
    return {
        "sampling_method": method,
        "row_index": row_index,
        "timestamp": time.time(),
    }


def analyze_for_linear_landscape(
    pixels: PixelBuffer,
    width: int,
    height: int,
    params: AnalysisParams | None = None,
) -> ImageAnalysisResult:
    """Analyze an image for LINEAR_LANDSCAPE mapping.

    Extracts a horizontal brightness profile (one row, or a band of rows
    around it), downsamples it to ``params.max_samples`` and optionally derives
    depth and ridge profiles from it.

    Args:
        pixels: Flat RGBA pixel buffer.
        width: Image width in pixels.
        height: Image height in pixels.
        params: Analysis parameters; defaults to ``AnalysisParams()``.

    Returns:
        ImageAnalysisResult with brightness and the requested derived profiles.
    """
    params = params or AnalysisParams()

    rows = params.rows_to_average if params.average_rows else 1
    brightness = brightness_profile(pixels, width, height, params.row_index, rows)
    brightness = downsample_profile(brightness, params.max_samples)

    depth = (
        depth_profile(brightness, params.depth_window) if params.include_depth else None
    )
    ridges = detect_ridges(brightness) if params.include_ridges else None

    logger.debug(
        "Linear landscape analysis: %dx%d image -> %d samples",
        width,
        height,
        len(brightness),
    )
    return ImageAnalysisResult(
        width=width,
        height=height,
        brightness_profile=brightness,
        depth_profile=depth,
        ridge_strength=ridges,
        metadata=_metadata(
            params, height, "averaged" if params.average_rows else "single-row"
        ),
    )


def analyze_for_depth_ridge(
    pixels: PixelBuffer,
    width: int,
    height: int,
    params: AnalysisParams | None = None,
) -> ImageAnalysisResult:
    """Analyze an image for DEPTH_RIDGE mapping.

    Always averages a band of rows and computes both depth and ridges; ridge
    strength is optionally smoothed with ``params.ridge_smoothing_window``.
    """
    params = (params or AnalysisParams()).model_copy(
        update={"average_rows": True, "include_depth": True, "include_ridges": True}
    )
    result = analyze_for_linear_landscape(pixels, width, height, params)

    if params.ridge_smoothing_window and result.ridge_strength:
        smoothed = smooth_profile(result.ridge_strength, params.ridge_smoothing_window)
        result = result.model_copy(update={"ridge_strength": smoothed})
    return result


def analyze_for_multi_voice(
    pixels: PixelBuffer,
    width: int,
    height: int,
    params: AnalysisParams | None = None,
) -> ImageAnalysisResult:
    """Analyze an image for MULTI_VOICE composition.

    Computes all five profiles at full image width and then downsamples each
    to ``params.max_samples`` so they share one sample count.
    """
    params = params or AnalysisParams()
    cap = params.max_samples

    rows = params.rows_to_average if params.average_rows else 1
    brightness_full = brightness_profile(pixels, width, height, params.row_index, rows)

    depth = depth_profile(brightness_full, params.depth_window)
    ridges = detect_ridges(brightness_full)
    if params.ridge_smoothing_window:
        ridges = smooth_profile(ridges, params.ridge_smoothing_window)
    horizon = horizon_contour(
        pixels,
        width,
        height,
        smooth_window=params.horizon_smooth_window,
        brightness_threshold=params.horizon_brightness_threshold,
        gradient_threshold=params.horizon_gradient_threshold,
    )
    texture = texture_profile(
        pixels,
        width,
        height,
        window_size=params.texture_window,
        row_samples=params.texture_row_samples,
    )

    result = ImageAnalysisResult(
        width=width,
        height=height,
        brightness_profile=downsample_profile(brightness_full, cap),
        depth_profile=downsample_profile(depth, cap),
        ridge_strength=downsample_profile(ridges, cap),
        horizon_profile=downsample_profile(horizon, cap),
        texture_profile=downsample_profile(texture, cap),
        metadata=_metadata(
            params, height, "averaged" if params.average_rows else "single-row"
        ),
    )
    logger.debug(
        "Multi-voice analysis: %dx%d image -> %d samples per profile",
        width,
        height,
        len(result.brightness_profile),
    )
    return result


def analyze_quick(pixels: PixelBuffer, width: int, height: int) -> ImageAnalysisResult:
    """Lightweight analysis for previews: 32 samples of a single row."""
    params = AnalysisParams(
        max_samples=32, include_depth=False, include_ridges=False, average_rows=False
    )
    return analyze_for_linear_landscape(pixels, width, height, params)
