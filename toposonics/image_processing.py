"""Feature extraction from flat RGBA pixel buffers.

This module computes the 1-D profiles that drive note mapping: brightness,
a contrast-based depth heuristic, ridge/edge strength, the horizon contour
and local texture. Every profile is indexed by image column. Pixel buffers
are row-major with 4 bytes per pixel; the alpha channel is ignored.

Empty images (zero width or height) produce empty profiles, and degenerate
statistics fall back to documented neutral values instead of NaN.
"""

import math
from collections.abc import Sequence

import cv2
import numpy as np

from toposonics.errors import MalformedAnalysisInput

PixelBuffer = bytes | bytearray | memoryview | np.ndarray | Sequence[int]

# ITU-R BT.709 weights for perceived brightness
BRIGHTNESS_WEIGHTS = (0.2126, 0.7152, 0.0722)

RIDGE_PEAK_BONUS = 0.3


def _check_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise MalformedAnalysisInput(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise MalformedAnalysisInput(f"{name} must be non-negative, got {value}")


def to_rgba_array(pixels: PixelBuffer, width: int, height: int) -> np.ndarray | None:
    """Interpret a flat RGBA buffer as a float array of shape (height, width, 4).

    Args:
        pixels: Flat RGBA data as bytes, a NumPy array or a sequence of ints.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Float64 array of shape (height, width, 4), or None if the image is empty.

    Raises:
        MalformedAnalysisInput: If the dimensions are negative or not integers,
            or the buffer holds fewer than ``width * height * 4`` values.
    """
    _check_dimensions(width, height)
    if width == 0 or height == 0:
        return None

    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = np.asarray(pixels).ravel()

    expected = width * height * 4
    if flat.size < expected:
        raise MalformedAnalysisInput(
            f"Pixel buffer holds {flat.size} values, expected {expected}"
        )
    return flat[:expected].astype(np.float64).reshape(height, width, 4)


def _brightness(rgba: np.ndarray) -> np.ndarray:
    r, g, b = BRIGHTNESS_WEIGHTS
    return r * rgba[..., 0] + g * rgba[..., 1] + b * rgba[..., 2]


def _luma(rgba: np.ndarray) -> np.ndarray:
    # OpenCV's RGBA->GRAY uses the 0.299/0.587/0.114 luma weights
    return cv2.cvtColor(rgba.astype(np.float32), cv2.COLOR_RGBA2GRAY)


def _window_view(values: np.ndarray, window_size: int) -> np.ndarray:
    """Centered windows of ``2 * (window_size // 2) + 1`` values, NaN-padded.

    Windows are truncated at the ends of the profile, so the NaN padding must
    be ignored with the ``np.nan*`` reductions.
    """
    half = window_size // 2
    padded = np.pad(values.astype(np.float64), half, constant_values=np.nan)
    return np.lib.stride_tricks.sliding_window_view(padded, 2 * half + 1)


def pixel_brightness(r: float, g: float, b: float) -> float:
    """Compute the perceived brightness (0-255) of one pixel."""
    wr, wg, wb = BRIGHTNESS_WEIGHTS
    return wr * r + wg * g + wb * b


def brightness_profile_from_row(
    pixels: PixelBuffer, width: int, height: int, row_index: int
) -> list[float]:
    """Extract per-column brightness from a single row.

    Args:
        pixels: Flat RGBA pixel buffer.
        width: Image width in pixels.
        height: Image height in pixels.
        row_index: Row to sample (0 = top); clamped into the image.

    Returns:
        One brightness value (0-255) per column, empty for an empty image.
    """
    rgba = to_rgba_array(pixels, width, height)
    if rgba is None:
        return []
    row = min(max(row_index, 0), height - 1)
    return _brightness(rgba[row]).tolist()


def averaged_brightness_profile(
    pixels: PixelBuffer, width: int, height: int, start_row: int, end_row: int
) -> list[float]:
    """Average per-column brightness over rows ``[start_row, end_row)``.

    Returns:
        One averaged brightness value per column; empty if the image or the
        row range is empty.
    """
    rgba = to_rgba_array(pixels, width, height)
    if rgba is None:
        return []
    start = max(start_row, 0)
    end = min(end_row, height)
    if start >= end:
        return []
    return _brightness(rgba[start:end]).mean(axis=0).tolist()


def brightness_profile(
    pixels: PixelBuffer,
    width: int,
    height: int,
    row_index: int | None = None,
    rows_to_average: int = 1,
) -> list[float]:
    """Compute the brightness profile along one row or a band of rows.

    Args:
        pixels: Flat RGBA pixel buffer.
        width: Image width in pixels.
        height: Image height in pixels.
        row_index: Center row of the sample; defaults to ``height // 2``.
        rows_to_average: Number of rows straddling ``row_index`` to average.
            Use an odd number for a symmetric band; 1 samples a single row.

    Returns:
        Brightness values (0-255), one per column.
    """
    _check_dimensions(width, height)
    if width == 0 or height == 0:
        return []

    row = height // 2 if row_index is None else min(max(row_index, 0), height - 1)
    if rows_to_average <= 1:
        return brightness_profile_from_row(pixels, width, height, row)

    start = max(0, row - rows_to_average // 2)
    end = min(height, row + math.ceil(rows_to_average / 2))
    return averaged_brightness_profile(pixels, width, height, start, end)


def normalize_profile(profile: Sequence[float]) -> list[float]:
    """Rescale a profile to [0, 1] by its min and max; flat profiles become 0.5."""
    if len(profile) == 0:
        return []
    values = np.asarray(profile, dtype=np.float64)
    low, high = values.min(), values.max()
    if high == low:
        return [0.5] * len(values)
    return ((values - low) / (high - low)).tolist()


def downsample_profile(profile: Sequence[float], target_samples: int) -> list[float]:
    """Shrink a profile to ``target_samples`` values by averaging contiguous bins.

    Bin ``i`` covers indices ``floor(i * n / target)`` up to
    ``floor((i + 1) * n / target)``. Profiles that are already short enough are
    returned unchanged (as a new list).
    """
    if len(profile) <= target_samples:
        return list(profile)
    if target_samples <= 0:
        return []

    values = np.asarray(profile, dtype=np.float64)
    bin_size = len(values) / target_samples
    edges = np.floor(np.arange(target_samples + 1) * bin_size).astype(int)
    sums = np.add.reduceat(values, edges[:-1])
    return (sums / np.diff(edges)).tolist()


def depth_profile(brightness: Sequence[float], window_size: int = 5) -> list[float]:
    """Estimate relative depth from local contrast.

    Higher local contrast is read as closer or more prominent. This is a
    heuristic stand-in for real depth sensing.

    Args:
        brightness: Brightness values along a horizontal line.
        window_size: Size of the centered contrast window (default 5).

    Returns:
        Depth estimates in [0, 1] (1 = near). A profile with no contrast
        anywhere returns 0.5 for every element.
    """
    if len(brightness) == 0:
        return []
    windows = _window_view(np.asarray(brightness), window_size)
    contrast = np.nanmax(windows, axis=1) - np.nanmin(windows, axis=1)

    peak = contrast.max()
    if peak == 0:
        return [0.5] * len(contrast)
    return (contrast / peak).tolist()


def detect_ridges(brightness: Sequence[float], use_sobel: bool = False) -> list[float]:
    """Detect ridges and edges in a brightness profile.

    Each position scores its central gradient ``|next - prev| / 2`` (missing
    neighbours at the ends are replaced by the element itself) plus a fixed
    bonus for strict local maxima, clamped to 1 and normalized by the
    profile maximum.

    Args:
        brightness: Brightness values.
        use_sobel: Use a five-point, Sobel-style weighted gradient
            ``|(next - prev) + (next2 - prev2) / 4| / 3`` instead of the
            plain central difference.

    Returns:
        Ridge strength in [0, 1] per position; all zeros for a flat profile.
    """
    if len(brightness) == 0:
        return []

    values = np.asarray(brightness, dtype=np.float64)
    prev = np.concatenate((values[:1], values[:-1]))
    nxt = np.concatenate((values[1:], values[-1:]))

    if use_sobel:
        prev2 = np.concatenate((prev[:2], values[:-2]))[: len(values)]
        next2 = np.concatenate((values[2:], nxt[-2:]))[-len(values):]
        gradient = np.abs((nxt - prev) + (next2 - prev2) / 4) / 3
    else:
        gradient = np.abs(nxt - prev) / 2

    is_peak = (values > prev) & (values > nxt)
    ridges = np.minimum(1.0, gradient + np.where(is_peak, RIDGE_PEAK_BONUS, 0.0))

    peak = ridges.max()
    if peak == 0:
        return [0.0] * len(ridges)
    return (ridges / peak).tolist()


def smooth_profile(profile: Sequence[float], window_size: int = 3) -> list[float]:
    """Apply a centered moving average, truncating the window at the ends."""
    if len(profile) == 0:
        return []
    windows = _window_view(np.asarray(profile), window_size)
    return np.nanmean(windows, axis=1).tolist()


def smooth_horizon_profile(profile: Sequence[float], window_size: int = 5) -> list[float]:
    """Smooth a raw horizon contour to remove column-to-column noise."""
    return smooth_profile(profile, window_size)


def horizon_profile(
    pixels: PixelBuffer,
    width: int,
    height: int,
    brightness_threshold: float = 30.0,
    gradient_threshold: float = 20.0,
) -> list[float]:
    """Find the horizon height of every column by scanning from the bottom up.

    The horizon of a column is the lowest row whose luma exceeds
    ``brightness_threshold`` and differs from the row above it by more than
    ``gradient_threshold``.

    Returns:
        Normalized heights ``1 - y / (height - 1)`` (0 = bottom, 1 = top) per
        column. Columns without such an edge report 0.
    """
    rgba = to_rgba_array(pixels, width, height)
    if rgba is None:
        return []
    if height == 1:
        return [0.0] * width

    luma = _luma(rgba)
    current, above = luma[1:], luma[:-1]
    is_edge = (current > brightness_threshold) & (
        np.abs(current - above) > gradient_threshold
    )

    # Row y of the original image is row y - 1 of is_edge; flip to scan bottom-up
    from_bottom = is_edge[::-1]
    found = from_bottom.any(axis=0)
    horizon_y = np.where(found, (height - 1) - from_bottom.argmax(axis=0), height - 1)
    return (1.0 - horizon_y / (height - 1)).tolist()


def horizon_contour(
    pixels: PixelBuffer,
    width: int,
    height: int,
    smooth_window: int = 7,
    brightness_threshold: float = 30.0,
    gradient_threshold: float = 20.0,
) -> list[float]:
    """Detect and smooth the horizon contour in one step."""
    raw = horizon_profile(
        pixels, width, height, brightness_threshold, gradient_threshold
    )
    return smooth_horizon_profile(raw, smooth_window)


def texture_from_brightness(
    brightness: Sequence[float], window_size: int = 8
) -> list[float]:
    """Measure local texture as windowed standard deviation divided by 255."""
    if len(brightness) == 0:
        return []
    windows = _window_view(np.asarray(brightness), window_size)
    return (np.nanstd(windows, axis=1) / 255.0).tolist()


def texture_profile(
    pixels: PixelBuffer,
    width: int,
    height: int,
    window_size: int = 8,
    row_samples: int = 5,
) -> list[float]:
    """Average per-row texture over evenly spaced rows.

    Rows ``step * i`` for ``i = 1..row_samples`` with
    ``step = height // (row_samples + 1)`` are sampled, which keeps clear of
    the extreme top and bottom rows.

    Returns:
        Texture values in [0, 1] per column.
    """
    rgba = to_rgba_array(pixels, width, height)
    if rgba is None or row_samples <= 0:
        return []

    step = height // (row_samples + 1)
    rows = [step * i for i in range(1, row_samples + 1)]
    per_row = [
        texture_from_brightness(_brightness(rgba[row]), window_size) for row in rows
    ]
    return np.mean(np.asarray(per_row), axis=0).tolist()


def segment_profile(profile: Sequence[float], segments: int = 8) -> list[float]:
    """Average a profile over ``segments`` contiguous regions.

    Regions that would be empty (more segments than samples) are skipped.
    """
    if len(profile) == 0 or segments <= 0:
        return []
    values = np.asarray(profile, dtype=np.float64)
    size = len(values) / segments
    result: list[float] = []
    for i in range(segments):
        segment = values[math.floor(i * size) : math.floor((i + 1) * size)]
        if segment.size:
            result.append(float(segment.mean()))
    return result


def classify_texture(value: float) -> str:
    """Bucket a texture value into "low" (< 0.3), "medium" (< 0.7) or "high"."""
    if value < 0.3:
        return "low"
    if value < 0.7:
        return "medium"
    return "high"


def sobel_edge_magnitudes(pixels: PixelBuffer, width: int, height: int) -> np.ndarray:
    """Run 3x3 Sobel edge detection over the whole image.

    Borders are handled by replicating edge pixels.

    Returns:
        Array of shape (height, width) with gradient magnitudes normalized to
        [0, 1]; all zeros for a uniform image, empty for an empty image.
    """
    rgba = to_rgba_array(pixels, width, height)
    if rgba is None:
        return np.zeros((height, width), dtype=np.float64)

    gray = _luma(rgba)
    gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3, borderType=cv2.BORDER_REPLICATE)
    gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3, borderType=cv2.BORDER_REPLICATE)
    magnitude = cv2.magnitude(gx, gy).astype(np.float64)

    peak = magnitude.max()
    if peak == 0:
        return np.zeros_like(magnitude)
    return magnitude / peak


def edge_profile(
    magnitudes: np.ndarray,
    row_index: int | None = None,
    rows_to_average: int = 5,
) -> list[float]:
    """Sample an edge-magnitude map along one row or a band of rows.

    Args:
        magnitudes: Output of ``sobel_edge_magnitudes``.
        row_index: Center row; defaults to the middle of the image.
        rows_to_average: Rows to average around ``row_index``; 1 for a single row.

    Returns:
        Edge strength in [0, 1] per column.
    """
    height, width = magnitudes.shape
    if width == 0 or height == 0:
        return []

    row = height // 2 if row_index is None else min(max(row_index, 0), height - 1)
    if rows_to_average <= 1:
        return magnitudes[row].tolist()

    start = max(0, row - rows_to_average // 2)
    end = min(height, row + math.ceil(rows_to_average / 2))
    return magnitudes[start:end].mean(axis=0).tolist()
