"""Loading image files as flat RGBA pixel buffers.

The analysis functions take raw RGBA bytes so they stay independent of any
image codec; this module is the OpenCV-backed source of those bytes.
"""

import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 1200

_TO_RGBA = {
    1: cv2.COLOR_GRAY2RGBA,
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


def to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV image (gray, BGR or BGRA) to an RGBA array."""
    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels not in _TO_RGBA:
        raise ValueError(f"Unsupported channel count: {channels}")
    if image.ndim == 3 and channels == 1:
        image = image[:, :, 0]
    return cv2.cvtColor(image, _TO_RGBA[channels])


def fit_to_max_dimension(image: np.ndarray, max_dimension: int) -> np.ndarray:
    """Downscale so the longer side is at most ``max_dimension`` pixels."""
    height, width = image.shape[:2]
    longest = max(height, width)
    if max_dimension <= 0 or longest <= max_dimension:
        return image

    scale = max_dimension / longest
    size = (max(1, round(width * scale)), max(1, round(height * scale)))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)


def load_rgba_image(
    path: str, max_dimension: int | None = DEFAULT_MAX_DIMENSION
) -> tuple[bytes, int, int] | None:
    """Load an image file as a flat RGBA pixel buffer.

    Loads an image from the specified path with alpha preserved, converts it
    from OpenCV's BGR(A) order to RGBA and optionally downscales it.

    Args:
        path: File path to the image.
        max_dimension: Longest side after downscaling; None keeps full size.

    Returns:
        ``(pixels, width, height)``, or None if the file cannot be read.
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        logger.error("Could not read image: %s", path)
        return None

    # 16-bit images are reduced to 8 bits per channel
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)

    if max_dimension:
        image = fit_to_max_dimension(image, max_dimension)
    rgba = np.ascontiguousarray(to_rgba(image), dtype=np.uint8)

    height, width = rgba.shape[:2]
    logger.debug("Loaded %s as %dx%d RGBA", path, width, height)
    return rgba.tobytes(), width, height
