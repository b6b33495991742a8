"""
Edge detection pipeline.

Canny is composed from the convolution operators:

1. Gaussian blur
2. Sobel gradient magnitude
3. Double threshold into STRONG / WEAK / NONE classes
4. Hysteresis: WEAK pixels touching a STRONG pixel (8-connected) become
   STRONG, the remaining WEAK pixels are dropped

The default hysteresis is one raster scan that updates the classes in place:
a weak pixel promoted earlier in the scan counts as strong for the pixels
after it, so chains running right or down from a strong pixel are linked in
one call while chains running up or left are not. The fixed-point mode keeps
promoting until no weak pixel touches a strong one.
"""

import logging
from typing import Union

import cv2
import numpy as np

from imagematrix.common.constants import EdgeConstants, ImageConstants
from imagematrix.common.enums import HysteresisMode
from imagematrix.core.buffer import PixelBuffer
from imagematrix.exceptions import ErrorMessages, InvalidParameterException, require
from imagematrix.image.convolution import apply_gaussian_blur, apply_sobel

logger = logging.getLogger(__name__)

_NEIGHBORHOOD = np.ones((3, 3), dtype=np.uint8)


def validate_thresholds(low: float, high: float) -> None:
    """
    Reject Canny thresholds outside [0, 255] or in the wrong order.

    Raises:
        InvalidParameterException: On any violation (thresholds are never swapped)
    """
    limits = ErrorMessages.OUT_OF_RANGE.format(
        min=EdgeConstants.THRESHOLD_MIN, max=EdgeConstants.THRESHOLD_MAX
    )
    require(EdgeConstants.THRESHOLD_MIN <= low <= EdgeConstants.THRESHOLD_MAX, "low", low, limits)
    require(
        EdgeConstants.THRESHOLD_MIN <= high <= EdgeConstants.THRESHOLD_MAX, "high", high, limits
    )
    require(low <= high, "low", low, ErrorMessages.LOW_ABOVE_HIGH.format(high=high))


def classify_gradient(magnitude: np.ndarray, low: float, high: float) -> np.ndarray:
    """
    Double threshold.

    Args:
        magnitude: (H, W) gradient magnitudes
        low: Weak threshold (exclusive)
        high: Strong threshold (exclusive)

    Returns:
        (H, W) uint8 array of 255 (magnitude > high), 128 (low < magnitude <= high)
        or 0
    """
    classes = np.full(magnitude.shape, EdgeConstants.NONE, dtype=np.uint8)
    classes[magnitude > low] = EdgeConstants.WEAK
    classes[magnitude > high] = EdgeConstants.STRONG
    return classes


def _touches_strong(classes: np.ndarray) -> np.ndarray:
    strong = (classes == EdgeConstants.STRONG).astype(np.uint8)
    return cv2.dilate(strong, _NEIGHBORHOOD).astype(bool)


def _link_in_scan_order(result: np.ndarray, interior: np.ndarray) -> None:
    """Resolve every interior weak pixel once, row by row, updating result in place."""
    ys, xs = np.nonzero((result == EdgeConstants.WEAK) & interior)
    for y, x in zip(ys.tolist(), xs.tolist()):
        window = result[y - 1 : y + 2, x - 1 : x + 2]
        if (window == EdgeConstants.STRONG).any():
            result[y, x] = EdgeConstants.STRONG
        else:
            result[y, x] = EdgeConstants.NONE


def _link_to_fixed_point(result: np.ndarray, interior: np.ndarray) -> int:
    """Promote weak pixels touching strong ones until nothing changes."""
    passes = 0
    while True:
        promote = (result == EdgeConstants.WEAK) & interior & _touches_strong(result)
        passes += 1
        if not promote.any():
            break
        result[promote] = EdgeConstants.STRONG
    result[(result == EdgeConstants.WEAK) & interior] = EdgeConstants.NONE
    return passes


def apply_hysteresis(
    classes: np.ndarray, mode: Union[HysteresisMode, str] = HysteresisMode.SINGLE_PASS
) -> np.ndarray:
    """
    Link weak edges to strong ones.

    Only interior pixels are considered; border pixels keep their class.

    Args:
        classes: (H, W) array from classify_gradient
        mode: single_pass (one raster scan, in place) or fixed_point

    Returns:
        New (H, W) uint8 array; interior pixels are 0 or 255
    """
    try:
        mode = HysteresisMode(mode)
    except ValueError as e:
        raise InvalidParameterException("mode", mode, "unknown hysteresis mode") from e

    result = classes.copy()
    interior = np.zeros(result.shape, dtype=bool)
    interior[1:-1, 1:-1] = True

    if mode == HysteresisMode.FIXED_POINT:
        passes = _link_to_fixed_point(result, interior)
        logger.debug(f"Hysteresis (fixed_point) finished after {passes} pass(es)")
    else:
        _link_in_scan_order(result, interior)
    return result


def apply_canny(
    buffer: PixelBuffer,
    low: float,
    high: float,
    hysteresis_mode: Union[HysteresisMode, str] = HysteresisMode.SINGLE_PASS,
) -> PixelBuffer:
    """
    Canny edge detection.

    Args:
        buffer: Source buffer
        low: Low threshold, 0 <= low <= high
        high: High threshold, <= 255
        hysteresis_mode: Weak-edge linking strategy

    Returns:
        Opaque binary buffer (channels 0 or 255)

    Raises:
        InvalidParameterException: If thresholds are out of range or low > high
    """
    validate_thresholds(low, high)

    blurred = apply_gaussian_blur(buffer)
    gradient = apply_sobel(blurred)
    magnitude = gradient.data[:, :, ImageConstants.RED]

    edges = apply_hysteresis(classify_gradient(magnitude, low, high), hysteresis_mode)

    result = np.empty(buffer.shape + (ImageConstants.CHANNELS,), dtype=np.uint8)
    result[:, :, :3] = edges[:, :, np.newaxis]
    result[:, :, ImageConstants.ALPHA] = ImageConstants.OPAQUE

    logger.debug(
        f"Canny ({low}, {high}) on {buffer}: "
        f"{int(np.count_nonzero(edges == EdgeConstants.STRONG))} edge pixels"
    )
    return buffer.with_data(result)
