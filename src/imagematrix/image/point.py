"""
Per-pixel operators.

Each operator is a pure, total map from one buffer to a new buffer of the
same size. Only the color channels are touched, except for the color-key
operator, which is the single operator allowed to write alpha. All results
are saturated to [0, 255].
"""

import logging
from typing import Tuple, Union

import numpy as np
from pydantic import ValidationError

from imagematrix.common.base import Color
from imagematrix.common.constants import ImageConstants, PointConstants
from imagematrix.core.buffer import PixelBuffer
from imagematrix.core.colors import color_distance, luminance, saturate
from imagematrix.exceptions import ErrorMessages, InvalidParameterException, require

logger = logging.getLogger(__name__)

ColorLike = Union[Color, Tuple[int, int, int]]


def _with_rgb(buffer: PixelBuffer, rgb: np.ndarray) -> PixelBuffer:
    """Combine new color channels with the source alpha."""
    result = buffer.to_array()
    result[:, :, :3] = rgb
    return buffer.with_data(result)


def _check_level(name: str, level: float) -> None:
    require(
        PointConstants.LEVEL_MIN <= level <= PointConstants.LEVEL_MAX,
        name,
        level,
        ErrorMessages.OUT_OF_RANGE.format(min=PointConstants.LEVEL_MIN, max=PointConstants.LEVEL_MAX),
    )


def grayscale_values(buffer: PixelBuffer) -> np.ndarray:
    """
    Stored grayscale value of every pixel.

    Returns:
        (H, W) uint8 array of rounded luminance
    """
    return saturate(luminance(buffer.rgb))


def to_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """
    Replace r, g and b with the pixel luminance.

    Args:
        buffer: Source buffer

    Returns:
        Grayscale buffer, alpha unchanged
    """
    gray = grayscale_values(buffer)
    return _with_rgb(buffer, gray[:, :, np.newaxis])


def apply_threshold(buffer: PixelBuffer, threshold: float) -> PixelBuffer:
    """
    Binarize on luminance.

    A pixel whose grayscale value is below the threshold becomes black,
    anything else (the threshold itself included) becomes white.

    Args:
        buffer: Source buffer
        threshold: Threshold in [0, 255]

    Returns:
        Binary buffer with channels in {0, 255}, alpha unchanged
    """
    require(
        PointConstants.THRESHOLD_MIN <= threshold <= PointConstants.THRESHOLD_MAX,
        "threshold",
        threshold,
        ErrorMessages.OUT_OF_RANGE.format(
            min=PointConstants.THRESHOLD_MIN, max=PointConstants.THRESHOLD_MAX
        ),
    )
    gray = grayscale_values(buffer)
    binary = np.where(gray < threshold, 0, 255).astype(np.uint8)
    return _with_rgb(buffer, binary[:, :, np.newaxis])


def invert_colors(buffer: PixelBuffer) -> PixelBuffer:
    """Map every color channel c to 255 - c."""
    return _with_rgb(buffer, 255 - buffer.rgb)


def adjust_brightness(buffer: PixelBuffer, level: float) -> PixelBuffer:
    """
    Scale color channels by level / 100.

    Args:
        buffer: Source buffer
        level: Brightness level in [0, 200]; 100 is the identity

    Returns:
        Adjusted buffer
    """
    _check_level("brightness", level)
    if level == PointConstants.LEVEL_IDENTITY:
        return buffer.copy()

    factor = level / 100.0
    return _with_rgb(buffer, saturate(buffer.rgb.astype(np.float64) * factor))


def contrast_factor(level: float) -> float:
    """
    Contrast multiplier for a level in [0, 200].

    The level is centered on 100 before applying the classic
    259(c + 255) / (255(259 - c)) curve, so level 100 yields exactly 1.
    """
    offset = level - PointConstants.LEVEL_IDENTITY
    pole = PointConstants.CONTRAST_POLE
    return (pole * (offset + 255)) / (255 * (pole - offset))


def adjust_contrast(buffer: PixelBuffer, level: float) -> PixelBuffer:
    """
    Stretch or compress color channels around mid-gray.

    Args:
        buffer: Source buffer
        level: Contrast level in [0, 200]; 100 is the identity

    Returns:
        Adjusted buffer
    """
    _check_level("contrast", level)
    if level == PointConstants.LEVEL_IDENTITY:
        return buffer.copy()

    factor = contrast_factor(level)
    midpoint = PointConstants.CONTRAST_MIDPOINT
    rgb = factor * (buffer.rgb.astype(np.float64) - midpoint) + midpoint
    return _with_rgb(buffer, saturate(rgb))


def apply_color_key(buffer: PixelBuffer, key: ColorLike, tolerance: float) -> PixelBuffer:
    """
    Make pixels close to a key color fully transparent.

    Args:
        buffer: Source buffer
        key: Key color
        tolerance: Maximum Euclidean RGB distance (inclusive), in [0, 255]

    Returns:
        Buffer with alpha 0 where the distance to key is <= tolerance;
        all other samples unchanged
    """
    require(
        PointConstants.COLOR_KEY_TOLERANCE_MIN
        <= tolerance
        <= PointConstants.COLOR_KEY_TOLERANCE_MAX,
        "tolerance",
        tolerance,
        ErrorMessages.OUT_OF_RANGE.format(
            min=PointConstants.COLOR_KEY_TOLERANCE_MIN,
            max=PointConstants.COLOR_KEY_TOLERANCE_MAX,
        ),
    )
    if not isinstance(key, Color):
        try:
            key = Color.from_tuple(key)
        except (ValidationError, IndexError, TypeError) as e:
            raise InvalidParameterException(
                "key", key, "must be an (r, g, b) triple in [0, 255]"
            ) from e

    mask = color_distance(buffer.rgb, key.to_tuple()) <= tolerance
    result = buffer.to_array()
    result[mask, ImageConstants.ALPHA] = ImageConstants.TRANSPARENT

    logger.debug(f"Color key {key} (tolerance {tolerance}) cleared {int(mask.sum())} pixels")
    return buffer.with_data(result)
