"""
Color-space helpers shared by the operators.

Provides luminance, RGB distance, HSV to RGB conversion and the two rounding
rules used when floating point results are written back to 8-bit channels.
"""

import math
from typing import Tuple

import numpy as np

from imagematrix.common.constants import ImageConstants


def saturate(values: np.ndarray) -> np.ndarray:
    """
    Clamp to [0, 255] and round half to even, as a clamped 8-bit store does.

    Args:
        values: Floating point channel values

    Returns:
        uint8 array
    """
    return np.rint(np.clip(values, ImageConstants.CHANNEL_MIN, ImageConstants.CHANNEL_MAX)).astype(
        np.uint8
    )


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round non-negative values half up (floor(x + 0.5))."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def round_half_up_scalar(value: float) -> int:
    """Scalar version of round_half_up."""
    return int(math.floor(value + 0.5))


def luminance(rgb: np.ndarray) -> np.ndarray:
    """
    Perceptual luminance 0.299r + 0.587g + 0.114b.

    Args:
        rgb: (..., 3) array of channel values

    Returns:
        Float64 array of shape rgb.shape[:-1]
    """
    wr, wg, wb = ImageConstants.LUMINANCE_WEIGHTS
    rgb = rgb.astype(np.float64)
    return rgb[..., 0] * wr + rgb[..., 1] * wg + rgb[..., 2] * wb


def color_distance(rgb: np.ndarray, color: Tuple[int, int, int]) -> np.ndarray:
    """
    Euclidean RGB distance from every pixel to a reference color.

    Args:
        rgb: (..., 3) array of channel values
        color: Reference (r, g, b)

    Returns:
        Float64 array of distances
    """
    diff = rgb.astype(np.float64) - np.asarray(color, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def hsv_to_rgb(hue: float, saturation: float, value: float) -> Tuple[int, int, int]:
    """
    Convert HSV to 8-bit RGB.

    Args:
        hue: Hue in degrees (wrapped into [0, 360))
        saturation: Saturation in [0, 1]
        value: Value in [0, 1]

    Returns:
        (r, g, b) with each component rounded half up to [0, 255]
    """
    hue = ((hue % 360) + 360) % 360

    if saturation == 0:
        gray = round_half_up_scalar(value * 255)
        return (gray, gray, gray)

    sector = int(math.floor(hue / 60)) % 6
    fraction = hue / 60 - math.floor(hue / 60)
    p = value * (1 - saturation)
    q = value * (1 - fraction * saturation)
    t = value * (1 - (1 - fraction) * saturation)

    if sector == 0:
        r, g, b = value, t, p
    elif sector == 1:
        r, g, b = q, value, p
    elif sector == 2:
        r, g, b = p, value, t
    elif sector == 3:
        r, g, b = p, q, value
    elif sector == 4:
        r, g, b = t, p, value
    else:
        r, g, b = value, p, q

    return (
        round_half_up_scalar(r * 255),
        round_half_up_scalar(g * 255),
        round_half_up_scalar(b * 255),
    )
