"""
Geometric operators.

Rotation keeps the canvas size: content rotated past the edges is clipped
and uncovered areas are filled with a background color (transparent black
by default). Every output pixel is inverse-mapped to a source coordinate by
a rotation about the pixel-grid center ((W - 1) / 2, (H - 1) / 2) and sampled
with nearest-neighbor (default) or bilinear interpolation.
"""

import logging
import math
from typing import Sequence, Union

import cv2
import numpy as np

from imagematrix.common.constants import GeometryConstants, ImageConstants
from imagematrix.common.enums import SamplingMethod
from imagematrix.core.buffer import PixelBuffer
from imagematrix.exceptions import ErrorMessages, InvalidParameterException, require

logger = logging.getLogger(__name__)

INTERPOLATION = {
    SamplingMethod.NEAREST: cv2.INTER_NEAREST,
    SamplingMethod.BILINEAR: cv2.INTER_LINEAR,
}


def normalize_angle(angle: float) -> float:
    """
    Normalize angle in degrees to [-180, 180].

    Args:
        angle: Angle in degrees

    Returns:
        Equivalent angle in [-180, 180]
    """
    while angle < -180:
        angle += 360
    while angle > 180:
        angle -= 360
    return angle


def rotation_matrix(width: int, height: int, angle: float) -> np.ndarray:
    """
    2x3 forward affine matrix for a counter-clockwise rotation about the center.

    Args:
        width: Canvas width
        height: Canvas height
        angle: Angle in degrees (positive is counter-clockwise as displayed)

    Returns:
        2x3 float64 matrix mapping source to destination coordinates
    """
    center = ((width - 1) / 2.0, (height - 1) / 2.0)
    return cv2.getRotationMatrix2D(center, angle, 1.0)


def apply_rotation(
    buffer: PixelBuffer,
    angle: float,
    sampling: Union[SamplingMethod, str] = SamplingMethod.NEAREST,
    background: Sequence[int] = GeometryConstants.BACKGROUND,
) -> PixelBuffer:
    """
    Rotate about the center without growing the canvas.

    Args:
        buffer: Source buffer
        angle: Angle in degrees; any finite value, normalized to [-180, 180]
        sampling: nearest (default) or bilinear
        background: RGBA fill for uncovered pixels

    Returns:
        Rotated buffer of the same width and height
    """
    require(math.isfinite(angle), "angle", angle, ErrorMessages.NOT_FINITE)
    try:
        sampling = SamplingMethod(sampling)
    except ValueError as e:
        raise InvalidParameterException("sampling", sampling, "unknown sampling method") from e
    require(
        len(background) == ImageConstants.CHANNELS and all(0 <= c <= 255 for c in background),
        "background",
        tuple(background),
        "must be an (r, g, b, a) tuple in [0, 255]",
    )

    angle = normalize_angle(angle)
    if angle == 0:
        return buffer.copy()

    matrix = rotation_matrix(buffer.width, buffer.height, angle)
    rotated = cv2.warpAffine(
        buffer.to_array(),
        matrix,
        (buffer.width, buffer.height),
        flags=INTERPOLATION[sampling],
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=tuple(int(c) for c in background),
    )

    logger.debug(f"Rotated {buffer} by {angle} degrees ({sampling.value})")
    return buffer.with_data(rotated)
