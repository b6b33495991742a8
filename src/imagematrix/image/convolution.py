"""
Neighborhood (kernel) operators.

Convolution runs per color channel on a float64 working copy, so integer
kernel sums are exact; alpha is never convolved. Each operator keeps its
own border policy:

- sharpen: pixels touching an edge keep the source value
- gaussian blur: the 2-pixel border band keeps the source value
- sobel: every border pixel is forced to opaque black
"""

import logging

import cv2
import numpy as np

from imagematrix.common.constants import ConvolutionConstants, ImageConstants
from imagematrix.core.buffer import PixelBuffer
from imagematrix.core.colors import round_half_up, saturate
from imagematrix.exceptions import ErrorMessages, require
from imagematrix.image.point import grayscale_values

logger = logging.getLogger(__name__)


def correlate(channels: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Apply a kernel to every channel.

    Kernel weights are applied as written (kernel[ky][kx] multiplies the
    sample at offset (kx, ky) from the center), not flipped. Values near the
    edges depend on the replicated border and must be discarded by callers.

    Args:
        channels: (H, W) or (H, W, C) array
        kernel: Odd-sized square float64 kernel

    Returns:
        Float64 array of the same shape
    """
    return cv2.filter2D(
        channels.astype(np.float64), cv2.CV_64F, kernel, borderType=cv2.BORDER_REPLICATE
    )


def sharpen_kernel(amount: float) -> np.ndarray:
    """
    3x3 sharpen kernel: center 1 + 4f, four-neighbors -f, corners 0, f = amount / 10.
    """
    f = amount / ConvolutionConstants.SHARPEN_SCALE
    return np.array([[0, -f, 0], [-f, 1 + 4 * f, -f], [0, -f, 0]], dtype=np.float64)


def apply_sharpen(buffer: PixelBuffer, amount: float) -> PixelBuffer:
    """
    Sharpen interior pixels.

    Args:
        buffer: Source buffer
        amount: Sharpening intensity in [0, 10]; 0 is the identity

    Returns:
        Sharpened buffer; pixels on the outer ring are copied from the source
    """
    require(
        ConvolutionConstants.SHARPEN_MIN <= amount <= ConvolutionConstants.SHARPEN_MAX,
        "amount",
        amount,
        ErrorMessages.OUT_OF_RANGE.format(
            min=ConvolutionConstants.SHARPEN_MIN, max=ConvolutionConstants.SHARPEN_MAX
        ),
    )
    result = buffer.to_array()
    if amount == 0 or buffer.width < 3 or buffer.height < 3:
        return buffer.with_data(result)

    filtered = correlate(buffer.rgb, sharpen_kernel(amount))
    result[1:-1, 1:-1, :3] = saturate(filtered[1:-1, 1:-1])

    logger.debug(f"Sharpened {buffer} with amount {amount}")
    return buffer.with_data(result)


def apply_gaussian_blur(buffer: PixelBuffer) -> PixelBuffer:
    """
    Blur with the fixed normalized 5x5 Gaussian kernel.

    Only pixels at least two pixels away from every edge are convolved;
    the border band keeps the source values. Sums are rounded half up.

    Args:
        buffer: Source buffer

    Returns:
        Blurred buffer, alpha unchanged
    """
    margin = ConvolutionConstants.GAUSSIAN_MARGIN
    result = buffer.to_array()
    if buffer.width <= 2 * margin or buffer.height <= 2 * margin:
        return buffer.with_data(result)

    kernel = ConvolutionConstants.GAUSSIAN_KERNEL
    filtered = correlate(buffer.rgb, kernel / kernel.sum())
    interior = round_half_up(filtered[margin:-margin, margin:-margin])
    result[margin:-margin, margin:-margin, :3] = np.clip(interior, 0, 255).astype(np.uint8)
    return buffer.with_data(result)


def gradient_magnitude(buffer: PixelBuffer) -> np.ndarray:
    """
    Sobel gradient magnitude of the grayscale image.

    Returns:
        (H, W) float64 array; border entries are 0
    """
    magnitude = np.zeros(buffer.shape, dtype=np.float64)
    if buffer.width < 3 or buffer.height < 3:
        return magnitude

    gray = grayscale_values(buffer)
    gx = correlate(gray, ConvolutionConstants.SOBEL_X)
    gy = correlate(gray, ConvolutionConstants.SOBEL_Y)
    magnitude[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy)[1:-1, 1:-1]
    return magnitude


def apply_sobel(buffer: PixelBuffer) -> PixelBuffer:
    """
    Sobel edge magnitude image.

    Args:
        buffer: Source buffer (converted to grayscale first)

    Returns:
        Opaque buffer with the clamped magnitude in r, g and b; every border
        pixel is (0, 0, 0, 255)
    """
    magnitude = saturate(gradient_magnitude(buffer))
    result = np.empty(buffer.shape + (ImageConstants.CHANNELS,), dtype=np.uint8)
    result[:, :, :3] = magnitude[:, :, np.newaxis]
    result[:, :, ImageConstants.ALPHA] = ImageConstants.OPAQUE

    # Border policy: opaque black
    result[0, :, :3] = 0
    result[-1, :, :3] = 0
    result[:, 0, :3] = 0
    result[:, -1, :3] = 0
    return buffer.with_data(result)
