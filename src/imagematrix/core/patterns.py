"""
Synthetic buffer generation utilities.

Provides pixel buffers with simple, known content for hosts that need a
placeholder image and for exercising the operators in tests.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from imagematrix.core.buffer import PixelBuffer

logger = logging.getLogger(__name__)


def create_solid(width: int, height: int, color: Sequence[int] = (0, 0, 0, 255)) -> PixelBuffer:
    """
    Create a uniform buffer.

    Args:
        width: Buffer width
        height: Buffer height
        color: RGB or RGBA fill value

    Returns:
        Uniform buffer
    """
    return PixelBuffer.new(width, height, color)


def create_gradient(width: int, height: int, horizontal: bool = True) -> PixelBuffer:
    """
    Create a grayscale ramp from black to white.

    Args:
        width: Buffer width
        height: Buffer height
        horizontal: Ramp along x if True, along y otherwise

    Returns:
        Opaque gradient buffer
    """
    length = width if horizontal else height
    ramp = (np.arange(length) * 255 // max(length - 1, 1)).astype(np.uint8)
    if horizontal:
        gray = np.tile(ramp, (height, 1))
    else:
        gray = np.tile(ramp[:, np.newaxis], (1, width))
    return PixelBuffer.from_array(gray)


def create_checkerboard(
    width: int,
    height: int,
    cell: int = 8,
    colors: Tuple[Sequence[int], Sequence[int]] = ((0, 0, 0), (255, 255, 255)),
) -> PixelBuffer:
    """
    Create a two-color checkerboard.

    Args:
        width: Buffer width
        height: Buffer height
        cell: Cell edge length in pixels
        colors: The two RGB colors (top-left cell uses the first)

    Returns:
        Opaque checkerboard buffer
    """
    ys, xs = np.mgrid[0:height, 0:width]
    odd = ((xs // cell) + (ys // cell)) % 2 == 1
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[~odd] = np.asarray(colors[0][:3], dtype=np.uint8)
    rgb[odd] = np.asarray(colors[1][:3], dtype=np.uint8)
    return PixelBuffer.from_array(rgb)


def create_blocks(
    width: int,
    height: int,
    blocks: Sequence[Tuple[Tuple[int, int, int, int], Sequence[int]]],
    background: Sequence[int] = (0, 0, 0),
) -> PixelBuffer:
    """
    Create a buffer with filled axis-aligned rectangles.

    Args:
        width: Buffer width
        height: Buffer height
        blocks: List of ((x, y, w, h), rgb) entries drawn in order
        background: RGB background color

    Returns:
        Opaque buffer
    """
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[...] = np.asarray(background[:3], dtype=np.uint8)
    for (x, y, w, h), color in blocks:
        rgb[y : y + h, x : x + w] = np.asarray(color[:3], dtype=np.uint8)
    return PixelBuffer.from_array(rgb)


def create_noise(
    width: int, height: int, seed: Optional[int] = None, alpha: bool = False
) -> PixelBuffer:
    """
    Create a buffer of uniform random samples.

    Args:
        width: Buffer width
        height: Buffer height
        seed: Random seed for reproducible content
        alpha: Randomize alpha too (opaque otherwise)

    Returns:
        Random buffer
    """
    rng = np.random.default_rng(seed)
    channels = 4 if alpha else 3
    data = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    logger.debug(f"Created {width}x{height} noise buffer (seed={seed})")
    return PixelBuffer.from_array(data)
