"""
RGBA pixel buffer - the shared data model of every operator.

A PixelBuffer wraps an (H, W, 4) uint8 NumPy array in row-major RGBA order.
Buffers are treated as immutable: operators never write into their input and
always return a freshly allocated buffer.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from imagematrix.common.base import Color
from imagematrix.common.constants import ImageConstants
from imagematrix.exceptions import ErrorMessages, InvalidBufferException, require

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int, int]


class PixelBuffer:
    """Raster image as width, height and row-major RGBA samples."""

    __slots__ = ("_data",)

    def __init__(self, data: np.ndarray, copy: bool = True):
        """
        Create buffer from an RGBA array.

        Args:
            data: Array of shape (H, W, 4), dtype uint8
            copy: If False, take ownership of the array without copying

        Raises:
            InvalidBufferException: If the array is not a valid RGBA raster
        """
        if not isinstance(data, np.ndarray):
            raise InvalidBufferException(f"expected numpy array, got {type(data).__name__}")
        if data.ndim != 3 or data.shape[2] != ImageConstants.CHANNELS:
            raise InvalidBufferException("expected shape (H, W, 4)", shape=data.shape)
        if data.shape[0] <= 0 or data.shape[1] <= 0:
            raise InvalidBufferException("width and height must be positive", shape=data.shape)
        if data.dtype != np.uint8:
            raise InvalidBufferException(f"expected uint8 samples, got {data.dtype}", data.shape)

        array = np.array(data, dtype=np.uint8, copy=True) if copy else data
        array.flags.writeable = False
        self._data = array

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, width: int, height: int, fill: Sequence[int] = (0, 0, 0, 255)) -> "PixelBuffer":
        """Create a buffer filled with a single RGBA value."""
        if width <= 0 or height <= 0:
            raise InvalidBufferException(f"width and height must be positive: {width}x{height}")
        data = np.empty((height, width, ImageConstants.CHANNELS), dtype=np.uint8)
        data[...] = np.asarray(_checked_pixel(fill), dtype=np.uint8)
        return cls(data, copy=False)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Iterable[Sequence[int]]) -> "PixelBuffer":
        """
        Create buffer from a row-major sequence of (r, g, b, a) tuples.

        Raises:
            InvalidBufferException: If the sample count differs from width*height
                or a channel is outside [0, 255]
        """
        if width <= 0 or height <= 0:
            raise InvalidBufferException(f"width and height must be positive: {width}x{height}")

        samples = np.asarray(list(pixels), dtype=np.int64)
        if samples.shape != (width * height, ImageConstants.CHANNELS):
            raise InvalidBufferException(
                f"expected {width * height} RGBA samples for {width}x{height}",
                shape=samples.shape,
            )
        if samples.size and (samples.min() < 0 or samples.max() > 255):
            raise InvalidBufferException("channel values must be within [0, 255]")

        data = samples.astype(np.uint8).reshape(height, width, ImageConstants.CHANNELS)
        return cls(data, copy=False)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Create buffer from a grayscale, RGB or RGBA array.

        Grayscale (H, W) is replicated to RGB; missing alpha becomes opaque.
        """
        if not isinstance(array, np.ndarray):
            raise InvalidBufferException(f"expected numpy array, got {type(array).__name__}")
        if array.dtype != np.uint8:
            raise InvalidBufferException(f"expected uint8 samples, got {array.dtype}", array.shape)

        if array.ndim == 2:
            rgb = np.repeat(array[:, :, np.newaxis], 3, axis=2)
        elif array.ndim == 3 and array.shape[2] == 3:
            rgb = array
        elif array.ndim == 3 and array.shape[2] == ImageConstants.CHANNELS:
            return cls(array)
        else:
            raise InvalidBufferException("expected (H, W), (H, W, 3) or (H, W, 4)", array.shape)

        alpha = np.full(rgb.shape[:2] + (1,), ImageConstants.OPAQUE, dtype=np.uint8)
        return cls(np.concatenate([rgb, alpha], axis=2), copy=False)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def data(self) -> np.ndarray:
        """Read-only (H, W, 4) view of the samples."""
        return self._data

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> int:
        """Number of pixels (W*H)."""
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width) tuple."""
        return (self.height, self.width)

    @property
    def rgb(self) -> np.ndarray:
        """Read-only (H, W, 3) view of the color channels."""
        return self._data[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        """Read-only (H, W) view of the alpha channel."""
        return self._data[:, :, ImageConstants.ALPHA]

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Get (r, g, b, a) at column x, row y."""
        require(
            0 <= x < self.width and 0 <= y < self.height,
            "coordinate",
            (x, y),
            ErrorMessages.OUT_OF_BOUNDS.format(width=self.width, height=self.height),
        )
        r, g, b, a = self._data[y, x]
        return (int(r), int(g), int(b), int(a))

    def to_pixels(self) -> List[Pixel]:
        """Row-major list of (r, g, b, a) tuples."""
        return [tuple(p) for p in self._data.reshape(-1, ImageConstants.CHANNELS).tolist()]

    def to_array(self) -> np.ndarray:
        """Writable copy of the samples."""
        return self._data.copy()

    def tobytes(self) -> bytes:
        return self._data.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self._data)

    def with_data(self, data: np.ndarray) -> "PixelBuffer":
        """
        Wrap a freshly computed array of the same dimensions.

        Args:
            data: (H, W, 4) uint8 array, owned by the new buffer

        Raises:
            InvalidBufferException: If dimensions differ from this buffer
        """
        if data.shape[:2] != self._data.shape[:2]:
            raise InvalidBufferException(
                f"operator changed dimensions from {self.shape}", shape=data.shape
            )
        return PixelBuffer(data, copy=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(
            np.array_equal(self._data, other._data)
        )

    def __hash__(self) -> int:
        return hash((self._data.shape, self._data.tobytes()))

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def sample_color(buffer: PixelBuffer, x: int, y: int) -> Color:
    """
    Read the color of a single pixel.

    Used by hosts to seed the color-key transparency operator.

    Args:
        buffer: Source buffer
        x: Column
        y: Row

    Returns:
        Color at (x, y); alpha is discarded
    """
    color = Color.from_tuple(buffer.get_pixel(x, y))
    logger.debug(f"Sampled {color} at ({x}, {y})")
    return color


def _checked_pixel(values: Sequence[int]) -> Pixel:
    if len(values) == 3:
        values = (*values, ImageConstants.OPAQUE)
    if len(values) != ImageConstants.CHANNELS:
        raise InvalidBufferException(f"expected RGB or RGBA fill value, got {tuple(values)}")
    if any(v < 0 or v > 255 for v in values):
        raise InvalidBufferException(f"fill channels must be within [0, 255]: {tuple(values)}")
    return tuple(int(v) for v in values)
