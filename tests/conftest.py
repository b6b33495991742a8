"""
Pytest configuration and fixtures for imagematrix tests
"""

import numpy as np
import pytest

from imagematrix.config import get_settings
from imagematrix.core.buffer import PixelBuffer
from imagematrix.core.patterns import (
    create_blocks,
    create_checkerboard,
    create_gradient,
    create_noise,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so environment changes never leak between tests"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def red_buffer():
    """3x3 opaque pure red buffer"""
    return PixelBuffer.new(3, 3, (255, 0, 0, 255))


@pytest.fixture
def noise_buffer():
    """Random buffer with random alpha (reproducible)"""
    return create_noise(20, 15, seed=7, alpha=True)


@pytest.fixture
def gradient_buffer():
    """Horizontal black-to-white ramp"""
    return create_gradient(16, 8)


@pytest.fixture
def checkerboard_buffer():
    """Black/white checkerboard with 4 pixel cells"""
    return create_checkerboard(16, 16, cell=4)


@pytest.fixture
def two_block_buffer():
    """40x30 buffer split into a red left half and a blue right half"""
    return create_blocks(
        40,
        30,
        [((0, 0, 20, 30), (200, 30, 30)), ((20, 0, 20, 30), (30, 30, 200))],
    )


@pytest.fixture
def gray_buffer():
    """Build an opaque buffer from a 2D array of gray levels"""

    def _make(values):
        return PixelBuffer.from_array(np.asarray(values, dtype=np.uint8))

    return _make
