"""
Tests for image.geometry module.
"""

import math

import numpy as np
import pytest

from imagematrix.common.enums import SamplingMethod
from imagematrix.core.patterns import create_noise, create_solid
from imagematrix.exceptions import InvalidParameterException
from imagematrix.image.geometry import apply_rotation, normalize_angle


class TestNormalizeAngle:
    """Tests for normalize_angle."""

    @pytest.mark.parametrize(
        "angle, expected",
        [(0, 0), (270, -90), (-190, 170), (540, 180), (-180, -180), (45.5, 45.5)],
    )
    def test_normalizes(self, angle, expected):
        """Test angles are mapped into [-180, 180]."""
        assert normalize_angle(angle) == expected


class TestRotation:
    """Tests for apply_rotation."""

    @pytest.fixture
    def square_noise(self):
        """5x5 random opaque buffer."""
        return create_noise(5, 5, seed=21)

    def test_zero_is_identity(self, noise_buffer):
        """Test angle 0 and full turns leave the buffer unchanged."""
        assert apply_rotation(noise_buffer, 0) == noise_buffer
        assert apply_rotation(noise_buffer, 360) == noise_buffer

    def test_keeps_dimensions(self, noise_buffer):
        """Test the canvas size never changes."""
        result = apply_rotation(noise_buffer, 30)

        assert result.shape == noise_buffer.shape

    def test_quarter_turn_counter_clockwise(self, square_noise):
        """Test a positive angle rotates counter-clockwise as displayed."""
        result = apply_rotation(square_noise, 90)

        assert np.array_equal(result.data, np.rot90(square_noise.data, 1))

    def test_half_turn(self, noise_buffer):
        """Test 180 degrees flips both axes, including non-square buffers."""
        result = apply_rotation(noise_buffer, 180)

        assert np.array_equal(result.data, noise_buffer.data[::-1, ::-1])

    def test_exposed_corners_use_background(self):
        """Test uncovered pixels get the (transparent) background."""
        buffer = create_solid(9, 9, (255, 255, 255))

        result = apply_rotation(buffer, 45)

        assert result.get_pixel(0, 0) == (0, 0, 0, 0)
        assert result.get_pixel(4, 4) == (255, 255, 255, 255)

    def test_custom_background(self):
        """Test an explicit background fill."""
        buffer = create_solid(9, 9, (255, 255, 255))

        result = apply_rotation(buffer, 45, background=(1, 2, 3, 4))

        assert result.get_pixel(8, 8) == (1, 2, 3, 4)

    def test_bilinear_keeps_center(self):
        """Test bilinear sampling reproduces a flat interior."""
        buffer = create_solid(11, 11, (40, 80, 120))

        result = apply_rotation(buffer, 30, SamplingMethod.BILINEAR)

        assert result.get_pixel(5, 5) == (40, 80, 120, 255)

    @pytest.mark.parametrize("angle", [math.inf, math.nan])
    def test_rejects_non_finite_angle(self, noise_buffer, angle):
        """Test infinite and NaN angles are rejected."""
        with pytest.raises(InvalidParameterException):
            apply_rotation(noise_buffer, angle)

    def test_rejects_unknown_sampling(self, noise_buffer):
        """Test unknown sampling methods are rejected."""
        with pytest.raises(InvalidParameterException):
            apply_rotation(noise_buffer, 10, "cubic")

    def test_rejects_bad_background(self, noise_buffer):
        """Test the background must be an RGBA tuple."""
        with pytest.raises(InvalidParameterException):
            apply_rotation(noise_buffer, 10, background=(0, 0, 0))
