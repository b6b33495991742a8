"""
Tests for image.point module.

Tests the per-pixel operators: grayscale, threshold, invert, brightness,
contrast and color key.
"""

import numpy as np
import pytest

from imagematrix.common.base import Color
from imagematrix.core.buffer import PixelBuffer
from imagematrix.exceptions import InvalidParameterException
from imagematrix.image.point import (
    adjust_brightness,
    adjust_contrast,
    apply_color_key,
    apply_threshold,
    contrast_factor,
    grayscale_values,
    invert_colors,
    to_grayscale,
)


# =============================================================================
# Grayscale Tests
# =============================================================================


class TestGrayscale:
    """Tests for to_grayscale."""

    def test_pure_red(self, red_buffer):
        """Test 0.299 * 255 rounds to 76 in every color channel."""
        result = to_grayscale(red_buffer)

        assert result.to_pixels() == [(76, 76, 76, 255)] * 9

    def test_idempotent(self, noise_buffer):
        """Test grayscale of a grayscale image is unchanged."""
        once = to_grayscale(noise_buffer)

        assert to_grayscale(once) == once

    def test_preserves_alpha_and_input(self, noise_buffer):
        """Test alpha is untouched and the input is not modified."""
        before = noise_buffer.copy()

        result = to_grayscale(noise_buffer)

        assert np.array_equal(result.alpha, noise_buffer.alpha)
        assert noise_buffer == before

    def test_channels_equal(self, noise_buffer):
        """Test r, g and b are identical after conversion."""
        rgb = to_grayscale(noise_buffer).rgb

        assert np.array_equal(rgb[:, :, 0], rgb[:, :, 1])
        assert np.array_equal(rgb[:, :, 1], rgb[:, :, 2])


# =============================================================================
# Threshold Tests
# =============================================================================


class TestThreshold:
    """Tests for apply_threshold."""

    def test_threshold_is_inclusive(self, gray_buffer):
        """Test values equal to the threshold become white."""
        buffer = gray_buffer([[50, 130, 128]])

        result = apply_threshold(buffer, 128)

        assert grayscale_values(result).tolist() == [[0, 255, 255]]

    def test_output_is_binary(self, noise_buffer):
        """Test every channel is 0 or 255."""
        result = apply_threshold(noise_buffer, 100)

        assert set(np.unique(result.rgb).tolist()) <= {0, 255}
        assert np.array_equal(result.alpha, noise_buffer.alpha)

    def test_gradient_split(self, gradient_buffer):
        """Test a ramp splits into a black left part and a white right part."""
        result = grayscale_values(apply_threshold(gradient_buffer, 128))

        assert result[:, :8].max() == 0
        assert result[:, 8:].min() == 255

    def test_extremes(self, noise_buffer):
        """Test threshold 0 gives all white."""
        assert np.all(apply_threshold(noise_buffer, 0).rgb == 255)

    @pytest.mark.parametrize("threshold", [-1, 256])
    def test_rejects_out_of_range(self, noise_buffer, threshold):
        """Test out of range thresholds are rejected, not clamped."""
        with pytest.raises(InvalidParameterException):
            apply_threshold(noise_buffer, threshold)

    def test_invalid_parameter_is_value_error(self, noise_buffer):
        """Test parameter errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            apply_threshold(noise_buffer, 300)


# =============================================================================
# Invert Tests
# =============================================================================


class TestInvert:
    """Tests for invert_colors."""

    def test_inverts_color_channels_only(self):
        """Test 255 - c on color channels with alpha kept."""
        buffer = PixelBuffer.new(1, 1, (10, 20, 30, 40))

        assert invert_colors(buffer).get_pixel(0, 0) == (245, 235, 225, 40)

    def test_involution(self, noise_buffer):
        """Test inverting twice restores the original."""
        assert invert_colors(invert_colors(noise_buffer)) == noise_buffer


# =============================================================================
# Brightness / Contrast Tests
# =============================================================================


class TestBrightness:
    """Tests for adjust_brightness."""

    def test_identity_at_100(self, noise_buffer):
        """Test level 100 leaves the buffer unchanged."""
        assert adjust_brightness(noise_buffer, 100) == noise_buffer

    def test_zero_is_black(self, noise_buffer):
        """Test level 0 gives black with alpha kept."""
        result = adjust_brightness(noise_buffer, 0)

        assert np.all(result.rgb == 0)
        assert np.array_equal(result.alpha, noise_buffer.alpha)

    def test_scaling_saturates(self):
        """Test channels are scaled, rounded half to even and clamped."""
        buffer = PixelBuffer.from_pixels(3, 1, [(100, 3, 200, 255)] * 3)

        result = adjust_brightness(buffer, 200)
        assert result.get_pixel(0, 0) == (200, 6, 255, 255)

        result = adjust_brightness(buffer, 150)
        assert result.get_pixel(0, 0) == (150, 4, 255, 255)

    @pytest.mark.parametrize("level", [-1, 201])
    def test_rejects_out_of_range(self, noise_buffer, level):
        """Test out of range levels are rejected."""
        with pytest.raises(InvalidParameterException):
            adjust_brightness(noise_buffer, level)


class TestContrast:
    """Tests for adjust_contrast."""

    def test_factor_is_one_at_100(self):
        """Test the contrast curve is centered on level 100."""
        assert contrast_factor(100) == 1.0
        assert contrast_factor(150) > 1.0
        assert contrast_factor(50) < 1.0

    def test_identity_at_100(self, noise_buffer):
        """Test level 100 leaves the buffer unchanged."""
        assert adjust_contrast(noise_buffer, 100) == noise_buffer

    def test_midpoint_is_fixed(self, gray_buffer):
        """Test mid-gray is unchanged at any level."""
        buffer = gray_buffer([[128, 128]])

        for level in (0, 50, 150, 200):
            assert grayscale_values(adjust_contrast(buffer, level)).tolist() == [[128, 128]]

    def test_low_contrast_compresses(self, gray_buffer):
        """Test level 0 pulls extremes toward mid-gray."""
        result = grayscale_values(adjust_contrast(gray_buffer([[0, 255]]), 0))

        assert result[0, 0] > 0
        assert result[0, 1] < 255

    def test_high_contrast_stretches(self, gray_buffer):
        """Test level 200 pushes values apart and clamps."""
        result = grayscale_values(adjust_contrast(gray_buffer([[10, 245]]), 200))

        assert result.tolist() == [[0, 255]]

    def test_rejects_out_of_range(self, noise_buffer):
        """Test out of range levels are rejected."""
        with pytest.raises(InvalidParameterException):
            adjust_contrast(noise_buffer, 250)


# =============================================================================
# Color Key Tests
# =============================================================================


class TestColorKey:
    """Tests for apply_color_key."""

    @pytest.fixture
    def keyed_buffer(self):
        """Pixels at distance 0, 30 and 31 from (100, 100, 100)."""
        return PixelBuffer.from_pixels(
            3, 1, [(100, 100, 100, 255), (130, 100, 100, 255), (131, 100, 100, 200)]
        )

    def test_tolerance_is_inclusive(self, keyed_buffer):
        """Test distance equal to tolerance becomes transparent."""
        result = apply_color_key(keyed_buffer, Color(r=100, g=100, b=100), 30)

        assert result.alpha.tolist() == [[0, 0, 200]]
        assert np.array_equal(result.rgb, keyed_buffer.rgb)

    def test_zero_tolerance_exact_match(self, keyed_buffer):
        """Test tolerance 0 only keys the exact color."""
        result = apply_color_key(keyed_buffer, (100, 100, 100), 0)

        assert result.alpha.tolist() == [[0, 255, 200]]

    def test_rejects_invalid_key(self, keyed_buffer):
        """Test key channels outside [0, 255] are rejected."""
        with pytest.raises(InvalidParameterException):
            apply_color_key(keyed_buffer, (300, 0, 0), 10)

    @pytest.mark.parametrize("tolerance", [-0.5, 256])
    def test_rejects_invalid_tolerance(self, keyed_buffer, tolerance):
        """Test out of range tolerance is rejected."""
        with pytest.raises(InvalidParameterException):
            apply_color_key(keyed_buffer, (0, 0, 0), tolerance)
