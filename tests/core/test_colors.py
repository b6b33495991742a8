"""
Tests for core.colors and common.base modules.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from imagematrix.common.base import Color
from imagematrix.core.colors import (
    color_distance,
    hsv_to_rgb,
    luminance,
    round_half_up,
    saturate,
)


class TestRounding:
    """Tests for the two rounding rules."""

    def test_saturate_clamps_and_rounds_half_to_even(self):
        """Test clamped 8-bit store semantics."""
        values = np.array([0.5, 1.5, 2.5, -3.0, 300.0, 127.4])

        result = saturate(values)

        assert result.dtype == np.uint8
        assert result.tolist() == [0, 2, 2, 0, 255, 127]

    def test_round_half_up(self):
        """Test halves always round up."""
        assert round_half_up(np.array([0.5, 1.5, 2.5, 2.49])).tolist() == [1, 2, 3, 2]


class TestLuminance:
    """Tests for luminance."""

    def test_pure_red(self):
        """Test red luminance is 0.299 * 255."""
        assert luminance(np.array([255, 0, 0])) == pytest.approx(76.245)

    def test_gray_is_unchanged(self):
        """Test luminance of a gray pixel is its level."""
        gray = np.array([[17, 17, 17], [200, 200, 200]])

        assert saturate(luminance(gray)).tolist() == [17, 200]


class TestHsvToRgb:
    """Tests for hsv_to_rgb."""

    @pytest.mark.parametrize(
        "hue, expected",
        [(0, (255, 0, 0)), (120, (0, 255, 0)), (240, (0, 0, 255)), (360, (255, 0, 0))],
    )
    def test_primary_hues(self, hue, expected):
        """Test fully saturated primaries."""
        assert hsv_to_rgb(hue, 1.0, 1.0) == expected

    def test_zero_saturation_is_gray(self):
        """Test achromatic colors round half up."""
        assert hsv_to_rgb(200, 0.0, 0.5) == (128, 128, 128)

    def test_negative_hue_wraps(self):
        """Test negative hues wrap around."""
        assert hsv_to_rgb(-120, 1.0, 1.0) == hsv_to_rgb(240, 1.0, 1.0)


class TestColor:
    """Tests for the Color model and distances."""

    def test_distance(self):
        """Test Euclidean RGB distance."""
        assert Color(r=0, g=0, b=0).distance_to(Color(r=3, g=4, b=0)) == 5.0

    def test_color_distance_array(self):
        """Test vectorized distance matches the model distance."""
        rgb = np.array([[0, 0, 0], [3, 4, 0]])

        assert color_distance(rgb, (0, 0, 0)).tolist() == [0.0, 5.0]

    def test_rejects_out_of_range(self):
        """Test channels are limited to [0, 255]."""
        with pytest.raises(ValidationError):
            Color(r=256, g=0, b=0)

    def test_from_tuple_ignores_alpha(self):
        """Test RGBA tuples are accepted."""
        assert Color.from_tuple((1, 2, 3, 4)).to_tuple() == (1, 2, 3)

    def test_dict_conversion(self):
        """Test dictionary conversion both ways."""
        color = Color.from_dict({"r": 5, "g": 6, "b": 7})

        assert color.to_dict() == {"r": 5, "g": 6, "b": 7}
        assert str(color) == "RGB(5, 6, 7)"
