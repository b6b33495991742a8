"""
Core data model and helpers.

- buffer: PixelBuffer and single-pixel color sampling
- colors: luminance, RGB distance, HSV conversion, rounding rules
- patterns: synthetic buffers
"""

from imagematrix.core.buffer import PixelBuffer, sample_color
from imagematrix.core.colors import color_distance, hsv_to_rgb, luminance, saturate

__all__ = [
    "PixelBuffer",
    "sample_color",
    "color_distance",
    "hsv_to_rgb",
    "luminance",
    "saturate",
]
