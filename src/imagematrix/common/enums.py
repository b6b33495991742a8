"""
Centralized enums for the transformation engine.

This module contains all enumeration types used throughout the engine,
providing a single source of truth for enum definitions.
"""

from enum import Enum


# Transform kinds
class TransformKind(str, Enum):
    """Available transform operators."""

    GRAYSCALE = "grayscale"
    THRESHOLD = "threshold"
    INVERT = "invert"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    COLOR_KEY = "color_key"
    SHARPEN = "sharpen"
    GAUSSIAN_BLUR = "gaussian_blur"
    SOBEL = "sobel"
    CANNY = "canny"
    SEGMENTATION = "segmentation"
    ROTATION = "rotation"


# Segmentation enums
class ColorScheme(str, Enum):
    """Segment recoloring schemes."""

    RAINBOW = "rainbow"
    PASTEL = "pastel"
    GRAYSCALE = "grayscale"
    HIGH_CONTRAST = "highContrast"
    PRESERVE_BRIGHTNESS = "preserveBrightness"
    MEAN = "mean"


class MergeMode(str, Enum):
    """Small-region merge strategy."""

    SINGLE_PASS = "single_pass"
    FIXED_POINT = "fixed_point"


# Edge detection enums
class HysteresisMode(str, Enum):
    """Weak-edge linking strategy."""

    SINGLE_PASS = "single_pass"
    FIXED_POINT = "fixed_point"


# Geometry enums
class SamplingMethod(str, Enum):
    """Resampling methods for rotation."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
