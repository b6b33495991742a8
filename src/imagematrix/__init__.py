"""
imagematrix - pixel-level image transformation engine.

Stateless operators mapping an RGBA PixelBuffer to a new PixelBuffer, plus a
replayable TransformPipeline for hosts.
"""

from imagematrix.common import Color, ColorScheme, TransformKind
from imagematrix.core import PixelBuffer, sample_color
from imagematrix.exceptions import (
    ImageMatrixException,
    InvalidBufferException,
    InvalidParameterException,
    PipelineStepNotFoundException,
    ProcessingException,
)
from imagematrix.image import (
    TransformPipeline,
    adjust_brightness,
    adjust_contrast,
    apply_canny,
    apply_color_key,
    apply_gaussian_blur,
    apply_rotation,
    apply_segmentation,
    apply_sharpen,
    apply_sobel,
    apply_threshold,
    apply_transform,
    invert_colors,
    to_grayscale,
)

__version__ = "1.0.0"

__all__ = [
    "Color",
    "ColorScheme",
    "TransformKind",
    "PixelBuffer",
    "sample_color",
    "ImageMatrixException",
    "InvalidBufferException",
    "InvalidParameterException",
    "PipelineStepNotFoundException",
    "ProcessingException",
    "TransformPipeline",
    "adjust_brightness",
    "adjust_contrast",
    "apply_canny",
    "apply_color_key",
    "apply_gaussian_blur",
    "apply_rotation",
    "apply_segmentation",
    "apply_sharpen",
    "apply_sobel",
    "apply_threshold",
    "apply_transform",
    "invert_colors",
    "to_grayscale",
]
