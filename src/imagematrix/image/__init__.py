"""
Image transformation operators - functional architecture.

This package provides the operators as pure functions:
- point: grayscale, threshold, invert, brightness, contrast, color key
- convolution: sharpen, Gaussian blur, Sobel
- edges: Canny (double threshold + hysteresis)
- segmentation: flood-fill regions, small-region merging, recoloring
- geometry: rotation
- pipeline: typed operations and the replayable transform pipeline
"""

from imagematrix.image.convolution import apply_gaussian_blur, apply_sharpen, apply_sobel
from imagematrix.image.edges import apply_canny, apply_hysteresis, classify_gradient
from imagematrix.image.geometry import apply_rotation
from imagematrix.image.pipeline import (
    TransformPipeline,
    TransformStep,
    apply_transform,
    replay,
)
from imagematrix.image.point import (
    adjust_brightness,
    adjust_contrast,
    apply_color_key,
    apply_threshold,
    invert_colors,
    to_grayscale,
)
from imagematrix.image.segmentation import (
    RegionSegmenter,
    SegmentationResult,
    apply_segmentation,
    segment_regions,
)

__all__ = [
    # Point operators
    "to_grayscale",
    "apply_threshold",
    "invert_colors",
    "adjust_brightness",
    "adjust_contrast",
    "apply_color_key",
    # Convolution operators
    "apply_sharpen",
    "apply_gaussian_blur",
    "apply_sobel",
    # Edge detection
    "apply_canny",
    "apply_hysteresis",
    "classify_gradient",
    # Segmentation
    "RegionSegmenter",
    "SegmentationResult",
    "apply_segmentation",
    "segment_regions",
    # Geometry
    "apply_rotation",
    # Pipeline
    "TransformPipeline",
    "TransformStep",
    "apply_transform",
    "replay",
]
