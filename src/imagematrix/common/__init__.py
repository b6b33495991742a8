"""
Common package - fundamental types without engine dependencies.

This package contains basic types that are used throughout the engine:
- Enums (TransformKind, ColorScheme, etc.)
- Constants (ImageConstants, SegmentationConstants, etc.)
- Base models (Color)

IMPORTANT: This package must NOT import from any other engine packages
(core, image, schemas) to avoid circular dependencies.
"""

# Export base models
from imagematrix.common.base import Color

# Export all constants
from imagematrix.common.constants import (
    ConvolutionConstants,
    EdgeConstants,
    GeometryConstants,
    ImageConstants,
    PipelineConstants,
    PointConstants,
    SegmentationConstants,
    SystemConstants,
)

# Export all enums
from imagematrix.common.enums import (
    ColorScheme,
    HysteresisMode,
    MergeMode,
    SamplingMethod,
    TransformKind,
)

__all__ = [
    # Enums
    "ColorScheme",
    "HysteresisMode",
    "MergeMode",
    "SamplingMethod",
    "TransformKind",
    # Constants
    "ConvolutionConstants",
    "EdgeConstants",
    "GeometryConstants",
    "ImageConstants",
    "PipelineConstants",
    "PointConstants",
    "SegmentationConstants",
    "SystemConstants",
    # Base models
    "Color",
]
