"""
Parameter schemas - one Pydantic model per transform kind.
"""

from imagematrix.schemas.base import BaseTransformParams
from imagematrix.schemas.params import (
    PARAMS_BY_KIND,
    BrightnessParams,
    CannyParams,
    ColorKeyParams,
    ContrastParams,
    GaussianBlurParams,
    GrayscaleParams,
    InvertParams,
    RotationParams,
    SegmentationParams,
    SharpenParams,
    SobelParams,
    ThresholdParams,
    params_from_dict,
)

__all__ = [
    "BaseTransformParams",
    "BrightnessParams",
    "CannyParams",
    "ColorKeyParams",
    "ContrastParams",
    "GaussianBlurParams",
    "GrayscaleParams",
    "InvertParams",
    "PARAMS_BY_KIND",
    "RotationParams",
    "SegmentationParams",
    "SharpenParams",
    "SobelParams",
    "ThresholdParams",
    "params_from_dict",
]
