"""
Transform parameters for all operators.

Centralized location for the Pydantic parameter classes, one per transform
kind. Field ranges are the host-facing domains; the defaults are the values
the editor starts with.
"""

from typing import Dict, Optional, Tuple, Type

from pydantic import Field, model_validator

from imagematrix.common.base import Color
from imagematrix.common.constants import (
    ConvolutionConstants,
    EdgeConstants,
    GeometryConstants,
    PointConstants,
    SegmentationConstants,
)
from imagematrix.common.enums import (
    ColorScheme,
    HysteresisMode,
    MergeMode,
    SamplingMethod,
    TransformKind,
)
from imagematrix.schemas.base import BaseTransformParams


class GrayscaleParams(BaseTransformParams):
    """Grayscale conversion (no parameters)."""

    kind = TransformKind.GRAYSCALE


class InvertParams(BaseTransformParams):
    """Color inversion (no parameters)."""

    kind = TransformKind.INVERT


class ThresholdParams(BaseTransformParams):
    """Binary threshold on luminance."""

    kind = TransformKind.THRESHOLD

    threshold: int = Field(
        default=PointConstants.THRESHOLD_DEFAULT,
        ge=PointConstants.THRESHOLD_MIN,
        le=PointConstants.THRESHOLD_MAX,
        description="Luminance threshold (inclusive: values >= threshold become white)",
    )


class BrightnessParams(BaseTransformParams):
    """Brightness scaling."""

    kind = TransformKind.BRIGHTNESS

    level: int = Field(
        default=PointConstants.LEVEL_IDENTITY,
        ge=PointConstants.LEVEL_MIN,
        le=PointConstants.LEVEL_MAX,
        description="Brightness level (100 = unchanged)",
    )


class ContrastParams(BaseTransformParams):
    """Contrast adjustment."""

    kind = TransformKind.CONTRAST

    level: int = Field(
        default=PointConstants.LEVEL_IDENTITY,
        ge=PointConstants.LEVEL_MIN,
        le=PointConstants.LEVEL_MAX,
        description="Contrast level (100 = unchanged)",
    )


class ColorKeyParams(BaseTransformParams):
    """Color-key transparency."""

    kind = TransformKind.COLOR_KEY

    key: Color = Field(..., description="Color to make transparent")
    tolerance: float = Field(
        default=PointConstants.COLOR_KEY_TOLERANCE_DEFAULT,
        ge=PointConstants.COLOR_KEY_TOLERANCE_MIN,
        le=PointConstants.COLOR_KEY_TOLERANCE_MAX,
        description="Maximum RGB distance to the key (inclusive)",
    )


class SharpenParams(BaseTransformParams):
    """Kernel sharpening."""

    kind = TransformKind.SHARPEN

    amount: float = Field(
        default=ConvolutionConstants.SHARPEN_DEFAULT,
        ge=ConvolutionConstants.SHARPEN_MIN,
        le=ConvolutionConstants.SHARPEN_MAX,
        description="Sharpening intensity (0 = unchanged)",
    )


class GaussianBlurParams(BaseTransformParams):
    """Fixed 5x5 Gaussian blur (no parameters)."""

    kind = TransformKind.GAUSSIAN_BLUR


class SobelParams(BaseTransformParams):
    """Sobel edge magnitude (no parameters)."""

    kind = TransformKind.SOBEL


class CannyParams(BaseTransformParams):
    """Canny edge detection."""

    kind = TransformKind.CANNY

    low: int = Field(
        default=EdgeConstants.CANNY_LOW_DEFAULT,
        ge=EdgeConstants.THRESHOLD_MIN,
        le=EdgeConstants.THRESHOLD_MAX,
        description="Weak edge threshold",
    )
    high: int = Field(
        default=EdgeConstants.CANNY_HIGH_DEFAULT,
        ge=EdgeConstants.THRESHOLD_MIN,
        le=EdgeConstants.THRESHOLD_MAX,
        description="Strong edge threshold",
    )
    hysteresis_mode: Optional[HysteresisMode] = Field(
        default=None, description="Weak-edge linking (None = engine configuration)"
    )

    @model_validator(mode="after")
    def validate_order(self):
        """Reject low > high (never swapped)."""
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must not exceed high ({self.high})")
        return self


class SegmentationParams(BaseTransformParams):
    """Color segmentation."""

    kind = TransformKind.SEGMENTATION

    tolerance: float = Field(
        default=SegmentationConstants.TOLERANCE_DEFAULT,
        ge=SegmentationConstants.TOLERANCE_MIN,
        le=SegmentationConstants.TOLERANCE_MAX,
        description="Flood-fill color tolerance",
    )
    min_size: int = Field(
        default=SegmentationConstants.MIN_SIZE_DEFAULT,
        ge=SegmentationConstants.MIN_SIZE_MIN,
        le=SegmentationConstants.MIN_SIZE_MAX,
        description="Minimum region size in pixels",
    )
    color_scheme: str = Field(
        default=ColorScheme.RAINBOW.value,
        description="Recoloring scheme (unknown names behave as rainbow)",
    )
    merge_mode: Optional[MergeMode] = Field(
        default=None, description="Small-region merging (None = engine configuration)"
    )
    seed: Optional[int] = Field(default=None, description="Random seed for random-hue schemes")


class RotationParams(BaseTransformParams):
    """Rotation about the image center."""

    kind = TransformKind.ROTATION

    angle: float = Field(
        default=0.0,
        ge=GeometryConstants.ANGLE_MIN,
        le=GeometryConstants.ANGLE_MAX,
        description="Angle in degrees (positive = counter-clockwise)",
    )
    sampling: Optional[SamplingMethod] = Field(
        default=None, description="Resampling method (None = engine configuration)"
    )
    background: Tuple[int, int, int, int] = Field(
        default=GeometryConstants.BACKGROUND, description="RGBA fill for uncovered pixels"
    )


PARAMS_BY_KIND: Dict[TransformKind, Type[BaseTransformParams]] = {
    model.kind: model
    for model in (
        GrayscaleParams,
        ThresholdParams,
        InvertParams,
        BrightnessParams,
        ContrastParams,
        ColorKeyParams,
        SharpenParams,
        GaussianBlurParams,
        SobelParams,
        CannyParams,
        SegmentationParams,
        RotationParams,
    )
}


def params_from_dict(data: Dict) -> BaseTransformParams:
    """
    Build the parameter model named by data["kind"].

    Args:
        data: Dictionary as produced by BaseTransformParams.to_dict()

    Returns:
        Validated parameter model

    Raises:
        ValueError: If the kind is missing or unknown
        pydantic.ValidationError: If the parameters are invalid
    """
    data = dict(data)
    kind = data.pop("kind", None)
    if kind is None:
        raise ValueError("Missing transform kind")
    return PARAMS_BY_KIND[TransformKind(kind)](**data)
