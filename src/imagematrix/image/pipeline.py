"""
Transform pipeline with one strongly typed operation per transform kind.

This module follows the Strategy pattern: each transform kind is a separate
operation class bound to its own parameter model, so a step can only be run
with the parameters that belong to it.

The pipeline records every applied step. Operators are not invertible, so
removing a step replays every remaining step from the original buffer.

Usage:
    pipeline = TransformPipeline(buffer)
    pipeline.add(ThresholdParams(threshold=128))
    pipeline.add(CannyParams(low=50, high=150))
    result = pipeline.remove(0)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from imagematrix.common.enums import TransformKind
from imagematrix.config import EngineConfig, get_settings
from imagematrix.core.buffer import PixelBuffer
from imagematrix.exceptions import (
    ErrorMessages,
    ImageMatrixException,
    InvalidParameterException,
    PipelineStepNotFoundException,
    ProcessingException,
)
from imagematrix.image.convolution import apply_gaussian_blur, apply_sharpen, apply_sobel
from imagematrix.image.edges import apply_canny
from imagematrix.image.geometry import apply_rotation
from imagematrix.image.point import (
    adjust_brightness,
    adjust_contrast,
    apply_color_key,
    apply_threshold,
    invert_colors,
    to_grayscale,
)
from imagematrix.image.segmentation import apply_segmentation
from imagematrix.schemas.base import BaseTransformParams
from imagematrix.schemas.params import (
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
)
from imagematrix.utils.decorators import timer

logger = logging.getLogger(__name__)


class TransformOperation(ABC):
    """Abstract base class for transform operations."""

    params_model = BaseTransformParams

    @abstractmethod
    def apply(
        self, buffer: PixelBuffer, params: BaseTransformParams, engine: EngineConfig
    ) -> PixelBuffer:
        """
        Apply operation to buffer.

        Args:
            buffer: Input buffer
            params: Operation parameters (instance of params_model)
            engine: Engine configuration supplying default modes

        Returns:
            New buffer
        """
        pass

    @property
    def kind(self) -> TransformKind:
        """Transform kind handled by this operation."""
        return self.params_model.kind

    @property
    def name(self) -> str:
        """Operation name for logging and tracking."""
        return self.kind.value


class GrayscaleOperation(TransformOperation):
    """Convert buffer to grayscale."""

    params_model = GrayscaleParams

    def apply(self, buffer, params: GrayscaleParams, engine):
        return to_grayscale(buffer)


class ThresholdOperation(TransformOperation):
    """Binarize on luminance."""

    params_model = ThresholdParams

    def apply(self, buffer, params: ThresholdParams, engine):
        return apply_threshold(buffer, params.threshold)


class InvertOperation(TransformOperation):
    """Invert color channels."""

    params_model = InvertParams

    def apply(self, buffer, params: InvertParams, engine):
        return invert_colors(buffer)


class BrightnessOperation(TransformOperation):
    """Scale brightness."""

    params_model = BrightnessParams

    def apply(self, buffer, params: BrightnessParams, engine):
        return adjust_brightness(buffer, params.level)


class ContrastOperation(TransformOperation):
    """Adjust contrast."""

    params_model = ContrastParams

    def apply(self, buffer, params: ContrastParams, engine):
        return adjust_contrast(buffer, params.level)


class ColorKeyOperation(TransformOperation):
    """Make a key color transparent."""

    params_model = ColorKeyParams

    def apply(self, buffer, params: ColorKeyParams, engine):
        return apply_color_key(buffer, params.key, params.tolerance)


class SharpenOperation(TransformOperation):
    """Sharpen interior pixels."""

    params_model = SharpenParams

    def apply(self, buffer, params: SharpenParams, engine):
        return apply_sharpen(buffer, params.amount)


class GaussianBlurOperation(TransformOperation):
    """Apply the fixed 5x5 Gaussian blur."""

    params_model = GaussianBlurParams

    def apply(self, buffer, params: GaussianBlurParams, engine):
        return apply_gaussian_blur(buffer)


class SobelOperation(TransformOperation):
    """Sobel edge magnitude."""

    params_model = SobelParams

    def apply(self, buffer, params: SobelParams, engine):
        return apply_sobel(buffer)


class CannyOperation(TransformOperation):
    """Canny edge detection."""

    params_model = CannyParams

    def apply(self, buffer, params: CannyParams, engine):
        mode = params.hysteresis_mode or engine.hysteresis_mode
        return apply_canny(buffer, params.low, params.high, hysteresis_mode=mode)


class SegmentationOperation(TransformOperation):
    """Color segmentation."""

    params_model = SegmentationParams

    def apply(self, buffer, params: SegmentationParams, engine):
        return apply_segmentation(
            buffer,
            params.tolerance,
            params.min_size,
            params.color_scheme,
            merge_mode=params.merge_mode or engine.merge_mode,
            seed=params.seed,
        )


class RotationOperation(TransformOperation):
    """Rotate about the center."""

    params_model = RotationParams

    def apply(self, buffer, params: RotationParams, engine):
        sampling = params.sampling or engine.rotation_sampling
        return apply_rotation(buffer, params.angle, sampling, params.background)


OPERATIONS: Dict[TransformKind, TransformOperation] = {
    op.kind: op
    for op in (
        GrayscaleOperation(),
        ThresholdOperation(),
        InvertOperation(),
        BrightnessOperation(),
        ContrastOperation(),
        ColorKeyOperation(),
        SharpenOperation(),
        GaussianBlurOperation(),
        SobelOperation(),
        CannyOperation(),
        SegmentationOperation(),
        RotationOperation(),
    )
}


def get_operation(params: BaseTransformParams) -> TransformOperation:
    """
    Look up the operation bound to a parameter model.

    Raises:
        InvalidParameterException: If params is not a transform parameter model
    """
    operation = OPERATIONS.get(getattr(params, "kind", None))
    if operation is None or not isinstance(params, operation.params_model):
        raise InvalidParameterException(
            "params", type(params).__name__, "not a transform parameter model"
        )
    return operation


def apply_transform(
    buffer: PixelBuffer, params: BaseTransformParams, engine: Optional[EngineConfig] = None
) -> PixelBuffer:
    """
    Run the single operation selected by a parameter model.

    Args:
        buffer: Input buffer
        params: Parameter model of the transform to run
        engine: Engine configuration (defaults to the cached settings)

    Returns:
        New buffer

    Raises:
        ImageMatrixException: Parameter-domain violations propagate unchanged
        ProcessingException: Any other failure inside the operator
    """
    operation = get_operation(params)
    engine = engine or get_settings().engine

    try:
        return operation.apply(buffer, params, engine)
    except ImageMatrixException:
        raise
    except Exception as e:
        logger.error(f"Failed to apply {operation.name}: {e}")
        raise ProcessingException(operation.name, str(e)) from e


@dataclass(frozen=True)
class TransformStep:
    """One applied transform and the buffer it produced."""

    params: BaseTransformParams
    result: PixelBuffer
    duration_ms: float = 0.0

    @property
    def kind(self) -> TransformKind:
        return self.params.kind

    @property
    def label(self) -> str:
        return self.params.describe()


def replay(
    original: PixelBuffer,
    params_list: Iterable[BaseTransformParams],
    engine: Optional[EngineConfig] = None,
) -> List[TransformStep]:
    """
    Apply a sequence of transforms from scratch.

    Args:
        original: Starting buffer
        params_list: Transforms in application order
        engine: Engine configuration

    Returns:
        One step per transform, each holding its result
    """
    engine = engine or get_settings().engine
    steps: List[TransformStep] = []
    current = original
    for params in params_list:
        with timer() as t:
            current = apply_transform(current, params, engine)
        steps.append(TransformStep(params=params, result=current, duration_ms=t["ms"]))
        logger.debug(f"Applied {params.describe()} in {t['ms']:.1f}ms")
    return steps


class TransformPipeline:
    """
    Ordered list of transforms applied to an original buffer.

    The original buffer is never modified. Each step's output is the input
    of the next one.
    """

    def __init__(self, original: PixelBuffer, engine: Optional[EngineConfig] = None):
        """
        Initialize pipeline.

        Args:
            original: Decoded source buffer supplied by the host
            engine: Engine configuration (defaults to the cached settings)
        """
        self._original = original
        self._engine = engine or get_settings().engine
        self._steps: List[TransformStep] = []
        logger.info(f"Transform pipeline created for {original}")

    @property
    def original(self) -> PixelBuffer:
        return self._original

    @property
    def current(self) -> PixelBuffer:
        """Result of the last step, or the original when empty."""
        return self._steps[-1].result if self._steps else self._original

    @property
    def steps(self) -> List[TransformStep]:
        return list(self._steps)

    @property
    def kinds(self) -> List[TransformKind]:
        return [step.kind for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def add(self, params: BaseTransformParams) -> TransformStep:
        """
        Apply a transform to the current buffer and record it.

        Args:
            params: Parameter model of the transform

        Returns:
            The recorded step

        Raises:
            InvalidParameterException: If the pipeline is full or parameters are invalid
        """
        max_steps = self._engine.max_pipeline_steps
        if len(self._steps) >= max_steps:
            raise InvalidParameterException(
                "steps", len(self._steps), ErrorMessages.PIPELINE_FULL.format(max=max_steps)
            )

        step = replay(self.current, [params], self._engine)[0]
        self._steps.append(step)
        logger.info(f"Step {len(self._steps)}: {step.label} ({step.duration_ms:.1f}ms)")
        return step

    def remove(self, index: int) -> PixelBuffer:
        """
        Remove a step and replay the remaining ones from the original buffer.

        Args:
            index: Zero-based step index

        Returns:
            New current buffer

        Raises:
            PipelineStepNotFoundException: If index is out of range
        """
        if not 0 <= index < len(self._steps):
            raise PipelineStepNotFoundException(index, len(self._steps))

        removed = self._steps[index]
        remaining = [step.params for i, step in enumerate(self._steps) if i != index]
        logger.info(f"Removing step {index} ({removed.label}), replaying {len(remaining)} steps")

        self._steps = replay(self._original, remaining, self._engine)
        return self.current

    def reset(self) -> PixelBuffer:
        """Drop every step and return the original buffer."""
        logger.info(f"Pipeline reset ({len(self._steps)} steps dropped)")
        self._steps = []
        return self._original
