"""
Tests for image.pipeline module.

Tests the typed operations, apply_transform and the replayable
TransformPipeline.
"""

import pytest

from imagematrix.common.base import Color
from imagematrix.common.enums import HysteresisMode, TransformKind
from imagematrix.config import EngineConfig
from imagematrix.exceptions import (
    InvalidParameterException,
    PipelineStepNotFoundException,
    ProcessingException,
)
from imagematrix.image.edges import apply_canny
from imagematrix.image.pipeline import (
    OPERATIONS,
    TransformPipeline,
    apply_transform,
    get_operation,
    replay,
)
from imagematrix.image.point import apply_threshold, invert_colors, to_grayscale
from imagematrix.schemas.params import (
    CannyParams,
    ColorKeyParams,
    GrayscaleParams,
    InvertParams,
    RotationParams,
    SegmentationParams,
    ThresholdParams,
)


@pytest.fixture
def pipeline(noise_buffer):
    """Pipeline over the noise buffer with default engine settings."""
    return TransformPipeline(noise_buffer, EngineConfig())


# =============================================================================
# Operation Registry Tests
# =============================================================================


class TestOperations:
    """Tests for the operation registry."""

    def test_every_kind_registered(self):
        """Test each transform kind has exactly one operation."""
        assert set(OPERATIONS) == set(TransformKind)

    def test_operation_name(self):
        """Test operation names follow the kind value."""
        assert get_operation(ThresholdParams()).name == "threshold"

    def test_rejects_non_params(self, noise_buffer):
        """Test arbitrary objects cannot select an operation."""
        with pytest.raises(InvalidParameterException):
            apply_transform(noise_buffer, {"kind": "invert"})

    def test_apply_transform_dispatches(self, noise_buffer):
        """Test parameters select the matching operator."""
        result = apply_transform(noise_buffer, ThresholdParams(threshold=90), EngineConfig())

        assert result == apply_threshold(noise_buffer, 90)

    def test_color_key_operation(self, noise_buffer):
        """Test the color key model is forwarded to the operator."""
        params = ColorKeyParams(key=Color(r=128, g=128, b=128), tolerance=255)

        result = apply_transform(noise_buffer, params, EngineConfig())

        assert result.alpha.max() == 0

    def test_engine_mode_used_when_unset(self, noise_buffer):
        """Test the engine configuration fills in unset modes."""
        engine = EngineConfig(hysteresis_mode=HysteresisMode.FIXED_POINT)

        result = apply_transform(noise_buffer, CannyParams(low=20, high=200), engine)

        assert result == apply_canny(noise_buffer, 20, 200, HysteresisMode.FIXED_POINT)

    def test_explicit_mode_overrides_engine(self, noise_buffer):
        """Test a mode set on the parameters wins over the engine default."""
        engine = EngineConfig(hysteresis_mode=HysteresisMode.FIXED_POINT)
        params = CannyParams(low=20, high=200, hysteresis_mode=HysteresisMode.SINGLE_PASS)

        assert apply_transform(noise_buffer, params, engine) == apply_canny(noise_buffer, 20, 200)

    def test_unexpected_failure_wrapped(self, noise_buffer, monkeypatch):
        """Test operator crashes surface as ProcessingException."""

        def boom(buffer, params, engine):
            raise RuntimeError("boom")

        monkeypatch.setattr(OPERATIONS[TransformKind.INVERT], "apply", boom)

        with pytest.raises(ProcessingException) as exc_info:
            apply_transform(noise_buffer, InvertParams(), EngineConfig())
        assert exc_info.value.details["operation"] == "invert"


# =============================================================================
# Pipeline Tests
# =============================================================================


class TestTransformPipeline:
    """Tests for TransformPipeline."""

    def test_empty_pipeline(self, pipeline, noise_buffer):
        """Test an empty pipeline yields the original."""
        assert len(pipeline) == 0
        assert pipeline.current is noise_buffer
        assert pipeline.original is noise_buffer

    def test_add_chains_steps(self, pipeline, noise_buffer):
        """Test each step consumes the previous result."""
        pipeline.add(ThresholdParams(threshold=128))
        step = pipeline.add(InvertParams())

        expected = invert_colors(apply_threshold(noise_buffer, 128))
        assert step.result == expected
        assert pipeline.current == expected
        assert pipeline.kinds == [TransformKind.THRESHOLD, TransformKind.INVERT]
        assert step.duration_ms >= 0

    def test_step_label(self, pipeline):
        """Test steps describe their parameters."""
        step = pipeline.add(ThresholdParams(threshold=128))

        assert step.kind == TransformKind.THRESHOLD
        assert step.label == "threshold(threshold=128)"

    def test_original_never_modified(self, pipeline, noise_buffer):
        """Test the original buffer survives any chain."""
        before = noise_buffer.copy()

        pipeline.add(GrayscaleParams())
        pipeline.add(RotationParams(angle=30))
        pipeline.add(SegmentationParams(min_size=10))

        assert noise_buffer == before

    def test_remove_replays_from_original(self, pipeline, noise_buffer):
        """Test removing a step equals applying the remaining steps from scratch."""
        pipeline.add(GrayscaleParams())
        pipeline.add(InvertParams())
        pipeline.add(ThresholdParams(threshold=100))

        result = pipeline.remove(1)

        assert result == apply_threshold(to_grayscale(noise_buffer), 100)
        assert pipeline.kinds == [TransformKind.GRAYSCALE, TransformKind.THRESHOLD]
        assert pipeline.steps[0].result == to_grayscale(noise_buffer)

    def test_remove_last_step_restores_original(self, pipeline, noise_buffer):
        """Test removing the only step returns the original."""
        pipeline.add(InvertParams())

        assert pipeline.remove(0) == noise_buffer
        assert len(pipeline) == 0

    @pytest.mark.parametrize("index", [-1, 2, 10])
    def test_remove_invalid_index(self, pipeline, index):
        """Test unknown step indices are rejected."""
        pipeline.add(InvertParams())
        pipeline.add(InvertParams())

        with pytest.raises(PipelineStepNotFoundException):
            pipeline.remove(index)

    def test_remove_invalid_index_is_index_error(self, pipeline):
        """Test step lookup errors can be caught as IndexError."""
        with pytest.raises(IndexError):
            pipeline.remove(0)

    def test_reset(self, pipeline, noise_buffer):
        """Test reset drops every step."""
        pipeline.add(InvertParams())

        assert pipeline.reset() is noise_buffer
        assert len(pipeline) == 0
        assert pipeline.current is noise_buffer

    def test_max_steps(self, noise_buffer):
        """Test the pipeline refuses steps beyond the configured maximum."""
        pipeline = TransformPipeline(noise_buffer, EngineConfig(max_pipeline_steps=2))
        pipeline.add(InvertParams())
        pipeline.add(InvertParams())

        with pytest.raises(InvalidParameterException):
            pipeline.add(InvertParams())
        assert len(pipeline) == 2

    def test_failed_step_not_recorded(self, pipeline):
        """Test a rejected step leaves the pipeline unchanged."""
        pipeline.add(InvertParams())

        with pytest.raises(InvalidParameterException):
            pipeline.add(RotationParams.model_construct(angle=float("nan")))
        assert len(pipeline) == 1

    def test_uses_cached_settings_by_default(self, noise_buffer, monkeypatch):
        """Test the engine configuration comes from settings when omitted."""
        monkeypatch.setenv("IMX_ENGINE_MAX_PIPELINE_STEPS", "1")

        pipeline = TransformPipeline(noise_buffer)
        pipeline.add(InvertParams())

        with pytest.raises(InvalidParameterException):
            pipeline.add(InvertParams())


class TestReplay:
    """Tests for replay."""

    def test_replay_matches_pipeline(self, pipeline, noise_buffer):
        """Test replay gives the same results as incremental adds."""
        params = [GrayscaleParams(), ThresholdParams(threshold=60), InvertParams()]
        for p in params:
            pipeline.add(p)

        steps = replay(noise_buffer, params, EngineConfig())

        assert len(steps) == 3
        assert [s.result for s in steps] == [s.result for s in pipeline.steps]

    def test_replay_empty(self, noise_buffer):
        """Test an empty replay produces no steps."""
        assert replay(noise_buffer, [], EngineConfig()) == []
