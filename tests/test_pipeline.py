import numpy as np
import pytest

from bp_digit_reader.application.pipeline import ReadingPipeline, PipelineConfig
from bp_digit_reader.application.pipeline.stages import StageConfig
from bp_digit_reader.domain.entities.detection_result import DetectionStatus, PipelineStage
from bp_digit_reader.domain.value_objects.model_metadata import (
    DetectionThresholds,
    ModelMetadata,
)

from conftest import MARKER


def test_reads_all_three_values(metadata, display_tensor):
    result = ReadingPipeline().run(display_tensor, metadata)

    assert result.status == DetectionStatus.DETECTED
    assert result.values == (90, 65, 72)
    assert result.reading.systolic == 90
    assert len(result.boxes) == 9
    assert sorted(g.value for g in result.groups) == [65, 72, 90]


def test_top_group_aggregates_confidence(metadata, display_tensor):
    result = ReadingPipeline().run(display_tensor, metadata)

    top = min(result.groups, key=lambda g: g.marker.y1)
    assert top.text == "90"
    assert top.average_confidence == pytest.approx(0.7)


def test_runs_are_idempotent(metadata, display_tensor):
    pipeline = ReadingPipeline()

    first = pipeline.run(display_tensor, metadata)
    second = pipeline.run(display_tensor.copy(), metadata)

    assert first.status == second.status
    assert first.boxes == second.boxes
    assert first.groups == second.groups
    assert first.reading == second.reading


def test_empty_tensor_is_distinct_from_zero_reading(metadata, tensor_builder):
    pipeline = ReadingPipeline()
    lone_marker = tensor_builder([(0.5, 0.5, 0.2, 0.2, MARKER, 0.9)])

    empty = pipeline.run(tensor_builder([]), metadata)
    partial = pipeline.run(lone_marker, metadata)

    assert empty.status == DetectionStatus.EMPTY
    assert empty.is_empty
    assert partial.status == DetectionStatus.DETECTED
    assert partial.values == empty.values == (0, 0, 0)


def test_unknown_metadata_is_unavailable(display_tensor):
    result = ReadingPipeline().run(display_tensor, ModelMetadata.unavailable())

    assert result.status == DetectionStatus.UNAVAILABLE
    assert not result.is_available
    assert result.stage_timings == {}


def test_stage_timings_cover_every_stage(metadata, display_tensor):
    pipeline = ReadingPipeline()

    result = pipeline.run(display_tensor, metadata)

    assert pipeline.stage_count == 5
    assert set(result.stage_timings) == {stage.value for stage in PipelineStage}
    assert all(duration >= 0.0 for duration in result.stage_timings.values())


def test_empty_run_stops_after_decode(metadata, tensor_builder):
    result = ReadingPipeline().run(tensor_builder([]), metadata)

    assert set(result.stage_timings) == {PipelineStage.DECODE.value}


def test_run_partial_stops_before_assembly(metadata, display_tensor):
    context = ReadingPipeline().run_partial(display_tensor, metadata, PipelineStage.GROUPING)

    assert len(context.groups) == 3
    assert all(g.value == 0 for g in context.groups)
    assert context.reading.is_zero


def test_disabled_routing_leaves_reading_zero(metadata, display_tensor):
    config = PipelineConfig(stages={PipelineStage.ROUTING: StageConfig(enabled=False)})

    result = ReadingPipeline(config).run(display_tensor, metadata)

    assert result.status == DetectionStatus.DETECTED
    assert result.values == (0, 0, 0)
    assert sorted(g.value for g in result.groups) == [65, 72, 90]


def test_confidence_threshold_comes_from_config(metadata, display_tensor):
    config = PipelineConfig(thresholds=DetectionThresholds(confidence_threshold=0.95))

    result = ReadingPipeline(config).run(display_tensor, metadata)

    assert result.status == DetectionStatus.EMPTY


def test_pipeline_accepts_float64_input(metadata, display_tensor):
    result = ReadingPipeline().run(display_tensor.astype(np.float64), metadata)

    assert result.values == (90, 65, 72)
