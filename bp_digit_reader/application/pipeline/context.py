"""
Pipeline Context

Carries state through the reading stages of a single frame.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from datetime import datetime
import time
import uuid

from ...domain.value_objects.detection_box import DetectionBox
from ...domain.value_objects.model_metadata import ModelMetadata, DetectionThresholds
from ...domain.entities.bp_reading import BPReading
from ...domain.entities.value_group import ValueGroup
from ...domain.entities.detection_result import (
    DetectionResult,
    DetectionStatus,
    PipelineStage,
    StageStatus,
)
from ...domain.services.tensor_decoder import DecodeOutcome


@dataclass
class StageMetrics:
    """
    Timing of one stage within a frame.

    Durations are measured with ``time.perf_counter``.
    """

    stage: PipelineStage
    status: StageStatus = StageStatus.PENDING
    started: Optional[float] = None
    duration_ms: float = 0.0

    def start(self) -> None:
        self.started = time.perf_counter()

    def finish(self) -> None:
        self.status = StageStatus.COMPLETED
        if self.started is not None:
            self.duration_ms = (time.perf_counter() - self.started) * 1000


@dataclass
class PipelineContext:
    """
    Context object passed between pipeline stages.

    Each stage reads the previous stage's output from here and writes its
    own. Stage outputs are fresh objects; no stage mutates another's data.

    Attributes:
        request_id: Unique identifier for this frame
        raw_output: Output tensor as received from the engine
        metadata: Shapes and labels of the model
        thresholds: Pipeline constants

        decode_outcome: Result of the decode stage
        boxes: Post-suppression detections
        groups: Value groups (assembled once the assembly stage ran)
        reading: Routed systolic/diastolic/pulse triple

        terminal_status: Set when a stage ends the run early
    """

    # Input
    raw_output: Any = None
    metadata: ModelMetadata = field(default_factory=ModelMetadata.unavailable)
    thresholds: DetectionThresholds = field(default_factory=DetectionThresholds)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Stage results
    decode_outcome: Optional[DecodeOutcome] = None
    boxes: List[DetectionBox] = field(default_factory=list)
    groups: List[ValueGroup] = field(default_factory=list)
    reading: BPReading = field(default_factory=BPReading.zero)

    # Execution metadata
    created_at: datetime = field(default_factory=datetime.now)
    stage_metrics: Dict[PipelineStage, StageMetrics] = field(default_factory=dict)
    current_stage: Optional[PipelineStage] = None

    # Control flag
    terminal_status: Optional[DetectionStatus] = None

    @property
    def is_finished(self) -> bool:
        """True once a stage has ended the run early."""
        return self.terminal_status is not None

    def finish_early(self, status: DetectionStatus) -> None:
        """Stop the run with an UNAVAILABLE or EMPTY outcome."""
        self.terminal_status = status

    def start_stage(self, stage: PipelineStage) -> None:
        """Mark a stage as started."""
        self.current_stage = stage
        self.stage_metrics[stage] = StageMetrics(stage=stage)
        self.stage_metrics[stage].start()

    def finish_stage(self, stage: PipelineStage) -> None:
        """Mark a stage as finished."""
        if stage in self.stage_metrics:
            self.stage_metrics[stage].finish()

    def skip_stage(self, stage: PipelineStage) -> None:
        self.stage_metrics[stage] = StageMetrics(stage=stage, status=StageStatus.SKIPPED)

    def get_stage_duration(self, stage: PipelineStage) -> float:
        """Get execution time for a stage in milliseconds."""
        if stage in self.stage_metrics:
            return self.stage_metrics[stage].duration_ms
        return 0.0

    @property
    def stage_timings(self) -> Dict[str, float]:
        return {
            stage.value: metrics.duration_ms
            for stage, metrics in self.stage_metrics.items()
            if metrics.status == StageStatus.COMPLETED
        }

    @property
    def total_duration_ms(self) -> float:
        """Get total pipeline execution time in milliseconds."""
        return sum(m.duration_ms for m in self.stage_metrics.values())

    def to_detection_result(self) -> DetectionResult:
        """
        Convert context to a DetectionResult.

        Returns:
            UNAVAILABLE or EMPTY when a stage finished the run early,
            otherwise DETECTED with boxes, groups and reading
        """
        if self.terminal_status == DetectionStatus.UNAVAILABLE:
            return DetectionResult.unavailable()
        if self.terminal_status == DetectionStatus.EMPTY:
            return DetectionResult.empty(stage_timings=self.stage_timings)

        return DetectionResult.detected(
            boxes=self.boxes,
            groups=self.groups,
            reading=self.reading,
            stage_timings=self.stage_timings,
        )

    def __str__(self) -> str:
        return (
            f"PipelineContext(id={self.request_id[:8]}..., "
            f"stages={len(self.stage_metrics)}, boxes={len(self.boxes)})"
        )

    @classmethod
    def create(
        cls,
        raw_output: Any,
        metadata: ModelMetadata,
        thresholds: Optional[DetectionThresholds] = None
    ) -> "PipelineContext":
        """
        Create a new pipeline context.

        Args:
            raw_output: Dequantized output tensor of one frame
            metadata: Shapes and labels of the model
            thresholds: Pipeline constants (defaults when omitted)

        Returns:
            Initialized PipelineContext
        """
        return cls(
            raw_output=raw_output,
            metadata=metadata,
            thresholds=thresholds or DetectionThresholds(),
        )
