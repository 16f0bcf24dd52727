"""
Pipeline Orchestrator

Runs the reading stages over one output tensor.
Flow: DECODE -> SUPPRESSION -> GROUPING -> ASSEMBLY -> ROUTING
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
import logging
import time

from .context import PipelineContext
from .stages import (
    PipelineStageExecutor,
    StageConfig,
    DecodeStage,
    SuppressionStage,
    GroupingStage,
    AssemblyStage,
    RoutingStage,
)
from ...domain.value_objects.model_metadata import ModelMetadata, DetectionThresholds
from ...domain.entities.detection_result import DetectionResult, PipelineStage


logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """
    Configuration for the reading pipeline.

    Attributes:
        thresholds: Pipeline constants shared by all stages
        stages: Per-stage configurations
    """

    thresholds: DetectionThresholds = field(default_factory=DetectionThresholds)
    stages: Dict[PipelineStage, StageConfig] = field(default_factory=dict)

    def get_stage_config(self, stage: PipelineStage) -> StageConfig:
        """Get configuration for a specific stage."""
        return self.stages.get(stage, StageConfig())


class ReadingPipeline:
    """
    Stateless reading pipeline.

    The same instance can process any number of frames; every ``run`` builds
    a fresh context, so results depend only on the tensor and metadata.

    Usage:
        pipeline = ReadingPipeline()
        result = pipeline.run(output_tensor, metadata)
        systolic, diastolic, pulse = result.values
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._stages = self._build_stages()

    def _build_stages(self) -> List[PipelineStageExecutor]:
        """Build the ordered list of pipeline stages."""
        stage_types = [
            (PipelineStage.DECODE, DecodeStage),
            (PipelineStage.SUPPRESSION, SuppressionStage),
            (PipelineStage.GROUPING, GroupingStage),
            (PipelineStage.ASSEMBLY, AssemblyStage),
            (PipelineStage.ROUTING, RoutingStage),
        ]
        return [
            executor(config=self.config.get_stage_config(stage))
            for stage, executor in stage_types
        ]

    @property
    def thresholds(self) -> DetectionThresholds:
        return self.config.thresholds

    def run(self, raw_output: Any, metadata: ModelMetadata) -> DetectionResult:
        """
        Run all stages over one output tensor.

        Args:
            raw_output: Dequantized float output tensor
            metadata: Shapes and labels of the model that produced it

        Returns:
            DetectionResult; UNAVAILABLE / EMPTY end the run early
        """
        start_time = time.perf_counter()
        context = PipelineContext.create(raw_output, metadata, self.thresholds)

        for stage_executor in self._stages:
            if context.is_finished:
                break
            stage_executor.run(context)

        result = context.to_detection_result()
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self.logger.debug(f"Pipeline finished in {elapsed_ms:.2f}ms: {result}")
        return result

    def run_partial(
        self,
        raw_output: Any,
        metadata: ModelMetadata,
        until_stage: PipelineStage
    ) -> PipelineContext:
        """
        Run pipeline up to a specific stage (for testing/debugging).

        Returns:
            PipelineContext with partial results
        """
        context = PipelineContext.create(raw_output, metadata, self.thresholds)

        for stage_executor in self._stages:
            if context.is_finished:
                break
            stage_executor.run(context)
            if stage_executor.stage == until_stage:
                break

        return context

    @property
    def stage_count(self) -> int:
        return len(self._stages)

    @property
    def stage_names(self) -> List[str]:
        return [s.name for s in self._stages]
