"""
Pipeline Stage Definitions

Defines the reading stages and their execution logic.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import logging

from .context import PipelineContext
from ...domain.entities.detection_result import PipelineStage, DetectionStatus
from ...domain.services.tensor_decoder import decode_tensor, DecodeStatus
from ...domain.services.suppression import non_max_suppression
from ...domain.services.containment import group_digits
from ...domain.services.digit_assembler import assemble_groups
from ...domain.services.value_router import route_values


logger = logging.getLogger(__name__)


@dataclass
class StageConfig:
    """
    Configuration for a pipeline stage.

    Attributes:
        enabled: Whether the stage is enabled
    """

    enabled: bool = True


class PipelineStageExecutor(ABC):
    """
    One step of the reading pipeline.

    A stage reads what the previous stage left on the context and stores its
    own output there as a new object.

    Per-frame conditions are written to the context as data. Exceptions only
    signal misconfiguration and are propagated to the caller.
    """

    def __init__(self, config: Optional[StageConfig] = None):
        self.config = config or StageConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def stage(self) -> PipelineStage:
        """Get the pipeline stage this executor handles."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get human-readable stage name."""
        pass

    @abstractmethod
    def execute(self, context: PipelineContext) -> None:
        """
        Execute the stage logic.

        Args:
            context: Pipeline context to read from and write to
        """
        pass

    def can_execute(self, context: PipelineContext) -> bool:
        """Check if this stage can execute given the current context."""
        return not context.is_finished

    def run(self, context: PipelineContext) -> bool:
        """
        Run the stage with timing and logging.

        Args:
            context: Pipeline context

        Returns:
            True if the stage executed, False if it was skipped
        """
        if not self.config.enabled:
            self.logger.debug(f"Stage {self.name} is disabled, skipping")
            context.skip_stage(self.stage)
            return False

        if not self.can_execute(context):
            context.skip_stage(self.stage)
            return False

        context.start_stage(self.stage)
        try:
            self.execute(context)
        except Exception as e:
            self.logger.error(f"Stage {self.name} failed: {e}")
            raise
        context.finish_stage(self.stage)
        self.logger.debug(
            f"Stage {self.name} completed in {context.get_stage_duration(self.stage):.3f}ms"
        )
        return True


# =============================================================================
# Concrete Stage Executors
# =============================================================================

class DecodeStage(PipelineStageExecutor):
    """
    Tensor Decode Stage Executor.

    Converts the raw output tensor into confidence- and geometry-filtered boxes.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.DECODE

    @property
    def name(self) -> str:
        return "Decode"

    def execute(self, context: PipelineContext) -> None:
        outcome = decode_tensor(
            context.raw_output,
            context.metadata,
            confidence_threshold=context.thresholds.confidence_threshold
        )
        context.decode_outcome = outcome

        if outcome.status == DecodeStatus.UNAVAILABLE:
            context.finish_early(DetectionStatus.UNAVAILABLE)
        elif outcome.status == DecodeStatus.EMPTY:
            self.logger.info("Nothing detected")
            context.finish_early(DetectionStatus.EMPTY)


class SuppressionStage(PipelineStageExecutor):
    """
    Non-Maximum Suppression Stage Executor.

    Removes duplicate detections of the same digit or marker.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.SUPPRESSION

    @property
    def name(self) -> str:
        return "Suppression"

    def can_execute(self, context: PipelineContext) -> bool:
        return (
            super().can_execute(context)
            and context.decode_outcome is not None
            and context.decode_outcome.is_decoded
        )

    def execute(self, context: PipelineContext) -> None:
        context.boxes = non_max_suppression(
            context.decode_outcome.boxes,
            iou_threshold=context.thresholds.iou_threshold
        )


class GroupingStage(PipelineStageExecutor):
    """
    Containment Grouping Stage Executor.

    Assigns digit boxes to the value markers that enclose them.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.GROUPING

    @property
    def name(self) -> str:
        return "Grouping"

    def execute(self, context: PipelineContext) -> None:
        thresholds = context.thresholds
        context.groups = group_digits(
            context.boxes,
            marker_label=thresholds.marker_label,
            containment_threshold=thresholds.containment_threshold,
            max_digits=thresholds.max_digits_per_value,
            exclusive=thresholds.exclusive_assignment
        )


class AssemblyStage(PipelineStageExecutor):
    """
    Digit Assembly Stage Executor.

    Orders each group's digits left-to-right and parses the value.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.ASSEMBLY

    @property
    def name(self) -> str:
        return "Assembly"

    def execute(self, context: PipelineContext) -> None:
        context.groups = assemble_groups(context.groups)


class RoutingStage(PipelineStageExecutor):
    """
    Value Routing Stage Executor.

    Assigns assembled values to systolic, diastolic and pulse.
    """

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.ROUTING

    @property
    def name(self) -> str:
        return "Routing"

    def execute(self, context: PipelineContext) -> None:
        context.reading = route_values(
            context.groups,
            required=context.thresholds.required_values
        )
