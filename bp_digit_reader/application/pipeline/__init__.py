"""
Pipeline Module

Contains the reading pipeline, its context, and stage definitions.
"""

from .orchestrator import ReadingPipeline, PipelineConfig
from .context import PipelineContext
from .stages import PipelineStageExecutor, StageConfig

__all__ = [
    "ReadingPipeline",
    "PipelineConfig",
    "PipelineContext",
    "PipelineStageExecutor",
    "StageConfig",
]
