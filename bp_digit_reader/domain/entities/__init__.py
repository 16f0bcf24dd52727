"""
Domain Entities

Core entities representing a reading of a blood-pressure monitor display.
"""

from .bp_reading import BPReading
from .value_group import ValueGroup
from .detection_result import (
    DetectionResult,
    DetectionStatus,
    PipelineStage,
    StageStatus,
)

__all__ = [
    "BPReading",
    "ValueGroup",
    "DetectionResult",
    "DetectionStatus",
    "PipelineStage",
    "StageStatus",
]
