"""
Detection Result Entity

Final output of one pass of the reading pipeline over a single frame.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum

from .bp_reading import BPReading
from .value_group import ValueGroup
from ..value_objects.detection_box import DetectionBox


class PipelineStage(Enum):
    """Enumeration of pipeline stages."""

    DECODE = "decode"
    SUPPRESSION = "suppression"
    GROUPING = "grouping"
    ASSEMBLY = "assembly"
    ROUTING = "routing"


class StageStatus(Enum):
    """Status of a pipeline stage execution."""

    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class DetectionStatus(Enum):
    """
    Outcome variant of a detection call.

    UNAVAILABLE: the detector was not set up, nothing was scanned
    EMPTY: the scan finished but no box passed the filters
    DETECTED: boxes were found; the reading may still be all zeros
    """

    UNAVAILABLE = "unavailable"
    EMPTY = "empty"
    DETECTED = "detected"


@dataclass(frozen=True)
class DetectionResult:
    """
    Tagged result returned synchronously by the detector.

    Attributes:
        status: Which outcome variant this is
        boxes: Post-suppression detection boxes (for visualization)
        groups: Assembled value groups, in marker order
        reading: The systolic/diastolic/pulse triple
        inference_time_ms: Time spent in the inference engine
        total_time_ms: Time spent for the whole frame
        stage_timings: Duration of each pipeline stage in milliseconds
    """

    status: DetectionStatus
    boxes: Tuple[DetectionBox, ...] = ()
    groups: Tuple[ValueGroup, ...] = ()
    reading: BPReading = field(default_factory=BPReading.zero)
    inference_time_ms: float = 0.0
    total_time_ms: float = 0.0
    stage_timings: Dict[str, float] = field(default_factory=dict)

    @property
    def is_available(self) -> bool:
        return self.status != DetectionStatus.UNAVAILABLE

    @property
    def is_empty(self) -> bool:
        """True when the model produced nothing, as opposed to an incomplete reading."""
        return self.status == DetectionStatus.EMPTY

    @property
    def has_detections(self) -> bool:
        return self.status == DetectionStatus.DETECTED

    @property
    def values(self) -> Tuple[int, int, int]:
        return self.reading.as_tuple()

    def with_timing(self, inference_time_ms: float, total_time_ms: float) -> "DetectionResult":
        """Copy of this result carrying engine and frame timings."""
        return DetectionResult(
            status=self.status,
            boxes=self.boxes,
            groups=self.groups,
            reading=self.reading,
            inference_time_ms=inference_time_ms,
            total_time_ms=total_time_ms,
            stage_timings=dict(self.stage_timings),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "reading": self.reading.to_dict(),
            "boxes": [b.to_dict() for b in self.boxes],
            "groups": [g.to_dict() for g in self.groups],
            "inference_time_ms": round(self.inference_time_ms, 2),
            "total_time_ms": round(self.total_time_ms, 2),
            "stage_timings": {k: round(v, 3) for k, v in self.stage_timings.items()},
        }

    def __str__(self) -> str:
        return (
            f"DetectionResult({self.status.value}, {self.reading}, "
            f"boxes={len(self.boxes)}, inference={self.inference_time_ms:.1f}ms)"
        )

    @classmethod
    def unavailable(cls) -> "DetectionResult":
        return cls(status=DetectionStatus.UNAVAILABLE)

    @classmethod
    def empty(cls, stage_timings: Optional[Dict[str, float]] = None) -> "DetectionResult":
        return cls(status=DetectionStatus.EMPTY, stage_timings=stage_timings or {})

    @classmethod
    def detected(
        cls,
        boxes: List[DetectionBox],
        groups: List[ValueGroup],
        reading: BPReading,
        stage_timings: Optional[Dict[str, float]] = None
    ) -> "DetectionResult":
        return cls(
            status=DetectionStatus.DETECTED,
            boxes=tuple(boxes),
            groups=tuple(groups),
            reading=reading,
            stage_timings=stage_timings or {},
        )
