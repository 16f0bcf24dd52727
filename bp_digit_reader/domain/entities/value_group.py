"""
Value Group Entity

One value marker together with the digit boxes it encloses.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Any

from ..value_objects.detection_box import DetectionBox


@dataclass(frozen=True)
class ValueGroup:
    """
    A value marker and its assigned digits.

    Attributes:
        marker: The value-marker box anchoring this group
        digits: Digit boxes assigned to the marker (left-to-right once assembled)
        value: Integer read from the digits, 0 when undetermined
        average_confidence: Mean of the marker and digit confidences
    """

    marker: DetectionBox
    digits: Tuple[DetectionBox, ...] = ()
    value: int = 0
    average_confidence: float = 0.0

    @property
    def digit_count(self) -> int:
        return len(self.digits)

    @property
    def text(self) -> str:
        """Digit labels concatenated in their current order."""
        return "".join(d.class_name for d in self.digits)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "marker": self.marker.to_dict(),
            "digits": [d.to_dict() for d in self.digits],
            "value": self.value,
            "average_confidence": self.average_confidence,
        }

    def __str__(self) -> str:
        return f"ValueGroup({self.value}, digits='{self.text}', conf={self.average_confidence:.2f})"
