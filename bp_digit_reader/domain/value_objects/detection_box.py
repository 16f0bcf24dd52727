"""
Detection Box Value Object

Represents one decoded candidate region produced by the digit detector.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Any


@dataclass(frozen=True)
class DetectionBox:
    """
    Immutable value object representing a detected digit or value marker.

    All geometry is normalized (0.0 to 1.0) relative to the detector's square
    input frame, so callers can scale it to any display surface.

    Attributes:
        x1: Left edge
        y1: Top edge
        x2: Right edge
        y2: Bottom edge
        cx: Center x
        cy: Center y
        w: Width as reported by the model
        h: Height as reported by the model
        confidence: Score of the chosen class
        class_index: Index of the chosen class in the label table
        class_name: Label of the chosen class ("0"-"9" or the marker label)
    """

    x1: float
    y1: float
    x2: float
    y2: float
    cx: float
    cy: float
    w: float
    h: float
    confidence: float
    class_index: int
    class_name: str

    def __post_init__(self) -> None:
        """Validate box geometry."""
        if self.x1 > self.x2:
            raise ValueError(f"x1 ({self.x1}) must be <= x2 ({self.x2})")
        if self.y1 > self.y2:
            raise ValueError(f"y1 ({self.y1}) must be <= y2 ({self.y2})")

        for coord_name, coord_value in [
            ("x1", self.x1), ("y1", self.y1),
            ("x2", self.x2), ("y2", self.y2)
        ]:
            if not 0.0 <= coord_value <= 1.0:
                raise ValueError(
                    f"Normalized {coord_name} must be between 0.0 and 1.0, got {coord_value}"
                )

    @property
    def area(self) -> float:
        """Box area from the model's width and height."""
        return self.w * self.h

    def is_value_marker(self, marker_label: str) -> bool:
        """Check whether this box encloses a whole multi-digit value."""
        return self.class_name == marker_label

    def to_xyxy(self) -> Tuple[float, float, float, float]:
        """Return coordinates as (x1, y1, x2, y2) tuple."""
        return (self.x1, self.y1, self.x2, self.y2)

    def to_absolute(self, surface_width: int, surface_height: int) -> Tuple[int, int, int, int]:
        """
        Scale the box onto a drawing surface.

        Args:
            surface_width: Width of the target surface in pixels
            surface_height: Height of the target surface in pixels

        Returns:
            (left, top, right, bottom) in integer pixels
        """
        return (
            int(self.x1 * surface_width),
            int(self.y1 * surface_height),
            int(self.x2 * surface_width),
            int(self.y2 * surface_height),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "cx": self.cx,
            "cy": self.cy,
            "w": self.w,
            "h": self.h,
            "confidence": self.confidence,
            "class_index": self.class_index,
            "class_name": self.class_name,
        }

    def __str__(self) -> str:
        return (
            f"DetectionBox('{self.class_name}' {self.confidence:.2f}: "
            f"[{self.x1:.3f}, {self.y1:.3f}, {self.x2:.3f}, {self.y2:.3f}])"
        )

    @classmethod
    def from_xywh(
        cls,
        cx: float,
        cy: float,
        w: float,
        h: float,
        confidence: float,
        class_index: int,
        class_name: str
    ) -> "DetectionBox":
        """Create from center/size, deriving the corners."""
        return cls(
            x1=cx - w / 2,
            y1=cy - h / 2,
            x2=cx + w / 2,
            y2=cy + h / 2,
            cx=cx,
            cy=cy,
            w=w,
            h=h,
            confidence=confidence,
            class_index=class_index,
            class_name=class_name,
        )

    @classmethod
    def from_xyxy(
        cls,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        confidence: float,
        class_index: int,
        class_name: str
    ) -> "DetectionBox":
        """Create from corner coordinates, deriving center and size."""
        return cls(
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            cx=(x1 + x2) / 2,
            cy=(y1 + y2) / 2,
            w=x2 - x1,
            h=y2 - y1,
            confidence=confidence,
            class_index=class_index,
            class_name=class_name,
        )
