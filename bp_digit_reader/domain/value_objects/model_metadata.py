"""
Model Metadata and Detection Thresholds

Immutable configuration objects handed to every decode call. They replace
long-lived mutable detector fields: built once at setup, read-only afterwards.
"""

from dataclasses import dataclass
from typing import Tuple


# Output tensor kinds the decoder knows how to dequantize.
SUPPORTED_TENSOR_TYPES = ("float32", "float16", "uint8", "int8")

# Value-marker class label of the bundled digit model.
DEFAULT_MARKER_LABEL = "10"

# Number of geometry channels (cx, cy, w, h) ahead of the class scores.
GEOMETRY_CHANNELS = 4


@dataclass(frozen=True)
class ModelMetadata:
    """
    Shapes and labels of a loaded detection model.

    Attributes:
        input_width: Width of the square input frame in pixels
        input_height: Height of the square input frame in pixels
        num_channels: Output channels (4 geometry + one score per class)
        num_elements: Candidate positions per frame (e.g. 8400)
        labels: Ordered class names, one per score channel
        output_dtype: Numeric kind of the raw output tensor
        quant_scale: Dequantization scale for integer outputs
        quant_zero_point: Dequantization zero point for integer outputs
    """

    input_width: int = 0
    input_height: int = 0
    num_channels: int = 0
    num_elements: int = 0
    labels: Tuple[str, ...] = ()
    output_dtype: str = "float32"
    quant_scale: float = 1.0 / 255.0
    quant_zero_point: int = 0

    @property
    def is_available(self) -> bool:
        """True when every shape is known and non-degenerate."""
        return (
            self.input_width > 0
            and self.input_height > 0
            and self.num_channels > GEOMETRY_CHANNELS
            and self.num_elements > 0
        )

    @property
    def num_classes(self) -> int:
        return max(0, self.num_channels - GEOMETRY_CHANNELS)

    @property
    def expected_size(self) -> int:
        """Number of values in one flattened output tensor."""
        return self.num_channels * self.num_elements

    def label_for(self, class_index: int) -> str:
        """Label of a class index, falling back to the index itself."""
        if 0 <= class_index < len(self.labels):
            return self.labels[class_index]
        return str(class_index)

    def __str__(self) -> str:
        return (
            f"ModelMetadata(w:{self.input_width} h:{self.input_height} "
            f"c:{self.num_channels} e:{self.num_elements} out:{self.output_dtype})"
        )

    @classmethod
    def unavailable(cls) -> "ModelMetadata":
        """Metadata of a detector that has not been set up."""
        return cls()


@dataclass(frozen=True)
class DetectionThresholds:
    """
    Tunable constants of the reading pipeline.

    Attributes:
        confidence_threshold: A position is kept when its best score exceeds this
        iou_threshold: Boxes overlapping a kept box at or above this are suppressed
        containment_threshold: Share of a digit's area that must lie inside a marker
        max_digits_per_value: Cap on digits assigned to a single marker
        marker_label: Class label of value-marker boxes
        exclusive_assignment: Assign each digit to at most one marker
        required_values: Number of markers needed for a usable reading
    """

    confidence_threshold: float = 0.4
    iou_threshold: float = 0.5
    containment_threshold: float = 0.75
    max_digits_per_value: int = 3
    marker_label: str = DEFAULT_MARKER_LABEL
    exclusive_assignment: bool = False
    required_values: int = 3

    def __post_init__(self) -> None:
        for name in ("confidence_threshold", "iou_threshold", "containment_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
        if self.max_digits_per_value < 1:
            raise ValueError("max_digits_per_value must be at least 1")
        if self.required_values < 1:
            raise ValueError("required_values must be at least 1")
