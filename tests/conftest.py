"""
Shared fixtures: synthetic detector output tensors and model metadata.

The digit model scores 11 classes: "0"-"9" plus the value-marker class "10".
A tensor row is (cx, cy, w, h, class_index, confidence); every other class
score at that position is zero.
"""

from typing import Iterable, Tuple

import numpy as np
import pytest

from bp_digit_reader.domain.value_objects.detection_box import DetectionBox
from bp_digit_reader.domain.value_objects.model_metadata import ModelMetadata


LABELS = tuple(str(i) for i in range(11))
MARKER = 10
NUM_CHANNELS = 4 + len(LABELS)
NUM_ELEMENTS = 32
INPUT_SIZE = 64

Row = Tuple[float, float, float, float, int, float]


def build_tensor(rows: Iterable[Row], num_elements: int = NUM_ELEMENTS) -> np.ndarray:
    table = np.zeros((NUM_CHANNELS, num_elements), dtype=np.float32)
    for position, (cx, cy, w, h, class_index, confidence) in enumerate(rows):
        table[0:4, position] = (cx, cy, w, h)
        table[4 + class_index, position] = confidence
    return table


# Three stacked values, listed bottom row first so routing has to reorder.
# Top: "9" at x1=0.10 and "0" at x1=0.14 (listed right digit first) -> 90
# Middle: "6", "5" -> 65
# Bottom: "7", "2" -> 72
DISPLAY_ROWS = [
    (0.15, 0.725, 0.20, 0.15, MARKER, 0.85),
    (0.115, 0.725, 0.03, 0.09, 7, 0.90),
    (0.155, 0.725, 0.03, 0.09, 2, 0.90),
    (0.15, 0.425, 0.20, 0.15, MARKER, 0.85),
    (0.115, 0.425, 0.03, 0.09, 6, 0.90),
    (0.155, 0.425, 0.03, 0.09, 5, 0.90),
    (0.15, 0.125, 0.20, 0.15, MARKER, 0.80),
    (0.155, 0.125, 0.03, 0.09, 0, 0.70),
    (0.115, 0.125, 0.03, 0.09, 9, 0.60),
]


@pytest.fixture
def metadata() -> ModelMetadata:
    return ModelMetadata(
        input_width=INPUT_SIZE,
        input_height=INPUT_SIZE,
        num_channels=NUM_CHANNELS,
        num_elements=NUM_ELEMENTS,
        labels=LABELS,
    )


@pytest.fixture
def tensor_builder():
    return build_tensor


@pytest.fixture
def display_tensor() -> np.ndarray:
    return build_tensor(DISPLAY_ROWS)


@pytest.fixture
def make_box():
    def _make_box(
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        label: str = "1",
        confidence: float = 0.9
    ) -> DetectionBox:
        return DetectionBox.from_xyxy(
            x1, y1, x2, y2,
            confidence=confidence,
            class_index=int(label) if label.isdecimal() else -1,
            class_name=label,
        )
    return _make_box
