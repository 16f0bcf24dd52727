"""
Tensor Decoder

Turns the raw detector output into candidate detection boxes.

The model emits a tensor of shape (channels, elements): the first four
channels hold the normalized box center and size (cx, cy, w, h), the rest
hold one confidence per class. Every candidate position is evaluated
independently; the scan is vectorized with numpy but keeps the semantics of a
per-position forward scan (first maximum wins on ties).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Optional, Any
import logging

import numpy as np

from ..value_objects.detection_box import DetectionBox
from ..value_objects.model_metadata import (
    ModelMetadata,
    SUPPORTED_TENSOR_TYPES,
    GEOMETRY_CHANNELS,
)
from ..exceptions import TensorShapeError, UnsupportedTensorTypeError


logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.4


class DecodeStatus(Enum):
    """Outcome of a decode call."""

    UNAVAILABLE = "unavailable"
    EMPTY = "empty"
    DECODED = "decoded"


@dataclass(frozen=True)
class DecodeOutcome:
    """
    Result of decoding one output tensor.

    Attributes:
        status: Whether boxes were decoded, none qualified, or decoding was skipped
        boxes: Accepted boxes in candidate-position order
        candidates: Positions whose best score passed the threshold,
            before the geometry check
    """

    status: DecodeStatus
    boxes: Tuple[DetectionBox, ...] = ()
    candidates: int = 0

    @property
    def is_decoded(self) -> bool:
        return self.status == DecodeStatus.DECODED

    @classmethod
    def unavailable(cls) -> "DecodeOutcome":
        return cls(status=DecodeStatus.UNAVAILABLE)


def tensor_type_name(dtype: Any) -> str:
    """Normalize a numpy dtype, type or name into a plain string."""
    try:
        return np.dtype(dtype).name
    except TypeError:
        return str(dtype)


def check_tensor_type(dtype: Any) -> str:
    """
    Ensure the output tensor type can be decoded.

    Raises:
        UnsupportedTensorTypeError: If the type is not one of SUPPORTED_TENSOR_TYPES
    """
    name = tensor_type_name(dtype)
    if name not in SUPPORTED_TENSOR_TYPES:
        raise UnsupportedTensorTypeError(name, supported=list(SUPPORTED_TENSOR_TYPES))
    return name


def dequantize(
    raw: Any,
    dtype: Optional[Any] = None,
    scale: float = 1.0 / 255.0,
    zero_point: int = 0
) -> np.ndarray:
    """
    Convert a raw output tensor into float32 scores and geometry.

    Float tensors are cast; uint8/int8 tensors are mapped through
    (raw - zero_point) * scale.

    Args:
        raw: Raw output buffer from the engine
        dtype: Declared tensor type; defaults to the buffer's own dtype
        scale: Quantization scale for integer tensors
        zero_point: Quantization zero point for integer tensors

    Returns:
        float32 numpy array with the same shape as ``raw``
    """
    array = np.asarray(raw)
    name = check_tensor_type(dtype if dtype is not None else array.dtype)

    if name in ("float32", "float16"):
        return array.astype(np.float32, copy=False)

    dequantized = (array.astype(np.float32) - np.float32(zero_point)) * np.float32(scale)
    return dequantized.astype(np.float32, copy=False)


def decode_tensor(
    output: Any,
    metadata: ModelMetadata,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
) -> DecodeOutcome:
    """
    Decode a flattened (channels, elements) output tensor into boxes.

    A position is accepted when its best class score is strictly above
    ``confidence_threshold`` and all four derived corners lie within [0, 1]
    with x1 <= x2 and y1 <= y2. Other positions are dropped silently.

    Args:
        output: Float buffer of size channels * elements (a leading batch
            axis of 1 or any equivalent shape is accepted)
        metadata: Shapes and labels of the model that produced the tensor
        confidence_threshold: Minimum (exclusive) best-class confidence

    Returns:
        DecodeOutcome; UNAVAILABLE when the metadata is unknown or degenerate,
        EMPTY when nothing qualified

    Raises:
        TensorShapeError: If the buffer size disagrees with the metadata
    """
    if not metadata.is_available:
        logger.debug(f"Decode skipped, model metadata unavailable: {metadata}")
        return DecodeOutcome.unavailable()

    array = np.asarray(output, dtype=np.float32).ravel()
    if array.size != metadata.expected_size:
        raise TensorShapeError(expected=metadata.expected_size, actual=int(array.size))

    num_elements = metadata.num_elements
    table = array.reshape(metadata.num_channels, num_elements)
    # NaN scores never win a position
    scores = np.where(np.isnan(table[GEOMETRY_CHANNELS:]), -np.inf, table[GEOMETRY_CHANNELS:])

    # argmax returns the first maximum, i.e. the lowest class index on ties
    best_class = np.argmax(scores, axis=0)
    best_conf = scores[best_class, np.arange(num_elements)]
    above = best_conf > np.float32(confidence_threshold)

    cx, cy, w, h = table[0], table[1], table[2], table[3]
    half_w = w / np.float32(2.0)
    half_h = h / np.float32(2.0)
    x1 = cx - half_w
    y1 = cy - half_h
    x2 = cx + half_w
    y2 = cy + half_h

    inside = (
        (x1 >= 0.0) & (x1 <= 1.0)
        & (y1 >= 0.0) & (y1 <= 1.0)
        & (x2 >= 0.0) & (x2 <= 1.0)
        & (y2 >= 0.0) & (y2 <= 1.0)
        & (x1 <= x2) & (y1 <= y2)
    )
    accepted = np.flatnonzero(above & inside)

    boxes = []
    for i in accepted:
        class_index = int(best_class[i])
        boxes.append(DetectionBox(
            x1=float(x1[i]),
            y1=float(y1[i]),
            x2=float(x2[i]),
            y2=float(y2[i]),
            cx=float(cx[i]),
            cy=float(cy[i]),
            w=float(w[i]),
            h=float(h[i]),
            confidence=float(best_conf[i]),
            class_index=class_index,
            class_name=metadata.label_for(class_index),
        ))

    candidates = int(np.count_nonzero(above))
    logger.debug(f"Number of boxes: {len(boxes)} ({candidates} above threshold)")

    if not boxes:
        return DecodeOutcome(status=DecodeStatus.EMPTY, candidates=candidates)

    return DecodeOutcome(
        status=DecodeStatus.DECODED,
        boxes=tuple(boxes),
        candidates=candidates
    )
