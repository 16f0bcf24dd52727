"""
Domain Services

The five stages of the reading pipeline as pure functions:
decode -> suppress -> group -> assemble -> route.
"""

from .tensor_decoder import (
    DecodeOutcome,
    DecodeStatus,
    decode_tensor,
    dequantize,
    check_tensor_type,
)
from .suppression import compute_iou, intersection_area, non_max_suppression
from .containment import containment_ratio, is_inside, partition_boxes, group_digits
from .digit_assembler import digits_to_value, assemble_groups
from .value_router import route_values, DISPLAY_ROW_ORDER

__all__ = [
    "DecodeOutcome",
    "DecodeStatus",
    "decode_tensor",
    "dequantize",
    "check_tensor_type",
    "compute_iou",
    "intersection_area",
    "non_max_suppression",
    "containment_ratio",
    "is_inside",
    "partition_boxes",
    "group_digits",
    "digits_to_value",
    "assemble_groups",
    "route_values",
    "DISPLAY_ROW_ORDER",
]
