"""
Digit Assembler

Reads the integer shown inside each value marker.
"""

from dataclasses import replace
from typing import List, Sequence

from ..value_objects.detection_box import DetectionBox
from ..entities.value_group import ValueGroup


def sort_left_to_right(digits: Sequence[DetectionBox]) -> List[DetectionBox]:
    """Order digits by ascending left edge (stable)."""
    return sorted(digits, key=lambda d: d.x1)


def digits_to_value(digits: Sequence[DetectionBox]) -> int:
    """
    Concatenate digit labels left-to-right and parse them.

    Returns 0 when the text is empty or not an unsigned decimal number.
    Leading zeros are dropped by the parse ("007" -> 7).
    """
    text = "".join(d.class_name for d in sort_left_to_right(digits))
    if not text.isdecimal() or not text.isascii():
        return 0
    return int(text)


def assemble_group(group: ValueGroup) -> ValueGroup:
    ordered = sort_left_to_right(group.digits)
    return replace(group, digits=tuple(ordered), value=digits_to_value(ordered))


def assemble_groups(groups: Sequence[ValueGroup]) -> List[ValueGroup]:
    """Return new groups with digits ordered and their value filled in."""
    return [assemble_group(group) for group in groups]
