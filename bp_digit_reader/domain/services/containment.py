"""
Containment Grouper

Assigns digit boxes to the value-marker boxes that enclose them.
"""

from typing import List, Sequence, Tuple, Set
import logging

from ..value_objects.detection_box import DetectionBox
from ..value_objects.model_metadata import DEFAULT_MARKER_LABEL
from ..entities.value_group import ValueGroup
from .suppression import intersection_area


logger = logging.getLogger(__name__)

DEFAULT_CONTAINMENT_THRESHOLD = 0.75
MAX_DIGITS_PER_VALUE = 3


def containment_ratio(inner: DetectionBox, outer: DetectionBox) -> float:
    """Share of ``inner``'s own area that lies inside ``outer`` (0 for empty boxes)."""
    inner_area = inner.area
    if inner_area <= 0.0:
        return 0.0
    return intersection_area(inner, outer) / inner_area


def is_inside(
    inner: DetectionBox,
    outer: DetectionBox,
    threshold: float = DEFAULT_CONTAINMENT_THRESHOLD
) -> bool:
    return containment_ratio(inner, outer) >= threshold


def partition_boxes(
    boxes: Sequence[DetectionBox],
    marker_label: str = DEFAULT_MARKER_LABEL
) -> Tuple[List[DetectionBox], List[DetectionBox]]:
    """Split boxes into (value markers, digit candidates), keeping their order."""
    markers = [b for b in boxes if b.is_value_marker(marker_label)]
    digits = [b for b in boxes if not b.is_value_marker(marker_label)]
    return markers, digits


def group_digits(
    boxes: Sequence[DetectionBox],
    marker_label: str = DEFAULT_MARKER_LABEL,
    containment_threshold: float = DEFAULT_CONTAINMENT_THRESHOLD,
    max_digits: int = MAX_DIGITS_PER_VALUE,
    exclusive: bool = False
) -> List[ValueGroup]:
    """
    Build one value group per marker box.

    Markers are processed in their given order. For each marker, digit
    candidates are scanned in their given order and assigned while at least
    ``containment_threshold`` of their area lies inside the marker, up to
    ``max_digits``; further qualifying digits are ignored.

    By default a digit that fits two overlapping markers joins both. With
    ``exclusive`` set, a digit already claimed by an earlier marker is skipped.

    Args:
        boxes: Post-suppression detections
        marker_label: Class label of value-marker boxes
        containment_threshold: Minimum containment ratio for assignment
        max_digits: Cap on digits per marker
        exclusive: Whether a digit may belong to only one marker

    Returns:
        Value groups with digits in scan order and average confidence set;
        ``value`` is left at 0 for the assembler
    """
    markers, digit_boxes = partition_boxes(boxes, marker_label)
    claimed: Set[int] = set()
    groups: List[ValueGroup] = []

    for marker in markers:
        digits: List[DetectionBox] = []
        sum_conf = marker.confidence

        for index, digit in enumerate(digit_boxes):
            if len(digits) >= max_digits:
                break
            if exclusive and index in claimed:
                continue
            if is_inside(digit, marker, containment_threshold):
                digits.append(digit)
                sum_conf += digit.confidence
                if exclusive:
                    claimed.add(index)

        groups.append(ValueGroup(
            marker=marker,
            digits=tuple(digits),
            average_confidence=sum_conf / (len(digits) + 1),
        ))

    logger.debug(
        f"Grouped {len(digit_boxes)} digit candidates under {len(markers)} markers"
    )
    return groups
