"""
Suppression Engine

Greedy, class-agnostic non-maximum suppression. The same physical digit can be
scored under neighbouring classes, so overlap is measured regardless of label.
"""

from typing import List, Sequence
import logging

from ..value_objects.detection_box import DetectionBox


logger = logging.getLogger(__name__)

DEFAULT_IOU_THRESHOLD = 0.5


def intersection_area(box1: DetectionBox, box2: DetectionBox) -> float:
    """Overlap area of two boxes, clamped to zero on each axis."""
    x1 = max(box1.x1, box2.x1)
    y1 = max(box1.y1, box2.y1)
    x2 = min(box1.x2, box2.x2)
    y2 = min(box1.y2, box2.y2)
    return max(0.0, x2 - x1) * max(0.0, y2 - y1)


def compute_iou(box1: DetectionBox, box2: DetectionBox) -> float:
    """
    Intersection over Union of two boxes.

    Areas come from each box's width and height. A zero union yields 0.
    """
    intersection = intersection_area(box1, box2)
    union = box1.area + box2.area - intersection
    if union <= 0.0:
        return 0.0
    return intersection / union


def non_max_suppression(
    boxes: Sequence[DetectionBox],
    iou_threshold: float = DEFAULT_IOU_THRESHOLD
) -> List[DetectionBox]:
    """
    Remove duplicate detections.

    Boxes are stably sorted by confidence (descending). The best remaining box
    is kept and every remaining box with IoU >= ``iou_threshold`` against it
    is dropped, until no boxes remain.

    Args:
        boxes: Confidence-filtered detections
        iou_threshold: Overlap at which a lower-confidence box is suppressed

    Returns:
        Kept boxes, in order of selection
    """
    remaining = sorted(boxes, key=lambda b: b.confidence, reverse=True)
    selected: List[DetectionBox] = []

    while remaining:
        best = remaining.pop(0)
        selected.append(best)
        remaining = [
            box for box in remaining
            if compute_iou(best, box) < iou_threshold
        ]

    logger.debug(f"Number of boxes after NMS: {len(selected)} (from {len(boxes)})")
    return selected
