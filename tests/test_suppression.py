from itertools import combinations

import pytest

from bp_digit_reader.domain.services.suppression import (
    compute_iou,
    intersection_area,
    non_max_suppression,
)


def test_iou_of_identical_boxes_is_one(make_box):
    box = make_box(0.1, 0.1, 0.3, 0.4)

    assert compute_iou(box, box) == pytest.approx(1.0)


def test_iou_of_disjoint_boxes_is_zero(make_box):
    a = make_box(0.0, 0.0, 0.2, 0.2)
    b = make_box(0.5, 0.5, 0.7, 0.7)

    assert intersection_area(a, b) == 0.0
    assert compute_iou(a, b) == 0.0


def test_iou_with_zero_union_is_zero(make_box):
    point = make_box(0.5, 0.5, 0.5, 0.5)

    assert compute_iou(point, point) == 0.0


def test_duplicate_keeps_highest_confidence(make_box):
    low = make_box(0.10, 0.10, 0.30, 0.30, label="7", confidence=0.6)
    high = make_box(0.11, 0.11, 0.31, 0.31, label="1", confidence=0.9)

    kept = non_max_suppression([low, high])

    assert kept == [high]


def test_suppression_is_class_agnostic(make_box):
    marker = make_box(0.2, 0.2, 0.6, 0.6, label="10", confidence=0.8)
    digit = make_box(0.2, 0.2, 0.6, 0.58, label="8", confidence=0.7)

    assert non_max_suppression([marker, digit]) == [marker]


def test_kept_boxes_overlap_less_than_threshold(make_box):
    boxes = [
        make_box(0.10, 0.10, 0.30, 0.30, confidence=0.90),
        make_box(0.12, 0.10, 0.32, 0.30, confidence=0.85),
        make_box(0.25, 0.10, 0.45, 0.30, confidence=0.80),
        make_box(0.40, 0.10, 0.60, 0.30, confidence=0.75),
        make_box(0.41, 0.12, 0.61, 0.31, confidence=0.95),
        make_box(0.70, 0.70, 0.90, 0.90, confidence=0.50),
    ]

    kept = non_max_suppression(boxes, iou_threshold=0.5)

    assert len(kept) < len(boxes)
    for a, b in combinations(kept, 2):
        assert compute_iou(a, b) < 0.5


def test_equal_confidence_keeps_input_order(make_box):
    left = make_box(0.1, 0.1, 0.2, 0.2, label="1", confidence=0.8)
    right = make_box(0.5, 0.1, 0.6, 0.2, label="2", confidence=0.8)

    assert non_max_suppression([left, right]) == [left, right]
    assert non_max_suppression([]) == []
