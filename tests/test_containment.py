import pytest

from bp_digit_reader.domain.services.containment import (
    containment_ratio,
    group_digits,
    is_inside,
    partition_boxes,
)


@pytest.fixture
def marker(make_box):
    return make_box(0.10, 0.10, 0.50, 0.30, label="10", confidence=0.8)


def test_partition_splits_markers_from_digits(make_box, marker):
    digit = make_box(0.15, 0.15, 0.20, 0.25, label="4")

    markers, digits = partition_boxes([digit, marker])

    assert markers == [marker]
    assert digits == [digit]


def test_fully_enclosed_digit_has_ratio_one(make_box, marker):
    digit = make_box(0.15, 0.15, 0.20, 0.25)

    assert containment_ratio(digit, marker) == pytest.approx(1.0)


def test_half_enclosed_digit_is_not_assigned(make_box, marker):
    straddling = make_box(0.45, 0.15, 0.55, 0.25, label="3")

    groups = group_digits([marker, straddling])

    assert containment_ratio(straddling, marker) == pytest.approx(0.5)
    assert groups[0].digits == ()


def test_containment_threshold_is_inclusive(make_box, marker):
    # three quarters of the digit lies inside the marker
    digit = make_box(0.3125, 0.125, 0.5625, 0.25, label="8")

    assert is_inside(digit, marker)
    assert not is_inside(digit, marker, threshold=0.76)
    assert group_digits([marker, digit])[0].digits == (digit,)


def test_zero_area_digit_has_ratio_zero(make_box, marker):
    flat = make_box(0.2, 0.2, 0.3, 0.2)

    assert containment_ratio(flat, marker) == 0.0


def test_group_is_capped_at_three_digits(make_box, marker):
    digits = [
        make_box(0.12 + i * 0.09, 0.15, 0.19 + i * 0.09, 0.25, label=str(i + 1))
        for i in range(4)
    ]

    groups = group_digits([marker] + digits)

    assert len(groups) == 1
    assert groups[0].digits == tuple(digits[:3])


def test_average_confidence_includes_marker(make_box, marker):
    six = make_box(0.15, 0.15, 0.20, 0.25, label="6", confidence=0.6)
    seven = make_box(0.25, 0.15, 0.30, 0.25, label="7", confidence=0.7)

    group = group_digits([marker, six, seven])[0]

    assert group.average_confidence == pytest.approx(0.7)
    assert group.value == 0


def test_marker_without_digits_keeps_its_own_confidence(marker):
    group = group_digits([marker])[0]

    assert group.digits == ()
    assert group.average_confidence == pytest.approx(0.8)


def test_overlapping_markers_share_digits_by_default(make_box):
    first = make_box(0.10, 0.10, 0.50, 0.30, label="10", confidence=0.9)
    second = make_box(0.10, 0.05, 0.50, 0.35, label="10", confidence=0.8)
    digit = make_box(0.20, 0.15, 0.25, 0.25, label="1")

    shared = group_digits([first, second, digit])
    exclusive = group_digits([first, second, digit], exclusive=True)

    assert [g.digits for g in shared] == [(digit,), (digit,)]
    assert [g.digits for g in exclusive] == [(digit,), ()]


def test_custom_marker_label(make_box):
    marker = make_box(0.1, 0.1, 0.5, 0.3, label="frame")
    digit = make_box(0.2, 0.15, 0.25, 0.25, label="2")

    groups = group_digits([marker, digit], marker_label="frame")

    assert len(groups) == 1
    assert groups[0].digits == (digit,)
