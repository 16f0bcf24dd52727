from bp_digit_reader.domain.entities.value_group import ValueGroup
from bp_digit_reader.domain.services.digit_assembler import (
    assemble_groups,
    digits_to_value,
    sort_left_to_right,
)


def test_digits_read_left_to_right(make_box):
    five = make_box(0.30, 0.1, 0.35, 0.2, label="5")
    one = make_box(0.10, 0.1, 0.15, 0.2, label="1")
    two = make_box(0.20, 0.1, 0.25, 0.2, label="2")

    assert sort_left_to_right([five, one, two]) == [one, two, five]
    assert digits_to_value([five, one, two]) == 125


def test_no_digits_reads_zero():
    assert digits_to_value([]) == 0


def test_leading_zeros_are_dropped(make_box):
    digits = [
        make_box(0.1 * (i + 1), 0.1, 0.1 * (i + 1) + 0.05, 0.2, label=label)
        for i, label in enumerate("007")
    ]

    assert digits_to_value(digits) == 7


def test_non_digit_label_reads_zero(make_box):
    digits = [
        make_box(0.1, 0.1, 0.15, 0.2, label="1"),
        make_box(0.2, 0.1, 0.25, 0.2, label="E"),
    ]

    assert digits_to_value(digits) == 0


def test_assemble_returns_new_groups(make_box):
    marker = make_box(0.0, 0.0, 0.5, 0.5, label="10")
    eight = make_box(0.30, 0.1, 0.35, 0.2, label="8")
    four = make_box(0.10, 0.1, 0.15, 0.2, label="4")
    group = ValueGroup(marker=marker, digits=(eight, four), average_confidence=0.9)

    assembled = assemble_groups([group])

    assert assembled[0].value == 48
    assert assembled[0].text == "48"
    assert assembled[0].average_confidence == 0.9
    assert group.value == 0
    assert group.digits == (eight, four)
