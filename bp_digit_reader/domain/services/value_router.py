"""
Value Router

Maps assembled values onto systolic / diastolic / pulse.
"""

from typing import Sequence
import logging

from ..entities.bp_reading import BPReading
from ..entities.value_group import ValueGroup


logger = logging.getLogger(__name__)

# Monitor displays show these rows from top to bottom. This is a property of
# the devices being read, not something inferred from the image.
DISPLAY_ROW_ORDER = ("systolic", "diastolic", "pulse")


def route_values(
    groups: Sequence[ValueGroup],
    required: int = len(DISPLAY_ROW_ORDER)
) -> BPReading:
    """
    Assign value groups to reading slots by vertical position.

    With fewer than ``required`` groups the reading is all zeros: a partial
    display has no reliable row order. Otherwise groups are stably sorted by
    their marker's top edge and the first three fill DISPLAY_ROW_ORDER;
    extra groups are dropped.
    """
    if len(groups) < required:
        logger.debug(f"Only {len(groups)} value groups, reading discarded")
        return BPReading.zero()

    ordered = sorted(groups, key=lambda g: g.marker.y1)
    slots = {
        name: group.value
        for name, group in zip(DISPLAY_ROW_ORDER, ordered)
    }
    return BPReading(**slots)
