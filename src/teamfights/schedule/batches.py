"""Split a cycle schedule into the four batches created on separate runs."""

from __future__ import annotations

from typing import List, Sequence

from teamfights.core.constants import BATCH_BOUNDS
from teamfights.core.exceptions import InvalidBatchIndex
from teamfights.schedule.generator import TournamentSlot


def batch_bounds(batch_index: int) -> tuple[int, int]:
    """Return the [start, end) slot range of `batch_index`."""
    # bool is an int subclass; True must not select batch 1
    if isinstance(batch_index, bool) or not isinstance(batch_index, int):
        raise InvalidBatchIndex(batch_index)
    try:
        return BATCH_BOUNDS[batch_index]
    except KeyError:
        raise InvalidBatchIndex(batch_index) from None


def select_batch(
    schedule: Sequence[TournamentSlot], batch_index: int
) -> List[TournamentSlot]:
    """Return the slots belonging to `batch_index` (1-4).

    Batches hold 4, 4, 4 and 2 slots of a full schedule. The seed cycle is one
    slot short, so its last batch holds a single slot.
    """
    start, end = batch_bounds(batch_index)
    return list(schedule[start:end])
