"""
Tournament schedule generation for one 7-day cycle.

A cycle covers seven consecutive sequence days. Each day gets an Opening
("Day") battle at 07:00 UTC and a Closing ("Night") battle at 18:58 UTC.
Generation is a pure function of its inputs so every invocation of the
scheduler can rebuild the exact same schedule from persisted state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import List, Union

from teamfights.core.constants import (
    CLOSING_TIME,
    DAYS_PER_CYCLE,
    DESCRIPTION_TEMPLATE,
    NAME_TEMPLATE,
    OPENING_TIME,
    SEED_ANCHOR_DATE,
    SEED_CLOSING_START,
    SEED_SEQUENCE_NUMBER,
)


class SlotKind(Enum):
    """The two battles held on each sequence day."""

    OPENING = "Day"
    CLOSING = "Night"

    @property
    def label(self) -> str:
        return self.value

    @property
    def start_time(self) -> time:
        hour, minute = OPENING_TIME if self is SlotKind.OPENING else CLOSING_TIME
        return time(hour, minute, tzinfo=timezone.utc)


def build_tournament_name(sequence_number: int, kind: SlotKind) -> str:
    return NAME_TEMPLATE.format(label=kind.label, number=sequence_number)


def build_description(sequence_number: int, kind: SlotKind) -> str:
    return DESCRIPTION_TEMPLATE.format(label=kind.label, number=sequence_number)


def format_start(instant: datetime) -> str:
    """Render an instant as ISO-8601 UTC with milliseconds and a Z suffix."""
    instant = instant.astimezone(timezone.utc)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class TournamentSlot:
    """One scheduled team battle."""

    sequence_number: int
    kind: SlotKind
    scheduled_start: datetime

    @property
    def display_name(self) -> str:
        return build_tournament_name(self.sequence_number, self.kind)

    @property
    def description(self) -> str:
        return build_description(self.sequence_number, self.kind)

    @property
    def start_iso(self) -> str:
        return format_start(self.scheduled_start)

    @classmethod
    def on(cls, sequence_number: int, kind: SlotKind, day: date) -> TournamentSlot:
        """Create the slot of `kind` held on calendar `day`."""
        return cls(
            sequence_number=sequence_number,
            kind=kind,
            scheduled_start=datetime.combine(day, kind.start_time),
        )


@dataclass(frozen=True)
class RecurringSchedule:
    """Regular cycle: seven days starting at `anchor_date`."""

    start_sequence_number: int
    anchor_date: date


@dataclass(frozen=True)
class SeedSchedule:
    """The one-time bootstrap cycle that opened with Night 24 on 2025-09-07.

    Its first slot is pinned to a historical instant and the following six
    days run from 2025-09-08, so it holds 13 slots rather than 14.
    """

    sequence_number: int = SEED_SEQUENCE_NUMBER
    closing_start: datetime = SEED_CLOSING_START
    anchor_date: date = SEED_ANCHOR_DATE


ScheduleMode = Union[RecurringSchedule, SeedSchedule]


def schedule_mode_for(start_sequence_number: int, anchor_date: date) -> ScheduleMode:
    """Pick the generation mode for a cycle starting at `start_sequence_number`."""
    if start_sequence_number == SEED_SEQUENCE_NUMBER:
        return SeedSchedule()
    return RecurringSchedule(start_sequence_number, anchor_date)


def _day_pair(sequence_number: int, day: date) -> List[TournamentSlot]:
    return [
        TournamentSlot.on(sequence_number, SlotKind.OPENING, day),
        TournamentSlot.on(sequence_number, SlotKind.CLOSING, day),
    ]


def generate_schedule(mode: ScheduleMode) -> List[TournamentSlot]:
    """Generate the ordered slots for one cycle."""
    slots: List[TournamentSlot] = []

    if isinstance(mode, SeedSchedule):
        slots.append(
            TournamentSlot(
                sequence_number=mode.sequence_number,
                kind=SlotKind.CLOSING,
                scheduled_start=mode.closing_start,
            )
        )
        for offset in range(1, DAYS_PER_CYCLE):
            day = mode.anchor_date + timedelta(days=offset)
            slots.extend(_day_pair(mode.sequence_number + offset, day))
        return slots

    for offset in range(DAYS_PER_CYCLE):
        day = mode.anchor_date + timedelta(days=offset)
        slots.extend(_day_pair(mode.start_sequence_number + offset, day))
    return slots


def generate_cycle_schedule(
    start_sequence_number: int, anchor_date: date
) -> List[TournamentSlot]:
    """Generate the schedule for a cycle, applying the seed case when it matches."""
    return generate_schedule(schedule_mode_for(start_sequence_number, anchor_date))
