"""Cycle schedule generation and batching."""

from teamfights.schedule.batches import batch_bounds, select_batch
from teamfights.schedule.generator import (
    RecurringSchedule,
    ScheduleMode,
    SeedSchedule,
    SlotKind,
    TournamentSlot,
    generate_cycle_schedule,
    generate_schedule,
    schedule_mode_for,
)

__all__ = [
    "SlotKind",
    "TournamentSlot",
    "RecurringSchedule",
    "SeedSchedule",
    "ScheduleMode",
    "schedule_mode_for",
    "generate_schedule",
    "generate_cycle_schedule",
    "batch_bounds",
    "select_batch",
]
