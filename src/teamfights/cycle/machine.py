"""
Cycle state machine driving batch creation.

The scheduler runs as a short-lived process invoked on a timer. Each
invocation performs one tick:

1. Start a new cycle when none is active and the previous one completed at
   least 7 days ago (or never).
2. Do nothing when no cycle is active.
3. Wait while the current batch is not yet due; batch ``n`` becomes due
   ``(n - 1) * 5`` hours after the cycle started.
4. Close a cycle whose four batches have all run.
5. Otherwise create the due batch, advance on any success and close the
   cycle right away after the last batch.

Progress is persisted after every transition so the next invocation picks
up where this one stopped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from teamfights.client.api import BatchOutcome, TeamBattleClient
from teamfights.core.constants import (
    BATCH_COUNT,
    BATCH_INTERVAL,
    CYCLE_INTERVAL,
    DAYS_PER_CYCLE,
)
from teamfights.core.logging import log_timing
from teamfights.cycle.state import CycleState, CycleStateStore, ensure_utc
from teamfights.schedule.batches import select_batch
from teamfights.schedule.generator import generate_cycle_schedule

logger = logging.getLogger(__name__)


class TickAction(Enum):
    """What a tick did (or, for ``peek``, would do)."""

    IDLE = "idle"  # No active cycle, next one not due yet
    WAITING = "waiting"  # Cycle active, current batch not due yet
    BATCH_RUN = "batch_run"  # The due batch was executed
    CYCLE_CLOSED = "cycle_closed"  # All batches done, cycle closed


@dataclass
class TickResult:
    """Summary of one tick."""

    action: TickAction
    state: CycleState
    batch_index: Optional[int] = None
    outcome: Optional[BatchOutcome] = None
    next_batch_at: Optional[datetime] = None
    next_cycle_at: Optional[datetime] = None

    @property
    def exit_code(self) -> int:
        if self.outcome is not None and self.outcome.failure_count > 0:
            return 1
        return 0


def should_start_cycle(state: CycleState, now: datetime) -> bool:
    if state.is_cycle_active:
        return False
    last = state.last_cycle_completion_timestamp
    return last is None or now - last >= CYCLE_INTERVAL


def due_batch(state: CycleState, now: datetime) -> int:
    """Batch number due at `now`, counted from the cycle start."""
    elapsed = now - state.cycle_start_timestamp
    return int(elapsed // BATCH_INTERVAL) + 1


def batch_due_at(state: CycleState, batch_index: int) -> datetime:
    """First instant at which `batch_index` is due."""
    return state.cycle_start_timestamp + (batch_index - 1) * BATCH_INTERVAL


def next_cycle_at(state: CycleState) -> Optional[datetime]:
    last = state.last_cycle_completion_timestamp
    return None if last is None else last + CYCLE_INTERVAL


def start_cycle(state: CycleState, now: datetime) -> CycleState:
    return replace(
        state,
        is_cycle_active=True,
        current_batch_index=1,
        cycle_start_timestamp=now,
    )


def close_cycle(state: CycleState, now: datetime) -> CycleState:
    return replace(
        state,
        is_cycle_active=False,
        current_batch_index=0,
        last_cycle_completion_timestamp=now,
        last_completed_sequence_number=(
            state.last_completed_sequence_number + DAYS_PER_CYCLE
        ),
    )


class CycleStateMachine:
    """
    Runs one tick of the batch cycle against persisted state.

    Args:
        store: Where cycle progress is persisted
        client: Creates the team battles of a batch
        clock: Returns the current instant (injectable for tests)
    """

    def __init__(
        self,
        store: CycleStateStore,
        client: TeamBattleClient,
        clock=None,
    ):
        self.store = store
        self.client = client
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now if now is not None else self.clock())

    def peek(self, now: Optional[datetime] = None) -> TickResult:
        """Report what `tick` would do at `now` without side effects."""
        now = self._now(now)
        state = self.store.load()
        if should_start_cycle(state, now):
            state = start_cycle(state, now)

        if not state.is_cycle_active:
            return TickResult(
                TickAction.IDLE, state, next_cycle_at=next_cycle_at(state)
            )

        current = state.current_batch_index
        if due_batch(state, now) < current:
            return TickResult(
                TickAction.WAITING,
                state,
                batch_index=current,
                next_batch_at=batch_due_at(state, current),
            )
        if current > BATCH_COUNT:
            return TickResult(TickAction.CYCLE_CLOSED, state)
        return TickResult(TickAction.BATCH_RUN, state, batch_index=current)

    def tick(self, now: Optional[datetime] = None) -> TickResult:
        """Advance the cycle by one invocation."""
        now = self._now(now)
        state = self.store.load()

        if should_start_cycle(state, now):
            logger.info("Starting new 7-day tournament cycle...")
            state = start_cycle(state, now)
            self.store.save(state)

        if not state.is_cycle_active:
            upcoming = next_cycle_at(state)
            logger.info(
                "No batch cycle is currently running. Next cycle starts at %s",
                upcoming.isoformat() if upcoming else "the next run",
            )
            return TickResult(TickAction.IDLE, state, next_cycle_at=upcoming)

        current = state.current_batch_index
        if due_batch(state, now) < current:
            due_at = batch_due_at(state, current)
            logger.info(
                f"Waiting for next batch. Batch {current} starts at: "
                f"{due_at.isoformat()}"
            )
            return TickResult(
                TickAction.WAITING, state, batch_index=current, next_batch_at=due_at
            )

        if current > BATCH_COUNT:
            logger.info("All batches completed for this cycle. Closing it.")
            state = close_cycle(state, now)
            self.store.save(state)
            return TickResult(
                TickAction.CYCLE_CLOSED, state, next_cycle_at=next_cycle_at(state)
            )

        return self._run_batch(state, now)

    def _run_batch(self, state: CycleState, now: datetime) -> TickResult:
        batch_index = state.current_batch_index
        start_number = state.next_sequence_number
        anchor = state.cycle_start_timestamp.astimezone(timezone.utc).date()

        schedule = generate_cycle_schedule(start_number, anchor)
        slots = select_batch(schedule, batch_index)

        logger.info(f"=== BATCH {batch_index}/{BATCH_COUNT} ===")
        logger.info(
            f"Creating tournaments {start_number} to "
            f"{start_number + DAYS_PER_CYCLE - 1}"
        )
        logger.info(f"Total tournaments in cycle: {len(schedule)}")

        with log_timing(logger, f"batch {batch_index}/{BATCH_COUNT}"):
            outcome = self.client.create_batch(slots)

        logger.info(
            f"=== BATCH {batch_index} SUMMARY === "
            f"successful={outcome.success_count} failed={outcome.failure_count}"
        )

        action = TickAction.BATCH_RUN
        if outcome.success_count > 0:
            state = replace(state, current_batch_index=batch_index + 1)
            if state.current_batch_index > BATCH_COUNT:
                state = close_cycle(state, now)
                action = TickAction.CYCLE_CLOSED
                logger.info(
                    f"Cycle completed! Next cycle will start from Day "
                    f"{state.next_sequence_number}"
                )
        self.store.save(state)

        if outcome.failure_count > 0:
            logger.error(
                f"{outcome.failure_count} tournament(s) in batch {batch_index} "
                f"failed to create. Check the errors above."
            )

        return TickResult(
            action,
            state,
            batch_index=batch_index,
            outcome=outcome,
            next_cycle_at=next_cycle_at(state),
        )
