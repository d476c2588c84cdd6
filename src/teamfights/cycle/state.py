"""Persisted cycle progress."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from teamfights.core.constants import (
    DEFAULT_LAST_COMPLETED_SEQUENCE_NUMBER,
    DEFAULT_STATE_FILE,
)
from teamfights.core.exceptions import StateStoreUnreadable

logger = logging.getLogger(__name__)

_TIMESTAMP_FIELDS = ("cycle_start_timestamp", "last_cycle_completion_timestamp")

# Keys written by the first version of the creator script
_LEGACY_KEYS = {
    "lastTournamentDayNum": "last_completed_sequence_number",
    "currentBatch": "current_batch_index",
    "batchStartTime": "cycle_start_timestamp",
    "lastBatchCompletionTime": "last_cycle_completion_timestamp",
    "isRunning": "is_cycle_active",
}


def ensure_utc(instant: datetime) -> datetime:
    """Attach UTC to naive instants and convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; empty values mean absent."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


@dataclass
class CycleState:
    """Progress through the current 7-day cycle.

    ``current_batch_index`` is 0 when idle, 1-4 while a cycle is active and
    above 4 once every batch ran but the cycle has not been closed yet.
    """

    last_completed_sequence_number: int = DEFAULT_LAST_COMPLETED_SEQUENCE_NUMBER
    current_batch_index: int = 0
    cycle_start_timestamp: Optional[datetime] = None
    last_cycle_completion_timestamp: Optional[datetime] = None
    is_cycle_active: bool = False

    @property
    def next_sequence_number(self) -> int:
        return self.last_completed_sequence_number + 1

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        for key in _TIMESTAMP_FIELDS:
            if data[key]:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> CycleState:
        """Create from dictionary, accepting the legacy camelCase layout."""
        data = {_LEGACY_KEYS.get(k, k): v for k, v in data.items()}
        for key in _TIMESTAMP_FIELDS:
            data[key] = parse_timestamp(data.get(key))
        return cls(
            last_completed_sequence_number=int(
                data["last_completed_sequence_number"]
            ),
            current_batch_index=int(data.get("current_batch_index", 0)),
            cycle_start_timestamp=data["cycle_start_timestamp"],
            last_cycle_completion_timestamp=data[
                "last_cycle_completion_timestamp"
            ],
            is_cycle_active=bool(data.get("is_cycle_active", False)),
        )


class CycleStateStore:
    """
    JSON file holding the single CycleState record.

    The whole record is read at the start of an invocation and rewritten after
    every transition.
    """

    def __init__(self, state_file: str | Path = DEFAULT_STATE_FILE):
        self.state_file = Path(state_file)

    def read(self) -> CycleState:
        """Read the persisted state, raising StateStoreUnreadable on any problem."""
        try:
            with open(self.state_file, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("state document is not an object")
            return CycleState.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StateStoreUnreadable(self.state_file, e) from e

    def load(self) -> CycleState:
        """Read the persisted state, falling back to the seeded default."""
        try:
            state = self.read()
        except StateStoreUnreadable as e:
            logger.warning(f"{e}; initializing with default state.")
            return CycleState()
        logger.debug(f"Loaded cycle state from {self.state_file}: {state}")
        return state

    def save(self, state: CycleState) -> None:
        """Persist `state` to disk."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, "w") as f:
            json.dump(state.to_dict(), f, indent=2)
        logger.debug(f"Saved cycle state to {self.state_file}")
