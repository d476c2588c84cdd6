"""Cycle progress persistence and the batch state machine."""

from teamfights.cycle.machine import CycleStateMachine, TickAction, TickResult
from teamfights.cycle.state import CycleState, CycleStateStore

__all__ = [
    "CycleState",
    "CycleStateStore",
    "CycleStateMachine",
    "TickAction",
    "TickResult",
]
