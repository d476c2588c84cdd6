from datetime import datetime, timedelta, timezone

from teamfights.client.api import BatchOutcome, CreationResult, TeamBattleClient
from teamfights.core.config import BattleConfig
from teamfights.cycle.machine import CycleStateMachine, TickAction, due_batch
from teamfights.cycle.state import CycleState, CycleStateStore

T = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


class _RecordingClient:
    """Stands in for TeamBattleClient; fails the slots at `fail_positions`."""

    def __init__(self, fail_positions=()):
        self.fail_positions = set(fail_positions)
        self.batches = []

    def create_batch(self, slots):
        self.batches.append(list(slots))
        outcome = BatchOutcome()
        for i, slot in enumerate(slots):
            ok = i not in self.fail_positions
            outcome.add(CreationResult(slot=slot, ok=ok))
        return outcome


def _machine(tmp_path, state=None, client=None):
    store = CycleStateStore(tmp_path / "state.json")
    if state is not None:
        store.save(state)
    client = client or _RecordingClient()
    return CycleStateMachine(store, client), store, client


def test_due_batch_uses_elapsed_five_hour_windows():
    state = CycleState(cycle_start_timestamp=T, is_cycle_active=True, current_batch_index=1)
    assert due_batch(state, T) == 1
    assert due_batch(state, T + timedelta(hours=4, minutes=59)) == 1
    assert due_batch(state, T + timedelta(hours=5)) == 2
    assert due_batch(state, T + timedelta(hours=16)) == 4


def test_fresh_state_starts_cycle_and_runs_batch_one(tmp_path):
    machine, store, client = _machine(tmp_path)
    result = machine.tick(T)

    assert result.action is TickAction.BATCH_RUN
    assert result.batch_index == 1
    assert len(client.batches) == 1
    assert len(client.batches[0]) == 4
    # Default state seeds the historical first cycle
    assert client.batches[0][0].display_name == "LMAO Night '24'"

    state = store.load()
    assert state.is_cycle_active is True
    assert state.current_batch_index == 2
    assert state.cycle_start_timestamp == T
    assert result.exit_code == 0


def test_recurring_cycle_anchors_on_cycle_start(tmp_path):
    machine, store, client = _machine(
        tmp_path,
        CycleState(
            last_completed_sequence_number=30,
            last_cycle_completion_timestamp=T - timedelta(days=7),
        ),
    )
    machine.tick(T)
    first = client.batches[0][0]
    assert first.display_name == "LMAO Day '31'"
    assert first.scheduled_start == datetime(2025, 10, 5, 7, 0, tzinfo=timezone.utc)


def test_waiting_does_not_touch_state_or_client(tmp_path):
    state = CycleState(
        last_completed_sequence_number=30,
        current_batch_index=2,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    machine, store, client = _machine(tmp_path, state)
    before = store.state_file.read_bytes()

    result = machine.tick(T + timedelta(hours=3))

    assert result.action is TickAction.WAITING
    assert result.next_batch_at == T + timedelta(hours=5)
    assert client.batches == []
    assert store.state_file.read_bytes() == before
    assert result.exit_code == 0


def test_last_batch_closes_cycle(tmp_path):
    state = CycleState(
        last_completed_sequence_number=30,
        current_batch_index=4,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    machine, store, client = _machine(tmp_path, state)
    now = T + timedelta(hours=16)

    result = machine.tick(now)

    assert result.action is TickAction.CYCLE_CLOSED
    assert result.batch_index == 4
    assert [s.display_name for s in client.batches[0]] == [
        "LMAO Day '37'",
        "LMAO Night '37'",
    ]
    saved = store.load()
    assert saved.is_cycle_active is False
    assert saved.current_batch_index == 0
    assert saved.last_completed_sequence_number == 37
    assert saved.last_cycle_completion_timestamp == now
    assert result.next_cycle_at == now + timedelta(days=7)


def test_recent_completion_is_noop(tmp_path):
    now = T
    state = CycleState(
        last_completed_sequence_number=37,
        last_cycle_completion_timestamp=now - timedelta(days=3),
    )
    machine, store, client = _machine(tmp_path, state)
    before = store.state_file.read_bytes()

    result = machine.tick(now)

    assert result.action is TickAction.IDLE
    assert result.next_cycle_at == now + timedelta(days=4)
    assert client.batches == []
    assert store.state_file.read_bytes() == before


def test_completion_seven_days_ago_starts_new_cycle(tmp_path):
    state = CycleState(
        last_completed_sequence_number=37,
        last_cycle_completion_timestamp=T - timedelta(days=7),
    )
    machine, store, client = _machine(tmp_path, state)
    result = machine.tick(T)
    assert result.action is TickAction.BATCH_RUN
    assert client.batches[0][0].display_name == "LMAO Day '38'"


def test_pending_closure_is_closed(tmp_path):
    state = CycleState(
        last_completed_sequence_number=30,
        current_batch_index=5,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    machine, store, client = _machine(tmp_path, state)
    now = T + timedelta(hours=21)

    result = machine.tick(now)

    assert result.action is TickAction.CYCLE_CLOSED
    assert client.batches == []
    saved = store.load()
    assert saved.is_cycle_active is False
    assert saved.last_completed_sequence_number == 37
    assert saved.last_cycle_completion_timestamp == now


def test_partial_failure_advances_and_signals(tmp_path):
    state = CycleState(
        last_completed_sequence_number=30,
        current_batch_index=2,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    client = _RecordingClient(fail_positions={1, 3})
    machine, store, _ = _machine(tmp_path, state, client)

    result = machine.tick(T + timedelta(hours=5))

    assert result.outcome.success_count == 2
    assert result.outcome.failure_count == 2
    assert store.load().current_batch_index == 3
    assert result.exit_code == 1


def test_total_failure_keeps_batch(tmp_path):
    state = CycleState(
        last_completed_sequence_number=30,
        current_batch_index=3,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    client = _RecordingClient(fail_positions={0, 1, 2, 3})
    machine, store, _ = _machine(tmp_path, state, client)

    result = machine.tick(T + timedelta(hours=11))

    assert result.action is TickAction.BATCH_RUN
    assert store.load().current_batch_index == 3
    assert result.exit_code == 1

    # The next run retries the same slots
    machine.tick(T + timedelta(hours=12))
    assert client.batches[0] == client.batches[1]


def test_seed_cycle_closes_at_day_thirty(tmp_path):
    state = CycleState(
        last_completed_sequence_number=23,
        current_batch_index=4,
        cycle_start_timestamp=T,
        is_cycle_active=True,
    )
    machine, store, client = _machine(tmp_path, state)
    machine.tick(T + timedelta(hours=15))
    assert [s.display_name for s in client.batches[0]] == ["LMAO Night '30'"]
    assert store.load().last_completed_sequence_number == 30


def test_peek_has_no_side_effects(tmp_path):
    machine, store, client = _machine(tmp_path)
    result = machine.peek(T)
    assert result.action is TickAction.BATCH_RUN
    assert result.batch_index == 1
    assert client.batches == []
    assert not store.state_file.exists()


def test_full_cycle_with_dry_run_client(tmp_path):
    sleeps = []
    client = TeamBattleClient(
        BattleConfig(dry_run=True), "lip_abcdefghijklmnop", sleep=sleeps.append
    )
    state = CycleState(
        last_completed_sequence_number=30,
        last_cycle_completion_timestamp=T - timedelta(days=8),
    )
    machine, store, _ = _machine(tmp_path, state, client)

    actions = [
        machine.tick(T + timedelta(hours=h)).action for h in (0, 1, 5, 10, 14, 15)
    ]

    assert actions == [
        TickAction.BATCH_RUN,
        TickAction.WAITING,
        TickAction.BATCH_RUN,
        TickAction.BATCH_RUN,
        TickAction.WAITING,
        TickAction.CYCLE_CLOSED,
    ]
    # 3 + 3 + 3 + 1 pauses across the four batches
    assert len(sleeps) == 10
    saved = store.load()
    assert saved.last_completed_sequence_number == 37
    assert saved.is_cycle_active is False
