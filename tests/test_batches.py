from datetime import date

import pytest

from teamfights.core.exceptions import InvalidBatchIndex
from teamfights.schedule.batches import batch_bounds, select_batch
from teamfights.schedule.generator import SeedSchedule, generate_cycle_schedule, generate_schedule


@pytest.fixture
def schedule():
    return generate_cycle_schedule(31, date(2025, 9, 14))


@pytest.mark.parametrize("index,size", [(1, 4), (2, 4), (3, 4), (4, 2)])
def test_batch_sizes(schedule, index, size):
    assert len(select_batch(schedule, index)) == size


def test_batches_partition_schedule(schedule):
    joined = [slot for i in range(1, 5) for slot in select_batch(schedule, i)]
    assert joined == schedule


def test_batch_contents(schedule):
    batch = select_batch(schedule, 2)
    assert [s.display_name for s in batch] == [
        "LMAO Day '33'",
        "LMAO Night '33'",
        "LMAO Day '34'",
        "LMAO Night '34'",
    ]


@pytest.mark.parametrize("index", [0, 5, -1, 2.0, "1", None, True])
def test_invalid_index(schedule, index):
    with pytest.raises(InvalidBatchIndex):
        select_batch(schedule, index)


def test_seed_last_batch_is_short():
    seed = generate_schedule(SeedSchedule())
    assert len(select_batch(seed, 4)) == 1
    assert batch_bounds(4) == (12, 14)
