"""
Allocation strategy tests.
"""

from typing import Optional

import pytest

from idgate.engine import (
    FreeListAllocator,
    LeaseTableInconsistent,
    ScanAllocator,
    SlotAllocator,
    build_allocator,
)
from idgate.models import AllocationStrategy, LeaseSlot, SlotStatus


def test_free_list_is_last_in_first_out():
    allocator = FreeListAllocator(3)

    assert allocator.take() == 2
    assert allocator.take() == 1

    allocator.release(2)
    assert allocator.take() == 2
    assert allocator.take() == 0
    assert allocator.take() is None


def test_scan_returns_highest_free_slot():
    slots = [LeaseSlot(id=i) for i in range(4)]
    allocator = ScanAllocator(slots)

    slots[3].status = SlotStatus.LEASED
    assert allocator.take() == 2

    slots[2].status = SlotStatus.LEASED
    slots[1].status = SlotStatus.LEASED
    slots[0].status = SlotStatus.LEASED
    assert allocator.take() is None


def test_build_allocator_by_strategy():
    slots = [LeaseSlot(id=i) for i in range(2)]

    assert isinstance(build_allocator(AllocationStrategy.FREE_LIST, slots), FreeListAllocator)
    assert isinstance(build_allocator(AllocationStrategy.SCAN, slots), ScanAllocator)

    with pytest.raises(ValueError):
        build_allocator("round_robin", slots)


def test_free_list_prefers_most_recently_freed(make_table):
    table = make_table(identifier_space_size=3)
    table.acquire(now=1)  # 2
    table.acquire(now=2)  # 1
    table.acquire(now=3)  # 0

    # 2 and 1 have expired by t=13, freed in that order
    assert table.acquire(now=13).id == 1
    assert table.acquire(now=13).id == 2


def test_scan_prefers_highest_identifier(make_table):
    table = make_table(identifier_space_size=3, allocation_strategy=AllocationStrategy.SCAN)
    table.acquire(now=1)
    table.acquire(now=2)
    table.acquire(now=3)

    assert table.acquire(now=13).id == 2
    assert table.acquire(now=13).id == 1


@pytest.mark.parametrize("strategy", list(AllocationStrategy))
def test_two_slot_scenario_under_each_strategy(make_table, strategy):
    table = make_table(allocation_strategy=strategy)

    first = table.acquire(now=0)
    second = table.acquire(now=1)
    assert {first.id, second.id} == {0, 1}

    regranted = table.renew(first.id, now=20)
    assert regranted.id == second.id
    assert regranted.renew_by == 30


class StuckAllocator(SlotAllocator):
    """Always hands out the same identifier."""

    def __init__(self, identifier: int):
        self.identifier = identifier

    def take(self) -> Optional[int]:
        return self.identifier

    def release(self, identifier: int) -> None:
        pass


def test_allocating_leased_slot_is_fatal(table):
    grant = table.acquire(now=100)
    table._allocator = StuckAllocator(grant.id)

    with pytest.raises(LeaseTableInconsistent) as exc_info:
        table.acquire(now=101)

    assert exc_info.value.code == "LEASE_TABLE_INCONSISTENT"
    assert exc_info.value.identifier == grant.id
