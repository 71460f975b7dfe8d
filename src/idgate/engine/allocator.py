"""Free slot selection strategies for the lease table."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from idgate.models import AllocationStrategy, LeaseSlot, SlotStatus


class SlotAllocator(ABC):
    """
    Abstract base class for free slot selection.

    Allocators only choose identifiers. The lease table owns slot state and
    calls into the allocator while holding its lock, so implementations need
    no locking of their own.
    """

    @abstractmethod
    def take(self) -> Optional[int]:
        """
        Choose a free identifier to grant.

        Returns:
            The identifier, or None when no slot is free.
        """
        pass

    @abstractmethod
    def release(self, identifier: int) -> None:
        """Return a reclaimed identifier to the pool."""
        pass


class FreeListAllocator(SlotAllocator):
    """
    Stack of free identifiers.

    Seeded in ascending order so a fresh table grants the highest identifier
    first. Reclaimed identifiers are pushed on top and handed out before
    anything freed earlier.
    """

    def __init__(self, capacity: int):
        self._free: list[int] = list(range(capacity))

    def take(self) -> Optional[int]:
        if not self._free:
            return None
        return self._free.pop()

    def release(self, identifier: int) -> None:
        self._free.append(identifier)

    def __len__(self) -> int:
        return len(self._free)


class ScanAllocator(SlotAllocator):
    """
    Linear scan over the slot list.

    Returns the highest-index free slot. O(n) per take; release is a no-op
    because the scan reads slot status directly.
    """

    def __init__(self, slots: Sequence[LeaseSlot]):
        self._slots = slots

    def take(self) -> Optional[int]:
        for slot in reversed(self._slots):
            if slot.status is SlotStatus.FREE:
                return slot.id
        return None

    def release(self, identifier: int) -> None:
        pass


def build_allocator(
    strategy: AllocationStrategy, slots: Sequence[LeaseSlot]
) -> SlotAllocator:
    """Create the allocator for a strategy over a freshly built slot list."""
    if strategy == AllocationStrategy.FREE_LIST:
        return FreeListAllocator(len(slots))
    if strategy == AllocationStrategy.SCAN:
        return ScanAllocator(slots)
    raise ValueError(f"Unknown allocation strategy: {strategy}")
