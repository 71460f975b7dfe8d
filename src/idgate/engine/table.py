"""IdGate lease table - acquire, renew and lazy reclamation of worker ids."""

import heapq
import itertools
import logging
import threading
from dataclasses import replace
from time import perf_counter
from typing import Callable, Optional

from idgate.engine.allocator import SlotAllocator, build_allocator
from idgate.engine.errors import (
    IdentifierNotFound,
    IdentifiersExhausted,
    LeaseTableInconsistent,
)
from idgate.models import (
    NEVER_GRANTED,
    AllocationStrategy,
    LeaseGrant,
    LeaseSlot,
    SlotStatus,
    TableStats,
)
from idgate.observability.metrics import (
    LEASES_ACTIVE,
    LEASES_EXHAUSTED,
    LEASES_GRANTED,
    LEASES_NOT_FOUND,
    LEASES_RECLAIMED,
    LEASES_RENEW_FALLBACK,
    LEASES_RENEWED,
    TABLE_OP_LATENCY_MS,
    MetricsRegistry,
    metrics,
)
from idgate.utils.time import epoch_seconds

logger = logging.getLogger(__name__)

DEFAULT_LEASE_DURATION_SECONDS = 600
DEFAULT_IDENTIFIER_SPACE_SIZE = 65536


class LeaseTable:
    """
    Fixed-capacity table of worker identifier leases.

    One slot exists per identifier in ``0 .. identifier_space_size - 1``.
    Every public operation holds a single lock for its full duration, so a
    scan, reclaim and grant within one call is atomic relative to all others.

    Expired leases are reclaimed lazily at the start of each operation. There
    is no background sweeper: an expired but unreclaimed slot still reads as
    leased until the next acquire or renew touches the table.
    """

    def __init__(
        self,
        lease_duration_seconds: int = DEFAULT_LEASE_DURATION_SECONDS,
        identifier_space_size: int = DEFAULT_IDENTIFIER_SPACE_SIZE,
        allocation_strategy: AllocationStrategy = AllocationStrategy.FREE_LIST,
        clock: Callable[[], int] = epoch_seconds,
        registry: Optional[MetricsRegistry] = None,
    ):
        if lease_duration_seconds < 1:
            raise ValueError(
                f"lease_duration_seconds must be positive, got {lease_duration_seconds}"
            )
        if identifier_space_size < 1:
            raise ValueError(
                f"identifier_space_size must be positive, got {identifier_space_size}"
            )

        self.lease_duration = lease_duration_seconds
        self.capacity = identifier_space_size
        self.allocation_strategy = AllocationStrategy(allocation_strategy)
        self._clock = clock
        self._metrics = registry if registry is not None else metrics
        self._lock = threading.Lock()

        self._slots: list[LeaseSlot] = [LeaseSlot(id=i) for i in range(identifier_space_size)]
        self._allocator: SlotAllocator = build_allocator(self.allocation_strategy, self._slots)
        # (stamp, sequence, identifier) for every grant and renewal with a real
        # timestamp. Renewals leave the older entry behind; it is skipped on pop.
        self._expiry_heap: list[tuple[int, int, int]] = []
        self._sequence = itertools.count()
        self._leased = 0

        logger.info(
            f"Lease table ready: {identifier_space_size} identifiers, "
            f"{lease_duration_seconds}s lease, {self.allocation_strategy.value} allocation"
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def acquire(self, now: Optional[int] = None) -> LeaseGrant:
        """
        Grant a free identifier.

        Args:
            now: Grant time in epoch seconds (defaults to the table clock)

        Returns:
            LeaseGrant for the chosen identifier

        Raises:
            IdentifiersExhausted: No slot is free after reclamation
        """
        now = self._resolve_now(now)
        start = perf_counter()
        try:
            with self._lock:
                self._reclaim_expired(now)
                return self._acquire_locked(now)
        finally:
            self._record_latency(start)

    def renew(self, identifier: int, now: Optional[int] = None) -> LeaseGrant:
        """
        Extend the lease on ``identifier``.

        If the slot is free or its window already elapsed the caller holds no
        valid lease, and a fresh acquire is performed instead. The returned
        grant may then carry a different identifier than the one requested.

        Raises:
            IdentifierNotFound: identifier is outside the identifier space
            IdentifiersExhausted: fallback acquire found no free slot
        """
        now = self._resolve_now(now)
        start = perf_counter()
        try:
            with self._lock:
                self._reclaim_expired(now)

                if not 0 <= identifier < self.capacity:
                    self._metrics.inc_counter(LEASES_NOT_FOUND)
                    raise IdentifierNotFound(identifier, self.capacity)

                slot = self._slots[identifier]
                if (
                    slot.status is SlotStatus.FREE
                    or slot.last_timestamp + self.lease_duration < now
                ):
                    logger.info(
                        f"Renewal of identifier {identifier} at {now} has no valid lease "
                        f"(status={slot.status.value}, last={slot.last_timestamp}), re-acquiring"
                    )
                    self._metrics.inc_counter(LEASES_RENEW_FALLBACK)
                    return self._acquire_locked(now)

                # A clock step backwards must not pull the deadline in
                self._stamp(slot, max(slot.last_timestamp, now))
                self._metrics.inc_counter(LEASES_RENEWED)
                logger.debug(
                    f"Renewed identifier {identifier} until {slot.last_timestamp + self.lease_duration}"
                )
                return self._grant_for(slot)
        finally:
            self._record_latency(start)

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    def stats(self) -> TableStats:
        """Return current slot counts."""
        with self._lock:
            leased = self._leased
        return TableStats(
            capacity=self.capacity,
            leased=leased,
            free=self.capacity - leased,
            lease_duration_seconds=self.lease_duration,
        )

    def slot(self, identifier: int) -> LeaseSlot:
        """Return a copy of one slot's state. Does not reclaim."""
        if not 0 <= identifier < self.capacity:
            raise IdentifierNotFound(identifier, self.capacity)
        with self._lock:
            return replace(self._slots[identifier])

    # ------------------------------------------------------------------
    # Internals, all called with the lock held
    # ------------------------------------------------------------------

    def _reclaim_expired(self, now: int) -> int:
        """Free every leased slot whose window ended before ``now``."""
        reclaimed = 0
        while self._expiry_heap and self._expiry_heap[0][0] + self.lease_duration < now:
            stamp, _, identifier = heapq.heappop(self._expiry_heap)

            slot = self._slots[identifier]
            if slot.last_timestamp != stamp or not slot.is_expired(now, self.lease_duration):
                # Superseded by a later renewal, or already reclaimed
                continue

            slot.reset()
            self._allocator.release(identifier)
            self._leased -= 1
            reclaimed += 1

        if reclaimed:
            logger.info(f"Reclaimed {reclaimed} expired identifier lease(s) at {now}")
            self._metrics.inc_counter(LEASES_RECLAIMED, reclaimed)
            self._metrics.set_gauge(LEASES_ACTIVE, self._leased)
        return reclaimed

    def _acquire_locked(self, now: int) -> LeaseGrant:
        identifier = self._allocator.take()
        if identifier is None:
            logger.warning(f"Identifier space exhausted ({self.capacity} leased)")
            self._metrics.inc_counter(LEASES_EXHAUSTED)
            raise IdentifiersExhausted(self.capacity)

        slot = self._slots[identifier]
        if slot.status is not SlotStatus.FREE:
            logger.error(f"Allocator returned non-free slot: {slot}")
            raise LeaseTableInconsistent(identifier, "allocated slot is not free")

        self._stamp(slot, now)
        self._leased += 1
        self._metrics.inc_counter(LEASES_GRANTED)
        self._metrics.set_gauge(LEASES_ACTIVE, self._leased)
        logger.debug(f"Granted identifier {identifier} at {now}")
        return self._grant_for(slot)

    def _stamp(self, slot: LeaseSlot, now: int) -> None:
        """Mark a slot leased at ``now`` and index its expiry."""
        slot.status = SlotStatus.LEASED
        slot.last_timestamp = now
        # A grant stamped with the sentinel is never considered expired
        if now != NEVER_GRANTED:
            heapq.heappush(self._expiry_heap, (now, next(self._sequence), slot.id))

    def _grant_for(self, slot: LeaseSlot) -> LeaseGrant:
        return LeaseGrant(
            id=slot.id,
            granted_at=slot.last_timestamp,
            renew_by=slot.last_timestamp + self.lease_duration,
        )

    def _resolve_now(self, now: Optional[int]) -> int:
        return self._clock() if now is None else now

    def _record_latency(self, start: float) -> None:
        self._metrics.observe(TABLE_OP_LATENCY_MS, (perf_counter() - start) * 1000.0)
