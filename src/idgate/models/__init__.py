"""IdGate data models."""

from idgate.models.enums import AllocationStrategy, SlotStatus
from idgate.models.lease import NEVER_GRANTED, LeaseGrant, LeaseSlot, TableStats

__all__ = [
    "AllocationStrategy",
    "LeaseGrant",
    "LeaseSlot",
    "NEVER_GRANTED",
    "SlotStatus",
    "TableStats",
]
