"""IdGate enumerations."""

from enum import Enum


class SlotStatus(str, Enum):
    """Lease slot status."""

    FREE = "free"
    LEASED = "leased"


class AllocationStrategy(str, Enum):
    """How the lease table picks a free slot."""

    # Stack of free identifiers, most recently freed on top
    FREE_LIST = "free_list"
    # Linear scan returning the highest free identifier
    SCAN = "scan"
