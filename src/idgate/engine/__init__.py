"""IdGate engine - lease table and allocation."""

from idgate.engine.allocator import (
    FreeListAllocator,
    ScanAllocator,
    SlotAllocator,
    build_allocator,
)
from idgate.engine.errors import (
    IdentifierNotFound,
    IdentifiersExhausted,
    IdGateError,
    LeaseTableInconsistent,
)
from idgate.engine.table import LeaseTable

__all__ = [
    "FreeListAllocator",
    "IdGateError",
    "IdentifierNotFound",
    "IdentifiersExhausted",
    "LeaseTable",
    "LeaseTableInconsistent",
    "ScanAllocator",
    "SlotAllocator",
    "build_allocator",
]
