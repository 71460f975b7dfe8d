"""IdGate engine errors."""


class IdGateError(Exception):
    """Base error for IdGate operations."""

    def __init__(self, message: str, code: str = "IDGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class IdentifiersExhausted(IdGateError):
    """No free identifier is left after reclamation."""

    def __init__(self, capacity: int):
        super().__init__(
            f"No free identifier available (capacity: {capacity})",
            "IDENTIFIERS_EXHAUSTED",
        )
        self.capacity = capacity


class IdentifierNotFound(IdGateError):
    """Identifier is outside the configured identifier space."""

    def __init__(self, identifier: int, capacity: int):
        super().__init__(
            f"Identifier not found: {identifier} (valid range 0..{capacity - 1})",
            "IDENTIFIER_NOT_FOUND",
        )
        self.identifier = identifier
        self.capacity = capacity


class LeaseTableInconsistent(IdGateError):
    """
    The lease table observed a state the locking discipline rules out.

    Raised when the allocator hands out a slot that is not free. This is a
    bug, not a client error, and is never handled by the API layer.
    """

    def __init__(self, identifier: int, detail: str):
        super().__init__(
            f"Lease table inconsistent at slot {identifier}: {detail}",
            "LEASE_TABLE_INCONSISTENT",
        )
        self.identifier = identifier
