"""Lease models - slot state and grants handed to workers."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from idgate.models.enums import SlotStatus

# Timestamp value of a slot that has never been granted.
NEVER_GRANTED = 0


@dataclass
class LeaseSlot:
    """Lease state of one worker identifier."""

    id: int
    status: SlotStatus = SlotStatus.FREE
    last_timestamp: int = NEVER_GRANTED

    def is_expired(self, now: int, lease_duration: int) -> bool:
        """Check if a leased slot has outlived its window.

        Free slots and the never-granted sentinel are never expired.
        """
        if self.status is not SlotStatus.LEASED or self.last_timestamp == NEVER_GRANTED:
            return False
        return self.last_timestamp + lease_duration < now

    def reset(self) -> None:
        self.status = SlotStatus.FREE
        self.last_timestamp = NEVER_GRANTED


class LeaseGrant(BaseModel):
    """Identifier lease returned to a worker."""

    model_config = ConfigDict(frozen=True)

    id: int
    granted_at: int
    renew_by: int


class TableStats(BaseModel):
    """Point-in-time lease table counts."""

    capacity: int
    leased: int
    free: int
    lease_duration_seconds: int
