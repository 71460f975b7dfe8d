"""API request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from idgate.models import LeaseGrant


class LeaseResponse(BaseModel):
    """Identifier lease response, shared by acquire and renew."""

    id: int = Field(..., description="Granted worker identifier")
    ts: int = Field(..., description="Grant time, epoch seconds")
    re_ts: int = Field(..., description="Deadline to renew by, epoch seconds")

    @classmethod
    def from_grant(cls, grant: LeaseGrant) -> "LeaseResponse":
        return cls(id=grant.id, ts=grant.granted_at, re_ts=grant.renew_by)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ConfigResponse(BaseModel):
    """Effective lease configuration."""

    lease_duration_seconds: int
    identifier_space_size: int
    allocation_strategy: str


class StatsResponse(BaseModel):
    """Lease table counts and metrics snapshot."""

    capacity: int
    leased: int
    free: int
    lease_duration_seconds: int
    metrics: dict[str, Any] = Field(default_factory=dict)
