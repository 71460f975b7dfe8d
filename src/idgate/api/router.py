"""REST API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from idgate import __version__
from idgate.api.deps import get_lease_table
from idgate.api.schemas import (
    ConfigResponse,
    HealthResponse,
    LeaseResponse,
    StatsResponse,
)
from idgate.engine import IdentifierNotFound, IdentifiersExhausted, LeaseTable

logger = logging.getLogger("idgate.api")

ERROR_HEADER = "X-IdGate-Error"

router = APIRouter(prefix="/v1")

# Unversioned route kept for workers that call the bare root.
root_router = APIRouter()


def _exhausted(e: IdentifiersExhausted) -> HTTPException:
    # 204 carries no body, so the error code travels in a header
    return HTTPException(
        status_code=status.HTTP_204_NO_CONTENT,
        detail=e.message,
        headers={ERROR_HEADER: e.code},
    )


# ============================================================================
# Health & Config
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@router.get("/config", response_model=ConfigResponse)
async def get_config(table: LeaseTable = Depends(get_lease_table)):
    """Get effective lease configuration."""
    return ConfigResponse(
        lease_duration_seconds=table.lease_duration,
        identifier_space_size=table.capacity,
        allocation_strategy=table.allocation_strategy.value,
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(table: LeaseTable = Depends(get_lease_table)):
    """
    Get lease table counts.

    Counts reflect the last reclamation pass. Leases that expired since the
    last acquire or renew are still counted as leased.
    """
    stats = table.stats()
    return StatsResponse(**stats.model_dump(), metrics=table.metrics.snapshot())


# ============================================================================
# Leases
# ============================================================================


@router.post("/leases/acquire", response_model=LeaseResponse)
def acquire_lease(table: LeaseTable = Depends(get_lease_table)):
    """Lease a free worker identifier."""
    try:
        grant = table.acquire()
    except IdentifiersExhausted as e:
        raise _exhausted(e)
    return LeaseResponse.from_grant(grant)


@router.post("/leases/{worker_id}/renew", response_model=LeaseResponse)
def renew_lease(worker_id: int, table: LeaseTable = Depends(get_lease_table)):
    """
    Renew the lease on a worker identifier.

    A caller whose lease already lapsed is transparently granted a new
    identifier, which may differ from ``worker_id``.
    """
    try:
        grant = table.renew(worker_id)
    except IdentifierNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except IdentifiersExhausted as e:
        raise _exhausted(e)

    if grant.id != worker_id:
        logger.warning(f"Lease on {worker_id} lapsed, caller re-granted {grant.id}")
    return LeaseResponse.from_grant(grant)


@root_router.get("/", response_model=LeaseResponse)
def acquire_lease_root(table: LeaseTable = Depends(get_lease_table)):
    """Lease a free worker identifier (unversioned route)."""
    return acquire_lease(table)
