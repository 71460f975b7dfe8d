"""API dependencies."""

from fastapi import Request

from idgate.engine import LeaseTable


def get_lease_table(request: Request) -> LeaseTable:
    """Return the lease table owned by the running application."""
    return request.app.state.lease_table
