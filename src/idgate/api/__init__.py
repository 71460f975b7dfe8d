"""IdGate HTTP API."""

from idgate.api.router import root_router, router

__all__ = ["root_router", "router"]
