"""Middleware components for IdGate API."""

from idgate.middleware.trace import trace_id_middleware

__all__ = ["trace_id_middleware"]
