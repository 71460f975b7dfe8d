"""Trace id middleware."""

from fastapi import Request

from idgate.observability.trace import set_trace_id

TRACE_HEADER = "X-Trace-ID"
REQUEST_ID_HEADER = "X-Request-ID"


async def trace_id_middleware(request: Request, call_next):
    """Adopt the caller's trace id (or mint one) and echo it on the response."""
    incoming = request.headers.get(TRACE_HEADER) or request.headers.get(REQUEST_ID_HEADER)
    trace_id = set_trace_id(incoming)
    response = await call_next(request)
    response.headers[TRACE_HEADER] = trace_id
    return response
