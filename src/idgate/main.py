"""IdGate main application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from idgate import __version__
from idgate.api import root_router, router
from idgate.config import Settings, settings
from idgate.engine import LeaseTable
from idgate.middleware import trace_id_middleware
from idgate.observability import TraceIdFilter

logger = logging.getLogger("idgate")


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(TraceIdFilter())


def build_lease_table(config: Settings) -> LeaseTable:
    """Create the lease table described by ``config``."""
    return LeaseTable(
        lease_duration_seconds=config.lease_duration_seconds,
        identifier_space_size=config.identifier_space_size,
        allocation_strategy=config.allocation_strategy,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: Settings = app.state.settings
    logger.info("Starting IdGate server...")
    logger.info(f"Environment: {config.env.value}")
    logger.info(
        f"Serving {config.identifier_space_size} identifiers, "
        f"lease {config.lease_duration_seconds}s"
    )

    yield

    # Leases are memory resident and die with the process
    stats = app.state.lease_table.stats()
    logger.info(f"Shutting down IdGate server, dropping {stats.leased} active lease(s)")


def create_app(config: Optional[Settings] = None, table: Optional[LeaseTable] = None) -> FastAPI:
    """
    Build an IdGate application.

    Args:
        config: Settings to use (defaults to the process settings)
        table: Pre-built lease table (defaults to one built from ``config``)
    """
    config = config or settings

    app = FastAPI(
        title="IdGate",
        description="Hands out leased, unique worker identifiers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.lease_table = table or build_lease_table(config)

    # Trace ID middleware (correlation across logs)
    app.middleware("http")(trace_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials=False,
        allow_methods=config.cors_allowed_methods,
        allow_headers=config.cors_allowed_headers,
    )

    app.include_router(router)
    app.include_router(root_router)
    return app


def main():
    """Entry point for the application."""
    configure_logging(settings.log_level)
    uvicorn.run(
        "idgate.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
