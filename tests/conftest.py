"""
Pytest fixtures for IdGate tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing idgate modules.
os.environ.setdefault("IDGATE_ENV", "development")
os.environ.setdefault("IDGATE_LOG_LEVEL", "DEBUG")

from idgate.config import Settings
from idgate.engine import LeaseTable
from idgate.main import create_app
from idgate.models import AllocationStrategy
from idgate.observability.metrics import MetricsRegistry

pytest_plugins = ("pytest_asyncio",)

TEST_LEASE_DURATION = 10
TEST_IDENTIFIER_SPACE = 2


class FakeClock:
    """Settable epoch-seconds clock."""

    def __init__(self, now: int = 1_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    """Fresh metrics registry so counters start at zero."""
    return MetricsRegistry()


@pytest.fixture
def make_table(clock, registry):
    """Factory for isolated lease tables on the fake clock."""

    def _make(
        lease_duration_seconds: int = TEST_LEASE_DURATION,
        identifier_space_size: int = TEST_IDENTIFIER_SPACE,
        allocation_strategy: AllocationStrategy = AllocationStrategy.FREE_LIST,
    ) -> LeaseTable:
        return LeaseTable(
            lease_duration_seconds=lease_duration_seconds,
            identifier_space_size=identifier_space_size,
            allocation_strategy=allocation_strategy,
            clock=clock,
            registry=registry,
        )

    return _make


@pytest.fixture
def table(make_table):
    return make_table()


@pytest.fixture
def test_settings():
    return Settings(
        lease_duration_seconds=TEST_LEASE_DURATION,
        identifier_space_size=TEST_IDENTIFIER_SPACE,
    )


@pytest.fixture
async def client(test_settings, table):
    """Async test client bound to an app that owns ``table``."""
    app = create_app(test_settings, table=table)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
