"""
Configuration tests.
"""

import pytest
from pydantic import ValidationError

from idgate.config import MAX_IDENTIFIER_SPACE_SIZE, Environment, Settings
from idgate.main import build_lease_table, create_app
from idgate.models import AllocationStrategy


def test_defaults(monkeypatch):
    for key in (
        "IDGATE_LEASE_DURATION_SECONDS",
        "IDGATE_IDENTIFIER_SPACE_SIZE",
        "IDGATE_ALLOCATION_STRATEGY",
        "IDGATE_PORT",
        "COORDINATOR.PORT",
    ):
        monkeypatch.delenv(key, raising=False)

    config = Settings(_env_file=None)

    assert config.lease_duration_seconds == 600
    assert config.identifier_space_size == MAX_IDENTIFIER_SPACE_SIZE == 65536
    assert config.allocation_strategy == AllocationStrategy.FREE_LIST
    assert config.port == 8080
    assert config.env == Environment.DEVELOPMENT


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("IDGATE_LEASE_DURATION_SECONDS", "10")
    monkeypatch.setenv("IDGATE_IDENTIFIER_SPACE_SIZE", "16")
    monkeypatch.setenv("IDGATE_ALLOCATION_STRATEGY", "scan")

    config = Settings(_env_file=None)

    assert config.lease_duration_seconds == 10
    assert config.identifier_space_size == 16
    assert config.allocation_strategy == AllocationStrategy.SCAN


def test_legacy_coordinator_keys(monkeypatch):
    monkeypatch.delenv("IDGATE_HOST", raising=False)
    monkeypatch.delenv("IDGATE_PORT", raising=False)
    monkeypatch.setenv("COORDINATOR.ADDR", "127.0.0.1")
    monkeypatch.setenv("COORDINATOR.PORT", "9001")

    config = Settings(_env_file=None)

    assert config.host == "127.0.0.1"
    assert config.port == 9001


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lease_duration_seconds": 0},
        {"identifier_space_size": 0},
        {"identifier_space_size": MAX_IDENTIFIER_SPACE_SIZE + 1},
        {"allocation_strategy": "round_robin"},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **kwargs)


def test_invalid_port_rejected(monkeypatch):
    monkeypatch.setenv("IDGATE_PORT", "70000")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_build_lease_table_from_settings():
    config = Settings(
        _env_file=None,
        lease_duration_seconds=10,
        identifier_space_size=4,
        allocation_strategy=AllocationStrategy.SCAN,
    )

    table = build_lease_table(config)

    assert table.lease_duration == 10
    assert table.capacity == 4
    assert table.allocation_strategy == AllocationStrategy.SCAN


def test_each_app_owns_its_table():
    config = Settings(_env_file=None, lease_duration_seconds=10, identifier_space_size=2)

    first = create_app(config)
    second = create_app(config)

    first.state.lease_table.acquire(now=100)

    assert first.state.lease_table is not second.state.lease_table
    assert second.state.lease_table.stats().leased == 0
