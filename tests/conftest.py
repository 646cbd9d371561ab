"""Shared test fixtures."""

import pytest

from fx.store import RateStore
from ingestion.event_log import EventLog
from ratedb import create_service


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def store(db_service):
    """RateStore with the exchange_rates table already created."""
    rate_store = RateStore(db_service)
    rate_store.ensure_schema()
    return rate_store


@pytest.fixture
def event_log(tmp_path):
    return EventLog(tmp_path / "exchange_rate_log.txt")
