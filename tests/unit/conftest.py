"""
Shared fixtures for unit tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from app.models.point import StoredPoint
from app.services.timeseries_store import StoreWriteError


REQUIRED_ENV = {
    'DOCKER_INFLUXDB_HOST': 'http://localhost:8086',
    'DOCKER_INFLUXDB_TOKEN': 'test_token',
    'DOCKER_INFLUXDB_ORGANIZATION': 'test_org',
    'DOCKER_INFLUXDB_BUCKET': 'test_bucket',
}


class FakeStore:
    """In-memory stand-in for TimeseriesStore."""

    bucket = "test_bucket"

    def __init__(self, error: Exception = None):
        self.points: List[StoredPoint] = []
        self.write_calls = 0
        self.error = error
        self.closed = False

    def write(self, point: StoredPoint) -> None:
        self.write_calls += 1
        if self.error is not None:
            raise self.error
        self.points.append(point)

    def close(self) -> None:
        self.closed = True


class TickingClock:
    """Clock advancing one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


@pytest.fixture
def store() -> FakeStore:
    """Store that accepts every write."""
    return FakeStore()


@pytest.fixture
def failing_store() -> FakeStore:
    """Store whose writes always fail."""
    return FakeStore(error=StoreWriteError("connection refused"))


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def valid_report() -> dict:
    return {"service": "api", "endpoint": "/v1/x", "error": "timeout"}


@pytest.fixture
def broken_store() -> FakeStore:
    """Store raising an error the ingestor does not expect."""
    return FakeStore(error=RuntimeError("unexpected"))


@pytest.fixture
def influx_env() -> dict:
    """Environment carrying every required setting."""
    return dict(REQUIRED_ENV)
