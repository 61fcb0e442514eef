"""Shared test fixtures for all test modules."""

import logging
import time
from collections.abc import Mapping
from typing import Any

import pytest
from pymongo.errors import AutoReconnect

from reqobserver.adapters.storage.in_memory import InMemoryEventStorage
from reqobserver.observer import RequestObserver


class FailingEventStorage:
    """Storage double whose inserts and pings always fail."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or AutoReconnect("connection lost")
        self.attempts = 0

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        self.attempts += 1
        raise self.error

    def ping(self, timeout: float) -> None:
        raise self.error


class SlowEventStorage(InMemoryEventStorage):
    """In-memory storage that sleeps before every insert."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        time.sleep(self.delay)
        super().insert_one(document, timeout)


class RecordingEventStorage(InMemoryEventStorage):
    """In-memory storage that remembers the timeouts it was given."""

    def __init__(self) -> None:
        super().__init__()
        self.insert_timeouts: list[float | None] = []
        self.ping_timeouts: list[float] = []

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        self.insert_timeouts.append(timeout)
        super().insert_one(document, timeout)

    def ping(self, timeout: float) -> None:
        self.ping_timeouts.append(timeout)


class FakeContext:
    """Minimal stand-in for grpc.ServicerContext deadline handling."""

    def __init__(self, remaining: float | None) -> None:
        self.remaining = remaining

    def time_remaining(self) -> float | None:
        return self.remaining


@pytest.fixture
def storage() -> InMemoryEventStorage:
    """Fixture providing an empty in-memory event storage."""
    return InMemoryEventStorage()


@pytest.fixture
def failing_storage() -> FailingEventStorage:
    """Fixture providing a storage whose every insert fails."""
    return FailingEventStorage()


@pytest.fixture
def recording_storage() -> RecordingEventStorage:
    """Fixture providing a storage that records the timeouts it receives."""
    return RecordingEventStorage()


@pytest.fixture
def slow_storage_factory():
    """Factory fixture for storages that delay each insert."""

    def _factory(delay: float) -> SlowEventStorage:
        return SlowEventStorage(delay)

    return _factory


@pytest.fixture
def fake_context():
    """Factory fixture for contexts with a given remaining deadline."""

    def _context(remaining: float | None) -> FakeContext:
        return FakeContext(remaining)

    return _context


@pytest.fixture
def test_logger() -> logging.Logger:
    """Propagating logger so caplog sees observer log records."""
    return logging.getLogger("tests.reqobserver")


@pytest.fixture
def observer(storage: InMemoryEventStorage, test_logger: logging.Logger) -> RequestObserver:
    """Observer backed by in-memory storage."""
    return RequestObserver(storage, logger=test_logger)


@pytest.fixture
def failing_observer(
    failing_storage: FailingEventStorage, test_logger: logging.Logger
) -> RequestObserver:
    """Observer whose every insert fails."""
    return RequestObserver(failing_storage, logger=test_logger)
