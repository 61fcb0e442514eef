"""In-memory storage adapter for event documents."""

import threading
from collections.abc import Mapping
from typing import Any


class InMemoryEventStorage:
    """In-memory implementation of EventStoragePort.

    Stores documents in a list. Suitable for testing and for running a
    service without a datastore. Writes are serialized with a lock since
    gRPC handlers call in from many threads.
    """

    def __init__(self) -> None:
        self._documents: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        """Append a copy of the document."""
        with self._lock:
            self._documents.append(dict(document))

    def ping(self, timeout: float) -> None:
        """Always succeeds."""

    @property
    def documents(self) -> list[dict[str, Any]]:
        """All stored documents in insertion order."""
        with self._lock:
            return list(self._documents)

    def errors(self) -> list[dict[str, Any]]:
        """Stored error documents (those carrying ``error_msg``)."""
        return [doc for doc in self.documents if "error_msg" in doc]

    def metrics(self) -> list[dict[str, Any]]:
        """Stored metrics documents (those carrying ``service``)."""
        return [doc for doc in self.documents if "service" in doc]

    def clear(self) -> None:
        """Remove all stored documents."""
        with self._lock:
            self._documents.clear()
