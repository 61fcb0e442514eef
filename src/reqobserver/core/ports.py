"""Port interface for event storage adapters.

The observer depends only on this protocol, not on a concrete datastore
client. Examples: MongoEventStorage, InMemoryEventStorage.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventStoragePort(Protocol):
    """Port for persisting event documents."""

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        """Insert a single document.

        Args:
            document: The event document.
            timeout: Seconds the insert may take. None uses the adapter's
                default.

        Raises:
            Exception: Whatever the underlying client raises on failure.
        """
        ...

    def ping(self, timeout: float) -> None:
        """Run one liveness round trip against the datastore."""
        ...
