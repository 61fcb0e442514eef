"""MongoDB storage adapter for event documents."""

from collections.abc import Mapping
from typing import Any

import pymongo
from pymongo.collection import Collection
from pymongo.database import Database


class MongoEventStorage:
    """pymongo implementation of EventStoragePort.

    Holds a client scoped to one database and one collection. The
    client is thread-safe and pools its connections, so a single instance is
    shared by every request thread. pymongo connects in the background; no
    network round trip happens until the first insert or ping.

    Timeouts are applied with ``pymongo.timeout()``, which bounds every
    operation (server selection included) issued inside the block.
    """

    def __init__(
        self, client: pymongo.MongoClient, database: str, collection: str
    ) -> None:
        self._client = client
        self._database: Database = client[database]
        self._collection: Collection = self._database[collection]

    @classmethod
    def from_uri(
        cls, uri: str, database: str, collection: str
    ) -> "MongoEventStorage":
        """Create a client for ``uri`` and scope it to a database and collection.

        Raises:
            pymongo.errors.ConfigurationError: If the URI cannot be parsed or
                resolved (InvalidURI is a subclass).
        """
        return cls(pymongo.MongoClient(uri), database, collection)

    @property
    def client(self) -> pymongo.MongoClient:
        """The underlying pymongo client."""
        return self._client

    @property
    def database(self) -> Database:
        """The database events are written to."""
        return self._database

    @property
    def collection(self) -> Collection:
        """The collection every event document is inserted into."""
        return self._collection

    def insert_one(
        self, document: Mapping[str, Any], timeout: float | None = None
    ) -> None:
        """Insert a single document.

        pymongo adds an ``_id`` to the dict it inserts, so a copy is sent and
        the caller's mapping is left untouched.
        """
        with pymongo.timeout(timeout):
            self._collection.insert_one(dict(document))

    def ping(self, timeout: float) -> None:
        """Run the ``ping`` admin command within ``timeout`` seconds."""
        with pymongo.timeout(timeout):
            self._client.admin.command("ping")

    def close(self) -> None:
        """Close the client and its connection pool."""
        self._client.close()
