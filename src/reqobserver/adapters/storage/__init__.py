"""Storage adapters implementing EventStoragePort."""

from reqobserver.adapters.storage.in_memory import InMemoryEventStorage
from reqobserver.adapters.storage.mongo import MongoEventStorage

__all__ = [
    "InMemoryEventStorage",
    "MongoEventStorage",
]
