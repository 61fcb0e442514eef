"""Exceptions raised by the observer.

Every error raised here is chained to the underlying driver exception, so
``exc.__cause__`` holds the original failure.
"""


class ObserverError(Exception):
    """Base class for observer failures."""


class ObserverConnectionError(ObserverError):
    """The datastore client could not be constructed."""


class EventInsertError(ObserverError):
    """An event document could not be inserted."""


class PingError(ObserverError):
    """The datastore did not answer a liveness check."""
