"""Request observer: records per-request error and metrics events.

The observer writes one document per event into a single collection. Error
recording reports insert failures to its caller; metrics recording logs and
swallows them so that telemetry never changes the outcome of the request it
measures.
"""

import contextlib
import logging
import math
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

import grpc
from pymongo.errors import PyMongoError

from reqobserver.adapters.frameworks.grpc import ObserverInterceptor
from reqobserver.adapters.logging import configure_logging
from reqobserver.adapters.storage.mongo import MongoEventStorage
from reqobserver.config import ObserverSettings
from reqobserver.core.errors import (
    EventInsertError,
    ObserverConnectionError,
    PingError,
)
from reqobserver.core.identifiers import RequestIdFactory, timestamp_request_id
from reqobserver.core.models import ErrorEvent, MetricsEvent, utc_now
from reqobserver.core.ports import EventStoragePort

PING_TIMEOUT_SECONDS = 10.0

# Recorded for every intercepted call, failed or not. Failed calls are told
# apart by their error document, not by this code.
DEFAULT_STATUS_CODE = 200

# gRPC reports calls without a deadline as an effectively infinite remaining
# time; anything above this is treated as "no deadline".
_MAX_CONTEXT_TIMEOUT_SECONDS = 24 * 60 * 60.0

# Lower bound for a context-derived timeout; pymongo rejects negative values
# and an expired deadline must still fail fast.
_MIN_CONTEXT_TIMEOUT_SECONDS = 0.001

Handler = Callable[[Any, Any], Any]


def _context_timeout(context: Any) -> float | None:
    """Seconds left on a deadline-bearing context, or None for no deadline.

    Accepts a ``grpc.ServicerContext`` or anything else exposing
    ``time_remaining()``. Other values (including None) carry no deadline.
    """
    time_remaining = getattr(context, "time_remaining", None)
    if time_remaining is None:
        return None
    remaining = time_remaining()
    if remaining is None or not math.isfinite(remaining):
        return None
    if remaining > _MAX_CONTEXT_TIMEOUT_SECONDS:
        return None
    return max(remaining, _MIN_CONTEXT_TIMEOUT_SECONDS)


def _error_message(exc: Exception, context: Any) -> str:
    """Message recorded for a failed call.

    ``context.abort()`` raises an exception without a message, leaving the
    status on the context. In that case the message is built from the
    context's code and details, e.g.
    ``"rpc error: code = NOT_FOUND desc = missing"``.
    """
    message = str(exc)
    if message:
        return message
    code = getattr(context, "code", None)
    status = code() if callable(code) else None
    if status is None:
        return message
    get_details = getattr(context, "details", None)
    details = (get_details() if callable(get_details) else None) or ""
    # grpc keeps aborted details encoded
    if isinstance(details, bytes):
        details = details.decode("utf-8", errors="replace")
    name = getattr(status, "name", status)
    return f"rpc error: code = {name} desc = {details}"


class RequestObserver:
    """Records request errors and metrics into an event store.

    Example:
        ```python
        observer = RequestObserver.connect(
            "mongodb://localhost:27017", "obs", "events"
        )
        server = grpc.server(
            futures.ThreadPoolExecutor(max_workers=10),
            interceptors=[observer.interceptor()],
        )
        ```

    The storage adapter is shared by all request threads and must be safe
    for concurrent use; the observer adds no locking of its own.
    """

    def __init__(
        self,
        storage: EventStoragePort,
        logger: logging.Logger | None = None,
        request_id_factory: RequestIdFactory = timestamp_request_id,
        status_code: int = DEFAULT_STATUS_CODE,
    ) -> None:
        """Initialize the observer with a storage adapter.

        Args:
            storage: Adapter implementing EventStoragePort.
            logger: Logger for insert failures. Defaults to this module's
                logger.
            request_id_factory: Turns a call's start time in nanoseconds into
                its request identifier. Defaults to the decimal timestamp.
            status_code: Status code recorded for every intercepted call.
        """
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)
        self.request_id_factory = request_id_factory
        self.status_code = status_code

    @classmethod
    def connect(
        cls,
        mongo_uri: str,
        database: str,
        collection: str,
        **kwargs: Any,
    ) -> "RequestObserver":
        """Create an observer backed by a MongoDB collection.

        The client connects lazily, so an unreachable server is not detected
        here; use ``ping()`` for that. Inputs are not validated beyond what
        pymongo itself rejects.

        Args:
            mongo_uri: MongoDB connection string.
            database: Database name.
            collection: Collection name.
            **kwargs: Forwarded to the constructor.

        Raises:
            ObserverConnectionError: If the client cannot be created.
        """
        try:
            storage = MongoEventStorage.from_uri(mongo_uri, database, collection)
        except (PyMongoError, ValueError) as exc:
            raise ObserverConnectionError(
                f"failed to connect to MongoDB: {exc}"
            ) from exc
        configure_logging()
        return cls(storage, **kwargs)

    @classmethod
    def from_settings(
        cls, settings: ObserverSettings | None = None, **kwargs: Any
    ) -> "RequestObserver":
        """Create a MongoDB-backed observer from ObserverSettings.

        Settings are read from the environment when not given.
        """
        settings = settings or ObserverSettings()
        configure_logging(settings.log_level)
        return cls.connect(
            settings.mongo_uri, settings.database, settings.collection, **kwargs
        )

    def log_error(
        self,
        context: Any,
        request_id: str,
        error_message: str,
        details: str,
    ) -> None:
        """Persist one ErrorEvent.

        Args:
            context: Deadline-bearing context bounding the insert (e.g. a
                ``grpc.ServicerContext``), or None.
            request_id: Request identifier.
            error_message: Short error summary.
            details: Free-form description.

        Raises:
            EventInsertError: If the insert fails. The failure is also logged.
        """
        event = ErrorEvent(
            request_id=request_id,
            error_message=error_message,
            timestamp=utc_now(),
            details=details,
        )
        try:
            self.storage.insert_one(
                event.to_document(), timeout=_context_timeout(context)
            )
        except Exception as exc:
            self.logger.error("Error logging to MongoDB", extra={"error": str(exc)})
            raise EventInsertError(f"failed to insert error event: {exc}") from exc

    def log_metrics(
        self,
        context: Any,
        request_id: str,
        service: str,
        duration: float | timedelta,
        status_code: int,
    ) -> None:
        """Persist one MetricsEvent. Never raises on insert failure.

        Args:
            context: Deadline-bearing context bounding the insert, or None.
            request_id: Request identifier.
            service: Full name of the invoked method.
            duration: Elapsed time in seconds, or a timedelta.
            status_code: Outcome code, not range checked.
        """
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()
        event = MetricsEvent(
            request_id=request_id,
            service=service,
            duration_seconds=float(duration),
            status_code=status_code,
            timestamp=utc_now(),
        )
        try:
            self.storage.insert_one(
                event.to_document(), timeout=_context_timeout(context)
            )
        except Exception as exc:
            self.logger.error(
                "Error logging metrics to MongoDB", extra={"error": str(exc)}
            )

    def wrap(self, handler: Handler, method: str) -> Handler:
        """Wrap a ``(request, context)`` handler with error and metrics recording.

        The returned callable returns the handler's response, or re-raises its
        exception, unchanged. Duration is measured up to the handler's return,
        before any insert.

        Args:
            handler: The request handler to observe.
            method: Method name recorded as the metrics ``service``.
        """

        def observed(request: Any, context: Any) -> Any:
            start_ns = time.time_ns()
            start = time.perf_counter()
            request_id = self.request_id_factory(start_ns)
            try:
                response = handler(request, context)
            except Exception as exc:
                duration = time.perf_counter() - start
                message = _error_message(exc, context)
                # Already logged by log_error; the caller must see only exc
                with contextlib.suppress(EventInsertError):
                    self.log_error(
                        context, request_id, message, f"Request failed: {message}"
                    )
                self.log_metrics(context, request_id, method, duration, self.status_code)
                raise
            duration = time.perf_counter() - start
            self.log_metrics(context, request_id, method, duration, self.status_code)
            return response

        return observed

    def interceptor(self) -> grpc.ServerInterceptor:
        """Return a gRPC server interceptor that observes unary-unary calls."""
        return ObserverInterceptor(self)

    def ping(self) -> None:
        """Check datastore liveness within a fixed 10 second timeout.

        Raises:
            PingError: If the datastore does not answer.
        """
        try:
            self.storage.ping(PING_TIMEOUT_SECONDS)
        except Exception as exc:
            raise PingError(f"failed to ping MongoDB: {exc}") from exc
