"""reqobserver: per-request error and metrics recording for gRPC servers."""

from reqobserver.adapters.frameworks.grpc import ObserverInterceptor
from reqobserver.adapters.logging import configure_logging
from reqobserver.adapters.storage import InMemoryEventStorage, MongoEventStorage
from reqobserver.config import ObserverSettings
from reqobserver.core.errors import (
    EventInsertError,
    ObserverConnectionError,
    ObserverError,
    PingError,
)
from reqobserver.core.identifiers import timestamp_request_id, uuid_request_id
from reqobserver.core.models import ErrorEvent, MetricsEvent
from reqobserver.core.ports import EventStoragePort
from reqobserver.observer import (
    DEFAULT_STATUS_CODE,
    PING_TIMEOUT_SECONDS,
    RequestObserver,
)

__all__ = [
    "DEFAULT_STATUS_CODE",
    "PING_TIMEOUT_SECONDS",
    "ErrorEvent",
    "EventInsertError",
    "EventStoragePort",
    "InMemoryEventStorage",
    "MetricsEvent",
    "MongoEventStorage",
    "ObserverConnectionError",
    "ObserverError",
    "ObserverInterceptor",
    "ObserverSettings",
    "PingError",
    "RequestObserver",
    "configure_logging",
    "timestamp_request_id",
    "uuid_request_id",
]
