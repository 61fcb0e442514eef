"""Core domain models for request observability events."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class ErrorEvent:
    """One failed request.

    Attributes:
        request_id: Opaque request identifier.
        error_message: Short error summary.
        timestamp: When the event was recorded (insert time).
        details: Free-form description of the failure.
    """

    request_id: str
    error_message: str
    timestamp: datetime
    details: str

    def to_document(self) -> dict[str, Any]:
        """Return the document persisted for this event."""
        return {
            "request_id": self.request_id,
            "error_msg": self.error_message,
            "timestamp": self.timestamp,
            "details": self.details,
        }


@dataclass(frozen=True)
class MetricsEvent:
    """Performance record of one completed request.

    Attributes:
        request_id: Opaque request identifier, shared with ErrorEvent.
        service: Full name of the invoked method.
        duration_seconds: Wall-clock time spent in the handler.
        status_code: Outcome code.
        timestamp: When the event was recorded (insert time).
    """

    request_id: str
    service: str
    duration_seconds: float
    status_code: int
    timestamp: datetime

    def to_document(self) -> dict[str, Any]:
        """Return the document persisted for this event."""
        return {
            "request_id": self.request_id,
            "service": self.service,
            "duration": self.duration_seconds,
            "status_code": self.status_code,
            "timestamp": self.timestamp,
        }
