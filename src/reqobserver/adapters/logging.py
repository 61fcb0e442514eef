"""JSON log output for the observer.

Log calls go through the standard library ``logging`` module; this adapter
attaches a stderr handler to the ``reqobserver`` logger that renders each
record as one JSON line with structlog's ProcessorFormatter. Fields passed
via ``extra=`` become top-level keys.
"""

import logging
import sys
from typing import Any, TextIO

import structlog

LOGGER_NAME = "reqobserver"

# Attribute set on our handler so repeated configuration is a no-op
_HANDLER_MARKER = "_reqobserver_json_handler"


def _pre_chain() -> list[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def json_formatter() -> logging.Formatter:
    """Build a formatter that renders stdlib log records as JSON."""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=_pre_chain(),
    )


def configure_logging(
    level: int | str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach the JSON stderr handler to the ``reqobserver`` logger.

    Safe to call multiple times; the handler is only added once. When the
    handler is attached the logger stops propagating, so host applications
    with their own root handlers do not print observer records twice. Later
    calls leave propagation alone.

    Args:
        level: Logger level. When omitted, an unset level becomes INFO and a
            level chosen by the host application is kept.
        stream: Output stream (default ``sys.stderr``).

    Returns:
        The configured ``reqobserver`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    if not any(getattr(h, _HANDLER_MARKER, False) for h in logger.handlers):
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(json_formatter())
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)
        logger.propagate = False
    return logger
