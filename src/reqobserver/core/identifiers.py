"""Request identifier generators.

A generator receives the call's start time in nanoseconds since the epoch
and returns the request identifier.
"""

import uuid
from collections.abc import Callable

RequestIdFactory = Callable[[int], str]


def timestamp_request_id(start_ns: int) -> str:
    """Format the start timestamp's nanosecond value as the identifier.

    Two calls starting within the same nanosecond get the same identifier.
    """
    return str(start_ns)


def uuid_request_id(start_ns: int) -> str:
    """Return a random UUID4, ignoring the start time."""
    return str(uuid.uuid4())
