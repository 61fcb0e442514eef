"""BDD step definitions for request observation features."""

from dataclasses import dataclass
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from reqobserver.adapters.storage.in_memory import InMemoryEventStorage
from reqobserver.core.errors import EventInsertError, ObserverConnectionError
from reqobserver.observer import RequestObserver


@dataclass
class ObserverScenarioContext:
    """State shared between the steps of one scenario."""

    storage: Any = None
    handler: Any = None
    response: Any = None
    error: Exception | None = None
    observer: RequestObserver | None = None

    def build_observer(self) -> RequestObserver:
        return RequestObserver(self.storage)


@pytest.fixture
def ctx() -> ObserverScenarioContext:
    """Fresh scenario context for each test."""
    return ObserverScenarioContext()


# === Given ===
@given("in-memory event storage")
def step_in_memory_storage(ctx: ObserverScenarioContext) -> None:
    ctx.storage = InMemoryEventStorage()


@given("event storage that rejects every insert")
def step_failing_storage(ctx: ObserverScenarioContext, failing_storage) -> None:
    ctx.storage = failing_storage


@given(parsers.parse('a handler that returns "{value}"'))
def step_ok_handler(ctx: ObserverScenarioContext, value: str) -> None:
    ctx.handler = lambda request, context: value


@given(parsers.parse('a handler that fails with "{message}"'))
def step_failing_handler(ctx: ObserverScenarioContext, message: str) -> None:
    def handler(request: Any, context: Any) -> Any:
        raise RuntimeError(message)

    ctx.handler = handler


# === When ===
@when(
    parsers.parse(
        'an error is logged for request "{request_id}" with message "{message}" '
        'and details "{details}"'
    )
)
def step_log_error(
    ctx: ObserverScenarioContext, request_id: str, message: str, details: str
) -> None:
    try:
        ctx.build_observer().log_error(None, request_id, message, details)
    except Exception as e:
        ctx.error = e


@when(parsers.parse('the handler is invoked through the observer as "{method}"'))
def step_invoke(ctx: ObserverScenarioContext, method: str) -> None:
    observed = ctx.build_observer().wrap(ctx.handler, method)
    try:
        ctx.response = observed(b"request", None)
    except Exception as e:
        ctx.error = e


@when(parsers.parse('an observer is connected to "{uri}"'))
def step_connect(ctx: ObserverScenarioContext, uri: str) -> None:
    try:
        ctx.observer = RequestObserver.connect(uri, "obs", "events")
    except Exception as e:
        ctx.error = e


# === Then ===
@then(parsers.parse('the caller receives "{value}"'))
def step_caller_receives(ctx: ObserverScenarioContext, value: str) -> None:
    assert ctx.error is None
    assert ctx.response == value


@then(parsers.parse('the caller receives the error "{message}"'))
def step_caller_receives_error(ctx: ObserverScenarioContext, message: str) -> None:
    assert isinstance(ctx.error, RuntimeError)
    assert str(ctx.error) == message


@then(parsers.re(r"the storage holds (?P<count>\d+) error events?"), converters={"count": int})
def step_error_count(ctx: ObserverScenarioContext, count: int) -> None:
    assert len(ctx.storage.errors()) == count


@then(parsers.re(r"the storage holds (?P<count>\d+) metrics events?"), converters={"count": int})
def step_metrics_count(ctx: ObserverScenarioContext, count: int) -> None:
    assert len(ctx.storage.metrics()) == count


@then(parsers.parse('the error event has {key} "{value}"'))
def step_error_field(ctx: ObserverScenarioContext, key: str, value: str) -> None:
    assert ctx.storage.errors()[0][key] == value


@then(parsers.parse('the metrics event has service "{value}"'))
def step_metrics_service(ctx: ObserverScenarioContext, value: str) -> None:
    assert ctx.storage.metrics()[0]["service"] == value


@then(parsers.parse("the metrics event has status_code {code:d}"))
def step_metrics_status(ctx: ObserverScenarioContext, code: int) -> None:
    assert ctx.storage.metrics()[0]["status_code"] == code


@then("error recording fails with an EventInsertError")
def step_insert_error(ctx: ObserverScenarioContext) -> None:
    assert isinstance(ctx.error, EventInsertError)


@then("connecting fails with an ObserverConnectionError")
def step_connection_error(ctx: ObserverScenarioContext) -> None:
    assert isinstance(ctx.error, ObserverConnectionError)


@then("no observer is created")
def step_no_observer(ctx: ObserverScenarioContext) -> None:
    assert ctx.observer is None
