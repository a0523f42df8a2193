"""BDD step definitions for call observer features."""

from dataclasses import dataclass, field, replace
from typing import Any
from unittest.mock import Mock

import pytest
from pytest_bdd import given, parsers, then, when

from callmetrics.adapters.registry.in_memory import InMemoryMetricsRegistry
from callmetrics.core.errors import ServiceError
from callmetrics.core.models import CallContext, TimingInfo
from callmetrics.core.observer import CallObserver, RegionKeyedCallObserver
from callmetrics.core.ports import MetricsRegistryPort


@dataclass
class ObserverScenarioContext:
    """Shared state between steps in an observer scenario."""

    registry: InMemoryMetricsRegistry = field(default_factory=InMemoryMetricsRegistry)
    spy: Mock = field(default_factory=Mock)
    observer: Any = None
    call: CallContext = field(
        default_factory=lambda: CallContext(service_id="", operation_name="")
    )


@pytest.fixture
def ctx() -> ObserverScenarioContext:
    """Fresh scenario context for each test."""
    return ObserverScenarioContext()


def _flag(text: str) -> bool:
    return text == "on"


# === Background Steps ===
@given("an in-memory metrics registry")
def step_registry(ctx: ObserverScenarioContext) -> None:
    ctx.registry = InMemoryMetricsRegistry()
    # Spy wraps the registry so every interaction can be counted.
    ctx.spy = Mock(spec=MetricsRegistryPort, wraps=ctx.registry)


@given(
    parsers.parse(
        'a call to operation "{operation}" of service "{service}" in region "{region}"'
    )
)
def step_call(
    ctx: ObserverScenarioContext, operation: str, service: str, region: str
) -> None:
    ctx.call = CallContext(service_id=service, operation_name=operation, region=region)


# === Observer Steps ===
@given(parsers.parse('a tag-based observer with prefix "{prefix}"'))
def step_tag_observer(ctx: ObserverScenarioContext, prefix: str) -> None:
    ctx.observer = CallObserver(ctx.spy, prefix)


@given(
    parsers.parse(
        'a legacy observer with prefix "{prefix}", per-region metrics {per_region} '
        "and global metrics {global_}"
    )
)
def step_legacy_observer(
    ctx: ObserverScenarioContext, prefix: str, per_region: str, global_: str
) -> None:
    ctx.observer = RegionKeyedCallObserver(
        ctx.spy,
        prefix,
        publish_per_region_metrics=_flag(per_region),
        publish_global_metrics=_flag(global_),
    )


# === Call Steps ===
@given(parsers.parse("the call was timed from {start:d}ms to {end:d}ms"))
def step_timing(ctx: ObserverScenarioContext, start: int, end: int) -> None:
    ctx.call = replace(
        ctx.call, timing=TimingInfo(start_epoch_ms=start, end_epoch_ms=end)
    )


@given(parsers.parse('the response has Content-Length "{value}"'))
def step_content_length(ctx: ObserverScenarioContext, value: str) -> None:
    ctx.call = replace(ctx.call, headers={"Content-Length": [value]})


@when("an attempt completes without an error")
def step_attempt_ok(ctx: ObserverScenarioContext) -> None:
    ctx.observer.on_attempt_completed(ctx.call)


@when(parsers.parse("an attempt completes with a service error of status {code:d}"))
def step_attempt_error(ctx: ObserverScenarioContext, code: int) -> None:
    error = ServiceError("attempt failed", code)
    ctx.observer.on_attempt_completed(replace(ctx.call, error=error))


@when(parsers.parse("the call succeeds with status {code:d}"))
def step_call_succeeds(ctx: ObserverScenarioContext, code: int) -> None:
    ctx.observer.on_call_succeeded(replace(ctx.call, status_code=code))


@when(parsers.parse("the call fails with a service error of status {code:d}"))
def step_call_fails(ctx: ObserverScenarioContext, code: int) -> None:
    ctx.observer.on_call_failed(ctx.call, ServiceError("call failed", code))


@when("the call fails with a connection error")
def step_call_fails_transport(ctx: ObserverScenarioContext) -> None:
    ctx.observer.on_call_failed(ctx.call, ConnectionRefusedError("refused"))


# === Assertions ===
@then("the registry should not be touched")
def step_no_interactions(ctx: ObserverScenarioContext) -> None:
    assert ctx.spy.mock_calls == []


@then(parsers.parse("exactly {n:d} metric should be recorded"))
@then(parsers.parse("exactly {n:d} metrics should be recorded"))
def step_n_metrics(ctx: ObserverScenarioContext, n: int) -> None:
    recorded = sum(d.count for d in ctx.registry.distributions)
    assert recorded == n


@then(parsers.parse('the metric "{name}" should record {value:d}'))
def step_metric_value(ctx: ObserverScenarioContext, name: str, value: int) -> None:
    distributions = ctx.registry.find(name)
    assert distributions, f"no metric named {name}"
    assert any(value in d.values for d in distributions)


@then(parsers.parse('the metric "{name}" should be tagged {key}="{value}"'))
def step_metric_tag(
    ctx: ObserverScenarioContext, name: str, key: str, value: str
) -> None:
    distributions = ctx.registry.find(name)
    assert distributions, f"no metric named {name}"
    assert all(dict(d.tags).get(key) == value for d in distributions)
