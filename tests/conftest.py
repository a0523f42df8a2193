"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from callmetrics.adapters.registry.in_memory import InMemoryMetricsRegistry
from callmetrics.core.models import CallContext, TimingInfo
from callmetrics.core.ports import DistributionPort, MetricsRegistryPort


@pytest.fixture
def registry() -> InMemoryMetricsRegistry:
    """Provide an empty in-memory metrics registry."""
    return InMemoryMetricsRegistry()


@pytest.fixture
def distribution() -> Mock:
    """Provide a mock distribution handed out by mock_registry."""
    return Mock(spec=DistributionPort)


@pytest.fixture
def mock_registry(distribution: Mock) -> Mock:
    """Provide a mock registry so interactions can be counted exactly.

    Every get_or_create_distribution() call returns the same distribution
    mock.
    """
    mock = Mock(spec=MetricsRegistryPort)
    mock.get_or_create_distribution.return_value = distribution
    return mock


@pytest.fixture
def make_ctx() -> Callable[..., CallContext]:
    """Factory fixture for call contexts with sensible defaults.

    Usage:
        ctx = make_ctx(status_code=200, start=1, end=2, content_length="1000")
    """

    def _make(
        service_id: str = "service",
        operation_name: str = "operation",
        region: str | None = "eu-west-1",
        status_code: int | None = None,
        start: int | None = None,
        end: int | None = None,
        content_length: str | None = None,
        error: BaseException | None = None,
        **kwargs: Any,
    ) -> CallContext:
        timing = None
        if start is not None or end is not None:
            timing = TimingInfo(start_epoch_ms=start, end_epoch_ms=end)
        headers = {} if content_length is None else {"Content-Length": [content_length]}
        return CallContext(
            service_id=service_id,
            operation_name=operation_name,
            region=region,
            status_code=status_code,
            timing=timing,
            headers=headers,
            error=error,
            **kwargs,
        )

    return _make
