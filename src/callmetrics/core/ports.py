"""Port interfaces for metrics registries and lifecycle observers.

The observer depends only on these protocols, not on concrete registries
or host transports.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from callmetrics.core.models import CallContext

Tags = Sequence[tuple[str, str]]


@runtime_checkable
class DistributionPort(Protocol):
    """Port for a single named, tagged distribution of recorded values."""

    def record(self, value: float) -> None:
        """Record one observation."""
        ...


@runtime_checkable
class MetricsRegistryPort(Protocol):
    """Port for metrics registry operations.

    Adapters implementing this protocol hand out distributions keyed by
    name and tags. Examples: InMemoryMetricsRegistry, PrometheusMetricsRegistry.
    """

    def get_or_create_distribution(self, name: str, tags: Tags) -> DistributionPort:
        """Return the distribution for name and tags, creating it if needed.

        Args:
            name: Sanitized metric name.
            tags: Ordered (key, value) pairs.

        Returns:
            A distribution that values can be recorded into.
        """
        ...


@runtime_checkable
class CallLifecycleObserver(Protocol):
    """Callbacks a host transport invokes around outbound calls."""

    def on_attempt_completed(self, ctx: CallContext) -> None:
        """Handle the end of one attempt, before any retry."""
        ...

    def on_call_succeeded(self, ctx: CallContext) -> None:
        """Handle a call that completed with a response."""
        ...

    def on_call_failed(self, ctx: CallContext, exception: BaseException) -> None:
        """Handle a call that failed terminally."""
        ...
