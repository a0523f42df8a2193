"""Call lifecycle observers that turn outbound-call events into metrics.

Two key strategies are provided:

- CallObserver (default): one key per event, region and status as tags.
- RegionKeyedCallObserver (legacy): a list of global and/or per-region key
  prefixes, status folded into the metric name, no tags.

Both only read the context they are given and forward to the registry.
A failing registry is logged and never propagates into the host transport.
"""

import logging
from dataclasses import replace
from typing import Any

from callmetrics.core.config import ObserverConfig, normalize_prefix
from callmetrics.core.errors import service_status_code
from callmetrics.core.extract import fetch_content_length, fetch_latency, fetch_status
from callmetrics.core.keys import key_prefix, merge
from callmetrics.core.models import CallContext
from callmetrics.core.ports import CallLifecycleObserver, MetricsRegistryPort, Tags
from callmetrics.core.status import StatusBucket

logger = logging.getLogger(__name__)

ATTEMPT = "attempt"
LATENCY = "latency"
CONTENT_LENGTH = "content_length"


class _RegistryObserver:
    """Shared registry plumbing for both key strategies."""

    def __init__(
        self, registry: MetricsRegistryPort, metric_prefix: str | None = None
    ) -> None:
        if not isinstance(registry, MetricsRegistryPort):
            raise TypeError("registry must provide get_or_create_distribution()")
        self._registry = registry
        self.metric_prefix = normalize_prefix(metric_prefix)

    def _record(self, name: str, tags: Tags, value: float) -> None:
        try:
            self._registry.get_or_create_distribution(name, tags).record(value)
        except Exception:
            logger.exception("Failed to record metric %s", name)


class CallObserver(_RegistryObserver):
    """Records one metric per value, tagged with region and status.

    Example:
        ```python
        registry = InMemoryMetricsRegistry()
        observer = CallObserver(registry, metric_prefix="aws")
        observer.on_call_succeeded(ctx)
        ```
    """

    def on_attempt_completed(self, ctx: CallContext) -> None:
        """Count an attempt that failed with a remote-service error."""
        status_code = service_status_code(ctx.error)
        if status_code is None:
            return
        bucket = StatusBucket.resolve(status_code)
        self._record(
            merge(self.metric_prefix, key_prefix(ctx), ATTEMPT),
            self._tags(ctx, bucket.value),
            1,
        )

    def on_call_succeeded(self, ctx: CallContext) -> None:
        """Record latency and content length of a completed call."""
        bucket = fetch_status(ctx)
        self._record_sizes(ctx, bucket.value if bucket is not None else "")

    def on_call_failed(self, ctx: CallContext, exception: BaseException) -> None:
        """Count a terminal remote-service failure with its latency and size.

        Transport failures without a remote status are not recorded. The
        exception itself is left to the host transport.
        """
        status_code = service_status_code(exception)
        if status_code is None:
            return
        status = StatusBucket.resolve(status_code).value
        self._record(
            merge(self.metric_prefix, key_prefix(ctx)), self._tags(ctx, status), 1
        )
        self._record_sizes(ctx, status)

    def _record_sizes(self, ctx: CallContext, status: str) -> None:
        tags = self._tags(ctx, status)
        prefix = key_prefix(ctx)
        latency = fetch_latency(ctx)
        if latency is not None:
            self._record(merge(self.metric_prefix, prefix, LATENCY), tags, latency)
        content_length = fetch_content_length(ctx)
        if content_length is not None:
            self._record(
                merge(self.metric_prefix, prefix, CONTENT_LENGTH), tags, content_length
            )

    @staticmethod
    def _tags(ctx: CallContext, status: str) -> Tags:
        # Absent values become empty tag values, never skipped tags.
        return (("region", ctx.region or ""), ("status", status))


class RegionKeyedCallObserver(_RegistryObserver):
    """Legacy strategy: fans each value out over global/per-region keys.

    With both flags off no metric is ever recorded.
    """

    def __init__(
        self,
        registry: MetricsRegistryPort,
        metric_prefix: str | None = None,
        publish_per_region_metrics: bool = False,
        publish_global_metrics: bool = False,
    ) -> None:
        super().__init__(registry, metric_prefix)
        self.publish_per_region_metrics = publish_per_region_metrics
        self.publish_global_metrics = publish_global_metrics

    def key_prefixes(self, ctx: CallContext) -> list[str]:
        """Return the key prefixes selected by the publish flags."""
        prefixes = []
        if self.publish_global_metrics:
            prefixes.append(key_prefix(ctx))
        if self.publish_per_region_metrics:
            prefixes.append(key_prefix(ctx, ctx.region))
        return prefixes

    def on_attempt_completed(self, ctx: CallContext) -> None:
        """Count a remote-service attempt failure under each key prefix."""
        status_code = service_status_code(ctx.error)
        if status_code is None:
            return
        bucket = StatusBucket.resolve(status_code)
        for prefix in self.key_prefixes(ctx):
            self._record(merge(self.metric_prefix, prefix, ATTEMPT, bucket.value), (), 1)

    def on_call_succeeded(self, ctx: CallContext) -> None:
        """Record latency, content length and a status count per key prefix."""
        prefixes = self.key_prefixes(ctx)
        self._record_sizes(ctx, prefixes)
        bucket = fetch_status(ctx)
        if bucket is not None:
            for prefix in prefixes:
                self._record(merge(self.metric_prefix, prefix, bucket.value), (), 1)

    def on_call_failed(self, ctx: CallContext, exception: BaseException) -> None:
        """Record a status count, latency and size for a remote-service failure."""
        status_code = service_status_code(exception)
        if status_code is None:
            return
        bucket = StatusBucket.resolve(status_code)
        prefixes = self.key_prefixes(ctx)
        for prefix in prefixes:
            self._record(merge(self.metric_prefix, prefix, bucket.value), (), 1)
        self._record_sizes(ctx, prefixes)

    def _record_sizes(self, ctx: CallContext, prefixes: list[str]) -> None:
        latency = fetch_latency(ctx)
        if latency is not None:
            for prefix in prefixes:
                self._record(merge(self.metric_prefix, prefix, LATENCY), (), latency)
        content_length = fetch_content_length(ctx)
        if content_length is not None:
            for prefix in prefixes:
                self._record(
                    merge(self.metric_prefix, prefix, CONTENT_LENGTH), (), content_length
                )


def create_observer(
    registry: MetricsRegistryPort,
    config: ObserverConfig | None = None,
    **overrides: Any,
) -> CallLifecycleObserver:
    """Build the observer selected by the configuration.

    Args:
        registry: Metrics registry to forward values to.
        config: Observer configuration (default: tag-based, no prefix).
        **overrides: ObserverConfig fields replacing those in config.

    Returns:
        RegionKeyedCallObserver if either legacy publish flag is set,
        CallObserver otherwise.
    """
    config = replace(config or ObserverConfig(), **overrides)
    if config.uses_region_keys:
        return RegionKeyedCallObserver(
            registry,
            config.metric_prefix,
            publish_per_region_metrics=bool(config.publish_per_region_metrics),
            publish_global_metrics=bool(config.publish_global_metrics),
        )
    return CallObserver(registry, config.metric_prefix)
