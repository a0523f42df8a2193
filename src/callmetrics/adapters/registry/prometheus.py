"""Prometheus metrics registry adapter.

Each metric name becomes a prometheus_client Summary registered in a
dedicated CollectorRegistry. Tag keys become label names; they are fixed
by the first tag set seen for a name. Keys that are not valid Prometheus
names are rewritten by exposition_name().
"""

import re
import threading

from prometheus_client import CollectorRegistry, Summary, generate_latest

from callmetrics.core.ports import DistributionPort, Tags

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def exposition_name(name: str) -> str:
    """Map a metric key onto a valid Prometheus metric name.

    Characters outside [a-zA-Z0-9_:] become "_", and a leading digit gets a
    "_" prefix, so "10_0_0_1_GET_latency" is exposed as
    "_10_0_0_1_GET_latency".
    """
    name = _INVALID_NAME_CHARS.sub("_", name)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


class _SummaryDistribution:
    """DistributionPort over a (possibly labelled) prometheus Summary."""

    def __init__(self, summary: Summary) -> None:
        self._summary = summary

    def record(self, value: float) -> None:
        self._summary.observe(value)


class PrometheusMetricsRegistry:
    """Prometheus implementation of MetricsRegistryPort.

    Example:
        ```python
        registry = PrometheusMetricsRegistry()
        observer = CallObserver(registry, metric_prefix="aws")
        body = registry.render()
        ```
    """

    def __init__(
        self,
        collector_registry: CollectorRegistry | None = None,
        description: str = "Outbound API call metric",
    ) -> None:
        """Initialize the registry.

        Args:
            collector_registry: Target registry. A private one is created if
                omitted so repeated instances never collide.
            description: Help text attached to every summary.
        """
        self.collector_registry = collector_registry or CollectorRegistry()
        self.description = description
        self._summaries: dict[str, tuple[Summary, tuple[str, ...]]] = {}
        self._lock = threading.Lock()

    def get_or_create_distribution(self, name: str, tags: Tags) -> DistributionPort:
        """Return a distribution for name and tags.

        Raises:
            ValueError: If the tag keys differ from those first used with name.
        """
        tags = tuple(tags)
        label_names = tuple(key for key, _ in tags)
        with self._lock:
            entry = self._summaries.get(name)
            if entry is None:
                summary = Summary(
                    exposition_name(name),
                    self.description,
                    labelnames=label_names,
                    registry=self.collector_registry,
                )
                entry = (summary, label_names)
                self._summaries[name] = entry
        summary, known_labels = entry
        if label_names != known_labels:
            raise ValueError(
                f"metric {name} has labels {known_labels}, got {label_names}"
            )
        if not label_names:
            return _SummaryDistribution(summary)
        return _SummaryDistribution(summary.labels(*(value for _, value in tags)))

    def render(self) -> str:
        """Return all metrics in the Prometheus text exposition format."""
        return generate_latest(self.collector_registry).decode()
