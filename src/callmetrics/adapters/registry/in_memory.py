"""In-memory metrics registry adapter."""

import threading
from collections.abc import Iterable

from callmetrics.core.models import MetricSample
from callmetrics.core.ports import Tags


class InMemoryDistribution:
    """Accumulates recorded values for one name and tag set."""

    def __init__(self, name: str, tags: Tags) -> None:
        self.name = name
        self.tags: tuple[tuple[str, str], ...] = tuple(tags)
        self._values: list[float] = []
        self._lock = threading.Lock()

    def record(self, value: float) -> None:
        """Record one observation."""
        with self._lock:
            self._values.append(value)

    @property
    def values(self) -> list[float]:
        """Recorded values, oldest first."""
        with self._lock:
            return list(self._values)

    @property
    def count(self) -> int:
        """Number of recorded values."""
        return len(self.values)

    @property
    def total(self) -> float:
        """Sum of recorded values."""
        return sum(self.values)

    @property
    def max(self) -> float:
        """Largest recorded value, or 0.0 when empty."""
        return max(self.values, default=0.0)


class InMemoryMetricsRegistry:
    """In-memory implementation of MetricsRegistryPort.

    Memoizes one distribution per (name, tags) pair. Suitable for testing
    and for services that scrape their own metrics.
    """

    def __init__(self) -> None:
        self._distributions: dict[
            tuple[str, tuple[tuple[str, str], ...]], InMemoryDistribution
        ] = {}
        self._lock = threading.Lock()

    def get_or_create_distribution(self, name: str, tags: Tags) -> InMemoryDistribution:
        """Return the distribution for name and tags, creating it if needed."""
        key = (name, tuple(tags))
        with self._lock:
            distribution = self._distributions.get(key)
            if distribution is None:
                distribution = InMemoryDistribution(name, key[1])
                self._distributions[key] = distribution
            return distribution

    def find(self, name: str) -> list[InMemoryDistribution]:
        """Return every distribution registered under a name."""
        with self._lock:
            return [d for (n, _), d in self._distributions.items() if n == name]

    @property
    def distributions(self) -> list[InMemoryDistribution]:
        with self._lock:
            return list(self._distributions.values())

    def scrape(self) -> Iterable[MetricSample]:
        """Yield count, sum and max samples for every distribution."""
        for distribution in self.distributions:
            labels = dict(distribution.tags)
            values = distribution.values
            yield MetricSample(f"{distribution.name}_count", len(values), labels)
            yield MetricSample(f"{distribution.name}_sum", sum(values), labels)
            yield MetricSample(
                f"{distribution.name}_max", max(values, default=0.0), labels
            )
