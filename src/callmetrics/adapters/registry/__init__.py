"""Metrics registry adapters implementing MetricsRegistryPort."""

from callmetrics.adapters.registry.in_memory import (
    InMemoryDistribution,
    InMemoryMetricsRegistry,
)
from callmetrics.adapters.registry.prometheus import PrometheusMetricsRegistry

__all__ = [
    "InMemoryDistribution",
    "InMemoryMetricsRegistry",
    "PrometheusMetricsRegistry",
]
