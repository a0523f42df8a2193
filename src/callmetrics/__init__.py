"""callmetrics - metrics for outbound API calls.

Observes the lifecycle of calls made through a host transport and records
latency, response size and outcome status into a metrics registry.
"""

from callmetrics.adapters.logging import MetricsLogHandler
from callmetrics.adapters.registry.in_memory import (
    InMemoryDistribution,
    InMemoryMetricsRegistry,
)
from callmetrics.adapters.registry.prometheus import PrometheusMetricsRegistry
from callmetrics.core.config import ObserverConfig
from callmetrics.core.errors import ServiceError, service_status_code
from callmetrics.core.keys import KEY_SEPARATOR, key_prefix, merge, sanitize
from callmetrics.core.models import CallContext, MetricSample, TimingInfo
from callmetrics.core.observer import (
    CallObserver,
    RegionKeyedCallObserver,
    create_observer,
)
from callmetrics.core.ports import (
    CallLifecycleObserver,
    DistributionPort,
    MetricsRegistryPort,
)
from callmetrics.core.status import StatusBucket

__all__ = [
    # Models
    "CallContext",
    "MetricSample",
    "TimingInfo",
    "StatusBucket",
    "ServiceError",
    "service_status_code",
    # Keys
    "KEY_SEPARATOR",
    "key_prefix",
    "merge",
    "sanitize",
    # Ports
    "CallLifecycleObserver",
    "DistributionPort",
    "MetricsRegistryPort",
    # Observers
    "CallObserver",
    "ObserverConfig",
    "RegionKeyedCallObserver",
    "create_observer",
    # Adapters
    "InMemoryDistribution",
    "InMemoryMetricsRegistry",
    "MetricsLogHandler",
    "PrometheusMetricsRegistry",
]
