"""Python logging handler adapter for callmetrics.

This adapter bridges Python's standard library logging module to a
MetricsRegistryPort, counting log records per level so log volume can be
scraped alongside call metrics.
"""

import logging

from callmetrics.core.config import normalize_prefix
from callmetrics.core.keys import merge
from callmetrics.core.ports import MetricsRegistryPort

LOG_RECORDS = "log_records"


class MetricsLogHandler(logging.Handler):
    """Logging handler that counts records into a metrics registry.

    Example:
        ```python
        from callmetrics import InMemoryMetricsRegistry, MetricsLogHandler

        registry = InMemoryMetricsRegistry()
        logging.getLogger("callmetrics").addHandler(MetricsLogHandler(registry))
        ```
    """

    def __init__(
        self,
        registry: MetricsRegistryPort,
        metric_prefix: str | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a metrics registry.

        Args:
            registry: Registry implementing MetricsRegistryPort.
            metric_prefix: Prepended to the record counter name.
            level: Minimum level of records to count.
        """
        super().__init__(level)
        self._registry = registry
        self.metric_name = merge(normalize_prefix(metric_prefix), LOG_RECORDS)

    def emit(self, record: logging.LogRecord) -> None:
        """Count the record under its level name.

        Args:
            record: The log record to count.
        """
        try:
            tags = (("level", record.levelname), ("logger", record.name))
            self._registry.get_or_create_distribution(self.metric_name, tags).record(1)
        except Exception:
            self.handleError(record)
