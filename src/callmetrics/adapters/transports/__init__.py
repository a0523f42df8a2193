"""Host transport adapters reporting lifecycle events to observers."""

from callmetrics.adapters.transports.httpx_transport import (
    AsyncObservedTransport,
    ObservedTransport,
    build_context,
)

__all__ = [
    "AsyncObservedTransport",
    "ObservedTransport",
    "build_context",
]
