"""httpx transport adapter that reports call lifecycle events.

Wraps any httpx transport so that each request passing through it is
reported to a CallLifecycleObserver. The wrapped transport is unaware of
the observer; responses and exceptions pass through unchanged.

Request identity is read from request extensions when present:

- ``service_id`` (default: the request host)
- ``operation_name`` (default: the request method)
- ``region`` (default: absent)
"""

import logging
import time
from typing import Any

import httpx

from callmetrics.core.errors import ServiceError
from callmetrics.core.models import CallContext, TimingInfo
from callmetrics.core.ports import CallLifecycleObserver

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _identity(value: Any) -> str | None:
    return None if value is None else str(value)


def _headers(response: httpx.Response | None) -> dict[str, list[str]]:
    if response is None:
        return {}
    grouped: dict[str, list[str]] = {}
    for name, value in response.headers.multi_items():
        grouped.setdefault(name, []).append(value)
    return grouped


def build_context(
    request: httpx.Request,
    start_ms: int,
    end_ms: int,
    response: httpx.Response | None = None,
    error: BaseException | None = None,
) -> CallContext:
    """Build a CallContext from an httpx request and its outcome.

    Args:
        request: The outgoing request.
        start_ms: Epoch milliseconds before the request was sent.
        end_ms: Epoch milliseconds after the response or error.
        response: Response, if one was received.
        error: Error raised by the attempt, if any.

    Returns:
        Context describing the call.
    """
    extensions: dict[str, Any] = request.extensions
    return CallContext(
        service_id=_identity(extensions.get("service_id")) or request.url.host,
        operation_name=_identity(extensions.get("operation_name")) or request.method,
        region=_identity(extensions.get("region")),
        status_code=response.status_code if response is not None else None,
        timing=TimingInfo(start_epoch_ms=start_ms, end_epoch_ms=end_ms),
        headers=_headers(response),
        error=error,
    )


def _response_error(response: httpx.Response) -> ServiceError | None:
    if response.status_code < 400:
        return None
    return ServiceError(
        f"{response.request.method} {response.request.url} returned "
        f"{response.status_code}",
        response.status_code,
    )


def _report(
    observer: CallLifecycleObserver,
    request: httpx.Request,
    start_ms: int,
    response: httpx.Response | None = None,
    error: BaseException | None = None,
) -> None:
    """Send the lifecycle events of one call to the observer.

    Observer failures are logged and never reach the caller.
    """
    try:
        if response is None:
            ctx = build_context(request, start_ms, _now_ms(), error=error)
            observer.on_attempt_completed(ctx)
            if error is not None:
                observer.on_call_failed(ctx, error)
            return
        ctx = build_context(
            request, start_ms, _now_ms(), response, _response_error(response)
        )
        observer.on_attempt_completed(ctx)
        observer.on_call_succeeded(ctx)
    except Exception:
        logger.exception("Failed to report call to %s", request.url.host)


class ObservedTransport(httpx.BaseTransport):
    """Sync httpx transport reporting to an observer.

    Example:
        ```python
        observer = CallObserver(InMemoryMetricsRegistry(), metric_prefix="api")
        client = httpx.Client(transport=ObservedTransport(observer))
        client.get(url, extensions={"service_id": "billing"})
        ```
    """

    def __init__(
        self,
        observer: CallLifecycleObserver,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            observer: Receives lifecycle events for every request.
            transport: Transport performing the I/O (default: HTTPTransport).
        """
        self.observer = observer
        self.transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        start = _now_ms()
        try:
            response = self.transport.handle_request(request)
        except Exception as exc:
            _report(self.observer, request, start, error=exc)
            raise
        response.request = request
        _report(self.observer, request, start, response)
        return response

    def close(self) -> None:
        self.transport.close()


class AsyncObservedTransport(httpx.AsyncBaseTransport):
    """Async httpx transport reporting to an observer."""

    def __init__(
        self,
        observer: CallLifecycleObserver,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.observer = observer
        self.transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        start = _now_ms()
        try:
            response = await self.transport.handle_async_request(request)
        except Exception as exc:
            _report(self.observer, request, start, error=exc)
            raise
        response.request = request
        _report(self.observer, request, start, response)
        return response

    async def aclose(self) -> None:
        await self.transport.aclose()
