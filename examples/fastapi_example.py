"""Example FastAPI application that measures its outbound calls.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /quote                - Calls an upstream API through an observed client
    /metrics/prometheus   - Prometheus text format of all call metrics

Instrumentation:
    Outbound calls go through AsyncObservedTransport, which reports each
    call to a CallObserver backed by a PrometheusMetricsRegistry.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from callmetrics import CallObserver, MetricsLogHandler, PrometheusMetricsRegistry
from callmetrics.adapters.transports import AsyncObservedTransport

registry = PrometheusMetricsRegistry()
observer = CallObserver(registry, metric_prefix="example")

# Count callmetrics' own log records (e.g., registry failures) as metrics too.
logging.getLogger("callmetrics").addHandler(
    MetricsLogHandler(registry, metric_prefix="example")
)

client = httpx.AsyncClient(
    transport=AsyncObservedTransport(observer),
    base_url="https://quotes.example.com",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await client.aclose()


app = FastAPI(title="Outbound Call Metrics Example", lifespan=lifespan)


@app.get("/quote")
async def quote() -> dict[str, object]:
    """Fetch a quote from the upstream service.

    Records example_quotes_LatestQuote_latency and
    example_quotes_LatestQuote_content_length, tagged with region and
    status.
    """
    response = await client.get(
        "/v1/quotes/latest",
        extensions={
            "service_id": "quotes",
            "operation_name": "LatestQuote",
            "region": "global",
        },
    )
    return {"status": response.status_code}


@app.get("/metrics/prometheus", response_class=PlainTextResponse)
async def metrics() -> str:
    """Expose all recorded call metrics."""
    return registry.render()

