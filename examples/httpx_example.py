"""Example script measuring httpx calls with the legacy region-keyed metrics.

Run with:
    python examples/httpx_example.py
"""

import httpx

from callmetrics import InMemoryMetricsRegistry, ObserverConfig, create_observer
from callmetrics.adapters.transports import ObservedTransport


def fake_service(request: httpx.Request) -> httpx.Response:
    """Stand-in upstream returning 404 for the missing item."""
    if request.url.path.endswith("/missing"):
        return httpx.Response(404, json={"error": "not found"})
    return httpx.Response(200, json={"id": request.url.path.rsplit("/", 1)[-1]})


def main() -> None:
    registry = InMemoryMetricsRegistry()
    observer = create_observer(
        registry,
        ObserverConfig(
            metric_prefix="demo",
            publish_global_metrics=True,
            publish_per_region_metrics=True,
        ),
    )
    transport = ObservedTransport(observer, httpx.MockTransport(fake_service))

    with httpx.Client(transport=transport, base_url="https://items.local") as client:
        for item in ("a1", "b2", "missing"):
            client.get(
                f"/items/{item}",
                extensions={
                    "service_id": "items",
                    "operation_name": "GetItem",
                    "region": "eu-west-1",
                },
            )

    for sample in registry.scrape():
        print(f"{sample.name} {sample.labels} {sample.value}")


if __name__ == "__main__":
    main()
