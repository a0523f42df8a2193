"""Core domain models for call instrumentation."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

CONTENT_LENGTH_HEADER = "Content-Length"


@dataclass(frozen=True)
class TimingInfo:
    """Wall-clock span of a call as recorded by the host transport.

    Attributes:
        start_epoch_ms: Start time in epoch milliseconds, if known.
        end_epoch_ms: End time in epoch milliseconds, if known.
    """

    start_epoch_ms: int | None = None
    end_epoch_ms: int | None = None


@dataclass(frozen=True)
class CallContext:
    """Per-attempt or per-call metadata supplied by the host transport.

    Fields that were never captured are None (or empty for headers).

    Attributes:
        service_id: Identifier of the remote service (e.g., "DynamoDB").
        operation_name: Remote operation invoked (e.g., "GetItem").
        region: Region the call was signed for.
        status_code: HTTP status of the response, if one was received.
        timing: Start/end timestamps, if timing was recorded.
        headers: Response headers, each name mapping to its values.
        error: Exception raised by the attempt or call, if any.
    """

    service_id: str
    operation_name: str
    region: str | None = None
    status_code: int | None = None
    timing: TimingInfo | None = None
    headers: Mapping[str, Sequence[str]] = field(default_factory=dict)
    error: BaseException | None = None

    def header_values(self, name: str) -> Sequence[str]:
        """Return all values of a response header, matched case-insensitively."""
        wanted = name.lower()
        for key, values in self.headers.items():
            if key.lower() == wanted:
                return values
        return ()


@dataclass(frozen=True)
class MetricSample:
    """A single metric measurement exposed by a registry scrape.

    Attributes:
        name: Metric name (e.g., dynamodb_getitem_latency_count).
        value: The metric value.
        labels: Key-value pairs taken from the distribution tags.
    """

    name: str
    value: float
    labels: dict[str, str] = field(default_factory=dict)
