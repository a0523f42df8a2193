"""Derivation of metric values from a call context.

Each helper returns None when its input was not captured or cannot be
read, so the dependent metric is skipped instead of failing the call.
"""

import logging

from callmetrics.core.models import CONTENT_LENGTH_HEADER, CallContext
from callmetrics.core.status import StatusBucket

logger = logging.getLogger(__name__)


def fetch_latency(ctx: CallContext) -> int | None:
    """Return end minus start in milliseconds, if both were recorded."""
    timing = ctx.timing
    if timing is None or timing.start_epoch_ms is None or timing.end_epoch_ms is None:
        return None
    latency = timing.end_epoch_ms - timing.start_epoch_ms
    if latency < 0:
        logger.debug(
            "Skipping negative latency for %s.%s", ctx.service_id, ctx.operation_name
        )
        return None
    return latency


def fetch_content_length(ctx: CallContext) -> int | None:
    """Return the first Content-Length header value as an integer.

    Missing headers and values that are not plain ASCII digits yield None.
    """
    values = ctx.header_values(CONTENT_LENGTH_HEADER)
    if not values:
        return None
    value = values[0]
    if not (isinstance(value, str) and value.isascii() and value.isdigit()):
        logger.debug("Ignoring unparsable Content-Length %r", value)
        return None
    return int(value)


def fetch_status(ctx: CallContext) -> StatusBucket | None:
    """Return the bucket of the response status, or None without a response."""
    if ctx.status_code is None:
        return None
    return StatusBucket.resolve(ctx.status_code)
