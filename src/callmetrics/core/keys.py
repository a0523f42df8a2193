"""Metric key construction.

Keys are built from segments joined with KEY_SEPARATOR. Sanitization is
applied to key names only, never to tag values.
"""

import re

from callmetrics.core.models import CallContext

KEY_SEPARATOR = "_"

# Runs of these characters collapse into a single separator.
_SYMBOLS = re.compile(r"[-.+]+")


def sanitize(raw: str) -> str:
    """Replace runs of '-', '.', '+' and each space with the separator.

    Spaces are replaced one for one, so "Get  Item" keeps two separators.

    Args:
        raw: Unsanitized key text.

    Returns:
        Key text safe for use as a metric name.
    """
    return _SYMBOLS.sub(KEY_SEPARATOR, raw).replace(" ", KEY_SEPARATOR)


def merge(*parts: str | None) -> str:
    """Join key segments, skipping None and empty segments, then sanitize."""
    return sanitize(KEY_SEPARATOR.join(part for part in parts if part))


def key_prefix(ctx: CallContext, *extra: str | None) -> str:
    """Build the operation identity for a call.

    Args:
        ctx: Call context providing service id and operation name.
        *extra: Further identity segments (the region, for the legacy
            per-region keys).

    Returns:
        Sanitized "<service>_<operation>[_<extra>...]" prefix.
    """
    return merge(ctx.service_id, ctx.operation_name, *extra)
