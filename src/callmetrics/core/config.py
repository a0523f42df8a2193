"""Observer configuration."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def normalize_prefix(prefix: str | None) -> str | None:
    """Treat a blank metric prefix as no prefix."""
    if prefix is None or not prefix.strip():
        return None
    return prefix


def _parse_flag(key: str, value: Any) -> bool | None:
    """Parse a publish flag from a config value.

    Args:
        key: Config key, used in the error message.
        value: None, a bool, or a string such as "true" or "0".

    Returns:
        The flag, or None when unset.

    Raises:
        ValueError: If the value is not a recognizable boolean.
    """
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ObserverConfig:
    """Configuration for a call observer.

    Attributes:
        metric_prefix: Prepended to every metric name. Blank means none.
        publish_per_region_metrics: Legacy flag. Emit keys with the region
            embedded in the metric name.
        publish_global_metrics: Legacy flag. Emit keys without the region.

    When either legacy flag is set the region-keyed strategy is used;
    when both are None the tag-based strategy is used.
    """

    metric_prefix: str | None = None
    publish_per_region_metrics: bool | None = None
    publish_global_metrics: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metric_prefix", normalize_prefix(self.metric_prefix))
        for name in ("publish_per_region_metrics", "publish_global_metrics"):
            object.__setattr__(self, name, _parse_flag(name, getattr(self, name)))

    @property
    def uses_region_keys(self) -> bool:
        """Whether the legacy region-keyed strategy is selected."""
        return (
            self.publish_per_region_metrics is not None
            or self.publish_global_metrics is not None
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ObserverConfig":
        """Build a config from a dict-style mapping.

        Unknown keys are ignored. Flag values may be bools or strings
        ("true"/"false", "1"/"0", "yes"/"no", "on"/"off").

        Raises:
            ValueError: If a flag value cannot be read as a boolean.
        """
        return cls(
            metric_prefix=values.get("metric_prefix"),
            publish_per_region_metrics=values.get("publish_per_region_metrics"),
            publish_global_metrics=values.get("publish_global_metrics"),
        )
