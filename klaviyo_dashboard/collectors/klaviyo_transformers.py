"""
Klaviyo Response Transformers

Helpers that pull numbers out of Klaviyo JSON:API payloads. The API has
shipped statistics under several field names over its revisions, so every
lookup walks a list of candidate keys and takes the first truthy value
(``opens`` or ``opened_count`` or ``email_opened``...).

Usage:
    from klaviyo_dashboard.collectors.klaviyo_transformers import first_truthy, statistics_of, to_int

    stats = statistics_of(message)
    opens = to_int(first_truthy(stats, "opens", "opened_count", "email_opened"))
"""

import math
import re
from collections.abc import Mapping
from typing import Any

from klaviyo_dashboard.domain import format_rate

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

EVENT_KINDS = (
    ("placed_order", ("placed", "order")),
    ("viewed_product", ("viewed", "product")),
    ("added_to_cart", ("added", "cart")),
    ("active_on_site", ("active", "site")),
)


def first_truthy(mapping: Mapping[str, Any] | None, *keys: str, default: Any = 0) -> Any:
    """
    Return the first truthy value among ``keys``, else ``default``.

    Zero, empty strings and None are skipped, so ``{"opens": 0, "opened_count": 7}``
    yields 7 for ``("opens", "opened_count")``.
    """
    if not mapping:
        return default
    for key in keys:
        value = mapping.get(key)
        if value:
            return value
    return default


def dig(obj: Any, *path: str) -> Any:
    """
    Safe nested lookup: ``dig(event, "attributes", "metric", "name")``.

    Returns None as soon as a level is missing or is not a mapping.
    """
    current = obj
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def to_int(value: Any) -> int:
    """
    Integer from an API value; 0 when nothing numeric can be read.

    Strings are read up to the first non-digit ("12 opens" -> 12), floats
    are truncated toward zero.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group()) if match else 0
    return 0


def to_float(value: Any) -> float:
    """Float from an API value; 0.0 when nothing numeric can be read."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        return float(match.group()) if match else 0.0
    return 0.0


def statistics_of(resource: Mapping[str, Any]) -> Mapping[str, Any]:
    """Statistics block of a campaign message / flow action, falling back to its attributes."""
    attributes = dig(resource, "attributes")
    if not isinstance(attributes, Mapping):
        return {}
    statistics = attributes.get("statistics")
    if isinstance(statistics, Mapping):
        return statistics
    return attributes


def resource_id(resource: Mapping[str, Any]) -> str | None:
    """Top-level id of a JSON:API resource, or ``attributes.id``."""
    value = first_truthy(resource, "id", default=None) or dig(resource, "attributes", "id")
    return str(value) if value else None


def event_name(event: Mapping[str, Any], include_type: bool = True) -> str:
    """
    Metric name of an event.

    Tries ``attributes.metric.name``, then ``attributes.event_name``, then
    (when ``include_type``) the resource ``type``.
    """
    name = dig(event, "attributes", "metric", "name") or dig(event, "attributes", "event_name")
    if not name and include_type:
        name = event.get("type")
    return str(name) if name else ""


def classify_event(name: str) -> str | None:
    """
    Map an event name to an ``EventMetrics`` field.

    >>> classify_event("Placed Order")
    'placed_order'
    >>> classify_event("Subscribed to List") is None
    True
    """
    lowered = (name or "").lower()
    for kind, words in EVENT_KINDS:
        if all(word in lowered for word in words):
            return kind
    return None


def is_placed_order(name: str) -> bool:
    return classify_event(name) == "placed_order"


__all__ = [
    "first_truthy",
    "dig",
    "to_int",
    "to_float",
    "statistics_of",
    "resource_id",
    "event_name",
    "classify_event",
    "is_placed_order",
    "format_rate",
]
