"""
Base domain models for metrics

Provides foundation pieces shared by every metric category:
    - MetricSet: Base dataclass with zeroed defaults and wire serialisation
    - format_rate: Percentage formatting used for CTR and conversion rates
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, TypeVar

ZERO_RATE = "0.00%"

M = TypeVar("M", bound="MetricSet")


def format_rate(numerator: float, denominator: float) -> str:
    """
    Format ``numerator / denominator`` as a percentage with two decimals.

    Returns "0.00%" when the denominator is zero (or negative), so a client
    with no deliveries never divides by zero.

    Example:
        >>> format_rate(25, 1000)
        '2.50%'
        >>> format_rate(5, 0)
        '0.00%'
    """
    if denominator <= 0:
        return ZERO_RATE
    return f"{numerator / denominator * 100:.2f}%"


@dataclass
class MetricSet:
    """
    Base class for a category of aggregated metrics.

    Every field has a zero default, so ``cls.zeroed()`` is the value
    returned when the upstream API cannot be reached. ``WIRE_NAMES`` maps
    attribute names to the JSON keys the dashboard consumes.
    """

    WIRE_NAMES: ClassVar[dict[str, str]] = {}

    @classmethod
    def zeroed(cls: type[M]) -> M:
        """Return the all-zero instance of this metric set."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the dashboard's JSON field names."""
        return {self.WIRE_NAMES.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}
