"""
kpi/base.py

Result types shared by every speed formula.

A metric either carries an exact rational value or is explicitly marked as
having no data. Consumers branch on :attr:`MetricResult.status`; a missing
value is never encoded as ``0`` or as a float sentinel.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction
from typing import Any, Union

BucketMap = dict[int, int]
"""Period key (ISO week or month number) mapped to the summed count."""


class MetricStatus(str, enum.Enum):
    OK = "ok"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class MetricResult:
    """
    Tagged outcome of a single speed or projection calculation.

    ``value`` is a :class:`~fractions.Fraction` when ``status`` is ``OK``
    and ``None`` when it is ``NO_DATA``; ``error`` then holds the reason.
    """

    metric: str
    status: MetricStatus
    value: Fraction | None
    unit: str
    error: str | None = None

    @classmethod
    def ok(cls, metric: str, value: Fraction | int, unit: str) -> MetricResult:
        return cls(metric=metric, status=MetricStatus.OK, value=Fraction(value), unit=unit)

    @classmethod
    def no_data(cls, metric: str, unit: str, reason: str) -> MetricResult:
        return cls(metric=metric, status=MetricStatus.NO_DATA, value=None, unit=unit, error=reason)

    @property
    def is_no_data(self) -> bool:
        return self.status is MetricStatus.NO_DATA


KPIValue = Union[MetricResult, BucketMap]
KPIBundle = dict[str, KPIValue]
"""Metric name mapped to a scalar result or a raw per-period table."""


def serialize_bundle(bundle: KPIBundle, *, computed_at: datetime | None = None) -> dict[str, Any]:
    """
    Convert a bundle into a JSON-safe payload.

    Every key maps to ``{"value", "unit", "status", "error"}``. Scalars are
    written as floats; bucket maps keep integer sums under string keys.
    """
    payload: dict[str, Any] = {}
    for name, item in bundle.items():
        if isinstance(item, MetricResult):
            payload[name] = {
                "value": float(item.value) if item.value is not None else None,
                "unit": item.unit,
                "status": item.status.value,
                "error": item.error,
            }
        else:
            payload[name] = {
                "value": {str(key): total for key, total in sorted(item.items())},
                "unit": "contributions",
                "status": MetricStatus.OK.value,
                "error": None,
            }
    if computed_at is not None:
        payload["_computed_at"] = computed_at.isoformat()
    return payload
