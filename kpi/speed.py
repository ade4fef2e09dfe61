"""
kpi/speed.py

Contribution speed formulas.

Expected inputs
---------------
entries : Sequence[ContributionEntry]
    One entry per day that has data. Days missing from the series are not
    counted.

Formulas
--------
Speed       = sum(entry.count) / len(entries)
Projection  = speed * 365

The projection factor is applied to every speed, whatever period produced
it. A weekly or monthly bucket total is extrapolated as if it were a daily
rate.

An empty entry set yields a ``no_data`` result instead of dividing by zero.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from app.domain.contribution import ContributionEntry
from kpi.base import MetricResult

PROJECTION_DAYS = 365

UNIT_PER_DAY = "contributions_per_day"
UNIT_PER_YEAR = "contributions_per_year"


def speed(entries: Sequence[ContributionEntry], metric: str = "speed") -> MetricResult:
    """
    Mean contributions per present day.

    The denominator is the number of entries, not the calendar length of
    the range they were drawn from.
    """
    if not entries:
        return MetricResult.no_data(metric, UNIT_PER_DAY, "no contribution entries in range")
    total = sum(entry.count for entry in entries)
    return MetricResult.ok(metric, Fraction(total, len(entries)), UNIT_PER_DAY)


def project(result: MetricResult, metric: str = "projection") -> MetricResult:
    """
    Projection = speed * 365.

    A ``no_data`` speed produces a ``no_data`` projection with the same reason.
    """
    if result.is_no_data:
        return MetricResult.no_data(metric, UNIT_PER_YEAR, result.error or "no speed to project")
    return MetricResult.ok(metric, result.value * PROJECTION_DAYS, UNIT_PER_YEAR)
