"""
kpi/periods.py

Calendar period bucketing and current/previous period lookup.

Keys
----
week  : ISO week-of-year, 1..53
month : month-of-year, 1..12

Keys carry no year. Entries from different years that share a week or
month number are summed into the same bucket.
"""

from __future__ import annotations

import enum
from collections import defaultdict
from datetime import date
from typing import Iterable

from app.domain.contribution import ContributionEntry
from kpi.base import BucketMap, MetricResult
from kpi.speed import UNIT_PER_DAY

LAST_ISO_WEEK = 53
LAST_MONTH = 12


class Granularity(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"


def period_key(day: date, granularity: Granularity) -> int:
    if granularity is Granularity.WEEK:
        return day.isocalendar()[1]
    return day.month


def aggregate(entries: Iterable[ContributionEntry], granularity: Granularity) -> BucketMap:
    """Sum entry counts per period key. Empty input gives an empty map."""
    buckets: defaultdict[int, int] = defaultdict(int)
    for entry in entries:
        buckets[period_key(entry.date, granularity)] += entry.count
    return dict(buckets)


def previous_week_key(week: int) -> int:
    """Week before *week*; week 1 wraps to 53."""
    previous = week - 1
    return LAST_ISO_WEEK if previous == 0 else previous


def previous_month_key(month: int) -> int:
    """Month before *month*; January wraps to December."""
    previous = month - 1
    return LAST_MONTH if previous == 0 else previous


class PeriodResolver:
    """
    Resolves the current and previous week/month buckets relative to *now*.

    Lookups of a key absent from the bucket map give ``no_data`` results.
    """

    def __init__(self, *, weeks: BucketMap, months: BucketMap, now: date) -> None:
        self._weeks = weeks
        self._months = months
        self._now = now

    def current_week(self, metric: str = "current_week_speed") -> MetricResult:
        return _lookup(self._weeks, period_key(self._now, Granularity.WEEK), metric, "week")

    def previous_week(self, metric: str = "last_week_speed") -> MetricResult:
        key = previous_week_key(period_key(self._now, Granularity.WEEK))
        return _lookup(self._weeks, key, metric, "week")

    def current_month(self, metric: str = "current_month_speed") -> MetricResult:
        return _lookup(self._months, period_key(self._now, Granularity.MONTH), metric, "month")

    def previous_month(self, metric: str = "last_month_speed") -> MetricResult:
        key = previous_month_key(period_key(self._now, Granularity.MONTH))
        return _lookup(self._months, key, metric, "month")


def _lookup(buckets: BucketMap, key: int, metric: str, label: str) -> MetricResult:
    if key not in buckets:
        return MetricResult.no_data(metric, UNIT_PER_DAY, f"no contributions bucketed for {label} {key}")
    return MetricResult.ok(metric, buckets[key], UNIT_PER_DAY)
