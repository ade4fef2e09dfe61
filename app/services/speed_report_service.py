"""
app/services/speed_report_service.py

Assembles the full speed bundle for one profile.

Bundle layout
-------------
speed_per_year            mean daily contributions over the last-year series
speed_per_month           month-of-year → summed count
speed_per_week            ISO week-of-year → summed count
current_week_speed        bucket total for this ISO week
last_week_speed           bucket total for the previous ISO week (1 → 53)
current_month_speed       bucket total for this month
last_month_speed          bucket total for the previous month (1 → 12)
*_projection              matching speed * 365
speed_per_custom_range_*  per configured custom range
custom_range_*_projection

Period "speeds" are the raw bucket totals and their projections multiply
those totals by 365 directly.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from app.domain.contribution import ContributionEntry, DateRange
from app.services.custom_range_service import CustomRangeEngine
from kpi.base import KPIBundle
from kpi.periods import Granularity, PeriodResolver, aggregate
from kpi.speed import project, speed

logger = logging.getLogger(__name__)


class SpeedReportBuilder:
    """
    Builds a fresh :data:`~kpi.base.KPIBundle` from one data snapshot.

    Usage::

        builder = SpeedReportBuilder(CustomRangeEngine(store))
        bundle = builder.build(profile, entries, now=date(2016, 1, 15), custom_ranges=ranges)
    """

    def __init__(self, custom_ranges: CustomRangeEngine) -> None:
        self._custom_ranges = custom_ranges

    def build(
        self,
        profile: Any,
        entries_last_year: Sequence[ContributionEntry],
        *,
        now: date,
        custom_ranges: Sequence[DateRange] = (),
    ) -> KPIBundle:
        weeks = aggregate(entries_last_year, Granularity.WEEK)
        months = aggregate(entries_last_year, Granularity.MONTH)
        resolver = PeriodResolver(weeks=weeks, months=months, now=now)

        current_week = resolver.current_week()
        last_week = resolver.previous_week()
        current_month = resolver.current_month()
        last_month = resolver.previous_month()

        bundle: KPIBundle = {
            "speed_per_year": speed(entries_last_year, metric="speed_per_year"),
            "speed_per_month": months,
            "speed_per_week": weeks,
            "current_week_speed": current_week,
            "last_week_speed": last_week,
            "current_month_speed": current_month,
            "last_month_speed": last_month,
            "current_week_projection": project(current_week, metric="current_week_projection"),
            "current_month_projection": project(current_month, metric="current_month_projection"),
            "last_month_projection": project(last_month, metric="last_month_projection"),
            "last_week_projection": project(last_week, metric="last_week_projection"),
        }
        bundle.update(self._custom_ranges.compute(profile, custom_ranges))

        logger.debug(
            "Speed bundle built: %d entries, %d week buckets, %d month buckets, %d custom ranges",
            len(entries_last_year),
            len(weeks),
            len(months),
            len(custom_ranges),
        )
        return bundle
