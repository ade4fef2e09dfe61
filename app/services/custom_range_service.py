"""
app/services/custom_range_service.py

Speed and projection over caller-named date ranges.

Each range is evaluated on its own: a range with no entries marks only its
own two bundle keys as ``no_data``. Store failures are not caught here;
they abort the whole profile in the run loop.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from app.domain.contribution import DateRange
from app.services.contribution_store import ContributionStore
from kpi.base import KPIBundle
from kpi.speed import project, speed

logger = logging.getLogger(__name__)


class CustomRangeEngine:
    """
    Emits ``speed_per_custom_range_<name>`` and
    ``custom_range_<name>_projection`` for every configured range.
    """

    def __init__(self, store: ContributionStore) -> None:
        self._store = store

    def compute(self, profile: Any, ranges: Sequence[DateRange]) -> KPIBundle:
        bundle: KPIBundle = {}
        for date_range in ranges:
            entries = self._store.fetch_series_in_range(date_range.start, date_range.end, profile)
            range_speed = speed(entries, metric=date_range.speed_key)
            bundle[date_range.speed_key] = range_speed
            bundle[date_range.projection_key] = project(range_speed, metric=date_range.projection_key)

            if range_speed.is_no_data:
                logger.warning(
                    "Custom range %r [%s, %s] has no contribution entries",
                    date_range.name,
                    date_range.start.isoformat(),
                    date_range.end.isoformat(),
                )
            else:
                logger.debug(
                    "Custom range %r speed=%s over %d entries",
                    date_range.name,
                    range_speed.value,
                    len(entries),
                )
        return bundle
