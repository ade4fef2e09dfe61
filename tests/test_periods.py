"""
tests/test_periods.py

Unit tests for period bucketing and current/previous period resolution.
"""

from __future__ import annotations

import itertools
import random
from datetime import date, timedelta

import pytest

from app.domain.contribution import ContributionEntry
from kpi.periods import (
    Granularity,
    PeriodResolver,
    aggregate,
    period_key,
    previous_month_key,
    previous_week_key,
)
from tests.fakes import entries

SCENARIO = entries(("2016-01-01", 5), ("2016-01-08", 3), ("2016-02-01", 10))


class TestPeriodKey:
    def test_iso_week_of_new_year_belongs_to_previous_iso_year(self) -> None:
        assert period_key(date(2016, 1, 1), Granularity.WEEK) == 53

    def test_first_iso_week(self) -> None:
        assert period_key(date(2016, 1, 8), Granularity.WEEK) == 1

    def test_month(self) -> None:
        assert period_key(date(2016, 2, 1), Granularity.MONTH) == 2


class TestAggregate:
    def test_month_scenario(self) -> None:
        assert aggregate(SCENARIO, Granularity.MONTH) == {1: 8, 2: 10}

    def test_week_scenario_uses_iso_weeks(self) -> None:
        assert aggregate(SCENARIO, Granularity.WEEK) == {53: 5, 1: 3, 5: 10}

    def test_same_iso_week_is_summed(self) -> None:
        series = entries(("2016-01-04", 2), ("2016-01-10", 4))
        assert aggregate(series, Granularity.WEEK) == {1: 6}

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_empty_input_is_empty_map(self, granularity: Granularity) -> None:
        assert aggregate([], granularity) == {}

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_order_independent(self, granularity: Granularity) -> None:
        expected = aggregate(SCENARIO, granularity)
        for permutation in itertools.permutations(SCENARIO):
            assert aggregate(permutation, granularity) == expected

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_total_is_preserved(self, granularity: Granularity) -> None:
        rng = random.Random(11)
        start = date(2015, 6, 1)
        series = [
            ContributionEntry(date=start + timedelta(days=offset), count=rng.randint(0, 9))
            for offset in range(400)
        ]
        buckets = aggregate(series, granularity)
        assert sum(buckets.values()) == sum(e.count for e in series)

    def test_years_collapse_into_one_bucket(self) -> None:
        series = entries(("2015-03-10", 4), ("2016-03-10", 6))
        assert aggregate(series, Granularity.MONTH) == {3: 10}


class TestWraparound:
    def test_week_one_wraps_to_53(self) -> None:
        assert previous_week_key(1) == 53

    def test_month_one_wraps_to_12(self) -> None:
        assert previous_month_key(1) == 12

    @pytest.mark.parametrize("week", range(2, 54))
    def test_other_weeks_step_back(self, week: int) -> None:
        assert previous_week_key(week) == week - 1

    @pytest.mark.parametrize("month", range(2, 13))
    def test_other_months_step_back(self, month: int) -> None:
        assert previous_month_key(month) == month - 1


class TestPeriodResolver:
    def test_month_scenario(self) -> None:
        resolver = PeriodResolver(weeks={}, months={1: 8, 12: 6}, now=date(2016, 1, 15))
        assert resolver.current_month().value == 8
        assert resolver.previous_month().value == 6

    def test_previous_week_in_week_one_reads_week_53(self) -> None:
        weeks = aggregate(SCENARIO, Granularity.WEEK)
        resolver = PeriodResolver(weeks=weeks, months={}, now=date(2016, 1, 8))
        assert resolver.current_week().value == 3
        assert resolver.previous_week().value == 5

    def test_missing_bucket_is_no_data(self) -> None:
        resolver = PeriodResolver(weeks={}, months={}, now=date(2016, 6, 15))
        for result in (
            resolver.current_week(),
            resolver.previous_week(),
            resolver.current_month(),
            resolver.previous_month(),
        ):
            assert result.is_no_data
            assert result.value is None

    def test_metric_names(self) -> None:
        resolver = PeriodResolver(weeks={}, months={}, now=date(2016, 6, 15))
        assert resolver.current_week().metric == "current_week_speed"
        assert resolver.previous_week().metric == "last_week_speed"
        assert resolver.current_month().metric == "current_month_speed"
        assert resolver.previous_month().metric == "last_month_speed"

    def test_zero_bucket_is_a_value(self) -> None:
        resolver = PeriodResolver(weeks={}, months={6: 0}, now=date(2016, 6, 15))
        result = resolver.current_month()
        assert not result.is_no_data
        assert result.value == 0
