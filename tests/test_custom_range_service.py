"""
tests/test_custom_range_service.py

Unit tests for CustomRangeEngine against the in-memory store.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.contribution import DateRange
from app.services.custom_range_service import CustomRangeEngine
from db.repositories.errors import UpstreamUnavailableError
from tests.fakes import FakeProfile, InMemoryContributionStore, entries

Q4 = DateRange(start=date(2016, 10, 1), end=date(2016, 11, 1), name="q4")


@pytest.fixture()
def profile() -> FakeProfile:
    return FakeProfile(login="octocat")


@pytest.fixture()
def engine(store: InMemoryContributionStore, profile: FakeProfile) -> CustomRangeEngine:
    store.series[profile.login] = entries(
        ("2016-09-30", 100),
        ("2016-10-01", 2),
        ("2016-10-10", 4),
        ("2016-10-17", 6),
        ("2016-10-24", 3),
        ("2016-11-01", 5),
        ("2016-11-02", 100),
    )
    return CustomRangeEngine(store)


class TestCustomRangeEngine:
    def test_q4_scenario(self, engine: CustomRangeEngine, profile: FakeProfile) -> None:
        bundle = engine.compute(profile, [Q4])
        assert bundle["speed_per_custom_range_q4"].value == 4
        assert bundle["custom_range_q4_projection"].value == 1460

    def test_bounds_are_inclusive(self, engine: CustomRangeEngine, profile: FakeProfile) -> None:
        one_day = DateRange(start=date(2016, 11, 1), end=date(2016, 11, 1), name="day")
        bundle = engine.compute(profile, [one_day])
        assert bundle["speed_per_custom_range_day"].value == 5

    def test_emits_two_keys_per_range(self, engine: CustomRangeEngine, profile: FakeProfile) -> None:
        october = DateRange(start=date(2016, 10, 1), end=date(2016, 10, 31), name="october")
        bundle = engine.compute(profile, [Q4, october])
        assert list(bundle) == [
            "speed_per_custom_range_q4",
            "custom_range_q4_projection",
            "speed_per_custom_range_october",
            "custom_range_october_projection",
        ]

    def test_empty_range_does_not_affect_others(
        self, engine: CustomRangeEngine, profile: FakeProfile
    ) -> None:
        empty = DateRange(start=date(2015, 1, 1), end=date(2015, 1, 31), name="jan15")
        bundle = engine.compute(profile, [empty, Q4])
        assert bundle["speed_per_custom_range_jan15"].is_no_data
        assert bundle["custom_range_jan15_projection"].is_no_data
        assert bundle["speed_per_custom_range_q4"].value == 4

    def test_no_ranges_yields_empty_bundle(
        self, engine: CustomRangeEngine, profile: FakeProfile
    ) -> None:
        assert engine.compute(profile, []) == {}

    def test_store_failure_propagates(self, profile: FakeProfile) -> None:
        class BrokenStore(InMemoryContributionStore):
            def fetch_series_in_range(self, start, end, profile):  # type: ignore[override]
                raise UpstreamUnavailableError("timeout")

        with pytest.raises(UpstreamUnavailableError):
            CustomRangeEngine(BrokenStore()).compute(profile, [Q4])
