"""
tests/fakes.py

In-memory stand-ins for the contribution store and tracked profiles.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from app.domain.contribution import ContributionEntry
from db.repositories.errors import StoreConnectionLostError, UpstreamUnavailableError
from kpi.base import KPIBundle, serialize_bundle


def entries(*pairs: tuple[str, int]) -> list[ContributionEntry]:
    """Build entries from ``("YYYY-MM-DD", count)`` pairs."""
    return [ContributionEntry(date=date.fromisoformat(day), count=count) for day, count in pairs]


@dataclass
class FakeProfile:
    login: str
    measure_speed: bool = True
    last_updated: datetime | None = None
    speed_kpis: dict[str, Any] | None = None


@dataclass
class InMemoryContributionStore:
    """
    Dict-backed store that records every call it receives.

    ``new_rows`` overrides the new-data count per login; by default a
    profile has as many new rows as series entries.
    """

    profiles: list[FakeProfile] = field(default_factory=list)
    series: dict[str, list[ContributionEntry]] = field(default_factory=dict)
    new_rows: dict[str, int] = field(default_factory=dict)
    unavailable: set[str] = field(default_factory=set)
    connection_lost: set[str] = field(default_factory=set)
    on_fetch: Callable[[FakeProfile], None] | None = None
    persisted: dict[str, KPIBundle] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def find_profiles_flagged_for_speed_measurement(self) -> list[FakeProfile]:
        return [profile for profile in self.profiles if profile.measure_speed]

    def has_new_data_since(self, profile: FakeProfile, timestamp: datetime | None) -> int:
        self.calls.append(("has_new_data_since", profile.login))
        self._maybe_fail(profile)
        return self.new_rows.get(profile.login, len(self.series.get(profile.login, [])))

    def fetch_last_year_series(self, profile: FakeProfile) -> list[ContributionEntry]:
        self.calls.append(("fetch_last_year_series", profile.login))
        if self.on_fetch is not None:
            self.on_fetch(profile)
        return list(self.series.get(profile.login, []))

    def fetch_series_in_range(
        self, start: date, end: date, profile: FakeProfile
    ) -> list[ContributionEntry]:
        self.calls.append(("fetch_series_in_range", profile.login))
        return [e for e in self.series.get(profile.login, []) if start <= e.date <= end]

    def persist_kpi_bundle(self, profile: FakeProfile, bundle: KPIBundle) -> None:
        self.calls.append(("persist_kpi_bundle", profile.login))
        self.persisted[profile.login] = bundle
        profile.speed_kpis = serialize_bundle(bundle)

    def _maybe_fail(self, profile: FakeProfile) -> None:
        if profile.login in self.connection_lost:
            raise StoreConnectionLostError("connection reset by peer")
        if profile.login in self.unavailable:
            raise UpstreamUnavailableError("statement timeout")


