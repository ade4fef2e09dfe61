"""
app/services/contribution_store.py

The store the speed engine reads contribution series from and writes
bundles back to.

``ContributionStore`` is the contract the run loop depends on.
``DatabaseContributionStore`` implements it on top of the SQLAlchemy
repositories and owns the transaction boundary: one commit per persisted
bundle, rollback on any failure.

Failure contract
----------------
- Connection invalidated: StoreConnectionLostError (run must stop)
- Any other SQLAlchemy error: UpstreamUnavailableError (skip the profile)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.contribution import ContributionEntry, SpeedProfile
from db.models.github_profile import GithubProfile
from db.repositories.contribution_repository import ContributionRepository
from db.repositories.errors import StoreConnectionLostError, UpstreamUnavailableError
from db.repositories.profile_repository import ProfileRepository
from kpi.base import KPIBundle, serialize_bundle

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 365


class ContributionStore(Protocol):
    """
    External collaborator consumed by the speed run loop.
    """

    def find_profiles_flagged_for_speed_measurement(self) -> Sequence[SpeedProfile]: ...

    def has_new_data_since(self, profile: SpeedProfile, timestamp: datetime | None) -> int: ...

    def fetch_last_year_series(self, profile: SpeedProfile) -> Sequence[ContributionEntry]: ...

    def fetch_series_in_range(
        self, start: date, end: date, profile: SpeedProfile
    ) -> Sequence[ContributionEntry]: ...

    def persist_kpi_bundle(self, profile: SpeedProfile, bundle: KPIBundle) -> None: ...


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _utc_today() -> date:
    return _utc_now().date()


class DatabaseContributionStore:
    """
    PostgreSQL-backed :class:`ContributionStore`.

    Parameters
    ----------
    session:
        Active SQLAlchemy session. The store commits after each persisted
        bundle and rolls back whenever a statement fails.
    lookback_days:
        Width of the "last year" window ending today (inclusive).
    today:
        Clock returning the current calendar date; injectable for tests.
    profile_limit:
        Optional cap on the number of flagged profiles returned.
    clock:
        Wall clock for the snapshot stamped into ``last_updated``.

    ``last_updated`` records when the new-data check started, not when the
    bundle was written. Rows changed while a profile is being computed then
    stay newer than the stamp and trigger the next recomputation.
    """

    def __init__(
        self,
        session: Session,
        *,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        today: Callable[[], date] = _utc_today,
        profile_limit: int | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._session = session
        self._profiles = ProfileRepository(session)
        self._contributions = ContributionRepository(session)
        self._lookback_days = lookback_days
        self._today = today
        self._profile_limit = profile_limit
        self._clock = clock
        self._snapshots: dict[object, datetime] = {}

    # ------------------------------------------------------------------
    # ContributionStore
    # ------------------------------------------------------------------

    def find_profiles_flagged_for_speed_measurement(self) -> list[GithubProfile]:
        with self._translate_errors("find_profiles_flagged_for_speed_measurement"):
            return self._profiles.list_flagged_for_speed(limit=self._profile_limit)

    def has_new_data_since(self, profile: GithubProfile, timestamp: datetime | None) -> int:
        self._snapshots[profile.id] = self._clock()
        with self._translate_errors("has_new_data_since"):
            return self._contributions.count_updated_since(profile.id, timestamp)

    def fetch_last_year_series(self, profile: GithubProfile) -> list[ContributionEntry]:
        end = self._today()
        start = end - timedelta(days=self._lookback_days)
        with self._translate_errors("fetch_last_year_series"):
            return self._contributions.list_between(profile.id, start, end)

    def fetch_series_in_range(
        self, start: date, end: date, profile: GithubProfile
    ) -> list[ContributionEntry]:
        with self._translate_errors("fetch_series_in_range"):
            return self._contributions.list_between(profile.id, start, end)

    def persist_kpi_bundle(self, profile: GithubProfile, bundle: KPIBundle) -> None:
        data_as_of = self._snapshots.pop(profile.id, None) or self._clock()
        payload = serialize_bundle(bundle, computed_at=self._clock())
        with self._translate_errors("persist_kpi_bundle"):
            self._profiles.save_speed_kpis(profile, speed_kpis=payload, last_updated=data_as_of)
            self._session.commit()
        logger.debug("Persisted %d speed KPIs for profile=%s", len(bundle), profile.login)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DBAPIError as exc:
            self._session.rollback()
            if exc.connection_invalidated:
                raise StoreConnectionLostError(
                    f"{operation}: database connection lost: {exc}"
                ) from exc
            raise UpstreamUnavailableError(f"{operation} failed: {exc}") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise UpstreamUnavailableError(f"{operation} failed: {exc}") from exc
