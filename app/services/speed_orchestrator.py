"""
app/services/speed_orchestrator.py

Periodic speed recomputation loop.

Wires ContributionStore, SpeedReportBuilder and back into the store for
every profile flagged for speed measurement, in the order the store
returns them.

Per-profile steps
-----------------
1. Ask the store whether raw data changed since ``profile.last_updated``.
2. If so, fetch the last-year series, build the bundle and persist it.
3. Call the ``on_each`` continuation, whether or not a bundle was built.
4. Stop if cancellation was requested; never in the middle of a profile.

Failure contract
----------------
- UpstreamUnavailableError: profile skipped, counted, loop continues
- StoreConnectionLostError: propagates; profiles already persisted keep
  their bundles
- InvalidRangeError: raised by :meth:`SpeedRunLoop.set_custom_ranges`
  before any profile is touched
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Sequence

from app.domain.contribution import DateRange
from app.logging_utils import log_event
from app.services.contribution_store import ContributionStore
from app.services.custom_range_service import CustomRangeEngine
from app.services.speed_report_service import SpeedReportBuilder
from app.validators.range_validator import validate_custom_ranges
from db.repositories.errors import StoreConnectionLostError, UpstreamUnavailableError
from kpi.base import KPIBundle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class CancellationToken:
    """
    Cooperative stop request, safe to set from a signal handler or another
    thread. The loop only reads it between profiles.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


class ProfileStatus(str, enum.Enum):
    RECOMPUTED = "recomputed"
    NO_NEW_DATA = "no_new_data"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


@dataclass(frozen=True)
class ProfileOutcome:
    """
    What happened to one profile; passed to the ``on_each`` continuation.

    ``bundle`` is only set when ``status`` is ``RECOMPUTED``.
    """

    profile: Any
    status: ProfileStatus
    bundle: KPIBundle | None = None
    error: str | None = None


@dataclass
class RunSummary:
    """
    Counters for one :meth:`SpeedRunLoop.run` call.
    """

    processed: int = 0
    recomputed: int = 0
    skipped_no_new_data: int = 0
    skipped_upstream_unavailable: int = 0
    stopped_early: bool = False

    def record(self, outcome: ProfileOutcome) -> None:
        self.processed += 1
        if outcome.status is ProfileStatus.RECOMPUTED:
            self.recomputed += 1
        elif outcome.status is ProfileStatus.NO_NEW_DATA:
            self.skipped_no_new_data += 1
        else:
            self.skipped_upstream_unavailable += 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "recomputed": self.recomputed,
            "skipped_no_new_data": self.skipped_no_new_data,
            "skipped_upstream_unavailable": self.skipped_upstream_unavailable,
            "stopped_early": self.stopped_early,
        }


OnEach = Callable[[ProfileOutcome], Any]


def _utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


# ---------------------------------------------------------------------------
# Run loop
# ---------------------------------------------------------------------------


class SpeedRunLoop:
    """
    Recomputes speed bundles for every flagged profile with new data.

    Usage::

        loop = SpeedRunLoop(DatabaseContributionStore(session))
        loop.set_custom_ranges([DateRange(date(2016, 10, 1), date(2016, 11, 1), "q4")])
        summary = loop.run(on_each=lambda outcome: print(outcome.status.value))

    Parameters
    ----------
    store:
        Source of profiles and contribution series, and sink for bundles.
    builder:
        Bundle builder; defaults to one backed by *store*.
    today:
        Clock for the "current" week and month.
    """

    def __init__(
        self,
        store: ContributionStore,
        *,
        builder: SpeedReportBuilder | None = None,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._store = store
        self._builder = builder or SpeedReportBuilder(CustomRangeEngine(store))
        self._today = today
        self._custom_ranges: tuple[DateRange, ...] = ()
        self._stop_token = CancellationToken()

    @property
    def custom_ranges(self) -> tuple[DateRange, ...]:
        return self._custom_ranges

    def set_custom_ranges(self, ranges: Iterable[DateRange | Mapping[str, Any]]) -> None:
        """
        Replace the configured custom ranges.

        Raises InvalidRangeError and keeps the previous ranges when any
        range is invalid.
        """
        self._custom_ranges = validate_custom_ranges(list(ranges))
        logger.info("Configured %d custom speed range(s)", len(self._custom_ranges))

    def request_stop(self) -> None:
        """
        Ask the loop to stop after the profile currently in progress.

        With no run in progress the request applies to the next run. Each
        run consumes its stop token, so later runs start unstopped.
        """
        self._stop_token.cancel()
        logger.info("Speed run stop requested")

    def run(
        self,
        on_each: OnEach | None = None,
        *,
        profiles: Sequence[Any] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> RunSummary:
        """
        Process *profiles* (default: every flagged profile) in order.

        Parameters
        ----------
        on_each:
            Called once per profile with its :class:`ProfileOutcome`, after
            any bundle has been persisted. Its return value is ignored.
        profiles:
            Explicit candidates; when ``None`` the store is asked for every
            profile with ``measure_speed`` set.
        cancel_token:
            Extra stop source checked alongside :meth:`request_stop`.

        Raises
        ------
        StoreConnectionLostError
            If the store connection is lost. Already persisted bundles stay.
        UpstreamUnavailableError
            If the candidate profiles themselves cannot be listed.
        """
        stop_token = self._stop_token
        try:
            return self._run(on_each, profiles, stop_token, cancel_token)
        finally:
            self._stop_token = CancellationToken()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(
        self,
        on_each: OnEach | None,
        profiles: Sequence[Any] | None,
        stop_token: CancellationToken,
        cancel_token: CancellationToken | None,
    ) -> RunSummary:
        run_start = time.monotonic()
        candidates = (
            list(profiles)
            if profiles is not None
            else list(self._store.find_profiles_flagged_for_speed_measurement())
        )
        logger.info(
            "Speed run started: %d candidate profile(s), %d custom range(s)",
            len(candidates),
            len(self._custom_ranges),
        )

        summary = RunSummary()
        for position, profile in enumerate(candidates, start=1):
            outcome = self._process(profile)
            summary.record(outcome)
            log_event(
                logger,
                logging.DEBUG,
                "speed_profile_processed",
                position=position,
                profile=_profile_label(profile),
                status=outcome.status.value,
                error=outcome.error,
            )

            if on_each is not None:
                on_each(outcome)

            if stop_token.cancelled or (cancel_token is not None and cancel_token.cancelled):
                summary.stopped_early = position < len(candidates)
                logger.info("Speed run stopping after %d/%d profiles", position, len(candidates))
                break

        logger.info(
            "Speed run finished in %.3fs: %s",
            time.monotonic() - run_start,
            summary.as_dict(),
        )
        return summary

    def _process(self, profile: Any) -> ProfileOutcome:
        try:
            new_rows = self._store.has_new_data_since(profile, getattr(profile, "last_updated", None))
            if not new_rows:
                return ProfileOutcome(profile=profile, status=ProfileStatus.NO_NEW_DATA)

            entries = self._store.fetch_last_year_series(profile)
            bundle = self._builder.build(
                profile,
                entries,
                now=self._today(),
                custom_ranges=self._custom_ranges,
            )
            self._store.persist_kpi_bundle(profile, bundle)
        except StoreConnectionLostError:
            logger.error("Store connection lost while processing profile=%s", _profile_label(profile))
            raise
        except UpstreamUnavailableError as exc:
            logger.warning(
                "Skipping profile=%s: store unavailable: %s", _profile_label(profile), exc
            )
            return ProfileOutcome(
                profile=profile,
                status=ProfileStatus.UPSTREAM_UNAVAILABLE,
                error=str(exc),
            )

        return ProfileOutcome(profile=profile, status=ProfileStatus.RECOMPUTED, bundle=bundle)


def _profile_label(profile: Any) -> str:
    return str(getattr(profile, "login", None) or getattr(profile, "id", None) or profile)
