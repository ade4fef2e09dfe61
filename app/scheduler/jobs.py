"""
app/scheduler/jobs.py

APScheduler-based batch scheduler for periodic speed recomputation.

Schedule (UTC, configurable)
----------------------------
  speed_kpis: SPEED_SCHEDULE_HOUR:SPEED_SCHEDULE_MINUTE every day (02:00 default)

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot. On shutdown call ``run_control.request_shutdown()``
first so a run in progress stops after its current profile, then
``scheduler.shutdown(wait=True)``. A run already started over HTTP makes the
job skip that tick.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from app.config import get_scheduler_settings, get_speed_settings
from app.services.contribution_store import DatabaseContributionStore
from app.services.run_control import exclusive_run, shutdown_token
from app.services.speed_orchestrator import ProfileOutcome, RunSummary, SpeedRunLoop
from db.repositories.errors import ContributionStoreError
from db.session import SessionLocal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Yield a fresh session and ensure it is closed on exit."""
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Job: Daily speed recomputation
# ---------------------------------------------------------------------------


def run_speed_kpis() -> RunSummary | None:
    """
    Recompute speed bundles for every flagged profile with new raw data.
    The store commits once per persisted bundle.
    """
    logger.info("Scheduler: speed_kpis starting")
    settings = get_speed_settings()

    processed = 0

    def _progress(outcome: ProfileOutcome) -> None:
        nonlocal processed
        processed += 1
        if processed % settings.progress_log_every == 0:
            logger.info("Scheduler: speed_kpis progress processed=%d", processed)

    with exclusive_run() as acquired:
        if not acquired:
            logger.warning("Scheduler: speed_kpis skipped, another speed run is in progress")
            return None

        with _session_scope() as db:
            store = DatabaseContributionStore(db, lookback_days=settings.lookback_days)
            loop = SpeedRunLoop(store)
            loop.set_custom_ranges(settings.custom_ranges)
            try:
                summary = loop.run(on_each=_progress, cancel_token=shutdown_token())
            except ContributionStoreError as exc:
                logger.error("Scheduler: speed_kpis aborted after %d profiles: %s", processed, exc)
                return None

    logger.info("Scheduler: speed_kpis complete %s", summary.as_dict())
    return summary


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler() -> BackgroundScheduler:
    """
    Build and register the periodic speed job.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    ``max_instances=1`` keeps two runs from overlapping on the same profiles.
    """
    schedule = get_scheduler_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_speed_kpis,
        trigger="cron",
        hour=schedule.hour,
        minute=schedule.minute,
        id="speed_kpis",
        name="Daily contribution speed recomputation",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=schedule.misfire_grace_seconds,
    )

    return scheduler
