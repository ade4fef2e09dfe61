"""
db/repositories/profile_repository.py

Persistence layer for GithubProfile rows.

The caller controls commit/rollback; this repository never commits on its own.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from db.models.github_profile import GithubProfile


class ProfileRepository:
    """
    Reads tracked profiles and writes their speed bundle.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_flagged_for_speed(self, *, limit: int | None = None) -> list[GithubProfile]:
        """
        Return profiles with ``measure_speed`` set, ordered by login.
        """
        stmt = (
            select(GithubProfile)
            .where(GithubProfile.measure_speed.is_(True))
            .order_by(GithubProfile.login)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._session.scalars(stmt).all())

    def get_by_login(self, login: str) -> GithubProfile | None:
        stmt = select(GithubProfile).where(GithubProfile.login == login)
        return self._session.scalars(stmt).one_or_none()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save_speed_kpis(
        self,
        profile: GithubProfile,
        *,
        speed_kpis: dict[str, Any],
        last_updated: datetime,
    ) -> None:
        """
        Overwrite ``speed_kpis`` and stamp ``last_updated``.

        The previous bundle is replaced wholesale, never merged.
        """
        self._session.execute(
            update(GithubProfile)
            .where(GithubProfile.id == profile.id)
            .values(speed_kpis=speed_kpis, last_updated=last_updated)
        )
        profile.speed_kpis = speed_kpis
        profile.last_updated = last_updated
