"""
db/repositories/contribution_repository.py

Read access to RawContributionCount rows.

Every method issues exactly one SQL statement and never mutates session state.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.contribution import ContributionEntry
from db.models.raw_contribution_count import RawContributionCount

logger = logging.getLogger(__name__)


class ContributionRepository:
    """
    Fetches per-day contribution counts for one profile at a time.

    Parameters
    ----------
    session:
        Active SQLAlchemy session. The caller controls its lifecycle.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def count_updated_since(self, profile_id: uuid.UUID, since: datetime | None) -> int:
        """
        Count raw rows for *profile_id* written after *since*.

        Queries
        -------
        Single aggregation::

            SELECT COUNT(*)
            FROM   raw_contribution_counts
            WHERE  profile_id = :profile
              AND  updated_at > :since

        A profile that was never computed (``since is None``) counts all rows.
        """
        stmt = select(func.count()).select_from(RawContributionCount).where(
            RawContributionCount.profile_id == profile_id,
        )
        if since is not None:
            stmt = stmt.where(RawContributionCount.updated_at > since)

        count = int(self._session.scalar(stmt) or 0)
        logger.debug("count_updated_since profile=%s since=%s → %d", profile_id, since, count)
        return count

    def list_between(self, profile_id: uuid.UUID, start: date, end: date) -> list[ContributionEntry]:
        """
        Return entries for *profile_id* with ``start <= date <= end``, ascending.

        Queries
        -------
        Single scan::

            SELECT date, count
            FROM   raw_contribution_counts
            WHERE  profile_id = :profile
              AND  date BETWEEN :start AND :end
            ORDER BY date ASC
        """
        stmt = (
            select(RawContributionCount.date, RawContributionCount.count)
            .where(
                RawContributionCount.profile_id == profile_id,
                RawContributionCount.date >= start,
                RawContributionCount.date <= end,
            )
            .order_by(RawContributionCount.date.asc())
        )
        entries = [
            ContributionEntry(date=row.date, count=int(row.count))
            for row in self._session.execute(stmt)
        ]
        logger.debug(
            "list_between profile=%s [%s, %s] → %d entries",
            profile_id, start.isoformat(), end.isoformat(), len(entries),
        )
        return entries
