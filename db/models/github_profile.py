"""
db/models/github_profile.py

Tracked GitHub profile. The speed engine reads ``measure_speed`` and
``last_updated`` and overwrites ``speed_kpis`` on every recomputation.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.raw_contribution_count import RawContributionCount


class GithubProfile(Base, TimestampMixin):
    """
    One GitHub account whose daily contribution counts are collected.

    ``speed_kpis`` holds the serialised speed bundle, e.g.::

        {
            "speed_per_year":      {"value": 4.2, "unit": "contributions_per_day",
                                    "status": "ok", "error": null},
            "current_week_speed":  {"value": null, "unit": "contributions_per_day",
                                    "status": "no_data", "error": "..."},
            "_computed_at": "2016-01-15T02:00:00+00:00"
        }
    """

    __tablename__ = "github_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    login: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    measure_speed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Include this profile in periodic speed recomputation",
    )

    last_updated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When speed_kpis was last recomputed (UTC)",
    )

    speed_kpis: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Latest speed bundle keyed by metric name",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    contribution_counts: Mapped[list["RawContributionCount"]] = relationship(
        "RawContributionCount",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_github_profiles_measure_speed", "measure_speed"),
    )

    def __repr__(self) -> str:
        return f"<GithubProfile id={self.id} login={self.login!r} measure_speed={self.measure_speed}>"
