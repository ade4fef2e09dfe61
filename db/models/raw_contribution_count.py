"""
db/models/raw_contribution_count.py

Raw per-day contribution count collected for a GitHub profile.
"""

from __future__ import annotations

import uuid
import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.github_profile import GithubProfile


class RawContributionCount(Base, TimestampMixin):
    """
    One day of contributions. ``updated_at`` marks new data for the
    incremental speed run.
    """

    __tablename__ = "raw_contribution_counts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("github_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Contributions made on this calendar day",
    )

    profile: Mapped["GithubProfile"] = relationship(
        "GithubProfile",
        back_populates="contribution_counts",
    )

    __table_args__ = (
        UniqueConstraint("profile_id", "date", name="uq_raw_contribution_counts_profile_date"),
        CheckConstraint("count >= 0", name="count_non_negative"),
        Index("ix_raw_contribution_counts_profile_date", "profile_id", "date"),
        Index("ix_raw_contribution_counts_updated_at", "updated_at"),
    )
