"""create github_profiles and raw_contribution_counts tables

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20260301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "github_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("login", sa.String(length=255), nullable=False),
        sa.Column(
            "measure_speed",
            sa.Boolean(),
            nullable=False,
            comment="Include this profile in periodic speed recomputation",
        ),
        sa.Column(
            "last_updated",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When speed_kpis was last recomputed (UTC)",
        ),
        sa.Column(
            "speed_kpis",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Latest speed bundle keyed by metric name",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_github_profiles"),
        sa.UniqueConstraint("login", name="uq_github_profiles_login"),
    )
    op.create_index(
        "ix_github_profiles_measure_speed",
        "github_profiles",
        ["measure_speed"],
        unique=False,
    )

    op.create_table(
        "raw_contribution_counts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("profile_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "count",
            sa.Integer(),
            nullable=False,
            comment="Contributions made on this calendar day",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("count >= 0", name="ck_raw_contribution_counts_count_non_negative"),
        sa.ForeignKeyConstraint(
            ["profile_id"],
            ["github_profiles.id"],
            name="fk_raw_contribution_counts_profile_id_github_profiles",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_raw_contribution_counts"),
        sa.UniqueConstraint("profile_id", "date", name="uq_raw_contribution_counts_profile_date"),
    )
    op.create_index(
        "ix_raw_contribution_counts_profile_date",
        "raw_contribution_counts",
        ["profile_id", "date"],
        unique=False,
    )
    op.create_index(
        "ix_raw_contribution_counts_updated_at",
        "raw_contribution_counts",
        ["updated_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_raw_contribution_counts_updated_at", table_name="raw_contribution_counts")
    op.drop_index("ix_raw_contribution_counts_profile_date", table_name="raw_contribution_counts")
    op.drop_table("raw_contribution_counts")
    op.drop_index("ix_github_profiles_measure_speed", table_name="github_profiles")
    op.drop_table("github_profiles")
