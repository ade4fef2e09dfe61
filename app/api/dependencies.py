"""
app/api/dependencies.py

Shared FastAPI dependencies for the speed endpoints.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import SpeedSettings, get_speed_settings
from app.services.contribution_store import ContributionStore, DatabaseContributionStore
from db.repositories.profile_repository import ProfileRepository
from db.session import get_db


def get_contribution_store(
    db: Session = Depends(get_db),
    settings: SpeedSettings = Depends(get_speed_settings),
) -> ContributionStore:
    """
    Request-scoped store bound to the request's database session.
    """

    return DatabaseContributionStore(db, lookback_days=settings.lookback_days)


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(db)
