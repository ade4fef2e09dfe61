"""
Repository layer exports.
"""

from db.repositories.contribution_repository import ContributionRepository
from db.repositories.errors import (
    ContributionStoreError,
    StoreConnectionLostError,
    UpstreamUnavailableError,
)
from db.repositories.profile_repository import ProfileRepository

__all__ = [
    "ContributionRepository",
    "ProfileRepository",
    "ContributionStoreError",
    "StoreConnectionLostError",
    "UpstreamUnavailableError",
]
