"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.github_profile import GithubProfile
from db.models.raw_contribution_count import RawContributionCount

__all__ = [
    "GithubProfile",
    "RawContributionCount",
]
