"""
app/domain package marker.
"""

from app.domain.contribution import ContributionEntry, DateRange, SpeedProfile, parse_iso_date

__all__ = [
    "ContributionEntry",
    "DateRange",
    "SpeedProfile",
    "parse_iso_date",
]
