"""
app/domain/contribution.py

Domain models for contribution series and caller-named date ranges.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ContributionEntry:
    """
    One day of activity for a profile.
    """

    date: date
    count: int


@dataclass(frozen=True)
class DateRange:
    """
    Caller-named, inclusive date interval evaluated as a custom range.
    """

    start: date
    end: date
    name: str

    @property
    def speed_key(self) -> str:
        return f"speed_per_custom_range_{self.name}"

    @property
    def projection_key(self) -> str:
        return f"custom_range_{self.name}_projection"


class SpeedProfile(Protocol):
    """
    The slice of a tracked profile the speed engine reads and writes.
    """

    login: str
    measure_speed: bool
    last_updated: datetime | None
    speed_kpis: dict[str, Any] | None


def parse_iso_date(raw: str) -> date:
    """
    Parse a literal ``YYYY-MM-DD`` string.

    Raises ValueError for any other shape, including full timestamps.
    """
    value = raw.strip()
    if not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"expected a YYYY-MM-DD date, got {raw!r}")
    return date.fromisoformat(value)
