"""
app/schemas/speed.py

Request/response schemas for speed KPI operations.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.contribution import DateRange, parse_iso_date


class DateRangeSpec(BaseModel):
    """
    One caller-named custom range as supplied in config or a request body.

    Dates must be real ``date`` values or literal ``YYYY-MM-DD`` strings.
    """

    model_config = ConfigDict(extra="forbid")

    start: date
    end: date
    name: str

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_literal_date(cls, value: Any) -> date:
        if isinstance(value, datetime):
            raise ValueError("expected a calendar date, got a timestamp")
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return parse_iso_date(value)
        raise ValueError(f"expected a YYYY-MM-DD date, got {type(value).__name__}")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("range name must not be empty")
        return stripped

    @model_validator(mode="after")
    def _check_order(self) -> DateRangeSpec:
        if self.start > self.end:
            raise ValueError(
                f"start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )
        return self

    def to_domain(self) -> DateRange:
        return DateRange(start=self.start, end=self.end, name=self.name)


class SpeedRunRequest(BaseModel):
    """
    Body of ``POST /speed-runs``. Omitting ``custom_ranges`` uses the
    configured ranges.
    """

    custom_ranges: list[dict[str, Any]] | None = None


class SpeedRunSummaryResponse(BaseModel):
    processed: int = Field(..., ge=0)
    recomputed: int = Field(..., ge=0)
    skipped_no_new_data: int = Field(..., ge=0)
    skipped_upstream_unavailable: int = Field(..., ge=0)
    stopped_early: bool


class SpeedKPIsResponse(BaseModel):
    login: str
    last_updated: datetime | None = None
    speed_kpis: dict[str, Any]
