"""
app/validators/range_validator.py

Up-front validation of caller-supplied custom date ranges.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from app.domain.contribution import DateRange
from app.schemas.speed import DateRangeSpec


@dataclass(frozen=True)
class RangeErrorDetail:
    """
    Structured problem with one configured range.
    """

    index: int
    message: str
    name: str | None = None


class InvalidRangeError(ValueError):
    """
    Raised when one or more custom ranges cannot be accepted.
    """

    def __init__(self, *, message: str, errors: Sequence[RangeErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {"index": error.index, "name": error.name, "message": error.message}
                for error in self.errors
            ],
        }


def validate_custom_ranges(
    ranges: Sequence[DateRange | Mapping[str, Any]],
) -> tuple[DateRange, ...]:
    """
    Validate every range and return them as domain objects.

    All problems are collected before raising so the caller can fix them
    in one pass. Duplicate names are rejected because their bundle keys
    would overwrite each other.
    """

    errors: list[RangeErrorDetail] = []
    accepted: list[tuple[int, DateRange]] = []

    for index, raw in enumerate(ranges):
        payload = _as_payload(raw)
        name = payload.get("name") if isinstance(payload, Mapping) else None
        try:
            spec = DateRangeSpec.model_validate(payload)
        except ValidationError as exc:
            for problem in exc.errors():
                location = ".".join(str(part) for part in problem["loc"])
                message = problem["msg"] if not location else f"{location}: {problem['msg']}"
                errors.append(RangeErrorDetail(index=index, name=name, message=message))
            continue
        accepted.append((index, spec.to_domain()))

    seen: set[str] = set()
    for index, date_range in accepted:
        if date_range.name in seen:
            errors.append(
                RangeErrorDetail(
                    index=index,
                    name=date_range.name,
                    message=f"duplicate range name {date_range.name!r}",
                )
            )
        seen.add(date_range.name)

    if errors:
        raise InvalidRangeError(
            message=f"{len(errors)} invalid custom range problem(s).",
            errors=errors,
        )
    return tuple(date_range for _, date_range in accepted)


def parse_custom_ranges_json(raw: str) -> tuple[DateRange, ...]:
    """
    Parse a JSON array of ``{"start", "end", "name"}`` objects.
    """

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidRangeError(
            message="Custom ranges are not valid JSON.",
            errors=[RangeErrorDetail(index=-1, message=str(exc))],
        ) from exc
    if not isinstance(decoded, list):
        raise InvalidRangeError(
            message="Custom ranges must be a JSON array.",
            errors=[RangeErrorDetail(index=-1, message=f"got {type(decoded).__name__}")],
        )
    return validate_custom_ranges(decoded)


def _as_payload(raw: DateRange | Mapping[str, Any]) -> Any:
    if isinstance(raw, DateRange):
        return {"start": raw.start, "end": raw.end, "name": raw.name}
    return raw
