"""
tests/test_range_validator.py

Validation of caller-supplied custom ranges.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from app.domain.contribution import DateRange, parse_iso_date
from app.validators.range_validator import (
    InvalidRangeError,
    parse_custom_ranges_json,
    validate_custom_ranges,
)


class TestParseIsoDate:
    def test_literal_format(self) -> None:
        assert parse_iso_date("2016-10-01") == date(2016, 10, 1)

    @pytest.mark.parametrize("raw", ["2016-1-1", "01/10/2016", "2016-10-01T00:00:00", "", "2016-13-01"])
    def test_rejects_other_shapes(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_iso_date(raw)


class TestValidateCustomRanges:
    def test_accepts_strings_and_dates(self) -> None:
        ranges = validate_custom_ranges(
            [
                {"start": "2016-10-01", "end": "2016-11-01", "name": "q4"},
                DateRange(start=date(2016, 1, 1), end=date(2016, 1, 1), name="day"),
            ]
        )
        assert ranges == (
            DateRange(start=date(2016, 10, 1), end=date(2016, 11, 1), name="q4"),
            DateRange(start=date(2016, 1, 1), end=date(2016, 1, 1), name="day"),
        )

    def test_strips_names(self) -> None:
        (only,) = validate_custom_ranges([{"start": "2016-10-01", "end": "2016-11-01", "name": " q4 "}])
        assert only.name == "q4"

    def test_empty_input(self) -> None:
        assert validate_custom_ranges([]) == ()

    def test_start_after_end(self) -> None:
        with pytest.raises(InvalidRangeError) as excinfo:
            validate_custom_ranges([{"start": "2016-11-01", "end": "2016-10-01", "name": "q4"}])
        assert excinfo.value.errors[0].index == 0
        assert excinfo.value.errors[0].name == "q4"
        assert "after" in excinfo.value.errors[0].message

    def test_unparsable_date(self) -> None:
        with pytest.raises(InvalidRangeError) as excinfo:
            validate_custom_ranges([{"start": "10/01/2016", "end": "2016-11-01", "name": "q4"}])
        assert "start" in excinfo.value.errors[0].message

    def test_timestamp_is_not_a_date(self) -> None:
        with pytest.raises(InvalidRangeError):
            validate_custom_ranges(
                [{"start": datetime(2016, 10, 1, 12), "end": "2016-11-01", "name": "q4"}]
            )

    def test_empty_name(self) -> None:
        with pytest.raises(InvalidRangeError):
            validate_custom_ranges([{"start": "2016-10-01", "end": "2016-11-01", "name": "  "}])

    def test_unknown_field(self) -> None:
        with pytest.raises(InvalidRangeError):
            validate_custom_ranges(
                [{"start": "2016-10-01", "end": "2016-11-01", "name": "q4", "tz": "UTC"}]
            )

    def test_duplicate_names(self) -> None:
        with pytest.raises(InvalidRangeError) as excinfo:
            validate_custom_ranges(
                [
                    {"start": "2016-10-01", "end": "2016-11-01", "name": "q4"},
                    {"start": "2016-01-01", "end": "2016-02-01", "name": "q1"},
                    {"start": "2016-10-02", "end": "2016-11-02", "name": "q4"},
                ]
            )
        assert [(e.index, e.name) for e in excinfo.value.errors] == [(2, "q4")]

    def test_collects_every_problem(self) -> None:
        with pytest.raises(InvalidRangeError) as excinfo:
            validate_custom_ranges(
                [
                    {"start": "2016-11-01", "end": "2016-10-01", "name": "a"},
                    {"start": "2016-10-01", "end": "2016-11-01", "name": "ok"},
                    {"start": "nope", "end": "2016-11-01", "name": "b"},
                ]
            )
        assert sorted({e.index for e in excinfo.value.errors}) == [0, 2]

    def test_to_dict(self) -> None:
        with pytest.raises(InvalidRangeError) as excinfo:
            validate_custom_ranges([{"start": "2016-11-01", "end": "2016-10-01", "name": "q4"}])
        payload = excinfo.value.to_dict()
        assert payload["errors"][0]["index"] == 0
        assert payload["errors"][0]["name"] == "q4"
        assert payload["message"]


class TestParseCustomRangesJson:
    def test_parses_array(self) -> None:
        ranges = parse_custom_ranges_json('[{"start": "2016-10-01", "end": "2016-11-01", "name": "q4"}]')
        assert ranges[0].name == "q4"

    def test_rejects_malformed_json(self) -> None:
        with pytest.raises(InvalidRangeError):
            parse_custom_ranges_json("[{")

    def test_rejects_non_array(self) -> None:
        with pytest.raises(InvalidRangeError):
            parse_custom_ranges_json('{"start": "2016-10-01"}')
