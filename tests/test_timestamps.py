"""Tests for newsfeed.timestamps."""

from datetime import datetime, timezone

import pytest
from dateutil import tz

from newsfeed.timestamps import (
    clean_timestamp,
    format_dateline,
    normalize_timestamp,
    parse_timestamp,
)


class TestCleanTimestamp:
    def test_strips_whitespace_and_quotes(self) -> None:
        assert clean_timestamp('  "2024-03-01 14:30"  ') == "2024-03-01 14:30"

    def test_single_quote_left_alone(self) -> None:
        assert clean_timestamp('"2024-03-01') == '"2024-03-01'

    def test_strips_trailing_z(self) -> None:
        assert clean_timestamp("2024-03-01T14:30:00Z") == "2024-03-01T14:30:00"

    def test_drops_fractional_seconds(self) -> None:
        assert clean_timestamp("2024-03-01T14:30:00.123Z") == "2024-03-01T14:30:00"


class TestNormalizeTimestamp:
    def test_iso_with_fraction_and_zone(self) -> None:
        result = normalize_timestamp("2024-03-01T14:30:00.123Z")
        assert "March 1, 2024" in result
        assert "2:30 PM" in result
        assert ".123" not in result
        assert "Z" not in result

    def test_exact_template(self) -> None:
        assert normalize_timestamp("2024-12-25 09:05:00") == "December 25, 2024 at 09:05 AM"

    def test_midnight_and_noon(self) -> None:
        assert normalize_timestamp("2024-01-02 00:15") == "January 2, 2024 at 12:15 AM"
        assert normalize_timestamp("2024-01-02 12:00") == "January 2, 2024 at 12:00 PM"

    def test_spreadsheet_style(self) -> None:
        assert normalize_timestamp("3/1/2024 14:30:00") == "March 1, 2024 at 02:30 PM"

    def test_quoted_cell(self) -> None:
        assert normalize_timestamp('"2024-03-01T14:30:00"') == "March 1, 2024 at 02:30 PM"

    @pytest.mark.parametrize("raw", ["", "   ", None, 42, 3.5, ["2024-03-01"]])
    def test_missing_sentinel(self, raw) -> None:
        assert normalize_timestamp(raw) == "N/A"

    @pytest.mark.parametrize("raw", ["not a date", "yesterday-ish", '""'])
    def test_invalid_sentinel(self, raw) -> None:
        assert normalize_timestamp(raw) == "Invalid Date"

    def test_sentinels_are_distinct(self) -> None:
        assert normalize_timestamp("") != normalize_timestamp("not a date")

    def test_offset_shifted_into_display_zone(self) -> None:
        result = normalize_timestamp("2024-03-01T14:30:00+02:00", tz=timezone.utc)
        assert result == "March 1, 2024 at 12:30 PM"

    def test_offset_kept_without_display_zone(self) -> None:
        assert normalize_timestamp("2024-03-01T14:30:00+02:00") == "March 1, 2024 at 02:30 PM"

    def test_naive_not_shifted(self) -> None:
        result = normalize_timestamp("2024-03-01T14:30:00Z", tz=tz.gettz("America/New_York"))
        assert result == "March 1, 2024 at 02:30 PM"


class TestParseTimestamp:
    def test_returns_datetime(self) -> None:
        assert parse_timestamp("2024-03-01T14:30:00.5Z") == datetime(2024, 3, 1, 14, 30)

    def test_returns_none(self) -> None:
        assert parse_timestamp("nonsense") is None
        assert parse_timestamp(None) is None


def test_format_dateline() -> None:
    assert format_dateline(datetime(2023, 7, 4, 18, 7)) == "July 4, 2023 at 06:07 PM"


class TestOutOfRangeValues:
    @pytest.mark.parametrize(
        "raw",
        ["0001-01-01T00:00:00+05:00", "9999-12-31T23:00:00-05:00"],
    )
    def test_shift_past_datetime_limits(self, raw) -> None:
        assert normalize_timestamp(raw, tz=timezone.utc) == "Invalid Date"

    def test_offset_beyond_a_day(self) -> None:
        assert parse_timestamp("2024-03-01T10:00:00+25:00") is None
        assert normalize_timestamp("2024-03-01T10:00:00+25:00", tz=timezone.utc) == "Invalid Date"
        assert normalize_timestamp("2024-03-01T10:00:00+25:00") == "Invalid Date"

    @pytest.mark.parametrize(
        "raw",
        [
            "0001-01-01T00:00:00+05:00",
            "9999-12-31T23:00:00-05:00",
            "0001-01-01 00:00",
            "9999-12-31 23:59",
            "2024-03-01T10:00:00+25:00",
            "2024-03-01T10:00:00-24:30",
        ],
    )
    def test_always_returns_a_string(self, raw) -> None:
        assert isinstance(normalize_timestamp(raw, tz=timezone.utc), str)
        assert isinstance(normalize_timestamp(raw), str)
