"""Tests for date parsing and wire formatting."""

import datetime
import logging

import pytest

from microblog_publisher.core.models import InvalidDateError
from microblog_publisher.transforms.dates import (
    DateCodec,
    DateFallback,
    to_legacy_compact,
    to_local_display,
    to_utc_iso,
)

FIXED_NOW = datetime.datetime(2025, 6, 1, 8, 15, 42, 123456)


class TestParseLocal:
    """Tests for DateCodec.parse_local."""

    def test_literal_fields(self):
        parsed = DateCodec().parse_local("2024-03-05 14:30")
        assert (parsed.year, parsed.month, parsed.day) == (2024, 3, 5)
        assert (parsed.hour, parsed.minute, parsed.second) == (14, 30, 0)
        assert parsed.tzinfo is None

    def test_t_separator_with_seconds(self):
        parsed = DateCodec().parse_local("2024-03-05T14:30:59")
        assert parsed == datetime.datetime(2024, 3, 5, 14, 30, 59)

    def test_surrounding_whitespace(self):
        assert DateCodec().parse_local("  2024-03-05 14:30 ") == datetime.datetime(2024, 3, 5, 14, 30)

    def test_fallback_now_uses_clock(self, caplog):
        codec = DateCodec(clock=lambda: FIXED_NOW)
        with caplog.at_level(logging.WARNING):
            parsed = codec.parse_local("next tuesday")
        assert parsed == FIXED_NOW.replace(microsecond=0)
        assert "next tuesday" in caplog.text

    def test_fallback_now_for_missing_date(self):
        codec = DateCodec(clock=lambda: FIXED_NOW)
        assert codec.parse_local(None) == FIXED_NOW.replace(microsecond=0)

    def test_date_without_time_falls_back(self):
        codec = DateCodec(clock=lambda: FIXED_NOW)
        assert codec.parse_local("2024-03-05") == FIXED_NOW.replace(microsecond=0)

    def test_fallback_raise(self):
        codec = DateCodec(fallback=DateFallback.RAISE)
        with pytest.raises(InvalidDateError):
            codec.parse_local("not a date")

    def test_fallback_raise_for_missing_date(self):
        with pytest.raises(InvalidDateError):
            DateCodec(fallback="raise").parse_local(None)

    def test_impossible_calendar_date(self):
        with pytest.raises(InvalidDateError):
            DateCodec(fallback=DateFallback.RAISE).parse_local("2024-02-30 10:00")

        codec = DateCodec(clock=lambda: FIXED_NOW)
        assert codec.parse_local("2024-02-30 10:00") == FIXED_NOW.replace(microsecond=0)


class TestFormatting:
    """Tests for the wire and display formats."""

    def test_utc_iso_keeps_wall_clock(self):
        parsed = DateCodec().parse_local("2024-03-05 14:30")
        assert to_utc_iso(parsed) == "2024-03-05T14:30:00Z"

    def test_utc_iso_truncates_subseconds(self):
        assert to_utc_iso(datetime.datetime(2024, 3, 5, 14, 30, 1, 999999)) == "2024-03-05T14:30:01Z"

    def test_legacy_compact(self):
        assert to_legacy_compact(datetime.datetime(2024, 3, 5, 14, 30, 7)) == "20240305T14:30:07"

    def test_local_display_zero_padded(self):
        assert to_local_display(datetime.datetime(2024, 3, 5, 9, 5, 30)) == "2024-03-05 09:05"
