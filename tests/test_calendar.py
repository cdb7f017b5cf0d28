"""Tests for weekday derivation and date helpers."""

from datetime import date, datetime, timezone

import pytest

from coachplanner.domain.calendar import (
    date_range,
    format_date,
    parse_date,
    upcoming_dates,
    week_dates_starting_monday,
    weekday_of,
)
from coachplanner.domain.models import Weekday


class TestWeekdayOf:
    """Tests for the shared weekday rule."""

    def test_date(self):
        assert weekday_of(date(2024, 1, 15)) is Weekday.MONDAY
        assert weekday_of(date(2024, 1, 20)) is Weekday.SATURDAY

    def test_iso_string(self):
        assert weekday_of("2024-01-16") is Weekday.TUESDAY

    def test_naive_datetime_is_local(self):
        assert weekday_of(datetime(2024, 1, 15, 23, 30)) is Weekday.MONDAY

    def test_aware_datetime_uses_pacific_date(self):
        """02:00 UTC on Tuesday is still Monday evening in Los Angeles."""
        moment = datetime(2024, 1, 16, 2, 0, tzinfo=timezone.utc)
        assert weekday_of(moment, "America/Los_Angeles") is Weekday.MONDAY
        assert weekday_of(moment, "UTC") is Weekday.TUESDAY

    def test_weekend_flag(self):
        assert Weekday.SUNDAY.is_weekend is True
        assert Weekday.FRIDAY.is_weekend is False


class TestParseDate:
    """Tests for parse_date."""

    def test_string_with_time_suffix(self):
        assert parse_date("2024-01-15T12:00:00") == date(2024, 1, 15)

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            parse_date("15/01/2024")

    def test_trailing_garbage_rejected(self):
        with pytest.raises(ValueError):
            parse_date("2024-01-15-xyz")

    def test_offset_string_matches_aware_datetime(self):
        """A string with an offset lands on the same civil day as the datetime."""
        moment = datetime(2024, 1, 16, 3, 0, tzinfo=timezone.utc)
        assert weekday_of(moment.isoformat()) is weekday_of(moment)
        assert weekday_of("2024-01-16T03:00:00+00:00") is Weekday.MONDAY
        assert parse_date(moment.isoformat(), "UTC") == date(2024, 1, 16)

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            parse_date(20240115)


class TestDateHelpers:
    """Tests for the range helpers."""

    def test_date_range_inclusive(self):
        dates = date_range("2024-01-15", "2024-01-17")
        assert dates == [date(2024, 1, 15), date(2024, 1, 16), date(2024, 1, 17)]

    def test_date_range_empty_when_reversed(self):
        assert date_range("2024-01-17", "2024-01-15") == []

    def test_week_starts_monday(self):
        week = week_dates_starting_monday("2024-01-18")
        assert week[0] == date(2024, 1, 15)
        assert week[-1] == date(2024, 1, 21)

    def test_upcoming_dates_excludes_start(self):
        dates = upcoming_dates(date(2024, 1, 15), 3)
        assert dates == [date(2024, 1, 16), date(2024, 1, 17), date(2024, 1, 18)]

    def test_upcoming_dates_default_horizon(self):
        assert len(upcoming_dates(date(2024, 1, 15))) == 14

    def test_format_date(self):
        assert format_date("2024-01-15") == "Monday, January 15, 2024"
