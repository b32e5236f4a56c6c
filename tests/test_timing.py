#!/usr/bin/env python3
"""
Tests for modified Julian dates and calendar conversion.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from orbital.timing import (
    CalendarDate,
    ModifiedJulianDate,
    calendar_to_jd,
    calendar_to_mjd,
    days_to_hms,
    jd_to_calendar,
    mjd_to_calendar,
    split_day,
)


class TestCalendarConversion:
    """Tests for the Julian day algorithms."""

    def test_j2000_julian_day(self):
        """2000-01-01 12:00 is Julian day 2451545.0."""
        assert calendar_to_jd(2000, 1, 1, 12) == pytest.approx(2451545.0, abs=1e-9)

    def test_j2000_modified_julian_day(self):
        assert calendar_to_mjd(2000, 1, 1, 12) == pytest.approx(51544.5, abs=1e-9)

    def test_mjd_origin(self):
        """Modified Julian day zero is midnight at the start of 1858-11-17."""
        cal = mjd_to_calendar(0.0)
        assert (cal.year, cal.month, cal.day) == (1858, 11, 17)
        assert (cal.hour, cal.minute) == (0, 0)
        assert cal.second == pytest.approx(0.0, abs=1e-6)

    def test_jd_to_calendar_noon(self):
        cal = jd_to_calendar(2451545.0)
        assert (cal.year, cal.month, cal.day, cal.hour, cal.minute) == (2000, 1, 1, 12, 0)

    def test_leap_day(self):
        cal = mjd_to_calendar(calendar_to_mjd(2024, 2, 29, 6, 30, 15.5))
        assert (cal.year, cal.month, cal.day, cal.hour, cal.minute) == (2024, 2, 29, 6, 30)
        assert cal.second == pytest.approx(15.5, abs=1e-4)

    def test_days_to_hms(self):
        hour, minute, second = days_to_hms(0.75 + 90.0 / 86400.0)
        assert hour == 18
        assert minute == 1
        assert second == pytest.approx(30.0, abs=1e-6)

    @pytest.mark.parametrize("fields", [
        (2000, 1, 1, 10, 0, 0.0),
        (2000, 1, 1, 23, 59, 59.0),
        (1999, 12, 31, 6, 45, 30.25),
        (2024, 7, 14, 17, 1, 0.0),
        (2010, 3, 1, 0, 0, 1.5),
    ])
    def test_fields_survive_conversion(self, fields):
        """Calendar fields read back exactly from the modified Julian day."""
        cal = ModifiedJulianDate.from_calendar(*fields).calendar
        assert (cal.year, cal.month, cal.day, cal.hour, cal.minute) == fields[:5]
        assert cal.second == pytest.approx(fields[5], abs=1e-5)

    def test_split_day_carries_to_next_day(self):
        assert split_day(1.0 - 1e-13) == (1, 0)
        assert split_day(51544.25) == (51544, 21_600_000_000)

    def test_rounding_carries_into_next_day(self):
        cal = mjd_to_calendar(1.0 - 1e-13)
        assert (cal.year, cal.month, cal.day, cal.hour, cal.minute) == (1858, 11, 18, 0, 0)
        assert cal.second == 0.0

    def test_calendar_date_str(self):
        assert str(CalendarDate(2000, 1, 1, 12, 0, 0.0)) == "2000-01-01 12:00:00.000"


class TestModifiedJulianDate:
    """Tests for the ModifiedJulianDate value type."""

    def test_from_calendar(self):
        date = ModifiedJulianDate.from_calendar(2000, 1, 1, 12)
        assert date.value == pytest.approx(51544.5)
        assert date.year == 2000
        assert date.month == 1
        assert date.day == 1
        assert date.hour == 12

    def test_from_day_of_year(self):
        """Day 1.0 is the first of January at midnight."""
        date = ModifiedJulianDate.from_day_of_year(2000, 1.5)
        assert date.value == pytest.approx(51544.5)

    def test_day_of_year(self):
        date = ModifiedJulianDate.from_calendar(2001, 12, 31)
        assert date.day_of_year == 365
        date = ModifiedJulianDate.from_calendar(2000, 12, 31)
        assert date.day_of_year == 366

    def test_fraction(self):
        date = ModifiedJulianDate(51544.25)
        assert date.fraction == pytest.approx(0.25, abs=1e-9)

    def test_seconds_since(self):
        a = ModifiedJulianDate(51544.5)
        b = ModifiedJulianDate(51544.5 + 2.0 / 24.0)
        assert b.seconds_since(a) == pytest.approx(7200.0, abs=1e-6)
        assert a.seconds_since(b) == pytest.approx(-7200.0, abs=1e-6)

    def test_offsets_return_new_dates(self):
        date = ModifiedJulianDate(51544.5)
        later = date.add_offset(1.0)
        assert later.value == pytest.approx(51545.5)
        assert date.value == 51544.5
        assert date.add_seconds(43200.0).value == pytest.approx(51545.0)

    def test_value_semantics(self):
        assert ModifiedJulianDate(51544.5) == ModifiedJulianDate(51544.5)
        assert ModifiedJulianDate(51544.0) < ModifiedJulianDate(51544.5)
        assert len({ModifiedJulianDate(1.0), ModifiedJulianDate(1)}) == 1

    def test_immutable(self):
        date = ModifiedJulianDate(51544.5)
        with pytest.raises(AttributeError):
            date.value = 0.0

    def test_datetime_round_trip(self):
        dt = datetime(2000, 1, 1, 12, tzinfo=timezone.utc)
        date = ModifiedJulianDate.from_datetime(dt)
        assert date.value == pytest.approx(51544.5)
        assert abs((date.to_datetime() - dt).total_seconds()) < 1e-3

    def test_naive_datetime_is_utc(self):
        date = ModifiedJulianDate.from_datetime(datetime(2000, 1, 1, 14))
        assert date.value == pytest.approx(51544.5 + 2.0 / 24.0)

    def test_float(self):
        assert float(ModifiedJulianDate(51544.5)) == 51544.5
