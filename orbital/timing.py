#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Time Representation Module

Modified Julian dates and their decomposition into Gregorian calendar
fields. The Julian day algorithms follow the Calendar FAQ formulation, which
counts the Julian day from noon and the modified Julian day from midnight
of 17 November 1858.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from functools import cached_property
from typing import Tuple

# Offset between the Julian day and the modified Julian day
MJD_OFFSET = 2400000.5

SECONDS_PER_DAY = 86400.0

# Calendar fields are resolved to the microsecond, as in datetime
MICROSECONDS_PER_DAY = 86_400_000_000

# Origin of the modified Julian day count
MJD_ZERO = datetime(1858, 11, 17, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CalendarDate:
    """
    Gregorian calendar date and time of day.

    Attributes
    ----------
    year : int
        The year
    month : int
        The month (January == 1)
    day : int
        The day of the month
    hour : int
        The hour
    minute : int
        The minute
    second : float
        The second, including the fractional part
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: float = 0.0

    def __str__(self) -> str:
        return (f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
                f"{self.hour:02d}:{self.minute:02d}:{self.second:06.3f}")


def days_to_hms(days: float):
    """
    Convert a fraction of a day to hours, minutes, and seconds.

    Parameters
    ----------
    days : float
        Days to convert

    Returns
    -------
    tuple
        (hour, minute, second) with integral hour and minute, and the
        second rounded to the microsecond
    """
    return _microseconds_to_hms(round(MICROSECONDS_PER_DAY * days))


def _microseconds_to_hms(microseconds: int) -> Tuple[int, int, float]:
    minutes, microseconds = divmod(microseconds, 60_000_000)
    hour, minute = divmod(minutes, 60)
    return hour, minute, microseconds / 1e6


def split_day(days: float) -> Tuple[int, int]:
    """
    Split days into whole days and microseconds of the following day.

    Rounding that reaches the end of the day carries into the next whole
    day, so 0.99999999999 days splits into (1, 0).
    """
    whole = math.floor(days)
    microseconds = round((days - whole) * MICROSECONDS_PER_DAY)
    if microseconds >= MICROSECONDS_PER_DAY:
        whole += 1
        microseconds -= MICROSECONDS_PER_DAY
    return whole, microseconds


def calendar_to_jd(year: int, month: int, day: int,
                   hour: int = 0, minute: int = 0, second: float = 0.0) -> float:
    """
    Julian day number of a Gregorian calendar date, plus the fraction
    of the day elapsed since noon.

    Parameters
    ----------
    year, month, day : int
        Calendar date (January == 1)
    hour, minute : int
        Time of day
    second : float
        Seconds, including the fractional part

    Returns
    -------
    float
        Julian day
    """
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3

    return (day + (153 * m + 2) // 5 + y * 365 + y // 4 - y // 100 + y // 400 - 32045
            + (second + 60 * minute + 3600 * (hour - 12)) / SECONDS_PER_DAY)


def calendar_to_mjd(year: int, month: int, day: int,
                    hour: int = 0, minute: int = 0, second: float = 0.0) -> float:
    """Modified Julian day of a Gregorian calendar date."""
    return calendar_to_jd(year, month, day, hour, minute, second) - MJD_OFFSET


def jd_to_calendar(jd: float) -> CalendarDate:
    """
    Gregorian calendar date corresponding to a Julian day.

    Adding one half to the Julian day before taking the floor makes the
    civil day start at midnight, so MJD 0.0 is 1858-11-17 00:00 and not
    1858-11-16 24:00.

    Parameters
    ----------
    jd : float
        Julian day

    Returns
    -------
    CalendarDate
        The calendar date and time of day
    """
    ijd, microseconds = split_day(jd + 0.5)
    hour, minute, second = _microseconds_to_hms(microseconds)

    a = ijd + 32044
    b = (4 * a + 3) // 146097
    c = a - (b * 146097) // 4

    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153

    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = b * 100 + d - 4800 + m // 10

    return CalendarDate(year, month, day, hour, minute, second)


def mjd_to_calendar(mjd: float) -> CalendarDate:
    """
    Gregorian calendar date corresponding to a modified Julian day.

    The time of day is taken from the modified Julian day directly, since
    the large offset to the Julian day loses precision in the fraction.
    """
    day_number, microseconds = split_day(mjd)
    ymd = jd_to_calendar(day_number + MJD_OFFSET)
    hour, minute, second = _microseconds_to_hms(microseconds)
    return CalendarDate(ymd.year, ymd.month, ymd.day, hour, minute, second)


@dataclass(frozen=True, order=True)
class ModifiedJulianDate:
    """
    A modified Julian date.

    Instances are immutable values: equality and ordering are by value, and
    offsetting a date returns a new date.

    Parameters
    ----------
    value : float
        Days since 1858-11-17 00:00 UTC
    """
    value: float = field(default=0.0)

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    @classmethod
    def from_calendar(cls, year: int, month: int, day: int,
                      hour: int = 0, minute: int = 0,
                      second: float = 0.0) -> "ModifiedJulianDate":
        """Create a date from Gregorian calendar fields."""
        return cls(calendar_to_mjd(year, month, day, hour, minute, second))

    @classmethod
    def from_day_of_year(cls, year: int, day_of_year: float) -> "ModifiedJulianDate":
        """
        Create a date from a year and a day of year.

        The day of year is 1.0 at the beginning of the year and may carry
        a fractional part, as in a two-line element set epoch.
        """
        return cls(calendar_to_mjd(year, 1, 0) + day_of_year)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "ModifiedJulianDate":
        """Create a date from a datetime; naive datetimes are taken as UTC."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return cls((dt - MJD_ZERO).total_seconds() / SECONDS_PER_DAY)

    def to_datetime(self) -> datetime:
        """Timezone-aware UTC datetime for this date."""
        return MJD_ZERO + timedelta(days=self.value)

    @cached_property
    def calendar(self) -> CalendarDate:
        """Calendar fields of this date."""
        return mjd_to_calendar(self.value)

    @property
    def year(self) -> int:
        return self.calendar.year

    @property
    def month(self) -> int:
        return self.calendar.month

    @property
    def day(self) -> int:
        return self.calendar.day

    @property
    def hour(self) -> int:
        return self.calendar.hour

    @property
    def minute(self) -> int:
        return self.calendar.minute

    @property
    def second(self) -> float:
        return self.calendar.second

    @property
    def day_of_year(self) -> int:
        """Day of year, 1 on the first of January."""
        cal = self.calendar
        return date(cal.year, cal.month, cal.day).timetuple().tm_yday

    @property
    def fraction(self) -> float:
        """Fraction of the current day elapsed."""
        cal = self.calendar
        return (cal.hour + (cal.minute + cal.second / 60.0) / 60.0) / 24.0

    def seconds_since(self, other: "ModifiedJulianDate") -> float:
        """
        Signed offset of this date relative to another date.

        Parameters
        ----------
        other : ModifiedJulianDate
            Reference date

        Returns
        -------
        float
            Offset in seconds, positive when this date is later
        """
        return (self.value - other.value) * SECONDS_PER_DAY

    def add_offset(self, days: float) -> "ModifiedJulianDate":
        """Return the date offset by the given number of days."""
        return ModifiedJulianDate(self.value + days)

    def add_seconds(self, seconds: float) -> "ModifiedJulianDate":
        """Return the date offset by the given number of seconds."""
        return ModifiedJulianDate(self.value + seconds / SECONDS_PER_DAY)

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"ModifiedJulianDate({self.value!r}) [{self.calendar}]"
