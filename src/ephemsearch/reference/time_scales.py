from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Tuple

from ..core.errors import InvalidCalendarValue

MIN_YEAR = -4712
MAX_YEAR = 9999

# JDN of the civil day that contains the J2000 epoch (2000-01-01)
_J2000_JDN = 2451545

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


# ============================================================
# Gregorian calendar rules (proleptic)
# ============================================================

def is_leap_year(year: int) -> bool:
    return (year % 4 == 0) and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not (1 <= month <= 12):
        raise InvalidCalendarValue(f"month {month} is out of range 1..12")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def validate_calendar(
    year: int, month: int, day: int,
    hour: int = 0, minute: int = 0, second: float = 0.0, microsecond: int = 0,
) -> None:
    """Raise InvalidCalendarValue unless the fields name a real UTC instant."""
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise InvalidCalendarValue(f"year {year} is out of range {MIN_YEAR}..{MAX_YEAR}")
    dim = days_in_month(year, month)
    if not (1 <= day <= dim):
        raise InvalidCalendarValue(f"day {day} is out of range 1..{dim} for {year:04d}-{month:02d}")
    if not (0 <= hour <= 23):
        raise InvalidCalendarValue(f"hour {hour} is out of range 0..23")
    if not (0 <= minute <= 59):
        raise InvalidCalendarValue(f"minute {minute} is out of range 0..59")
    if not (math.isfinite(second) and 0.0 <= second < 60.0):
        raise InvalidCalendarValue(f"second {second} is out of range [0, 60)")
    if not (0 <= microsecond <= 999999):
        raise InvalidCalendarValue(f"microsecond {microsecond} is out of range 0..999999")


# ============================================================
# Gregorian calendar date <-> JDN  (Fliegel–Van Flandern)
# ============================================================

def ymd_to_jdn(year: int, month: int, day: int) -> int:
    """
    Gregorian date -> Julian Day Number (proleptic Gregorian).
    JDN names the civil day; JD at its midnight is JDN - 0.5.
    """
    a = (14 - month) // 12
    y2 = year + 4800 - a
    m2 = month + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045


def jdn_to_ymd(jdn: int) -> Tuple[int, int, int]:
    """
    JDN -> Gregorian (year, month, day) (proleptic Gregorian).
    """
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4

    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153

    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return int(year), int(month), int(day)


# ============================================================
# Calendar fields <-> split UT day count
# ============================================================
#
# An instant is carried as (day, fraction): `day` is an integer count of days
# since J2000.0 (2000-01-01 12:00 UTC) and `fraction` lies in [0, 1). Keeping
# the whole days out of the float holds microseconds over the full year range.

_US_PER_DAY = 86400 * 1000000


def calendar_to_ut_parts(
    year: int, month: int, day: int,
    hour: int = 0, minute: int = 0, second: float = 0.0, microsecond: int = 0,
) -> Tuple[int, float]:
    """UTC calendar fields -> (whole days, fraction) since J2000.0."""
    validate_calendar(year, month, day, hour, minute, second, microsecond)
    us_of_day = (hour * 3600 + minute * 60) * 1000000 + round(second * 1e6) + microsecond
    since_midnight = us_of_day / _US_PER_DAY
    # civil midnight is half a day before the noon that starts a UT day
    whole = ymd_to_jdn(year, month, day) - _J2000_JDN
    if since_midnight < 0.5:
        return whole - 1, since_midnight + 0.5
    return whole, since_midnight - 0.5


def ut_parts_to_calendar(day: int, fraction: float) -> Tuple[int, int, int, int, int, int, int]:
    """
    (whole days, fraction) since J2000 -> (year, month, day, hour, minute,
    second, microsecond), rounded to the nearest microsecond.
    """
    if fraction >= 0.5:
        day_index, since_midnight = day + 1, fraction - 0.5
    else:
        day_index, since_midnight = day, fraction + 0.5
    us_of_day = round(since_midnight * _US_PER_DAY)
    if us_of_day >= _US_PER_DAY:
        day_index += 1
        us_of_day -= _US_PER_DAY
    year, month, dom = jdn_to_ymd(_J2000_JDN + int(day_index))
    sec, us = divmod(us_of_day, 1000000)
    hour, rem = divmod(sec, 3600)
    minute, second = divmod(rem, 60)
    return year, month, dom, int(hour), int(minute), int(second), int(us)


# ============================================================
# datetime(UTC) <-> split UT
# ============================================================

_J2000_DATETIME = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def datetime_to_ut_parts(dt: datetime) -> Tuple[int, float]:
    """
    datetime -> (whole days, fraction) since J2000. Requires a timezone-aware
    datetime.
    """
    if dt.tzinfo is None:
        raise InvalidCalendarValue("datetime must be timezone-aware (UTC)")
    delta = dt.astimezone(timezone.utc) - _J2000_DATETIME
    return delta.days, (delta.seconds * 1000000 + delta.microseconds) / _US_PER_DAY


def ut_parts_to_datetime(day: int, fraction: float) -> datetime:
    """(whole days, fraction) since J2000 -> timezone-aware UTC datetime (years 1..9999)."""
    year, month, dom, hour, minute, second, us = ut_parts_to_calendar(day, fraction)
    if not (1 <= year <= 9999):
        raise InvalidCalendarValue(f"year {year} cannot be represented as a datetime")
    return datetime(year, month, dom, hour, minute, second, us, tzinfo=timezone.utc)
