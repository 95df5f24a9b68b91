from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property

from ..constants import SECONDS_PER_DAY
from ..reference import time_scales as ts
from ..reference.deltat import delta_t_for_ut
from .errors import InvalidCalendarValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarDateTime:
    """UTC calendar fields of a TimeInstant (proleptic Gregorian)."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: int = 0

    @property
    def seconds(self) -> float:
        """Seconds including the fractional part."""
        return self.second + self.microsecond * 1e-6

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}T"
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}.{self.microsecond // 1000:03d}Z"
        )


# JDN of 2000-01-01, whose noon is the J2000 epoch
_J2000_JDN = 2451545


@dataclass(frozen=True, order=True)
class TimeInstant:
    """
    An instant of Universal Time.

    The instant is held as a whole number of UT days since the J2000 epoch
    (2000-01-01 12:00 UTC) plus a fraction of a day in [0, 1). `TimeInstant(x)`
    accepts any real day count and splits it. `ut` is the combined day count
    and is the independent variable of every search. Comparison and arithmetic
    look at the day count only.

    A Julian Date splits exactly into the two parts, so `from_julian_date`
    and `jd` are exact inverses.

    Terrestrial Time is derived lazily from the configured ΔT model and cached
    on the instance.
    """
    day: int
    fraction: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.day) and math.isfinite(self.fraction)):
            raise InvalidCalendarValue(f"time value {self.day} + {self.fraction} is not finite")
        whole = math.floor(self.day)
        fraction = (self.day - whole) + self.fraction
        carry = math.floor(fraction)
        fraction -= carry
        if fraction >= 1.0:
            fraction -= 1.0
            carry += 1
        object.__setattr__(self, "day", int(whole + carry))
        object.__setattr__(self, "fraction", float(fraction))

    # ------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------

    @classmethod
    def from_ut(cls, ut: float) -> "TimeInstant":
        return cls(float(ut))

    @classmethod
    def from_julian_date(cls, jd: float) -> "TimeInstant":
        jd = float(jd)
        if not math.isfinite(jd):
            raise InvalidCalendarValue(f"Julian Date {jd} is not finite")
        whole = math.floor(jd)
        return cls(whole - _J2000_JDN, jd - whole)

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
        microsecond: int = 0,
    ) -> "TimeInstant":
        """UTC calendar fields (proleptic Gregorian) -> TimeInstant."""
        return cls(*ts.calendar_to_ut_parts(year, month, day, hour, minute, second, microsecond))

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimeInstant":
        return cls(*ts.datetime_to_ut_parts(dt))

    @classmethod
    def from_terrestrial_time(cls, tt: float) -> "TimeInstant":
        """
        Instant whose TT (days since J2000) equals `tt`.

        ΔT varies slowly, so the fixed point converges in two or three steps.
        """
        time = cls(tt)
        for _ in range(20):
            err = tt - time.tt
            if abs(err) < 1.0e-12:
                return time
            time = time.add_days(err)
        logger.warning("from_terrestrial_time(%r) did not converge; residual %.3e days", tt, tt - time.tt)
        return time

    # ------------------------------------------------------------
    # Views
    # ------------------------------------------------------------

    @property
    def ut(self) -> float:
        """UT days since J2000."""
        return self.day + self.fraction

    @property
    def jd(self) -> float:
        """Julian Date (UT)."""
        return float(self.day + _J2000_JDN) + self.fraction

    def to_julian_date(self) -> float:
        return self.jd

    @cached_property
    def delta_t_seconds(self) -> float:
        """ΔT = TT − UT in seconds."""
        return delta_t_for_ut(self.ut)

    @property
    def tt(self) -> float:
        """Terrestrial Time in days since J2000."""
        return self.ut + self.delta_t_seconds / SECONDS_PER_DAY

    @property
    def jd_tt(self) -> float:
        return float(self.day + _J2000_JDN) + (self.fraction + self.delta_t_seconds / SECONDS_PER_DAY)

    def terrestrial_time(self) -> "TimeInstant":
        """The instant shifted forward by ΔT (UT label replaced by TT)."""
        return TimeInstant(self.day, self.fraction + self.delta_t_seconds / SECONDS_PER_DAY)

    def to_calendar(self) -> CalendarDateTime:
        return CalendarDateTime(*ts.ut_parts_to_calendar(self.day, self.fraction))

    def to_datetime(self) -> datetime:
        return ts.ut_parts_to_datetime(self.day, self.fraction)

    # ------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------

    def add_days(self, days: float) -> "TimeInstant":
        """
        New instant `days` later (negative goes back).

        The step is applied to UT; the TT of the result is recomputed.
        """
        return TimeInstant(self.day, self.fraction + days)

    def days_until(self, other: "TimeInstant") -> float:
        return (other.day - self.day) + (other.fraction - self.fraction)

    @staticmethod
    def interpolate(t1: "TimeInstant", t2: "TimeInstant", fraction: float) -> "TimeInstant":
        return t1.add_days(fraction * t1.days_until(t2))

    def __str__(self) -> str:
        return str(self.to_calendar())
