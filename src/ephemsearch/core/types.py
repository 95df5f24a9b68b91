from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidObserver
from .time import TimeInstant


class Body(Enum):
    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    EARTH = "Earth"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"
    STAR1 = "Star1"
    STAR2 = "Star2"
    STAR3 = "Star3"
    STAR4 = "Star4"
    STAR5 = "Star5"
    STAR6 = "Star6"
    STAR7 = "Star7"
    STAR8 = "Star8"

    @property
    def is_star(self) -> bool:
        return self.value.startswith("Star")

    @property
    def is_planet(self) -> bool:
        return self in PLANETS

    @classmethod
    def parse(cls, name: str) -> "Body":
        key = name.strip().lower()
        for b in cls:
            if b.value.lower() == key or b.name.lower() == key:
                return b
        raise ValueError(f"Unknown body name {name!r}")


PLANETS = (
    Body.MERCURY, Body.VENUS, Body.EARTH, Body.MARS, Body.JUPITER,
    Body.SATURN, Body.URANUS, Body.NEPTUNE, Body.PLUTO,
)


class Frame(Enum):
    EQJ = "equatorial J2000"
    EQD = "equatorial of date"
    ECL = "ecliptic J2000"
    ECT = "true ecliptic of date"
    HOR = "horizontal"


class Direction(IntEnum):
    RISE = +1
    SET = -1


class Refraction(Enum):
    NONE = "none"
    NORMAL = "normal"
    JPLHOR = "jplhor"


# ============================================================
# Vectors
# ============================================================

@dataclass(frozen=True)
class PositionVector:
    """
    Cartesian position in AU, valid at `time`, expressed in `frame`.
    Velocity (AU/day) is optional.
    """
    x: float
    y: float
    z: float
    time: TimeInstant
    frame: Frame = Frame.EQJ
    velocity: Optional[Tuple[float, float, float]] = None

    @classmethod
    def from_array(
        cls,
        pos,
        time: TimeInstant,
        frame: Frame = Frame.EQJ,
        velocity=None,
    ) -> "PositionVector":
        vel = None if velocity is None else (float(velocity[0]), float(velocity[1]), float(velocity[2]))
        return cls(float(pos[0]), float(pos[1]), float(pos[2]), time, frame, vel)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def velocity_array(self) -> Optional[np.ndarray]:
        return None if self.velocity is None else np.array(self.velocity)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def _check_frame(self, other: "PositionVector") -> None:
        if other.frame is not self.frame:
            raise ValueError(f"cannot combine vectors in {self.frame.value} and {other.frame.value}")

    def __sub__(self, other: "PositionVector") -> "PositionVector":
        self._check_frame(other)
        return PositionVector(self.x - other.x, self.y - other.y, self.z - other.z, self.time, self.frame)

    def __neg__(self) -> "PositionVector":
        return PositionVector(-self.x, -self.y, -self.z, self.time, self.frame)


# ============================================================
# Derived coordinate views
# ============================================================

@dataclass(frozen=True)
class EquatorialCoordinates:
    """Right ascension (hours), declination (degrees), distance (AU)."""
    ra: float
    dec: float
    dist: float
    vector: PositionVector


@dataclass(frozen=True)
class EclipticCoordinates:
    """Ecliptic longitude and latitude (degrees)."""
    elon: float
    elat: float
    vector: PositionVector


@dataclass(frozen=True)
class HorizontalCoordinates:
    """
    Altitude and azimuth (degrees). Azimuth is measured from north toward east.
    `refraction` is the amount (degrees) already added to `altitude`.
    """
    altitude: float
    azimuth: float
    refraction: float
    equatorial: EquatorialCoordinates


# ============================================================
# Observer
# ============================================================

@dataclass(frozen=True)
class ObserverLocation:
    """Geographic latitude/longitude (degrees, east positive) and height (m) above the ellipsoid."""
    latitude: float
    longitude: float
    height: float = 0.0

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude", "height"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, numbers.Real) or not math.isfinite(v):
                raise InvalidObserver(f"{name} must be a finite number, got {v!r}")
        if not (-90.0 <= self.latitude <= 90.0):
            raise InvalidObserver(f"latitude {self.latitude} is out of range -90..+90")
        if not (-180.0 <= self.longitude <= 180.0):
            raise InvalidObserver(f"longitude {self.longitude} is out of range -180..+180")
        if not (-500.0 <= self.height <= 100000.0):
            raise InvalidObserver(f"height {self.height} m is out of range -500..100000")


# ============================================================
# Search primitives
# ============================================================

@dataclass(frozen=True)
class SearchBracket:
    """
    Two instants (either order; t2 < t1 means a backward search) and the
    sign of the searched function at t1.
    """
    t1: TimeInstant
    t2: TimeInstant
    sign1: int

    @property
    def lower(self) -> TimeInstant:
        return min(self.t1, self.t2)

    @property
    def upper(self) -> TimeInstant:
        return max(self.t1, self.t2)

    @property
    def width_days(self) -> float:
        return abs(self.t1.days_until(self.t2))

    def contains(self, t: TimeInstant) -> bool:
        return self.lower.ut <= t.ut <= self.upper.ut


QUARTER_NAMES = ("New Moon", "First Quarter", "Full Moon", "Third Quarter")


@dataclass(frozen=True)
class MoonQuarterEvent:
    """0 = new moon, 1 = first quarter, 2 = full moon, 3 = third quarter."""
    quarter: int
    time: TimeInstant

    def __post_init__(self) -> None:
        if isinstance(self.quarter, bool) or self.quarter not in (0, 1, 2, 3):
            raise ValueError(f"moon quarter must be 0..3, got {self.quarter!r}")

    @property
    def name(self) -> str:
        return QUARTER_NAMES[self.quarter]
