"""
Observer on the Earth's surface: geocentric position, topocentric
coordinates and the horizontal (altitude/azimuth) system.
"""

from __future__ import annotations

import math
from typing import Optional

from ..constants import (
    ANGVEL,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING_SQUARED,
    KM_PER_AU,
    SECONDS_PER_DAY,
)
from ..core.time import TimeInstant
from ..core.types import (
    Body,
    EquatorialCoordinates,
    Frame,
    HorizontalCoordinates,
    ObserverLocation,
    PositionVector,
    Refraction,
)
from ..ephemeris import OrbitalModel
from .frames import equator_j2000, sidereal_time, to_equatorial
from .refraction import refraction_angle
from .vectors import geo_vector


def observer_vector(observer: ObserverLocation, time: TimeInstant, of_date: bool = False) -> PositionVector:
    """
    Geocentric position (AU) and velocity (AU/day) of the observer.

    The ellipsoid position is computed in the true equator of date and
    rotated back to J2000 unless `of_date`.
    """
    phi = math.radians(observer.latitude)
    sinphi, cosphi = math.sin(phi), math.cos(phi)
    c = 1.0 / math.sqrt(cosphi * cosphi + EARTH_FLATTENING_SQUARED * sinphi * sinphi)
    s = EARTH_FLATTENING_SQUARED * c
    ht_km = observer.height / 1000.0
    ach = EARTH_EQUATORIAL_RADIUS_KM * c + ht_km
    ash = EARTH_EQUATORIAL_RADIUS_KM * s + ht_km
    stlocl = math.radians(15.0 * sidereal_time(time) + observer.longitude)
    sinst, cosst = math.sin(stlocl), math.cos(stlocl)

    pos = (
        ach * cosphi * cosst / KM_PER_AU,
        ach * cosphi * sinst / KM_PER_AU,
        ash * sinphi / KM_PER_AU,
    )
    vel = (
        -ANGVEL * ach * cosphi * sinst * SECONDS_PER_DAY / KM_PER_AU,
        +ANGVEL * ach * cosphi * cosst * SECONDS_PER_DAY / KM_PER_AU,
        0.0,
    )
    vector = PositionVector(pos[0], pos[1], pos[2], time, Frame.EQD, vel)
    return vector if of_date else equator_j2000(vector)


def topocentric_vector(
    body: Body,
    time: TimeInstant,
    observer: ObserverLocation,
    aberration: bool = True,
    ephemeris: Optional[OrbitalModel] = None,
) -> PositionVector:
    """J2000 vector from the observer to the body."""
    geo = geo_vector(body, time, aberration, ephemeris)
    obs = observer_vector(observer, time)
    return geo - obs


def topocentric_equator(
    body: Body,
    time: TimeInstant,
    observer: ObserverLocation,
    of_date: bool = True,
    aberration: bool = True,
    ephemeris: Optional[OrbitalModel] = None,
) -> EquatorialCoordinates:
    return to_equatorial(topocentric_vector(body, time, observer, aberration, ephemeris), of_date)


def to_horizontal(
    equatorial: EquatorialCoordinates,
    observer: ObserverLocation,
    time: TimeInstant,
    refraction: Refraction = Refraction.NONE,
) -> HorizontalCoordinates:
    """
    Altitude/azimuth of equatorial coordinates referred to the true equator
    of date. Azimuth runs from north (0) through east (90). Refraction, if
    requested, is added to the altitude only.
    """
    lst_hours = sidereal_time(time) + observer.longitude / 15.0
    ha = math.radians(15.0 * (lst_hours - equatorial.ra))
    dec = math.radians(equatorial.dec)
    phi = math.radians(observer.latitude)

    sind, cosd = math.sin(dec), math.cos(dec)
    sinphi, cosphi = math.sin(phi), math.cos(phi)
    cosh = math.cos(ha)

    east = -cosd * math.sin(ha)
    north = sind * cosphi - cosd * cosh * sinphi
    up = sind * sinphi + cosd * cosh * cosphi

    azimuth = math.degrees(math.atan2(east, north)) % 360.0
    altitude = math.degrees(math.asin(max(-1.0, min(1.0, up))))
    refr = refraction_angle(refraction, altitude)
    return HorizontalCoordinates(altitude + refr, azimuth, refr, equatorial)


def horizon(
    body: Body,
    time: TimeInstant,
    observer: ObserverLocation,
    refraction: Refraction = Refraction.NORMAL,
    ephemeris: Optional[OrbitalModel] = None,
) -> HorizontalCoordinates:
    """Apparent topocentric altitude/azimuth of a body."""
    equ = topocentric_equator(body, time, observer, of_date=True, aberration=True, ephemeris=ephemeris)
    return to_horizontal(equ, observer, time, refraction)
