"""
Solar eclipses.

The Moon casts the same pair of cones the Earth does (see eclipse.py). A
global search looks for the instant the Earth's center is closest to the
axis of the lunar shadow and, if the axis meets the ellipsoid, where. A
local search measures the shadow at the observer instead, and reports the
contacts together with the Sun's altitude at each of them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..constants import (
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING,
    EARTH_FLATTENING_SQUARED,
    EARTH_MEAN_RADIUS_KM,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    MOON_POLAR_RADIUS_AU,
    MOON_POLAR_RADIUS_KM,
    SUN_RADIUS_AU,
)
from ..core.errors import SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body, ObserverLocation, Refraction
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import j2000_to_of_date_matrix, sidereal_time
from ..pipeline.observer import horizon, observer_vector
from ..pipeline.vectors import geo_vector
from ..reference import astro_args as aa
from ..search.engine import search
from .eclipse import (
    MAX_ECLIPSE_LATITUDE_DEG,
    NEXT_ECLIPSE_SKIP_DAYS,
    PEAK_WINDOW_DAYS,
    EclipseKind,
    ShadowInfo,
    calc_shadow,
    moon_ecliptic_latitude,
    obscuration,
    peak_shadow,
)
from .moonphase import search_moon_phase

logger = logging.getLogger(__name__)

NEW_MOONS_TO_CHECK = 12
# a place can go a long time without a daytime eclipse
LOCAL_NEW_MOONS_TO_CHECK = 1300
LOCAL_PEAK_WINDOW_DAYS = 0.2
PARTIAL_WINDOW_DAYS = 0.2
TOTAL_WINDOW_DAYS = 0.01
# umbra radius (km) above which the observer sees a total rather than annular eclipse
TOTAL_UMBRA_BIAS_KM = 0.014
MAX_PARTIAL_OBSCURATION = 0.9999


@dataclass(frozen=True)
class EclipseEvent:
    """A contact instant and the Sun's refracted altitude (degrees) at it."""
    time: TimeInstant
    altitude: float


@dataclass(frozen=True)
class GlobalSolarEclipseInfo:
    """
    A solar eclipse seen from somewhere on the Earth.

    `distance` is the closest approach (km) of the shadow axis to the
    Earth's center. When the axis meets the Earth, `latitude`/`longitude`
    give the point of greatest eclipse and `obscuration` the fraction of
    the solar disc covered there; for a partial eclipse all three are None.
    """
    kind: EclipseKind
    obscuration: Optional[float]
    peak: TimeInstant
    distance: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class LocalSolarEclipseInfo:
    """
    A solar eclipse at one place. `total_begin`/`total_end` are None
    unless the eclipse is total or annular there.
    """
    kind: EclipseKind
    obscuration: float
    partial_begin: EclipseEvent
    total_begin: Optional[EclipseEvent]
    peak: EclipseEvent
    total_end: Optional[EclipseEvent]
    partial_end: EclipseEvent


def moon_shadow(time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> ShadowInfo:
    """The Moon's shadow at the Earth's center."""
    eph = resolve(ephemeris)
    s = geo_vector(Body.SUN, time, True, eph).as_array()
    m = geo_vector(Body.MOON, time, False, eph).as_array()
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, -m, m - s)


def local_moon_shadow(
    time: TimeInstant,
    observer: ObserverLocation,
    ephemeris: Optional[OrbitalModel] = None,
) -> ShadowInfo:
    """The Moon's shadow at an observer on the Earth's surface."""
    eph = resolve(ephemeris)
    o = observer_vector(observer, time).as_array()
    s = geo_vector(Body.SUN, time, True, eph).as_array()
    m = geo_vector(Body.MOON, time, False, eph).as_array()
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, o - m, m - s)


def eclipse_kind_from_umbra(k: float) -> EclipseKind:
    return EclipseKind.TOTAL if k > TOTAL_UMBRA_BIAS_KM else EclipseKind.ANNULAR


def solar_eclipse_obscuration(helio_moon: np.ndarray, luna_observer: np.ndarray) -> float:
    """
    Fraction of the Sun's disc covered by the Moon for an observer at
    `luna_observer` (AU, from the Moon's center). Never reaches 1; callers
    report a total eclipse directly.
    """
    helio_observer = helio_moon + luna_observer
    sun_radius = math.asin(SUN_RADIUS_AU / float(np.linalg.norm(helio_observer)))
    moon_radius = math.asin(MOON_POLAR_RADIUS_AU / float(np.linalg.norm(luna_observer)))
    cosine = np.dot(luna_observer, helio_observer) / (np.linalg.norm(luna_observer) * np.linalg.norm(helio_observer))
    separation = math.acos(max(-1.0, min(1.0, float(cosine))))
    return min(MAX_PARTIAL_OBSCURATION, obscuration(sun_radius, moon_radius, separation))


def geoid_intersect(shadow: ShadowInfo) -> GlobalSolarEclipseInfo:
    """
    Where the shadow axis meets the Earth's ellipsoid, if it does.

    The axis and the lunacentric Earth are taken to the equator of date and
    the z axis is stretched so that the ellipsoid becomes a sphere of the
    equatorial radius; the nearer root of the line/sphere equation is the
    day-side point.
    """
    rot = j2000_to_of_date_matrix(shadow.time)
    stretch = np.array([KM_PER_AU, KM_PER_AU, KM_PER_AU / EARTH_FLATTENING])
    v = np.array(aa.apply_matrix(rot, shadow.direction)) * stretch
    e = np.array(aa.apply_matrix(rot, shadow.target)) * stretch

    R = EARTH_EQUATORIAL_RADIUS_KM
    A = float(np.dot(v, v))
    B = -2.0 * float(np.dot(v, e))
    C = float(np.dot(e, e)) - R * R
    radic = B * B - 4.0 * A * C
    if radic <= 0.0:
        return GlobalSolarEclipseInfo(EclipseKind.PARTIAL, None, shadow.time, shadow.r)

    u = (-B - math.sqrt(radic)) / (2.0 * A)
    px, py, pz = (float(c) for c in u * v - e)
    pz *= EARTH_FLATTENING

    proj = math.hypot(px, py) * EARTH_FLATTENING_SQUARED
    if proj == 0.0:
        latitude = 90.0 if pz > 0.0 else -90.0
    else:
        latitude = math.degrees(math.atan(pz / proj))

    longitude = (math.degrees(math.atan2(py, px)) - 15.0 * sidereal_time(shadow.time)) % 360.0
    if longitude > 180.0:
        longitude -= 360.0

    # observer on the axis, back in J2000 and relative to the Moon
    geo = np.array(aa.apply_matrix(aa.transpose(rot), (px, py, pz))) / KM_PER_AU
    o = geo + shadow.target
    surface = calc_shadow(MOON_POLAR_RADIUS_KM, shadow.time, o, shadow.direction)
    kind = eclipse_kind_from_umbra(surface.k)
    obs = 1.0 if kind is EclipseKind.TOTAL else solar_eclipse_obscuration(shadow.direction, o)
    return GlobalSolarEclipseInfo(kind, obs, shadow.time, shadow.r, latitude, longitude)


def search_global_solar_eclipse(start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> GlobalSolarEclipseInfo:
    """The first solar eclipse visible anywhere on the Earth whose peak falls after `start`."""
    eph = resolve(ephemeris)
    nmtime = start
    for _ in range(NEW_MOONS_TO_CHECK):
        newmoon = search_moon_phase(0.0, nmtime, 40.0, eph)
        if newmoon is None:
            raise SearchFailure(f"cannot find a new moon after {nmtime}")

        if abs(moon_ecliptic_latitude(newmoon, eph)) < MAX_ECLIPSE_LATITUDE_DEG:
            shadow = peak_shadow(lambda t: moon_shadow(t, eph), newmoon, PEAK_WINDOW_DAYS)
            if shadow.r < shadow.p + EARTH_MEAN_RADIUS_KM:
                info = geoid_intersect(shadow)
                logger.debug("found %s solar eclipse peaking at %s", info.kind.value, info.peak)
                return info

        nmtime = newmoon.add_days(NEXT_ECLIPSE_SKIP_DAYS)

    raise SearchFailure(f"no solar eclipse within {NEW_MOONS_TO_CHECK} new moons after {start}")


def next_global_solar_eclipse(prev_peak: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> GlobalSolarEclipseInfo:
    return search_global_solar_eclipse(prev_peak.add_days(NEXT_ECLIPSE_SKIP_DAYS), ephemeris)


def sun_altitude(time: TimeInstant, observer: ObserverLocation, ephemeris: Optional[OrbitalModel] = None) -> float:
    return horizon(Body.SUN, time, observer, Refraction.NORMAL, ephemeris).altitude


def _partial_distance(shadow: ShadowInfo) -> float:
    return shadow.p - shadow.r


def _total_distance(shadow: ShadowInfo) -> float:
    # k is negative for an annular eclipse
    return abs(shadow.k) - shadow.r


def _transition(observer, direction, distance, t1, t2, eph) -> EclipseEvent:
    result = search(lambda t: direction * distance(local_moon_shadow(t, observer, eph)), t1, t2, 1.0)
    if not result.found:
        raise SearchFailure(f"cannot find a local eclipse contact between {t1} and {t2}")
    return EclipseEvent(result.time, sun_altitude(result.time, observer, eph))


def local_eclipse(shadow: ShadowInfo, observer: ObserverLocation, ephemeris: Optional[OrbitalModel] = None) -> LocalSolarEclipseInfo:
    """Contacts and kind of the eclipse whose local peak is `shadow`."""
    eph = resolve(ephemeris)
    center = shadow.time
    peak = EclipseEvent(center, sun_altitude(center, observer, eph))
    partial_begin = _transition(observer, +1.0, _partial_distance, center.add_days(-PARTIAL_WINDOW_DAYS), center, eph)
    partial_end = _transition(observer, -1.0, _partial_distance, center, center.add_days(+PARTIAL_WINDOW_DAYS), eph)

    total_begin = total_end = None
    if shadow.r < abs(shadow.k):
        total_begin = _transition(observer, +1.0, _total_distance, center.add_days(-TOTAL_WINDOW_DAYS), center, eph)
        total_end = _transition(observer, -1.0, _total_distance, center, center.add_days(+TOTAL_WINDOW_DAYS), eph)
        kind = eclipse_kind_from_umbra(shadow.k)
    else:
        kind = EclipseKind.PARTIAL

    obs = 1.0 if kind is EclipseKind.TOTAL else solar_eclipse_obscuration(shadow.direction, shadow.target)
    return LocalSolarEclipseInfo(kind, obs, partial_begin, total_begin, peak, total_end, partial_end)


def search_local_solar_eclipse(
    start: TimeInstant,
    observer: ObserverLocation,
    ephemeris: Optional[OrbitalModel] = None,
) -> LocalSolarEclipseInfo:
    """
    The first solar eclipse seen by `observer` after `start`. An eclipse is
    skipped when the Sun is below the horizon at both its beginning and its
    end.
    """
    eph = resolve(ephemeris)
    nmtime = start
    for _ in range(LOCAL_NEW_MOONS_TO_CHECK):
        newmoon = search_moon_phase(0.0, nmtime, 40.0, eph)
        if newmoon is None:
            raise SearchFailure(f"cannot find a new moon after {nmtime}")

        if abs(moon_ecliptic_latitude(newmoon, eph)) < MAX_ECLIPSE_LATITUDE_DEG:
            shadow = peak_shadow(lambda t: local_moon_shadow(t, observer, eph), newmoon, LOCAL_PEAK_WINDOW_DAYS)
            if shadow.r < shadow.p:
                info = local_eclipse(shadow, observer, eph)
                if info.partial_begin.altitude > 0.0 or info.partial_end.altitude > 0.0:
                    return info
                logger.debug("solar eclipse at %s is below the horizon for %s", shadow.time, observer)

        nmtime = newmoon.add_days(NEXT_ECLIPSE_SKIP_DAYS)

    raise SearchFailure(f"no solar eclipse seen from {observer} within {LOCAL_NEW_MOONS_TO_CHECK} new moons after {start}")


def next_local_solar_eclipse(
    prev_peak: TimeInstant,
    observer: ObserverLocation,
    ephemeris: Optional[OrbitalModel] = None,
) -> LocalSolarEclipseInfo:
    return search_local_solar_eclipse(prev_peak.add_days(NEXT_ECLIPSE_SKIP_DAYS), observer, ephemeris)
