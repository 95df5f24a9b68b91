"""
Apsides: perigee/apogee of the Moon and perihelion/aphelion of the planets.

Both searches step forward until the slope of the distance changes sign,
then let the root finder locate the zero of the slope. Neptune and Pluto
are sampled by brute force instead: their distance from the Sun changes
so slowly that the Sun's wobble about the barycenter leaves several
shallow turning points near each apsis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

from ..constants import KM_PER_AU, MEAN_SYNODIC_MONTH, ORBITAL_PERIOD_DAYS
from ..core.errors import InvalidBody, SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.vectors import geo_vector, helio_vector
from ..search.engine import search

logger = logging.getLogger(__name__)

DISTANCE_SLOPE_STEP_DAYS = 0.001
LUNAR_STEP_DAYS = 5.0
NEXT_LUNAR_APSIS_SKIP_DAYS = 11.0
BRUTE_FORCE_BODIES = (Body.NEPTUNE, Body.PLUTO)
_BRUTE_FORCE_SAMPLES = 100
_EXTREME_SAMPLES = 10
_EXTREME_RESOLUTION_DAYS = 1.0 / 1440.0


class ApsisKind(IntEnum):
    PERICENTER = 0
    APOCENTER = 1


@dataclass(frozen=True)
class Apsis:
    """Closest or farthest point of an orbit: the instant and the distance in AU."""
    time: TimeInstant
    kind: ApsisKind
    dist_au: float

    @property
    def dist_km(self) -> float:
        return self.dist_au * KM_PER_AU


def moon_distance(time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    """Distance (AU) between the centers of the Earth and the Moon."""
    return geo_vector(Body.MOON, time, False, ephemeris).length()


def helio_distance(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    return helio_vector(body, time, ephemeris).length()


def _planet_period(body: Body) -> float:
    if body.name not in ORBITAL_PERIOD_DAYS:
        raise InvalidBody(f"{body.value} has no heliocentric orbit")
    return ORBITAL_PERIOD_DAYS[body.name]


def _slope(distance: Callable[[TimeInstant], float]) -> Callable[[TimeInstant], float]:
    def slope(t: TimeInstant) -> float:
        r1 = distance(t.add_days(-DISTANCE_SLOPE_STEP_DAYS / 2.0))
        r2 = distance(t.add_days(+DISTANCE_SLOPE_STEP_DAYS / 2.0))
        return (r2 - r1) / DISTANCE_SLOPE_STEP_DAYS
    return slope


def _slope_search(
    distance: Callable[[TimeInstant], float],
    start: TimeInstant,
    increment: float,
    span: float,
    what: str,
) -> Apsis:
    """Step forward `increment` days at a time, up to `span` days, until the distance turns."""
    slope = _slope(distance)
    t1 = start
    m1 = slope(t1)
    steps = 0
    while steps * increment < span:
        t2 = t1.add_days(increment)
        m2 = slope(t2)
        if m1 * m2 <= 0.0:
            if m1 < 0.0 or m2 > 0.0:
                kind = ApsisKind.PERICENTER
                result = search(slope, t1, t2, 1.0, f1=m1, f2=m2)
            elif m1 > 0.0 or m2 < 0.0:
                kind = ApsisKind.APOCENTER
                result = search(lambda t: -slope(t), t1, t2, 1.0, f1=-m1, f2=-m2)
            else:
                raise SearchFailure(f"{what}: flat distance between {t1} and {t2}")
            if not result.found:
                raise SearchFailure(f"{what}: cannot locate the turning point between {t1} and {t2}")
            logger.debug("%s: %s at %s", what, kind.name.lower(), result.time)
            return Apsis(result.time, kind, distance(result.time))
        t1, m1 = t2, m2
        steps += 1
    raise SearchFailure(f"{what}: no turning point within {span:.0f} days of {start}")


def search_lunar_apsis(start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> Apsis:
    """The first perigee or apogee of the Moon after `start`."""
    eph = resolve(ephemeris)
    return _slope_search(lambda t: moon_distance(t, eph), start, LUNAR_STEP_DAYS, 2.0 * MEAN_SYNODIC_MONTH, "lunar apsis")


def next_lunar_apsis(apsis: Apsis, ephemeris: Optional[OrbitalModel] = None) -> Apsis:
    """The apsis after `apsis`: an apogee follows a perigee and vice versa."""
    following = search_lunar_apsis(apsis.time.add_days(NEXT_LUNAR_APSIS_SKIP_DAYS), ephemeris)
    if following.kind is apsis.kind:
        raise SearchFailure(f"lunar apsides do not alternate: {apsis.kind.name} at {apsis.time} then at {following.time}")
    return following


def _extreme(distance: Callable[[TimeInstant], float], kind: ApsisKind, start: TimeInstant, span: float) -> Apsis:
    """Narrow a sampled window down to the minute around a distance extreme."""
    sign = 1.0 if kind is ApsisKind.APOCENTER else -1.0
    while True:
        interval = span / (_EXTREME_SAMPLES - 1)
        if interval < _EXTREME_RESOLUTION_DAYS:
            t = start.add_days(interval / 2.0)
            return Apsis(t, kind, distance(t))
        samples = [sign * distance(start.add_days(i * interval)) for i in range(_EXTREME_SAMPLES)]
        best = max(range(_EXTREME_SAMPLES), key=samples.__getitem__)
        start = start.add_days((best - 1) * interval)
        span = 2.0 * interval


def _brute_search(body: Body, start: TimeInstant, eph: OrbitalModel) -> Apsis:
    """Sample from 30 degrees of orbit before `start` to 270 after and refine both extremes."""
    period = _planet_period(body)
    t1 = start.add_days(period * (-30.0 / 360.0))
    interval = period * (300.0 / 360.0) / (_BRUTE_FORCE_SAMPLES - 1)

    def distance(t: TimeInstant) -> float:
        return helio_distance(body, t, eph)

    times = [t1.add_days(i * interval) for i in range(_BRUTE_FORCE_SAMPLES)]
    dists = [distance(t) for t in times]
    t_min = times[dists.index(min(dists))]
    t_max = times[dists.index(max(dists))]

    perihelion = _extreme(distance, ApsisKind.PERICENTER, t_min.add_days(-2.0 * interval), 4.0 * interval)
    aphelion = _extreme(distance, ApsisKind.APOCENTER, t_max.add_days(-2.0 * interval), 4.0 * interval)
    candidates = sorted((a for a in (perihelion, aphelion) if a.time >= start), key=lambda a: a.time)
    if not candidates:
        raise SearchFailure(f"no apsis of {body.value} found after {start}")
    return candidates[0]


def search_planet_apsis(body: Body, start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> Apsis:
    """The first perihelion or aphelion of a planet (or the Earth) after `start`."""
    period = _planet_period(body)
    eph = resolve(ephemeris)
    if body in BRUTE_FORCE_BODIES:
        return _brute_search(body, start, eph)
    return _slope_search(lambda t: helio_distance(body, t, eph), start, period / 6.0, 2.0 * period, f"{body.value} apsis")


def next_planet_apsis(body: Body, apsis: Apsis, ephemeris: Optional[OrbitalModel] = None) -> Apsis:
    """The apsis after `apsis`, a quarter of an orbit or more later."""
    following = search_planet_apsis(body, apsis.time.add_days(0.25 * _planet_period(body)), ephemeris)
    if following.kind is apsis.kind:
        raise SearchFailure(f"{body.value} apsides do not alternate: {apsis.kind.name} at {apsis.time} then at {following.time}")
    return following
