"""
Conjunctions, oppositions and elongation of the planets.

Relative longitude is the heliocentric ecliptic longitude of the Earth
minus that of a planet, signed so that it increases with time: 0 is an
inferior conjunction (inner planets) or an opposition (outer planets),
180 a superior conjunction or a conjunction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..constants import MEAN_SYNODIC_MONTH, ORBITAL_PERIOD_DAYS
from ..core.errors import InvalidBody, SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import to_ecliptic
from ..pipeline.vectors import angle_between, geo_vector, helio_vector
from ..reference.astro_args import longitude_offset, wrap_deg
from ..search.engine import search
from .moonphase import pair_longitude

logger = logging.getLogger(__name__)

EARTH_ORBITAL_PERIOD = 365.256
RELATIVE_LONGITUDE_TOLERANCE_SECONDS = 1.0
# refine the mean-motion estimate until it moves less than this, then bracket
_ESTIMATE_CONVERGENCE_DAYS = 0.5
_BRACKET_HALF_WIDTH_DAYS = 2.0
_MAX_ESTIMATE_STEPS = 20

# relative longitudes (degrees) bracketing a greatest elongation
MAX_ELONGATION_WINDOWS = {
    Body.MERCURY: (50.0, 85.0),
    Body.VENUS: (40.0, 50.0),
}
ELONGATION_SLOPE_STEP_DAYS = 0.01
MAX_ELONGATION_TOLERANCE_SECONDS = 10.0


@dataclass(frozen=True)
class ElongationInfo:
    """
    Angular separation of a body from the Sun as seen from the Earth.
    `visibility` is "morning" when the body is west of the Sun and
    "evening" when it is east of it.
    """
    time: TimeInstant
    visibility: str
    elongation: float
    ecliptic_separation: float
    relative_longitude: float


def _orbital_period(body: Body) -> float:
    if body not in (Body.MERCURY, Body.VENUS, Body.MARS, Body.JUPITER,
                    Body.SATURN, Body.URANUS, Body.NEPTUNE, Body.PLUTO):
        raise InvalidBody(f"{body.value} has no synodic relation to the Earth")
    return ORBITAL_PERIOD_DAYS[body.name]


def is_superior_planet(body: Body) -> bool:
    return _orbital_period(body) > EARTH_ORBITAL_PERIOD


def synodic_period(body: Body) -> float:
    """Mean days between successive conjunctions of the body with the Sun."""
    if body is Body.MOON:
        return MEAN_SYNODIC_MONTH
    period = _orbital_period(body)
    return abs(EARTH_ORBITAL_PERIOD / (EARTH_ORBITAL_PERIOD / period - 1.0))


def ecliptic_longitude(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    """Heliocentric J2000 ecliptic longitude of a body, degrees [0, 360)."""
    if body is Body.SUN:
        raise InvalidBody("the Sun has no heliocentric longitude")
    return to_ecliptic(helio_vector(body, time, ephemeris), of_date=False).elon


def relative_longitude(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    direction = +1.0 if is_superior_planet(body) else -1.0
    eph = resolve(ephemeris)
    earth_lon = ecliptic_longitude(Body.EARTH, time, eph)
    body_lon = ecliptic_longitude(body, time, eph)
    return wrap_deg(direction * (earth_lon - body_lon))


def search_relative_longitude(
    body: Body,
    target_rel_lon: float,
    start: TimeInstant,
    ephemeris: Optional[OrbitalModel] = None,
) -> TimeInstant:
    """
    First time after `start` when the relative longitude of `body` equals
    `target_rel_lon` degrees. 0 finds an inferior conjunction or an
    opposition; 180 a superior conjunction or a conjunction.
    """
    eph = resolve(ephemeris)
    syn = synodic_period(body)

    def offset(t: TimeInstant) -> float:
        return longitude_offset(relative_longitude(body, t, eph) - target_rel_lon)

    error_angle = offset(start)
    if error_angle > 0.0:
        error_angle -= 360.0

    time = start
    for _ in range(_MAX_ESTIMATE_STEPS):
        day_adjust = (-error_angle / 360.0) * syn
        time = time.add_days(day_adjust)
        if abs(day_adjust) < _ESTIMATE_CONVERGENCE_DAYS:
            break
        error_angle = offset(time)
    else:
        raise SearchFailure(f"relative longitude estimate for {body.value} did not settle")

    t1 = time.add_days(-_BRACKET_HALF_WIDTH_DAYS)
    t2 = time.add_days(+_BRACKET_HALF_WIDTH_DAYS)
    result = search(offset, t1, t2, RELATIVE_LONGITUDE_TOLERANCE_SECONDS)
    if not result.found:
        raise SearchFailure(
            f"cannot find relative longitude {target_rel_lon} of {body.value} near {time}: {result.status.value}"
        )
    if result.time < start:
        # estimate landed on the previous event; restart half a synodic period later
        logger.debug("relative longitude event %s precedes %s; retrying", result.time, start)
        return search_relative_longitude(body, target_rel_lon, result.time.add_days(syn / 2.0), eph)
    return result.time


def angle_from_sun(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    """Apparent angular distance (degrees) between the body and the Sun, seen from the Earth."""
    eph = resolve(ephemeris)
    sun = geo_vector(Body.SUN, time, True, eph)
    vec = geo_vector(body, time, True, eph)
    return angle_between(sun, vec)


def elongation(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> ElongationInfo:
    eph = resolve(ephemeris)
    angle = pair_longitude(body, Body.SUN, time, eph)
    if angle > 180.0:
        visibility = "morning"
        esep = 360.0 - angle
    else:
        visibility = "evening"
        esep = angle
    return ElongationInfo(
        time=time,
        visibility=visibility,
        elongation=angle_from_sun(body, time, eph),
        ecliptic_separation=esep,
        relative_longitude=relative_longitude(body, time, eph),
    )


def search_max_elongation(body: Body, start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> ElongationInfo:
    """
    The next greatest elongation of Mercury or Venus after `start`.

    The slope of the elongation has a cusp at conjunction, so the root
    finder is only run between two relative longitudes on one side of the
    Sun, where the elongation is known to peak.
    """
    if body not in MAX_ELONGATION_WINDOWS:
        raise InvalidBody(f"greatest elongation is defined for Mercury and Venus only, not {body.value}")
    eph = resolve(ephemeris)
    s1, s2 = MAX_ELONGATION_WINDOWS[body]

    def neg_slope(t: TimeInstant) -> float:
        # the elongation rises then falls; search() wants an ascending crossing
        e1 = angle_from_sun(body, t.add_days(-ELONGATION_SLOPE_STEP_DAYS / 2.0), eph)
        e2 = angle_from_sun(body, t.add_days(+ELONGATION_SLOPE_STEP_DAYS / 2.0), eph)
        return (e1 - e2) / ELONGATION_SLOPE_STEP_DAYS

    start_time = start
    for _ in range(2):
        rlon = longitude_offset(relative_longitude(body, start_time, eph))
        if -s1 <= rlon < s1:
            adjust_days, lo, hi = 0.0, s1, s2
        elif rlon >= s2 or rlon < -s2:
            adjust_days, lo, hi = 0.0, -s2, -s1
        elif rlon >= 0.0:
            # already inside [s1, s2]: step back to its beginning
            adjust_days, lo, hi = -synodic_period(body) / 4.0, s1, s2
        else:
            adjust_days, lo, hi = -synodic_period(body) / 4.0, -s2, -s1

        t1 = search_relative_longitude(body, lo, start_time.add_days(adjust_days), eph)
        t2 = search_relative_longitude(body, hi, t1, eph)
        m1 = neg_slope(t1)
        m2 = neg_slope(t2)
        if not (m1 < 0.0 < m2):
            raise SearchFailure(f"elongation of {body.value} does not peak between {t1} and {t2}")

        result = search(neg_slope, t1, t2, MAX_ELONGATION_TOLERANCE_SECONDS, f1=m1, f2=m2)
        if not result.found:
            raise SearchFailure(f"cannot find greatest elongation of {body.value} between {t1} and {t2}")
        if result.time >= start:
            return elongation(body, result.time, eph)
        # that window peaked before `start`; the next one begins after t2
        start_time = t2.add_days(1.0)

    raise SearchFailure(f"cannot find greatest elongation of {body.value} after {start}")
