"""
Transits of Mercury and Venus across the Sun.

A transit is a solar eclipse by a planet: the Earth's center passes
through the planet's penumbra. Only inferior conjunctions close to the
Sun are examined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.errors import InvalidBody, SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.vectors import geo_vector
from ..search.engine import search
from .conjunction import angle_from_sun, search_relative_longitude
from .eclipse import ShadowInfo, calc_shadow, peak_shadow

logger = logging.getLogger(__name__)

PLANET_RADIUS_KM = {
    Body.MERCURY: 2439.7,
    Body.VENUS: 6051.8,
}
# conjunctions further than this (degrees) from the Sun cannot be transits
TRANSIT_THRESHOLD_DEG = 0.4
PEAK_WINDOW_DAYS = 1.0
CONTACT_WINDOW_DAYS = 1.0
NEXT_TRANSIT_SKIP_DAYS = 100.0
CONJUNCTIONS_TO_CHECK = 300


@dataclass(frozen=True)
class TransitInfo:
    """
    Times the planet's disc first and last touches the Sun's (for an
    observer at the Earth's center), and the minimum separation of the
    centers in arcminutes.
    """
    start: TimeInstant
    peak: TimeInstant
    finish: TimeInstant
    separation: float


def planet_radius_km(body: Body) -> float:
    try:
        return PLANET_RADIUS_KM[body]
    except KeyError:
        raise InvalidBody(f"transits are computed for Mercury and Venus only, not {body.value}") from None


def planet_shadow(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> ShadowInfo:
    """The planet's shadow at the Earth's center."""
    eph = resolve(ephemeris)
    g = geo_vector(body, time, True, eph).as_array()
    e = geo_vector(Body.SUN, time, True, eph).as_array()
    return calc_shadow(planet_radius_km(body), time, -g, g - e)


def _contact(body: Body, t1: TimeInstant, t2: TimeInstant, direction: float, eph: OrbitalModel) -> TimeInstant:
    def boundary(t: TimeInstant) -> float:
        shadow = planet_shadow(body, t, eph)
        return direction * (shadow.r - shadow.p)

    result = search(boundary, t1, t2, 1.0)
    if not result.found:
        raise SearchFailure(f"cannot find the {body.value} transit contact between {t1} and {t2}")
    return result.time


def search_transit(body: Body, start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> TransitInfo:
    """The first transit of Mercury or Venus after `start`."""
    planet_radius_km(body)
    eph = resolve(ephemeris)
    search_time = start
    for _ in range(CONJUNCTIONS_TO_CHECK):
        conj = search_relative_longitude(body, 0.0, search_time, eph)
        if angle_from_sun(body, conj, eph) < TRANSIT_THRESHOLD_DEG:
            shadow = peak_shadow(lambda t: planet_shadow(body, t, eph), conj, PEAK_WINDOW_DAYS)
            if shadow.r < shadow.p:
                begin = _contact(body, shadow.time.add_days(-CONTACT_WINDOW_DAYS), shadow.time, -1.0, eph)
                end = _contact(body, shadow.time, shadow.time.add_days(+CONTACT_WINDOW_DAYS), +1.0, eph)
                separation = 60.0 * angle_from_sun(body, shadow.time, eph)
                logger.debug("found transit of %s peaking at %s", body.value, shadow.time)
                return TransitInfo(begin, shadow.time, end, separation)
        search_time = conj.add_days(10.0)

    raise SearchFailure(f"no transit of {body.value} within {CONJUNCTIONS_TO_CHECK} conjunctions after {start}")


def next_transit(body: Body, prev_peak: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> TransitInfo:
    return search_transit(body, prev_peak.add_days(NEXT_TRANSIT_SKIP_DAYS), ephemeris)
