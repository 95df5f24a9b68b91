"""
Rise, set and altitude crossings for an observer.

The altitude of a body is close to a sinusoid with a period of about a day,
so a wide window holds many crossings. The window is therefore scanned in
short steps and the root finder is only called on a step where the altitude
changes sign in the requested direction.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..config import get_settings
from ..constants import KM_PER_AU, MOON_EQUATORIAL_RADIUS_KM, REFRACTION_NEAR_HORIZON, SUN_RADIUS_KM
from ..core.time import TimeInstant
from ..core.types import Body, Direction, ObserverLocation, SearchBracket
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.observer import to_horizontal, topocentric_equator
from ..search.engine import SearchFunction, search

logger = logging.getLogger(__name__)

RISE_SET_TOLERANCE_SECONDS = 1.0
_MIN_STEP_DAYS = 1.0e-9

_BODY_RADIUS_AU = {
    Body.SUN: SUN_RADIUS_KM / KM_PER_AU,
    Body.MOON: MOON_EQUATORIAL_RADIUS_KM / KM_PER_AU,
}


def body_radius_au(body: Body) -> float:
    return _BODY_RADIUS_AU.get(body, 0.0)


def geometric_altitude(
    body: Body,
    time: TimeInstant,
    observer: ObserverLocation,
    ephemeris: Optional[OrbitalModel] = None,
) -> float:
    """Unrefracted altitude (deg) of the body's center as seen by the observer."""
    equ = topocentric_equator(body, time, observer, of_date=True, aberration=True, ephemeris=ephemeris)
    return to_horizontal(equ, observer, time).altitude


def _scan(
    f: SearchFunction,
    direction: Direction,
    start: TimeInstant,
    limit_days: float,
) -> Optional[TimeInstant]:
    step = get_settings().rise_set_step_hours / 24.0
    sign = 1.0 if limit_days >= 0.0 else -1.0
    end = start.add_days(limit_days)

    t1 = start
    f1 = f(t1)
    while True:
        remaining = abs(end.ut - t1.ut)
        if remaining < _MIN_STEP_DAYS:
            return None
        t2 = t1.add_days(sign * min(step, remaining))
        f2 = f(t2)

        # forward in time the rise is f going - to +; backward it is seen as + to -
        if sign > 0:
            wanted = (f1 < 0.0 <= f2) if direction is Direction.RISE else (f1 >= 0.0 > f2)
        else:
            wanted = (f2 < 0.0 <= f1) if direction is Direction.RISE else (f2 >= 0.0 > f1)

        if wanted:
            bracket = SearchBracket(t1, t2, 1 if f1 >= 0.0 else -1)
            logger.debug("altitude crossing inside %s .. %s", bracket.lower, bracket.upper)
            result = search(f, bracket.t1, bracket.t2, RISE_SET_TOLERANCE_SECONDS, f1=f1, f2=f2)
            if result.found and bracket.contains(result.time):
                return result.time
            logger.warning("altitude search between %s and %s failed: %s", t1, t2, result.status.value)
            return None
        t1, f1 = t2, f2


def search_altitude(
    body: Body,
    observer: ObserverLocation,
    direction: Direction,
    start: TimeInstant,
    limit_days: float,
    altitude: float,
    ephemeris: Optional[OrbitalModel] = None,
) -> Optional[TimeInstant]:
    """
    First time after `start` (before it when `limit_days` < 0) that the
    body's center crosses `altitude` degrees, ascending for RISE and
    descending for SET. Refraction is not applied. None if no crossing
    happens inside the window.
    """
    if not (-90.0 <= altitude <= 90.0):
        raise ValueError(f"altitude {altitude} is out of range -90..+90")
    eph = resolve(ephemeris)

    def f(t: TimeInstant) -> float:
        return geometric_altitude(body, t, observer, eph) - altitude

    return _scan(f, Direction(direction), start, limit_days)


def search_rise_set(
    body: Body,
    observer: ObserverLocation,
    direction: Direction,
    start: TimeInstant,
    limit_days: float,
    ephemeris: Optional[OrbitalModel] = None,
) -> Optional[TimeInstant]:
    """
    Rise (top limb appears) or set (top limb disappears) of a body, using
    standard horizon refraction of 34 arcminutes.
    """
    if body is Body.EARTH:
        raise ValueError("the Earth does not rise or set")
    eph = resolve(ephemeris)
    radius = body_radius_au(body)

    def f(t: TimeInstant) -> float:
        equ = topocentric_equator(body, t, observer, of_date=True, aberration=True, ephemeris=eph)
        alt = to_horizontal(equ, observer, t).altitude
        semi_diameter = math.degrees(math.asin(min(1.0, radius / equ.dist))) if radius > 0.0 else 0.0
        return alt + semi_diameter + REFRACTION_NEAR_HORIZON

    return _scan(f, Direction(direction), start, limit_days)


def sunrise(observer: ObserverLocation, start: TimeInstant, limit_days: float = 1.0, ephemeris: Optional[OrbitalModel] = None) -> Optional[TimeInstant]:
    return search_rise_set(Body.SUN, observer, Direction.RISE, start, limit_days, ephemeris)


def sunset(observer: ObserverLocation, start: TimeInstant, limit_days: float = 1.0, ephemeris: Optional[OrbitalModel] = None) -> Optional[TimeInstant]:
    return search_rise_set(Body.SUN, observer, Direction.SET, start, limit_days, ephemeris)
