"""
Lunar eclipses, and the shadow geometry shared with solar eclipses and
transits.

The Earth's shadow is modelled as two cones with a common axis along the
Sun-Earth line: the umbra, narrowing away from the Sun, and the penumbra,
widening. At the distance of the Moon the shadow is a pair of concentric
circles; an eclipse happens when the lunar disc overlaps them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from ..constants import (
    EARTH_ECLIPSE_RADIUS_KM,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    SUN_RADIUS_KM,
)
from ..core.errors import SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import to_ecliptic
from ..pipeline.vectors import geo_vector
from ..search.engine import search
from .moonphase import search_moon_phase

logger = logging.getLogger(__name__)

FULL_MOONS_TO_CHECK = 12
# a full moon further than this from the ecliptic cannot be eclipsed
MAX_ECLIPSE_LATITUDE_DEG = 1.8
PEAK_WINDOW_DAYS = 0.03
SLOPE_STEP_DAYS = 1.0 / 86400.0
SEMI_DURATION_WINDOW_MINUTES = 200.0
NEXT_ECLIPSE_SKIP_DAYS = 10.0


class EclipseKind(Enum):
    PENUMBRAL = "penumbral"
    PARTIAL = "partial"
    ANNULAR = "annular"
    TOTAL = "total"


@dataclass(frozen=True, eq=False)
class ShadowInfo:
    """
    Shadow geometry at the target's distance (km): r is the distance of the
    target from the shadow axis, k the umbra radius, p the penumbra radius.
    """
    time: TimeInstant
    u: float
    r: float
    k: float
    p: float
    target: np.ndarray
    direction: np.ndarray


@dataclass(frozen=True)
class LunarEclipseInfo:
    """
    A lunar eclipse: its kind, the peak instant, the fraction of the lunar
    disc inside the umbra at the peak, and the half durations (minutes) of
    each phase. A phase that does not occur has a semi-duration of 0.
    """
    kind: EclipseKind
    obscuration: float
    peak: TimeInstant
    sd_penum: float
    sd_partial: float
    sd_total: float

    def contacts(self) -> Dict[str, TimeInstant]:
        """Contact instants, keyed P1, U1, U2, U3, U4, P4 (those that occur)."""
        out: Dict[str, TimeInstant] = {}
        for start, end, sd in (("P1", "P4", self.sd_penum), ("U1", "U4", self.sd_partial), ("U2", "U3", self.sd_total)):
            if sd > 0.0:
                out[start] = self.peak.add_days(-sd / 1440.0)
                out[end] = self.peak.add_days(+sd / 1440.0)
        order = ("P1", "U1", "U2", "U3", "U4", "P4")
        return {key: out[key] for key in order if key in out}


def calc_shadow(body_radius_km: float, time: TimeInstant, target: np.ndarray, direction: np.ndarray) -> ShadowInfo:
    """
    Shadow cast by a body of radius `body_radius_km`: `direction` points from
    the Sun to the shadow-casting body and `target` from that body to the
    target (both AU).
    """
    u = float(np.dot(direction, target) / np.dot(direction, direction))
    dc = u * direction - target
    r = KM_PER_AU * float(np.linalg.norm(dc))
    k = +SUN_RADIUS_KM - (1.0 + u) * (SUN_RADIUS_KM - body_radius_km)
    p = -SUN_RADIUS_KM + (1.0 + u) * (SUN_RADIUS_KM + body_radius_km)
    return ShadowInfo(time, u, r, k, p, target, direction)


def earth_shadow(time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> ShadowInfo:
    """The Earth's shadow at the Moon."""
    eph = resolve(ephemeris)
    s = geo_vector(Body.SUN, time, True, eph).as_array()
    e = -s
    m = geo_vector(Body.MOON, time, False, eph).as_array()
    return calc_shadow(EARTH_ECLIPSE_RADIUS_KM, time, m, e)


def obscuration(a: float, b: float, c: float) -> float:
    """
    Fraction of a disc of radius `a` covered by a disc of radius `b` whose
    center is at distance `c`.
    """
    if a <= 0.0:
        raise ValueError("radius of first disc must be positive")
    if b <= 0.0:
        raise ValueError("radius of second disc must be positive")
    if c < 0.0:
        raise ValueError("distance between discs cannot be negative")

    if c >= a + b:
        return 0.0
    if c == 0.0:
        return 1.0 if a <= b else (b * b) / (a * a)

    x = (a * a - b * b + c * c) / (2.0 * c)
    radicand = a * a - x * x
    if radicand <= 0.0:
        # one disc lies inside the other
        return 1.0 if a <= b else (b * b) / (a * a)

    y = math.sqrt(radicand)
    lens1 = a * a * math.acos(x / a) - x * y
    lens2 = b * b * math.acos((c - x) / b) - (c - x) * y
    return (lens1 + lens2) / (math.pi * a * a)


def shadow_slope(shadow_at: Callable[[TimeInstant], ShadowInfo], time: TimeInstant) -> float:
    """Rate of change (km/day) of the distance between the target and the shadow axis."""
    t1 = time.add_days(-SLOPE_STEP_DAYS)
    t2 = time.add_days(+SLOPE_STEP_DAYS)
    return (shadow_at(t2).r - shadow_at(t1).r) / (t2.ut - t1.ut)


def peak_shadow(
    shadow_at: Callable[[TimeInstant], ShadowInfo],
    search_center: TimeInstant,
    window_days: float,
) -> ShadowInfo:
    """Shadow at the instant within `window_days` of `search_center` when the target is closest to the axis."""
    t1 = search_center.add_days(-window_days)
    t2 = search_center.add_days(+window_days)
    result = search(lambda t: shadow_slope(shadow_at, t), t1, t2, 1.0)
    if not result.found:
        raise SearchFailure(f"cannot find the shadow peak near {search_center}: {result.status.value}")
    return shadow_at(result.time)


def peak_earth_shadow(search_center: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> TimeInstant:
    """Instant near `search_center` when the Moon is closest to the shadow axis."""
    eph = resolve(ephemeris)
    return peak_shadow(lambda t: earth_shadow(t, eph), search_center, PEAK_WINDOW_DAYS).time


def _semi_duration(center: TimeInstant, radius_limit: float, window_minutes: float, eph: OrbitalModel) -> float:
    """Half the time (minutes) the Moon's center stays within `radius_limit` km of the axis."""
    window = window_minutes / 1440.0
    before = center.add_days(-window)
    after = center.add_days(+window)

    t1 = search(lambda t: -(earth_shadow(t, eph).r - radius_limit), before, center, 1.0)
    t2 = search(lambda t: +(earth_shadow(t, eph).r - radius_limit), center, after, 1.0)
    if not (t1.found and t2.found):
        raise SearchFailure(f"cannot find lunar eclipse contacts around {center}")
    return (t2.time.ut - t1.time.ut) * 1440.0 / 2.0


def moon_ecliptic_latitude(time: TimeInstant, eph: OrbitalModel) -> float:
    return to_ecliptic(geo_vector(Body.MOON, time, False, eph)).elat


def search_lunar_eclipse(start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> LunarEclipseInfo:
    """The first lunar eclipse (of any kind) whose peak falls after `start`."""
    eph = resolve(ephemeris)
    fmtime = start
    for _ in range(FULL_MOONS_TO_CHECK):
        fullmoon = search_moon_phase(180.0, fmtime, 40.0, eph)
        if fullmoon is None:
            raise SearchFailure(f"cannot find a full moon after {fmtime}")

        if abs(moon_ecliptic_latitude(fullmoon, eph)) < MAX_ECLIPSE_LATITUDE_DEG:
            peak = peak_earth_shadow(fullmoon, eph)
            shadow = earth_shadow(peak, eph)
            if shadow.r < shadow.p + MOON_MEAN_RADIUS_KM:
                kind = EclipseKind.PENUMBRAL
                obs = 0.0
                sd_total = 0.0
                sd_partial = 0.0
                sd_penum = _semi_duration(peak, shadow.p + MOON_MEAN_RADIUS_KM, SEMI_DURATION_WINDOW_MINUTES, eph)

                if shadow.r < shadow.k + MOON_MEAN_RADIUS_KM:
                    kind = EclipseKind.PARTIAL
                    sd_partial = _semi_duration(peak, shadow.k + MOON_MEAN_RADIUS_KM, sd_penum, eph)

                    if shadow.r + MOON_MEAN_RADIUS_KM < shadow.k:
                        kind = EclipseKind.TOTAL
                        obs = 1.0
                        sd_total = _semi_duration(peak, shadow.k - MOON_MEAN_RADIUS_KM, sd_partial, eph)
                    else:
                        obs = obscuration(MOON_MEAN_RADIUS_KM, shadow.k, shadow.r)

                logger.debug("found %s lunar eclipse peaking at %s", kind.value, peak)
                return LunarEclipseInfo(kind, obs, peak, sd_penum, sd_partial, sd_total)

        fmtime = fullmoon.add_days(NEXT_ECLIPSE_SKIP_DAYS)

    raise SearchFailure(f"no lunar eclipse within {FULL_MOONS_TO_CHECK} full moons after {start}")


def next_lunar_eclipse(prev_peak: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> LunarEclipseInfo:
    return search_lunar_eclipse(prev_peak.add_days(NEXT_ECLIPSE_SKIP_DAYS), ephemeris)
