from __future__ import annotations

import logging
import math
from typing import Iterator, Optional

from ..constants import MEAN_SYNODIC_MONTH
from ..core.errors import SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body, MoonQuarterEvent
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import to_ecliptic
from ..pipeline.vectors import geo_vector
from ..reference.astro_args import longitude_offset, wrap_deg
from ..search.engine import search

logger = logging.getLogger(__name__)

PHASE_TOLERANCE_SECONDS = 0.1
# uncertainty of the mean-motion estimate of a phase time
PHASE_WINDOW_DAYS = 1.5
QUARTER_WINDOW_DAYS = 10.0
NEXT_QUARTER_SKIP_DAYS = 6.0


def pair_longitude(body1: Body, body2: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    """
    Geocentric true-ecliptic-of-date longitude of body1 minus that of
    body2, degrees in [0, 360). Aberration is not applied to either body.
    """
    eph = resolve(ephemeris)
    lon1 = to_ecliptic(geo_vector(body1, time, False, eph)).elon
    lon2 = to_ecliptic(geo_vector(body2, time, False, eph)).elon
    return wrap_deg(lon1 - lon2)


def moon_phase(time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> float:
    """
    Moon minus Sun ecliptic longitude, degrees in [0, 360):
    0 new moon, 90 first quarter, 180 full moon, 270 third quarter.
    """
    return pair_longitude(Body.MOON, Body.SUN, time, ephemeris)


def search_moon_phase(
    target: float,
    start: TimeInstant,
    limit_days: float,
    ephemeris: Optional[OrbitalModel] = None,
) -> Optional[TimeInstant]:
    """
    First time after `start` (before it, when `limit_days` < 0) that the
    Moon reaches phase `target` degrees. None if it does not happen within
    `limit_days`.
    """
    if not math.isfinite(target):
        raise ValueError(f"target phase {target} is not finite")
    eph = resolve(ephemeris)

    def moon_offset(t: TimeInstant) -> float:
        return longitude_offset(moon_phase(t, eph) - target)

    ya = moon_offset(start)
    if limit_days < 0.0:
        # backward: the target is behind us
        if ya < 0.0:
            ya += 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt2 = est_dt + PHASE_WINDOW_DAYS
        if dt2 < limit_days:
            return None
        dt1 = max(limit_days, est_dt - PHASE_WINDOW_DAYS)
    else:
        if ya > 0.0:
            ya -= 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt1 = est_dt - PHASE_WINDOW_DAYS
        if dt1 > limit_days:
            return None
        dt2 = min(limit_days, est_dt + PHASE_WINDOW_DAYS)

    t1 = start.add_days(dt1)
    t2 = start.add_days(dt2)
    result = search(moon_offset, t1, t2, PHASE_TOLERANCE_SECONDS)
    if not result.found:
        logger.debug("moon phase %.3f not found in [%s, %s]: %s", target, t1, t2, result.status.value)
        return None
    return result.time


def search_moon_quarter(start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> MoonQuarterEvent:
    """The first lunar quarter after `start`."""
    phase = moon_phase(start, ephemeris)
    quarter = (int(math.floor(phase / 90.0)) + 1) % 4
    time = search_moon_phase(90.0 * quarter, start, QUARTER_WINDOW_DAYS, ephemeris)
    if time is None:
        raise SearchFailure(f"cannot find moon quarter {quarter} after {start}")
    return MoonQuarterEvent(quarter=quarter, time=time)


def next_moon_quarter(previous: MoonQuarterEvent, ephemeris: Optional[OrbitalModel] = None) -> MoonQuarterEvent:
    """The quarter following `previous`."""
    # less than the shortest quarter spacing, so no quarter is skipped
    time = previous.time.add_days(NEXT_QUARTER_SKIP_DAYS)
    event = search_moon_quarter(time, ephemeris)
    expected = (previous.quarter + 1) % 4
    if event.quarter != expected:
        raise SearchFailure(f"expected quarter {expected} after {previous.time}, found {event.quarter}")
    return event


def moon_quarters(start: TimeInstant, count: int, ephemeris: Optional[OrbitalModel] = None) -> Iterator[MoonQuarterEvent]:
    """Yield `count` consecutive lunar quarters starting after `start`."""
    if count <= 0:
        return
    event = search_moon_quarter(start, ephemeris)
    yield event
    for _ in range(count - 1):
        event = next_moon_quarter(event, ephemeris)
        yield event
