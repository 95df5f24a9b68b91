"""
Geocentric vectors with light-time and aberration corrections.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import get_settings
from ..constants import C_AUDAY
from ..core.time import TimeInstant
from ..core.types import Body, Frame, PositionVector
from ..ephemeris import OrbitalModel, resolve

logger = logging.getLogger(__name__)

LIGHT_TIME_TOLERANCE_DAYS = 1.0e-12
VELOCITY_STEP_DAYS = 1.0e-3


@dataclass(frozen=True)
class LightTimeResult:
    vector: PositionVector
    light_time: float      # days
    iterations: int
    converged: bool


def helio_vector(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> PositionVector:
    """Heliocentric J2000 vector straight from the orbital model."""
    return resolve(ephemeris).helio_state(body, time)


def apply_aberration(vector: PositionVector, observer_velocity) -> PositionVector:
    """
    Shift the direction of `vector` by the first-order aberration for an
    observer moving at `observer_velocity` (AU/day); the length is kept.
    """
    if observer_velocity is None:
        raise ValueError("aberration needs the observer velocity")
    p = vector.as_array()
    dist = float(np.linalg.norm(p))
    if dist == 0.0:
        return vector
    v = np.asarray(observer_velocity, dtype=float)
    shifted = p + dist * v / C_AUDAY
    shifted *= dist / float(np.linalg.norm(shifted))
    return PositionVector.from_array(shifted, vector.time, vector.frame)


def earth_velocity(earth: PositionVector, ephemeris: Optional[OrbitalModel] = None) -> np.ndarray:
    """
    Heliocentric velocity of the Earth in AU/day. Models that return
    positions only are differenced over a short central step.
    """
    if earth.velocity is not None:
        return earth.velocity_array()
    eph = resolve(ephemeris)
    logger.debug("no Earth velocity from %s at %s; differencing positions", type(eph).__name__, earth.time)
    before = eph.helio_state(Body.EARTH, earth.time.add_days(-VELOCITY_STEP_DAYS)).as_array()
    after = eph.helio_state(Body.EARTH, earth.time.add_days(VELOCITY_STEP_DAYS)).as_array()
    return (after - before) / (2.0 * VELOCITY_STEP_DAYS)


def geocentric_vector(
    body: Body,
    time: TimeInstant,
    aberration: bool = True,
    ephemeris: Optional[OrbitalModel] = None,
) -> LightTimeResult:
    """
    Apparent geocentric J2000 vector of `body`, corrected for light travel
    time, and optionally for the aberration due to the Earth's motion.

    The body is evaluated at time - light_time and the Earth at `time`.
    """
    eph = resolve(ephemeris)
    earth = eph.helio_state(Body.EARTH, time)
    if body is Body.EARTH:
        zero = PositionVector(0.0, 0.0, 0.0, time, Frame.EQJ)
        return LightTimeResult(zero, 0.0, 0, True)

    earth_pos = earth.as_array()
    max_iter = get_settings().light_time_max_iterations

    light_time = 0.0
    geo = eph.helio_state(body, time).as_array() - earth_pos
    for iteration in range(1, max_iter + 1):
        dist = float(np.linalg.norm(geo))
        if dist == 0.0:
            return LightTimeResult(PositionVector.from_array(geo, time), 0.0, iteration, True)
        new_light_time = dist / C_AUDAY
        if abs(new_light_time - light_time) < LIGHT_TIME_TOLERANCE_DAYS:
            vector = PositionVector.from_array(geo, time)
            if aberration:
                vector = apply_aberration(vector, earth_velocity(earth, eph))
            return LightTimeResult(vector, new_light_time, iteration, True)
        light_time = new_light_time
        geo = eph.helio_state(body, time.add_days(-light_time)).as_array() - earth_pos

    logger.warning(
        "light-time iteration for %s at %s did not converge after %d iterations",
        body.value, time, max_iter,
    )
    vector = PositionVector.from_array(geo, time)
    if aberration:
        vector = apply_aberration(vector, earth_velocity(earth, eph))
    return LightTimeResult(vector, light_time, max_iter, False)


def geo_vector(
    body: Body,
    time: TimeInstant,
    aberration: bool = True,
    ephemeris: Optional[OrbitalModel] = None,
) -> PositionVector:
    return geocentric_vector(body, time, aberration, ephemeris).vector


def angle_between(a: PositionVector, b: PositionVector) -> float:
    """Angle between two vectors in degrees, [0, 180]."""
    p, q = a.as_array(), b.as_array()
    if a.length() * b.length() < 1.0e-8:
        raise ValueError("cannot find angle between vectors of zero length")
    cross = float(np.linalg.norm(np.cross(p, q)))
    return math.degrees(math.atan2(cross, float(np.dot(p, q))))
