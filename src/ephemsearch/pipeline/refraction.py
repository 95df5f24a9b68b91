from __future__ import annotations

import math

from ..core.types import Refraction

# refraction formulas are not valid further below the horizon than this
MIN_REFRACTION_ALTITUDE = -1.0


def refraction_angle(model: Refraction, altitude: float) -> float:
    """
    Atmospheric refraction (degrees) to add to a geometric altitude.

    NORMAL and JPLHOR use Saemundsson's formula for standard pressure and
    temperature. Returns 0 for NONE, for altitudes below -1 degree and for
    values outside [-90, +90].
    """
    if model is Refraction.NONE:
        return 0.0
    if model not in (Refraction.NORMAL, Refraction.JPLHOR):
        raise ValueError(f"unsupported refraction model {model!r}")
    if not (-90.0 <= altitude <= 90.0):
        return 0.0
    if altitude < MIN_REFRACTION_ALTITUDE:
        return 0.0
    return 1.02 / math.tan(math.radians(altitude + 10.3 / (altitude + 5.11))) / 60.0


def inverse_refraction(model: Refraction, bent_altitude: float) -> float:
    """
    Refraction (degrees, negative) to add to an apparent altitude to recover
    the geometric one.
    """
    if not (-90.0 <= bent_altitude <= 90.0):
        return 0.0
    altitude = bent_altitude - refraction_angle(model, bent_altitude)
    for _ in range(20):
        diff = (altitude + refraction_angle(model, altitude)) - bent_altitude
        if abs(diff) < 1.0e-14:
            break
        altitude -= diff
    return altitude - bent_altitude
