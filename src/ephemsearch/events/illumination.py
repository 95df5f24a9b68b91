from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..constants import KM_PER_AU, MOON_MEAN_DISTANCE_KM, SUN_MAG_1AU
from ..core.errors import InvalidBody, SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body, PositionVector
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import to_ecliptic
from ..pipeline.vectors import angle_between, geo_vector, helio_vector
from ..reference.astro_args import longitude_offset
from ..search.engine import search
from .conjunction import ecliptic_longitude, search_relative_longitude, synodic_period

# phase-angle polynomials: mag = c0 + x (c1 + x (c2 + x c3)), x = phase / 100
_MAGNITUDE_COEFFS = {
    Body.MERCURY: (-0.60, +4.98, -4.88, +3.02),
    Body.MARS: (-1.52, +1.60, 0.0, 0.0),
    Body.JUPITER: (-9.40, +0.50, 0.0, 0.0),
    Body.URANUS: (-7.19, +0.25, 0.0, 0.0),
    Body.NEPTUNE: (-6.87, 0.0, 0.0, 0.0),
    Body.PLUTO: (-1.00, +4.00, 0.0, 0.0),
}
_VENUS_NEAR = (-4.47, +1.03, +0.57, +0.13)
_VENUS_FAR = (+0.98, -1.02, 0.0, 0.0)
_VENUS_SWITCH_PHASE = 163.6

# relative longitudes bracketing the greatest brilliancy of Venus
_PEAK_S1 = 10.0
_PEAK_S2 = 30.0
_PEAK_SLOPE_STEP_DAYS = 0.005
_PEAK_TOLERANCE_SECONDS = 10.0


@dataclass(frozen=True)
class IlluminationInfo:
    """
    Brightness and phase of a body as seen from the Earth.

    phase_angle: Sun-body-Earth angle (degrees); 0 is fully lit.
    phase_fraction: illuminated fraction of the disc, 0..1.
    ring_tilt: Saturn's ring tilt toward the Earth (degrees), else 0.
    """
    time: TimeInstant
    mag: float
    phase_angle: float
    phase_fraction: float
    helio_dist: float
    geo_dist: float
    gc: PositionVector
    hc: PositionVector
    ring_tilt: float = 0.0


def _poly_magnitude(coeffs, phase: float) -> float:
    c0, c1, c2, c3 = coeffs
    x = phase / 100.0
    return c0 + x * (c1 + x * (c2 + x * c3))


def visual_magnitude(body: Body, phase: float, helio_dist: float, geo_dist: float) -> float:
    """Apparent magnitude of a planet other than Saturn from its phase angle and distances (AU)."""
    if body is Body.VENUS:
        coeffs = _VENUS_NEAR if phase < _VENUS_SWITCH_PHASE else _VENUS_FAR
    elif body in _MAGNITUDE_COEFFS:
        coeffs = _MAGNITUDE_COEFFS[body]
    else:
        raise InvalidBody(f"no magnitude model for {body.value}")
    return _poly_magnitude(coeffs, phase) + 5.0 * math.log10(helio_dist * geo_dist)


def moon_magnitude(phase: float, helio_dist: float, geo_dist: float) -> float:
    rad = math.radians(phase)
    rad2 = rad * rad
    rad4 = rad2 * rad2
    mag = -12.717 + 1.49 * abs(rad) + 0.0431 * rad4
    moon_mean_distance_au = MOON_MEAN_DISTANCE_KM / KM_PER_AU
    return mag + 5.0 * math.log10(helio_dist * geo_dist / moon_mean_distance_au)


def saturn_ring_tilt(time: TimeInstant, gc: PositionVector) -> float:
    """Tilt (degrees) of Saturn's ring plane toward the Earth."""
    ecl = to_ecliptic(gc, of_date=False)
    lat = math.radians(ecl.elat)
    lon = math.radians(ecl.elon)
    ir = math.radians(28.06)
    Nr = math.radians(169.51 + 3.82e-5 * time.tt)
    return math.degrees(math.asin(math.sin(lat) * math.cos(ir) - math.cos(lat) * math.sin(ir) * math.sin(lon - Nr)))


def saturn_magnitude(phase: float, helio_dist: float, geo_dist: float, ring_tilt: float) -> float:
    sin_tilt = math.sin(math.radians(abs(ring_tilt)))
    mag = -9.0 + 0.044 * phase
    mag += sin_tilt * (-2.6 + 1.2 * sin_tilt)
    return mag + 5.0 * math.log10(helio_dist * geo_dist)


def illumination(body: Body, time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> IlluminationInfo:
    """Phase and visual magnitude of the Sun, the Moon or a planet."""
    if body is Body.EARTH:
        raise InvalidBody("the Earth's illumination cannot be seen from the Earth")
    if body.is_star:
        raise InvalidBody(f"no illumination model for {body.value}")
    eph = resolve(ephemeris)

    earth = helio_vector(Body.EARTH, time, eph)
    earth = PositionVector(earth.x, earth.y, earth.z, time, earth.frame)
    ring_tilt = 0.0

    if body is Body.SUN:
        gc = -earth
        hc = PositionVector(0.0, 0.0, 0.0, time, gc.frame)
        phase = 0.0
        geo_dist = gc.length()
        helio_dist = 0.0
        mag = SUN_MAG_1AU + 5.0 * math.log10(geo_dist)
    else:
        if body is Body.MOON:
            gc = geo_vector(Body.MOON, time, False, eph)
            hc = earth + gc
        else:
            gc = geo_vector(body, time, True, eph)
            hc = earth + gc
        phase = angle_between(gc, hc)
        geo_dist = gc.length()
        helio_dist = hc.length()
        if body is Body.MOON:
            mag = moon_magnitude(phase, helio_dist, geo_dist)
        elif body is Body.SATURN:
            ring_tilt = saturn_ring_tilt(time, gc)
            mag = saturn_magnitude(phase, helio_dist, geo_dist, ring_tilt)
        else:
            mag = visual_magnitude(body, phase, helio_dist, geo_dist)

    fraction = (1.0 + math.cos(math.radians(phase))) / 2.0
    return IlluminationInfo(time, mag, phase, fraction, helio_dist, geo_dist, gc, hc, ring_tilt)


def search_peak_magnitude(body: Body, start: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> IlluminationInfo:
    """
    Next greatest brilliancy of Venus after `start` (the only planet for
    which the magnitude has an interesting maximum between conjunctions).
    """
    if body is not Body.VENUS:
        raise InvalidBody("peak magnitude search is only supported for Venus")
    eph = resolve(ephemeris)
    syn = synodic_period(body)

    def slope(t: TimeInstant) -> float:
        t1 = t.add_days(-_PEAK_SLOPE_STEP_DAYS)
        t2 = t.add_days(+_PEAK_SLOPE_STEP_DAYS)
        return (illumination(body, t2, eph).mag - illumination(body, t1, eph).mag) / (t2.ut - t1.ut)

    for _ in range(2):
        plon = ecliptic_longitude(body, start, eph)
        elon = ecliptic_longitude(Body.EARTH, start, eph)
        rlon = longitude_offset(plon - elon)

        if -_PEAK_S1 <= rlon < +_PEAK_S1:
            adjust_days = 0.0
            rlon_lo, rlon_hi = +_PEAK_S1, +_PEAK_S2
        elif rlon >= +_PEAK_S2 or rlon < -_PEAK_S2:
            adjust_days = 0.0
            rlon_lo, rlon_hi = -_PEAK_S2, -_PEAK_S1
        elif rlon >= 0.0:
            adjust_days = -syn / 4.0
            rlon_lo, rlon_hi = +_PEAK_S1, +_PEAK_S2
        else:
            adjust_days = -syn / 4.0
            rlon_lo, rlon_hi = -_PEAK_S2, -_PEAK_S1

        t_start = start.add_days(adjust_days)
        t1 = search_relative_longitude(body, rlon_lo, t_start, eph)
        t2 = search_relative_longitude(body, rlon_hi, t1, eph)

        result = search(slope, t1, t2, _PEAK_TOLERANCE_SECONDS)
        if not result.found:
            raise SearchFailure(f"cannot find peak magnitude of {body.value} between {t1} and {t2}")
        if result.time >= start:
            return illumination(body, result.time, eph)

        start = t2.add_days(1.0)

    raise SearchFailure(f"peak magnitude search for {body.value} did not advance past {start}")
