# reference/solar.py

from __future__ import annotations

import math
from dataclasses import dataclass

from . import astro_args as aa


@dataclass(frozen=True)
class SolarCoordinates:
    """Geocentric solar coordinates, mean ecliptic and equinox of date."""
    L_true_deg: float
    R_au: float


def solar_position(T: float) -> SolarCoordinates:
    """
    True solar longitude plus the radius vector, for T
    Julian centuries (TT) from J2000. Truncated series, ~0.01 deg.
    """
    sm = aa.solar_mean_elements(T)
    M_rad = math.radians(sm.M_deg)

    # Equation of center
    C_sun = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M_rad)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M_rad)
        + 0.000289 * math.sin(3.0 * M_rad)
    )
    L_true = aa.wrap_deg(sm.L0_deg + C_sun)

    e = aa.earth_orbit_eccentricity(T)
    v_rad = M_rad + math.radians(C_sun)
    R = 1.000001018 * (1.0 - e * e) / (1.0 + e * math.cos(v_rad))

    return SolarCoordinates(L_true_deg=L_true, R_au=R)


def geocentric_sun_j2000(T: float):
    """
    Geometric geocentric Sun (AU) in the equatorial J2000 frame.

    The series gives the true longitude referred to the mean ecliptic of
    date with zero latitude; the vector is rotated back to J2000.
    """
    sc = solar_position(T)
    lon = math.radians(sc.L_true_deg)
    ecl_date = (sc.R_au * math.cos(lon), sc.R_au * math.sin(lon), 0.0)
    return aa.apply_matrix(aa.matrix_ecl_date_to_eq_j2000(T), ecl_date)
