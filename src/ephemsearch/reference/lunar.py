# reference/lunar.py

from __future__ import annotations

import math
from dataclasses import dataclass

from ..constants import KM_PER_AU
from . import astro_args as aa


@dataclass(frozen=True)
class LunarCoordinates:
    """Geocentric lunar coordinates, mean ecliptic and equinox of date."""
    L_true_deg: float
    B_true_deg: float
    dist_km: float


# (d, m, m', f, coefficient in microdegrees)
LUNAR_LON_TERMS = (
    (0, 0, 1, 0, 6288774),
    (2, 0, -1, 0, 1274027),
    (2, 0, 0, 0, 658314),
    (0, 0, 2, 0, 213618),
    (0, 1, 0, 0, -185116),
    (0, 0, 0, 2, -114332),
    (2, 0, -2, 0, 58793),
    (2, -1, -1, 0, 57066),
    (2, 0, 1, 0, 53322),
    (2, -1, 0, 0, 45758),
    (0, 1, -1, 0, -40923),
    (1, 0, 0, 0, -34720),
    (0, 1, 1, 0, -30383),
    (2, 0, 0, -2, 15327),
    (0, 0, 1, 2, -12528),
    (0, 0, 1, -2, 10980),
    (4, 0, -1, 0, 10675),
    (0, 0, 3, 0, 10034),
    (4, 0, -2, 0, 8548),
    (2, 1, -1, 0, -7888),
    (2, 1, 0, 0, -6766),
    (1, 0, -1, 0, -5163),
    (1, 1, 0, 0, 4987),
    (2, -1, 1, 0, 4036),
    (2, 0, 2, 0, 3994),
    (4, 0, 0, 0, 3861),
    (2, 0, -3, 0, 3665),
    (0, 1, -2, 0, -2689),
    (2, 0, -1, 2, -2602),
    (2, -1, -2, 0, 2390),
    (1, 0, 1, 0, -2348),
    (2, -2, 0, 0, 2236),
    (0, 1, 2, 0, -2120),
    (0, 2, 0, 0, -2069),
    (2, -2, -1, 0, 2011),
    (2, 0, 1, -2, -1977),
    (4, 0, -3, 0, -1736),
    (4, -1, -1, 0, -1671),
    (2, 1, 1, 0, -1557),
    (1, 1, -2, 0, 1492),
    (2, 0, -4, 0, -1422),
    (4, -1, -2, 0, -1205),
    (2, 1, 0, -2, -1111),
    (2, -1, 1, -2, -1100),
    (2, -1, 2, 0, -811),
    (0, 0, 4, 0, 769),
    (2, 0, -2, 2, 717),
    (0, 0, 2, 2, -712),
    (1, 0, 2, 0, -663),
    (1, 1, -1, 0, -565),
    (1, 0, -2, 0, -523),
    (4, 0, -4, 0, 492),
    (4, -2, -1, 0, -488),
    (2, 2, -1, 0, -469),
    (2, 2, 0, 0, -440),
    (0, 1, 3, 0, -425),
    (4, 0, 1, 0, -418),
    (0, 0, 2, -2, 386),
    (2, 0, -5, 0, 371),
    (2, 2, -2, 0, 362),
    (1, 1, 1, 0, 317),
    (2, 0, -3, 2, -310),
    (0, 2, -1, 0, -307),
    (2, 0, 3, 0, -293),
)

# (d, m, m', f, coefficient in microdegrees)
LUNAR_LAT_TERMS = (
    (0, 0, 0, 1, 5128122),
    (0, 0, 1, 1, 280602),
    (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237),
    (2, 0, -1, 1, 55413),
    (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),
    (0, 0, 2, 1, 17198),
    (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),
    (2, -1, 0, -1, 8216),
    (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),
    (2, 1, 0, -1, -3359),
    (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),
    (2, -1, -1, -1, 2065),
    (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),
    (0, 1, 0, 1, -1794),
    (0, 0, 0, 3, -1153),
)

# (d, m, m', f, coefficient in metres)
LUNAR_DIST_TERMS = (
    (0, 0, 1, 0, -20905355),
    (2, 0, -1, 0, -3699111),
    (2, 0, 0, 0, -2955968),
    (0, 0, 2, 0, -569925),
    (0, 1, 0, 0, 48888),
    (0, 0, 0, 2, -3149),
    (2, 0, -2, 0, 246158),
    (2, -1, -1, 0, -152138),
    (2, 0, 1, 0, -170733),
    (2, -1, 0, 0, -204586),
    (0, 1, -1, 0, -129620),
    (1, 0, 0, 0, 108743),
    (0, 1, 1, 0, 104755),
    (2, 0, 0, -2, 10321),
    (0, 0, 1, -2, 79661),
    (4, 0, -1, 0, -34782),
    (0, 0, 3, 0, -23210),
    (4, 0, -2, 0, -21636),
    (2, 1, -1, 0, 24208),
    (2, 1, 0, 0, 30824),
    (1, 0, -1, 0, -8379),
    (1, 1, 0, 0, -16675),
    (2, -1, 1, 0, -12831),
    (2, 0, 2, 0, -10445),
    (4, 0, 0, 0, -11650),
    (2, 0, -3, 0, 14403),
    (0, 1, -2, 0, -7003),
    (2, -1, -2, 0, 10056),
    (1, 0, 1, 0, 6322),
    (2, -2, 0, 0, -9884),
)


def _series(terms, args, E: float, trig) -> float:
    D_rad, M_rad, Mp_rad, F_rad = args
    total = 0.0
    for d, m, mp, f, coef in terms:
        term_coef = coef
        if abs(m) == 1:
            term_coef *= E
        elif abs(m) == 2:
            term_coef *= (E * E)
        arg = d * D_rad + m * M_rad + mp * Mp_rad + f * F_rad
        total += term_coef * trig(arg)
    return total


def lunar_position(T: float) -> LunarCoordinates:
    """
    Lunar longitude, latitude and distance for T Julian centuries (TT)
    from J2000.
    """
    fa = aa.fundamental_args(T)
    E = aa.eccentricity_factor(T)

    args = (
        math.radians(fa.D_deg),
        math.radians(fa.M_deg),
        math.radians(fa.Mp_deg),
        math.radians(fa.F_deg),
    )

    L_true = aa.wrap_deg(fa.Lp_deg + _series(LUNAR_LON_TERMS, args, E, math.sin) * 1e-6)
    B_true = _series(LUNAR_LAT_TERMS, args, E, math.sin) * 1e-6
    dist_km = 385000.56 + _series(LUNAR_DIST_TERMS, args, E, math.cos) / 1000.0

    return LunarCoordinates(
        L_true_deg=L_true,
        B_true_deg=B_true,
        dist_km=dist_km,
    )


def geocentric_moon_j2000(T: float):
    """Geometric geocentric Moon (AU) in the equatorial J2000 frame."""
    lc = lunar_position(T)
    lon = math.radians(lc.L_true_deg)
    lat = math.radians(lc.B_true_deg)
    r = lc.dist_km / KM_PER_AU
    ecl_date = (
        r * math.cos(lat) * math.cos(lon),
        r * math.cos(lat) * math.sin(lon),
        r * math.sin(lat),
    )
    return aa.apply_matrix(aa.matrix_ecl_date_to_eq_j2000(T), ecl_date)
