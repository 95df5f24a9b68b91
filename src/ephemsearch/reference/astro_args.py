from __future__ import annotations

import math
from dataclasses import dataclass
from math import fmod
from typing import Literal, Tuple

from ..constants import ASEC2RAD, ASEC360, DAYS_PER_JULIAN_CENTURY, J2000_JD

Matrix = Tuple[Tuple[float, float, float], Tuple[float, float, float], Tuple[float, float, float]]


# ------------------------------------------------------------
# Angle helpers
# ------------------------------------------------------------

def wrap_deg(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(x_deg, 360.0)
    if y < 0:
        y += 360.0
    return y


def wrap180(deg: float) -> float:
    """Wrap degrees to [-180, 180)."""
    return (deg + 180.0) % 360.0 - 180.0


def longitude_offset(diff: float) -> float:
    """Wrap degrees to (-180, +180]."""
    offset = diff
    while offset <= -180.0:
        offset += 360.0
    while offset > 180.0:
        offset -= 360.0
    return offset


def arcsec_to_deg(arcsec: float) -> float:
    return arcsec / 3600.0


def arcsec_to_rad(arcsec: float) -> float:
    return arcsec * ASEC2RAD


# ------------------------------------------------------------
# Time variable (TT)
# ------------------------------------------------------------

def T_centuries(jd_tt: float) -> float:
    """Julian centuries from J2000.0 in TT."""
    return (jd_tt - J2000_JD) / DAYS_PER_JULIAN_CENTURY


# ------------------------------------------------------------
# Fundamental arguments (Meeus / ELP2000-style; degrees)
# ------------------------------------------------------------

@dataclass(frozen=True)
class FundamentalArgs:
    """Mean elements in degrees, wrapped to [0,360)."""
    Lp_deg: float
    D_deg: float
    M_deg: float
    Mp_deg: float
    F_deg: float
    Omega_deg: float


def fundamental_args(T: float) -> FundamentalArgs:
    """
    Fundamental arguments of the lunar theory:
      L' = 218.3164477 + 481267.88123421 T - 0.0015786 T^2 + T^3/538841 - T^4/65194000
      D  = 297.8501921 + 445267.1114034  T - 0.0018819 T^2 + T^3/545868  - T^4/113065000
      M  = 357.5291092 + 35999.0502909  T - 0.0001536 T^2 + T^3/24490000
      M' = 134.9633964 + 477198.8675055 T + 0.0087414 T^2 + T^3/69699   - T^4/14712000
      F  = 93.2720950  + 483202.0175233 T - 0.0036539 T^2 - T^3/3526000 + T^4/863310000
      Ω  = 125.04452   - 1934.136261 T    + 0.0020708 T^2 + T^3/450000
    """
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2

    Lp = 218.3164477 + 481267.88123421 * T - 0.0015786 * T2 + T3 / 538841.0 - T4 / 65194000.0
    D = 297.8501921 + 445267.1114034 * T - 0.0018819 * T2 + T3 / 545868.0 - T4 / 113065000.0
    M = 357.5291092 + 35999.0502909 * T - 0.0001536 * T2 + T3 / 24490000.0
    Mp = 134.9633964 + 477198.8675055 * T + 0.0087414 * T2 + T3 / 69699.0 - T4 / 14712000.0
    F = 93.2720950 + 483202.0175233 * T - 0.0036539 * T2 - T3 / 3526000.0 + T4 / 863310000.0
    Omega = 125.04452 - 1934.136261 * T + 0.0020708 * T2 + T3 / 450000.0

    return FundamentalArgs(
        Lp_deg=wrap_deg(Lp),
        D_deg=wrap_deg(D),
        M_deg=wrap_deg(M),
        Mp_deg=wrap_deg(Mp),
        F_deg=wrap_deg(F),
        Omega_deg=wrap_deg(Omega),
    )


def eccentricity_factor(T: float) -> float:
    """
    Eccentricity factor E for the Earth's orbit; scales lunar terms
    that depend on the Sun's mean anomaly.
    """
    return 1.0 - 0.002516 * T - 0.0000074 * (T * T)


@dataclass(frozen=True)
class SolarMean:
    L0_deg: float  # mean longitude of Sun
    M_deg: float   # mean anomaly of Sun


def solar_mean_elements(T: float) -> SolarMean:
    T2 = T * T
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T2
    M = 357.52911 + 35999.05029 * T - 0.0001537 * T2
    return SolarMean(L0_deg=wrap_deg(L0), M_deg=wrap_deg(M))


def earth_orbit_eccentricity(T: float) -> float:
    return 0.016708634 - 0.000042037 * T - 0.0000001267 * (T * T)


# ------------------------------------------------------------
# Obliquity
# ------------------------------------------------------------

def mean_obliquity_deg(T: float, model: Literal["iau2000", "iau1980"] = "iau2000") -> float:
    """
    Mean obliquity of the ecliptic (degrees).

    - 'iau2000':
        eps = 84381.406" - 46.836769"T - 0.0001831"T^2 + 0.00200340"T^3
              - 0.000000576"T^4 - 0.0000000434"T^5
    - 'iau1980':
        eps = 23°26'21.448" - 46.8150"T - 0.00059"T^2 + 0.001813"T^3
    """
    if model == "iau2000":
        eps_arcsec = ((((-0.0000000434 * T - 0.000000576) * T + 0.00200340) * T - 0.0001831) * T - 46.836769) * T + 84381.406
        return arcsec_to_deg(eps_arcsec)
    if model == "iau1980":
        eps0 = 23.0 + 26.0 / 60.0 + 21.448 / 3600.0
        return eps0 - arcsec_to_deg(46.8150 * T + 0.00059 * (T * T) - 0.001813 * (T * T * T))
    raise ValueError("model must be one of: iau2000, iau1980")


# ------------------------------------------------------------
# Nutation (IAU 2000B, five leading terms)
# ------------------------------------------------------------

@dataclass(frozen=True)
class Nutation:
    """Nutation in longitude and obliquity (arcseconds)."""
    dpsi: float
    deps: float


# (coefficient of elp, f, d, om) and (ps, pst, pc, ec, ect, es) in 0.1 µas
_NUTATION_TERMS = (
    ((0, 0, 0, 1), (-172064161.0, -174666.0, 33386.0, 92052331.0, 9086.0, 15377.0)),
    ((0, 2, -2, 2), (-13170906.0, -1675.0, -13696.0, 5730336.0, -3015.0, -4587.0)),
    ((0, 2, 0, 2), (-2276413.0, -234.0, 2796.0, 978459.0, -485.0, 1374.0)),
    ((0, 0, 0, 2), (2074554.0, 207.0, -698.0, -897492.0, 470.0, -291.0)),
    ((1, 0, 0, 0), (1475877.0, -3633.0, 11817.0, 73871.0, -184.0, -1924.0)),
)


def nutation_iau2000b(T: float) -> Nutation:
    elp = fmod(1287104.79305 + T * 129596581.0481, ASEC360) * ASEC2RAD
    f = fmod(335779.526232 + T * 1739527262.8478, ASEC360) * ASEC2RAD
    d = fmod(1072260.70369 + T * 1602961601.2090, ASEC360) * ASEC2RAD
    om = fmod(450160.398036 - T * 6962890.5431, ASEC360) * ASEC2RAD

    dp = 0.0
    de = 0.0
    for (k_elp, k_f, k_d, k_om), (ps, pst, pc, ec, ect, es) in _NUTATION_TERMS:
        arg = k_elp * elp + k_f * f + k_d * d + k_om * om
        sarg = math.sin(arg)
        carg = math.cos(arg)
        dp += (ps + pst * T) * sarg + pc * carg
        de += (ec + ect * T) * carg + es * sarg

    # 1e-7 arcsec units, plus the fixed offsets standing in for planetary terms
    return Nutation(dpsi=-0.000135 + dp * 1.0e-7, deps=0.000388 + de * 1.0e-7)


@dataclass(frozen=True)
class EarthTilt:
    """Obliquities (degrees), nutation (arcsec) and equation of equinoxes (seconds of time)."""
    tt: float
    dpsi: float
    deps: float
    ee: float
    mobl: float
    tobl: float


def e_tilt(tt: float) -> EarthTilt:
    """Earth tilt quantities for TT days since J2000."""
    T = tt / DAYS_PER_JULIAN_CENTURY
    nut = nutation_iau2000b(T)
    mobl = mean_obliquity_deg(T)
    tobl = mobl + nut.deps / 3600.0
    ee = nut.dpsi * math.cos(math.radians(mobl)) / 15.0
    return EarthTilt(tt=tt, dpsi=nut.dpsi, deps=nut.deps, ee=ee, mobl=mobl, tobl=tobl)


# ------------------------------------------------------------
# Rotation matrices
# ------------------------------------------------------------

def matmul(A: Matrix, B: Matrix) -> Matrix:
    return tuple(
        tuple(sum(A[i][k] * B[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )


def transpose(A: Matrix) -> Matrix:
    return tuple(tuple(A[j][i] for j in range(3)) for i in range(3))


def apply_matrix(M: Matrix, v) -> Tuple[float, float, float]:
    """Applies a 3x3 matrix to a 3D vector."""
    return (
        M[0][0] * v[0] + M[0][1] * v[1] + M[0][2] * v[2],
        M[1][0] * v[0] + M[1][1] * v[1] + M[1][2] * v[2],
        M[2][0] * v[0] + M[2][1] * v[1] + M[2][2] * v[2],
    )


def R_x(a: float) -> Matrix:
    c, s = math.cos(a), math.sin(a)
    return ((1.0, 0.0, 0.0), (0.0, c, s), (0.0, -s, c))


def R_y(a: float) -> Matrix:
    c, s = math.cos(a), math.sin(a)
    return ((c, 0.0, -s), (0.0, 1.0, 0.0), (s, 0.0, c))


def R_z(a: float) -> Matrix:
    c, s = math.cos(a), math.sin(a)
    return ((c, s, 0.0), (-s, c, 0.0), (0.0, 0.0, 1.0))


def matrix_eq_j2000_to_ecl_date(T: float) -> Matrix:
    """
    Rotation from the Equatorial J2000 frame to the Mean Ecliptic of Date
    (IAU 1976 equatorial precession followed by the obliquity of date).
    """
    zeta = arcsec_to_rad(2306.2181 * T + 0.30188 * (T ** 2) + 0.017998 * (T ** 3))
    z = arcsec_to_rad(2306.2181 * T + 1.09468 * (T ** 2) + 0.018203 * (T ** 3))
    theta = arcsec_to_rad(2004.3109 * T - 0.42665 * (T ** 2) - 0.041833 * (T ** 3))
    eps_date = math.radians(mean_obliquity_deg(T, model="iau2000"))

    eq_precession = matmul(R_z(-z), matmul(R_y(theta), R_z(-zeta)))
    return matmul(R_x(eps_date), eq_precession)


def matrix_ecl_date_to_eq_j2000(T: float) -> Matrix:
    return transpose(matrix_eq_j2000_to_ecl_date(T))


def precession_matrix(tt: float) -> Matrix:
    """
    IAU 2006 precession: mean equator of J2000 -> mean equator of date.
    `tt` is TT days since J2000.
    """
    t = tt / DAYS_PER_JULIAN_CENTURY
    eps0 = 84381.406

    psia = ((((-0.0000000951 * t + 0.000132851) * t - 0.00114045) * t - 1.0790069) * t + 5038.481507) * t
    omegaa = ((((+0.0000003337 * t - 0.000000467) * t - 0.00772503) * t + 0.0512623) * t - 0.025754) * t + eps0
    chia = ((((-0.0000000560 * t + 0.000170663) * t - 0.00121197) * t - 2.3814292) * t + 10.556403) * t

    eps0 *= ASEC2RAD
    psia *= ASEC2RAD
    omegaa *= ASEC2RAD
    chia *= ASEC2RAD

    sa, ca = math.sin(eps0), math.cos(eps0)
    sb, cb = math.sin(-psia), math.cos(-psia)
    sc, cc = math.sin(-omegaa), math.cos(-omegaa)
    sd, cd = math.sin(chia), math.cos(chia)

    xx = cd * cb - sb * sd * cc
    yx = cd * sb * ca + sd * cc * cb * ca - sa * sd * sc
    zx = cd * sb * sa + sd * cc * cb * sa + ca * sd * sc
    xy = -sd * cb - sb * cd * cc
    yy = -sd * sb * ca + cd * cc * cb * ca - sa * cd * sc
    zy = -sd * sb * sa + cd * cc * cb * sa + ca * cd * sc
    xz = sb * sc
    yz = -sc * cb * ca - sa * cc
    zz = -sc * cb * sa + cc * ca

    return ((xx, yx, zx), (xy, yy, zy), (xz, yz, zz))


def nutation_matrix(tt: float) -> Matrix:
    """Mean equator of date -> true equator of date."""
    tilt = e_tilt(tt)
    oblm = math.radians(tilt.mobl)
    oblt = math.radians(tilt.tobl)
    psi = tilt.dpsi * ASEC2RAD

    cobm, sobm = math.cos(oblm), math.sin(oblm)
    cobt, sobt = math.cos(oblt), math.sin(oblt)
    cpsi, spsi = math.cos(psi), math.sin(psi)

    xx = cpsi
    yx = -spsi * cobm
    zx = -spsi * sobm
    xy = spsi * cobt
    yy = cpsi * cobm * cobt + sobm * sobt
    zy = cpsi * sobm * cobt - cobm * sobt
    xz = spsi * sobt
    yz = cpsi * cobm * sobt - sobm * cobt
    zz = cpsi * sobm * sobt + cobm * cobt

    return ((xx, yx, zx), (xy, yy, zy), (xz, yz, zz))


# ------------------------------------------------------------
# Earth rotation
# ------------------------------------------------------------

def earth_rotation_angle(ut: float) -> float:
    """Earth Rotation Angle in degrees, [0,360)."""
    thet1 = 0.7790572732640 + 0.00273781191135448 * ut
    thet3 = fmod(ut, 1.0)
    theta = 360.0 * fmod(thet1 + thet3, 1.0)
    if theta < 0.0:
        theta += 360.0
    return theta


def sidereal_time_hours(ut: float, tt: float) -> float:
    """Greenwich apparent sidereal time in hours, [0,24)."""
    t = tt / DAYS_PER_JULIAN_CENTURY
    eqeq = 15.0 * e_tilt(tt).ee
    theta = earth_rotation_angle(ut)
    st = eqeq + 0.014506 + ((((-0.0000000368 * t - 0.000029956) * t - 0.00000044) * t + 1.3915817) * t + 4612.156534) * t
    gst = fmod(st / 3600.0 + theta, 360.0) / 15.0
    if gst < 0.0:
        gst += 24.0
    return gst
