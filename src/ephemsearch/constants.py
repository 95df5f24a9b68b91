"""Physical and astronomical constants (read-only, module level)."""

from __future__ import annotations

import math

# ------------------------------------------------------------
# Time
# ------------------------------------------------------------

J2000_JD = 2451545.0            # JD of 2000-01-01 12:00 (the epoch of TimeInstant.ut)
SECONDS_PER_DAY = 86400.0
DAYS_PER_JULIAN_CENTURY = 36525.0
DAYS_PER_TROPICAL_YEAR = 365.24217
MEAN_SYNODIC_MONTH = 29.530588  # days

# ------------------------------------------------------------
# Angles
# ------------------------------------------------------------

DEG2RAD = math.pi / 180.0
RAD2DEG = 180.0 / math.pi
HOUR2RAD = math.pi / 12.0
RAD2HOUR = 12.0 / math.pi
ASEC360 = 1296000.0
ASEC2RAD = 4.848136811095359935899141e-6

# ------------------------------------------------------------
# Lengths and speeds
# ------------------------------------------------------------

KM_PER_AU = 1.4959787069098932e8
C_AUDAY = 173.1446326846693     # speed of light in AU/day
AU_PER_PARSEC = 206264.806247
AU_PER_LY = 63241.07708807546

# ------------------------------------------------------------
# Earth
# ------------------------------------------------------------

EARTH_FLATTENING = 0.996647180302104
EARTH_FLATTENING_SQUARED = EARTH_FLATTENING * EARTH_FLATTENING
EARTH_EQUATORIAL_RADIUS_KM = 6378.1366
EARTH_POLAR_RADIUS_KM = EARTH_EQUATORIAL_RADIUS_KM * EARTH_FLATTENING
EARTH_MEAN_RADIUS_KM = 6371.0
EARTH_ATMOSPHERE_KM = 88.0
EARTH_ECLIPSE_RADIUS_KM = EARTH_MEAN_RADIUS_KM + EARTH_ATMOSPHERE_KM
ANGVEL = 7.2921150e-5           # Earth rotation, rad/s

# J2000 mean obliquity of the ecliptic (degrees)
OBLIQUITY_J2000_DEG = 23.4392794444

# ------------------------------------------------------------
# Sun and Moon
# ------------------------------------------------------------

SUN_RADIUS_KM = 695700.0
SUN_RADIUS_AU = SUN_RADIUS_KM / KM_PER_AU
SUN_MAG_1AU = -0.17 - 5.0 * math.log10(AU_PER_PARSEC)

MOON_EQUATORIAL_RADIUS_KM = 1738.1
MOON_MEAN_RADIUS_KM = 1737.4
MOON_POLAR_RADIUS_KM = 1736.0
MOON_EQUATORIAL_RADIUS_AU = MOON_EQUATORIAL_RADIUS_KM / KM_PER_AU
MOON_POLAR_RADIUS_AU = MOON_POLAR_RADIUS_KM / KM_PER_AU
MOON_MEAN_DISTANCE_KM = 385000.6

# Conventional refraction at the horizon used for rise/set (degrees)
REFRACTION_NEAR_HORIZON = 34.0 / 60.0

# Mean orbital periods of the planets (days)
ORBITAL_PERIOD_DAYS = {
    "MERCURY": 87.969,
    "VENUS": 224.701,
    "EARTH": 365.256,
    "MARS": 686.980,
    "JUPITER": 4332.589,
    "SATURN": 10759.22,
    "URANUS": 30685.4,
    "NEPTUNE": 60189.0,
    "PLUTO": 90560.0,
}
