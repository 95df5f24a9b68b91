"""
ephemsearch.ephemeris.analytic

Dependency-free orbital model:

- Earth: negated geocentric Sun from the truncated solar series.
- Moon: Earth plus the geocentric lunar series (longitude, latitude, distance).
- Planets: JPL "Keplerian elements for approximate positions of the major
  planets" (E. M. Standish), valid 1800-2050 AD, usable well beyond.

Velocities are central differences of the position over ±0.01 day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..constants import DAYS_PER_JULIAN_CENTURY, OBLIQUITY_J2000_DEG
from ..core.errors import InvalidBody
from ..core.time import TimeInstant
from ..core.types import Body, Frame, PositionVector
from ..reference.lunar import geocentric_moon_j2000
from ..reference.solar import geocentric_sun_j2000
from .stars import StarCatalog

Vec = Tuple[float, float, float]

_DIFF_STEP_DAYS = 0.01


@dataclass(frozen=True)
class KeplerElements:
    """Element values at J2000 and their rates per Julian century."""
    a: Tuple[float, float]          # AU
    e: Tuple[float, float]
    incl: Tuple[float, float]       # deg
    mean_lon: Tuple[float, float]   # deg
    peri_lon: Tuple[float, float]   # deg
    node_lon: Tuple[float, float]   # deg


PLANET_ELEMENTS: Dict[Body, KeplerElements] = {
    Body.MERCURY: KeplerElements(
        (0.38709927, 0.00000037), (0.20563593, 0.00001906), (7.00497902, -0.00594749),
        (252.25032350, 149472.67411175), (77.45779628, 0.16047689), (48.33076593, -0.12534081),
    ),
    Body.VENUS: KeplerElements(
        (0.72333566, 0.00000390), (0.00677672, -0.00004107), (3.39467605, -0.00078890),
        (181.97909950, 58517.81538729), (131.60246718, 0.00268329), (76.67984255, -0.27769418),
    ),
    Body.MARS: KeplerElements(
        (1.52371034, 0.00001847), (0.09339410, 0.00007882), (1.84969142, -0.00813131),
        (-4.55343205, 19140.30268499), (-23.94362959, 0.44441088), (49.55953891, -0.29257343),
    ),
    Body.JUPITER: KeplerElements(
        (5.20288700, -0.00011607), (0.04838624, -0.00013253), (1.30439695, -0.00183714),
        (34.39644051, 3034.74612775), (14.72847983, 0.21252668), (100.47390909, 0.20469106),
    ),
    Body.SATURN: KeplerElements(
        (9.53667594, -0.00125060), (0.05386179, -0.00050991), (2.48599187, 0.00193609),
        (49.95424423, 1222.49362201), (92.59887831, -0.41897216), (113.66242448, -0.28867794),
    ),
    Body.URANUS: KeplerElements(
        (19.18916464, -0.00196176), (0.04725744, -0.00004397), (0.77263783, -0.00242939),
        (313.23810451, 428.48202785), (170.95427630, 0.40805281), (74.01692503, 0.04240589),
    ),
    Body.NEPTUNE: KeplerElements(
        (30.06992276, 0.00026291), (0.00859048, 0.00005105), (1.77004347, 0.00035372),
        (-55.12002969, 218.45945325), (44.96476227, -0.32241464), (131.78422574, -0.00508664),
    ),
    Body.PLUTO: KeplerElements(
        (39.48211675, -0.00031596), (0.24882730, 0.00005170), (17.14001206, 0.00004818),
        (238.92903833, 145.20780515), (224.06891629, -0.04062942), (110.30393684, -0.01183482),
    ),
}


def solve_kepler(M: float, e: float, tol: float = 1.0e-12) -> float:
    """Eccentric anomaly (rad) for mean anomaly M (rad), Newton iteration."""
    E = M + e * math.sin(M)
    for _ in range(30):
        dE = (E - e * math.sin(E) - M) / (1.0 - e * math.cos(E))
        E -= dE
        if abs(dE) < tol:
            break
    return E


def kepler_position(elements: KeplerElements, T: float) -> Vec:
    """Heliocentric equatorial J2000 position (AU), T Julian centuries from J2000."""
    a = elements.a[0] + elements.a[1] * T
    e = elements.e[0] + elements.e[1] * T
    incl = math.radians(elements.incl[0] + elements.incl[1] * T)
    L = elements.mean_lon[0] + elements.mean_lon[1] * T
    varpi = elements.peri_lon[0] + elements.peri_lon[1] * T
    node = elements.node_lon[0] + elements.node_lon[1] * T

    omega = math.radians(varpi - node)
    M = math.radians(math.remainder(L - varpi, 360.0))
    node = math.radians(node)

    E = solve_kepler(M, e)
    xp = a * (math.cos(E) - e)
    yp = a * math.sqrt(1.0 - e * e) * math.sin(E)

    co, so = math.cos(omega), math.sin(omega)
    cn, sn = math.cos(node), math.sin(node)
    ci, si = math.cos(incl), math.sin(incl)

    x = (co * cn - so * sn * ci) * xp + (-so * cn - co * sn * ci) * yp
    y = (co * sn + so * cn * ci) * xp + (-so * sn + co * cn * ci) * yp
    z = (so * si) * xp + (co * si) * yp

    eps = math.radians(OBLIQUITY_J2000_DEG)
    ce, se = math.cos(eps), math.sin(eps)
    return (x, ce * y - se * z, se * y + ce * z)


class AnalyticEphemeris:
    """Series/Kepler orbital model. Stateless apart from the star catalog."""

    def __init__(self, stars: Optional[StarCatalog] = None) -> None:
        self.stars = stars if stars is not None else StarCatalog()

    def _position(self, body: Body, tt: float) -> Vec:
        T = tt / DAYS_PER_JULIAN_CENTURY
        if body is Body.SUN:
            return (0.0, 0.0, 0.0)
        if body is Body.EARTH:
            s = geocentric_sun_j2000(T)
            return (-s[0], -s[1], -s[2])
        if body is Body.MOON:
            s = geocentric_sun_j2000(T)
            m = geocentric_moon_j2000(T)
            return (m[0] - s[0], m[1] - s[1], m[2] - s[2])
        if body in PLANET_ELEMENTS:
            return kepler_position(PLANET_ELEMENTS[body], T)
        raise InvalidBody(f"no analytic model for {body.value}")

    def helio_state(self, body: Body, time: TimeInstant) -> PositionVector:
        if body.is_star:
            return self.stars.helio_state(body, time)
        tt = time.tt
        pos = self._position(body, tt)
        p1 = self._position(body, tt - _DIFF_STEP_DAYS)
        p2 = self._position(body, tt + _DIFF_STEP_DAYS)
        vel = tuple((b - a) / (2.0 * _DIFF_STEP_DAYS) for a, b in zip(p1, p2))
        return PositionVector(pos[0], pos[1], pos[2], time, Frame.EQJ, vel)
