#ephemeris/jpl.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..constants import KM_PER_AU
from ..core.errors import InvalidBody, ProviderUnavailable
from ..core.time import TimeInstant
from ..core.types import Body, Frame, PositionVector
from .stars import StarCatalog

logger = logging.getLogger(__name__)

# NAIF ids
SSB = 0
SUN = 10
EMB = 3
EARTH = 399
MOON = 301

# segment chains from the solar-system barycenter
_CHAINS: Dict[Body, List[Tuple[int, int]]] = {
    Body.SUN: [(SSB, SUN)],
    Body.EARTH: [(SSB, EMB), (EMB, EARTH)],
    Body.MOON: [(SSB, EMB), (EMB, MOON)],
    Body.MERCURY: [(SSB, 1)],
    Body.VENUS: [(SSB, 2)],
    Body.MARS: [(SSB, 4)],
    Body.JUPITER: [(SSB, 5)],
    Body.SATURN: [(SSB, 6)],
    Body.URANUS: [(SSB, 7)],
    Body.NEPTUNE: [(SSB, 8)],
    Body.PLUTO: [(SSB, 9)],
}


class JplEphemeris:
    """
    Heliocentric states from a JPL DE-series SPK kernel (e.g. de440s.bsp).

    Planets are taken at their system barycenters. TDB is approximated by TT.

    Requires optional deps:
      pip install "ephemsearch[ephemeris]"
    """

    def __init__(self, kernel, stars: Optional[StarCatalog] = None) -> None:
        self.kernel = kernel
        self.stars = stars if stars is not None else StarCatalog()

    @classmethod
    def open(cls, path: str, stars: Optional[StarCatalog] = None) -> "JplEphemeris":
        try:
            from jplephem.spk import SPK
        except ImportError as e:
            raise ProviderUnavailable(
                "JPL kernels not available. Install extras:\n"
                "  pip install \"ephemsearch[ephemeris]\""
            ) from e
        logger.debug("opening SPK kernel %s", path)
        return cls(SPK.open(path), stars=stars)

    def close(self) -> None:
        close = getattr(self.kernel, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "JplEphemeris":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _barycentric(self, body: Body, jd_tdb: float) -> Tuple[np.ndarray, np.ndarray]:
        if body not in _CHAINS:
            raise InvalidBody(f"no kernel segment for {body.value}")
        pos = np.zeros(3)
        vel = np.zeros(3)
        for center, target in _CHAINS[body]:
            try:
                segment = self.kernel[center, target]
            except KeyError as e:
                raise InvalidBody(f"kernel has no segment {center} -> {target} for {body.value}") from e
            p, v = segment.compute_and_differentiate(jd_tdb)
            pos = pos + np.asarray(p, dtype=float)
            vel = vel + np.asarray(v, dtype=float)
        return pos, vel

    def helio_state(self, body: Body, time: TimeInstant) -> PositionVector:
        if body.is_star:
            return self.stars.helio_state(body, time)
        jd_tdb = time.jd_tt
        pos, vel = self._barycentric(body, jd_tdb)
        sun_pos, sun_vel = self._barycentric(Body.SUN, jd_tdb)
        # km, km/day -> AU, AU/day
        pos = (pos - sun_pos) / KM_PER_AU
        vel = (vel - sun_vel) / KM_PER_AU
        return PositionVector.from_array(pos, time, Frame.EQJ, vel)
