from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

from ..constants import AU_PER_LY, HOUR2RAD
from ..core.errors import InvalidBody, UnknownBody
from ..core.time import TimeInstant
from ..core.types import Body, Frame, PositionVector


@dataclass(frozen=True)
class StarDefinition:
    ra: float          # hours, J2000
    dec: float         # degrees, J2000
    distance_ly: float

    def vector(self, time: TimeInstant) -> PositionVector:
        dist = self.distance_ly * AU_PER_LY
        ra = self.ra * HOUR2RAD
        dec = math.radians(self.dec)
        cd = math.cos(dec)
        return PositionVector(
            dist * cd * math.cos(ra),
            dist * cd * math.sin(ra),
            dist * math.sin(dec),
            time,
            Frame.EQJ,
            (0.0, 0.0, 0.0),
        )


class StarCatalog:
    """
    User-defined fixed stars occupying the STAR1..STAR8 slots.

    Stars are placed at their J2000 coordinates with no proper motion.
    """

    def __init__(self) -> None:
        self._stars: Dict[Body, StarDefinition] = {}

    def define(self, body: Body, ra: float, dec: float, distance_ly: float) -> None:
        if not body.is_star:
            raise InvalidBody(f"{body.value} is not a user-defined star slot")
        if not (0.0 <= ra < 24.0):
            raise ValueError(f"right ascension {ra} is out of range [0, 24)")
        if not (-90.0 <= dec <= 90.0):
            raise ValueError(f"declination {dec} is out of range -90..+90")
        if not (distance_ly >= 1.0):
            raise ValueError(f"distance {distance_ly} light-years must be at least 1")
        self._stars[body] = StarDefinition(ra, dec, distance_ly)

    def undefine(self, body: Body) -> None:
        self._stars.pop(body, None)

    def get(self, body: Body) -> StarDefinition:
        if body not in self._stars:
            raise UnknownBody(f"{body.value} has not been defined. Defined: {self.list()}")
        return self._stars[body]

    def list(self) -> List[str]:
        return sorted(b.value for b in self._stars)

    def __contains__(self, body: Body) -> bool:
        return body in self._stars

    def helio_state(self, body: Body, time: TimeInstant) -> PositionVector:
        return self.get(body).vector(time)
