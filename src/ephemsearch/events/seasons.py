from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.errors import SearchFailure
from ..core.time import TimeInstant
from ..core.types import Body, EclipticCoordinates
from ..ephemeris import OrbitalModel, resolve
from ..pipeline.frames import to_ecliptic
from ..pipeline.vectors import geo_vector
from ..reference.astro_args import longitude_offset
from ..search.engine import search

SUN_LONGITUDE_TOLERANCE_SECONDS = 0.01
SEASON_WINDOW_DAYS = 20.0


@dataclass(frozen=True)
class SeasonInfo:
    """Equinox and solstice instants of one calendar year."""
    mar_equinox: TimeInstant
    jun_solstice: TimeInstant
    sep_equinox: TimeInstant
    dec_solstice: TimeInstant


def sun_position(time: TimeInstant, ephemeris: Optional[OrbitalModel] = None) -> EclipticCoordinates:
    """Apparent geocentric Sun, true ecliptic and equinox of date."""
    return to_ecliptic(geo_vector(Body.SUN, time, True, ephemeris))


def search_sun_longitude(
    target: float,
    start: TimeInstant,
    limit_days: float,
    ephemeris: Optional[OrbitalModel] = None,
) -> Optional[TimeInstant]:
    """
    When the Sun's apparent longitude reaches `target` degrees, looking
    `limit_days` after `start`. None if it does not happen in the window.
    """
    eph = resolve(ephemeris)

    def f(t: TimeInstant) -> float:
        return longitude_offset(sun_position(t, eph).elon - target)

    result = search(f, start, start.add_days(limit_days), SUN_LONGITUDE_TOLERANCE_SECONDS)
    return result.time if result.found else None


def _find_season(target: float, year: int, month: int, ephemeris: Optional[OrbitalModel]) -> TimeInstant:
    start = TimeInstant.from_calendar(year, month, 10)
    time = search_sun_longitude(target, start, SEASON_WINDOW_DAYS, ephemeris)
    if time is None:
        raise SearchFailure(f"cannot find solar longitude {target} in {year:04d}-{month:02d}")
    return time


def seasons(year: int, ephemeris: Optional[OrbitalModel] = None) -> SeasonInfo:
    """Equinoxes and solstices of a calendar year (UTC)."""
    eph = resolve(ephemeris)
    return SeasonInfo(
        mar_equinox=_find_season(0.0, year, 3, eph),
        jun_solstice=_find_season(90.0, year, 6, eph),
        sep_equinox=_find_season(180.0, year, 9, eph),
        dec_solstice=_find_season(270.0, year, 12, eph),
    )
