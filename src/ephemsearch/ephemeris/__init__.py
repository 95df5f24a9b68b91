"""Orbital model providers.

A provider answers one question: where is a body, relative to the Sun, at a
given instant. Positions are in AU and velocities in AU/day, in the
equatorial J2000 frame.

Two providers ship with the package:

- AnalyticEphemeris (default): truncated solar/lunar series and Keplerian
  planetary elements; no extra dependencies.
- JplEphemeris: reads a JPL DE-series SPK kernel. Install with:
    pip install "ephemsearch[ephemeris]"
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..core.errors import ProviderUnavailable
from ..core.time import TimeInstant
from ..core.types import Body, PositionVector
from .stars import StarCatalog


@runtime_checkable
class OrbitalModel(Protocol):
    stars: StarCatalog

    def helio_state(self, body: Body, time: TimeInstant) -> PositionVector:
        """Heliocentric position (and velocity) of `body` at `time`, frame EQJ."""
        ...


_default: Optional[OrbitalModel] = None


def default_ephemeris() -> OrbitalModel:
    """The process-wide analytic provider, created on first use."""
    global _default
    if _default is None:
        from .analytic import AnalyticEphemeris
        _default = AnalyticEphemeris()
    return _default


def resolve(ephemeris: Optional[OrbitalModel]) -> OrbitalModel:
    return default_ephemeris() if ephemeris is None else ephemeris


def require_ephemeris() -> None:
    """Raise a clear error if the JPL kernel extras aren't installed."""
    try:
        import jplephem  # noqa: F401
    except ImportError as e:
        raise ProviderUnavailable('JPL kernel support requires: pip install "ephemsearch[ephemeris]"') from e


__all__ = [
    "OrbitalModel",
    "StarCatalog",
    "default_ephemeris",
    "resolve",
    "require_ephemeris",
]
