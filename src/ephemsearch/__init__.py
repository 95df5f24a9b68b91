"""ephemsearch public API.

Keep this surface small: users should mostly interact with names re-exported here.
"""

from .core.errors import (
    EphemSearchError,
    InvalidBody,
    InvalidCalendarValue,
    InvalidObserver,
    ProviderUnavailable,
    SearchFailure,
    UnknownBody,
)
from .core.time import CalendarDateTime, TimeInstant
from .core.types import (
    Body,
    Direction,
    EclipticCoordinates,
    EquatorialCoordinates,
    Frame,
    HorizontalCoordinates,
    MoonQuarterEvent,
    ObserverLocation,
    PositionVector,
    Refraction,
    SearchBracket,
)
from .ephemeris import OrbitalModel, StarCatalog, default_ephemeris
from .events import (
    Apsis,
    ApsisKind,
    EclipseEvent,
    EclipseKind,
    ElongationInfo,
    GlobalSolarEclipseInfo,
    IlluminationInfo,
    LocalSolarEclipseInfo,
    LunarEclipseInfo,
    SeasonInfo,
    TransitInfo,
    angle_from_sun,
    elongation,
    illumination,
    moon_phase,
    moon_quarters,
    next_global_solar_eclipse,
    next_local_solar_eclipse,
    next_lunar_apsis,
    next_lunar_eclipse,
    next_moon_quarter,
    next_planet_apsis,
    next_transit,
    search_altitude,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
    search_lunar_apsis,
    search_lunar_eclipse,
    search_max_elongation,
    search_moon_phase,
    search_moon_quarter,
    search_peak_magnitude,
    search_planet_apsis,
    search_relative_longitude,
    search_rise_set,
    search_sun_longitude,
    search_transit,
    seasons,
    sun_position,
    sunrise,
    sunset,
    synodic_period,
)
from .pipeline.frames import sidereal_time, to_ecliptic, to_equatorial
from .pipeline.observer import horizon, observer_vector, to_horizontal, topocentric_equator
from .pipeline.refraction import refraction_angle
from .pipeline.vectors import LightTimeResult, angle_between, apply_aberration, geo_vector, geocentric_vector, helio_vector
from .search.engine import SearchResult, SearchStatus, search

__version__ = "0.1.0"

__all__ = [
    "Apsis",
    "ApsisKind",
    "Body",
    "CalendarDateTime",
    "Direction",
    "EclipseEvent",
    "EclipseKind",
    "EclipticCoordinates",
    "ElongationInfo",
    "EphemSearchError",
    "EquatorialCoordinates",
    "Frame",
    "GlobalSolarEclipseInfo",
    "HorizontalCoordinates",
    "IlluminationInfo",
    "InvalidBody",
    "InvalidCalendarValue",
    "InvalidObserver",
    "LightTimeResult",
    "LocalSolarEclipseInfo",
    "LunarEclipseInfo",
    "MoonQuarterEvent",
    "ObserverLocation",
    "OrbitalModel",
    "PositionVector",
    "ProviderUnavailable",
    "Refraction",
    "SearchBracket",
    "SearchFailure",
    "SearchResult",
    "SearchStatus",
    "SeasonInfo",
    "StarCatalog",
    "TimeInstant",
    "TransitInfo",
    "UnknownBody",
    "angle_between",
    "angle_from_sun",
    "apply_aberration",
    "default_ephemeris",
    "elongation",
    "geo_vector",
    "geocentric_vector",
    "helio_vector",
    "horizon",
    "illumination",
    "moon_phase",
    "moon_quarters",
    "next_global_solar_eclipse",
    "next_local_solar_eclipse",
    "next_lunar_apsis",
    "next_lunar_eclipse",
    "next_moon_quarter",
    "next_planet_apsis",
    "next_transit",
    "observer_vector",
    "refraction_angle",
    "search",
    "search_altitude",
    "search_global_solar_eclipse",
    "search_local_solar_eclipse",
    "search_lunar_apsis",
    "search_lunar_eclipse",
    "search_max_elongation",
    "search_moon_phase",
    "search_moon_quarter",
    "search_peak_magnitude",
    "search_planet_apsis",
    "search_relative_longitude",
    "search_rise_set",
    "search_sun_longitude",
    "search_transit",
    "seasons",
    "sidereal_time",
    "sun_position",
    "sunrise",
    "sunset",
    "synodic_period",
    "to_ecliptic",
    "to_equatorial",
    "to_horizontal",
    "topocentric_equator",
]
