"""Event searches built on the generic root finder."""

from .apsis import Apsis, ApsisKind, next_lunar_apsis, next_planet_apsis, search_lunar_apsis, search_planet_apsis
from .conjunction import (
    ElongationInfo,
    angle_from_sun,
    elongation,
    search_max_elongation,
    search_relative_longitude,
    synodic_period,
)
from .eclipse import EclipseKind, LunarEclipseInfo, next_lunar_eclipse, search_lunar_eclipse
from .illumination import IlluminationInfo, illumination, search_peak_magnitude
from .moonphase import moon_phase, moon_quarters, next_moon_quarter, search_moon_phase, search_moon_quarter
from .riseset import search_altitude, search_rise_set, sunrise, sunset
from .seasons import SeasonInfo, search_sun_longitude, seasons, sun_position
from .solar_eclipse import (
    EclipseEvent,
    GlobalSolarEclipseInfo,
    LocalSolarEclipseInfo,
    next_global_solar_eclipse,
    next_local_solar_eclipse,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
)
from .transit import TransitInfo, next_transit, search_transit

__all__ = [
    "Apsis",
    "ApsisKind",
    "EclipseEvent",
    "ElongationInfo",
    "EclipseKind",
    "GlobalSolarEclipseInfo",
    "IlluminationInfo",
    "LocalSolarEclipseInfo",
    "LunarEclipseInfo",
    "SeasonInfo",
    "TransitInfo",
    "angle_from_sun",
    "elongation",
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
    "sun_position",
    "sunrise",
    "sunset",
    "synodic_period",
]
