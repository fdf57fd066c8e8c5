"""Astronomical primitives: provider interface, skyfield backend and transit search."""

from .base import AstronomyProvider
from .skyfield_provider import SkyfieldAstronomyProvider
from .transits import find_lunar_transits, utc_day_bounds

__all__ = [
    "AstronomyProvider",
    "SkyfieldAstronomyProvider",
    "find_lunar_transits",
    "utc_day_bounds",
]
