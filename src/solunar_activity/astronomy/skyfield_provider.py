"""Skyfield-backed astronomy provider (JPL DE ephemeris)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, time
from pathlib import Path
from typing import Any

from skyfield import almanac
from skyfield.api import Loader, wgs84

from ..exceptions import AstronomyProviderError
from ..models import HorizontalPosition, MoonPhase, MoonPhaseInfo, ensure_utc
from .base import AstronomyProvider
from .transits import utc_day_bounds


class SkyfieldAstronomyProvider(AstronomyProvider):
    """Computes sun/moon events with skyfield.

    The ephemeris file is read from ``ephemeris_dir``; skyfield's loader
    downloads it there on first use when it is missing.
    """

    provider_name = "skyfield"

    def __init__(
        self,
        ephemeris_dir: Path,
        ephemeris_file: str = "de421.bsp",
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("solunar_activity.astronomy.skyfield")
        loader = Loader(str(ephemeris_dir))
        try:
            self._eph = loader(ephemeris_file)
            self._ts = loader.timescale()
        except (OSError, ValueError, RuntimeError) as exc:
            raise AstronomyProviderError(
                f"Failed loading ephemeris {ephemeris_file} from {ephemeris_dir}: {exc}"
            ) from exc
        self._earth = self._eph["earth"]
        self._sun = self._eph["sun"]
        self._moon = self._eph["moon"]
        self.logger.debug("Loaded ephemeris %s from %s", ephemeris_file, ephemeris_dir)

    def sun_times(
        self, lat: float, lon: float, day: date
    ) -> tuple[datetime | None, datetime | None]:
        return (
            self._first_event(almanac.find_risings, self._sun, lat, lon, day),
            self._first_event(almanac.find_settings, self._sun, lat, lon, day),
        )

    def moon_times(
        self, lat: float, lon: float, day: date
    ) -> tuple[datetime | None, datetime | None]:
        return (
            self._first_event(almanac.find_risings, self._moon, lat, lon, day),
            self._first_event(almanac.find_settings, self._moon, lat, lon, day),
        )

    def sun_culmination(self, lat: float, lon: float, day: date) -> HorizontalPosition | None:
        start, end = utc_day_bounds(day)
        transits = almanac.meridian_transits(
            self._eph, self._sun, wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon)
        )
        times, kinds = almanac.find_discrete(
            self._ts.from_datetime(start), self._ts.from_datetime(end), transits
        )
        for t, kind in zip(times, kinds):
            # 1 is the upper meridian transit, 0 the lower one.
            if kind == 1:
                return self._position(self._sun, lat, lon, t)
        return None

    def moon_altitude(self, lat: float, lon: float, instant: datetime) -> float:
        return self.moon_position(lat, lon, instant).altitude

    def moon_position(self, lat: float, lon: float, instant: datetime) -> HorizontalPosition:
        return self._position(self._moon, lat, lon, self._ts.from_datetime(ensure_utc(instant)))

    def moon_phase(self, lat: float, lon: float, day: date) -> MoonPhaseInfo:
        # Noon UTC stands in for the whole day.
        t = self._ts.from_datetime(datetime.combine(day, time(12, 0), tzinfo=UTC))
        angle = float(almanac.moon_phase(self._eph, t).degrees)
        illumination = float(almanac.fraction_illuminated(self._eph, "moon", t))
        distance_km = float(self._earth.at(t).observe(self._moon).distance().km)
        return MoonPhaseInfo(
            phase=MoonPhase.from_angle(angle),
            illumination=min(max(illumination, 0.0), 1.0),
            phase_angle=angle,
            distance_km=distance_km,
        )

    def _observer(self, lat: float, lon: float) -> Any:
        return self._earth + wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon)

    def _position(self, body: Any, lat: float, lon: float, t: Any) -> HorizontalPosition:
        alt, az, _distance = self._observer(lat, lon).at(t).observe(body).apparent().altaz()
        return HorizontalPosition(
            instant=t.utc_datetime(),
            altitude=float(alt.degrees),
            azimuth=float(az.degrees) % 360.0,
        )

    def _first_event(
        self,
        finder: Callable[..., Any],
        body: Any,
        lat: float,
        lon: float,
        day: date,
    ) -> datetime | None:
        start, end = utc_day_bounds(day)
        times, crossed = finder(
            self._observer(lat, lon),
            body,
            self._ts.from_datetime(start),
            self._ts.from_datetime(end),
        )
        for t, ok in zip(times, crossed):
            # False flags mark polar days where the body only grazes the horizon.
            if ok:
                return ensure_utc(t.utc_datetime())
        return None
