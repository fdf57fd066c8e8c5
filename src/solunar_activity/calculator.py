"""Solunar engine: astronomy -> periods -> slice scores -> daily rating."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, timedelta

import pytz

from .astronomy.base import AstronomyProvider
from .astronomy.transits import find_lunar_transits
from .models import (
    ActivityBreakdown,
    ActivitySample,
    AstronomicalSummary,
    HorizontalPosition,
    Location,
    SolunarInput,
    SolunarResult,
)
from .scoring.activity import ActivityScorer
from .scoring.periods import build_periods
from .scoring.rating import average_score, classify_day
from .timezones import local_to_utc, resolve_timezone, to_local

MINUTES_PER_DAY = 24 * 60


def slice_instants(
    day: date, slice_minutes: int, tz: pytz.BaseTzInfo
) -> Iterator[tuple[int, int, datetime]]:
    """Yield ``(hour, minute, utc_instant)`` for each slice of the local day.

    Slices are evaluated at their midpoint, so hourly slices use HH:30.
    """
    midpoint = timedelta(minutes=slice_minutes / 2)
    for start_minute in range(0, MINUTES_PER_DAY, slice_minutes):
        hour, minute = divmod(start_minute, 60)
        yield hour, minute, local_to_utc(day, hour, minute, tz, offset=midpoint)


class SolunarCalculator:
    """Runs one date/location calculation against an astronomy provider."""

    def __init__(self, provider: AstronomyProvider, logger: logging.Logger | None = None) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger("solunar_activity.calculator")

    def calculate(self, request: SolunarInput) -> SolunarResult:
        """Build the full result for ``request``; absent events just drop their period."""
        tz = resolve_timezone(request.timezone)
        lat, lon, day = request.latitude, request.longitude, request.target_date

        sunrise, sunset = self.provider.sun_times(lat, lon, day)
        moonrise, moonset = self.provider.moon_times(lat, lon, day)
        moon_phase = self.provider.moon_phase(lat, lon, day)
        culmination = self.provider.sun_culmination(lat, lon, day)
        solar_noon = culmination.instant if culmination is not None else None
        upper, lower = find_lunar_transits(
            lambda instant: self.provider.moon_altitude(lat, lon, instant), day
        )
        upper_position = self._moon_position(lat, lon, upper)
        lower_position = self._moon_position(lat, lon, lower)
        major, minor = build_periods(
            moonrise=moonrise,
            moonset=moonset,
            upper_transit=upper,
            lower_transit=lower,
        )

        scorer = ActivityScorer(
            major_periods=major,
            minor_periods=minor,
            moon_phase=moon_phase,
            sunrise=sunrise,
            sunset=sunset,
            weather_observations=request.weather_observations,
            tide_events=request.tide_events,
            weights=request.weights,
        )

        samples: list[ActivitySample] = []
        breakdown: list[ActivityBreakdown] = []
        for hour, minute, instant in slice_instants(day, request.slice_minutes, tz):
            slice_score = scorer.score(instant)
            samples.append(
                ActivitySample(
                    hour=hour,
                    minute=minute,
                    local_time=instant.astimezone(tz),
                    utc_time=instant,
                    score=slice_score.total,
                )
            )
            breakdown.append(
                ActivityBreakdown(
                    hour=hour,
                    minute=minute,
                    solunar_score=slice_score.solunar_score,
                    overlap_bonus=slice_score.overlap_bonus,
                    weather_modifier=slice_score.weather_modifier,
                    tide_modifier=slice_score.tide_modifier,
                    total_score=slice_score.total,
                )
            )

        scores = [sample.score for sample in samples]
        with_modifiers = scorer.has_weather or scorer.has_tide
        result = SolunarResult(
            target_date=day,
            location=Location(latitude=lat, longitude=lon),
            timezone=tz.zone,
            slice_minutes=request.slice_minutes,
            major_periods=[period.localized(tz) for period in major],
            minor_periods=[period.localized(tz) for period in minor],
            activity=samples,
            breakdown=breakdown if with_modifiers else None,
            moon_phase=moon_phase,
            astronomy=AstronomicalSummary(
                sunrise_utc=sunrise,
                sunrise_local=to_local(sunrise, tz),
                sunset_utc=sunset,
                sunset_local=to_local(sunset, tz),
                moonrise_utc=moonrise,
                moonrise_local=to_local(moonrise, tz),
                moonset_utc=moonset,
                moonset_local=to_local(moonset, tz),
                upper_transit_utc=upper,
                upper_transit_local=to_local(upper, tz),
                upper_transit_altitude=_rounded(upper_position, "altitude"),
                upper_transit_azimuth=_rounded(upper_position, "azimuth"),
                lower_transit_utc=lower,
                lower_transit_local=to_local(lower, tz),
                lower_transit_altitude=_rounded(lower_position, "altitude"),
                sun_culmination_utc=solar_noon,
                sun_culmination_local=to_local(solar_noon, tz),
                sun_culmination_altitude=_rounded(culmination, "altitude"),
                sun_culmination_azimuth=_rounded(culmination, "azimuth"),
                moon_distance_km=moon_phase.distance_km,
            ),
            rating=classify_day(scores),
            average_score=round(average_score(scores), 2),
            has_weather_modifiers=scorer.has_weather,
            has_tide_modifiers=scorer.has_tide,
        )
        self.logger.info(
            "Solunar calculation complete: date=%s tz=%s rating=%s avg=%.2f major=%d minor=%d",
            day.isoformat(),
            result.timezone,
            result.rating,
            result.average_score,
            len(major),
            len(minor),
        )
        return result

    def _moon_position(
        self, lat: float, lon: float, instant: datetime | None
    ) -> HorizontalPosition | None:
        if instant is None:
            return None
        return self.provider.moon_position(lat, lon, instant)


def _rounded(position: HorizontalPosition | None, field: str) -> float | None:
    if position is None:
        return None
    return round(getattr(position, field), 3)
