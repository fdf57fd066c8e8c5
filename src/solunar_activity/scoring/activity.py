"""Per-slice activity scoring.

A slice score blends, in order: the strongest Gaussian period contribution,
the moon-phase and time-of-day multipliers, a flat bonus when a major and a
minor window overlap, and the additive weather/tide modifiers. The sum is
clamped to [0, 100] and rounded.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta

from pydantic import BaseModel

from ..models import (
    ModifierWeights,
    MoonPhase,
    MoonPhaseInfo,
    Period,
    TideEvent,
    WeatherObservation,
)
from .tide import TideModifierCalculator
from .weather import WeatherModifierCalculator

MAJOR_AMPLITUDE = 100.0
MAJOR_WINDOW_MINUTES = 90.0
MAJOR_SPREAD = 800.0
MINOR_AMPLITUDE = 70.0
MINOR_WINDOW_MINUTES = 45.0
MINOR_SPREAD = 200.0
OVERLAP_BONUS = 18.0

PHASE_MULTIPLIERS: dict[MoonPhase, float] = {
    MoonPhase.NEW_MOON: 1.05,
    MoonPhase.FULL_MOON: 1.10,
    MoonPhase.FIRST_QUARTER: 1.00,
    MoonPhase.LAST_QUARTER: 0.95,
}

TWILIGHT_WINDOW = timedelta(minutes=30)
AFTER_EVENT_WINDOW = timedelta(hours=2)
MIDDAY_WINDOW = timedelta(minutes=60)
ONE_DAY = timedelta(days=1)


class SliceScore(BaseModel):
    """Score components for one evaluation instant."""

    instant: datetime
    solunar_score: float
    overlap_bonus: float = 0.0
    weather_modifier: float = 0.0
    tide_modifier: float = 0.0
    total: int


def period_contribution(period: Period, instant: datetime) -> float:
    """Gaussian contribution of one period, 0 outside its window."""
    distance = abs((instant - period.center).total_seconds()) / 60.0
    if period.is_major:
        window, amplitude, spread = MAJOR_WINDOW_MINUTES, MAJOR_AMPLITUDE, MAJOR_SPREAD
    else:
        window, amplitude, spread = MINOR_WINDOW_MINUTES, MINOR_AMPLITUDE, MINOR_SPREAD
    if distance > window:
        return 0.0
    return amplitude * math.exp(-(distance**2) / spread)


def base_solunar_score(instant: datetime, periods: Sequence[Period]) -> float:
    """Strongest single contribution; overlapping periods do not stack here."""
    return max((period_contribution(period, instant) for period in periods), default=0.0)


def phase_multiplier(phase: MoonPhase) -> float:
    return PHASE_MULTIPLIERS.get(phase, 1.0)


def day_time_multiplier(
    instant: datetime, sunrise: datetime | None, sunset: datetime | None
) -> float:
    """Twilight boost, post-twilight boost, midday dip, then plain day/night.

    Far from Greenwich a UTC day can hold the evening sunset before the next
    morning's sunrise. The daylight span then runs across the day boundary, so
    it is checked both ending at ``sunset`` and starting at ``sunrise``.
    """
    if sunrise is None or sunset is None:
        return 1.0

    if abs(instant - sunrise) <= TWILIGHT_WINDOW or abs(instant - sunset) <= TWILIGHT_WINDOW:
        return 1.10
    if (
        sunrise <= instant <= sunrise + AFTER_EVENT_WINDOW
        or sunset <= instant <= sunset + AFTER_EVENT_WINDOW
    ):
        return 1.05

    spans = daylight_spans(sunrise, sunset)
    for rise, set_ in spans:
        if abs(instant - (rise + (set_ - rise) / 2)) <= MIDDAY_WINDOW:
            return 0.90

    if any(rise <= instant <= set_ for rise, set_ in spans):
        return 1.0
    return 0.95


def daylight_spans(sunrise: datetime, sunset: datetime) -> list[tuple[datetime, datetime]]:
    """Sunrise-to-sunset intervals implied by one UTC day's sun events."""
    if sunrise <= sunset:
        return [(sunrise, sunset)]
    return [(sunrise - ONE_DAY, sunset), (sunrise, sunset + ONE_DAY)]


def overlap_bonus(
    instant: datetime, major_periods: Sequence[Period], minor_periods: Sequence[Period]
) -> float:
    in_major = any(period.contains(instant) for period in major_periods)
    in_minor = any(period.contains(instant) for period in minor_periods)
    return OVERLAP_BONUS if in_major and in_minor else 0.0


def clamp_score(value: float) -> int:
    return int(round(max(0.0, min(value, 100.0))))


class ActivityScorer:
    """Scores evaluation instants against one day's periods and observations."""

    def __init__(
        self,
        *,
        major_periods: Sequence[Period],
        minor_periods: Sequence[Period],
        moon_phase: MoonPhaseInfo,
        sunrise: datetime | None = None,
        sunset: datetime | None = None,
        weather_observations: Sequence[WeatherObservation] | None = None,
        tide_events: Sequence[TideEvent] | None = None,
        weights: ModifierWeights | None = None,
    ) -> None:
        self.major_periods = tuple(major_periods)
        self.minor_periods = tuple(minor_periods)
        self.moon_phase = moon_phase
        self.sunrise = sunrise
        self.sunset = sunset
        self.weights = weights or ModifierWeights()
        self.weather_observations = tuple(
            sorted(weather_observations or (), key=lambda obs: obs.timestamp)
        )
        self.tide_events = tuple(sorted(tide_events or (), key=lambda event: event.timestamp))
        self._weather = WeatherModifierCalculator(self.weights)
        self._tide = TideModifierCalculator(self.weights)

    @property
    def has_weather(self) -> bool:
        return bool(self.weather_observations)

    @property
    def has_tide(self) -> bool:
        return bool(self.tide_events)

    def score(self, instant: datetime) -> SliceScore:
        periods = self.major_periods + self.minor_periods
        solunar = base_solunar_score(instant, periods)
        solunar *= phase_multiplier(self.moon_phase.phase)
        solunar *= day_time_multiplier(instant, self.sunrise, self.sunset)

        bonus = overlap_bonus(instant, self.major_periods, self.minor_periods)
        weather = self.weather_modifier(instant)
        tide = self._tide.calculate(instant, self.tide_events) if self.has_tide else 0.0

        return SliceScore(
            instant=instant,
            solunar_score=solunar,
            overlap_bonus=bonus,
            weather_modifier=weather,
            tide_modifier=tide,
            total=clamp_score(solunar + bonus + weather + tide),
        )

    def weather_modifier(self, instant: datetime) -> float:
        """Modifier from the observation nearest ``instant``; its predecessor gives the trend."""
        observations = self.weather_observations
        if not observations:
            return 0.0
        index = min(
            range(len(observations)),
            key=lambda i: (abs(observations[i].timestamp - instant), i),
        )
        previous = observations[index - 1] if index > 0 else None
        return self._weather.calculate(observations[index], previous)
