"""Per-slice activity scoring tests."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import pytest

from solunar_activity.models import (
    ModifierWeights,
    MoonPhase,
    MoonPhaseInfo,
    PeriodType,
    TideEvent,
    WeatherObservation,
)
from solunar_activity.scoring.activity import (
    ActivityScorer,
    base_solunar_score,
    clamp_score,
    day_time_multiplier,
    overlap_bonus,
    period_contribution,
    phase_multiplier,
)
from solunar_activity.scoring.periods import build_periods, major_period, minor_period
from solunar_activity.scoring.weather import WeatherModifierCalculator


def _dt(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 6, 15, hour, minute, tzinfo=UTC)


def _phase(name: str = "First Quarter") -> MoonPhaseInfo:
    return MoonPhaseInfo(phase=name, illumination=0.5)


MAJOR = major_period(PeriodType.UPPER_TRANSIT, _dt(10, 0))
MINOR = minor_period(PeriodType.MOONRISE, _dt(10, 30))


class TestPeriodContribution:
    def test_amplitude_at_center(self) -> None:
        assert period_contribution(MAJOR, MAJOR.center) == pytest.approx(100.0)
        assert period_contribution(MINOR, MINOR.center) == pytest.approx(70.0)

    def test_zero_outside_window(self) -> None:
        assert period_contribution(MAJOR, MAJOR.center + timedelta(minutes=91)) == 0.0
        assert period_contribution(MAJOR, MAJOR.center - timedelta(minutes=91)) == 0.0
        assert period_contribution(MINOR, MINOR.center + timedelta(minutes=46)) == 0.0

    def test_window_edge_is_inclusive(self) -> None:
        edge = MAJOR.center + timedelta(minutes=90)
        assert period_contribution(MAJOR, edge) == pytest.approx(100 * math.exp(-8100 / 800))

    def test_strictly_decreasing_with_distance(self) -> None:
        for period, window in ((MAJOR, 90), (MINOR, 45)):
            values = [
                period_contribution(period, period.center + timedelta(minutes=m))
                for m in range(window + 1)
            ]
            assert all(a > b for a, b in zip(values, values[1:]))


def test_base_score_is_max_not_sum() -> None:
    twin = major_period(PeriodType.LOWER_TRANSIT, _dt(10, 0))
    assert base_solunar_score(_dt(10, 0), [MAJOR, twin]) == pytest.approx(100.0)


def test_base_score_zero_far_from_every_period() -> None:
    assert base_solunar_score(_dt(3, 0), [MAJOR, MINOR]) == 0.0
    assert base_solunar_score(_dt(3, 0), []) == 0.0


@pytest.mark.parametrize(
    ("phase", "expected"),
    [
        (MoonPhase.NEW_MOON, 1.05),
        (MoonPhase.FULL_MOON, 1.10),
        (MoonPhase.FIRST_QUARTER, 1.0),
        (MoonPhase.LAST_QUARTER, 0.95),
        (MoonPhase.WAXING_GIBBOUS, 1.0),
        (MoonPhase.WANING_CRESCENT, 1.0),
    ],
)
def test_phase_multiplier(phase: MoonPhase, expected: float) -> None:
    assert phase_multiplier(phase) == expected


@pytest.mark.parametrize(
    ("instant", "expected"),
    [
        (_dt(5, 20), 1.10),
        (_dt(4, 40), 1.10),
        (_dt(19, 10), 1.10),
        (_dt(6, 0), 1.05),
        (_dt(20, 0), 1.05),
        (_dt(12, 30), 0.90),
        (_dt(15, 0), 1.0),
        (_dt(4, 0), 0.95),
        (_dt(23, 0), 0.95),
    ],
)
def test_day_time_multiplier(instant: datetime, expected: float) -> None:
    assert day_time_multiplier(instant, _dt(5, 0), _dt(19, 0)) == expected


def test_day_time_multiplier_neutral_without_sun_times() -> None:
    assert day_time_multiplier(_dt(12, 0), None, _dt(19, 0)) == 1.0
    assert day_time_multiplier(_dt(12, 0), None, None) == 1.0


def test_overlap_bonus_requires_major_and_minor() -> None:
    assert overlap_bonus(_dt(10, 45), [MAJOR], [MINOR]) == 18.0
    assert overlap_bonus(_dt(9, 30), [MAJOR], [MINOR]) == 0.0
    assert overlap_bonus(_dt(10, 45), [MAJOR], []) == 0.0


def test_clamp_score() -> None:
    assert clamp_score(120.4) == 100
    assert clamp_score(-5.0) == 0
    assert clamp_score(55.4) == 55
    assert isinstance(clamp_score(12.7), int)


def test_overlap_bonus_added_after_multipliers() -> None:
    scorer = ActivityScorer(
        major_periods=[MAJOR], minor_periods=[MINOR], moon_phase=_phase("Full Moon")
    )
    result = scorer.score(_dt(10, 45))
    expected_solunar = 70 * math.exp(-225 / 200) * 1.10
    assert result.solunar_score == pytest.approx(expected_solunar)
    assert result.overlap_bonus == 18.0
    assert result.total == round(expected_solunar + 18)


def test_score_without_modifiers_has_zero_modifier_terms() -> None:
    major, minor = build_periods(upper_transit=_dt(10, 0))
    scorer = ActivityScorer(major_periods=major, minor_periods=minor, moon_phase=_phase())
    result = scorer.score(_dt(10, 0))
    assert not scorer.has_weather
    assert not scorer.has_tide
    assert result.weather_modifier == 0.0
    assert result.tide_modifier == 0.0
    assert result.total == 100


def test_total_always_integer_in_range() -> None:
    harsh = WeatherObservation(
        timestamp=_dt(0, 0),
        water_temperature=5,
        pressure=990,
        wind_speed=20,
        wave_height=3,
        current_speed=2,
        air_temperature=-5,
        humidity=99,
    )
    tides = [
        TideEvent(timestamp=_dt(0, 0), height=1.5, tide_type="high"),
        TideEvent(timestamp=_dt(23, 0), height=1.4, tide_type="low"),
    ]
    scorer = ActivityScorer(
        major_periods=[MAJOR],
        minor_periods=[MINOR],
        moon_phase=_phase("Full Moon"),
        sunrise=_dt(5, 0),
        sunset=_dt(19, 0),
        weather_observations=[harsh],
        tide_events=tides,
    )
    for hour in range(24):
        total = scorer.score(_dt(hour, 30)).total
        assert isinstance(total, int)
        assert 0 <= total <= 100
    assert scorer.score(_dt(3, 30)).total == 0


class TestWeatherSelection:
    OBSERVATIONS = [
        WeatherObservation(timestamp=_dt(12, 0), pressure=1016.0, water_temperature=20),
        WeatherObservation(timestamp=_dt(10, 0), pressure=1010.0, water_temperature=14),
        WeatherObservation(timestamp=_dt(11, 0), pressure=1013.0, water_temperature=17),
    ]

    def _scorer(self) -> ActivityScorer:
        return ActivityScorer(
            major_periods=[],
            minor_periods=[],
            moon_phase=_phase(),
            weather_observations=self.OBSERVATIONS,
        )

    def test_nearest_observation_with_predecessor_trend(self) -> None:
        by_hour = {obs.timestamp.hour: obs for obs in self.OBSERVATIONS}
        expected = WeatherModifierCalculator().calculate(by_hour[11], by_hour[10])
        assert self._scorer().weather_modifier(_dt(11, 20)) == pytest.approx(expected)

    def test_tie_prefers_earlier_observation(self) -> None:
        by_hour = {obs.timestamp.hour: obs for obs in self.OBSERVATIONS}
        expected = WeatherModifierCalculator().calculate(by_hour[11], by_hour[10])
        assert self._scorer().weather_modifier(_dt(11, 30)) == pytest.approx(expected)

    def test_first_observation_has_no_trend(self) -> None:
        by_hour = {obs.timestamp.hour: obs for obs in self.OBSERVATIONS}
        expected = WeatherModifierCalculator().calculate(by_hour[10], None)
        assert self._scorer().weather_modifier(_dt(6, 0)) == pytest.approx(expected)


def test_custom_weights_reach_modifiers() -> None:
    obs = WeatherObservation(timestamp=_dt(10, 0), water_temperature=21, pressure=1015)
    zero = ModifierWeights.model_validate(
        {
            "weather": {
                "waterTemperature": 0,
                "pressure": 0,
                "wind": 0,
                "cloudCover": 0,
                "waves": 0,
                "airTemperature": 0,
                "humidity": 0,
            }
        }
    )
    scorer = ActivityScorer(
        major_periods=[],
        minor_periods=[],
        moon_phase=_phase(),
        weather_observations=[obs],
        weights=zero,
    )
    assert scorer.weather_modifier(_dt(10, 0)) == 0.0


class TestSunsetBeforeSunrise:
    # Far from Greenwich the UTC day holds last evening's sunset and this morning's sunrise.
    SUNRISE = _dt(16, 50)
    SUNSET = _dt(4, 30)

    def test_local_noon_gets_midday_dip(self) -> None:
        assert day_time_multiplier(_dt(22, 40), self.SUNRISE, self.SUNSET) == 0.90

    def test_local_midnight_is_night(self) -> None:
        assert day_time_multiplier(_dt(10, 40), self.SUNRISE, self.SUNSET) == 0.95

    def test_afternoon_before_sunset_is_daytime(self) -> None:
        assert day_time_multiplier(_dt(1, 0), self.SUNRISE, self.SUNSET) == 1.0

    def test_twilight_still_applies(self) -> None:
        assert day_time_multiplier(_dt(4, 40), self.SUNRISE, self.SUNSET) == 1.10
        assert day_time_multiplier(_dt(17, 30), self.SUNRISE, self.SUNSET) == 1.05
