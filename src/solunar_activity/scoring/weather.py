"""Weather-based activity modifier.

Each factor maps an observation field to a bounded component score; the
modifier is the weighted sum of the components and is itself left unclamped
(roughly -50..+50 with default weights).
"""

from __future__ import annotations

from ..models import ModifierWeights, WeatherObservation


class WeatherModifierCalculator:
    """Convert a weather observation into an additive score modifier."""

    def __init__(self, weights: ModifierWeights | None = None) -> None:
        self.weights = weights or ModifierWeights()

    def component_scores(
        self,
        observation: WeatherObservation,
        previous: WeatherObservation | None = None,
    ) -> dict[str, float]:
        """Return the unweighted component scores keyed by weight name."""
        return {
            "water_temperature": water_temperature_score(observation.water_temperature),
            "pressure": pressure_score(
                observation.pressure,
                previous.pressure if previous is not None else None,
            ),
            "wind": wind_score(observation.wind_speed, observation.wind_direction),
            "cloud_cover": cloud_cover_score(observation.cloud_cover),
            "waves": wave_score(observation.wave_height, observation.current_speed),
            "air_temperature": air_temperature_score(observation.air_temperature),
            "humidity": humidity_score(observation.humidity),
        }

    def calculate(
        self,
        observation: WeatherObservation,
        previous: WeatherObservation | None = None,
    ) -> float:
        """Weighted sum of all weather components.

        Without a previous observation the pressure trend term is skipped.
        """
        weights = self.weights.weather
        components = self.component_scores(observation, previous)
        return sum(score * getattr(weights, name) for name, score in components.items())


def water_temperature_score(water_temp: float) -> float:
    """-15..+15, plateau of +15 across 18-24 C."""
    if 18 <= water_temp <= 24:
        return 15.0
    if 15 <= water_temp < 18:
        return 5 + (water_temp - 15) * 10 / 3
    if 24 < water_temp <= 27:
        return 15 - (water_temp - 24) * 10 / 3
    if 12 <= water_temp < 15:
        return -5 + (water_temp - 12) * 10 / 3
    if 27 < water_temp <= 30:
        return 5 - (water_temp - 27) * 10 / 3
    if water_temp < 12:
        return max(-15.0, -5 - (12 - water_temp) * 2)
    return max(-15.0, -5 - (water_temp - 30) * 2)


def pressure_score(pressure: float, previous_pressure: float | None = None) -> float:
    """-15..+15 from the hourly trend plus the absolute level (hPa)."""
    score = 0.0
    if previous_pressure is not None:
        change = pressure - previous_pressure
        if change > 2:
            score += 15
        elif change > 0.5:
            score += 10
        elif change > 0:
            score += 5
        elif change > -0.5:
            score += 3
        elif change > -2:
            score -= 5
        else:
            score -= 15

    if 1013 <= pressure <= 1023:
        score += 5
    elif pressure < 1000:
        score -= 10
    elif pressure > 1030:
        score -= 5

    return _clamp(score, -15.0, 15.0)


def wind_score(wind_speed: float, wind_direction: float) -> float:
    """-10..+10 from speed (m/s) bands plus a small easterly-sector bonus."""
    if 2 <= wind_speed <= 5:
        score = 10.0
    elif wind_speed < 2:
        score = 3.0
    elif wind_speed <= 8:
        score = 5 - (wind_speed - 5) * 10 / 3
    elif wind_speed <= 12:
        score = -5.0
    else:
        score = -10.0

    if 45 <= wind_direction <= 135:
        score += 2

    return _clamp(score, -10.0, 10.0)


def cloud_cover_score(cloud_cover: float) -> float:
    """0..+10; overcast skies score highest."""
    if cloud_cover >= 70:
        return 10.0
    if cloud_cover >= 30:
        return 5 + (cloud_cover - 30) * 0.125
    return cloud_cover * 0.1


def wave_score(wave_height: float, current_speed: float) -> float:
    """-10..+10 from wave height (m) and current speed (m/s)."""
    score = 0.0
    if 0.3 <= wave_height <= 1.0:
        score += 5
    elif wave_height < 0.3:
        score += 2
    elif wave_height <= 2.0:
        score -= (wave_height - 1.0) * 5
    else:
        score -= 10

    if 0.1 <= current_speed <= 0.5:
        score += 5
    elif current_speed < 0.1:
        score += 1
    elif current_speed <= 1.0:
        score += 5 - (current_speed - 0.5) * 10
    else:
        score -= 5

    return _clamp(score, -10.0, 10.0)


def air_temperature_score(air_temp: float) -> float:
    """-5..+5, plateau of +5 across 15-25 C."""
    if 15 <= air_temp <= 25:
        return 5.0
    if 10 <= air_temp < 15:
        return air_temp - 10
    if 25 < air_temp <= 30:
        return 5 - (air_temp - 25)
    if 5 <= air_temp < 10:
        return -5 + (air_temp - 5)
    if 30 < air_temp <= 35:
        return -(air_temp - 30)
    return -5.0


def humidity_score(humidity: float) -> float:
    """-3..+3, best between 60 and 80 percent."""
    if 60 <= humidity <= 80:
        return 3.0
    if 40 <= humidity < 60:
        return (humidity - 40) * 0.1
    if 80 < humidity <= 90:
        return 3 - (humidity - 80) * 0.4
    return -2.0 if humidity < 40 else -3.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
