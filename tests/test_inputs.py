"""Weather, tide and weight file loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from solunar_activity.exceptions import InputDataError
from solunar_activity.inputs import (
    load_modifier_weights,
    load_tide_events,
    load_weather_observations,
)
from solunar_activity.models import TideType


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_files_mean_no_data(tmp_path: Path) -> None:
    assert load_weather_observations(tmp_path / "Weather.json") is None
    assert load_tide_events(tmp_path / "Tide.json") is None


def test_load_weather_camel_case(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "Weather.json",
        {
            "weather": [
                {
                    "timestamp": "2025-06-15T10:00:00Z",
                    "airTemperature": 24.1,
                    "waterTemperature": 21.3,
                    "windSpeed": 3.2,
                    "dataSource": "stormglass",
                },
                {"timestamp": "2025-06-15T11:00:00Z", "pressure": 1016.2},
            ]
        },
    )
    observations = load_weather_observations(path)
    assert observations is not None
    assert len(observations) == 2
    assert observations[0].water_temperature == 21.3
    assert observations[0].data_source == "stormglass"
    assert observations[1].pressure == 1016.2


def test_load_tide_with_capitalized_wrapper(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "Tide.json",
        {
            "Tide": [
                {"timestamp": "2025-06-15T01:10:00Z", "height": 0.21, "type": "low"},
            ]
        },
    )
    with pytest.raises(InputDataError):
        load_tide_events(path)

    _write(
        path,
        {"Tide": [{"timestamp": "2025-06-15T01:10:00Z", "height": 0.21, "tideType": "Low"}]},
    )
    events = load_tide_events(path)
    assert events is not None
    assert events[0].tide_type is TideType.LOW


def test_empty_wrapper_gives_empty_list(tmp_path: Path) -> None:
    path = _write(tmp_path / "Weather.json", {})
    assert load_weather_observations(path) == []


def test_malformed_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "Weather.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InputDataError, match="Malformed JSON"):
        load_weather_observations(path)


def test_invalid_field_raises(tmp_path: Path) -> None:
    path = _write(tmp_path / "Weather.json", {"weather": [{"timestamp": "yesterday"}]})
    with pytest.raises(InputDataError, match="Invalid weather data"):
        load_weather_observations(path)


def test_load_weights(tmp_path: Path) -> None:
    path = _write(tmp_path / "weights.json", {"tide": {"level": 0.5}, "weather": {"wind": 1.2}})
    weights = load_modifier_weights(path)
    assert weights.tide.level == 0.5
    assert weights.tide.movement == 1.0
    assert weights.weather.wind == 1.2


def test_missing_weights_file_raises(tmp_path: Path) -> None:
    with pytest.raises(InputDataError, match="does not exist"):
        load_modifier_weights(tmp_path / "absent.json")


def test_invalid_weights_raise(tmp_path: Path) -> None:
    path = _write(tmp_path / "weights.json", {"tide": {"level": "heavy"}})
    with pytest.raises(InputDataError, match="Invalid modifier weights"):
        load_modifier_weights(path)


def test_load_pascal_case_items(tmp_path: Path) -> None:
    tide_path = _write(
        tmp_path / "Tide.json",
        {
            "Tide": [
                {
                    "Id": 1,
                    "Timestamp": "2025-01-01T03:00:00Z",
                    "Height": 1.2,
                    "TideType": "High",
                    "StationName": "Piraeus",
                }
            ]
        },
    )
    events = load_tide_events(tide_path)
    assert events is not None
    assert events[0].tide_type is TideType.HIGH
    assert events[0].height == 1.2
    assert events[0].station_name == "Piraeus"

    weather_path = _write(
        tmp_path / "Weather.json",
        {
            "Weather": [
                {
                    "Timestamp": "2025-01-01T03:00:00Z",
                    "WaterTemperature": 16.4,
                    "CloudCover": 75,
                    "DataSource": "stormglass",
                }
            ]
        },
    )
    observations = load_weather_observations(weather_path)
    assert observations is not None
    assert observations[0].water_temperature == 16.4
    assert observations[0].cloud_cover == 75.0


def test_load_pascal_case_weights(tmp_path: Path) -> None:
    path = _write(tmp_path / "weights.json", {"Weather": {"WaterTemperature": 0.5}})
    assert load_modifier_weights(path).weather.water_temperature == 0.5
