"""Loaders for optional weather, tide and weight input files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from .exceptions import InputDataError
from .models import ModifierWeights, TideEvent, WeatherObservation

logger = logging.getLogger("solunar_activity.inputs")


class WeatherFile(BaseModel):
    """``{"weather": [...]}`` document of hourly observations."""

    weather: list[WeatherObservation] = Field(
        default_factory=list, validation_alias=AliasChoices("weather", "Weather")
    )


class TideFile(BaseModel):
    """``{"tide": [...]}`` document of high/low tide events."""

    tide: list[TideEvent] = Field(
        default_factory=list, validation_alias=AliasChoices("tide", "Tide")
    )


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise InputDataError(f"Failed reading {path}: {exc}") from exc
    except ValueError as exc:
        raise InputDataError(f"Malformed JSON in {path}: {exc}") from exc


def load_weather_observations(path: Path) -> list[WeatherObservation] | None:
    """Return observations from ``path``, or None when the file does not exist."""
    if not path.exists():
        logger.info("No weather file at %s; weather modifiers disabled.", path)
        return None
    try:
        document = WeatherFile.model_validate(_read_json(path))
    except ValidationError as exc:
        raise InputDataError(f"Invalid weather data in {path}: {exc}") from exc
    logger.info("Loaded %d weather observations from %s", len(document.weather), path)
    return document.weather


def load_tide_events(path: Path) -> list[TideEvent] | None:
    """Return tide events from ``path``, or None when the file does not exist."""
    if not path.exists():
        logger.info("No tide file at %s; tide modifiers disabled.", path)
        return None
    try:
        document = TideFile.model_validate(_read_json(path))
    except ValidationError as exc:
        raise InputDataError(f"Invalid tide data in {path}: {exc}") from exc
    logger.info("Loaded %d tide events from %s", len(document.tide), path)
    return document.tide


def load_modifier_weights(path: Path) -> ModifierWeights:
    """Load a weights JSON object; omitted keys keep their defaults."""
    if not path.exists():
        raise InputDataError(f"Weights file does not exist: {path}")
    try:
        return ModifierWeights.model_validate(_read_json(path))
    except ValidationError as exc:
        raise InputDataError(f"Invalid modifier weights in {path}: {exc}") from exc
