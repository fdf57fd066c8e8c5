"""Typed settings loader for the solunar activity engine."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import ConfigError
from .models import ModifierWeights
from .timezones import DEFAULT_TIMEZONE, is_known_timezone

SLICE_MINUTE_CHOICES = (15, 60)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    latitude: float | None = Field(default=None, alias="SOLUNAR_LATITUDE")
    longitude: float | None = Field(default=None, alias="SOLUNAR_LONGITUDE")
    timezone: str = Field(default=DEFAULT_TIMEZONE, alias="SOLUNAR_TIMEZONE")
    target_date: date | None = Field(default=None, alias="SOLUNAR_DATE")
    slice_minutes: int = Field(default=60, alias="SOLUNAR_SLICE_MINUTES")

    input_dir: Path = Field(default=Path("./data/input"), alias="INPUT_DIR")
    weather_file: str = Field(default="Weather.json", alias="WEATHER_FILE")
    tide_file: str = Field(default="Tide.json", alias="TIDE_FILE")
    modifier_weights: ModifierWeights | None = Field(default=None, alias="MODIFIER_WEIGHTS")

    output_dir: Path = Field(default=Path("./data/output"), alias="OUTPUT_DIR")
    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    export_csv: bool = Field(default=True, alias="EXPORT_CSV")
    max_print: int = Field(default=24, alias="MAX_PRINT")

    ephemeris_dir: Path = Field(default=Path("./data/ephemeris"), alias="EPHEMERIS_DIR")
    ephemeris_file: str = Field(default="de421.bsp", alias="EPHEMERIS_FILE")

    @field_validator("latitude", "longitude", "target_date", "modifier_weights", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optionals."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Cross-field and range checks."""
        has_lat = self.latitude is not None
        has_lon = self.longitude is not None
        if has_lat != has_lon:
            raise ValueError("SOLUNAR_LATITUDE and SOLUNAR_LONGITUDE must be set together.")
        if has_lat and not (-90 <= self.latitude <= 90):
            raise ValueError("SOLUNAR_LATITUDE must be between -90 and 90.")
        if has_lon and not (-180 <= self.longitude <= 180):
            raise ValueError("SOLUNAR_LONGITUDE must be between -180 and 180.")
        if not is_known_timezone(self.timezone):
            raise ValueError(f"SOLUNAR_TIMEZONE is not a known time zone: {self.timezone!r}.")
        if self.slice_minutes not in SLICE_MINUTE_CHOICES:
            raise ValueError("SOLUNAR_SLICE_MINUTES must be 15 or 60.")
        if not self.weather_file.strip():
            raise ValueError("WEATHER_FILE must not be empty.")
        if not self.tide_file.strip():
            raise ValueError("TIDE_FILE must not be empty.")
        if not self.ephemeris_file.strip():
            raise ValueError("EPHEMERIS_FILE must not be empty.")
        if self.max_print <= 0:
            raise ValueError("MAX_PRINT must be > 0.")
        return self

    @property
    def weather_path(self) -> Path:
        return self.input_dir / self.weather_file

    @property
    def tide_path(self) -> Path:
        return self.input_dir / self.tide_file

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary for journaling."""
        return {
            "app_env": self.app_env,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timezone": self.timezone,
            "target_date": self.target_date.isoformat() if self.target_date else None,
            "slice_minutes": self.slice_minutes,
            "input_dir": str(self.input_dir),
            "weather_file": self.weather_file,
            "tide_file": self.tide_file,
            "custom_weights": self.modifier_weights is not None,
            "output_dir": str(self.output_dir),
            "export_csv": self.export_csv,
            "ephemeris_file": self.ephemeris_file,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except (ValidationError, SettingsError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    settings.journal_dir.mkdir(parents=True, exist_ok=True)
    settings.ephemeris_dir.mkdir(parents=True, exist_ok=True)
    return settings
