"""Typed models for solunar periods, modifier inputs and calculation results."""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
from enum import Enum
from typing import Literal

from pydantic import (
    AliasChoices,
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel, to_pascal

Rating = Literal["Excellent", "Good", "Fair", "Poor"]

# Input files and weight blocks may use camelCase, PascalCase or snake_case keys.
_INPUT_KEYS = ConfigDict(
    alias_generator=AliasGenerator(
        validation_alias=lambda name: AliasChoices(name, to_camel(name), to_pascal(name)),
        serialization_alias=to_camel,
    ),
    populate_by_name=True,
)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class PeriodType(str, Enum):
    """Astronomical event a solunar period is anchored on."""

    UPPER_TRANSIT = "upper_transit"
    LOWER_TRANSIT = "lower_transit"
    MOONRISE = "moonrise"
    MOONSET = "moonset"

    @property
    def is_major(self) -> bool:
        return self in {PeriodType.UPPER_TRANSIT, PeriodType.LOWER_TRANSIT}


class MoonPhase(str, Enum):
    """The eight named lunar phases."""

    NEW_MOON = "new_moon"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL_MOON = "full_moon"
    WANING_GIBBOUS = "waning_gibbous"
    LAST_QUARTER = "last_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def from_name(cls, name: str) -> MoonPhase:
        """Resolve a free-form phase name such as ``"Full Moon"`` or ``"third quarter"``."""
        key = "".join(ch for ch in name.lower() if ch.isalnum())
        phase = _PHASE_ALIASES.get(key)
        if phase is None:
            raise ValueError(f"Unknown moon phase name: {name!r}")
        return phase

    @classmethod
    def from_angle(cls, degrees: float) -> MoonPhase:
        """Map a Sun-Moon elongation angle (0 = new, 180 = full) to its 45-degree sector."""
        angle = degrees % 360.0
        index = int(((angle + 22.5) % 360.0) // 45.0)
        return _PHASE_ORDER[index]


_PHASE_ORDER: tuple[MoonPhase, ...] = tuple(MoonPhase)
_PHASE_ALIASES: dict[str, MoonPhase] = {
    phase.value.replace("_", ""): phase for phase in MoonPhase
}
_PHASE_ALIASES["thirdquarter"] = MoonPhase.LAST_QUARTER


class HorizontalPosition(BaseModel):
    """Topocentric altitude/azimuth of a body at one instant, in degrees."""

    model_config = ConfigDict(frozen=True)

    instant: datetime
    altitude: float
    azimuth: float = Field(ge=0.0, lt=360.0)

    @field_validator("instant")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TideType(str, Enum):
    """Kind of tide turning point."""

    HIGH = "high"
    LOW = "low"


class Period(BaseModel):
    """Solunar activity window. All instants are UTC."""

    model_config = ConfigDict(frozen=True)

    period_type: PeriodType
    start: datetime
    end: datetime
    center: datetime

    @field_validator("start", "end", "center")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> Period:
        if not (self.start <= self.center <= self.end):
            raise ValueError("Period must satisfy start <= center <= end.")
        return self

    @property
    def is_major(self) -> bool:
        return self.period_type.is_major

    def contains(self, instant: datetime) -> bool:
        """Inclusive membership test on ``[start, end]``."""
        return self.start <= instant <= self.end

    def localized(self, tz: tzinfo) -> PeriodReport:
        """Express this period in both UTC and the given local zone."""
        return PeriodReport(
            period_type=self.period_type,
            start_utc=self.start,
            end_utc=self.end,
            center_utc=self.center,
            start_local=self.start.astimezone(tz),
            end_local=self.end.astimezone(tz),
            center_local=self.center.astimezone(tz),
            duration_minutes=(self.end - self.start).total_seconds() / 60.0,
        )


class PeriodReport(BaseModel):
    """Output rendition of a period in UTC and local time."""

    period_type: PeriodType
    start_utc: datetime
    end_utc: datetime
    center_utc: datetime
    start_local: datetime
    end_local: datetime
    center_local: datetime
    duration_minutes: float


class SolunarWeights(BaseModel):
    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    major: float = Field(default=1.0, ge=0.0)
    minor: float = Field(default=0.6, ge=0.0)
    moon_phase: float = Field(default=0.3, ge=0.0)


class WeatherWeights(BaseModel):
    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    water_temperature: float = Field(default=0.9, ge=0.0)
    pressure: float = Field(default=0.8, ge=0.0)
    wind: float = Field(default=0.7, ge=0.0)
    cloud_cover: float = Field(default=0.5, ge=0.0)
    waves: float = Field(default=0.6, ge=0.0)
    air_temperature: float = Field(default=0.4, ge=0.0)
    humidity: float = Field(default=0.2, ge=0.0)


class TideWeights(BaseModel):
    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    level: float = Field(default=0.8, ge=0.0)
    movement: float = Field(default=1.0, ge=0.0)


class ModifierWeights(BaseModel):
    """Weighting for solunar, weather and tide factors. Missing blocks take defaults."""

    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    solunar: SolunarWeights = Field(default_factory=SolunarWeights)
    weather: WeatherWeights = Field(default_factory=WeatherWeights)
    tide: TideWeights = Field(default_factory=TideWeights)


class WeatherObservation(BaseModel):
    """Hourly weather/marine observation (Stormglass-style field set)."""

    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    timestamp: datetime
    air_temperature: float = 0.0
    water_temperature: float = 0.0
    cloud_cover: float = 0.0
    wind_direction: float = 0.0
    wind_speed: float = 0.0
    wind_gust: float = 0.0
    pressure: float = 0.0
    humidity: float = 0.0
    visibility: float = 0.0
    wave_height: float = 0.0
    wave_direction: float = 0.0
    wave_period: float = 0.0
    swell_height: float = 0.0
    swell_direction: float = 0.0
    swell_period: float = 0.0
    current_direction: float = 0.0
    current_speed: float = 0.0
    data_source: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TideEvent(BaseModel):
    """High or low tide turning point."""

    model_config = ConfigDict(frozen=True, **_INPUT_KEYS)

    timestamp: datetime
    height: float
    tide_type: TideType
    station_name: str | None = None
    station_distance: str | None = None
    station_source: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("tide_type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, TideType):
            return value.strip().lower()
        return value


class MoonPhaseInfo(BaseModel):
    """Moon phase for the day, shared by every slice."""

    model_config = ConfigDict(frozen=True)

    phase: MoonPhase
    illumination: float = Field(ge=0.0, le=1.0)
    phase_angle: float | None = None
    distance_km: float | None = Field(default=None, gt=0.0)

    @field_validator("phase", mode="before")
    @classmethod
    def _resolve_name(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, MoonPhase):
            return MoonPhase.from_name(value)
        return value

    @property
    def phase_name(self) -> str:
        return self.phase.display_name


class ActivitySample(BaseModel):
    """Final score for one time slice of the local day."""

    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    local_time: datetime
    utc_time: datetime
    score: int = Field(ge=0, le=100)


class ActivityBreakdown(BaseModel):
    """Per-slice score components; present only when weather or tide data was supplied."""

    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    solunar_score: float
    overlap_bonus: float = 0.0
    weather_modifier: float = 0.0
    tide_modifier: float = 0.0
    total_score: int = Field(ge=0, le=100)


class Location(BaseModel):
    latitude: float
    longitude: float


class AstronomicalSummary(BaseModel):
    """Raw sun/moon events behind the periods, in UTC and local time."""

    sunrise_utc: datetime | None = None
    sunrise_local: datetime | None = None
    sunset_utc: datetime | None = None
    sunset_local: datetime | None = None
    moonrise_utc: datetime | None = None
    moonrise_local: datetime | None = None
    moonset_utc: datetime | None = None
    moonset_local: datetime | None = None
    upper_transit_utc: datetime | None = None
    upper_transit_local: datetime | None = None
    upper_transit_altitude: float | None = None
    upper_transit_azimuth: float | None = None
    lower_transit_utc: datetime | None = None
    lower_transit_local: datetime | None = None
    lower_transit_altitude: float | None = None
    sun_culmination_utc: datetime | None = None
    sun_culmination_local: datetime | None = None
    sun_culmination_altitude: float | None = None
    sun_culmination_azimuth: float | None = None
    moon_distance_km: float | None = None


class SolunarInput(BaseModel):
    """Immutable snapshot of everything one calculation run needs."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    target_date: date
    timezone: str | None = None
    slice_minutes: Literal[15, 60] = 60
    weather_observations: list[WeatherObservation] | None = None
    tide_events: list[TideEvent] | None = None
    weights: ModifierWeights | None = None


class SolunarResult(BaseModel):
    """Read-only output of a calculation run."""

    model_config = ConfigDict(frozen=True)

    target_date: date
    location: Location
    timezone: str
    slice_minutes: int
    major_periods: list[PeriodReport] = Field(default_factory=list)
    minor_periods: list[PeriodReport] = Field(default_factory=list)
    activity: list[ActivitySample] = Field(default_factory=list)
    breakdown: list[ActivityBreakdown] | None = None
    moon_phase: MoonPhaseInfo
    astronomy: AstronomicalSummary
    rating: Rating
    average_score: float
    has_weather_modifiers: bool = False
    has_tide_modifiers: bool = False
