"""Provider-agnostic astronomy interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from ..models import HorizontalPosition, MoonPhaseInfo


class AstronomyProvider(ABC):
    """Source of the raw sun/moon primitives consumed by the solunar engine.

    Absent events (polar day/night, a moonless calendar day) are reported as
    ``None``. Implementations do not raise for them.
    """

    @abstractmethod
    def sun_times(
        self, lat: float, lon: float, day: date
    ) -> tuple[datetime | None, datetime | None]:
        """Return ``(sunrise, sunset)`` in UTC for the UTC calendar day."""

    @abstractmethod
    def moon_times(
        self, lat: float, lon: float, day: date
    ) -> tuple[datetime | None, datetime | None]:
        """Return ``(moonrise, moonset)`` in UTC for the UTC calendar day."""

    @abstractmethod
    def sun_culmination(self, lat: float, lon: float, day: date) -> HorizontalPosition | None:
        """Return the Sun at its upper meridian transit on the UTC day."""

    @abstractmethod
    def moon_altitude(self, lat: float, lon: float, instant: datetime) -> float:
        """Return the Moon's apparent altitude in degrees at ``instant``."""

    @abstractmethod
    def moon_position(self, lat: float, lon: float, instant: datetime) -> HorizontalPosition:
        """Return the Moon's apparent altitude and azimuth at ``instant``."""

    @abstractmethod
    def moon_phase(self, lat: float, lon: float, day: date) -> MoonPhaseInfo:
        """Return the representative phase for the day, with the geocentric distance if known."""
