"""Construction of major/minor solunar periods from lunar events."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..models import Period, PeriodType

MAJOR_HALF_WIDTH = timedelta(hours=1)
MINOR_DURATION = timedelta(hours=1)


def major_period(period_type: PeriodType, transit: datetime) -> Period:
    """Two-hour window centred on a lunar transit."""
    return Period(
        period_type=period_type,
        start=transit - MAJOR_HALF_WIDTH,
        end=transit + MAJOR_HALF_WIDTH,
        center=transit,
    )


def minor_period(period_type: PeriodType, event: datetime) -> Period:
    """One-hour window starting at moonrise/moonset."""
    return Period(
        period_type=period_type,
        start=event,
        end=event + MINOR_DURATION,
        center=event + MINOR_DURATION / 2,
    )


def build_periods(
    *,
    moonrise: datetime | None = None,
    moonset: datetime | None = None,
    upper_transit: datetime | None = None,
    lower_transit: datetime | None = None,
) -> tuple[list[Period], list[Period]]:
    """Return ``(major, minor)`` periods, skipping absent events.

    Overlapping windows are kept as-is; nothing is merged.
    """
    major = [
        major_period(period_type, instant)
        for period_type, instant in (
            (PeriodType.UPPER_TRANSIT, upper_transit),
            (PeriodType.LOWER_TRANSIT, lower_transit),
        )
        if instant is not None
    ]
    minor = [
        minor_period(period_type, instant)
        for period_type, instant in (
            (PeriodType.MOONRISE, moonrise),
            (PeriodType.MOONSET, moonset),
        )
        if instant is not None
    ]
    return major, minor
