"""Lunar transit search over a sampled altitude function.

The Moon's altitude is smooth and has a single maximum and minimum per extremum
within a day, so a coarse 5-minute scan followed by a 1-minute scan of the
+/-30 minute neighbourhood is enough for minute precision. No interpolation is
done: results always sit on the 1-minute grid.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

AltitudeFunction = Callable[[datetime], float]

COARSE_STEP = timedelta(minutes=5)
FINE_STEP = timedelta(minutes=1)
REFINE_HALF_WINDOW_MINUTES = 30


def utc_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return ``[00:00Z, next 00:00Z)`` for the calendar day."""
    start = datetime(day.year, day.month, day.day, tzinfo=UTC)
    return start, start + timedelta(days=1)


def find_lunar_transits(
    altitude: AltitudeFunction, day: date
) -> tuple[datetime | None, datetime | None]:
    """Return ``(upper_transit, lower_transit)`` for the UTC day, to the minute.

    At high latitudes the global maximum/minimum over the day can sit on a day
    boundary instead of a true culmination; that sample is still returned.
    """
    start, end = utc_day_bounds(day)
    upper_seed, lower_seed = _coarse_scan(altitude, start, end)
    upper = _refine(altitude, upper_seed, highest=True) if upper_seed is not None else None
    lower = _refine(altitude, lower_seed, highest=False) if lower_seed is not None else None
    return upper, lower


def _coarse_scan(
    altitude: AltitudeFunction, start: datetime, end: datetime
) -> tuple[datetime | None, datetime | None]:
    high: tuple[float, datetime] | None = None
    low: tuple[float, datetime] | None = None
    instant = start
    while instant < end:
        value = altitude(instant)
        if not math.isnan(value):
            # Strict comparisons keep the first occurrence on ties.
            if high is None or value > high[0]:
                high = (value, instant)
            if low is None or value < low[0]:
                low = (value, instant)
        instant += COARSE_STEP
    return (
        high[1] if high is not None else None,
        low[1] if low is not None else None,
    )


def _refine(altitude: AltitudeFunction, seed: datetime, *, highest: bool) -> datetime:
    best: tuple[float, datetime] | None = None
    for offset in range(-REFINE_HALF_WINDOW_MINUTES, REFINE_HALF_WINDOW_MINUTES + 1):
        instant = seed + offset * FINE_STEP
        value = altitude(instant)
        if math.isnan(value):
            continue
        if best is None or (value > best[0] if highest else value < best[0]):
            best = (value, instant)
    return best[1] if best is not None else seed
