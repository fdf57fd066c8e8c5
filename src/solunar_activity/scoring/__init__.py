"""Solunar scoring: periods, weather/tide modifiers, slice scores and daily rating."""

from .activity import ActivityScorer, SliceScore
from .periods import build_periods
from .rating import average_score, classify_day
from .tide import TideModifierCalculator
from .weather import WeatherModifierCalculator

__all__ = [
    "ActivityScorer",
    "SliceScore",
    "TideModifierCalculator",
    "WeatherModifierCalculator",
    "average_score",
    "build_periods",
    "classify_day",
]
