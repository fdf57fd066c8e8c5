"""Daily rating from the mean slice score."""

from __future__ import annotations

from collections.abc import Iterable

from ..models import Rating

# Checked top-down; a mean equal to a threshold takes that rating.
RATING_THRESHOLDS: tuple[tuple[float, Rating], ...] = (
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Fair"),
)


def average_score(scores: Iterable[float]) -> float:
    values = list(scores)
    if not values:
        return 0.0
    return sum(values) / len(values)


def classify_day(scores: Iterable[float]) -> Rating:
    """Map the arithmetic mean of all slice scores to a rating. No scores rates Poor."""
    mean = average_score(scores)
    for threshold, rating in RATING_THRESHOLDS:
        if mean >= threshold:
            return rating
    return "Poor"
