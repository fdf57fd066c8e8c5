"""Tide-based activity modifier.

The evaluation instant is placed inside the bracket formed by the nearest
preceding and following tide events. Incoming water near high tide scores
best, slack water at either turning point scores worst.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..models import ModifierWeights, TideEvent, TideType

MODIFIER_LIMIT = 20.0
COMPONENT_LIMIT = 10.0


class TideModifierCalculator:
    """Convert tide-event brackets into an additive score modifier in [-20, +20]."""

    def __init__(self, weights: ModifierWeights | None = None) -> None:
        self.weights = weights or ModifierWeights()

    def calculate(self, evaluation_time: datetime, tide_events: Sequence[TideEvent]) -> float:
        """Return the weighted, clamped tide modifier; 0 when no bracket exists."""
        if not tide_events:
            return 0.0

        ordered = sorted(tide_events, key=lambda event: event.timestamp)
        previous, following = find_bracketing_events(evaluation_time, ordered)
        if previous is None or following is None:
            return 0.0

        position = bracket_position(evaluation_time, previous, following)
        level = tide_level_score(position, previous.tide_type, following.tide_type)
        movement = tide_movement_score(position, abs(following.height - previous.height))

        weights = self.weights.tide
        total = level * weights.level + movement * weights.movement
        return max(-MODIFIER_LIMIT, min(total, MODIFIER_LIMIT))


def find_bracketing_events(
    evaluation_time: datetime, ordered_events: Sequence[TideEvent]
) -> tuple[TideEvent | None, TideEvent | None]:
    """Return the last event at or before ``evaluation_time`` and the first one after it."""
    previous: TideEvent | None = None
    for event in ordered_events:
        if event.timestamp <= evaluation_time:
            previous = event
        else:
            return previous, event
    return previous, None


def bracket_position(evaluation_time: datetime, previous: TideEvent, following: TideEvent) -> float:
    """Fraction of the bracket elapsed at ``evaluation_time`` (0.5 for a zero-length bracket)."""
    total = (following.timestamp - previous.timestamp).total_seconds()
    if total <= 0:
        return 0.5
    elapsed = (evaluation_time - previous.timestamp).total_seconds()
    return elapsed / total


def tide_level_score(position: float, previous_type: TideType, next_type: TideType) -> float:
    """-10..+10 depending on direction of flow and progress through the bracket."""
    if previous_type is TideType.LOW and next_type is TideType.HIGH:
        # Incoming: best 1-2 hours before high water.
        if 0.6 <= position <= 0.9:
            return 10.0
        if 0.3 <= position < 0.6:
            return 5 + (position - 0.3) * 50 / 3
        if position > 0.9:
            return 10 - (position - 0.9) * 20
        return position * 50 / 3

    if previous_type is TideType.HIGH and next_type is TideType.LOW:
        if position < 0.2:
            return 8 - position * 15
        if position < 0.5:
            return 5 - (position - 0.2) * 50 / 3
        if position < 0.8:
            return -(position - 0.5) * 50 / 3
        return -5 - (position - 0.8) * 25

    return 0.0


def tide_movement_score(position: float, tidal_range: float) -> float:
    """-10..+10; strongest flow at mid-bracket, adjusted for the tidal range (m)."""
    movement_factor = 1 - 4 * (position - 0.5) ** 2
    if movement_factor > 0.8:
        score = 10.0
    elif movement_factor > 0.5:
        score = 5 + (movement_factor - 0.5) * 50 / 3
    elif movement_factor > 0.2:
        score = (movement_factor - 0.2) * 50 / 3
    else:
        score = -10 + movement_factor * 50

    if tidal_range > 1.0:
        score += 3
    elif tidal_range > 0.5:
        score += 1
    elif tidal_range < 0.2:
        score -= 3

    return max(-COMPONENT_LIMIT, min(score, COMPONENT_LIMIT))
