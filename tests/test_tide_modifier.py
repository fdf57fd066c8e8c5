"""Tide modifier tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from solunar_activity.models import ModifierWeights, TideEvent, TideType
from solunar_activity.scoring.tide import (
    TideModifierCalculator,
    bracket_position,
    find_bracketing_events,
    tide_level_score,
    tide_movement_score,
)


def _dt(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2025, 6, day, hour, minute, tzinfo=UTC)


EVENTS = [
    TideEvent(timestamp=_dt(0), height=0.2, tide_type="low"),
    TideEvent(timestamp=_dt(6), height=1.6, tide_type="high"),
    TideEvent(timestamp=_dt(12), height=0.3, tide_type="low"),
]


def test_empty_event_list_is_neutral() -> None:
    calculator = TideModifierCalculator()
    for hour in (0, 7, 23):
        assert calculator.calculate(_dt(hour), []) == 0.0


def test_unbracketed_instants_are_neutral() -> None:
    calculator = TideModifierCalculator()
    assert calculator.calculate(_dt(23, day=14), EVENTS) == 0.0
    assert calculator.calculate(_dt(13), EVENTS) == 0.0
    assert calculator.calculate(_dt(12), EVENTS) == 0.0


def test_bracket_includes_event_at_instant_as_previous() -> None:
    previous, following = find_bracketing_events(_dt(6), EVENTS)
    assert previous is EVENTS[1]
    assert following is EVENTS[2]


def test_bracket_position() -> None:
    assert bracket_position(_dt(3), EVENTS[0], EVENTS[1]) == pytest.approx(0.5)
    assert bracket_position(_dt(0), EVENTS[0], EVENTS[1]) == 0.0


def test_zero_length_bracket_uses_midpoint() -> None:
    twin = EVENTS[0].model_copy(update={"tide_type": TideType.HIGH})
    assert bracket_position(_dt(0), EVENTS[0], twin) == 0.5


@pytest.mark.parametrize(
    ("position", "previous", "following", "expected"),
    [
        (0.0, TideType.LOW, TideType.HIGH, 0.0),
        (0.3, TideType.LOW, TideType.HIGH, 5.0),
        (0.75, TideType.LOW, TideType.HIGH, 10.0),
        (0.95, TideType.LOW, TideType.HIGH, 9.0),
        (0.1, TideType.HIGH, TideType.LOW, 6.5),
        (0.5, TideType.HIGH, TideType.LOW, 0.0),
        (0.9, TideType.HIGH, TideType.LOW, -7.5),
        (0.5, TideType.HIGH, TideType.HIGH, 0.0),
    ],
)
def test_tide_level_score(
    position: float, previous: TideType, following: TideType, expected: float
) -> None:
    assert tide_level_score(position, previous, following) == pytest.approx(expected)


@pytest.mark.parametrize(
    ("position", "tidal_range", "expected"),
    [
        (0.5, 1.4, 10.0),
        (0.5, 0.1, 7.0),
        (0.5, 0.4, 10.0),
        (0.0, 0.6, -9.0),
        (0.0, 0.1, -10.0),
    ],
)
def test_tide_movement_score(position: float, tidal_range: float, expected: float) -> None:
    assert tide_movement_score(position, tidal_range) == pytest.approx(expected)


def test_incoming_mid_bracket_modifier() -> None:
    # level 25/3 * 0.8 + movement 10 * 1.0
    assert TideModifierCalculator().calculate(_dt(3), EVENTS) == pytest.approx(50 / 3)


def test_event_order_does_not_matter() -> None:
    calculator = TideModifierCalculator()
    assert calculator.calculate(_dt(3), list(reversed(EVENTS))) == pytest.approx(
        calculator.calculate(_dt(3), EVENTS)
    )


def test_modifier_is_clamped() -> None:
    weights = ModifierWeights.model_validate({"tide": {"level": 2.0, "movement": 2.0}})
    assert TideModifierCalculator(weights).calculate(_dt(3), EVENTS) == 20.0
    for hour in range(12):
        value = TideModifierCalculator(weights).calculate(_dt(hour, 30), EVENTS)
        assert -20.0 <= value <= 20.0
