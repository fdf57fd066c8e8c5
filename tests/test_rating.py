"""Daily rating classifier tests."""

from __future__ import annotations

import pytest

from solunar_activity.scoring.rating import average_score, classify_day


@pytest.mark.parametrize(
    ("mean", "expected"),
    [
        (80.0, "Excellent"),
        (79.999, "Good"),
        (60.0, "Good"),
        (40.0, "Fair"),
        (39.999, "Poor"),
        (0.0, "Poor"),
        (100.0, "Excellent"),
    ],
)
def test_rating_boundaries(mean: float, expected: str) -> None:
    assert classify_day([mean]) == expected


def test_rating_uses_arithmetic_mean() -> None:
    assert classify_day([100, 60]) == "Excellent"
    assert classify_day([100, 59]) == "Good"


def test_empty_scores_rate_poor() -> None:
    assert average_score([]) == 0.0
    assert classify_day([]) == "Poor"
