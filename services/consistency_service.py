"""
Consistency metrics.

Standard deviation and coefficient of variation over a window of games,
mapped to a letter grade. Windows shorter than the minimum sample return
None rather than a number nobody should rank on.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Optional

from schemas.analytics import ConsistencyGrade, ConsistencyMetric
from services.rolling_service import mean, rolling_average, take_window

MIN_CONSISTENCY_GAMES = 5

# (upper CV bound, grade), scanned low to high; first match wins
GRADE_THRESHOLDS: tuple[tuple[float, ConsistencyGrade], ...] = (
    (0.10, ConsistencyGrade.A_PLUS),
    (0.15, ConsistencyGrade.A),
    (0.20, ConsistencyGrade.A_MINUS),
    (0.25, ConsistencyGrade.B_PLUS),
    (0.30, ConsistencyGrade.B),
    (0.35, ConsistencyGrade.B_MINUS),
    (0.40, ConsistencyGrade.C_PLUS),
    (0.45, ConsistencyGrade.C),
    (0.50, ConsistencyGrade.C_MINUS),
    (0.60, ConsistencyGrade.D),
    (math.inf, ConsistencyGrade.F),
)


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for an empty sequence."""
    avg = mean(values)
    if avg is None:
        return 0.0
    variance = sum((x - avg) ** 2 for x in values) / len(values)
    return math.sqrt(variance)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Standard deviation over mean; 0.0 for a zero mean or empty input."""
    avg = mean(values)
    if not avg:
        return 0.0
    return standard_deviation(values) / avg


def consistency_grade(cv: float) -> ConsistencyGrade:
    """Map a coefficient of variation to its grade."""
    for upper_bound, grade in GRADE_THRESHOLDS:
        if cv <= upper_bound:
            return grade
    return ConsistencyGrade.F


def consistency(
    values_window: Sequence[float],
    min_games: int = MIN_CONSISTENCY_GAMES,
    window: Optional[int] = None,
) -> Optional[ConsistencyMetric]:
    """
    Build the consistency metric for one window of values.

    Args:
        values_window: Per-game values for the window, newest first
        min_games: Minimum number of games required
        window: Window length, recorded on the result

    Returns:
        ConsistencyMetric, or None if the window has fewer than ``min_games``
    """
    values = list(values_window)
    if len(values) < min_games:
        return None

    # Validates every value is numeric
    rolling_average(values)

    cv = coefficient_of_variation(values)
    return ConsistencyMetric(
        std_dev=standard_deviation(values),
        coefficient_of_variation=cv,
        grade=consistency_grade(cv),
        games=len(values),
        window=window,
    )


def consistency_by_window(
    ordered_values: Sequence[float],
    windows: Iterable[int] = (7, 14, 30),
    min_games: int = MIN_CONSISTENCY_GAMES,
) -> dict[int, Optional[ConsistencyMetric]]:
    """Consistency for each trailing window of a newest-first history."""
    return {
        window: consistency(take_window(ordered_values, window), min_games, window=window)
        for window in windows
    }
