"""
Rolling averages over newest-first game sequences.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Optional, Union

from core.errors import ValidationError
from schemas.analytics import RollingAverages

# Window value meaning "every game we have"
SEASON_WINDOW = "all"

Window = Union[int, str, None]


def validate_window(window: Window) -> Optional[int]:
    """
    Normalize a window to a game count, or None for the full season.

    Raises:
        ValidationError: If the window is not a positive int or "all"
    """
    if window is None or window == SEASON_WINDOW:
        return None
    if isinstance(window, bool) or not isinstance(window, int):
        raise ValidationError(f"window must be a positive int or '{SEASON_WINDOW}'", field="window")
    if window <= 0:
        raise ValidationError("window must be greater than zero", field="window")
    return window


def take_window(ordered_values: Sequence[float], window: Window) -> list[float]:
    """Return the newest ``window`` entries (all of them if fewer exist)."""
    size = validate_window(window)
    values = list(ordered_values)
    if size is None:
        return values
    return values[:size]


def _check_values(values: Iterable[float]) -> None:
    for index, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"expected a number, got {type(value).__name__}", field=f"values[{index}]"
            )
        if math.isnan(value) or math.isinf(value):
            raise ValidationError("expected a finite number", field=f"values[{index}]")


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def rolling_average(ordered_values: Sequence[float], window: Window = SEASON_WINDOW) -> Optional[float]:
    """
    Average of the newest ``window`` values.

    Args:
        ordered_values: Per-game values, newest first
        window: Game count, or "all" for season-to-date

    Returns:
        The mean, or None when there are no values
    """
    sample = take_window(ordered_values, window)
    _check_values(sample)
    return mean(sample)


def rolling_averages(
    ordered_values: Sequence[float],
    windows: Iterable[int] = (7, 14, 30),
) -> RollingAverages:
    """Season average plus one average per trailing window."""
    values = list(ordered_values)
    return RollingAverages(
        season_average=rolling_average(values, SEASON_WINDOW),
        window_averages={
            window: rolling_average(values, window) for window in windows
        },
        games_played=len(values),
    )
