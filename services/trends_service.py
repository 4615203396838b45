"""
Trend detection.

Compares a recent window against a baseline window for one metric and
labels the direction. For fantasy points it also derives the one-sided
hot factor used by the waiver ranker.
"""

from collections.abc import Sequence
from typing import Optional

from schemas.analytics import TrendDirection, TrendMetric, TrendSignal
from services.rolling_service import Window, rolling_average, take_window, validate_window

HOT_THRESHOLD = 0.15

# Changes inside +/- this band are reported as STABLE
TREND_DEAD_BAND = 0.05


def trend_direction(trend_value: float) -> TrendDirection:
    if trend_value > TREND_DEAD_BAND:
        return TrendDirection.UP
    if trend_value < -TREND_DEAD_BAND:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def hot_factor(trend_value: float) -> float:
    """Positive part of the trend; a cooling player is simply not hot."""
    return max(trend_value, 0.0)


def trend(
    recent_window: Sequence[float],
    baseline_window: Sequence[float],
    metric: TrendMetric = TrendMetric.FANTASY_POINTS,
    hot_threshold: float = HOT_THRESHOLD,
) -> Optional[TrendSignal]:
    """
    Compare recent performance to a baseline.

    Args:
        recent_window: Recent per-game values (e.g. last 7 games)
        baseline_window: Baseline values (e.g. the rest of the season)
        metric: Which metric the values describe
        hot_threshold: Hot factor above which a player is flagged hot

    Returns:
        TrendSignal, or None if either window is empty
    """
    recent_avg = rolling_average(recent_window)
    baseline_avg = rolling_average(baseline_window)
    if recent_avg is None or baseline_avg is None:
        return None

    if baseline_avg == 0:
        trend_value = 0.0
    else:
        trend_value = (recent_avg - baseline_avg) / baseline_avg

    signal = {
        "metric": metric,
        "direction": trend_direction(trend_value),
        "trend_value": trend_value,
        "recent_average": recent_avg,
        "baseline_average": baseline_avg,
    }

    if metric == TrendMetric.FANTASY_POINTS:
        factor = hot_factor(trend_value)
        signal["hot_factor"] = factor
        signal["is_hot"] = factor > hot_threshold

    return TrendSignal(**signal)


def trend_windows(
    ordered_values: Sequence[float],
    recent_games: int = 7,
    baseline_games: Window = None,
) -> tuple[list[float], list[float]]:
    """
    Split a newest-first history into non-overlapping recent and baseline windows.

    The baseline starts after the recent window and covers ``baseline_games``
    games, or every remaining game when that is None / "all".
    """
    recent_size = validate_window(recent_games) or len(ordered_values)
    values = list(ordered_values)
    recent = values[:recent_size]
    baseline = take_window(values[recent_size:], baseline_games)
    return recent, baseline


def detect_trend(
    ordered_values: Sequence[float],
    metric: TrendMetric = TrendMetric.FANTASY_POINTS,
    recent_games: int = 7,
    baseline_games: Window = None,
    hot_threshold: float = HOT_THRESHOLD,
) -> Optional[TrendSignal]:
    """Split a history with trend_windows() and run trend() on it."""
    recent, baseline = trend_windows(ordered_values, recent_games, baseline_games)
    return trend(recent, baseline, metric=metric, hot_threshold=hot_threshold)
