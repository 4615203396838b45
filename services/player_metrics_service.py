"""
Per-player metric computation.

Pure batch step: given already-fetched stat histories, derive fantasy
scores, rolling averages, consistency and trends for each player. Players
are independent of each other, so a failure for one is logged and skipped
without affecting the rest.
"""

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from core.logging import get_logger
from schemas.analytics import AnalyticsConfig, PlayerMetrics, TrendMetric
from schemas.stats import ScoringWeights, StatLine
from services.consistency_service import consistency_by_window
from services.rolling_service import rolling_averages
from services.scoring_service import fantasy_score_history
from services.trends_service import detect_trend


def newest_first(stat_lines: Iterable[StatLine]) -> list[StatLine]:
    """Order a history newest first; same-day games by game id, descending."""
    return sorted(stat_lines, key=lambda s: (s.game_date, s.game_id), reverse=True)


def compute_player_metrics(
    player_id: str,
    stat_lines: Iterable[StatLine],
    weights: ScoringWeights,
    config: AnalyticsConfig,
) -> PlayerMetrics:
    """
    Derive every signal for one player under one weight-set.

    Args:
        player_id: Player the history belongs to
        stat_lines: The player's box scores, any order
        weights: Resolved scoring weights
        config: Analytics tunables

    Returns:
        PlayerMetrics; absent signals are None
    """
    history = newest_first(stat_lines)

    scores = fantasy_score_history(history, weights)
    fantasy_values = [s.fantasy_points for s in scores]
    minutes_values = [float(s.min) for s in history]

    windows = tuple(config.rolling_windows)
    consistency_windows = tuple(sorted(set(windows) | {config.consistency_grade_window}))
    consistency = consistency_by_window(
        fantasy_values, consistency_windows, min_games=config.min_consistency_games
    )
    grade_metric = consistency.get(config.consistency_grade_window)

    return PlayerMetrics(
        player_id=player_id,
        scoring_config_id=weights.id,
        fantasy_scores=scores,
        fantasy_averages=rolling_averages(fantasy_values, windows),
        minutes_averages=rolling_averages(minutes_values, windows),
        consistency=consistency,
        consistency_grade=grade_metric.grade if grade_metric else None,
        fantasy_trend=detect_trend(
            fantasy_values,
            metric=TrendMetric.FANTASY_POINTS,
            recent_games=config.trend_recent_games,
            baseline_games=config.trend_baseline_games,
            hot_threshold=config.hot_threshold,
        ),
        minutes_trend=detect_trend(
            minutes_values,
            metric=TrendMetric.MINUTES,
            recent_games=config.trend_recent_games,
            baseline_games=config.trend_baseline_games,
        ),
    )


def compute_metrics_batch(
    histories: Mapping[str, Iterable[StatLine]],
    weights: ScoringWeights,
    config: AnalyticsConfig,
    max_workers: Optional[int] = None,
) -> tuple[dict[str, PlayerMetrics], list[str]]:
    """
    Compute metrics for many players.

    Args:
        histories: player_id -> stat lines
        weights: Resolved scoring weights shared by the batch
        config: Analytics tunables
        max_workers: Fan out over a thread pool when > 1

    Returns:
        (metrics by player id, ids of players that failed)
    """
    log = get_logger("player_metrics").bind(scoring_config_id=weights.id)

    def compute(item):
        player_id, lines = item
        try:
            return player_id, compute_player_metrics(player_id, lines, weights, config)
        except Exception as e:
            log.warning("player_metrics_failed", player_id=player_id, error=str(e))
            return player_id, None

    items = sorted(histories.items(), key=lambda item: item[0])
    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(compute, items))
    else:
        outcomes = [compute(item) for item in items]

    results = {pid: metrics for pid, metrics in outcomes if metrics is not None}
    failed = [pid for pid, metrics in outcomes if metrics is None]
    return results, failed
