"""
Tests for per-player metric computation and batch isolation.
"""

import random

import pytest
from structlog.testing import capture_logs

from schemas.analytics import AnalyticsConfig, ConsistencyGrade, TrendDirection
from services.player_metrics_service import compute_metrics_batch, compute_player_metrics
from services.scoring_service import DEFAULT_SCORING_WEIGHTS


@pytest.fixture
def config():
    return AnalyticsConfig()


@pytest.fixture
def breakout_history(make_stat_line):
    """20 games: 13 at 20 points, then the newest 7 at 30 points."""
    return [
        make_stat_line(n=n, pts=30 if n > 13 else 20, min=30.0)
        for n in range(1, 21)
    ]


class TestComputePlayerMetrics:
    """Tests for compute_player_metrics()."""

    def test_history_sorted_newest_first(self, breakout_history, config):
        shuffled = list(breakout_history)
        random.Random(3).shuffle(shuffled)
        metrics = compute_player_metrics("p1", shuffled, DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.fantasy_scores[0].game_id == "p1-020"
        assert metrics.fantasy_scores[-1].game_id == "p1-001"

    def test_rolling_averages(self, breakout_history, config):
        metrics = compute_player_metrics("p1", breakout_history, DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.season_average == 23.5
        assert metrics.fantasy_averages.last(7) == 30.0
        assert metrics.fantasy_averages.last(14) == 25.0
        assert metrics.minutes_averages.season_average == 30.0

    def test_consistency_grade_from_grade_window(self, breakout_history, config):
        metrics = compute_player_metrics("p1", breakout_history, DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.consistency[14].coefficient_of_variation == 0.2
        assert metrics.consistency_grade == ConsistencyGrade.A_MINUS
        assert metrics.consistency[7].grade == ConsistencyGrade.A_PLUS

    def test_trends(self, breakout_history, config):
        metrics = compute_player_metrics("p1", breakout_history, DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.fantasy_trend.trend_value == pytest.approx(0.5)
        assert metrics.fantasy_trend.is_hot is True
        assert metrics.hot_factor == pytest.approx(0.5)
        assert metrics.minutes_trend.direction == TrendDirection.STABLE
        assert metrics.minutes_trend_value == 0.0

    def test_same_inputs_same_outputs(self, breakout_history, config):
        first = compute_player_metrics("p1", breakout_history, DEFAULT_SCORING_WEIGHTS, config)
        second = compute_player_metrics(
            "p1", list(reversed(breakout_history)), DEFAULT_SCORING_WEIGHTS, config
        )
        assert first == second

    def test_short_history(self, make_stat_line, config):
        lines = [make_stat_line(n=n, pts=10) for n in range(1, 4)]
        metrics = compute_player_metrics("p1", lines, DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.season_average == 10.0
        assert metrics.consistency_grade is None
        assert all(metric is None for metric in metrics.consistency.values())
        assert metrics.fantasy_trend is None
        assert metrics.hot_factor == 0.0

    def test_empty_history(self, config):
        metrics = compute_player_metrics("p1", [], DEFAULT_SCORING_WEIGHTS, config)
        assert metrics.season_average is None
        assert metrics.fantasy_scores == []


class TestComputeMetricsBatch:
    """Tests for compute_metrics_batch()."""

    def test_failure_is_logged_and_skipped(self, breakout_history, config):
        histories = {"p1": breakout_history, "bad": [object(), object()]}
        with capture_logs() as logs:
            metrics, failed = compute_metrics_batch(histories, DEFAULT_SCORING_WEIGHTS, config)

        assert list(metrics) == ["p1"]
        assert failed == ["bad"]
        warnings = [entry for entry in logs if entry["event"] == "player_metrics_failed"]
        assert len(warnings) == 1
        assert warnings[0]["player_id"] == "bad"
        assert warnings[0]["log_level"] == "warning"

    def test_parallel_matches_sequential(self, make_stat_line, config):
        histories = {
            f"p{i}": [make_stat_line(player_id=f"p{i}", n=n, pts=10 + i + n % 3) for n in range(1, 12)]
            for i in range(6)
        }
        sequential, _ = compute_metrics_batch(histories, DEFAULT_SCORING_WEIGHTS, config)
        parallel, _ = compute_metrics_batch(
            histories, DEFAULT_SCORING_WEIGHTS, config, max_workers=4
        )
        assert sequential == parallel
