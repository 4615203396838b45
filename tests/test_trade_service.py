"""
Tests for trade valuation and the trade analysis service.
"""

import asyncio

import pytest

from schemas.analytics import (
    ConsistencyGrade,
    ConsistencyMetric,
    PlayerMetrics,
    RollingAverages,
    TrendDirection,
    TrendMetric,
    TrendSignal,
)
from schemas.common import ApiStatus
from schemas.stats import InjuryStatus
from schemas.trade import TradePlayer, TradeRecommendation
from services.trade_service import (
    TradeService,
    analyze_trade,
    composite_value,
    health_score,
    player_value,
    replacement_value,
    trade_player_from_metrics,
    trade_recommendation,
)


def steady(player_id, season_average, **fields):
    """A perfectly consistent, flat-trending, healthy player."""
    return TradePlayer(
        player_id=player_id,
        name=player_id.upper(),
        season_average=season_average,
        coefficient_of_variation=0.0,
        trend_value=0.0,
        **fields,
    )


class TestCompositeValue:
    """Tests for value composition."""

    def test_components(self):
        # 20*0.5 + 1.0*100*0.2 + 0.5*100*0.2 + 1.0*100*0.1
        assert composite_value(20.0, 0.0, 0.0, 1.0) == pytest.approx(50.0)

    def test_consistency_rewards_low_cv(self):
        assert composite_value(20.0, 0.1, 0.0, 1.0) > composite_value(20.0, 0.5, 0.0, 1.0)

    @pytest.mark.parametrize(
        "status, expected",
        [
            (InjuryStatus.HEALTHY, 1.0),
            (InjuryStatus.DAY_TO_DAY, 0.9),
            (InjuryStatus.QUESTIONABLE, 0.75),
            (InjuryStatus.DOUBTFUL, 0.25),
            (InjuryStatus.OUT, 0.0),
            (None, 1.0),
        ],
    )
    def test_health_scores(self, status, expected):
        assert health_score(status) == expected

    def test_missing_signals_use_defaults(self):
        player = TradePlayer(player_id="p1", name="P1")
        # 0 + (1/1.5)*20 + 0.5*20 + 1.0*10
        assert player_value(player) == pytest.approx(20 / 1.5 + 20.0)

    def test_trend_clamped(self):
        wild = steady("p1", 20.0).model_copy(update={"trend_value": 3.0})
        capped = steady("p1", 20.0).model_copy(update={"trend_value": 1.0})
        assert player_value(wild) == player_value(capped)


class TestReplacementValue:
    """Tests for replacement-level value."""

    def test_averages_players_after_top_tier(self):
        averages = [float(v) for v in range(60, 0, -1)]
        assert replacement_value(averages) == 5.5

    def test_ignores_missing_averages(self):
        averages = [float(v) for v in range(60, 0, -1)] + [None]
        assert replacement_value(averages) == 5.5

    def test_small_league_is_zero(self):
        assert replacement_value([30.0, 20.0]) == 0.0


class TestAnalyzeTrade:
    """Tests for analyze_trade()."""

    def test_two_for_one(self):
        analysis = analyze_trade(
            [steady("a", 40.0)],
            [steady("b", 10.0), steady("c", 10.0)],
            replacement_level=10.0,
        )
        assert analysis.details.value_in == pytest.approx(60.0)
        assert analysis.details.value_out == pytest.approx(90.0)
        assert analysis.details.slot_difference == 1
        assert analysis.details.slot_value == pytest.approx(5.0)
        assert analysis.net_value == pytest.approx(-25.0)
        assert analysis.recommendation == TradeRecommendation.DECLINE
        assert analysis.confidence == pytest.approx(0.25)
        assert analysis.reasoning[0] == (
            "This trade appears unfavorable with a net value of -25.0 points."
        )
        assert "Trade creates 1 additional roster slot(s), valued at 5.0 points." in analysis.reasoning

    def test_even_trade_is_neutral(self):
        analysis = analyze_trade([steady("a", 20.0)], [steady("b", 20.0)])
        assert analysis.net_value == 0.0
        assert analysis.recommendation == TradeRecommendation.NEUTRAL
        assert analysis.details.slot_value == 0.0

    def test_decision_band(self):
        assert trade_recommendation(5.0) == TradeRecommendation.NEUTRAL
        assert trade_recommendation(5.01) == TradeRecommendation.ACCEPT
        assert trade_recommendation(-5.0) == TradeRecommendation.NEUTRAL
        assert trade_recommendation(-5.01) == TradeRecommendation.DECLINE

    def test_confidence_capped(self):
        analysis = analyze_trade([steady("a", 500.0)], [steady("b", 10.0)])
        assert analysis.recommendation == TradeRecommendation.ACCEPT
        assert analysis.confidence == 0.95

    def test_hot_and_injured_players_noted(self):
        analysis = analyze_trade(
            [steady("x", 20.0, is_hot=True, injury_status=InjuryStatus.QUESTIONABLE)],
            [steady("y", 20.0, injury_status=InjuryStatus.OUT)],
        )
        assert "Acquiring trending players: X." in analysis.reasoning
        assert "Health concern: Acquiring injured players X (QUESTIONABLE)." in analysis.reasoning
        assert "Health benefit: Trading away injured players Y (OUT)." in analysis.reasoning

    def test_trade_player_from_metrics(self):
        metrics = PlayerMetrics(
            player_id="p1",
            fantasy_averages=RollingAverages(season_average=30.0, games_played=20),
            consistency={
                14: ConsistencyMetric(
                    std_dev=3.0,
                    coefficient_of_variation=0.1,
                    grade=ConsistencyGrade.A_PLUS,
                    games=14,
                    window=14,
                )
            },
            fantasy_trend=TrendSignal(
                metric=TrendMetric.FANTASY_POINTS,
                direction=TrendDirection.UP,
                trend_value=0.3,
                recent_average=39.0,
                baseline_average=30.0,
                hot_factor=0.3,
                is_hot=True,
            ),
        )
        player = trade_player_from_metrics("p1", "P1", metrics, InjuryStatus.DOUBTFUL)
        assert player.coefficient_of_variation == 0.1
        assert player.is_hot is True
        assert player.health_score == 0.25
        assert player.calculated_value == pytest.approx(
            15.0 + (1 / 1.1) * 20 + 0.65 * 20 + 0.25 * 10
        )

    def test_player_without_metrics(self):
        player = trade_player_from_metrics("p1", "P1", None)
        assert player.season_average is None
        assert player.calculated_value == pytest.approx(20 / 1.5 + 20.0)


class TestTradeService:
    """Tests for TradeService.analyze() over stored box scores."""

    @pytest.fixture
    def league(self, add_player):
        add_player("a", "BOS", 40)
        add_player("b", "NYK", 10)
        add_player("c", "MIA", 10)

    def test_analyze(self, league):
        resp = asyncio.run(TradeService.analyze(["a"], ["b", "c"]))
        assert resp.status == ApiStatus.SUCCESS
        assert resp.data.net_value == pytest.approx(-30.0)
        assert resp.data.recommendation == TradeRecommendation.DECLINE
        assert [p.player_id for p in resp.data.players_out] == ["b", "c"]
        assert resp.data.players_in[0].team == "BOS"

    def test_unknown_player(self, league):
        resp = asyncio.run(TradeService.analyze(["a"], ["zz"]))
        assert resp.status == ApiStatus.NOT_FOUND
        assert "zz" in resp.message

    def test_empty_trade(self, database):
        resp = asyncio.run(TradeService.analyze([], []))
        assert resp.status == ApiStatus.VALIDATION_ERROR

    def test_unknown_scoring_config(self, league):
        resp = asyncio.run(TradeService.analyze(["a"], ["b"], scoring_config_id="nope"))
        assert resp.status == ApiStatus.VALIDATION_ERROR
        assert "scoring_config_id" in resp.message
