"""
Trade value composition and trade analysis.
"""

import asyncio
from collections.abc import Iterable, Sequence
from typing import NamedTuple, Optional

from core.errors import ValidationError
from core.logging import get_logger
from core.settings import settings
from db.repository import load_trade_inputs
from schemas.analytics import AnalyticsConfig, PlayerMetrics
from schemas.common import ApiStatus
from schemas.stats import InjuryStatus
from schemas.trade import (
    TradeAnalysis,
    TradeAnalysisResp,
    TradeDetails,
    TradePlayer,
    TradeRecommendation,
)


class TradeValueWeights(NamedTuple):
    fantasy_points: float = 0.5
    consistency: float = 0.2
    trend: float = 0.2
    health: float = 0.1


TRADE_VALUE_WEIGHTS = TradeValueWeights()

# Net values inside +/- this band are NEUTRAL
TRADE_DECISION_BAND = 5.0

# Used when a player has no consistency metric yet
DEFAULT_COEFFICIENT_OF_VARIATION = 0.5

REPLACEMENT_EXCLUDE_TOP_N = 50
REPLACEMENT_SAMPLE_SIZE = 10

HEALTH_SCORES = {
    InjuryStatus.HEALTHY: 1.0,
    InjuryStatus.DAY_TO_DAY: 0.9,
    InjuryStatus.QUESTIONABLE: 0.75,
    InjuryStatus.DOUBTFUL: 0.25,
    InjuryStatus.OUT: 0.0,
}


def health_score(injury_status: Optional[InjuryStatus]) -> float:
    if injury_status is None:
        return 1.0
    return HEALTH_SCORES[InjuryStatus(injury_status)]


def composite_value(
    season_avg: float,
    coefficient_of_variation: float,
    trend_value: float,
    health_score: float,
    weights: TradeValueWeights = TRADE_VALUE_WEIGHTS,
) -> float:
    """
    Blend production, consistency, trend and health into one trade value.

    Consistency becomes 1 / (1 + CV) and trend becomes (trend + 1) / 2;
    both, along with health, are put on a 0-100 scale while fantasy points
    stay on their native scale. Clamping trend to [-1, 1] is up to the caller.
    """
    normalized_consistency = 1 / (1 + coefficient_of_variation)
    normalized_trend = (trend_value + 1) / 2
    return (
        season_avg * weights.fantasy_points
        + normalized_consistency * 100 * weights.consistency
        + normalized_trend * 100 * weights.trend
        + health_score * 100 * weights.health
    )


def player_value(player: TradePlayer, weights: TradeValueWeights = TRADE_VALUE_WEIGHTS) -> float:
    """Composite value for one player, filling in defaults for missing signals."""
    season_avg = player.season_average or 0.0
    cv = player.coefficient_of_variation
    if cv is None:
        cv = DEFAULT_COEFFICIENT_OF_VARIATION
    trend_value = min(1.0, max(-1.0, player.trend_value or 0.0))
    return composite_value(season_avg, cv, trend_value, player.health_score, weights)


def trade_player_from_metrics(
    player_id: str,
    name: str,
    metrics: Optional[PlayerMetrics],
    injury_status: InjuryStatus = InjuryStatus.HEALTHY,
    team: Optional[str] = None,
    grade_window: int = 14,
) -> TradePlayer:
    """Collect the trade inputs for a player from their computed metrics."""
    season_average = None
    cv = None
    trend_value = None
    is_hot = False

    if metrics is not None:
        season_average = metrics.season_average
        window_metric = metrics.consistency.get(grade_window)
        if window_metric is not None:
            cv = window_metric.coefficient_of_variation
        if metrics.fantasy_trend is not None:
            trend_value = metrics.fantasy_trend.trend_value
            is_hot = bool(metrics.fantasy_trend.is_hot)

    player = TradePlayer(
        player_id=player_id,
        name=name,
        team=team,
        injury_status=injury_status,
        season_average=season_average,
        coefficient_of_variation=cv,
        trend_value=trend_value,
        is_hot=is_hot,
        health_score=health_score(injury_status),
    )
    return player.model_copy(update={"calculated_value": player_value(player)})


def replacement_value(
    season_averages: Iterable[Optional[float]],
    exclude_top_n: int = REPLACEMENT_EXCLUDE_TOP_N,
    sample_size: int = REPLACEMENT_SAMPLE_SIZE,
) -> float:
    """
    Average season output of a replacement-level (waiver wire) player.

    Skips the top ``exclude_top_n`` players and averages the next
    ``sample_size``. Returns 0.0 when nobody is left.
    """
    ranked = sorted((avg for avg in season_averages if avg is not None), reverse=True)
    pool = ranked[exclude_top_n:exclude_top_n + sample_size]
    if not pool:
        return 0.0
    return sum(pool) / len(pool)


def trade_recommendation(net_value: float) -> TradeRecommendation:
    if net_value > TRADE_DECISION_BAND:
        return TradeRecommendation.ACCEPT
    if net_value < -TRADE_DECISION_BAND:
        return TradeRecommendation.DECLINE
    return TradeRecommendation.NEUTRAL


def _trade_reasoning(
    net_value: float,
    details: TradeDetails,
    players_in: Sequence[TradePlayer],
    players_out: Sequence[TradePlayer],
) -> list[str]:
    reasoning = []

    if net_value > TRADE_DECISION_BAND:
        reasoning.append(f"This trade appears favorable with a net value of +{net_value:.1f} points.")
    elif net_value < -TRADE_DECISION_BAND:
        reasoning.append(f"This trade appears unfavorable with a net value of {net_value:.1f} points.")
    else:
        reasoning.append(f"This trade is relatively neutral with a net value of {net_value:.1f} points.")

    reasoning.append(f"Players received have a combined value of {details.value_in:.1f} points.")
    reasoning.append(f"Players traded away have a combined value of {details.value_out:.1f} points.")

    if details.slot_difference > 0:
        reasoning.append(
            f"Trade creates {details.slot_difference} additional roster slot(s), "
            f"valued at {details.slot_value:.1f} points."
        )
    elif details.slot_difference < 0:
        reasoning.append(
            f"Trade costs {abs(details.slot_difference)} roster slot(s), "
            f"valued at {details.slot_value:.1f} points."
        )

    hot_in = [p.name for p in players_in if p.is_hot]
    hot_out = [p.name for p in players_out if p.is_hot]
    if hot_in:
        reasoning.append(f"Acquiring trending players: {', '.join(hot_in)}.")
    if hot_out:
        reasoning.append(f"Trading away trending players: {', '.join(hot_out)}.")

    injured_in = [f"{p.name} ({p.injury_status.value})" for p in players_in if p.injury_status != InjuryStatus.HEALTHY]
    injured_out = [f"{p.name} ({p.injury_status.value})" for p in players_out if p.injury_status != InjuryStatus.HEALTHY]
    if injured_in:
        reasoning.append(f"Health concern: Acquiring injured players {', '.join(injured_in)}.")
    if injured_out:
        reasoning.append(f"Health benefit: Trading away injured players {', '.join(injured_out)}.")

    return reasoning


def analyze_trade(
    players_in: Sequence[TradePlayer],
    players_out: Sequence[TradePlayer],
    replacement_level: float = 0.0,
    weights: TradeValueWeights = TRADE_VALUE_WEIGHTS,
) -> TradeAnalysis:
    """
    Compare the value received against the value sent.

    When the sides differ in size, each roster slot freed (or consumed) is
    worth the replacement-level average scaled by the fantasy-points weight.
    """
    players_in = [p.model_copy(update={"calculated_value": player_value(p, weights)}) for p in players_in]
    players_out = [p.model_copy(update={"calculated_value": player_value(p, weights)}) for p in players_out]

    value_in = sum(p.calculated_value for p in players_in)
    value_out = sum(p.calculated_value for p in players_out)

    slot_difference = len(players_out) - len(players_in)
    slot_value = 0.0
    if slot_difference != 0:
        slot_value = replacement_level * slot_difference * weights.fantasy_points

    net_value = value_in - value_out + slot_value
    details = TradeDetails(
        value_in=value_in,
        value_out=value_out,
        slot_value=slot_value,
        slot_difference=slot_difference,
    )

    return TradeAnalysis(
        players_in=players_in,
        players_out=players_out,
        net_value=net_value,
        recommendation=trade_recommendation(net_value),
        confidence=min(0.95, abs(net_value) / 100),
        details=details,
        reasoning=_trade_reasoning(net_value, details, players_in, players_out),
    )


class TradeService:
    """Trade analysis over stored player histories."""

    @staticmethod
    async def analyze(
        player_ids_in: list[str],
        player_ids_out: list[str],
        scoring_config_id: Optional[str] = None,
        config: Optional[AnalyticsConfig] = None,
    ) -> TradeAnalysisResp:
        """
        Analyze a trade proposal from stored stat histories.

        Args:
            player_ids_in: Players received
            player_ids_out: Players sent away
            scoring_config_id: Weight-set to score with; default set if None
            config: Analytics tunables; built from settings if None

        Returns:
            TradeAnalysisResp with the analysis or an error status
        """
        log = get_logger().bind(operation="analyze_trade")
        config = config or settings.analytics_config()

        if not player_ids_in and not player_ids_out:
            return TradeAnalysisResp(
                status=ApiStatus.VALIDATION_ERROR,
                message="A trade needs at least one player on either side",
                data=None,
            )

        try:
            inputs = await asyncio.to_thread(
                load_trade_inputs,
                list(player_ids_in) + list(player_ids_out),
                scoring_config_id,
                config,
            )

            missing = [pid for pid in list(player_ids_in) + list(player_ids_out) if pid not in inputs.players]
            if missing:
                return TradeAnalysisResp(
                    status=ApiStatus.NOT_FOUND,
                    message=f"Unknown player(s): {', '.join(missing)}",
                    data=None,
                )

            def side(ids: list[str]) -> list[TradePlayer]:
                return [
                    trade_player_from_metrics(
                        pid,
                        inputs.players[pid].name,
                        inputs.metrics.get(pid),
                        inputs.players[pid].injury_status,
                        team=inputs.players[pid].team,
                        grade_window=config.consistency_grade_window,
                    )
                    for pid in ids
                ]

            analysis = analyze_trade(
                side(player_ids_in),
                side(player_ids_out),
                replacement_level=replacement_value(inputs.season_averages.values()),
            )
            log.info(
                "trade_analyzed",
                net_value=round(analysis.net_value, 2),
                recommendation=analysis.recommendation.value,
            )
            return TradeAnalysisResp(
                status=ApiStatus.SUCCESS,
                message="Trade analysis complete",
                data=analysis,
            )

        except ValidationError as e:
            return TradeAnalysisResp(
                status=ApiStatus.VALIDATION_ERROR,
                message=str(e),
                data=None,
            )

        except Exception as e:
            log.error("trade_analysis_error", error=str(e))
            return TradeAnalysisResp(
                status=ApiStatus.ERROR,
                message="Failed to analyze trade",
                data=None,
            )
