"""
Query and persistence helpers shared by the pipelines and read-side services.

Everything here is synchronous peewee work; async callers run it through
asyncio.to_thread().
"""

from collections.abc import Mapping
from datetime import date
from typing import NamedTuple, Optional

from core.errors import ValidationError
from core.logging import get_logger
from db.base import db
from db.models import (
    Player,
    PlayerConsistency,
    PlayerFantasyScore,
    PlayerGameStats,
    PlayerInjury,
    PlayerRollingStats,
    PlayerTrend,
    ScoringConfiguration,
)
from schemas.analytics import AnalyticsConfig, PlayerMetrics
from schemas.stats import InjuryStatus, ScoringWeights
from schemas.waiver import WaiverPlayer
from services.player_metrics_service import compute_metrics_batch
from services.scoring_service import (
    DEFAULT_SCORING_WEIGHTS,
    resolve_scoring_weights,
    validate_scoring_weights,
)


class TradeInputs(NamedTuple):
    players: dict[str, WaiverPlayer]
    metrics: dict[str, PlayerMetrics]
    season_averages: dict[str, float]
    weights: ScoringWeights


def load_weight_sets() -> list[ScoringWeights]:
    """
    Stored weight-sets that pass the bounds check.

    Out-of-range sets are logged and skipped so one bad configuration
    cannot block a batch.
    """
    log = get_logger("repository")
    valid = []
    for weights in ScoringConfiguration.get_weight_sets():
        try:
            validate_scoring_weights(weights)
        except ValidationError as e:
            log.warning("scoring_config_invalid", scoring_config_id=weights.id, error=str(e))
            continue
        valid.append(weights)
    return valid


def load_scoring_weights(
    scoring_config_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> ScoringWeights:
    """
    Resolve the weight-set to score with.

    Raises:
        ValidationError: If ``scoring_config_id`` names no valid weight-set
    """
    weight_sets = load_weight_sets()
    if scoring_config_id is None:
        return resolve_scoring_weights(weight_sets, owner_id)
    if scoring_config_id == DEFAULT_SCORING_WEIGHTS.id:
        return DEFAULT_SCORING_WEIGHTS
    for weights in weight_sets:
        if weights.id == scoring_config_id:
            return weights
    raise ValidationError(
        f"unknown scoring configuration '{scoring_config_id}'", field="scoring_config_id"
    )


def load_roster_players(player_ids: Optional[list[str]] = None) -> dict[str, WaiverPlayer]:
    """
    Players with their current injury status.

    Args:
        player_ids: Look up these players; all active players if None
    """
    if player_ids is None:
        rows = Player.get_active_players()
    else:
        rows = list(Player.get_players(player_ids).values())
    statuses = PlayerInjury.get_statuses([p.id for p in rows])
    return {
        p.id: WaiverPlayer(
            player_id=p.id,
            name=p.name,
            team=p.team,
            injury_status=statuses.get(p.id, InjuryStatus.HEALTHY),
        )
        for p in rows
    }


def season_averages(metrics: Mapping[str, PlayerMetrics]) -> dict[str, float]:
    return {
        pid: m.season_average
        for pid, m in metrics.items()
        if m.season_average is not None
    }


def load_trade_inputs(
    player_ids: list[str],
    scoring_config_id: Optional[str],
    config: AnalyticsConfig,
) -> TradeInputs:
    """
    Everything a trade analysis needs, computed from stored box scores.

    Metrics are computed league-wide because the replacement level depends
    on where every player ranks, not only the ones in the trade.
    """
    weights = load_scoring_weights(scoring_config_id)
    metrics, _ = compute_metrics_batch(PlayerGameStats.get_histories(), weights, config)
    return TradeInputs(
        players=load_roster_players(list(dict.fromkeys(player_ids))),
        metrics=metrics,
        season_averages=season_averages(metrics),
        weights=weights,
    )


def save_player_metrics(metrics: PlayerMetrics, as_of_date: date) -> int:
    """
    Upsert one player's derived outputs for a date.

    Returns:
        Number of rows written
    """
    config_id = metrics.scoring_config_id or DEFAULT_SCORING_WEIGHTS.id
    with db.atomic():
        written = PlayerFantasyScore.upsert_scores(metrics.fantasy_scores, config_id)
        written += PlayerRollingStats.upsert_metrics(metrics, config_id, as_of_date)
        written += PlayerConsistency.upsert_metrics(metrics, config_id, as_of_date)
        written += PlayerTrend.upsert_metrics(metrics, config_id, as_of_date)
    return written
