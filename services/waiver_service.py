"""
Waiver wire recommendations.

Scores each eligible free agent from four signals (projected points, hot
factor, minutes trend, matchup), ranks them deterministically, and explains
each pick in a short reasoning string.
"""

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any, Optional, Union

import pydantic

from core.errors import ValidationError
from core.logging import get_logger
from db.models import Game, WaiverRecommendation
from schemas.analytics import MatchupFavorability, PlayerMetrics, RankingWeights
from schemas.common import ApiStatus
from schemas.stats import GameResult, GameStatus, InjuryStatus
from schemas.waiver import (
    Recommendation,
    RecommendationCandidate,
    RecommendationSet,
    WaiverPlayer,
    WaiverRecommendationsResp,
)

DEFAULT_RANKING_WEIGHTS = RankingWeights(0.4, 0.3, 0.2, 0.1)

MAX_RECOMMENDATIONS = 10
DEFAULT_EXCLUDE_TOP_N = 50

# Scales fractional signals onto roughly the same range as fantasy points
HOT_FACTOR_SCALE = 100.0
MINUTES_TREND_SCALE = 100.0
MATCHUP_SCALE = 10.0

REASONING_SEPARATOR = "; "
FALLBACK_REASONING = "Replacement-level option with no standout signals"


def _ranking_weights(weights: Union[RankingWeights, Sequence[float]]) -> RankingWeights:
    values = tuple(weights)
    if len(values) != 4:
        raise ValidationError("expected four ranking weights", field="weights")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError("ranking weights must be numbers", field="weights")
    return RankingWeights(*values)


def _candidate(candidate: Any) -> RecommendationCandidate:
    if isinstance(candidate, RecommendationCandidate):
        return candidate
    try:
        return RecommendationCandidate.model_validate(candidate)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(first.get("msg", "invalid candidate"), field=field or None) from e


def recommendation_score(
    candidate: RecommendationCandidate,
    weights: Union[RankingWeights, Sequence[float]] = DEFAULT_RANKING_WEIGHTS,
    minutes_trend_scale: float = MINUTES_TREND_SCALE,
) -> float:
    """
    Weighted blend of the four waiver signals.

    Weights are not required to sum to 1 so callers can explore what-if
    weightings.
    """
    w = _ranking_weights(weights)
    return (
        w.projected_points * candidate.projected_points
        + w.hot_factor * (candidate.hot_factor * HOT_FACTOR_SCALE)
        + w.minutes_trend * (candidate.minutes_trend * minutes_trend_scale)
        + w.matchup_favorability * (candidate.matchup_favorability * MATCHUP_SCALE)
    )


def generate_reasoning(candidate: RecommendationCandidate) -> str:
    """Human-readable justification; never empty."""
    reasons: list[str] = []
    vs = f" vs {candidate.opponent}" if candidate.opponent else ""

    if candidate.projected_points > 20:
        reasons.append("High scoring potential")
    elif candidate.projected_points > 15:
        reasons.append("Solid fantasy production")
    elif candidate.projected_points > 10:
        reasons.append("Decent fantasy floor")

    if candidate.hot_factor > 0.2:
        reasons.append("Currently on a hot streak")
    elif candidate.hot_factor > 0.1:
        reasons.append("Playing above season average")

    if candidate.minutes_trend > 0.15:
        reasons.append("Major increase in minutes")
    elif candidate.minutes_trend > 0.05:
        reasons.append("Slight increase in playing time")
    elif candidate.minutes_trend < -0.15:
        reasons.append("Minutes trending downward")

    if candidate.matchup_favorability > 1.2:
        reasons.append(f"Excellent matchup{vs}")
    elif candidate.matchup_favorability > 1.1:
        reasons.append(f"Good matchup{vs}")
    elif candidate.matchup_favorability < 0.9:
        reasons.append(f"Challenging matchup{vs}")

    if candidate.injury_status == InjuryStatus.QUESTIONABLE:
        reasons.append("Questionable injury status - monitor closely")
    elif candidate.injury_status == InjuryStatus.DOUBTFUL:
        reasons.append("Doubtful injury status - risky play")

    if not reasons:
        return FALLBACK_REASONING
    return REASONING_SEPARATOR.join(reasons)


def rank(
    candidates: Iterable[Any],
    weights: Union[RankingWeights, Sequence[float]] = DEFAULT_RANKING_WEIGHTS,
    max_recommendations: Optional[int] = MAX_RECOMMENDATIONS,
    minutes_trend_scale: float = MINUTES_TREND_SCALE,
) -> list[Recommendation]:
    """
    Rank waiver candidates.

    The whole pool is ranked before truncating to ``max_recommendations``.
    Ties on score fall back to projected points (descending) and then
    player id (ascending), so input order never matters. Excluding OUT
    players is the caller's job.

    Args:
        candidates: RecommendationCandidate instances or equivalent mappings
        weights: Four weights in signal order; not required to sum to 1
        max_recommendations: Keep only the top N; None keeps everyone

    Raises:
        ValidationError: On malformed candidates, weights or limit
    """
    w = _ranking_weights(weights)
    if max_recommendations is not None and (
        isinstance(max_recommendations, bool)
        or not isinstance(max_recommendations, int)
        or max_recommendations < 0
    ):
        raise ValidationError("must be a non-negative int", field="max_recommendations")

    scored = [
        (recommendation_score(c, w, minutes_trend_scale), c)
        for c in map(_candidate, candidates)
    ]
    scored.sort(key=lambda item: (-item[0], -item[1].projected_points, item[1].player_id))

    if max_recommendations is not None:
        scored = scored[:max_recommendations]

    return [
        Recommendation(
            rank=position,
            player_id=c.player_id,
            player_name=c.player_name,
            team=c.team,
            opponent=c.opponent,
            recommendation_score=score,
            projected_points=c.projected_points,
            hot_factor=c.hot_factor,
            minutes_trend=c.minutes_trend,
            matchup_favorability=c.matchup_favorability,
            injury_status=c.injury_status,
            reasoning=generate_reasoning(c),
        )
        for position, (score, c) in enumerate(scored, start=1)
    ]


def build_team_matchups(games: Iterable[GameResult]) -> dict[str, str]:
    """Map each team playing in ``games`` to its opponent, skipping cancelled games."""
    matchups: dict[str, str] = {}
    for game in games:
        if game.status == GameStatus.CANCELED:
            continue
        matchups[game.home_team] = game.away_team
        matchups[game.away_team] = game.home_team
    return matchups


def top_player_ids(
    season_averages: Mapping[str, Optional[float]],
    exclude_top_n: int = DEFAULT_EXCLUDE_TOP_N,
) -> set[str]:
    """Ids of the top-N players by season average (assumed rostered)."""
    if exclude_top_n <= 0:
        return set()
    ranked = sorted(
        ((pid, avg) for pid, avg in season_averages.items() if avg is not None),
        key=lambda item: (-item[1], item[0]),
    )
    return {pid for pid, _ in ranked[:exclude_top_n]}


def build_candidates(
    players: Iterable[WaiverPlayer],
    metrics: Mapping[str, PlayerMetrics],
    team_matchups: Mapping[str, str],
    matchups: Mapping[str, MatchupFavorability],
    excluded_ids: Iterable[str] = (),
) -> list[RecommendationCandidate]:
    """
    Turn per-player metrics into ranker input.

    Skips players who are OUT, excluded (top tier), not playing on the
    date, or have no scoring history to project from.
    """
    excluded = set(excluded_ids)
    candidates = []

    for player in players:
        if player.player_id in excluded or player.injury_status == InjuryStatus.OUT:
            continue

        opponent = team_matchups.get(player.team) if player.team else None
        if opponent is None:
            continue

        player_metrics = metrics.get(player.player_id)
        if player_metrics is None or player_metrics.season_average is None:
            continue

        matchup = matchups.get(opponent)
        candidates.append(
            RecommendationCandidate(
                player_id=player.player_id,
                player_name=player.name,
                team=player.team,
                opponent=opponent,
                projected_points=float(player_metrics.season_average),
                hot_factor=float(player_metrics.hot_factor),
                minutes_trend=float(player_metrics.minutes_trend_value),
                matchup_favorability=float(matchup.favorability) if matchup else 1.0,
                injury_status=player.injury_status,
            )
        )

    return candidates


class WaiverService:
    """Read-side access to stored waiver recommendations."""

    @staticmethod
    async def get_recommendations(target_date: date) -> WaiverRecommendationsResp:
        """
        Get the stored recommendations for a date.

        Args:
            target_date: Date the recommendations were generated for

        Returns:
            WaiverRecommendationsResp with recommendations ordered by rank
        """
        log = get_logger()

        try:
            rows = await asyncio.to_thread(WaiverRecommendation.for_date, target_date)
            games = await asyncio.to_thread(Game.get_games_on_date, target_date)

            if not rows:
                return WaiverRecommendationsResp(
                    status=ApiStatus.NOT_FOUND,
                    message=f"No recommendations for {target_date.isoformat()}",
                    data=None,
                )

            recommendations = [row.to_schema() for row in rows]
            return WaiverRecommendationsResp(
                status=ApiStatus.SUCCESS,
                message=f"Found {len(recommendations)} recommendations",
                data=RecommendationSet(
                    as_of_date=target_date,
                    games_count=len([g for g in games if g.status != GameStatus.CANCELED]),
                    recommendations=recommendations,
                ),
            )

        except Exception as e:
            log.error("waiver_recommendations_error", error=str(e), date=target_date.isoformat())
            return WaiverRecommendationsResp(
                status=ApiStatus.ERROR,
                message="Failed to fetch waiver recommendations",
                data=None,
            )
