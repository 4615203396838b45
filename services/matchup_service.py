"""
Matchup evaluation.

Rates an opponent's defense as points allowed per game and compares it to
the league-wide average. Missing history degrades to a neutral matchup so
a sparse schedule never blocks recommendations.
"""

import asyncio
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Optional

import pytz

from core.errors import ValidationError
from core.logging import get_logger
from core.settings import settings
from db.models import Game
from schemas.analytics import AnalyticsConfig, MatchupFavorability
from schemas.common import ApiStatus
from schemas.rankings import TeamDefenseResp
from schemas.stats import GameResult, GameStatus
from services.rolling_service import rolling_average

# Fallback defensive rating (points allowed per team-game)
LEAGUE_AVERAGE_POINTS_ALLOWED = 75.0

OPPONENT_SAMPLE_GAMES = 15
LEAGUE_SAMPLE_GAMES = 100


def _final_games(games: Iterable[GameResult]) -> list[GameResult]:
    return [
        g for g in games
        if g.status == GameStatus.FINAL
        and g.home_points is not None
        and g.away_points is not None
    ]


def team_points_allowed(
    games: Iterable[GameResult],
    team: str,
    limit: Optional[int] = OPPONENT_SAMPLE_GAMES,
) -> list[float]:
    """
    Points scored against ``team`` in each of its final games.

    Args:
        games: Game results, newest first
        team: Team abbreviation
        limit: Keep at most this many of the team's most recent games

    Returns:
        Points-allowed samples, newest first
    """
    samples: list[float] = []
    for game in _final_games(games):
        if game.home_team == team:
            samples.append(float(game.away_points))
        elif game.away_team == team:
            samples.append(float(game.home_points))
        if limit is not None and len(samples) >= limit:
            break
    return samples


def league_points_allowed(
    games: Iterable[GameResult],
    limit: Optional[int] = LEAGUE_SAMPLE_GAMES,
) -> tuple[float, ...]:
    """
    League-wide points-allowed samples, two per game (one per team).

    The result is a tuple so one batch can share it read-only.
    """
    finals = _final_games(games)
    if limit is not None:
        finals = finals[:limit]

    samples: list[float] = []
    for game in finals:
        samples.append(float(game.away_points))
        samples.append(float(game.home_points))
    return tuple(samples)


def matchup_favorability(
    opponent_defense_history: Sequence[float],
    league_defense_history: Sequence[float],
    opponent: Optional[str] = None,
    league_average: float = LEAGUE_AVERAGE_POINTS_ALLOWED,
) -> MatchupFavorability:
    """
    Compare an opponent's points allowed with the league average.

    A ratio above 1 means the opponent gives up more than average (a
    favorable matchup); below 1 means a tougher defense. If either history
    is empty, or the league rating is zero, both ratings fall back to
    ``league_average`` and favorability is exactly 1.0.
    """
    opponent_rating = rolling_average(opponent_defense_history)
    league_rating = rolling_average(league_defense_history)

    if opponent_rating is None or league_rating is None or league_rating == 0:
        return MatchupFavorability(
            opponent=opponent,
            opponent_rating=league_average,
            league_rating=league_average,
            favorability=1.0,
            opponent_games=len(opponent_defense_history),
            league_games=len(league_defense_history),
            is_default=True,
        )

    return MatchupFavorability(
        opponent=opponent,
        opponent_rating=opponent_rating,
        league_rating=league_rating,
        favorability=opponent_rating / league_rating,
        opponent_games=len(opponent_defense_history),
        league_games=len(league_defense_history),
    )


def evaluate_matchup(
    games: Iterable[GameResult],
    opponent: Optional[str],
    league_history: Sequence[float],
    opponent_games: int = OPPONENT_SAMPLE_GAMES,
    league_average: float = LEAGUE_AVERAGE_POINTS_ALLOWED,
) -> MatchupFavorability:
    """Build the opponent sample from game results and score the matchup."""
    if opponent is None:
        return matchup_favorability((), league_history, league_average=league_average)
    history = team_points_allowed(games, opponent, limit=opponent_games)
    return matchup_favorability(
        history, league_history, opponent=opponent, league_average=league_average
    )


def team_defense(
    games: Sequence[GameResult],
    team: str,
    config: AnalyticsConfig,
) -> MatchupFavorability:
    """Rate one team's defense against the league from final game results."""
    if not team:
        raise ValidationError("must not be empty", field="team")
    league_history = league_points_allowed(games, limit=config.matchup_league_games)
    return evaluate_matchup(
        games,
        team.upper(),
        league_history,
        opponent_games=config.matchup_opponent_games,
        league_average=config.league_average_points_allowed,
    )


class MatchupService:
    """Read-side defensive ratings from stored game results."""

    @staticmethod
    async def get_team_defense(
        team: str,
        before: Optional[date] = None,
        config: Optional[AnalyticsConfig] = None,
    ) -> TeamDefenseResp:
        """
        Get a team's points allowed per game relative to the league.

        Args:
            team: Team abbreviation
            before: Only count games before this date; today if None
            config: Analytics tunables; built from settings if None

        Returns:
            TeamDefenseResp whose favorability is above 1.0 for a weak defense
        """
        log = get_logger().bind(operation="team_defense", team=team)
        config = config or settings.analytics_config()
        before = before or datetime.now(pytz.timezone(settings.timezone)).date()

        try:
            games = await asyncio.to_thread(Game.get_final_games_before, before)
            rating = team_defense(games, team, config)
            return TeamDefenseResp(
                status=ApiStatus.SUCCESS,
                message=(
                    f"No defensive history for {rating.opponent}; using league average"
                    if rating.is_default
                    else f"Defensive rating for {rating.opponent} over {rating.opponent_games} games"
                ),
                data=rating,
            )

        except ValidationError as e:
            return TeamDefenseResp(status=ApiStatus.VALIDATION_ERROR, message=str(e), data=None)

        except Exception as e:
            log.error("team_defense_error", error=str(e))
            return TeamDefenseResp(
                status=ApiStatus.ERROR,
                message="Failed to fetch team defense",
                data=None,
            )
