"""
Player rankings over stored analytics.

Reads the latest computed rolling averages, trends and consistency for a
weight-set and orders players by season production, hot streaks or
steadiness.
"""

import asyncio
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from core.errors import ValidationError
from core.logging import get_logger
from core.settings import settings
from db.models import PlayerConsistency, PlayerRollingStats, PlayerTrend
from db.models.analytics.player_rolling_stats import SEASON_WINDOW_GAMES
from db.repository import load_roster_players, load_scoring_weights
from schemas.analytics import ConsistencyGrade, TrendDirection, TrendMetric
from schemas.common import ApiStatus
from schemas.rankings import (
    ConsistencyRanking,
    ConsistencyRankingsData,
    ConsistencyRankingsResp,
    FantasyRanking,
    FantasyRankingsData,
    FantasyRankingsResp,
    HotPlayer,
    HotPlayersData,
    HotPlayersResp,
    RankedPlayer,
)
from schemas.waiver import WaiverPlayer

FANTASY_RANKINGS_LIMIT = 50
HOT_PLAYERS_LIMIT = 20
CONSISTENCY_RANKINGS_LIMIT = 50

DEFAULT_MIN_IMPROVEMENT = 0.15
DEFAULT_CONSISTENCY_WINDOW = 14


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise ValidationError("must be at least 1", field="limit")


def _ranked_player(player_id: str, players: Mapping[str, WaiverPlayer]) -> RankedPlayer:
    player = players.get(player_id)
    if player is None:
        return RankedPlayer(player_id=player_id)
    return RankedPlayer(
        player_id=player_id,
        name=player.name,
        team=player.team,
        injury_status=player.injury_status,
    )


def improvement_label(hot_factor: float) -> str:
    """Hot factor as a percentage rounded half up, e.g. 0.225 -> '23%'."""
    return f"{math.floor(hot_factor * 100 + 0.5)}%"


def rank_fantasy(
    rows: Iterable[Any],
    players: Mapping[str, WaiverPlayer],
    limit: int = FANTASY_RANKINGS_LIMIT,
) -> list[FantasyRanking]:
    """
    Order players by season fantasy average, highest first.

    Args:
        rows: Stored rolling-average rows for one date (every window)
        players: Roster facts keyed by player id
        limit: Maximum rankings to return

    Returns:
        FantasyRanking list; players with no season average are left out
    """
    _check_limit(limit)

    season: dict[str, float] = {}
    windows: dict[str, dict[int, Optional[float]]] = defaultdict(dict)
    for row in rows:
        if row.window_games == SEASON_WINDOW_GAMES:
            if row.average is not None:
                season[row.player_id] = row.average
        else:
            windows[row.player_id][row.window_games] = row.average

    ordered = sorted(season.items(), key=lambda item: (-item[1], item[0]))[:limit]
    return [
        FantasyRanking(
            rank=i,
            player=_ranked_player(player_id, players),
            season_average=average,
            window_averages=windows.get(player_id, {}),
        )
        for i, (player_id, average) in enumerate(ordered, start=1)
    ]


def rank_hot_players(
    rows: Iterable[Any],
    players: Mapping[str, WaiverPlayer],
    min_improvement: float = DEFAULT_MIN_IMPROVEMENT,
    limit: int = HOT_PLAYERS_LIMIT,
) -> list[HotPlayer]:
    """
    Hot players ordered by hot factor, highest first.

    A player qualifies when their fantasy trend is flagged hot and the hot
    factor is at least ``min_improvement``. Their minutes trend rides along
    when one was stored.
    """
    _check_limit(limit)

    fantasy = []
    minutes: dict[str, float] = {}
    for row in rows:
        if row.metric == TrendMetric.MINUTES.value:
            minutes[row.player_id] = row.trend_value
        elif row.is_hot and row.hot_factor is not None and row.hot_factor >= min_improvement:
            fantasy.append(row)

    fantasy.sort(key=lambda row: (-row.hot_factor, row.player_id))
    return [
        HotPlayer(
            player=_ranked_player(row.player_id, players),
            hot_factor=row.hot_factor,
            recent_average=row.recent_average,
            baseline_average=row.baseline_average,
            improvement=improvement_label(row.hot_factor),
            performance_trend=TrendDirection(row.direction),
            minutes_trend=minutes.get(row.player_id),
        )
        for row in fantasy[:limit]
    ]


def rank_consistency(
    rows: Iterable[Any],
    players: Mapping[str, WaiverPlayer],
    min_games: int = 5,
    limit: int = CONSISTENCY_RANKINGS_LIMIT,
) -> list[ConsistencyRanking]:
    """
    Order players by coefficient of variation, steadiest first.

    Rows from windows with fewer than ``min_games`` games are left out.
    """
    _check_limit(limit)
    if min_games < 1:
        raise ValidationError("must be at least 1", field="min_games")

    eligible = sorted(
        (row for row in rows if row.games >= min_games),
        key=lambda row: (row.coefficient_of_variation, row.player_id),
    )
    return [
        ConsistencyRanking(
            rank=i,
            player=_ranked_player(row.player_id, players),
            grade=ConsistencyGrade(row.grade),
            coefficient_of_variation=row.coefficient_of_variation,
            std_dev=row.std_dev,
            games_played=row.games,
            window=row.window_games,
        )
        for i, row in enumerate(eligible[:limit], start=1)
    ]


def _load_with_players(query, *args):
    as_of_date, rows = query(*args)
    players = load_roster_players(sorted({row.player_id for row in rows}))
    return as_of_date, rows, players


class RankingsService:
    """Read-side rankings over the latest stored metrics."""

    @staticmethod
    async def get_fantasy_rankings(
        scoring_config_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = FANTASY_RANKINGS_LIMIT,
    ) -> FantasyRankingsResp:
        """
        Get players ranked by season fantasy average.

        Args:
            scoring_config_id: Weight-set to rank under; owner or system default if None
            owner_id: Owner whose default weight-set applies when no id is given
            limit: Maximum rankings to return

        Returns:
            FantasyRankingsResp with season and trailing-window averages
        """
        log = get_logger().bind(operation="fantasy_rankings")

        try:
            weights = await asyncio.to_thread(load_scoring_weights, scoring_config_id, owner_id)
            as_of_date, rows, players = await asyncio.to_thread(
                _load_with_players, PlayerRollingStats.get_latest, weights.id
            )
            rankings = rank_fantasy(rows, players, limit)

            if as_of_date is None:
                message = "No fantasy averages available yet"
            else:
                message = f"Fantasy rankings fetched successfully (as of {as_of_date})"
            return FantasyRankingsResp(
                status=ApiStatus.SUCCESS,
                message=message,
                data=FantasyRankingsData(
                    as_of_date=as_of_date,
                    scoring_config_id=weights.id,
                    rankings=rankings,
                ),
            )

        except ValidationError as e:
            return FantasyRankingsResp(status=ApiStatus.VALIDATION_ERROR, message=str(e), data=None)

        except Exception as e:
            log.error("fantasy_rankings_error", error=str(e))
            return FantasyRankingsResp(
                status=ApiStatus.ERROR,
                message="Failed to fetch fantasy rankings",
                data=None,
            )

    @staticmethod
    async def get_hot_players(
        min_improvement: float = DEFAULT_MIN_IMPROVEMENT,
        scoring_config_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = HOT_PLAYERS_LIMIT,
    ) -> HotPlayersResp:
        """Get players whose recent fantasy output is well above their baseline."""
        log = get_logger().bind(operation="hot_players")

        try:
            weights = await asyncio.to_thread(load_scoring_weights, scoring_config_id, owner_id)
            as_of_date, rows, players = await asyncio.to_thread(
                _load_with_players, PlayerTrend.get_latest, weights.id
            )
            hot = rank_hot_players(rows, players, min_improvement, limit)

            return HotPlayersResp(
                status=ApiStatus.SUCCESS,
                message=f"Found {len(hot)} hot players",
                data=HotPlayersData(
                    as_of_date=as_of_date,
                    scoring_config_id=weights.id,
                    players=hot,
                ),
            )

        except ValidationError as e:
            return HotPlayersResp(status=ApiStatus.VALIDATION_ERROR, message=str(e), data=None)

        except Exception as e:
            log.error("hot_players_error", error=str(e))
            return HotPlayersResp(
                status=ApiStatus.ERROR,
                message="Failed to fetch hot players",
                data=None,
            )

    @staticmethod
    async def get_consistency_rankings(
        window: int = DEFAULT_CONSISTENCY_WINDOW,
        min_games: Optional[int] = None,
        scoring_config_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = CONSISTENCY_RANKINGS_LIMIT,
    ) -> ConsistencyRankingsResp:
        """
        Get players ranked by consistency over one trailing window.

        Args:
            window: Window length in games; one of the configured rolling windows
            min_games: Minimum games in the window; the configured minimum if None
            scoring_config_id: Weight-set to rank under; owner or system default if None
            owner_id: Owner whose default weight-set applies when no id is given
            limit: Maximum rankings to return

        Returns:
            ConsistencyRankingsResp ordered by coefficient of variation
        """
        log = get_logger().bind(operation="consistency_rankings", window=window)
        config = settings.analytics_config()

        if window not in config.rolling_windows:
            valid = ", ".join(str(w) for w in config.rolling_windows)
            return ConsistencyRankingsResp(
                status=ApiStatus.VALIDATION_ERROR,
                message=f"window: must be one of {valid}",
                data=None,
            )

        try:
            weights = await asyncio.to_thread(load_scoring_weights, scoring_config_id, owner_id)
            as_of_date, rows, players = await asyncio.to_thread(
                _load_with_players, PlayerConsistency.get_latest_for_window, weights.id, window
            )
            rankings = rank_consistency(
                rows,
                players,
                min_games=config.min_consistency_games if min_games is None else min_games,
                limit=limit,
            )

            return ConsistencyRankingsResp(
                status=ApiStatus.SUCCESS,
                message=f"L{window} consistency rankings fetched successfully",
                data=ConsistencyRankingsData(
                    as_of_date=as_of_date,
                    scoring_config_id=weights.id,
                    window=window,
                    rankings=rankings,
                ),
            )

        except ValidationError as e:
            return ConsistencyRankingsResp(
                status=ApiStatus.VALIDATION_ERROR, message=str(e), data=None
            )

        except Exception as e:
            log.error("consistency_rankings_error", error=str(e))
            return ConsistencyRankingsResp(
                status=ApiStatus.ERROR,
                message="Failed to fetch consistency rankings",
                data=None,
            )
