"""
Shared fixtures: a throwaway database and builders for raw inputs.
"""

from datetime import date, timedelta

import pytest

from db.base import close_db, init_db
from db.models import Game, Player, PlayerGameStats, PlayerInjury
from schemas.stats import GameResult, GameStatus, StatLine

SEASON_START = date(2025, 1, 1)


@pytest.fixture
def database(tmp_path):
    """File-backed SQLite so worker threads see the same data as the test."""
    init_db(f"sqlite:///{tmp_path / 'analytics.db'}")
    yield
    close_db()


@pytest.fixture
def make_stat_line():
    """Build a StatLine for game number ``n`` (higher is more recent)."""

    def factory(player_id: str = "p1", n: int = 1, **stats) -> StatLine:
        stats.setdefault("min", 30.0)
        return StatLine(
            player_id=player_id,
            game_id=f"{player_id}-{n:03d}",
            game_date=SEASON_START + timedelta(days=n),
            **stats,
        )

    return factory


@pytest.fixture
def make_game():
    def factory(
        game_id: str,
        home: str,
        away: str,
        home_points=None,
        away_points=None,
        status: GameStatus = GameStatus.FINAL,
        game_date: date = SEASON_START,
    ) -> GameResult:
        return GameResult(
            game_id=game_id,
            game_date=game_date,
            home_team=home,
            away_team=away,
            home_points=home_points,
            away_points=away_points,
            status=status,
        )

    return factory


@pytest.fixture
def add_player(database):
    """Store a player with ``games`` identical box scores ending the day before ``last_day``."""

    def factory(
        player_id: str,
        team: str,
        points: int,
        games: int = 5,
        minutes: float = 30.0,
        last_day: date = date(2025, 1, 20),
        injury=None,
    ) -> None:
        Player.upsert_player(player_id=player_id, name=player_id.upper(), team=team)
        for n in range(games):
            PlayerGameStats.upsert_game_stats(
                player_id=player_id,
                game_id=f"{player_id}-{n:03d}",
                game_date=last_day - timedelta(days=n + 1),
                stats={"pts": points, "min": minutes},
                team=team,
            )
        if injury is not None:
            PlayerInjury.upsert_injury(player_id, injury)

    return factory


@pytest.fixture
def add_game(database):
    def factory(game_id, game_date, home, away, home_points=None, away_points=None,
                status=GameStatus.SCHEDULED) -> None:
        Game.upsert_game(
            game_id=game_id,
            game_date=game_date,
            home_team=home,
            away_team=away,
            home_points=home_points,
            away_points=away_points,
            status=status,
        )

    return factory
