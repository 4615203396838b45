from datetime import date
from typing import Optional

from peewee import CharField, DateField, IntegerField

from db.base import BaseModel
from schemas.stats import GameResult, GameStatus


class Game(BaseModel):
    """Scheduled and completed games; final scores feed defensive ratings."""

    id = CharField(max_length=32, primary_key=True)
    game_date = DateField(index=True)
    home_team = CharField(max_length=3)
    away_team = CharField(max_length=3)
    home_points = IntegerField(null=True)
    away_points = IntegerField(null=True)
    status = CharField(max_length=16, default=GameStatus.SCHEDULED.value)

    class Meta:
        table_name = "games"

    @classmethod
    def upsert_game(
        cls,
        game_id: str,
        game_date: date,
        home_team: str,
        away_team: str,
        home_points: Optional[int] = None,
        away_points: Optional[int] = None,
        status: GameStatus = GameStatus.SCHEDULED,
    ) -> None:
        data = {
            "game_date": game_date,
            "home_team": home_team,
            "away_team": away_team,
            "home_points": home_points,
            "away_points": away_points,
            "status": GameStatus(status).value,
        }
        (
            cls.insert(id=game_id, **data)
            .on_conflict(conflict_target=[cls.id], update=data)
            .execute()
        )

    @classmethod
    def get_games_on_date(cls, game_date: date) -> list[GameResult]:
        """All games scheduled on a date."""
        query = cls.select().where(cls.game_date == game_date).order_by(cls.id)
        return [game.to_schema() for game in query]

    @classmethod
    def get_final_games_before(cls, before: date) -> list[GameResult]:
        """Completed games strictly before a date, newest first."""
        query = (
            cls.select()
            .where(
                (cls.game_date < before)
                & (cls.status == GameStatus.FINAL.value)
                & cls.home_points.is_null(False)
                & cls.away_points.is_null(False)
            )
            .order_by(cls.game_date.desc(), cls.id.desc())
        )
        return [game.to_schema() for game in query]

    def to_schema(self) -> GameResult:
        return GameResult(
            game_id=self.id,
            game_date=self.game_date,
            home_team=self.home_team,
            away_team=self.away_team,
            home_points=self.home_points,
            away_points=self.away_points,
            status=GameStatus(self.status),
        )
