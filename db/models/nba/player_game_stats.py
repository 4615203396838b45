from collections import defaultdict
from datetime import date
from typing import Optional

from peewee import CharField, DateField, FloatField, IntegerField

from db.base import BaseModel
from schemas.stats import StatLine

BOX_SCORE_FIELDS = (
    "pts", "reb", "ast", "stl", "blk", "tov", "pf",
    "fgm", "fga", "fg3m", "fg3a", "ftm", "fta", "plus_minus",
)


class PlayerGameStats(BaseModel):
    """One box score per (player, game)."""

    player_id = CharField(max_length=32, index=True)
    game_id = CharField(max_length=32)
    game_date = DateField(index=True)
    team = CharField(max_length=3, null=True)
    opponent = CharField(max_length=3, null=True)
    min = FloatField(default=0.0)
    pts = IntegerField(default=0)
    reb = IntegerField(default=0)
    ast = IntegerField(default=0)
    stl = IntegerField(default=0)
    blk = IntegerField(default=0)
    tov = IntegerField(default=0)
    pf = IntegerField(default=0)
    fgm = IntegerField(default=0)
    fga = IntegerField(default=0)
    fg3m = IntegerField(default=0)
    fg3a = IntegerField(default=0)
    ftm = IntegerField(default=0)
    fta = IntegerField(default=0)
    plus_minus = IntegerField(default=0)

    class Meta:
        table_name = "player_game_stats"
        indexes = ((("player_id", "game_id"), True),)

    @classmethod
    def upsert_game_stats(
        cls,
        player_id: str,
        game_id: str,
        game_date: date,
        stats: dict,
        team: Optional[str] = None,
        opponent: Optional[str] = None,
    ) -> None:
        """Insert or replace a player's box score for one game."""
        data = {
            "game_date": game_date,
            "team": team,
            "opponent": opponent,
            "min": float(stats.get("min", 0.0)),
            **{field: int(stats.get(field, 0)) for field in BOX_SCORE_FIELDS},
        }
        (
            cls.insert(player_id=player_id, game_id=game_id, **data)
            .on_conflict(conflict_target=[cls.player_id, cls.game_id], update=data)
            .execute()
        )

    @classmethod
    def get_histories(
        cls,
        player_ids: Optional[list[str]] = None,
        before: Optional[date] = None,
    ) -> dict[str, list[StatLine]]:
        """
        Box scores grouped by player, newest first.

        Args:
            player_ids: Restrict to these players; all players if None
            before: Only games strictly before this date
        """
        query = cls.select()
        if player_ids is not None:
            if not player_ids:
                return {}
            query = query.where(cls.player_id.in_(player_ids))
        if before is not None:
            query = query.where(cls.game_date < before)
        query = query.order_by(cls.player_id, cls.game_date.desc(), cls.game_id.desc())

        histories: dict[str, list[StatLine]] = defaultdict(list)
        for row in query:
            histories[row.player_id].append(row.to_stat_line())
        return dict(histories)

    def to_stat_line(self) -> StatLine:
        return StatLine(
            player_id=self.player_id,
            game_id=self.game_id,
            game_date=self.game_date,
            team=self.team,
            opponent=self.opponent,
            min=float(self.min),
            **{field: int(getattr(self, field)) for field in BOX_SCORE_FIELDS},
        )
