from collections.abc import Iterable

from peewee import CharField, DateField, FloatField

from db.base import BaseModel, bulk_upsert
from schemas.analytics import FantasyScore


class PlayerFantasyScore(BaseModel):
    """Fantasy points per (player, game, weight-set)."""

    player_id = CharField(max_length=32, index=True)
    game_id = CharField(max_length=32)
    game_date = DateField()
    scoring_config_id = CharField(max_length=64)
    fantasy_points = FloatField()

    class Meta:
        table_name = "player_fantasy_scores"
        indexes = ((("player_id", "game_id", "scoring_config_id"), True),)

    @classmethod
    def upsert_scores(cls, scores: Iterable[FantasyScore], scoring_config_id: str) -> int:
        rows = [
            {
                "player_id": s.player_id,
                "game_id": s.game_id,
                "game_date": s.game_date,
                "scoring_config_id": scoring_config_id,
                "fantasy_points": s.fantasy_points,
            }
            for s in scores
        ]
        return bulk_upsert(cls, rows, [cls.player_id, cls.game_id, cls.scoring_config_id])
