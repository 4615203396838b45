from datetime import date
from typing import Optional

from peewee import CharField, DateField, FloatField, IntegerField

from db.base import BaseModel, bulk_upsert
from schemas.analytics import PlayerMetrics


class PlayerConsistency(BaseModel):
    """Consistency per (player, weight-set, window, date); short windows are not stored."""

    player_id = CharField(max_length=32, index=True)
    scoring_config_id = CharField(max_length=64)
    as_of_date = DateField(index=True)
    window_games = IntegerField()
    games = IntegerField()
    std_dev = FloatField()
    coefficient_of_variation = FloatField()
    grade = CharField(max_length=2)

    class Meta:
        table_name = "player_consistency"
        indexes = ((("player_id", "scoring_config_id", "window_games", "as_of_date"), True),)

    @classmethod
    def upsert_metrics(cls, metrics: PlayerMetrics, scoring_config_id: str, as_of_date: date) -> int:
        rows = [
            {
                "player_id": metrics.player_id,
                "scoring_config_id": scoring_config_id,
                "as_of_date": as_of_date,
                "window_games": window,
                "games": metric.games,
                "std_dev": metric.std_dev,
                "coefficient_of_variation": metric.coefficient_of_variation,
                "grade": metric.grade.value,
            }
            for window, metric in sorted(metrics.consistency.items())
            if metric is not None
        ]
        return bulk_upsert(
            cls, rows, [cls.player_id, cls.scoring_config_id, cls.window_games, cls.as_of_date]
        )

    @classmethod
    def get_latest_for_window(
        cls,
        scoring_config_id: str,
        window_games: int,
    ) -> tuple[Optional[date], list["PlayerConsistency"]]:
        """One window's metrics from the most recent date computed for a weight-set."""
        scope = (cls.scoring_config_id == scoring_config_id) & (cls.window_games == window_games)
        latest = cls.select(cls.as_of_date).where(scope).order_by(cls.as_of_date.desc()).first()
        if latest is None:
            return None, []
        query = (
            cls.select()
            .where(scope & (cls.as_of_date == latest.as_of_date))
            .order_by(cls.coefficient_of_variation, cls.player_id)
        )
        return latest.as_of_date, list(query)
