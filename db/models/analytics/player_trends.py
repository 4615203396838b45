from datetime import date
from typing import Optional

from peewee import BooleanField, CharField, DateField, FloatField

from db.base import BaseModel, bulk_upsert
from schemas.analytics import PlayerMetrics


class PlayerTrend(BaseModel):
    """Recent-vs-baseline trends per (player, weight-set, metric, date)."""

    player_id = CharField(max_length=32, index=True)
    scoring_config_id = CharField(max_length=64)
    as_of_date = DateField(index=True)
    metric = CharField(max_length=16)
    direction = CharField(max_length=8)
    trend_value = FloatField()
    recent_average = FloatField()
    baseline_average = FloatField()
    hot_factor = FloatField(null=True)
    is_hot = BooleanField(null=True)

    class Meta:
        table_name = "player_trends"
        indexes = ((("player_id", "scoring_config_id", "metric", "as_of_date"), True),)

    @classmethod
    def upsert_metrics(cls, metrics: PlayerMetrics, scoring_config_id: str, as_of_date: date) -> int:
        rows = [
            {
                "player_id": metrics.player_id,
                "scoring_config_id": scoring_config_id,
                "as_of_date": as_of_date,
                "metric": signal.metric.value,
                "direction": signal.direction.value,
                "trend_value": signal.trend_value,
                "recent_average": signal.recent_average,
                "baseline_average": signal.baseline_average,
                "hot_factor": signal.hot_factor,
                "is_hot": signal.is_hot,
            }
            for signal in (metrics.fantasy_trend, metrics.minutes_trend)
            if signal is not None
        ]
        return bulk_upsert(
            cls, rows, [cls.player_id, cls.scoring_config_id, cls.metric, cls.as_of_date]
        )

    @classmethod
    def get_latest(cls, scoring_config_id: str) -> tuple[Optional[date], list["PlayerTrend"]]:
        """Fantasy and minutes trends from the most recent date computed for a weight-set."""
        scope = cls.scoring_config_id == scoring_config_id
        latest = cls.select(cls.as_of_date).where(scope).order_by(cls.as_of_date.desc()).first()
        if latest is None:
            return None, []
        query = (
            cls.select()
            .where(scope & (cls.as_of_date == latest.as_of_date))
            .order_by(cls.player_id, cls.metric)
        )
        return latest.as_of_date, list(query)
