from datetime import date
from typing import Optional

from peewee import CharField, DateField, FloatField, IntegerField

from db.base import BaseModel, bulk_upsert
from schemas.analytics import PlayerMetrics, RollingAverages, TrendMetric

# Stored window value for season-to-date averages
SEASON_WINDOW_GAMES = 0


class PlayerRollingStats(BaseModel):
    """Rolling averages per (player, weight-set, metric, window, date)."""

    player_id = CharField(max_length=32, index=True)
    scoring_config_id = CharField(max_length=64)
    as_of_date = DateField(index=True)
    metric = CharField(max_length=16)
    window_games = IntegerField()
    average = FloatField(null=True)
    games_played = IntegerField(default=0)

    class Meta:
        table_name = "player_rolling_stats"
        indexes = (
            (("player_id", "scoring_config_id", "metric", "window_games", "as_of_date"), True),
        )

    @staticmethod
    def _rows(
        player_id: str,
        scoring_config_id: str,
        as_of_date: date,
        metric: TrendMetric,
        averages: RollingAverages,
    ) -> list[dict]:
        windows: dict[int, Optional[float]] = {SEASON_WINDOW_GAMES: averages.season_average}
        windows.update(averages.window_averages)
        return [
            {
                "player_id": player_id,
                "scoring_config_id": scoring_config_id,
                "as_of_date": as_of_date,
                "metric": metric.value,
                "window_games": window,
                "average": average,
                "games_played": averages.games_played,
            }
            for window, average in windows.items()
        ]

    @classmethod
    def upsert_metrics(cls, metrics: PlayerMetrics, scoring_config_id: str, as_of_date: date) -> int:
        rows = cls._rows(
            metrics.player_id, scoring_config_id, as_of_date,
            TrendMetric.FANTASY_POINTS, metrics.fantasy_averages,
        ) + cls._rows(
            metrics.player_id, scoring_config_id, as_of_date,
            TrendMetric.MINUTES, metrics.minutes_averages,
        )
        return bulk_upsert(
            cls,
            rows,
            [cls.player_id, cls.scoring_config_id, cls.metric, cls.window_games, cls.as_of_date],
        )

    @classmethod
    def get_latest(
        cls,
        scoring_config_id: str,
        metric: TrendMetric = TrendMetric.FANTASY_POINTS,
    ) -> tuple[Optional[date], list["PlayerRollingStats"]]:
        """All windows from the most recent date computed for a weight-set and metric."""
        scope = (cls.scoring_config_id == scoring_config_id) & (cls.metric == metric.value)
        latest = cls.select(cls.as_of_date).where(scope).order_by(cls.as_of_date.desc()).first()
        if latest is None:
            return None, []
        query = (
            cls.select()
            .where(scope & (cls.as_of_date == latest.as_of_date))
            .order_by(cls.player_id, cls.window_games)
        )
        return latest.as_of_date, list(query)
