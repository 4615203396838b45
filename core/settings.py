"""
Application settings.

Loaded from environment variables and an optional .env file via
pydantic-settings. Analytics tunables live here only as defaults; the
pure services receive them through an explicit AnalyticsConfig record
built by Settings.analytics_config().
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from schemas.analytics import AnalyticsConfig, RankingWeights


class Settings(BaseSettings):
    """Process configuration for the analytics pipelines."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service / logging
    service_name: str = "courtvision-analytics"
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Storage (peewee db_url syntax)
    database_url: str = "sqlite:///courtvision_analytics.db"

    # Used to resolve "today" for daily pipelines
    timezone: str = "US/Central"

    # Analytics defaults
    hot_threshold: float = 0.15
    min_consistency_games: int = Field(default=5, ge=1)
    consistency_grade_window: int = Field(default=14, ge=1)
    rolling_windows: tuple[int, ...] = (7, 14, 30)
    trend_recent_games: int = Field(default=7, ge=1)
    # None means "all remaining games" for the baseline window
    trend_baseline_games: Optional[int] = Field(default=None, ge=1)
    matchup_opponent_games: int = Field(default=15, ge=1)
    matchup_league_games: int = Field(default=100, ge=1)
    league_average_points_allowed: float = 75.0
    minutes_trend_scale: float = 100.0
    ranking_weights: tuple[float, float, float, float] = (0.4, 0.3, 0.2, 0.1)
    exclude_top_n: int = Field(default=50, ge=0)
    max_recommendations: int = Field(default=10, ge=1)

    def analytics_config(self) -> AnalyticsConfig:
        """Build the immutable config record passed into the services."""
        return AnalyticsConfig(
            hot_threshold=self.hot_threshold,
            min_consistency_games=self.min_consistency_games,
            consistency_grade_window=self.consistency_grade_window,
            rolling_windows=self.rolling_windows,
            trend_recent_games=self.trend_recent_games,
            trend_baseline_games=self.trend_baseline_games,
            matchup_opponent_games=self.matchup_opponent_games,
            matchup_league_games=self.matchup_league_games,
            league_average_points_allowed=self.league_average_points_allowed,
            minutes_trend_scale=self.minutes_trend_scale,
            ranking_weights=RankingWeights(*self.ranking_weights),
            exclude_top_n=self.exclude_top_n,
            max_recommendations=self.max_recommendations,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
