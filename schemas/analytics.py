"""
Schemas for derived analytics: fantasy scores, rolling averages,
consistency, trends, matchup favorability, and the config record that
parameterizes them.
"""

from datetime import date
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


class RankingWeights(NamedTuple):
    """Weights for the waiver recommendation score."""

    projected_points: float = 0.4
    hot_factor: float = 0.3
    minutes_trend: float = 0.2
    matchup_favorability: float = 0.1


class AnalyticsConfig(BaseModel):
    """Immutable bundle of analytics tunables passed into batch computations."""

    model_config = ConfigDict(frozen=True)

    hot_threshold: float = 0.15
    min_consistency_games: int = Field(default=5, ge=1)
    consistency_grade_window: int = Field(default=14, ge=1)
    rolling_windows: tuple[int, ...] = (7, 14, 30)
    trend_recent_games: int = Field(default=7, ge=1)
    trend_baseline_games: Optional[int] = Field(default=None, ge=1)
    matchup_opponent_games: int = Field(default=15, ge=1)
    matchup_league_games: int = Field(default=100, ge=1)
    league_average_points_allowed: float = 75.0
    minutes_trend_scale: float = 100.0
    ranking_weights: RankingWeights = RankingWeights()
    exclude_top_n: int = Field(default=50, ge=0)
    max_recommendations: int = Field(default=10, ge=1)


class FantasyScore(BaseModel):
    """Fantasy points for one (player, game, weight-set)."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    game_id: str
    game_date: date
    scoring_config_id: Optional[str] = None
    fantasy_points: float

    @property
    def display_points(self) -> float:
        return round(self.fantasy_points, 2)


class RollingAverages(BaseModel):
    """Season-to-date and trailing-window averages for one metric."""

    model_config = ConfigDict(frozen=True)

    season_average: Optional[float] = None
    window_averages: dict[int, Optional[float]] = Field(default_factory=dict)
    games_played: int = 0

    def last(self, games: int) -> Optional[float]:
        return self.window_averages.get(games)


class ConsistencyGrade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D = "D"
    F = "F"


class ConsistencyMetric(BaseModel):
    """Variability of a player's output over one window."""

    model_config = ConfigDict(frozen=True)

    std_dev: float
    coefficient_of_variation: float
    grade: ConsistencyGrade
    games: int
    window: Optional[int] = Field(None, description="Window length in games; None for all games")


class TrendDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class TrendMetric(str, Enum):
    FANTASY_POINTS = "FANTASY_POINTS"
    MINUTES = "MINUTES"


class TrendSignal(BaseModel):
    """Recent-vs-baseline change for one metric."""

    model_config = ConfigDict(frozen=True)

    metric: TrendMetric
    direction: TrendDirection
    trend_value: float = Field(..., description="Signed fractional change vs baseline")
    recent_average: float
    baseline_average: float
    # Only set for the fantasy-points metric
    hot_factor: Optional[float] = None
    is_hot: Optional[bool] = None


class MatchupFavorability(BaseModel):
    """Opponent defensive strength relative to league average."""

    model_config = ConfigDict(frozen=True)

    opponent: Optional[str] = None
    opponent_rating: float
    league_rating: float
    favorability: float
    opponent_games: int = 0
    league_games: int = 0
    is_default: bool = Field(False, description="True when neutral fallback values were used")


class PlayerMetrics(BaseModel):
    """Everything derived for one player under one weight-set."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    scoring_config_id: Optional[str] = None
    fantasy_scores: list[FantasyScore] = Field(default_factory=list)
    fantasy_averages: RollingAverages = RollingAverages()
    minutes_averages: RollingAverages = RollingAverages()
    consistency: dict[int, Optional[ConsistencyMetric]] = Field(default_factory=dict)
    consistency_grade: Optional[ConsistencyGrade] = None
    fantasy_trend: Optional[TrendSignal] = None
    minutes_trend: Optional[TrendSignal] = None

    @property
    def season_average(self) -> Optional[float]:
        return self.fantasy_averages.season_average

    @property
    def hot_factor(self) -> float:
        if self.fantasy_trend is None or self.fantasy_trend.hot_factor is None:
            return 0.0
        return self.fantasy_trend.hot_factor

    @property
    def minutes_trend_value(self) -> float:
        if self.minutes_trend is None:
            return 0.0
        return self.minutes_trend.trend_value
