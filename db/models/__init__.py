# Import all models to ensure they are registered with the database
from db.models.nba import Game, Player, PlayerGameStats, PlayerInjury
from db.models.analytics import (
    PlayerConsistency,
    PlayerFantasyScore,
    PlayerRollingStats,
    PlayerTrend,
    ScoringConfiguration,
    WaiverRecommendation,
)

ALL_MODELS = [
    Player,
    Game,
    PlayerGameStats,
    PlayerInjury,
    ScoringConfiguration,
    PlayerFantasyScore,
    PlayerRollingStats,
    PlayerConsistency,
    PlayerTrend,
    WaiverRecommendation,
]

__all__ = [
    'Player',
    'Game',
    'PlayerGameStats',
    'PlayerInjury',
    'ScoringConfiguration',
    'PlayerFantasyScore',
    'PlayerRollingStats',
    'PlayerConsistency',
    'PlayerTrend',
    'WaiverRecommendation',
    'ALL_MODELS',
]
