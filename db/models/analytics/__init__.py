"""
Analytics Schema Models

Derived outputs keyed by player, weight-set and date, plus the
user-defined scoring weight-sets they are computed under.
"""

from db.models.analytics.scoring_configurations import ScoringConfiguration
from db.models.analytics.player_fantasy_scores import PlayerFantasyScore
from db.models.analytics.player_rolling_stats import PlayerRollingStats
from db.models.analytics.player_consistency import PlayerConsistency
from db.models.analytics.player_trends import PlayerTrend
from db.models.analytics.waiver_recommendations import WaiverRecommendation

__all__ = [
    "ScoringConfiguration",
    "PlayerFantasyScore",
    "PlayerRollingStats",
    "PlayerConsistency",
    "PlayerTrend",
    "WaiverRecommendation",
]
