"""
NBA Schema Models

Raw inputs: the player dimension, game results, box scores and injuries.
"""

from db.models.nba.players import Player
from db.models.nba.games import Game
from db.models.nba.player_game_stats import PlayerGameStats
from db.models.nba.player_injuries import PlayerInjury

__all__ = [
    # Dimension tables
    "Player",
    # Fact tables
    "Game",
    "PlayerGameStats",
    "PlayerInjury",
]
