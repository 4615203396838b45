"""
Schemas for raw per-game inputs: box scores, scoring weights, game results.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


class InjuryStatus(str, Enum):
    """Injury tiers, least to most severe."""

    HEALTHY = "HEALTHY"
    DAY_TO_DAY = "DAY_TO_DAY"
    QUESTIONABLE = "QUESTIONABLE"
    DOUBTFUL = "DOUBTFUL"
    OUT = "OUT"


class GameStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    FINAL = "FINAL"
    POSTPONED = "POSTPONED"
    CANCELED = "CANCELED"


class StatLine(BaseModel):
    """One player's box score for one completed game."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    player_id: str = Field(..., description="Player identifier")
    game_id: str = Field(..., description="Game identifier")
    game_date: date = Field(..., description="Date the game was played")
    team: Optional[str] = Field(None, description="Player's team for this game")
    opponent: Optional[str] = Field(None, description="Opposing team")
    min: StrictFloat = Field(0.0, description="Minutes played")
    pts: StrictInt = Field(0, description="Points")
    reb: StrictInt = Field(0, description="Rebounds")
    ast: StrictInt = Field(0, description="Assists")
    stl: StrictInt = Field(0, description="Steals")
    blk: StrictInt = Field(0, description="Blocks")
    tov: StrictInt = Field(0, description="Turnovers")
    pf: StrictInt = Field(0, description="Personal fouls")
    fgm: StrictInt = Field(0, description="Field goals made")
    fga: StrictInt = Field(0, description="Field goals attempted")
    fg3m: StrictInt = Field(0, description="Three-pointers made")
    fg3a: StrictInt = Field(0, description="Three-pointers attempted")
    ftm: StrictInt = Field(0, description="Free throws made")
    fta: StrictInt = Field(0, description="Free throws attempted")
    plus_minus: StrictInt = Field(0, description="Plus/minus")


class ScoringWeights(BaseModel):
    """A named set of per-category fantasy multipliers."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[str] = None
    owner_id: Optional[str] = Field(None, description="Owning user; None for system defaults")
    name: str = "Default Configuration"
    is_default: bool = False
    pts: float = 1.0
    reb: float = 1.0
    ast: float = 1.0
    stl: float = 2.0
    blk: float = 2.0
    fg3m: float = 1.0
    tov: float = -1.0


class GameResult(BaseModel):
    """A scheduled or completed game between two teams."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    game_id: str
    game_date: date
    home_team: str
    away_team: str
    home_points: Optional[int] = None
    away_points: Optional[int] = None
    status: GameStatus = GameStatus.SCHEDULED
