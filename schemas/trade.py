from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from schemas.common import BaseResponse
from schemas.stats import InjuryStatus


class TradeRecommendation(str, Enum):
    ACCEPT = "ACCEPT"
    DECLINE = "DECLINE"
    NEUTRAL = "NEUTRAL"


class TradePlayer(BaseModel):
    """A player on one side of a proposed trade."""

    player_id: str
    name: str
    team: Optional[str] = None
    injury_status: InjuryStatus = InjuryStatus.HEALTHY
    season_average: Optional[float] = None
    coefficient_of_variation: Optional[float] = None
    trend_value: Optional[float] = None
    is_hot: bool = False
    health_score: float = 1.0
    calculated_value: float = 0.0


class TradeDetails(BaseModel):
    value_in: float
    value_out: float
    slot_value: float
    slot_difference: int


class TradeAnalysis(BaseModel):
    """Outcome of comparing the players received against the players sent."""

    players_in: list[TradePlayer] = Field(default_factory=list)
    players_out: list[TradePlayer] = Field(default_factory=list)
    net_value: float
    recommendation: TradeRecommendation
    confidence: float
    details: TradeDetails
    reasoning: list[str] = Field(default_factory=list)


class TradeAnalysisResp(BaseResponse):
    data: Optional[TradeAnalysis] = None
