from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat

from schemas.common import BaseResponse
from schemas.stats import InjuryStatus


class RecommendationCandidate(BaseModel):
    """Signals for one waiver-eligible player, as fed to the ranker."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: Optional[str] = None
    team: Optional[str] = None
    opponent: Optional[str] = None
    projected_points: StrictFloat
    hot_factor: StrictFloat = 0.0
    minutes_trend: StrictFloat = 0.0
    matchup_favorability: StrictFloat = 1.0
    injury_status: InjuryStatus = InjuryStatus.HEALTHY


class Recommendation(BaseModel):
    """A ranked waiver pickup with the signals behind it."""

    model_config = ConfigDict(frozen=True)

    rank: int
    player_id: str
    player_name: Optional[str] = None
    team: Optional[str] = None
    opponent: Optional[str] = None
    recommendation_score: float
    projected_points: float
    hot_factor: float
    minutes_trend: float
    matchup_favorability: float
    injury_status: InjuryStatus = InjuryStatus.HEALTHY
    reasoning: str


class RecommendationSet(BaseModel):
    """All recommendations for one date; replaced wholesale on regeneration."""

    as_of_date: date
    games_count: int = 0
    recommendations: list[Recommendation] = Field(default_factory=list)


class WaiverRecommendationsResp(BaseResponse):
    data: Optional[RecommendationSet] = None


class WaiverPlayer(BaseModel):
    """Roster facts about a player needed to decide waiver eligibility."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    player_id: str
    name: str
    team: Optional[str] = None
    injury_status: InjuryStatus = InjuryStatus.HEALTHY
