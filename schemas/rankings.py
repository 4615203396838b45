from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.analytics import ConsistencyGrade, MatchupFavorability, TrendDirection
from schemas.common import BaseResponse
from schemas.stats import InjuryStatus


class RankedPlayer(BaseModel):
    player_id: str
    name: Optional[str] = None
    team: Optional[str] = None
    injury_status: InjuryStatus = InjuryStatus.HEALTHY


class FantasyRanking(BaseModel):
    rank: int
    player: RankedPlayer
    season_average: float
    window_averages: dict[int, Optional[float]] = Field(
        default_factory=dict, description="Trailing-window averages keyed by games"
    )


class HotPlayer(BaseModel):
    player: RankedPlayer
    hot_factor: float
    recent_average: float
    baseline_average: float
    improvement: str = Field(..., description="Hot factor as a whole percentage, e.g. '23%'")
    performance_trend: TrendDirection
    minutes_trend: Optional[float] = None


class ConsistencyRanking(BaseModel):
    rank: int
    player: RankedPlayer
    grade: ConsistencyGrade
    coefficient_of_variation: float
    std_dev: float
    games_played: int
    window: int


class RankingsData(BaseModel):
    as_of_date: Optional[date] = None
    scoring_config_id: str


class FantasyRankingsData(RankingsData):
    rankings: List[FantasyRanking] = Field(default_factory=list)


class HotPlayersData(RankingsData):
    players: List[HotPlayer] = Field(default_factory=list)


class ConsistencyRankingsData(RankingsData):
    window: int
    rankings: List[ConsistencyRanking] = Field(default_factory=list)


class FantasyRankingsResp(BaseResponse):
    data: Optional[FantasyRankingsData] = None


class HotPlayersResp(BaseResponse):
    data: Optional[HotPlayersData] = None


class ConsistencyRankingsResp(BaseResponse):
    data: Optional[ConsistencyRankingsData] = None


class TeamDefenseResp(BaseResponse):
    data: Optional[MatchupFavorability] = None
