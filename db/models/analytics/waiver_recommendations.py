from collections.abc import Iterable
from datetime import date

from peewee import CharField, DateField, FloatField, IntegerField, TextField

from db.base import BaseModel, db
from schemas.stats import InjuryStatus
from schemas.waiver import Recommendation


class WaiverRecommendation(BaseModel):
    """Ranked waiver pickups for a date. A date's set is always replaced as a whole."""

    as_of_date = DateField(index=True)
    rank = IntegerField()
    player_id = CharField(max_length=32)
    player_name = CharField(max_length=100, null=True)
    team = CharField(max_length=3, null=True)
    opponent = CharField(max_length=3, null=True)
    recommendation_score = FloatField()
    projected_points = FloatField()
    hot_factor = FloatField()
    minutes_trend = FloatField()
    matchup_favorability = FloatField()
    injury_status = CharField(max_length=16, default=InjuryStatus.HEALTHY.value)
    reasoning = TextField()

    class Meta:
        table_name = "waiver_recommendations"
        indexes = ((("as_of_date", "rank"), True),)

    @classmethod
    def for_date(cls, as_of_date: date) -> list["WaiverRecommendation"]:
        return list(
            cls.select().where(cls.as_of_date == as_of_date).order_by(cls.rank)
        )

    @classmethod
    def replace_for_date(cls, as_of_date: date, recommendations: Iterable[Recommendation]) -> int:
        """Delete the date's existing set and write the new one in one transaction."""
        rows = [
            {
                "as_of_date": as_of_date,
                "rank": r.rank,
                "player_id": r.player_id,
                "player_name": r.player_name,
                "team": r.team,
                "opponent": r.opponent,
                "recommendation_score": r.recommendation_score,
                "projected_points": r.projected_points,
                "hot_factor": r.hot_factor,
                "minutes_trend": r.minutes_trend,
                "matchup_favorability": r.matchup_favorability,
                "injury_status": r.injury_status.value,
                "reasoning": r.reasoning,
            }
            for r in recommendations
        ]
        with db.atomic():
            cls.delete().where(cls.as_of_date == as_of_date).execute()
            if rows:
                cls.insert_many(rows).execute()
        return len(rows)

    def to_schema(self) -> Recommendation:
        return Recommendation(
            rank=self.rank,
            player_id=self.player_id,
            player_name=self.player_name,
            team=self.team,
            opponent=self.opponent,
            recommendation_score=self.recommendation_score,
            projected_points=self.projected_points,
            hot_factor=self.hot_factor,
            minutes_trend=self.minutes_trend,
            matchup_favorability=self.matchup_favorability,
            injury_status=InjuryStatus(self.injury_status),
            reasoning=self.reasoning,
        )
