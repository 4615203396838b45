from peewee import BooleanField, CharField, FloatField

from db.base import BaseModel
from schemas.stats import ScoringWeights


class ScoringConfiguration(BaseModel):
    """User-defined fantasy scoring weight-sets."""

    id = CharField(max_length=64, primary_key=True)
    owner_id = CharField(max_length=64, null=True, index=True)
    name = CharField(max_length=100)
    is_default = BooleanField(default=False)
    pts = FloatField(default=1.0)
    reb = FloatField(default=1.0)
    ast = FloatField(default=1.0)
    stl = FloatField(default=2.0)
    blk = FloatField(default=2.0)
    fg3m = FloatField(default=1.0)
    tov = FloatField(default=-1.0)

    class Meta:
        table_name = "scoring_configurations"

    @classmethod
    def get_weight_sets(cls) -> list[ScoringWeights]:
        return [row.to_weights() for row in cls.select().order_by(cls.id)]

    def to_weights(self) -> ScoringWeights:
        return ScoringWeights.model_validate(self, from_attributes=True)
