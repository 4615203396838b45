from datetime import datetime
from typing import Optional

from peewee import CharField, DateTimeField

from db.base import BaseModel
from schemas.stats import InjuryStatus


class PlayerInjury(BaseModel):
    """Current injury status per player; players without a row are healthy."""

    player_id = CharField(max_length=32, primary_key=True)
    status = CharField(max_length=16, default=InjuryStatus.HEALTHY.value)
    description = CharField(max_length=255, null=True)
    updated_at = DateTimeField(default=datetime.now)

    class Meta:
        table_name = "player_injuries"

    @classmethod
    def upsert_injury(
        cls,
        player_id: str,
        status: InjuryStatus,
        description: Optional[str] = None,
    ) -> None:
        data = {
            "status": InjuryStatus(status).value,
            "description": description,
            "updated_at": datetime.now(),
        }
        (
            cls.insert(player_id=player_id, **data)
            .on_conflict(conflict_target=[cls.player_id], update=data)
            .execute()
        )

    @classmethod
    def get_statuses(cls, player_ids: Optional[list[str]] = None) -> dict[str, InjuryStatus]:
        """Map player id to injury status for every player with a row."""
        query = cls.select(cls.player_id, cls.status)
        if player_ids is not None:
            query = query.where(cls.player_id.in_(player_ids))
        return {row.player_id: InjuryStatus(row.status) for row in query}
