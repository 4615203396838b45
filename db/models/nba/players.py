from typing import Optional

from peewee import BooleanField, CharField

from db.base import BaseModel


class Player(BaseModel):
    """Player dimension: one row per player."""

    id = CharField(max_length=32, primary_key=True)
    name = CharField(max_length=100)
    team = CharField(max_length=3, null=True)
    active = BooleanField(default=True)

    class Meta:
        table_name = "players"

    @classmethod
    def upsert_player(
        cls,
        player_id: str,
        name: str,
        team: Optional[str] = None,
        active: bool = True,
    ) -> None:
        """Insert a player or refresh their name, team and active flag."""
        (
            cls.insert(id=player_id, name=name, team=team, active=active)
            .on_conflict(
                conflict_target=[cls.id],
                update={cls.name: name, cls.team: team, cls.active: active},
            )
            .execute()
        )

    @classmethod
    def get_active_players(cls) -> list["Player"]:
        return list(cls.select().where(cls.active == True).order_by(cls.id))  # noqa: E712

    @classmethod
    def get_players(cls, player_ids: list[str]) -> dict[str, "Player"]:
        """Fetch players by id; unknown ids are simply absent."""
        if not player_ids:
            return {}
        return {p.id: p for p in cls.select().where(cls.id.in_(player_ids))}
