"""Canonical player and team models shared across the balancer, storage and API layers."""

from __future__ import annotations

from typing import Annotated, Any, FrozenSet, List

from pydantic import AfterValidator, BaseModel, Field, field_serializer
from pydantic.config import ConfigDict

from teammaker.config import VALID_RATINGS


def normalize_rating(value: str) -> str:
    rating = value.strip().upper()
    if rating not in VALID_RATINGS:
        raise ValueError(f"Unknown rating {value!r}; expected one of {', '.join(VALID_RATINGS)}")
    return rating


# Grade string, trimmed and upper-cased, restricted to the standard scale.
Rating = Annotated[str, AfterValidator(normalize_rating)]


class Player(BaseModel):
    """Rated player as stored in the session roster."""

    id: str = Field(..., min_length=1)
    name: str
    rating: Rating

    model_config = ConfigDict(frozen=True)


class Team(BaseModel):
    """Team roster with the ids of players pinned to it.

    ``locked_players`` travels as ``lockedPlayers`` (a list of ids) on the wire.
    """

    id: str = Field(..., min_length=1)
    name: str
    players: List[Player] = Field(default_factory=list)
    locked_players: FrozenSet[str] = Field(default_factory=frozenset, alias="lockedPlayers")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_serializer("locked_players")
    def _dump_locked(self, value: FrozenSet[str]) -> list[str]:
        ordered = [player.id for player in self.players if player.id in value]
        stray = sorted(value.difference(ordered))
        return ordered + stray

    def player_ids(self) -> list[str]:
        return [player.id for player in self.players]

    def is_locked(self, player_id: str) -> bool:
        return player_id in self.locked_players

    def with_players(self, players: List[Player], **updates: Any) -> "Team":
        return self.model_copy(update={"players": list(players), **updates})
