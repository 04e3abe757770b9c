from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from teammaker.config import DEFAULT_CAPACITY
from teammaker.models import Player, Rating, Team


class RosterEntryPayload(BaseModel):
    name: str = Field(..., min_length=1)
    rating: Rating

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("name must not be blank")
        return name


class RosterEntryResponse(BaseModel):
    id: int
    name: str
    rating: str


class PlayersSyncRequest(BaseModel):
    players: List[Player]


class TeamsSyncRequest(BaseModel):
    teams: List[Team]


class SyncResponse(BaseModel):
    message: str
    count: int


class AssignmentRequest(BaseModel):
    capacity: int = Field(default=DEFAULT_CAPACITY, ge=0)
    scale: Literal["standard", "simple"] = "standard"
    persist: bool = False
    seed: int | None = None


class TeamSummaryResponse(BaseModel):
    team_id: str
    name: str
    player_count: int
    average: float
    captain_count: int


class AssignmentResponse(BaseModel):
    teams: List[Team]
    unplaced: List[Player]
    variance: float
    passes: int
    summary: List[TeamSummaryResponse]
