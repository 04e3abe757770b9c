from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from teammaker.models import Player, Team


class SavedConfigPayload(BaseModel):
    id: str | None = None
    name: str = Field(..., min_length=1)
    teams: List[Team] = Field(default_factory=list)
    unassigned_players: List[Player] = Field(default_factory=list, alias="unassignedPlayers")

    model_config = ConfigDict(populate_by_name=True)


class SavedConfigResponse(BaseModel):
    id: str
    name: str
    date: datetime
    teams: List[Team]
    unassigned_players: List[Player] = Field(alias="unassignedPlayers")

    model_config = ConfigDict(populate_by_name=True)
