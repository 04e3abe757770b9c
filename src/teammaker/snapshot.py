"""Load and save roster snapshots as JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from teammaker.models import Player, Team


@dataclass
class RosterSnapshot:
    players: List[Player]
    teams: List[Team]
    unplaced: List[Player] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "RosterSnapshot":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            players=[Player.model_validate(item) for item in data.get("players", [])],
            teams=[Team.model_validate(item) for item in data.get("teams", [])],
            unplaced=[Player.model_validate(item) for item in data.get("unplaced", [])],
        )

    def save(self, path: Path) -> None:
        payload = {
            "players": [player.model_dump() for player in self.players],
            "teams": [team.model_dump(by_alias=True) for team in self.teams],
            "unplaced": [player.model_dump() for player in self.unplaced],
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
