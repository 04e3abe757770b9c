"""Persistence layer for the roster, teams and saved configurations."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from teammaker.config import DEFAULT_ROSTER
from teammaker.models import Player, Team


logger = logging.getLogger(__name__)


@dataclass
class RosterEntry:
    entry_id: int
    name: str
    rating: str
    created_at: datetime
    updated_at: datetime


@dataclass
class SavedConfigRecord:
    config_id: str
    name: str
    created_at: datetime
    teams: List[dict]
    unassigned_players: List[dict]


class RosterStore:
    """Simple SQLite-backed store for players, teams and saved configurations."""

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        env_db = os.getenv("TEAMMAKER_DB_PATH")
        if db_path is not None:
            self.db_path = self._coerce_path(str(db_path))
        elif env_db:
            self.db_path = self._coerce_path(env_db)
        elif os.getenv("PYTEST_CURRENT_TEST"):
            test_dir = Path(tempfile.gettempdir()) / "teammaker-test"
            test_dir.mkdir(parents=True, exist_ok=True)
            self.db_path = test_dir / "teammaker.sqlite"
        else:
            self.db_path = Path.cwd() / "teammaker.sqlite"
        self._ensure_schema()

    def _coerce_path(self, value: str) -> Path | str:
        if value.startswith("file:"):
            self._use_uri = True
            return value
        return Path(value)

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS roster_config (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                rating TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                rating TEXT NOT NULL,
                sort_order INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS teams (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                sort_order INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS team_players (
                team_id TEXT NOT NULL,
                player_id TEXT NOT NULL,
                is_locked INTEGER NOT NULL DEFAULT 0,
                position INTEGER NOT NULL,
                PRIMARY KEY (team_id, player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS saved_configurations (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                data_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_team_players_team ON team_players(team_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_team_players_player ON team_players(player_id)")
        conn.commit()

    # Roster config -----------------------------------------------------

    def list_roster_config(self) -> List[RosterEntry]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM roster_config ORDER BY id ASC").fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_roster_entry(self, entry_id: int) -> Optional[RosterEntry]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM roster_config WHERE id = ?", (entry_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_entry(row)

    def add_roster_entry(self, *, name: str, rating: str) -> RosterEntry:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO roster_config (name, rating, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (name, rating, now, now),
            )
            conn.commit()
            entry_id = cursor.lastrowid
        entry = self.get_roster_entry(entry_id)
        if entry is None:  # pragma: no cover
            raise KeyError(f"Roster entry {entry_id} not found after insert")
        return entry

    def update_roster_entry(self, entry_id: int, *, name: str, rating: str) -> RosterEntry:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE roster_config SET name = ?, rating = ?, updated_at = ? WHERE id = ?",
                (name, rating, now, entry_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Roster entry {entry_id} not found")
        entry = self.get_roster_entry(entry_id)
        if entry is None:  # pragma: no cover
            raise KeyError(f"Roster entry {entry_id} not found after update")
        return entry

    def delete_roster_entry(self, entry_id: int) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM roster_config WHERE id = ?", (entry_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Roster entry {entry_id} not found")

    def seed_roster_config(self, roster: Sequence[tuple[str, str]] = DEFAULT_ROSTER) -> int:
        """Insert ``roster`` only when the master roster is empty; return rows inserted."""

        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) FROM roster_config").fetchone()[0]
            if count > 0:
                logger.info("Roster config already has %d entries; skipping seed", count)
                return 0
            conn.executemany(
                "INSERT INTO roster_config (name, rating, created_at, updated_at) VALUES (?, ?, ?, ?)",
                [(name, rating, now, now) for name, rating in roster],
            )
            conn.commit()
        logger.info("Seeded %d roster config entries", len(roster))
        return len(roster)

    # Players -------------------------------------------------------------

    def list_players(self) -> List[Player]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY sort_order ASC").fetchall()
        return [Player(id=row["id"], name=row["name"], rating=row["rating"]) for row in rows]

    def sync_players(self, players: Iterable[Player]) -> int:
        """Replace the session roster; team slots of removed players are dropped."""

        players = list(players)
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute("DELETE FROM players")
            conn.executemany(
                "INSERT INTO players (id, name, rating, sort_order, created_at) VALUES (?, ?, ?, ?, ?)",
                [(player.id, player.name, player.rating, idx, now) for idx, player in enumerate(players)],
            )
            conn.execute("DELETE FROM team_players WHERE player_id NOT IN (SELECT id FROM players)")
            conn.commit()
        return len(players)

    # Teams ---------------------------------------------------------------

    def list_teams(self) -> List[Team]:
        with self._connect() as conn:
            team_rows = conn.execute("SELECT * FROM teams ORDER BY sort_order ASC").fetchall()
            member_rows = conn.execute(
                """
                SELECT tp.team_id, tp.is_locked, p.id, p.name, p.rating
                FROM team_players tp
                JOIN players p ON tp.player_id = p.id
                ORDER BY tp.team_id, tp.position
                """
            ).fetchall()

        members: dict[str, list[Player]] = {}
        locked: dict[str, set[str]] = {}
        for row in member_rows:
            members.setdefault(row["team_id"], []).append(
                Player(id=row["id"], name=row["name"], rating=row["rating"])
            )
            if row["is_locked"]:
                locked.setdefault(row["team_id"], set()).add(row["id"])

        return [
            Team(
                id=row["id"],
                name=row["name"],
                players=members.get(row["id"], []),
                locked_players=frozenset(locked.get(row["id"], set())),
            )
            for row in team_rows
        ]

    def sync_teams(self, teams: Iterable[Team]) -> int:
        """Replace every team and team slot.

        Raises ValueError for repeated team ids, for a player placed in more
        than one slot, and for players not in the roster.
        """

        teams = list(teams)
        team_ids = Counter(team.id for team in teams)
        repeated_teams = sorted(team_id for team_id, count in team_ids.items() if count > 1)
        if repeated_teams:
            raise ValueError(f"Duplicate team ids: {', '.join(repeated_teams)}")
        slots = Counter(pid for team in teams for pid in team.player_ids())
        repeated_players = sorted(pid for pid, count in slots.items() if count > 1)
        if repeated_players:
            raise ValueError(f"Players assigned to more than one slot: {', '.join(repeated_players)}")

        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            known = {row["id"] for row in conn.execute("SELECT id FROM players").fetchall()}
            missing = sorted({pid for team in teams for pid in team.player_ids() if pid not in known})
            if missing:
                raise ValueError(f"Unknown player ids: {', '.join(missing)}")
            conn.execute("DELETE FROM team_players")
            conn.execute("DELETE FROM teams")
            for sort_order, team in enumerate(teams):
                conn.execute(
                    "INSERT INTO teams (id, name, sort_order, created_at) VALUES (?, ?, ?, ?)",
                    (team.id, team.name, sort_order, now),
                )
                conn.executemany(
                    "INSERT INTO team_players (team_id, player_id, is_locked, position) VALUES (?, ?, ?, ?)",
                    [
                        (team.id, player.id, int(team.is_locked(player.id)), position)
                        for position, player in enumerate(team.players)
                    ],
                )
            conn.commit()
        return len(teams)

    # Saved configurations -------------------------------------------------

    def save_config(
        self,
        *,
        name: str,
        teams: Iterable[dict],
        unassigned_players: Iterable[dict],
        config_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> SavedConfigRecord:
        config_id = config_id or uuid4().hex
        created_at = created_at or datetime.now(timezone.utc)
        data = {"teams": list(teams), "unassignedPlayers": list(unassigned_players)}
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO saved_configurations (id, name, data_json, created_at) VALUES (?, ?, ?, ?)",
                (config_id, name, json.dumps(data), created_at.isoformat()),
            )
            conn.commit()
        record = self.get_saved_config(config_id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Configuration {config_id} not found after insert")
        return record

    def get_saved_config(self, config_id: str) -> Optional[SavedConfigRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM saved_configurations WHERE id = ?", (config_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_config(row)

    def list_saved_configs(self, limit: int = 100) -> List[SavedConfigRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM saved_configurations ORDER BY datetime(created_at) DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_config(row) for row in rows]

    def delete_saved_config(self, config_id: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM saved_configurations WHERE id = ?", (config_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise KeyError(f"Configuration {config_id} not found")

    def _row_to_entry(self, row: sqlite3.Row) -> RosterEntry:
        return RosterEntry(
            entry_id=row["id"],
            name=row["name"],
            rating=row["rating"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_config(self, row: sqlite3.Row) -> SavedConfigRecord:
        data = json.loads(row["data_json"])
        return SavedConfigRecord(
            config_id=row["id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
            teams=data.get("teams", []),
            unassigned_players=data.get("unassignedPlayers", []),
        )
