"""REST API for the team maker."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from teammaker.api.schemas import (
    AssignmentRequest,
    AssignmentResponse,
    PlayersSyncRequest,
    RosterEntryPayload,
    RosterEntryResponse,
    SavedConfigPayload,
    SavedConfigResponse,
    SyncResponse,
    TeamSummaryResponse,
    TeamsSyncRequest,
)
from teammaker.balancer import BalanceResult, balance_teams, randomize_teams, team_average
from teammaker.config import default_team_layout, get_scale
from teammaker.export import export_teams_to_csv, unassigned_players
from teammaker.models import Player, Team
from teammaker.persistence import RosterEntry, RosterStore, SavedConfigRecord


def entry_to_response(entry: RosterEntry) -> RosterEntryResponse:
    return RosterEntryResponse(id=entry.entry_id, name=entry.name, rating=entry.rating)


def config_to_response(record: SavedConfigRecord) -> SavedConfigResponse:
    return SavedConfigResponse(
        id=record.config_id,
        name=record.name,
        date=record.created_at,
        teams=record.teams,
        unassigned_players=record.unassigned_players,
    )


def _summarize(teams: list[Team], scale: str) -> list[TeamSummaryResponse]:
    return [
        TeamSummaryResponse(
            team_id=team.id,
            name=team.name,
            player_count=len(team.players),
            average=round(team_average(team.players, scale), 2),
            captain_count=sum(1 for player in team.players if team.is_locked(player.id)),
        )
        for team in teams
    ]


def _current_teams(store: RosterStore) -> list[Team]:
    teams = store.list_teams()
    if teams:
        return teams
    return [Team(id=team_id, name=name) for team_id, name in default_team_layout()]


def create_app(store: RosterStore | None = None) -> FastAPI:
    app = FastAPI(title="teammaker")
    store = store or RosterStore()
    app.state.roster_store = store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    # Roster config --------------------------------------------------------

    @app.get("/api/roster-config", response_model=list[RosterEntryResponse])
    async def list_roster_config():
        return [entry_to_response(entry) for entry in store.list_roster_config()]

    @app.post("/api/roster-config", response_model=RosterEntryResponse, status_code=201)
    async def add_roster_entry(payload: RosterEntryPayload):
        return entry_to_response(store.add_roster_entry(name=payload.name, rating=payload.rating))

    @app.put("/api/roster-config/{entry_id}", response_model=RosterEntryResponse)
    async def update_roster_entry(entry_id: int, payload: RosterEntryPayload):
        try:
            entry = store.update_roster_entry(entry_id, name=payload.name, rating=payload.rating)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Roster config entry not found") from exc
        return entry_to_response(entry)

    @app.delete("/api/roster-config/{entry_id}")
    async def delete_roster_entry(entry_id: int) -> dict[str, str]:
        try:
            store.delete_roster_entry(entry_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Roster config entry not found") from exc
        return {"message": "Roster config entry deleted successfully"}

    @app.post("/api/roster-config/seed", response_model=SyncResponse)
    async def seed_roster_config():
        inserted = store.seed_roster_config()
        message = "Roster config seeded" if inserted else "Roster config already populated"
        return SyncResponse(message=message, count=inserted)

    # Players --------------------------------------------------------------

    @app.get("/api/players", response_model=list[Player])
    async def list_players():
        return store.list_players()

    @app.post("/api/players/sync", response_model=SyncResponse)
    async def sync_players(payload: PlayersSyncRequest):
        ids = [player.id for player in payload.players]
        if len(ids) != len(set(ids)):
            raise HTTPException(status_code=400, detail="Duplicate player ids in payload")
        count = store.sync_players(payload.players)
        return SyncResponse(message="Players synced successfully", count=count)

    # Teams ----------------------------------------------------------------

    @app.get("/api/teams", response_model=list[Team])
    async def list_teams():
        return store.list_teams()

    @app.post("/api/teams/sync", response_model=SyncResponse)
    async def sync_teams(payload: TeamsSyncRequest):
        try:
            count = store.sync_teams(payload.teams)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return SyncResponse(message="Teams synced successfully", count=count)

    def _run_assignment(request: AssignmentRequest | None, *, shuffle: bool) -> AssignmentResponse:
        request = request or AssignmentRequest()
        players = store.list_players()
        teams = _current_teams(store)
        try:
            if shuffle:
                rng = random.Random(request.seed) if request.seed is not None else None
                result: BalanceResult = randomize_teams(
                    teams, request.capacity, players, rng=rng, scale=request.scale
                )
            else:
                result = balance_teams(teams, request.capacity, players, scale=request.scale)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc.args[0])) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        if request.persist:
            store.sync_teams(result.teams)

        return AssignmentResponse(
            teams=result.teams,
            unplaced=result.unplaced,
            variance=result.variance,
            passes=result.passes,
            summary=_summarize(result.teams, request.scale),
        )

    @app.post("/api/teams/balance", response_model=AssignmentResponse)
    async def balance(request: AssignmentRequest | None = None):
        return _run_assignment(request, shuffle=False)

    @app.post("/api/teams/randomize", response_model=AssignmentResponse)
    async def randomize(request: AssignmentRequest | None = None):
        return _run_assignment(request, shuffle=True)

    @app.get("/api/teams/export.csv")
    async def export_csv(scale: str = "standard"):
        teams = store.list_teams()
        players = store.list_players()
        try:
            csv_text = export_teams_to_csv(teams, unassigned_players(teams, players), scale=get_scale(scale))
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc.args[0])) from exc
        filename = f"teams-{datetime.now().strftime('%Y-%m-%d')}.csv"
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    # Saved configurations -------------------------------------------------

    @app.get("/api/saved-configs", response_model=list[SavedConfigResponse])
    async def list_saved_configs():
        return [config_to_response(record) for record in store.list_saved_configs()]

    @app.post("/api/saved-configs", response_model=SavedConfigResponse, status_code=201)
    async def save_config(payload: SavedConfigPayload):
        if payload.id and store.get_saved_config(payload.id) is not None:
            raise HTTPException(status_code=400, detail="Configuration id already exists")
        record = store.save_config(
            config_id=payload.id,
            name=payload.name,
            teams=[team.model_dump(by_alias=True) for team in payload.teams],
            unassigned_players=[player.model_dump() for player in payload.unassigned_players],
        )
        return config_to_response(record)

    @app.delete("/api/saved-configs/{config_id}")
    async def delete_saved_config(config_id: str) -> dict[str, Any]:
        try:
            store.delete_saved_config(config_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Configuration not found") from exc
        return {"message": "Configuration deleted successfully"}

    return app


__all__ = ["create_app"]
