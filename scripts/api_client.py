"""Lightweight REST client for the teammaker API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_snapshot(path: Path | None) -> dict:
    if path is None:
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid snapshot JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the teammaker REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--upload", type=Path, help="Snapshot JSON whose players/teams replace the stored ones")
    parser.add_argument("--seed-roster", action="store_true", help="Seed the default master roster if empty")
    parser.add_argument("--balance", action="store_true", help="Balance the stored teams")
    parser.add_argument("--randomize", action="store_true", help="Shuffle the stored teams")
    parser.add_argument("--capacity", type=int, default=4, help="Players per team")
    parser.add_argument("--persist", action="store_true", help="Save the balanced or shuffled teams")
    parser.add_argument("--list-teams", action="store_true", help="Print stored teams and exit")
    parser.add_argument("--export-path", type=Path, help="Download the teams CSV to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.seed_roster:
            resp = client.post("/api/roster-config/seed")
            resp.raise_for_status()
            print(resp.json()["message"])

        if args.upload:
            snapshot = load_snapshot(args.upload)
            resp = client.post("/api/players/sync", json={"players": snapshot.get("players", [])})
            resp.raise_for_status()
            print(f"Synced {resp.json()['count']} players")
            if snapshot.get("teams"):
                resp = client.post("/api/teams/sync", json={"teams": snapshot["teams"]})
                if resp.status_code == 400:
                    raise SystemExit(resp.json()["detail"])
                resp.raise_for_status()
                print(f"Synced {resp.json()['count']} teams")

        if args.list_teams:
            resp = client.get("/api/teams")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.balance or args.randomize:
            endpoint = "/api/teams/randomize" if args.randomize else "/api/teams/balance"
            request = {"capacity": args.capacity, "persist": args.persist}
            resp = client.post(endpoint, json=request)
            resp.raise_for_status()
            payload = resp.json()
            for item in payload["summary"]:
                print(f"{item['name']}: {item['player_count']} players, avg {item['average']:.2f}")
            print(f"Variance {payload['variance']:.4f} after {payload['passes']} passes")
            if payload["unplaced"]:
                print("Unplaced:", ", ".join(player["name"] for player in payload["unplaced"]))

        if args.export_path:
            resp = client.get("/api/teams/export.csv")
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
