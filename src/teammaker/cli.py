"""Command-line interface for balancing a roster snapshot."""

from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from pydantic import ValidationError

from teammaker.balancer import balance_teams, randomize_teams
from teammaker.config import DEFAULT_CAPACITY, DEFAULT_TEAM_COUNT, default_team_layout, iter_scales
from teammaker.export import export_teams_to_csv, unassigned_players
from teammaker.models import Team
from teammaker.snapshot import RosterSnapshot


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Distribute a roster snapshot into balanced teams")
    parser.add_argument("snapshot", type=Path, help="Path to snapshot JSON with players and teams")
    parser.add_argument("--capacity", type=int, default=DEFAULT_CAPACITY, help="Players per team")
    parser.add_argument(
        "--teams",
        type=int,
        default=DEFAULT_TEAM_COUNT,
        help="Create this many empty teams when the snapshot has none",
    )
    parser.add_argument(
        "--scale",
        default="standard",
        choices=[scale.name for scale in iter_scales()],
        help="Rating scale used to score players",
    )
    parser.add_argument("--randomize", action="store_true", help="Shuffle instead of balancing")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --randomize")
    parser.add_argument("--output", type=Path, default=None, help="Write the resulting snapshot JSON here")
    parser.add_argument("--csv", type=Path, default=None, help="Write a CSV export of the result here")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.capacity < 0:
        raise SystemExit("--capacity must be >= 0")

    try:
        snapshot = RosterSnapshot.load(args.snapshot)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise SystemExit(f"Could not read snapshot {args.snapshot}: {exc}") from exc

    teams = snapshot.teams
    if not teams:
        teams = [Team(id=team_id, name=name) for team_id, name in default_team_layout(args.teams)]

    try:
        if args.randomize:
            rng = random.Random(args.seed) if args.seed is not None else None
            result = randomize_teams(teams, args.capacity, snapshot.players, rng=rng, scale=args.scale)
        else:
            result = balance_teams(teams, args.capacity, snapshot.players, scale=args.scale)
    except KeyError as exc:
        raise SystemExit(f"Cannot score snapshot: {exc.args[0]}") from exc

    for team in result.teams:
        ratings = " ".join(player.rating for player in team.players) or "-"
        print(f"{team.name}: {len(team.players)} players [{ratings}]")
    print(f"Variance of team averages: {result.variance:.4f} ({result.passes} passes)")
    if result.unplaced:
        print(f"Unplaced: {', '.join(player.name for player in result.unplaced)}")

    if args.output:
        RosterSnapshot(players=snapshot.players, teams=result.teams, unplaced=result.unplaced).save(args.output)

    if args.csv:
        csv_text = export_teams_to_csv(
            result.teams,
            unassigned_players(result.teams, snapshot.players),
            scale=args.scale,
        )
        args.csv.write_text(csv_text, encoding="utf-8")


if __name__ == "__main__":
    main()
