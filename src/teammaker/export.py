"""CSV export of team rosters and per-team summaries."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable, Sequence

from teammaker.balancer import team_average
from teammaker.config import RatingScale, get_scale
from teammaker.models import Player, Team


TEAM_HEADERS = ("Team", "Player Name", "Rating", "Rating Value", "Captain")
SUMMARY_HEADERS = ("Team", "Player Count", "Average Rating", "Captain Count")
UNASSIGNED_HEADERS = ("Player Name", "Rating", "Rating Value")


def _format_score(value: float) -> str:
    return f"{value:g}"


def unassigned_players(teams: Iterable[Team], all_players: Iterable[Player]) -> list[Player]:
    """Players from ``all_players`` that are not on any team, in pool order."""

    assigned = {player.id for team in teams for player in team.players}
    return [player for player in all_players if player.id not in assigned]


def export_teams_to_csv(
    teams: Sequence[Team],
    unassigned: Sequence[Player] = (),
    *,
    scale: RatingScale | str | None = None,
) -> str:
    """Render team rosters, a summary section and any unassigned players as CSV."""

    resolved = scale if isinstance(scale, RatingScale) else get_scale(scale)

    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEAM_HEADERS)
    for team in teams:
        if not team.players:
            writer.writerow([team.name, "(empty)", "", "", ""])
            continue
        for player in team.players:
            writer.writerow(
                [
                    team.name,
                    player.name,
                    player.rating,
                    _format_score(resolved.score(player.rating)),
                    "Yes" if team.is_locked(player.id) else "No",
                ]
            )

    writer.writerow([])
    writer.writerow([])
    writer.writerow(["Team Summary"])
    writer.writerow(SUMMARY_HEADERS)
    for team in teams:
        count = len(team.players)
        average = f"{team_average(team.players, resolved):.2f}" if count else "0"
        captains = sum(1 for player in team.players if team.is_locked(player.id))
        writer.writerow([team.name, count, average, captains])

    if unassigned:
        writer.writerow([])
        writer.writerow([])
        writer.writerow(["Unassigned Players"])
        writer.writerow(UNASSIGNED_HEADERS)
        for player in unassigned:
            writer.writerow([player.name, player.rating, _format_score(resolved.score(player.rating))])

    return buffer.getvalue()


__all__ = [
    "export_teams_to_csv",
    "unassigned_players",
]
