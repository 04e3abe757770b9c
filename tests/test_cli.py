import json

import pytest

from teammaker.cli import main
from teammaker.snapshot import RosterSnapshot


def _write_snapshot(path, *, teams=None):
    players = [
        {"id": "cap", "name": "Captain", "rating": "D"},
        {"id": "a", "name": "Ace", "rating": "A"},
        {"id": "b", "name": "Bee", "rating": "A"},
        {"id": "c", "name": "Cee", "rating": "D"},
    ]
    if teams is None:
        teams = [
            {"id": "t1", "name": "One", "players": [players[0]], "lockedPlayers": ["cap"]},
            {"id": "t2", "name": "Two", "players": [], "lockedPlayers": []},
        ]
    path.write_text(json.dumps({"players": players, "teams": teams}), encoding="utf-8")


def test_cli_balances_snapshot(tmp_path, capsys):
    source = tmp_path / "snapshot.json"
    output = tmp_path / "balanced.json"
    csv_path = tmp_path / "teams.csv"
    _write_snapshot(source)

    main([str(source), "--capacity", "2", "--output", str(output), "--csv", str(csv_path)])

    result = RosterSnapshot.load(output)
    assert result.teams[0].player_ids()[0] == "cap"
    assert result.teams[0].locked_players == frozenset({"cap"})
    assert sorted(len(team.players) for team in result.teams) == [2, 2]
    assert result.unplaced == []
    assert "Variance of team averages" in capsys.readouterr().out
    assert csv_path.read_text(encoding="utf-8").startswith("Team,Player Name")


def test_cli_creates_default_teams_and_reports_overflow(tmp_path, capsys):
    source = tmp_path / "snapshot.json"
    output = tmp_path / "out.json"
    _write_snapshot(source, teams=[])

    main([str(source), "--teams", "1", "--capacity", "3", "--randomize", "--seed", "4", "--output", str(output)])

    result = RosterSnapshot.load(output)
    assert [team.id for team in result.teams] == ["team-1"]
    assert len(result.teams[0].players) == 3
    assert len(result.unplaced) == 1
    assert "Unplaced:" in capsys.readouterr().out


def test_cli_rejects_bad_snapshot(tmp_path):
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit):
        main([str(source)])
