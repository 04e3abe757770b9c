import pytest

from teammaker.config import DEFAULT_ROSTER
from teammaker.models import Player, Team
from teammaker.persistence import RosterStore


@pytest.fixture
def store(tmp_path) -> RosterStore:
    return RosterStore(tmp_path / "roster.sqlite")


def _players() -> list[Player]:
    return [
        Player(id="p1", name="Don", rating="A"),
        Player(id="p2", name="Kevin", rating="A-"),
        Player(id="p3", name="Mom", rating="D+"),
    ]


def test_roster_config_crud(store: RosterStore):
    entry = store.add_roster_entry(name="Pops", rating="B-")
    assert entry.entry_id > 0
    assert [item.name for item in store.list_roster_config()] == ["Pops"]

    updated = store.update_roster_entry(entry.entry_id, name="Pops Sr.", rating="B")
    assert updated.name == "Pops Sr."
    assert updated.rating == "B"

    store.delete_roster_entry(entry.entry_id)
    assert store.list_roster_config() == []

    with pytest.raises(KeyError):
        store.update_roster_entry(entry.entry_id, name="Ghost", rating="C")
    with pytest.raises(KeyError):
        store.delete_roster_entry(entry.entry_id)


def test_seed_roster_config_only_once(store: RosterStore):
    assert store.seed_roster_config() == len(DEFAULT_ROSTER)
    assert store.seed_roster_config() == 0
    entries = store.list_roster_config()
    assert len(entries) == len(DEFAULT_ROSTER)
    assert (entries[0].name, entries[0].rating) == DEFAULT_ROSTER[0]


def test_players_keep_sync_order(store: RosterStore):
    players = _players()
    assert store.sync_players(list(reversed(players))) == 3
    assert [player.id for player in store.list_players()] == ["p3", "p2", "p1"]


def test_teams_round_trip_with_positions_and_locks(store: RosterStore):
    players = _players()
    store.sync_players(players)
    teams = [
        Team(id="team-2", name="Team 2", players=[players[2], players[0]], locked_players=frozenset({"p1"})),
        Team(id="team-10", name="Team 10", players=[players[1]]),
        Team(id="team-1", name="Team 1"),
    ]

    assert store.sync_teams(teams) == 3
    loaded = store.list_teams()

    assert [team.id for team in loaded] == ["team-2", "team-10", "team-1"]
    assert loaded[0].player_ids() == ["p3", "p1"]
    assert loaded[0].locked_players == frozenset({"p1"})
    assert loaded[1].locked_players == frozenset()
    assert loaded[2].players == []


def test_sync_teams_rejects_unknown_players(store: RosterStore):
    store.sync_players(_players()[:1])
    team = Team(id="team-1", name="Team 1", players=[_players()[1]])

    with pytest.raises(ValueError):
        store.sync_teams([team])


def test_removing_player_drops_team_slot(store: RosterStore):
    players = _players()
    store.sync_players(players)
    store.sync_teams([Team(id="team-1", name="Team 1", players=players[:2], locked_players=frozenset({"p2"}))])

    store.sync_players(players[:1] + players[2:])

    team = store.list_teams()[0]
    assert team.player_ids() == ["p1"]
    assert team.locked_players == frozenset()


def test_saved_configs(store: RosterStore):
    first = store.save_config(
        name="Week 1",
        teams=[{"id": "team-1", "name": "Team 1", "players": [], "lockedPlayers": []}],
        unassigned_players=[{"id": "p1", "name": "Don", "rating": "A"}],
    )
    second = store.save_config(name="Week 2", teams=[], unassigned_players=[], config_id="cfg-2")

    assert second.config_id == "cfg-2"
    listed = store.list_saved_configs()
    assert [record.name for record in listed] == ["Week 2", "Week 1"]
    assert listed[1].unassigned_players[0]["name"] == "Don"

    store.delete_saved_config(first.config_id)
    assert store.get_saved_config(first.config_id) is None
    with pytest.raises(KeyError):
        store.delete_saved_config(first.config_id)


def test_sync_teams_rejects_player_on_two_teams(store: RosterStore):
    players = _players()
    store.sync_players(players)
    teams = [
        Team(id="t1", name="One", players=[players[0]]),
        Team(id="t2", name="Two", players=[players[0], players[1]]),
    ]

    with pytest.raises(ValueError, match="p1"):
        store.sync_teams(teams)
    assert store.list_teams() == []


def test_sync_teams_rejects_repeated_slot_and_team_id(store: RosterStore):
    players = _players()
    store.sync_players(players)

    with pytest.raises(ValueError, match="p2"):
        store.sync_teams([Team(id="t1", name="One", players=[players[1], players[1]])])
    with pytest.raises(ValueError, match="t1"):
        store.sync_teams([Team(id="t1", name="One"), Team(id="t1", name="Again")])
