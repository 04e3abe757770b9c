import pytest
from pydantic import ValidationError

from teammaker.api.schemas import RosterEntryPayload
from teammaker.models import Player, Team


def test_player_is_frozen():
    player = Player(id="p1", name="Don", rating="A")

    assert player.rating == "A"

    with pytest.raises((TypeError, ValidationError)):
        player.rating = "B"  # type: ignore[misc]


def test_player_rating_is_normalized_and_validated():
    assert Player(id="p1", name="Kevin", rating=" a- ").rating == "A-"
    with pytest.raises(ValidationError):
        Player(id="p2", name="Nobody", rating="E")


def test_team_locked_players_wire_format():
    team = Team.model_validate(
        {
            "id": "team-1",
            "name": "Team 1",
            "players": [
                {"id": "p2", "name": "Kyle", "rating": "B"},
                {"id": "p1", "name": "Don", "rating": "A"},
            ],
            "lockedPlayers": ["p1", "p2"],
        }
    )

    assert team.locked_players == frozenset({"p1", "p2"})
    assert team.is_locked("p1")
    dumped = team.model_dump(by_alias=True)
    # Locked ids follow the roster order on the wire.
    assert dumped["lockedPlayers"] == ["p2", "p1"]


def test_team_with_players_returns_copy():
    team = Team(id="team-1", name="Team 1")
    player = Player(id="p1", name="Don", rating="A")

    updated = team.with_players([player])

    assert team.players == []
    assert updated.player_ids() == ["p1"]
    assert updated.id == team.id


def test_roster_entry_payload_shares_player_rating_rules():
    assert RosterEntryPayload(name="Pops", rating=" b+ ").rating == "B+"
    with pytest.raises(ValidationError) as player_error:
        Player(id="p1", name="Pops", rating="E")
    with pytest.raises(ValidationError) as payload_error:
        RosterEntryPayload(name="Pops", rating="E")
    assert player_error.value.errors()[0]["msg"] == payload_error.value.errors()[0]["msg"]
