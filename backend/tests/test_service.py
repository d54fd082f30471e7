import pytest

from undercover.config import Config
from undercover.game import service
from undercover.game.errors import AlreadyExists, InvalidState, NotFound

from helpers import events, make_playing_room, make_room


LISTS = {
    "default": ["cat,mouse", "sun,moon"],
    "empty": [],
    "broken": ["cat,mouse", "lonely"],
    "ordered": ["first,second"],
    "weird": "cat,mouse",
}


def lookup(name):
    return LISTS.get(name)


def test_create_room_and_duplicate():
    room, messages = service.create_room("r1", "h", "Host")

    assert room.host == "h"
    assert room.status == "waiting"
    assert room.list_name == Config.DEFAULT_LIST_NAME
    assert [p.id for p in room.players] == ["h"]
    assert not room.players[0].alive
    assert events(messages) == ["room-updated"]

    with pytest.raises(AlreadyExists):
        service.create_room("r1", "x", "Other")


def test_join_appends_and_is_idempotent_per_connection():
    make_room("r", ["a"])

    assert events(service.join_room("r", "b", "Bob")) == ["room-updated"]
    assert service.join_room("r", "b", "Bob") == []

    room = service.get_room("r")
    assert [p.id for p in room.players] == ["a", "b"]
    assert room.players[1].alive is False


def test_join_missing_room():
    with pytest.raises(NotFound):
        service.join_room("nope", "a", "A")


def test_join_promotes_first_player_when_host_vanished():
    room = make_room("r", ["a", "b"])
    room.host = "ghost"

    service.join_room("r", "c", "C")

    assert room.host == "a"


def test_leave_reassigns_host_and_destroys_empty_room():
    room = make_room("r", ["a", "b"])

    result = service.leave_room("r", "a")
    assert result.removed and not result.room_deleted
    assert room.host == "b"

    result = service.leave_room("r", "b")
    assert result.room_deleted
    assert service.get_room("r") is None


def test_kick_requires_host():
    room = make_room("r", ["a", "b", "c"])

    assert not service.kick_player("r", "b", "c").removed
    assert len(room.players) == 3

    result = service.kick_player("r", "a", "c")
    assert result.removed
    assert result.messages[0].event == "kicked-from-room"
    assert result.messages[0].to == "c" and result.messages[0].private
    assert [p.id for p in room.players] == ["a", "b"]


def test_change_list_requires_existing_list():
    room = make_room("r", ["a"])
    service.change_list("r", "ordered", lookup)
    assert room.list_name == "ordered"

    with pytest.raises(NotFound):
        service.change_list("r", "missing", lookup)
    assert room.list_name == "ordered"


def test_start_game_deals_private_words():
    make_room("r", ["a", "b", "c", "d"])

    messages = service.start_game("r", "a", 1, lookup)

    room = service.get_room("r")
    assert room.status == "playing"
    assert room.game_started and room.voting_started
    assert all(p.alive for p in room.players)
    assert sum(p.role == "impostor" for p in room.players) == 1
    assert room.round.spy_ids == {p.id for p in room.players if p.role == "impostor"}

    assert events(messages)[:2] == ["room-updated", "game-started"]
    deals = [m for m in messages if m.event == "deal-words"]
    assert sorted(m.to for m in deals) == ["a", "b", "c", "d"]
    for m in deals:
        assert m.private
        assert set(m.payload) == {"word", "role"}
        assert m.payload["role"] == room.find_player(m.to).role
        assert m.payload["word"] == room.round.word_map[m.to].word

    # roles are not leaked in the broadcast snapshot
    assert all(p["role"] is None for p in messages[0].payload["players"])


@pytest.mark.parametrize(
    "list_name,exc",
    [("missing", NotFound), ("empty", InvalidState), ("broken", InvalidState), ("weird", InvalidState)],
)
def test_start_game_guard_keeps_previous_status(list_name, exc):
    room = make_room("r", ["a", "b", "c"], list_name=list_name)

    with pytest.raises(exc):
        service.start_game("r", "a", 1, lookup)

    assert room.status == "waiting"
    assert room.round is None
    assert all(p.role is None for p in room.players)


@pytest.mark.parametrize("spy_count", [0, 3, 5])
def test_start_game_rejects_bad_spy_count(spy_count):
    room = make_room("r", ["a", "b", "c"])
    with pytest.raises(InvalidState):
        service.start_game("r", "a", spy_count, lookup)
    assert room.status == "waiting"


def test_start_game_host_only():
    make_room("r", ["a", "b", "c"])
    with pytest.raises(InvalidState):
        service.start_game("r", "b", 1, lookup)


def test_fixed_order_list_deals_first_token_to_civilians():
    room = make_room("r", ["a", "b", "c"], list_name="ordered")
    for _ in range(10):
        service.start_game("r", "a", 1, lookup)
        for p in room.players:
            expected = "second" if p.role == "impostor" else "first"
            assert room.round.word_map[p.id].word == expected


def test_start_again_from_finished_deals_a_fresh_round():
    room = make_room("r", ["a", "b", "c"])
    service.start_game("r", "a", 1, lookup)
    room.status = "finished"
    room.players[0].alive = False

    service.start_game("r", "a", 1, lookup)

    assert room.status == "playing"
    assert all(p.alive for p in room.players)
    assert room.round.votes == {}


def test_reset_is_host_only_and_idempotent():
    room = make_room("r", ["a", "b", "c"])
    service.start_game("r", "a", 1, lookup)
    service.submit_vote("r", "a", "b")

    assert service.reset_game("r", "b") == []
    assert room.status == "playing"

    for _ in range(2):
        messages = service.reset_game("r", "a")
        assert events(messages) == ["room-updated"]
        assert room.status == "waiting"
        assert room.round is None
        assert not room.game_started and not room.voting_started
        for p in room.players:
            assert p.role is None
            assert p.alive is False
            assert p.in_punishment is False


def test_removal_mid_round_drops_votes_and_resolves():
    room = make_playing_room("r", {"a": "civilian", "b": "civilian", "c": "impostor", "d": "civilian"})
    service.submit_vote("r", "a", "c")
    service.submit_vote("r", "b", "c")
    service.submit_vote("r", "c", "a")
    assert room.status == "playing"

    result = service.leave_room("r", "d")

    assert "d" not in room.round.votes
    assert "spy-eliminated" in events(result.messages)
    assert room.status == "finished"


def test_removal_drops_votes_targeting_the_leaver():
    room = make_playing_room("r", {"a": "civilian", "b": "civilian", "c": "impostor", "d": "civilian"})
    service.submit_vote("r", "a", "d")

    service.leave_room("r", "d")

    assert room.round.votes == {}
    assert room.status == "playing"


def test_room_status():
    assert service.room_status("r") == {"exists": False}
    make_room("r", ["a", "b"])
    assert service.room_status("r") == {"exists": True, "status": "waiting", "playerCount": 2}


def test_mark_disconnected():
    room = make_room("r", ["a", "b"])
    affected = service.mark_disconnected("b")
    assert [room_id for room_id, _ in affected] == ["r"]
    assert room.find_player("b").connected is False
    assert service.mark_disconnected("zzz") == []


def test_impostor_leaving_mid_game_ends_it_for_civilians():
    room = make_playing_room("r", {"a": "civilian", "b": "civilian", "c": "impostor"})
    service.submit_vote("r", "a", "b")

    result = service.leave_room("r", "c")

    assert room.status == "finished"
    assert not room.voting_started
    assert room.round.votes == {}
    names = events(result.messages)
    assert names[0] == "round-summary"
    assert "start-next-vote" not in names
    assert "vote-tie" not in names
    assert set(result.messages[0].payload["summary"]) == {"a", "b", "c"}

    with pytest.raises(InvalidState):
        service.submit_vote("r", "a", "b")


def test_kicking_the_impostor_ends_the_game():
    room = make_playing_room("r", {"a": "civilian", "b": "civilian", "c": "impostor", "d": "civilian"})

    result = service.kick_player("r", "a", "c")

    assert result.removed
    assert room.status == "finished"
    assert "round-summary" in events(result.messages)


def test_removal_leaving_only_dead_players_sends_no_tie():
    room = make_playing_room("r", {"a": "civilian", "b": "impostor", "c": "civilian"})
    room.find_player("a").alive = False
    room.find_player("b").alive = False

    result = service.leave_room("r", "c")

    assert events(result.messages) == ["room-updated"]
