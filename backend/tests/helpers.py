from undercover.game import service
from undercover.game.models import RoundState, WordRecord


WORDS = {"civilian": "apple", "impostor": "pear"}


def make_room(room_id, player_ids, list_name="default"):
    service.create_room(room_id, player_ids[0], f"name-{player_ids[0]}", list_name=list_name)
    for pid in player_ids[1:]:
        service.join_room(room_id, pid, f"name-{pid}")
    return service.get_room(room_id)


def make_playing_room(room_id, roles):
    """roles: ordered mapping player id -> "civilian" | "impostor"."""
    room = make_room(room_id, list(roles))
    word_map = {}
    for p in room.players:
        p.role = roles[p.id]
        p.alive = True
        word_map[p.id] = WordRecord(word=WORDS[p.role], role=p.role, player_name=p.name)
    room.round = RoundState(
        word_map=word_map,
        spy_ids={pid for pid, r in roles.items() if r == "impostor"},
    )
    room.status = "playing"
    room.game_started = True
    room.voting_started = True
    return room


def events(messages):
    return [m.event for m in messages]
