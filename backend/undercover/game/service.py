from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import RLock

from ..config import Config
from . import reconnect, roles, voting, words
from .errors import AlreadyExists, InvalidState, NotFound
from .messages import (
    DEAL_WORDS,
    GAME_STARTED,
    KICKED_FROM_ROOM,
    REJOIN_SUCCESS,
    ROOM_UPDATED,
    Outbound,
    to_player,
    to_room,
)
from .models import Player, Room, RoundState
from .views import room_public_state


logger = logging.getLogger(__name__)

# listName -> ordered "word,word" entries, or None when the list is unknown.
WordListLookup = Callable[[str], "list[str] | None"]

_lock = RLock()
_rooms: dict[str, Room] = {}


@dataclass
class RemovalResult:
    removed: bool = False
    room_deleted: bool = False
    messages: list[Outbound] = field(default_factory=list)


@dataclass
class RejoinResult:
    room: Room
    previous_id: str | None
    messages: list[Outbound] = field(default_factory=list)


def _room_updated(room: Room) -> Outbound:
    return to_room(room.id, ROOM_UPDATED, room_public_state(room))


def get_room(room_id: str) -> Room | None:
    with _lock:
        return _rooms.get(room_id)


def require_room(room_id: str) -> Room:
    room = get_room(room_id)
    if room is None:
        raise NotFound(f'room "{room_id}" not found', code="room_not_found")
    return room


def clear_rooms() -> None:
    with _lock:
        _rooms.clear()


def create_room(
    room_id: str,
    host_id: str,
    host_name: str,
    list_name: str | None = None,
    player_key: str = "",
) -> tuple[Room, list[Outbound]]:
    with _lock:
        if room_id in _rooms:
            raise AlreadyExists(f'room "{room_id}" already exists', code="room_exists")

        room = Room(
            id=room_id,
            host=host_id,
            list_name=list_name or Config.DEFAULT_LIST_NAME,
            players=[Player(id=host_id, name=host_name, player_key=player_key)],
        )
        _rooms[room_id] = room
        logger.info("Room %s created by %s (%s)", room_id, host_name, host_id)
        return room, [_room_updated(room)]


def join_room(room_id: str, player_id: str, player_name: str, player_key: str = "") -> list[Outbound]:
    with _lock:
        room = require_room(room_id)
        if room.find_player(player_id) is not None:
            return []

        room.players.append(Player(id=player_id, name=player_name, player_key=player_key))

        # Host vanished without cleanup: promote the first player.
        if room.find_player(room.host) is None:
            room.host = room.players[0].id

        logger.info("Room %s: %s joined (%s)", room_id, player_name, player_id)
        return [_room_updated(room)]


def _remove_locked(room: Room, player_id: str) -> RemovalResult:
    player = room.find_player(player_id)
    if player is None:
        return RemovalResult()

    room.players.remove(player)
    if not room.players:
        del _rooms[room.id]
        logger.info("Room %s destroyed (last player left)", room.id)
        return RemovalResult(removed=True, room_deleted=True)

    if room.host == player_id:
        room.host = room.players[0].id
        logger.info("Room %s: host reassigned to %s", room.id, room.host)

    messages: list[Outbound] = []
    if room.round is not None:
        voting.drop_player_votes(room.round, player_id)
        if room.status == "playing":
            messages.extend(voting.resolve(room).messages)

    messages.append(_room_updated(room))
    return RemovalResult(removed=True, messages=messages)


def leave_room(room_id: str, player_id: str) -> RemovalResult:
    with _lock:
        room = _rooms.get(room_id)
        if room is None:
            return RemovalResult()
        result = _remove_locked(room, player_id)
        if result.removed:
            logger.info("Room %s: %s left", room_id, player_id)
        return result


def kick_player(room_id: str, requester_id: str, target_id: str) -> RemovalResult:
    with _lock:
        room = _rooms.get(room_id)
        if room is None or room.host != requester_id:
            return RemovalResult()
        if room.find_player(target_id) is None:
            return RemovalResult()

        result = _remove_locked(room, target_id)
        result.messages.insert(0, to_player(target_id, KICKED_FROM_ROOM, {"roomId": room_id}))
        logger.info("Room %s: %s kicked by host", room_id, target_id)
        return result


def change_list(room_id: str, list_name: str, lookup: WordListLookup) -> list[Outbound]:
    with _lock:
        room = require_room(room_id)
        if lookup(list_name) is None:
            raise NotFound(f'word list "{list_name}" not found', code="list_not_found")
        room.list_name = list_name
        return [_room_updated(room)]


def start_game(
    room_id: str,
    requester_id: str,
    spy_count: int,
    lookup: WordListLookup,
) -> list[Outbound]:
    with _lock:
        room = require_room(room_id)
        if requester_id != room.host:
            raise InvalidState("only the host can start the game", code="only_host")

        # Validate everything before touching the room so a failure keeps its status.
        pairs = words.validate_word_list(room.list_name, lookup(room.list_name))
        spy_ids = roles.assign_roles(room.players, spy_count)

        for p in room.players:
            p.alive = True
            p.in_punishment = False

        swap_allowed = room.list_name not in Config.FIXED_ORDER_LISTS
        word_map = words.deal(pairs, room.players, spy_ids, swap_allowed=swap_allowed)

        room.round = RoundState(word_map=word_map, spy_ids=spy_ids)
        room.status = "playing"
        room.game_started = True
        room.voting_started = True

        logger.info(
            "Room %s: game started with %d players, %d impostor(s), list %s",
            room_id,
            len(room.players),
            len(spy_ids),
            room.list_name,
        )

        state = room_public_state(room)
        messages = [
            to_room(room_id, ROOM_UPDATED, state),
            to_room(room_id, GAME_STARTED, {"room": state}),
        ]
        for pid, rec in word_map.items():
            messages.append(to_player(pid, DEAL_WORDS, {"word": rec.word, "role": rec.role}))
        return messages


def submit_vote(room_id: str, voter_id: str, target_id: str) -> voting.VoteResult:
    with _lock:
        room = require_room(room_id)
        return voting.submit(room, voter_id, target_id)


def reset_game(room_id: str, requester_id: str) -> list[Outbound]:
    with _lock:
        room = _rooms.get(room_id)
        if room is None or room.host != requester_id:
            return []

        room.round = None
        room.status = "waiting"
        room.game_started = False
        room.voting_started = False
        for p in room.players:
            p.role = None
            p.alive = False
            p.in_punishment = False

        logger.info("Room %s reset to lobby", room_id)
        return [_room_updated(room)]


def complete_punishment(room_id: str, player_id: str) -> list[Outbound]:
    with _lock:
        room = _rooms.get(room_id)
        if room is None:
            return []
        player = room.find_player(player_id)
        if player is None or not player.in_punishment:
            return []
        player.in_punishment = False
        return [_room_updated(room)]


def rejoin_room(room_id: str, new_id: str, player_name: str, player_key: str = "") -> RejoinResult:
    with _lock:
        room = _rooms.get(room_id)
        if room is None:
            raise NotFound("room not found", code="room_not_found")

        merged = reconnect.merge(room, new_id, player_name, player_key)
        state = room_public_state(room)
        return RejoinResult(
            room=room,
            previous_id=merged.previous_id,
            messages=[
                to_room(room_id, ROOM_UPDATED, state),
                to_player(new_id, REJOIN_SUCCESS, {"room": state}),
            ],
        )


def mark_disconnected(player_id: str) -> list[tuple[str, list[Outbound]]]:
    """Flag the connection as gone in every room it belongs to."""
    with _lock:
        affected = []
        for room in _rooms.values():
            player = room.find_player(player_id)
            if player is None:
                continue
            player.connected = False
            affected.append((room.id, [_room_updated(room)]))
        return affected


def room_status(room_id: str) -> dict:
    room = get_room(room_id)
    if room is None:
        return {"exists": False}
    return {"exists": True, "status": room.status, "playerCount": len(room.players)}
