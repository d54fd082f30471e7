from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..config import Config
from ..game import service
from ..game.errors import GameError
from ..game.messages import (
    GAME_ERROR,
    REJOIN_FAILED,
    ROOM_EXISTS,
    VISIBILITY_UPDATED,
    Outbound,
)
from ..storage.wordlists import WordListStore
from .timers import DisconnectTimers


logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > Config.MAX_NAME_LENGTH:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _str_field(payload: dict, key: str) -> str:
    value = payload.get(key, "")
    return value.strip() if isinstance(value, str) else ""


def register_socketio_handlers(
    socketio: SocketIO,
    word_lists: WordListStore,
    timers: DisconnectTimers,
) -> None:
    def _dispatch(messages: Iterable[Outbound]) -> None:
        for m in messages:
            socketio.emit(m.event, m.payload, to=m.to)

    def _error(err: GameError, event: str = GAME_ERROR) -> dict:
        logger.info("Rejected request from %s: %s", request.sid, err.message)
        emit(event, {"message": err.message, "error": err.code}, to=request.sid)
        return {"ok": False, "error": err.code}

    def _invalid_payload() -> dict:
        emit(GAME_ERROR, {"message": "invalid payload", "error": "invalid_payload"}, to=request.sid)
        return {"ok": False, "error": "invalid_payload"}

    def _expire(room_ids: list[str], connection_id: str) -> None:
        for room_id in room_ids:
            _dispatch(service.leave_room(room_id, connection_id).messages)

    @socketio.on("create-room")
    def create_room(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        name = _str_field(payload, "name")
        list_name = _str_field(payload, "listName")
        player_key = _str_field(payload, "playerKey")
        if not room_id or not _validate_name(name):
            return _invalid_payload()

        if list_name and word_lists.get(list_name) is None:
            list_name = ""

        try:
            _, messages = service.create_room(
                room_id, request.sid, name, list_name=list_name or None, player_key=player_key
            )
        except GameError as err:
            return _error(err, event=ROOM_EXISTS)

        join_room(room_id)
        _dispatch(messages)
        return {"ok": True}

    @socketio.on("join-room")
    def on_join_room(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        name = _str_field(payload, "name")
        player_key = _str_field(payload, "playerKey")
        if not room_id or not _validate_name(name):
            return _invalid_payload()

        try:
            messages = service.join_room(room_id, request.sid, name, player_key=player_key)
        except GameError as err:
            return _error(err)

        join_room(room_id)
        _dispatch(messages)
        return {"ok": True}

    @socketio.on("leave-room")
    def on_leave_room(data):
        room_id = _str_field(data or {}, "roomId")
        if not room_id:
            return {"ok": False, "error": "invalid_room"}

        result = service.leave_room(room_id, request.sid)
        leave_room(room_id)
        _dispatch(result.messages)
        return {"ok": True}

    @socketio.on("rejoin-room")
    def rejoin_room(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        name = _str_field(payload, "playerName")
        player_key = _str_field(payload, "playerKey")
        if not room_id or not _validate_name(name):
            emit(REJOIN_FAILED, {"message": "invalid payload"}, to=request.sid)
            return {"ok": False, "error": "invalid_payload"}

        try:
            result = service.rejoin_room(room_id, request.sid, name, player_key=player_key)
        except GameError as err:
            return _error(err, event=REJOIN_FAILED)

        if result.previous_id:
            timers.cancel(result.previous_id)
        timers.cancel(request.sid)

        join_room(room_id)
        _dispatch(result.messages)
        return {"ok": True}

    @socketio.on("check-room-status")
    def check_room_status(data):
        return service.room_status(_str_field(data or {}, "roomId"))

    @socketio.on("kick-player")
    def kick_player(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        target_id = _str_field(payload, "playerId")
        if not room_id or not target_id:
            return {"ok": False, "error": "invalid_payload"}

        result = service.kick_player(room_id, request.sid, target_id)
        if not result.removed:
            return {"ok": False, "error": "not_allowed"}

        _dispatch(result.messages[:1])
        leave_room(room_id, sid=target_id)
        _dispatch(result.messages[1:])
        return {"ok": True}

    @socketio.on("change-list")
    def change_list(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        list_name = _str_field(payload, "listName")
        if not room_id or not list_name:
            return _invalid_payload()

        try:
            messages = service.change_list(room_id, list_name, word_lists.get)
        except GameError as err:
            return _error(err)

        _dispatch(messages)
        return {"ok": True}

    @socketio.on("start-game")
    def start_game(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        spy_raw: Any = payload.get("spyCount", 1)
        if not room_id:
            return _invalid_payload()

        try:
            spy_count = int(spy_raw)
        except (TypeError, ValueError):
            return _invalid_payload()

        try:
            messages = service.start_game(room_id, request.sid, spy_count, word_lists.get)
        except GameError as err:
            return _error(err)

        _dispatch(messages)
        return {"ok": True}

    @socketio.on("submit-vote")
    def submit_vote(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        to_id = _str_field(payload, "toId")
        if not room_id or not to_id:
            return _invalid_payload()

        try:
            result = service.submit_vote(room_id, request.sid, to_id)
        except GameError as err:
            return _error(err)

        _dispatch(result.messages)
        return {"ok": True, "outcome": result.outcome}

    @socketio.on("reset-game")
    def reset_game(data):
        room_id = _str_field(data or {}, "roomId")
        messages = service.reset_game(room_id, request.sid)
        _dispatch(messages)
        return {"ok": bool(messages)}

    @socketio.on("punishment-completed")
    def punishment_completed(data):
        room_id = _str_field(data or {}, "roomId")
        _dispatch(service.complete_punishment(room_id, request.sid))
        return {"ok": True}

    @socketio.on("toggle-visibility")
    def toggle_visibility(data):
        payload = data or {}
        room_id = _str_field(payload, "roomId")
        if not room_id or service.get_room(room_id) is None:
            return {"ok": False, "error": "room_not_found"}
        socketio.emit(VISIBILITY_UPDATED, {"visible": bool(payload.get("visible"))}, to=room_id)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(*args):
        sid = request.sid
        affected = service.mark_disconnected(sid)
        for _, messages in affected:
            _dispatch(messages)
        if affected:
            room_ids = [room_id for room_id, _ in affected]
            timers.schedule(sid, lambda: _expire(room_ids, sid))
