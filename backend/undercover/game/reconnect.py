"""Reclaiming an in-room identity from a new connection.

A returning client is matched on its opaque ``player_key`` when it carries
one, and on its display name otherwise. The old connection id is then
rewritten everywhere the room refers to it: the player list, the host
slot, the dealt word map, impostor ids and both sides of the vote map.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import Player, Room


logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    player: Player
    previous_id: str | None
    merged: bool


def find_returning_player(room: Room, player_name: str, player_key: str = "") -> Player | None:
    if player_key:
        for p in room.players:
            if p.player_key and p.player_key == player_key:
                return p
    for p in room.players:
        if p.name == player_name and (not player_key or not p.player_key or p.player_key == player_key):
            return p
    return None


def _rekey_word_map(room: Room, old_id: str, new_id: str, player_name: str) -> bool:
    rs = room.round
    if rs is None:
        return False

    record = rs.word_map.pop(old_id, None)
    if record is None:
        # Secondary lookup: the entry may be keyed by an id we never saw.
        for pid, rec in list(rs.word_map.items()):
            if rec.player_name == player_name and pid != new_id:
                record = rs.word_map.pop(pid)
                break
    if record is None:
        return new_id in rs.word_map

    rs.word_map[new_id] = record
    return True


def _rekey_votes(room: Room, old_id: str, new_id: str) -> None:
    rs = room.round
    if rs is None:
        return
    if old_id in rs.votes:
        rs.votes[new_id] = rs.votes.pop(old_id)
    for voter, target in rs.votes.items():
        if target == old_id:
            rs.votes[voter] = new_id
    if old_id in rs.spy_ids:
        rs.spy_ids.discard(old_id)
        rs.spy_ids.add(new_id)


def merge(room: Room, new_id: str, player_name: str, player_key: str = "") -> MergeResult:
    existing = room.find_player(new_id)
    if existing is not None:
        existing.connected = True
        return MergeResult(existing, None, merged=False)

    player = find_returning_player(room, player_name, player_key)
    if player is None:
        player = Player(
            id=new_id,
            name=player_name,
            alive=not room.game_started,
            player_key=player_key,
        )
        room.players.append(player)
        logger.info("Room %s: %s rejoined as a new player", room.id, player_name)
        return MergeResult(player, None, merged=False)

    old_id = player.id
    player.id = new_id
    player.connected = True
    if player_key:
        player.player_key = player_key
    if room.host == old_id:
        room.host = new_id

    has_word = _rekey_word_map(room, old_id, new_id, player.name)
    _rekey_votes(room, old_id, new_id)

    if room.status == "playing" and not has_word:
        # Without a dealt word the player cannot take part; treat as eliminated.
        player.alive = False

    logger.info("Room %s: %s reconnected (%s -> %s)", room.id, player.name, old_id, new_id)
    return MergeResult(player, old_id, merged=True)
