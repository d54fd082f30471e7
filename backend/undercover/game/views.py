from __future__ import annotations

from .models import Room


def room_public_state(room: Room) -> dict:
    # Roles stay hidden while a game is running; player_key is never exposed.
    reveal_roles = room.status != "playing"
    players = [
        {
            "id": p.id,
            "name": p.name,
            "alive": p.alive,
            "connected": p.connected,
            "inPunishment": p.in_punishment,
            "role": p.role if reveal_roles else None,
        }
        for p in room.players
    ]
    return {
        "id": room.id,
        "host": room.host,
        "listName": room.list_name,
        "status": room.status,
        "gameStarted": room.game_started,
        "votingStarted": room.voting_started,
        "players": players,
    }
