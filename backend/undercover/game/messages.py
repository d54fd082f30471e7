from __future__ import annotations

from dataclasses import dataclass, field


# Outbound event names
ROOM_UPDATED = "room-updated"
ROOM_EXISTS = "room-exists"
KICKED_FROM_ROOM = "kicked-from-room"
GAME_STARTED = "game-started"
DEAL_WORDS = "deal-words"
START_NEXT_VOTE = "start-next-vote"
VOTE_TIE = "vote-tie"
SPY_ELIMINATED = "spy-eliminated"
SPY_WIN = "spy-win"
ROUND_SUMMARY = "round-summary"
GAME_ERROR = "game-error"
REJOIN_SUCCESS = "rejoin-success"
REJOIN_FAILED = "rejoin-failed"
VISIBILITY_UPDATED = "visibility-updated"


@dataclass
class Outbound:
    """One fire-and-forget message. `to` is a room id, or a connection id when private."""

    event: str
    to: str
    payload: dict = field(default_factory=dict)
    private: bool = False


def to_room(room_id: str, event: str, payload: dict | None = None) -> Outbound:
    return Outbound(event=event, to=room_id, payload=payload or {})


def to_player(player_id: str, event: str, payload: dict | None = None) -> Outbound:
    return Outbound(event=event, to=player_id, payload=payload or {}, private=True)
