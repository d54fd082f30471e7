from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Literal

from ..config import Config
from .errors import InvalidState
from .messages import (
    ROOM_UPDATED,
    ROUND_SUMMARY,
    SPY_ELIMINATED,
    SPY_WIN,
    START_NEXT_VOTE,
    VOTE_TIE,
    Outbound,
    to_player,
    to_room,
)
from .models import ABSTAIN, Role, Room, RoundState
from .views import room_public_state


logger = logging.getLogger(__name__)

Outcome = Literal["pending", "tie", "elimination", "spy_eliminated", "spy_win", "civilian_win"]


@dataclass
class Tally:
    counts: dict[str, int]
    abstain: int
    max_votes: int
    top_ids: list[str]

    @property
    def is_tie(self) -> bool:
        return self.max_votes == 0 or len(self.top_ids) > 1 or self.abstain >= self.max_votes


@dataclass
class VoteResult:
    outcome: Outcome
    eliminated_id: str | None = None
    messages: list[Outbound] = field(default_factory=list)


def tally(votes: dict[str, str]) -> Tally:
    counter = Counter(votes.values())
    abstain = counter.pop(ABSTAIN, 0)
    max_votes = max(counter.values(), default=0)
    top_ids = sorted(tid for tid, c in counter.items() if c == max_votes) if max_votes else []
    return Tally(counts=dict(counter), abstain=abstain, max_votes=max_votes, top_ids=top_ids)


def _alive_counts(room: Room) -> tuple[int, int]:
    """Returns (civilians, impostors) still alive."""
    alive = room.alive_players()
    civilians = sum(1 for p in alive if p.role == "civilian")
    impostors = sum(1 for p in alive if p.role == "impostor")
    return civilians, impostors


def _finish(room: Room, winner: Role) -> list[Outbound]:
    room.status = "finished"
    room.voting_started = False
    if Config.PUNISHMENT_ENABLED:
        loser = "impostor" if winner == "civilian" else "civilian"
        for p in room.players:
            p.in_punishment = p.role == loser
    return [to_room(room.id, ROUND_SUMMARY, {"summary": room.summary()})]


def _spy_win(room: Room) -> list[Outbound]:
    logger.info("Room %s: impostor wins", room.id)
    messages = _finish(room, "impostor")
    messages.append(to_room(room.id, SPY_WIN))
    messages.append(to_room(room.id, ROOM_UPDATED, room_public_state(room)))
    return messages


def _is_one_on_one(room: Room) -> bool:
    civilians, impostors = _alive_counts(room)
    return len(room.alive_players()) == 2 and civilians == 1 and impostors == 1


def resolve(room: Room) -> VoteResult:
    """Resolve the round if every alive player has a recorded vote."""
    rs = room.round
    if rs is None or room.status != "playing":
        return VoteResult("pending")

    if not room.alive_players():
        return VoteResult("pending")

    civilians, impostors = _alive_counts(room)

    # The last impostor left the room: civilians win without a vote.
    if impostors == 0 and civilians > 0:
        logger.info("Room %s: no impostor left, civilians win", room.id)
        rs.votes.clear()
        messages = _finish(room, "civilian")
        messages.append(to_room(room.id, ROOM_UPDATED, room_public_state(room)))
        return VoteResult("civilian_win", messages=messages)

    # Two players left, one of each side: the impostor has already won.
    if rs.votes and _is_one_on_one(room):
        rs.votes.clear()
        return VoteResult("spy_win", messages=_spy_win(room))

    if len(rs.votes) < len(room.alive_players()):
        return VoteResult("pending")

    t = tally(rs.votes)
    rs.votes.clear()

    if t.is_tie:
        logger.info("Room %s: vote tie (max=%d, abstain=%d)", room.id, t.max_votes, t.abstain)
        return VoteResult("tie", messages=[to_room(room.id, VOTE_TIE)])

    eliminated_id = t.top_ids[0]
    eliminated = room.find_player(eliminated_id)
    role = eliminated.role if eliminated else None
    if role is None and eliminated_id in rs.word_map:
        role = rs.word_map[eliminated_id].role

    if role == "impostor":
        logger.info("Room %s: impostor %s voted out", room.id, eliminated_id)
        if eliminated is not None:
            eliminated.alive = False
        messages = _finish(room, "civilian")
        messages.append(to_room(room.id, SPY_ELIMINATED, {"eliminatedId": eliminated_id}))
        messages.append(to_room(room.id, ROOM_UPDATED, room_public_state(room)))
        return VoteResult("spy_eliminated", eliminated_id, messages)

    if eliminated is not None:
        eliminated.alive = False

    civilians, impostors = _alive_counts(room)
    if (civilians == 1 and impostors == 1) or (civilians == 0 and impostors == 1):
        return VoteResult("spy_win", eliminated_id, _spy_win(room))

    logger.info("Room %s: civilian %s voted out, next vote", room.id, eliminated_id)
    messages = [to_player(eliminated_id, ROUND_SUMMARY, {"summary": room.summary()})]
    for p in room.alive_players():
        messages.append(to_player(p.id, START_NEXT_VOTE))
    messages.append(to_room(room.id, ROOM_UPDATED, room_public_state(room)))
    return VoteResult("elimination", eliminated_id, messages)


def submit(room: Room, voter_id: str, target_id: str) -> VoteResult:
    if room.status != "playing" or room.round is None:
        raise InvalidState("no vote in progress", code="not_playing")

    voter = room.find_player(voter_id)
    if voter is None or not voter.alive:
        raise InvalidState("only alive players can vote", code="not_alive")

    if target_id != ABSTAIN:
        target = room.find_player(target_id)
        if target is None or not target.alive:
            raise InvalidState("vote target is not an alive player", code="invalid_target")

    # Latest vote wins until the round resolves.
    room.round.votes[voter_id] = target_id
    logger.debug("Room %s: %s voted for %s", room.id, voter_id, target_id)
    return resolve(room)


def drop_player_votes(rs: RoundState, player_id: str) -> None:
    rs.votes.pop(player_id, None)
    for voter in [v for v, t in rs.votes.items() if t == player_id]:
        del rs.votes[voter]
