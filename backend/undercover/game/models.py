from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


RoomStatus = Literal["waiting", "playing", "finished"]
Role = Literal["civilian", "impostor"]

ABSTAIN = "abstain"


@dataclass
class Player:
    id: str
    name: str
    role: Role | None = None
    alive: bool = False
    in_punishment: bool = False
    connected: bool = True
    player_key: str = ""


@dataclass
class WordRecord:
    word: str
    role: Role
    player_name: str

    def to_dict(self) -> dict:
        return {"word": self.word, "role": self.role, "playerName": self.player_name}


@dataclass
class RoundState:
    # player id -> dealt secret
    word_map: dict[str, WordRecord] = field(default_factory=dict)
    # Impostors are captured by player id at assignment time, not by list position.
    spy_ids: set[str] = field(default_factory=set)
    # voter id -> target id (or ABSTAIN)
    votes: dict[str, str] = field(default_factory=dict)


@dataclass
class Room:
    id: str
    host: str
    list_name: str
    status: RoomStatus = "waiting"
    players: list[Player] = field(default_factory=list)
    game_started: bool = False
    voting_started: bool = False
    round: RoundState | None = None

    def find_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def alive_players(self) -> list[Player]:
        return [p for p in self.players if p.alive]

    def summary(self) -> dict[str, dict]:
        if self.round is None:
            return {}
        return {pid: rec.to_dict() for pid, rec in self.round.word_map.items()}
