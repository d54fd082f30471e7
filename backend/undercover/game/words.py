from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

from .errors import InvalidState, NotFound
from .models import Player, WordRecord


DEFAULT_WORDS = [
    "苹果,梨",
    "猫,老鼠",
    "香蕉,葡萄",
]


def parse_pair(entry: str) -> tuple[str, str]:
    if not isinstance(entry, str):
        raise InvalidState("word pair must be a string", code="invalid_word_pair")
    parts = [p.strip() for p in entry.split(",")]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidState(
            f'invalid word pair "{entry}", expected "word1,word2"',
            code="invalid_word_pair",
        )
    return parts[0], parts[1]


def validate_word_list(list_name: str, word_list) -> list[tuple[str, str]]:
    """Parse a whole list up front so a bad list never leaves a half-dealt round."""
    if word_list is None:
        raise NotFound(f'word list "{list_name}" not found', code="list_not_found")
    if not isinstance(word_list, (list, tuple)):
        raise InvalidState(f'word list "{list_name}" is not a list', code="invalid_list")
    if not word_list:
        raise InvalidState(f'word list "{list_name}" is empty', code="empty_list")
    return [parse_pair(entry) for entry in word_list]


def pick_words(
    pairs: Sequence[tuple[str, str]],
    swap_allowed: bool = True,
    rng: random.Random | None = None,
) -> tuple[str, str]:
    """Returns (civilian_word, impostor_word)."""
    r = rng or random
    first, second = r.choice(pairs)
    if swap_allowed and r.random() < 0.5:
        return second, first
    return first, second


def deal(
    pairs: Sequence[tuple[str, str]],
    players: Iterable[Player],
    spy_ids: set[str],
    swap_allowed: bool = True,
    rng: random.Random | None = None,
) -> dict[str, WordRecord]:
    civilian_word, impostor_word = pick_words(pairs, swap_allowed=swap_allowed, rng=rng)

    word_map: dict[str, WordRecord] = {}
    for p in players:
        if not p.alive:
            continue
        role = "impostor" if p.id in spy_ids else "civilian"
        word = impostor_word if role == "impostor" else civilian_word
        word_map[p.id] = WordRecord(word=word, role=role, player_name=p.name)
    return word_map
