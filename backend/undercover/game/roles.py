from __future__ import annotations

import random
from collections.abc import Sequence

from .errors import InvalidState
from .models import Player


def assign(player_count: int, impostor_count: int, rng: random.Random | None = None) -> set[int]:
    """Draw `impostor_count` distinct indices uniformly from [0, player_count)."""
    if not 0 < impostor_count < player_count:
        raise InvalidState(
            f"impostor count must be between 1 and {player_count - 1}",
            code="invalid_spy_count",
        )

    r = rng or random
    picked: set[int] = set()
    while len(picked) < impostor_count:
        picked.add(r.randrange(player_count))
    return picked


def assign_roles(players: Sequence[Player], impostor_count: int, rng: random.Random | None = None) -> set[str]:
    """Set every player's role and return the impostors' ids."""
    indices = assign(len(players), impostor_count, rng=rng)
    spy_ids = {players[i].id for i in indices}
    for p in players:
        p.role = "impostor" if p.id in spy_ids else "civilian"
    return spy_ids
