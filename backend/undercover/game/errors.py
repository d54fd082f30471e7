from __future__ import annotations


class GameError(Exception):
    """Recoverable, per-request failure. Reported to the requester only."""

    code = "game_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class NotFound(GameError):
    code = "not_found"


class InvalidState(GameError):
    code = "invalid_state"


class AlreadyExists(GameError):
    code = "already_exists"
