from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from threading import RLock
from typing import Any


logger = logging.getLogger(__name__)


class DisconnectTimers:
    """One pending removal per disconnected connection id, each cancellable by a rejoin.

    `start_task` and `sleep` are normally `socketio.start_background_task` and
    `socketio.sleep`, so the timers cooperate with whichever async mode is active.
    """

    def __init__(
        self,
        start_task: Callable[..., Any],
        sleep: Callable[[float], Any],
        grace_sec: float,
    ) -> None:
        self._start_task = start_task
        self._sleep = sleep
        self.grace_sec = grace_sec
        self._lock = RLock()
        self._pending: dict[str, str] = {}

    def schedule(self, connection_id: str, on_expire: Callable[[], None]) -> None:
        token = uuid.uuid4().hex
        with self._lock:
            self._pending[connection_id] = token
        logger.debug("Grace timer started for %s (%ss)", connection_id, self.grace_sec)
        self._start_task(self._run, connection_id, token, on_expire)

    def cancel(self, connection_id: str) -> bool:
        with self._lock:
            return self._pending.pop(connection_id, None) is not None

    def is_pending(self, connection_id: str) -> bool:
        with self._lock:
            return connection_id in self._pending

    def _run(self, connection_id: str, token: str, on_expire: Callable[[], None]) -> None:
        self._sleep(self.grace_sec)
        with self._lock:
            if self._pending.get(connection_id) != token:
                return
            del self._pending[connection_id]

        logger.info("Grace period expired for %s", connection_id)
        try:
            on_expire()
        except Exception:
            logger.exception("Removal after grace period failed for %s", connection_id)
