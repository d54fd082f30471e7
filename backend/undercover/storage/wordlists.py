from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from threading import RLock

from ..game.words import DEFAULT_WORDS


logger = logging.getLogger(__name__)


class WordListError(ValueError):
    pass


class WordListStore:
    """Word lists kept in memory and written back to one JSON file after each change."""

    def __init__(self, path: str | os.PathLike, default_name: str = "default") -> None:
        self.path = Path(path)
        self._lock = RLock()
        self._lists: dict[str, list[str]] = self._load()

        if default_name not in self._lists:
            self._lists[default_name] = list(DEFAULT_WORDS)
            self._save()

    def _load(self) -> dict[str, list[str]]:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("{}", encoding="utf-8")
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to parse %s, resetting", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not an object", self.path)
            return {}
        return data

    def _save(self) -> None:
        self.path.write_text(
            json.dumps(self._lists, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def names(self) -> list[str]:
        with self._lock:
            return list(self._lists.keys())

    def get(self, name: str):
        with self._lock:
            items = self._lists.get(name)
            return list(items) if isinstance(items, list) else items

    def create(self, name: str) -> None:
        with self._lock:
            if not name or name in self._lists:
                raise WordListError("invalid or exists")
            self._lists[name] = []
            self._save()

    def delete(self, name: str) -> None:
        with self._lock:
            self._lists.pop(name, None)
            self._save()

    def add_item(self, name: str, item: str) -> None:
        with self._lock:
            if not item:
                raise WordListError("invalid")
            self._lists.setdefault(name, []).append(item)
            self._save()

    def remove_item(self, name: str, item: str) -> None:
        with self._lock:
            self._lists[name] = [i for i in self._lists.get(name, []) if i != item]
            self._save()
