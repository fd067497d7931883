"""
Flat key/value persistence for the dashboard client.

Behaves like browser local storage: string keys, string values, one JSON file
on disk (~/.learnerdash/storage.json by default). Structured values such as
the interest list are serialized to JSON strings by their owners.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from loguru import logger


class LocalStore:
    """
    Durable string store backed by a single JSON file.

    Every write goes straight to disk so a fresh LocalStore over the same path
    (a "reload") sees the latest values.
    """

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> bool:
        """Delete a key. Returns False when it was not present."""
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    def keys(self) -> list[str]:
        return sorted(self._read_all())
