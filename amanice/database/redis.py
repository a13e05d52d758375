"""
Lightweight in-memory key-value store for local development and tests.

Implements the same KeyValueStore interface as amanice.database.redis_real so
the service can run without a Redis instance. An optional byte quota mimics
the fixed per-origin budget of browser local storage.
"""

from __future__ import annotations

from typing import Dict, Optional

from amanice.errors import StorageQuotaError
from amanice.integrations.contracts.interfaces import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, max_bytes: Optional[int] = None) -> None:
        self._data: Dict[str, str] = {}
        self.max_bytes = max_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            current = self._used_bytes() - self._entry_size(key, self._data.get(key))
            if current + self._entry_size(key, value) > self.max_bytes:
                raise StorageQuotaError(f"Storage quota exceeded while writing '{key}'")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    # --- Misc -----------------------------------------------------------------

    def _used_bytes(self) -> int:
        return sum(self._entry_size(k, v) for k, v in self._data.items())

    @staticmethod
    def _entry_size(key: str, value: Optional[str]) -> int:
        if value is None:
            return 0
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))
