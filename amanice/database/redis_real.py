"""
Real Redis-backed key-value store for production when REDIS_URL is set.
Implements the same interface as amanice.database.redis (in-memory stub).

An unreachable Redis reads as empty and refuses writes with
StorageQuotaError, which every override and cart writer already recovers from.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis

from amanice.errors import StorageQuotaError
from amanice.integrations.contracts.interfaces import KeyValueStore

logger = logging.getLogger(__name__)

UNAVAILABLE_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed local override storage. Keys are namespaced so several
    storefronts can share one Redis instance.
    """

    def __init__(self, url: str = "", namespace: str = "amanice", client=None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self._key(key))
        except UNAVAILABLE_ERRORS as e:
            logger.warning("Redis unavailable reading '%s': %s; treating as empty", key, e)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except UNAVAILABLE_ERRORS as e:
            raise StorageQuotaError(f"Redis unavailable while writing '{key}': {e}") from e
        except redis.exceptions.ResponseError as e:
            # Redis reports maxmemory exhaustion as "OOM command not allowed ..."
            if str(e).upper().startswith("OOM"):
                raise StorageQuotaError(f"Redis storage quota exceeded while writing '{key}'") from e
            raise

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except UNAVAILABLE_ERRORS as e:
            logger.warning("Redis unavailable deleting '%s': %s", key, e)

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError:
            return False
