"""
Mock Remote Store Client.

Purpose:
- Provides an in-memory product table used for development/testing
- Does NOT make any network calls
- Assigns auto-increment ids and returns the newest products first, like the
  real table

Behavior guidelines:
- `available = False` simulates an unreachable Remote Store: reads return a
  failed Result and writes raise TransportError
- Writes validate exactly like the SQL store

Swap:
Replace with clients/real_http/remote_products.py (REMOTE_STORE_URL) or
amanice/database/sql_store.py (DATABASE_URL).
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List

from amanice.errors import NotFoundError, TransportError
from amanice.integrations.contracts.interfaces import Product, RemoteProductStore, Result
from amanice.integrations.response_wrappers import normalize_product_list
from amanice.validation import validate_new_product, validate_product_updates

logger = logging.getLogger(__name__)


class InMemoryRemoteStore(RemoteProductStore):
    def __init__(self, available: bool = True) -> None:
        self.available = available
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._next_id = 1
        self.calls: List[str] = []

    def _check_available(self, operation: str) -> None:
        self.calls.append(operation)
        if not self.available:
            raise TransportError(f"Remote Store unavailable during {operation}")

    def list_products(self) -> Result[List[Product]]:
        try:
            self._check_available("list")
        except TransportError as e:
            return Result.failure(e.message)
        rows = sorted(self._rows.values(), key=lambda r: int(r["id"]), reverse=True)
        return Result.success(normalize_product_list(copy.deepcopy(rows), source="mock"))

    def create_product(self, payload: Dict[str, Any]) -> str:
        data = validate_new_product(payload)
        self._check_available("create")
        new_id = str(self._next_id)
        self._next_id += 1
        # strictly increasing timestamps keep "newest first" deterministic
        created = datetime(2024, 1, 1) + timedelta(seconds=int(new_id))
        self._rows[new_id] = {**data, "id": new_id, "isDefault": False, "dateAdded": created.isoformat()}
        logger.info("Mock product saved: id=%s type=%s", new_id, data["type"])
        return new_id

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> None:
        data = validate_product_updates(updates)
        self._check_available("update")
        row = self._rows.get(str(product_id))
        if row is None:
            raise NotFoundError(f"Product not found: {product_id}")
        row.update(data)

    def delete_product(self, product_id: str) -> None:
        self._check_available("delete")
        if self._rows.pop(str(product_id), None) is None:
            raise NotFoundError(f"Product not found: {product_id}")
