"""
Remote Store HTTP Client.

Purpose:
- Talks to the admin product endpoints (getProducts / saveProduct /
  updateProduct / deleteProduct)
- Normalizes product records into our Product contract shape

Failure signal:
- non-2xx responses, unreadable JSON, transport errors and
  `{"status": "error"}` envelopes
- reads return a failed Result; writes raise TransportError, or
  ValidationError / NotFoundError when the store rejected the request itself

Important:
- This client should be the ONLY place that talks HTTP to the Remote Store.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from amanice.errors import NotFoundError, TransportError, ValidationError
from amanice.integrations.contracts.interfaces import Product, RemoteProductStore, Result
from amanice.integrations.response_wrappers import (
    IntegrationResponseError,
    StoreEnvelopeModel,
    normalize_product_list,
    normalize_store_envelope,
)

logger = logging.getLogger(__name__)


class RemoteStoreClient(RemoteProductStore):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        list_path: str = "/admin/getProducts.php",
        save_path: str = "/admin/saveProduct.php",
        update_path: str = "/admin/updateProduct.php",
        delete_path: str = "/admin/deleteProduct.php",
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("REMOTE_STORE_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("REMOTE_STORE_API_KEY", "")
        self.list_path = list_path
        self.save_path = save_path
        self.update_path = update_path
        self.delete_path = delete_path
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.Client:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def list_products(self) -> Result[List[Product]]:
        if not self.base_url:
            return Result.failure("REMOTE_STORE_URL is not configured.")

        try:
            with self._client() as client:
                response = client.get(self.list_path)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Remote Store returned HTTP %s", e.response.status_code)
            return Result.failure(f"HTTP error! status: {e.response.status_code}", e.response.status_code)
        except httpx.HTTPError as e:
            logger.warning("Remote Store unreachable: %s", e)
            return Result.failure(f"Remote Store unreachable: {e}")
        except ValueError as e:
            logger.warning("Remote Store returned invalid JSON: %s", e)
            return Result.failure("Remote Store returned invalid JSON")

        if isinstance(data, dict) and str(data.get("status", "")).lower() == "error":
            return Result.failure(str(data.get("message") or "Remote Store reported an error"))

        try:
            return Result.success(normalize_product_list(data, source="remote"))
        except IntegrationResponseError as e:
            return Result.failure(str(e))

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def create_product(self, payload: Dict[str, Any]) -> str:
        envelope = self._post(self.save_path, payload)
        if not envelope.id:
            raise TransportError("Remote Store did not return an id for the saved product")
        logger.info("Product saved to Remote Store: id=%s", envelope.id)
        return envelope.id

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> None:
        self._post(self.update_path, {"id": product_id, **updates})
        logger.info("Product updated in Remote Store: %s", product_id)

    def delete_product(self, product_id: str) -> None:
        self._post(self.delete_path, {"id": product_id})
        logger.info("Product deleted from Remote Store: %s", product_id)

    def _post(self, path: str, payload: Dict[str, Any]) -> StoreEnvelopeModel:
        if not self.base_url:
            raise TransportError("REMOTE_STORE_URL is not configured.")

        try:
            with self._client() as client:
                response = client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Remote Store unreachable: {e}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        status_code = response.status_code
        try:
            envelope = normalize_store_envelope(data)
        except IntegrationResponseError as e:
            raise TransportError(f"Unreadable Remote Store response (HTTP {status_code})") from e

        if response.is_success and envelope.ok:
            return envelope

        # only a {status: "error", message} reply from the store itself is a rejection
        reported = envelope.message if data.get("status") else ""
        if not reported:
            raise TransportError(f"HTTP error! status: {status_code}", payload={"status_code": status_code})
        if "not found" in reported.lower():
            raise NotFoundError(reported)
        if 400 <= status_code < 500:
            raise ValidationError(reported)
        raise TransportError(reported, payload={"status_code": status_code})
