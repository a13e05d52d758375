"""
Local Override Store.

Holds admin-added products, the tombstone list of deleted catalog ids and
cached image blobs on top of a KeyValueStore. Values are JSON strings and
every write is a read-modify-write of the whole collection, so two concurrent
writers can lose one write.

Malformed stored JSON reads as an empty collection. A full store is logged
and the write is dropped; callers keep their in-memory result.
"""

from __future__ import annotations

import base64
import json
import logging
import mimetypes
from datetime import datetime
from typing import Any, Dict, List, Optional

from amanice.errors import IntegrityError, StorageQuotaError
from amanice.integrations.contracts.interfaces import KeyValueStore, Product
from amanice.integrations.contracts.products import product_to_dict
from amanice.integrations.response_wrappers import normalize_product_list

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
DELETED_KEY = "deletedProducts"
IMAGE_LIST_KEY = "uploaded_images_list"
IMAGE_PREFIX = "uploaded_image_"
METADATA_PREFIX = "metadata_"


class LocalOverrideStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # ------------------------------------------------------------------ #
    # Raw JSON access
    # ------------------------------------------------------------------ #
    def _read_json(self, key: str, default: Any) -> Any:
        raw = self.store.get(key)
        if not raw:
            return default
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            err = IntegrityError(f"Stored value for '{key}' is not valid JSON: {e}")
            logger.warning("%s; treating as empty", err.message)
            return default
        if not isinstance(value, type(default)):
            logger.warning("Stored value for '%s' has unexpected shape; treating as empty", key)
            return default
        return value

    def _write_json(self, key: str, value: Any) -> bool:
        try:
            self.store.set(key, json.dumps(value, default=str))
        except StorageQuotaError as e:
            logger.warning("%s; keeping in-memory result only", e.message)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def load_products(self) -> List[Product]:
        return normalize_product_list(self._read_json(PRODUCTS_KEY, []), source="local override")

    def save_products(self, products: List[Product]) -> bool:
        return self._write_json(PRODUCTS_KEY, [product_to_dict(p) for p in products])

    def find_product(self, product_id: Any) -> Optional[Product]:
        wanted = str(product_id)
        for p in self.load_products():
            if str(p.id) == wanted or (p.original_id and str(p.original_id) == wanted):
                return p
        return None

    def add_product(self, product: Product) -> bool:
        products = self.load_products()
        products.append(product)
        return self.save_products(products)

    def update_product(self, product_id: Any, updates: Dict[str, Any]) -> Optional[Product]:
        """Apply camelCase `updates` to the record matching id or original id."""
        wanted = str(product_id)
        records: List[Dict[str, Any]] = self._read_json(PRODUCTS_KEY, [])
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                continue
            if str(record.get("id")) == wanted or str(record.get("originalId") or "") == wanted:
                merged = {**record, **updates}
                if "isShoe" in updates:
                    merged.pop("kind", None)
                updated = normalize_product_list([merged], source="local override")
                if not updated:
                    return None
                records[index] = product_to_dict(updated[0])
                self._write_json(PRODUCTS_KEY, records)
                return updated[0]
        return None

    def remove_product(self, product_id: Any) -> bool:
        wanted = str(product_id)
        products = self.load_products()
        remaining = [p for p in products if str(p.id) != wanted]
        if len(remaining) == len(products):
            return False
        self.save_products(remaining)
        return True

    # ------------------------------------------------------------------ #
    # Tombstones
    # ------------------------------------------------------------------ #
    def tombstones(self) -> List[str]:
        return [str(t) for t in self._read_json(DELETED_KEY, [])]

    def add_tombstone(self, product_id: Any) -> bool:
        deleted = self.tombstones()
        if str(product_id) in deleted:
            return True
        deleted.append(str(product_id))
        return self._write_json(DELETED_KEY, deleted)

    def is_deleted(self, product_id: Any) -> bool:
        return str(product_id) in self.tombstones()

    def fingerprint(self) -> Dict[str, int]:
        return {
            "products": len(self._read_json(PRODUCTS_KEY, [])),
            "deleted": len(self._read_json(DELETED_KEY, [])),
        }

    # ------------------------------------------------------------------ #
    # Image blobs
    # ------------------------------------------------------------------ #
    def store_image(self, file_name: str, content_type: str, data: bytes, original_name: str = "") -> str:
        """Cache an image blob and return it as a data: URL.

        The URL is returned even when the store is full; it then just does
        not persist.
        """
        encoded = base64.b64encode(data).decode("ascii")
        metadata = {
            "fileName": file_name,
            "originalName": original_name or file_name,
            "fileType": content_type,
            "fileSize": len(data),
            "uploadedAt": datetime.utcnow().isoformat(),
            "isBase64": True,
        }
        if self._write_json(f"{METADATA_PREFIX}{file_name}", metadata):
            try:
                self.store.set(f"{IMAGE_PREFIX}{file_name}", encoded)
            except StorageQuotaError as e:
                logger.warning("%s; image will work but may not persist", e.message)
            else:
                images = self._read_json(IMAGE_LIST_KEY, [])
                images.append(file_name)
                self._write_json(IMAGE_LIST_KEY, images)
        return f"data:{content_type};base64,{encoded}"

    def image_data_url(self, path: str) -> Optional[str]:
        file_name = path.split("/")[-1].split("?")[0]
        encoded = self.store.get(f"{IMAGE_PREFIX}{file_name}")
        if not encoded:
            return None
        metadata = self._read_json(f"{METADATA_PREFIX}{file_name}", {})
        content_type = metadata.get("fileType") or mimetypes.guess_type(file_name)[0] or "image/jpeg"
        return f"data:{content_type};base64,{encoded}"

    def list_images(self) -> List[str]:
        return [str(name) for name in self._read_json(IMAGE_LIST_KEY, [])]

    def remove_image(self, path: str) -> bool:
        file_name = path.split("/")[-1].split("?")[0]
        if self.store.get(f"{IMAGE_PREFIX}{file_name}") is None:
            return False
        self.store.delete(f"{IMAGE_PREFIX}{file_name}")
        self.store.delete(f"{METADATA_PREFIX}{file_name}")
        self._write_json(IMAGE_LIST_KEY, [n for n in self.list_images() if n != file_name])
        return True
