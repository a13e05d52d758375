"""
Product merge engine: one product list over catalog, Remote Store and local overrides
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from amanice.catalog.merge import choose_overrides, merge
from amanice.catalog.overrides import LocalOverrideStore
from amanice.errors import NotFoundError, TransportError
from amanice.integrations.contracts.interfaces import (
    CatalogSource,
    Product,
    RemoteProductStore,
    WriteReceipt,
    WriteSource,
)
from amanice.integrations.contracts.products import (
    filter_by_category,
    find_product,
    product_to_dict,
    product_to_payload,
)
from amanice.integrations.response_wrappers import normalize_product
from amanice.validation import validate_new_product, validate_product_updates

logger = logging.getLogger(__name__)


class ProductMergeEngine:
    def __init__(
        self,
        catalog_source: CatalogSource,
        remote_store: RemoteProductStore,
        local_store: LocalOverrideStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.catalog_source = catalog_source
        self.remote = remote_store
        self.local = local_store
        self._clock = clock
        self._catalog: Optional[List[Product]] = None
        self._remote_products: List[Product] = []
        self._remote_ok = False
        self._loaded = False

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def catalog(self) -> List[Product]:
        """Catalog products, loaded once per engine"""
        if self._catalog is None:
            self._catalog = self.catalog_source.load()
        return self._catalog

    def refresh(self) -> List[Product]:
        """Re-fetch the Remote Store and return the merged view. Never raises."""
        catalog = self.catalog()
        result = self.remote.list_products()
        self._remote_ok = result.ok
        self._loaded = True
        if result.ok:
            self._remote_products = list(result.value or [])
        overrides = choose_overrides(result, self.local)
        return merge(catalog, overrides, self.local.tombstones())

    def products(self) -> List[Product]:
        """Merged view from the last refresh, without a Remote Store call"""
        if not self._loaded:
            return self.refresh()
        overrides = self._remote_products if self._remote_ok else self.local.load_products()
        return merge(self.catalog(), overrides, self.local.tombstones())

    def get_product(self, product_id: Any) -> Optional[Product]:
        wanted = str(product_id)
        product = find_product(self.refresh(), wanted)
        if product is not None:
            return product
        # records superseded by an edit are still reachable by their old id
        return self.local.find_product(wanted) or self._find_replacement(wanted)

    def products_by_category(self, category: str) -> List[Product]:
        return filter_by_category(self.refresh(), category)

    def tombstones(self) -> List[str]:
        return self.local.tombstones()

    def is_deleted(self, product_id: Any) -> bool:
        return self.local.is_deleted(product_id)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def save_product(self, payload: Dict[str, Any]) -> WriteReceipt:
        """Validate and store a new product, falling back to local overrides"""
        data = validate_new_product(payload)
        try:
            new_id = self.remote.create_product(data)
        except TransportError as e:
            logger.warning("Error saving product to Remote Store: %s; using local storage", e.message)
            product = self._build(data, f"admin-{int(self._clock() * 1000)}")
            self.local.add_product(product)
            logger.info("Product saved to local storage: %s", product.id)
            return WriteReceipt(product.id, WriteSource.LOCAL, "Product saved locally")

        self._remote_products.insert(0, self._build(data, new_id))
        if not self._remote_ok:
            # the view is still built from local overrides
            self._loaded = False
        logger.info("Product saved: %s", new_id)
        return WriteReceipt(str(new_id), WriteSource.REMOTE, "Product saved successfully")

    def update_product(self, product_id: Any, updates: Dict[str, Any]) -> WriteReceipt:
        """Update a product; editing a catalog product saves a replacement record"""
        data = validate_product_updates(updates)
        wanted = self._resolve_id(str(product_id))

        catalog_product = find_product(self.catalog(), wanted)
        remote_product = find_product(self._remote_products, wanted)
        if catalog_product is not None and remote_product is None and self.local.find_product(wanted) is None:
            replacement = {**product_to_payload(catalog_product), **data, "originalId": wanted}
            logger.info("Editing catalog product %s as a new record", wanted)
            return self.save_product(replacement)

        if remote_product is None and self.local.find_product(wanted) is None:
            raise NotFoundError(f"Product not found: {wanted}")

        if remote_product is not None:
            try:
                self.remote.update_product(wanted, data)
            except TransportError as e:
                logger.warning("Error updating product in Remote Store: %s; using local storage", e.message)
                if self.local.find_product(wanted) is None:
                    self.local.add_product(remote_product)
                self.local.update_product(wanted, data)
                return WriteReceipt(wanted, WriteSource.LOCAL, "Product updated locally")
            self._apply_to_shadow(remote_product, data)
            logger.info("Product updated: %s", wanted)
            return WriteReceipt(wanted, WriteSource.REMOTE, "Product updated successfully")

        self.local.update_product(wanted, data)
        logger.info("Product updated in local storage: %s", wanted)
        return WriteReceipt(wanted, WriteSource.LOCAL, "Product updated locally")

    def delete_product(self, product_id: Any) -> WriteReceipt:
        """Delete a product; catalog products are tombstoned, never removed"""
        wanted = str(product_id)
        self._ensure_known(wanted)

        remote_product = find_product(self._remote_products, wanted)
        if remote_product is not None:
            try:
                self.remote.delete_product(wanted)
            except TransportError as e:
                logger.warning("Error deleting product from Remote Store: %s; using local storage", e.message)
                self.local.remove_product(wanted)
                # hidden until the Remote Store delete can be retried
                self.local.add_tombstone(wanted)
                return WriteReceipt(wanted, WriteSource.LOCAL, "Product deleted locally")
            self._remote_products = [p for p in self._remote_products if str(p.id) != wanted]
            logger.info("Product deleted: %s", wanted)
            return WriteReceipt(wanted, WriteSource.REMOTE, "Product deleted successfully")

        if self.local.remove_product(wanted):
            logger.info("Product deleted from local storage: %s", wanted)
            return WriteReceipt(wanted, WriteSource.LOCAL, "Product deleted locally")

        if find_product(self.catalog(), wanted) is not None:
            self.local.add_tombstone(wanted)
            logger.info("Catalog product marked as deleted: %s", wanted)
            return WriteReceipt(wanted, WriteSource.LOCAL, "Product marked as deleted")

        raise NotFoundError(f"Product not found: {wanted}")

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _build(self, data: Dict[str, Any], product_id: str) -> Product:
        added = datetime.utcfromtimestamp(self._clock()).isoformat()
        return normalize_product({**data, "id": str(product_id), "dateAdded": added, "isDefault": False})

    def _apply_to_shadow(self, product: Product, data: Dict[str, Any]) -> None:
        record = {**product_to_dict(product), **data}
        if "isShoe" in data:
            record.pop("kind", None)
        updated = normalize_product(record)
        self._remote_products = [updated if str(p.id) == str(product.id) else p for p in self._remote_products]

    def _ensure_known(self, product_id: str) -> None:
        """Refresh once when the id is not in any cached source"""
        if (
            find_product(self._remote_products, product_id) is None
            and find_product(self.catalog(), product_id) is None
            and self.local.find_product(product_id) is None
        ):
            self.refresh()

    def _find_replacement(self, product_id: str) -> Optional[Product]:
        for p in self._remote_products:
            if p.original_id and str(p.original_id) == product_id:
                return replace(p, is_default=False)
        return None

    def _resolve_id(self, product_id: str) -> str:
        """Map a superseded catalog id onto the record that replaced it"""
        self._ensure_known(product_id)
        replacement = self._find_replacement(product_id)
        if replacement is not None:
            return str(replacement.id)
        local = self.local.find_product(product_id)
        if local is not None:
            return str(local.id)
        return product_id
