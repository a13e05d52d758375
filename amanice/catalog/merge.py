from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from amanice.catalog.overrides import LocalOverrideStore
from amanice.integrations.contracts.interfaces import Product, Result
from amanice.integrations.contracts.products import with_default_flag

logger = logging.getLogger(__name__)


def merge(catalog: Iterable[Product], overrides: Iterable[Product], tombstones: Iterable[str]) -> List[Product]:
    """
    Combine the catalog with override products into one list keyed by id.

    - catalog entries are tagged `is_default=True`, overrides `is_default=False`
    - an override replaces the whole record of a catalog entry with the same id
    - an override carrying `original_id` removes the catalog entry it replaces
    - tombstoned ids are dropped from every source

    Order is insertion order: catalog first, then new override ids. Inputs are
    not mutated and the result is the same for the same inputs.
    """
    deleted = {str(t) for t in tombstones}
    merged: Dict[str, Product] = {}

    for product in catalog:
        product_id = str(product.id)
        if product_id in deleted:
            continue
        merged[product_id] = with_default_flag(product, True)

    for product in overrides:
        product_id = str(product.id)
        if product_id in deleted:
            continue
        if product.original_id:
            original_id = str(product.original_id)
            if original_id in deleted:
                continue
            replaced = merged.get(original_id)
            if replaced is not None and replaced.is_default:
                del merged[original_id]
        merged[product_id] = with_default_flag(product, False)

    return list(merged.values())


def choose_overrides(result: Result[List[Product]], local_store: LocalOverrideStore) -> List[Product]:
    """Remote products when the fetch succeeded, local overrides otherwise."""
    if result.ok:
        return list(result.value or [])
    logger.warning("Remote Store unavailable (%s); using local overrides", result.error.message)
    return local_store.load_products()
