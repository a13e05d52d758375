"""
Local Catalog Source.

Purpose:
- Loads the baseline product list from the static `products.json` document
  shipped with the storefront (`{"products": [...]}`)
- Also offers an in-memory source for tests

Usage:
- Wired in amanice/api/services.py when the catalog location is a file path
- Consumed by ProductMergeEngine through the CatalogSource interface

Swap:
Use clients/real_http/catalog_source.py when the catalog is served over HTTP.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from amanice.integrations.contracts.interfaces import CatalogSource, Product
from amanice.integrations.response_wrappers import IntegrationResponseError, normalize_product, normalize_product_list

logger = logging.getLogger(__name__)


def parse_catalog_document(data: Any) -> List[Product]:
    """Extract products from a `{products: [...]}` document."""
    if not isinstance(data, dict):
        raise IntegrationResponseError("Catalog document must be a JSON object with a 'products' list")
    return normalize_product_list(data.get("products") or [], source="catalog")


class FileCatalogSource(CatalogSource):
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> List[Product]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            products = parse_catalog_document(data)
        except (OSError, json.JSONDecodeError, IntegrationResponseError) as e:
            logger.error("Error loading default products from %s: %s", self.path, e)
            return []
        logger.info("Loaded %d default products from %s", len(products), self.path)
        return products


class InMemoryCatalogSource(CatalogSource):
    def __init__(self, products: Optional[Iterable[Any]] = None) -> None:
        self._products = [p if not isinstance(p, dict) else normalize_product(p) for p in (products or [])]
        self.load_count = 0

    def load(self) -> List[Product]:
        self.load_count += 1
        return list(self._products)
