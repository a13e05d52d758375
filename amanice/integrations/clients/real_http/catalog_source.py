"""
Catalog Source HTTP Client.

Fetches the static `products.json` document when the storefront serves it over
HTTP. Load failures degrade to an empty catalog; the shopper never sees an
error for a missing catalog.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from amanice.integrations.clients.mocks.local_catalog import parse_catalog_document
from amanice.integrations.contracts.interfaces import CatalogSource, Product
from amanice.integrations.response_wrappers import IntegrationResponseError

logger = logging.getLogger(__name__)


class HttpCatalogSource(CatalogSource):
    def __init__(
        self,
        url: str,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def load(self) -> List[Product]:
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                products = parse_catalog_document(response.json())
        except (httpx.HTTPError, ValueError, IntegrationResponseError) as e:
            logger.error("Error loading default products from %s: %s", self.url, e)
            return []
        logger.info("Loaded %d default products from %s", len(products), self.url)
        return products
