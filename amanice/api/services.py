"""
Service wiring.

Implementation selection (mock vs real HTTP vs SQL Remote Store, in-memory vs
Redis key-value store, file vs HTTP catalog) happens here and nowhere else.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from amanice.cart import ShoppingCart
from amanice.catalog.engine import ProductMergeEngine
from amanice.catalog.overrides import LocalOverrideStore
from amanice.images import ImageIngestor
from amanice.integrations.contracts.interfaces import CatalogSource, KeyValueStore, RemoteProductStore
from amanice.utils.config_loader import StoreConfig, load_store_config

logger = logging.getLogger(__name__)


@dataclass
class CatalogServices:
    config: StoreConfig
    kv_store: KeyValueStore
    local_store: LocalOverrideStore
    engine: ProductMergeEngine
    images: ImageIngestor

    def cart(self, cart_id: str) -> ShoppingCart:
        return ShoppingCart(
            self.kv_store,
            phone_number=self.config.cart.whatsapp_number,
            key=f"{self.config.cart.storage_key}:{cart_id}",
        )


def _should_use_real_integrations(config: StoreConfig) -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(config.remote.base_url)


def _select_kv_store(config: StoreConfig) -> KeyValueStore:
    if config.storage.backend == "redis":
        from amanice.database.redis_real import RedisKeyValueStore

        return RedisKeyValueStore(url=config.storage.redis_url, namespace=config.storage.namespace)

    from amanice.database.redis import InMemoryKeyValueStore

    return InMemoryKeyValueStore(max_bytes=config.storage.max_bytes)


def _select_catalog_source(config: StoreConfig) -> CatalogSource:
    if config.catalog.url:
        from amanice.integrations.clients.real_http.catalog_source import HttpCatalogSource

        return HttpCatalogSource(config.catalog.url, timeout_seconds=config.remote.timeout_seconds)

    from amanice.integrations.clients.mocks.local_catalog import FileCatalogSource

    return FileCatalogSource(config.catalog.path)


def _select_remote_store(config: StoreConfig) -> RemoteProductStore:
    if config.remote.database_url:
        from amanice.database.sql_store import SqlProductStore

        store = SqlProductStore(connection_string=config.remote.database_url)
        store.create_tables()
        return store

    if _should_use_real_integrations(config):
        from amanice.integrations.clients.real_http.remote_products import RemoteStoreClient

        return RemoteStoreClient(
            base_url=config.remote.base_url,
            api_key=config.remote.api_key,
            list_path=config.remote.list_path,
            save_path=config.remote.save_path,
            update_path=config.remote.update_path,
            delete_path=config.remote.delete_path,
            timeout_seconds=config.remote.timeout_seconds,
        )

    from amanice.integrations.clients.mocks.remote_products import InMemoryRemoteStore

    return InMemoryRemoteStore()


def build_services(config: Optional[StoreConfig] = None) -> CatalogServices:
    config = config or load_store_config()
    kv_store = _select_kv_store(config)
    local_store = LocalOverrideStore(kv_store)
    remote = _select_remote_store(config)
    engine = ProductMergeEngine(_select_catalog_source(config), remote, local_store)
    logger.info(
        "Catalog services ready: remote=%s storage=%s",
        type(remote).__name__,
        type(kv_store).__name__,
    )
    return CatalogServices(
        config=config,
        kv_store=kv_store,
        local_store=local_store,
        engine=engine,
        images=ImageIngestor(local_store, config.uploads),
    )
