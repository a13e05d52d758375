"""Pytest fixtures for the catalog, cart and API tests."""

import pytest

from amanice.catalog.engine import ProductMergeEngine
from amanice.catalog.overrides import LocalOverrideStore
from amanice.database.redis import InMemoryKeyValueStore
from amanice.integrations.clients.mocks.local_catalog import InMemoryCatalogSource
from amanice.integrations.clients.mocks.remote_products import InMemoryRemoteStore

FIXED_NOW = 1_700_000_000.0

CATALOG = [
    {"id": "101", "type": "Shirt", "category": "men", "image": "Assets/images/shirt.jpg", "priceRange": "R50-R100"},
    {
        "id": "102",
        "type": "Nike Sneaker",
        "category": "men",
        "image": "Assets/images/Mens sneakers.jpg",
        "isShoe": True,
        "shoeSizes": [{"brand": "Nike", "size": "8", "qty": 2}, {"brand": "Nike", "size": "9", "qty": 3}],
    },
    {"id": "103", "type": "Dress", "category": "women", "image": "Assets/images/dress.jpg"},
    {"id": "104", "type": "Kids Clothing Pack", "category": "kids", "image": "Assets/images/pack.jpg", "priceRange": "R120"},
]


@pytest.fixture
def kv():
    """In-memory key-value store without a quota."""
    return InMemoryKeyValueStore()


@pytest.fixture
def local_store(kv):
    return LocalOverrideStore(kv)


@pytest.fixture
def catalog_source():
    return InMemoryCatalogSource(CATALOG)


@pytest.fixture
def remote():
    return InMemoryRemoteStore()


@pytest.fixture
def engine(catalog_source, remote, local_store):
    return ProductMergeEngine(catalog_source, remote, local_store, clock=lambda: FIXED_NOW)
