"""
Integrations layer.
This package contains all code used to communicate with the catalog's collaborators:
- The Remote Store (admin product endpoints or the products SQL table)
- The Catalog Source (static products.json document)

Key rule:
- The merge engine MUST NOT call external systems directly.
- It should call integration clients (under amanice/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when the endpoints are available.

Switching implementations:
- The selection of mock vs real clients should happen in ONE place (amanice/api/services.py).
"""

from .contracts.interfaces import (
    CartLine,
    CatalogSource,
    Category,
    FetchError,
    KeyValueStore,
    Product,
    ProductKind,
    RegularProduct,
    RemoteProductStore,
    Result,
    ShoeProduct,
    ShoeSize,
    WriteReceipt,
    WriteSource,
)
from .contracts.products import (
    filter_by_category,
    is_kids_pack,
    is_shoe_like,
    normalize_category,
    validate_category,
)

__all__ = [
    # interfaces
    "CartLine", "CatalogSource", "Category", "FetchError", "KeyValueStore",
    "Product", "ProductKind", "RegularProduct", "RemoteProductStore",
    "Result", "ShoeProduct", "ShoeSize", "WriteReceipt", "WriteSource",
    # products
    "filter_by_category", "is_kids_pack", "is_shoe_like",
    "normalize_category", "validate_category",
]
