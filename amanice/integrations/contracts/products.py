from dataclasses import asdict, replace
from typing import Any, Dict, Iterable, List, Optional

from amanice.errors import ValidationError
from .interfaces import Category, Product, ShoeProduct

"""
Product catalogue contract helpers.

Wire format is the camelCase JSON shape used by the static catalog document
and the Remote Store endpoints. Both the mock and the real clients, and the
SQL adapter, go through these helpers so that field naming lives in one place.
"""


ALLOWED_CATEGORIES = tuple(c.value for c in Category)

SHOE_TYPE_MARKERS = ("sneaker", "takkies")
KIDS_PACK_TYPE_MARKERS = ("kids clothing pack", "kids pack", "clothing pack")


# ---------------------------------------------------------------------------
# Category handling
# ---------------------------------------------------------------------------

def normalize_category(value: Any) -> str:
    return str(value or "").strip().lower()


def validate_category(value: Any) -> str:
    """Lower-case a category and reject anything outside men/women/kids."""
    category = normalize_category(value)
    if category not in ALLOWED_CATEGORIES:
        raise ValidationError(
            f"Invalid category. Must be one of: {', '.join(ALLOWED_CATEGORIES)}",
            field_errors={"category": f"'{value}' is not a valid category"},
        )
    return category


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def is_shoe_like(product: Product) -> bool:
    type_name = (product.type or "").lower()
    return product.is_shoe or any(marker in type_name for marker in SHOE_TYPE_MARKERS)


def is_kids_pack(product: Product) -> bool:
    type_name = (product.type or "").lower()
    return any(marker in type_name for marker in KIDS_PACK_TYPE_MARKERS)


def filter_by_category(products: Iterable[Product], category: str) -> List[Product]:
    target = normalize_category(category)
    return [p for p in products if normalize_category(p.category) == target]


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def with_default_flag(product: Product, is_default: bool) -> Product:
    """Return a copy with a string id and the given `is_default` tag."""
    return replace(product, id=str(product.id), is_default=is_default)


def product_to_dict(product: Product) -> Dict[str, Any]:
    """Serialize a product into its camelCase wire shape."""
    data: Dict[str, Any] = {
        "id": str(product.id),
        "kind": product.kind.value,
        "type": product.type,
        "category": product.category,
        "gender": product.gender,
        "price": product.price,
        "priceRange": product.price_range,
        "description": product.description,
        "image": product.image,
        "stockNumber": product.stock_number,
        "size": product.size,
        "isShoe": product.is_shoe,
        "isDefault": product.is_default,
        "dateAdded": product.date_added.isoformat() if product.date_added else None,
        "totalStock": product.total_stock,
    }
    if product.original_id:
        data["originalId"] = product.original_id
    if isinstance(product, ShoeProduct):
        data["shoeBrand"] = product.shoe_brand
        data["shoeSizes"] = [asdict(s) for s in product.shoe_sizes]
    else:
        data["stockQuantity"] = product.stock_quantity
    return data


def product_to_payload(product: Product) -> Dict[str, Any]:
    """Wire payload for a Remote Store write: no identity or source flags."""
    data = product_to_dict(product)
    for key in ("id", "kind", "isDefault", "dateAdded", "totalStock"):
        data.pop(key, None)
    data.setdefault("stockQuantity", 0)
    data.setdefault("shoeBrand", None)
    data.setdefault("shoeSizes", [])
    return data


def find_product(products: Iterable[Product], product_id: Any) -> Optional[Product]:
    wanted = str(product_id)
    for p in products:
        if str(p.id) == wanted:
            return p
    return None
