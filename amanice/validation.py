"""Backend validation for admin product writes.

Admin payloads arrive as dictionaries in camelCase (the storefront's wire
format) or snake_case (the SQL column names). These validators normalize them
to camelCase and ensure required fields are present and well-formed.

On validation failure, raise `ValidationError` so the API can return HTTP 422
with structured `field_errors`. Nothing is written before validation passes.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from amanice.errors import ValidationError
from amanice.integrations.contracts.products import ALLOWED_CATEGORIES, normalize_category

# canonical key -> accepted aliases (first present wins)
FIELD_ALIASES: Dict[str, tuple] = {
    "type": ("type",),
    "category": ("category",),
    "price": ("price",),
    "priceRange": ("priceRange", "price_range"),
    "description": ("description",),
    "image": ("image", "imagePath", "imageURL"),
    "stockQuantity": ("stockQuantity", "stock_quantity"),
    "stockNumber": ("stockNumber", "stock_number"),
    "gender": ("gender",),
    "size": ("size",),
    "isShoe": ("isShoe", "is_shoe"),
    "shoeBrand": ("shoeBrand", "shoe_brand"),
    "shoeSizes": ("shoeSizes", "shoe_sizes"),
    "originalId": ("originalId", "original_id"),
}


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def pick(payload: Dict[str, Any], field: str) -> Any:
    for alias in FIELD_ALIASES.get(field, (field,)):
        if alias in payload:
            return payload[alias]
    return None


def has_field(payload: Dict[str, Any], field: str) -> bool:
    return any(alias in payload for alias in FIELD_ALIASES.get(field, (field,)))


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(pick(payload, field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def parse_int(raw: Any, field: str, errors: Dict[str, str], *, min_value: Optional[int] = None) -> int:
    if raw is None or _strip(raw) == "":
        return 0
    try:
        val = int(str(raw))
    except ValueError:
        add_error(errors, field, f"{field} must be a whole number")
        return 0
    if min_value is not None and val < min_value:
        add_error(errors, field, f"{field} must be at least {min_value}")
    return val


def parse_price(raw: Any, errors: Dict[str, str]) -> Optional[float]:
    if raw is None or _strip(raw) == "":
        return None
    try:
        val = float(raw)
    except (TypeError, ValueError):
        add_error(errors, "price", "price must be a number")
        return None
    if val < 0:
        add_error(errors, "price", "price must be at least 0")
    return val


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return _strip(raw).lower() in ("true", "1", "yes", "y", "on")


def parse_shoe_sizes(raw: Any, errors: Dict[str, str]) -> list:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            add_error(errors, "shoeSizes", "shoeSizes must be a JSON list")
            return []
    if not isinstance(raw, list):
        add_error(errors, "shoeSizes", "shoeSizes must be a list")
        return []
    sizes = []
    for entry in raw:
        if not isinstance(entry, dict):
            add_error(errors, "shoeSizes", "each shoe size must be an object with brand, size and qty")
            continue
        qty = parse_int(entry.get("qty"), "shoeSizes", errors, min_value=0)
        sizes.append({"brand": _as_str(entry.get("brand")), "size": _as_str(entry.get("size")), "qty": qty})
    return sizes


def validate_category_value(raw: Any, errors: Dict[str, str]) -> str:
    category = normalize_category(raw)
    if category and category not in ALLOWED_CATEGORIES:
        add_error(errors, "category", f"Invalid category. Must be one of: {', '.join(ALLOWED_CATEGORIES)}")
    return category


def validate_new_product(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a full product for creation; returns the camelCase payload."""
    errors: Dict[str, str] = {}
    product_type = require_str(payload, "type", errors, label="Product type")
    require_str(payload, "category", errors, label="Product category")
    image = require_str(payload, "image", errors, label="Product image")
    category = validate_category_value(pick(payload, "category"), errors)

    data = {
        "type": product_type,
        "category": category,
        "price": parse_price(pick(payload, "price"), errors),
        "priceRange": _as_str(pick(payload, "priceRange")),
        "description": _as_str(pick(payload, "description")),
        "image": image,
        "stockQuantity": parse_int(pick(payload, "stockQuantity"), "stockQuantity", errors, min_value=0),
        "stockNumber": _as_str(pick(payload, "stockNumber")),
        "gender": _as_str(pick(payload, "gender")),
        "size": _as_str(pick(payload, "size")),
        "isShoe": parse_bool(pick(payload, "isShoe")),
        "shoeBrand": pick(payload, "shoeBrand") or None,
        "shoeSizes": parse_shoe_sizes(pick(payload, "shoeSizes"), errors),
    }
    original_id = pick(payload, "originalId")
    if original_id not in (None, ""):
        data["originalId"] = str(original_id)

    raise_if_errors(errors)
    return data


def validate_product_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a partial update; returns only the fields that were supplied."""
    errors: Dict[str, str] = {}
    data: Dict[str, Any] = {}

    for field in ("type", "image"):
        if has_field(updates, field):
            value = _strip(pick(updates, field))
            if not value:
                add_error(errors, field, f"{field} cannot be empty")
            data[field] = value
    if has_field(updates, "category"):
        category = validate_category_value(pick(updates, "category"), errors)
        if not category:
            add_error(errors, "category", "category cannot be empty")
        data["category"] = category
    if has_field(updates, "price"):
        data["price"] = parse_price(pick(updates, "price"), errors)
    if has_field(updates, "stockQuantity"):
        data["stockQuantity"] = parse_int(pick(updates, "stockQuantity"), "stockQuantity", errors, min_value=0)
    if has_field(updates, "isShoe"):
        data["isShoe"] = parse_bool(pick(updates, "isShoe"))
    if has_field(updates, "shoeSizes"):
        data["shoeSizes"] = parse_shoe_sizes(pick(updates, "shoeSizes"), errors)
    if has_field(updates, "shoeBrand"):
        data["shoeBrand"] = pick(updates, "shoeBrand") or None
    for field in ("priceRange", "description", "stockNumber", "gender", "size"):
        if has_field(updates, field):
            data[field] = _as_str(pick(updates, field))

    if not data and not errors:
        add_error(errors, "updates", "No fields to update")
    raise_if_errors(errors)
    return data


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        first = next(iter(errors.values()))
        raise ValidationError(first if len(errors) == 1 else message, field_errors=errors)
