from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from amanice.integrations.contracts.interfaces import Product, ProductKind, RegularProduct, ShoeProduct, ShoeSize
from amanice.integrations.contracts.products import normalize_category

logger = logging.getLogger(__name__)


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class ShoeSizeModel(BaseModel):
    brand: str = ""
    size: str = ""
    qty: int = Field(default=0, ge=0)

    @field_validator("size", "brand", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ProductRecordModel(BaseModel):
    id: str
    kind: ProductKind = ProductKind.REGULAR
    type: str = ""
    category: str = ""
    gender: str = ""
    price: Optional[float] = None
    price_range: str = ""
    description: str = ""
    image: str = ""
    stock_quantity: int = Field(default=0, ge=0)
    stock_number: str = ""
    size: str = ""
    shoe_brand: Optional[str] = None
    shoe_sizes: List[ShoeSizeModel] = Field(default_factory=list)
    date_added: Optional[datetime] = None
    original_id: Optional[str] = None


class StoreEnvelopeModel(BaseModel):
    """`{status, id?, message?}` envelope returned by Remote Store writes."""

    status: str
    id: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status.lower() == "success"


def normalize_product(raw: Dict[str, Any]) -> Product:
    """Build a Product from a raw record in either camelCase or snake_case."""
    if not isinstance(raw, dict):
        raise IntegrationResponseError(f"Product record must be an object; got {type(raw).__name__}")

    product_id = _first_non_empty(raw, "id")
    is_shoe = _coerce_bool(_first_non_empty(raw, "isShoe", "is_shoe", default=False))
    kind = str(raw.get("kind") or "").strip().lower()
    if kind == ProductKind.SHOE.value:
        is_shoe = True

    payload = {
        "id": str(product_id),
        "kind": ProductKind.SHOE if is_shoe else ProductKind.REGULAR,
        "type": str(_first_non_empty(raw, "type", default="")).strip(),
        "category": normalize_category(raw.get("category")),
        "gender": str(_first_non_empty(raw, "gender", default="")),
        "price": _coerce_price(raw.get("price")),
        "price_range": str(_first_non_empty(raw, "priceRange", "price_range", default="")),
        "description": str(_first_non_empty(raw, "description", default="")),
        "image": str(_first_non_empty(raw, "image", "imagePath", "imageURL", default="")),
        "stock_quantity": _coerce_int(_first_non_empty(raw, "stockQuantity", "stock_quantity", default=0)),
        "stock_number": str(_first_non_empty(raw, "stockNumber", "stock_number", default="")),
        "size": str(_first_non_empty(raw, "size", default="")),
        "shoe_brand": _first_non_empty(raw, "shoeBrand", "shoe_brand", default="") or None,
        "shoe_sizes": _coerce_shoe_sizes(_first_non_empty(raw, "shoeSizes", "shoe_sizes", default=[])),
        "date_added": _first_non_empty(raw, "dateAdded", "date_added", "created_at", default="") or None,
        "original_id": _optional_str(_first_non_empty(raw, "originalId", "original_id", default="")),
    }
    record = _build_model(ProductRecordModel, payload, raw)

    common = dict(
        id=record.id,
        type=record.type,
        category=record.category,
        gender=record.gender,
        price=record.price,
        price_range=record.price_range,
        description=record.description,
        image=record.image,
        stock_number=record.stock_number,
        size=record.size,
        is_default=_coerce_bool(raw.get("isDefault", False)),
        date_added=record.date_added,
        original_id=record.original_id,
    )
    if record.kind is ProductKind.SHOE:
        return ShoeProduct(
            **common,
            shoe_brand=record.shoe_brand,
            shoe_sizes=[ShoeSize(brand=s.brand, size=s.size, qty=s.qty) for s in record.shoe_sizes],
        )
    return RegularProduct(**common, stock_quantity=record.stock_quantity)


def normalize_product_list(raw: Any, *, source: str = "remote") -> List[Product]:
    """Normalize a list of records, skipping (and logging) malformed entries."""
    if not isinstance(raw, list):
        raise IntegrationResponseError(f"Expected a list of products from {source}", payload={"raw": raw})

    products: List[Product] = []
    for item in raw:
        try:
            products.append(normalize_product(item))
        except IntegrationResponseError as e:
            logger.warning("Skipping malformed %s product record: %s", source, e)
    return products


def normalize_store_envelope(raw: Any) -> StoreEnvelopeModel:
    if not isinstance(raw, dict):
        raise IntegrationResponseError("Remote Store response is not a JSON object", payload={"raw": raw})
    status = str(_first_non_empty(raw, "status", default="error"))
    new_id = raw.get("id")
    return _build_model(
        StoreEnvelopeModel,
        {
            "status": status,
            "id": str(new_id) if new_id is not None else None,
            "message": str(raw.get("message") or ""),
        },
        raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _coerce_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid integer value: {value!r}") from exc


def _coerce_price(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid price: {value!r}") from exc


def _coerce_shoe_sizes(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise IntegrationResponseError(f"Invalid shoe sizes JSON: {value!r}") from exc
    if not value:
        return []
    if not isinstance(value, list):
        raise IntegrationResponseError(f"Shoe sizes must be a list; got {type(value).__name__}")
    return [s for s in value if isinstance(s, dict)]


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
