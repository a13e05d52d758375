"""
SQL-backed Remote Store for production when DATABASE_URL is set.
Implements the same RemoteProductStore interface as the HTTP client and the
in-memory mock, directly over the `products` table.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from amanice.database.models import Base, ProductRecord
from amanice.errors import NotFoundError, TransportError
from amanice.integrations.contracts.interfaces import Product, RemoteProductStore, Result
from amanice.integrations.response_wrappers import normalize_product_list
from amanice.validation import validate_new_product, validate_product_updates

logger = logging.getLogger(__name__)

# camelCase payload key -> column
_COLUMNS = {
    "type": "type",
    "category": "category",
    "price": "price",
    "priceRange": "price_range",
    "description": "description",
    "image": "image",
    "stockQuantity": "stock_quantity",
    "stockNumber": "stock_number",
    "gender": "gender",
    "size": "size",
    "isShoe": "is_shoe",
    "shoeBrand": "shoe_brand",
    "shoeSizes": "shoe_sizes",
    "originalId": "original_id",
}


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s


def _parse_id(product_id: Any) -> int:
    try:
        return int(str(product_id))
    except ValueError as exc:
        raise NotFoundError(f"Product not found: {product_id}") from exc


class SqlProductStore(RemoteProductStore):
    """
    Product table access using SQLAlchemy. Use when DATABASE_URL is set.
    """

    def __init__(self, connection_string: str) -> None:
        connection_string = _normalize_connection_string(connection_string)
        if connection_string.startswith("sqlite"):
            self.engine = create_engine(connection_string)
        else:
            self.engine = create_engine(connection_string, pool_pre_ping=True, pool_size=5, max_overflow=10)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self) -> Session:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ------------------------------------------------------------------ #
    # RemoteProductStore
    # ------------------------------------------------------------------ #
    def list_products(self) -> Result[List[Product]]:
        try:
            with self._session() as s:
                stmt = select(ProductRecord).order_by(ProductRecord.created_at.desc(), ProductRecord.id.desc())
                rows = [r.to_wire() for r in s.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Get products error: %s", e)
            return Result.failure(f"Failed to retrieve products: {e}")
        return Result.success(normalize_product_list(rows, source="database"))

    def create_product(self, payload: Dict[str, Any]) -> str:
        data = validate_new_product(payload)
        now = datetime.utcnow()
        try:
            with self._session() as s:
                record = ProductRecord(created_at=now, updated_at=now)
                for key, column in _COLUMNS.items():
                    if key in data:
                        setattr(record, column, data[key] if key != "shoeSizes" else (data[key] or None))
                s.add(record)
                s.flush()
                s.refresh(record)
                new_id = str(record.id)
        except SQLAlchemyError as e:
            logger.error("Save product error: %s", e)
            raise TransportError(f"Failed to save product: {e}") from e
        logger.info("Product saved to database: id=%s type=%s category=%s", new_id, data["type"], data["category"])
        return new_id

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> None:
        pk = _parse_id(product_id)
        data = validate_product_updates(updates)
        try:
            with self._session() as s:
                record = s.execute(select(ProductRecord).where(ProductRecord.id == pk)).scalar_one_or_none()
                if record is None:
                    raise NotFoundError(f"Product not found: {product_id}")
                for key, value in data.items():
                    column = _COLUMNS.get(key)
                    if column:
                        setattr(record, column, value if key != "shoeSizes" else (value or None))
                record.updated_at = datetime.utcnow()
                s.add(record)
        except SQLAlchemyError as e:
            logger.error("Update product error: %s", e)
            raise TransportError(f"Failed to update product: {e}") from e
        logger.info("Product updated in database: %s", product_id)

    def delete_product(self, product_id: str) -> None:
        pk = _parse_id(product_id)
        try:
            with self._session() as s:
                record = s.execute(select(ProductRecord).where(ProductRecord.id == pk)).scalar_one_or_none()
                if record is None:
                    raise NotFoundError(f"Product not found: {product_id}")
                s.delete(record)
        except SQLAlchemyError as e:
            logger.error("Delete product error: %s", e)
            raise TransportError(f"Failed to delete product: {e}") from e
        logger.info("Product deleted from database: %s", product_id)

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            pk = _parse_id(product_id)
        except NotFoundError:
            return None
        with self._session() as s:
            record = s.execute(select(ProductRecord).where(ProductRecord.id == pk)).scalar_one_or_none()
            if record is None:
                return None
            rows = [record.to_wire()]
        products = normalize_product_list(rows, source="database")
        return products[0] if products else None
