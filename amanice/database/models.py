"""
SQLAlchemy models for admin-entered products.
Used by amanice.database.sql_store when DATABASE_URL is set.
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ProductRecord(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False, index=True)  # men / women / kids
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_range: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stock_number: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    gender: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    size: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    is_shoe: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    shoe_brand: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    shoe_sizes: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    original_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "type": self.type or "",
            "category": self.category or "",
            "gender": self.gender or "",
            "price": self.price,
            "priceRange": self.price_range or "",
            "description": self.description or "",
            "image": self.image or "",
            "stockQuantity": self.stock_quantity or 0,
            "stockNumber": self.stock_number or "",
            "isShoe": bool(self.is_shoe),
            "shoeBrand": self.shoe_brand,
            "shoeSizes": self.shoe_sizes or [],
            "size": self.size or "",
            "originalId": self.original_id,
            "isDefault": False,
            "dateAdded": self.created_at.isoformat() if self.created_at else None,
        }
