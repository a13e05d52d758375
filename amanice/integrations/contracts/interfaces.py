from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, List, Optional, TypeVar, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Category(str, Enum):
    MEN = "men"
    WOMEN = "women"
    KIDS = "kids"


class ProductKind(str, Enum):
    REGULAR = "regular"
    SHOE = "shoe"


class WriteSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class ShoeSize:
    brand: str
    size: str
    qty: int = 0


@dataclass
class BaseProduct:
    id: str
    type: str
    category: str                        # men / women / kids, lower-cased
    gender: str = ""
    price: Optional[float] = None
    price_range: str = ""
    description: str = ""
    image: str = ""                      # relative path, absolute URL or data: URL
    stock_number: str = ""
    size: str = ""
    is_default: bool = False             # True only for untouched Catalog Source entries
    date_added: Optional[datetime] = None
    original_id: Optional[str] = None    # catalog id this record replaces


@dataclass
class RegularProduct(BaseProduct):
    stock_quantity: int = 0

    kind: ClassVar[ProductKind] = ProductKind.REGULAR
    is_shoe: ClassVar[bool] = False

    @property
    def total_stock(self) -> int:
        return self.stock_quantity


@dataclass
class ShoeProduct(BaseProduct):
    shoe_brand: Optional[str] = None
    shoe_sizes: List[ShoeSize] = field(default_factory=list)

    kind: ClassVar[ProductKind] = ProductKind.SHOE
    is_shoe: ClassVar[bool] = True

    @property
    def total_stock(self) -> int:
        return sum(s.qty or 0 for s in self.shoe_sizes)


Product = Union[RegularProduct, ShoeProduct]


@dataclass
class CartLine:
    name: str
    price_range: str


@dataclass
class WriteReceipt:
    product_id: str
    source: WriteSource
    message: str = ""


@dataclass
class FetchError:
    message: str
    status_code: Optional[int] = None


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a Remote Store read: either `value` or `error` is set."""

    value: Optional[T] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None) -> "Result[T]":
        return cls(error=FetchError(message=message, status_code=status_code))


# ---------------------------------------------------------------------------
# Abstract collaborator interfaces
# ---------------------------------------------------------------------------

class CatalogSource(ABC):
    """Immutable baseline product list shipped as static data."""

    @abstractmethod
    def load(self) -> List[Product]:
        """Return the catalog products. Never raises; failures yield []."""


class RemoteProductStore(ABC):
    """Network- or database-backed table of admin-entered products."""

    @abstractmethod
    def list_products(self) -> Result[List[Product]]:
        """Fetch every stored product. Failures are returned, not raised."""

    @abstractmethod
    def create_product(self, payload: Dict[str, Any]) -> str:
        """Insert a product and return its new id."""

    @abstractmethod
    def update_product(self, product_id: str, updates: Dict[str, Any]) -> None:
        """Apply a partial update to an existing product."""

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        """Remove a product."""


class KeyValueStore(ABC):
    """Persistent string key-value store (the browser local storage analogue)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value. Raises StorageQuotaError when the store is full or unreachable."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""

    def ping(self) -> bool:
        return True
