"""
Error taxonomy for the catalog service.

Only admin-facing write operations let these reach a caller. Shopper read
paths recover from TransportError, StorageQuotaError and IntegrityError and
degrade to the best data available.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for every error raised by the catalog service."""

    status_code: int = 500

    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload or {}


class ValidationError(CatalogError):
    """A required field is missing or malformed. Raised before any write."""

    status_code = 422

    def __init__(
        self,
        message: str = "Validation failed",
        *,
        field_errors: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.field_errors = field_errors or {}


class NotFoundError(CatalogError):
    """The referenced product (or file) does not exist."""

    status_code = 404


class TransportError(CatalogError):
    """The Remote Store could not be reached or answered with a failure."""

    status_code = 502


class StorageQuotaError(CatalogError):
    """The key-value store refused a write because it is full."""

    status_code = 507


class IntegrityError(CatalogError):
    """Persisted JSON could not be decoded."""

    status_code = 500
