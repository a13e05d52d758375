"""Maps exceptions to the `{status: "error", message}` response envelope."""
from typing import Any, Dict, Tuple
import logging

from amanice.errors import CatalogError, ValidationError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Tuple[int, Dict[str, Any]]:
        if isinstance(exc, CatalogError):
            logger.warning("Catalog error (%s): %s", type(exc).__name__, exc.message)
            metadata: Dict[str, Any] = {"error": type(exc).__name__, "context": context or {}}
            if isinstance(exc, ValidationError) and exc.field_errors:
                metadata["field_errors"] = dict(exc.field_errors)
            return exc.status_code, {
                "status": "error",
                "message": exc.message,
                "metadata": metadata,
            }

        logger.error("Unhandled exception in catalog service: %s", exc, exc_info=True)
        return 500, {
            "status": "error",
            "message": "An internal error occurred while processing your request. Please try again later.",
            "metadata": {"error": str(exc), "context": context or {}},
        }
