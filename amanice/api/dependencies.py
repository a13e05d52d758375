import hmac
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Header, HTTPException, Request, status

from amanice.api.services import CatalogServices

load_dotenv()

logger = logging.getLogger(__name__)


def get_admin_keys() -> List[str]:
    """Comma-separated keys from API_KEYS; empty means every admin call is refused."""
    keys = os.getenv("API_KEYS", "")
    return [k.strip() for k in keys.split(",") if k.strip()]


async def require_admin_key(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY"),
):
    admin_keys = get_admin_keys()
    candidate = (x_api_key or "").strip()

    if not admin_keys:
        logger.warning("Admin request to %s refused: API_KEYS is not configured", request.url.path)
    ok = bool(candidate) and any(hmac.compare_digest(candidate, k) for k in admin_keys)

    if not ok:
        logger.warning("Admin request to %s %s rejected: bad or missing key", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key",
        )


def get_services(request: Request) -> CatalogServices:
    return request.app.state.services
