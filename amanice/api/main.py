"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from amanice.api.endpoints.admin import router as admin_router
from amanice.api.endpoints.cart import router as cart_router
from amanice.api.endpoints.products import router as products_router
from amanice.api.services import CatalogServices, build_services
from amanice.catalog.watcher import OverrideChangeWatcher
from amanice.error_handler import ErrorHandler
from amanice.errors import CatalogError

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


def create_app(services: Optional[CatalogServices] = None) -> FastAPI:
    app = FastAPI(
        title="AMA-NICE Catalog API",
        description="Storefront catalog, cart hand-off and admin product management",
        version="1.0.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.services = services or build_services()
    app.state.watcher_task = None

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        status_code, body = error_handler.handle_exception(exc, {"path": request.url.path})
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        status_code, body = error_handler.handle_exception(exc, {"path": request.url.path})
        return JSONResponse(status_code=status_code, content=body)

    app.include_router(products_router, prefix="/api/v1")
    app.include_router(cart_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check (key-value store)."""
        svc = app.state.services
        return {
            "status": "healthy",
            "storage": {"kv_store": svc.kv_store.ping()},
            "products": len(svc.engine.products()),
            "timestamp": datetime.now().isoformat(),
        }

    @app.on_event("startup")
    async def start_override_watcher():
        svc = app.state.services
        svc.engine.refresh()
        if not svc.config.watcher.enabled:
            return
        watcher = OverrideChangeWatcher(
            svc.local_store,
            on_change=svc.engine.refresh,
            interval_seconds=svc.config.watcher.interval_seconds,
        )
        app.state.watcher_stop = asyncio.Event()
        app.state.watcher_task = asyncio.create_task(watcher.watch(app.state.watcher_stop))
        logger.info("Override watcher started (every %.1fs)", svc.config.watcher.interval_seconds)

    @app.on_event("shutdown")
    async def stop_override_watcher():
        if app.state.watcher_task is not None:
            app.state.watcher_stop.set()
            await app.state.watcher_task
            app.state.watcher_task = None

    return app


app = create_app()
