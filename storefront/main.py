"""Storefront catalog API main application module.

This module builds the FastAPI application and configures core
middleware, routers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.catalog import router as catalog_router
from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.navigation import router as navigation_router
from storefront.catalog.store import CatalogStore
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.provider_client import CatalogProvider, HttpCatalogProvider

logger = structlog.get_logger()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", {})
    else:
        error_code = "ERROR"
        message = str(detail)
        details = {}

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )


def create_app(provider: CatalogProvider | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        provider: Catalog data provider; an HTTP provider pointed at
            ``settings.provider_base_url`` is created on startup when omitted.

    Returns:
        Configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(settings.log_level, settings.log_json)
        logger.info(
            "Starting storefront catalog API",
            version=settings.api_version,
            debug=settings.debug,
        )

        catalog_provider = provider or HttpCatalogProvider()
        store = CatalogStore()
        await store.refresh_categories(catalog_provider)
        await store.refresh_products(catalog_provider)
        app.state.provider = catalog_provider
        app.state.store = store
        logger.info(
            "Catalog published",
            brands=len(store.roots),
            categories=len(store.flattened),
            products=len(store.products),
            degraded=store.degraded,
        )

        yield

        logger.info("Shutting down storefront catalog API")
        close = getattr(catalog_provider, "close", None)
        if close is not None:
            await close()

    app = FastAPI(
        title="Storefront Catalog API",
        description="Brand and motorcycle catalog browsing for a parts storefront",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID, error handling and storefront error mapping
    setup_middleware(app)
    app.add_exception_handler(HTTPException, http_exception_handler)

    app.include_router(health_router, tags=["Health"])
    app.include_router(catalog_router)
    app.include_router(navigation_router)

    return app


app = create_app()
