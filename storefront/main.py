"""Storefront API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.health import router as health_router
from storefront.api.middleware import error_response, setup_middleware
from storefront.api.shop import router as shop_router
from storefront.infrastructure.catalog_client import CatalogClient
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging_utils import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging(settings.log_level)
    logger.info(
        "Starting storefront API",
        version=settings.api_version,
        debug=settings.debug,
        catalog_api_url=settings.catalog_api_url,
    )

    app.state.catalog_client = CatalogClient(
        base_url=settings.catalog_api_url,
        timeout=settings.catalog_api_timeout,
    )

    yield

    logger.info("Shutting down storefront API")
    await app.state.catalog_client.close()


app = FastAPI(
    title="Storefront API",
    description="Catalog query synchronization for the shop listing",
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

setup_middleware(app)

app.include_router(health_router, tags=["Health"])
app.include_router(shop_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            request,
            exc.status_code,
            detail.get("error_code", "ERROR"),
            detail.get("message", str(detail)),
            detail.get("details"),
        )
    return error_response(request, exc.status_code, "ERROR", str(detail))


def main() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
