"""Health check endpoints.

``/health`` reports liveness only. ``/ready`` also asks the catalog API
for its category list, so a storefront whose catalog is unreachable is
taken out of rotation instead of serving 502s.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from storefront.api.shop import get_catalog_client
from storefront.infrastructure.catalog_client import CatalogClient, CatalogRequestError
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response schema."""

    status: str
    catalog: str
    error: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report the service name and version."""
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=settings.api_version,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> ReadinessResponse:
    """Check that the catalog API answers.

    Returns:
        "ready" when the catalog responded, otherwise "not_ready" with
        status 503 and the catalog error message.
    """
    try:
        await client.list_categories()
    except CatalogRequestError as e:
        logger.warning("Catalog not reachable", error=e.message, status_code=e.status_code)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", catalog="unavailable", error=e.message)
    return ReadinessResponse(status="ready", catalog="ok")
