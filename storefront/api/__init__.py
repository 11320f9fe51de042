"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.health import router as health_router
from storefront.api.shop import router as shop_router

__all__ = [
    "health_router",
    "shop_router",
]
