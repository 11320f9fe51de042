"""Shop API endpoints.

Server side of the shop listing page: decode a shop URL and load the
matching catalog page, and compute the URL that a filter or page change
navigates to.
"""

import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from storefront.api.schemas import (
    AvailableFiltersSchema,
    BrandSchema,
    CategorySchema,
    ErrorResponse,
    FilterChanges,
    FilterStateSchema,
    PaginationSchema,
    PriceRangeSchema,
    ProductSchema,
    QueryResponse,
    SetFiltersRequest,
    SetPageRequest,
    ShopPageResponse,
)
from storefront.application.shop_controller import ShopController
from storefront.domain.catalog import AvailableFilters, Pagination, Product
from storefront.domain.exceptions import DomainError
from storefront.domain.filters import FilterState
from storefront.domain.state_machines import FetchStatus
from storefront.domain.value_objects import PriceRange
from storefront.infrastructure.catalog_client import CatalogClient
from storefront.infrastructure.url_store import InMemoryUrlStore
from storefront.querystring import encode

router = APIRouter(prefix="/shop", tags=["Shop"])


# ============================================================================
# Dependencies
# ============================================================================


def get_catalog_client(request: Request) -> CatalogClient:
    """Get the shared catalog client."""
    return request.app.state.catalog_client


def _controller(query: str, client: CatalogClient) -> ShopController:
    return ShopController(InMemoryUrlStore(query), client)


def _invalid_filter(e: DomainError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error_code": "INVALID_FILTER",
            "message": e.message,
            "details": e.details,
        },
    )


# ============================================================================
# Converters
# ============================================================================


def filters_to_schema(state: FilterState) -> FilterStateSchema:
    """Convert FilterState to response schema."""
    price = state.price_range
    return FilterStateSchema(
        page=state.page,
        sort_by=state.sort_by,
        sort_order=state.sort_order,
        category_ids=list(state.category_ids),
        brand_ids=list(state.brand_ids),
        sizes=list(state.sizes),
        colors=list(state.colors),
        price_range=(
            PriceRangeSchema(min_price=price.min_price, max_price=price.max_price)
            if price
            else None
        ),
        explicit_product_ids=(
            list(state.explicit_product_ids) if state.explicit_product_ids else None
        ),
    )


def changes_to_fields(changes: FilterChanges) -> dict[str, Any]:
    """Convert a partial filter update to FilterState field values.

    Only fields present in the request are returned. A null facet list
    clears the facet.
    """
    fields: dict[str, Any] = {}
    for name, value in changes.model_dump(exclude_unset=True).items():
        if name == "price_range":
            fields[name] = PriceRange(**value) if value is not None else None
        elif name == "explicit_product_ids":
            fields[name] = tuple(value) if value is not None else None
        elif name in ("sort_by", "sort_order"):
            fields[name] = value
        else:
            fields[name] = tuple(value or ())
    return fields


def product_to_schema(product: Product) -> ProductSchema:
    """Convert Product to response schema."""
    return ProductSchema(
        id=product.id,
        name=product.name,
        price=product.price,
        category_id=product.category_id,
        brand_id=product.brand_id,
        in_stock=product.in_stock,
        compare_at_price=product.compare_at_price,
        available_sizes=list(product.available_sizes),
        colors=list(product.colors),
        images=list(product.images),
        slug=product.slug,
    )


def pagination_to_schema(pagination: Pagination) -> PaginationSchema:
    """Convert Pagination to response schema."""
    return PaginationSchema(
        total=pagination.total,
        page=pagination.page,
        limit=pagination.limit,
        total_pages=pagination.total_pages,
        has_next_page=pagination.has_next_page,
        has_prev_page=pagination.has_prev_page,
    )


def available_filters_to_schema(available: AvailableFilters) -> AvailableFiltersSchema:
    """Convert AvailableFilters to response schema."""
    bounds = available.price_bounds
    return AvailableFiltersSchema(
        categories=[
            CategorySchema(
                id=c.id,
                name=c.name,
                description=c.description,
                parent_id=c.parent_id,
            )
            for c in available.categories
        ],
        brands=[BrandSchema(id=b.id, name=b.name) for b in available.brands],
        sizes=list(available.sizes),
        colors=list(available.colors),
        price_bounds=PriceRangeSchema(min_price=bounds.min_price, max_price=bounds.max_price),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ShopPageResponse,
    responses={
        502: {"model": ErrorResponse},
    },
    summary="Load shop page",
    description="Decode the shop URL query and load the matching catalog page.",
)
async def get_shop_page(
    request: Request,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> ShopPageResponse:
    """Load one shop listing page.

    Malformed query parameters are ignored. An empty result is not an
    error.

    Args:
        request: Incoming request; its query string is the shop URL query.
        client: Catalog client.

    Returns:
        Shop page with products, pagination and facets.

    Raises:
        HTTPException: 502 if the catalog could not be loaded.
    """
    controller = _controller(request.url.query, client)

    _, view = await asyncio.gather(controller.load_facets(), controller.refresh())

    if view.status is FetchStatus.FAILED or view.page is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error_code": "CATALOG_UNAVAILABLE",
                "message": view.error or "Failed to load products",
                "details": [],
            },
        )

    page = view.page
    state = controller.filter_state
    return ShopPageResponse(
        query=encode(state, controller.price_bounds),
        filters=filters_to_schema(state),
        status=view.status.value,
        items=[product_to_schema(p) for p in page.items],
        pagination=pagination_to_schema(page.pagination) if page.show_pagination else None,
        page_window=page.pagination.page_window() if page.show_pagination else [],
        summary=page.summary(),
        is_selection=page.is_selection,
        available_filters=available_filters_to_schema(controller.available_filters),
    )


@router.post(
    "/filters",
    response_model=QueryResponse,
    responses={
        400: {"model": ErrorResponse},
    },
    summary="Change filters",
    description="Merge filter changes into a shop URL query. The page resets to 1.",
)
async def set_filters(
    body: SetFiltersRequest,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> QueryResponse:
    """Compute the shop URL after a filter change.

    Args:
        body: Current query and the fields to change.
        client: Catalog client.

    Returns:
        New query string.

    Raises:
        HTTPException: 400 if a filter value is invalid.
    """
    controller = _controller(body.query, client)

    try:
        query = controller.set_filters(**changes_to_fields(body.filters))
    except DomainError as e:
        raise _invalid_filter(e) from e
    return QueryResponse(query=query)


@router.post(
    "/page",
    response_model=QueryResponse,
    responses={
        400: {"model": ErrorResponse},
    },
    summary="Change page",
    description="Move a shop URL query to another page.",
)
async def set_page(
    body: SetPageRequest,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> QueryResponse:
    """Compute the shop URL after a page change.

    Args:
        body: Current query and target page.
        client: Catalog client.

    Returns:
        New query string, unchanged for a product selection.

    Raises:
        HTTPException: 400 if the page is below 1.
    """
    controller = _controller(body.query, client)
    try:
        query = controller.set_page(body.page)
    except DomainError as e:
        raise _invalid_filter(e) from e
    return QueryResponse(query=query)
