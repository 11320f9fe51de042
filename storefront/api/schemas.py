"""API schemas for the storefront API.

Pydantic models for request/response validation and serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from storefront.domain.value_objects import Color, Size, SortField, SortOrder


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict[str, Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PriceRangeSchema(BaseModel):
    """Inclusive price window."""

    min_price: float = Field(..., allow_inf_nan=False, description="Lower bound")
    max_price: float = Field(..., allow_inf_nan=False, description="Upper bound")


# ============================================================================
# Filter Schemas
# ============================================================================


class FilterStateSchema(BaseModel):
    """Decoded filter state of a shop URL."""

    page: int = Field(..., description="Page number (1-based)")
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    category_ids: list[str] = Field(default_factory=list)
    brand_ids: list[str] = Field(default_factory=list)
    sizes: list[Size] = Field(default_factory=list)
    colors: list[Color] = Field(default_factory=list)
    price_range: PriceRangeSchema | None = Field(
        default=None, description="Requested price window, null for the full range"
    )
    explicit_product_ids: list[str] | None = Field(
        default=None, description="Curated product selection"
    )


class FilterChanges(BaseModel):
    """Partial filter update. Only the fields present are changed."""

    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    category_ids: list[str] | None = None
    brand_ids: list[str] | None = None
    sizes: list[Size] | None = None
    colors: list[Color] | None = None
    price_range: PriceRangeSchema | None = None
    explicit_product_ids: list[str] | None = None


class SetFiltersRequest(BaseModel):
    """Request to merge filter changes into a shop URL."""

    query: str = Field(default="", description="Current query string")
    filters: FilterChanges = Field(..., description="Fields to change")


class SetPageRequest(BaseModel):
    """Request to move a shop URL to another page."""

    query: str = Field(default="", description="Current query string")
    page: int = Field(..., description="Target page (1-based)")


class QueryResponse(BaseModel):
    """New shop URL query string."""

    query: str = Field(..., description="Query string without leading '?'")


# ============================================================================
# Catalog Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Product in a listing."""

    id: str
    name: str
    price: float
    category_id: str | None = None
    brand_id: str | None = None
    in_stock: bool = True
    compare_at_price: float | None = None
    available_sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    slug: str | None = None


class PaginationSchema(BaseModel):
    """Pagination descriptor."""

    total: int = Field(..., description="Total matching products")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Number of pages")
    has_next_page: bool
    has_prev_page: bool


class CategorySchema(BaseModel):
    """Category facet value."""

    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None


class BrandSchema(BaseModel):
    """Brand facet value."""

    id: str
    name: str


class AvailableFiltersSchema(BaseModel):
    """Facet values offered by the filter controls."""

    categories: list[CategorySchema] = Field(default_factory=list)
    brands: list[BrandSchema] = Field(default_factory=list)
    sizes: list[Size] = Field(default_factory=list)
    colors: list[Color] = Field(default_factory=list)
    price_bounds: PriceRangeSchema


class ShopPageResponse(BaseModel):
    """Everything needed to render one shop listing page."""

    query: str = Field(..., description="Canonical query string for the view")
    filters: FilterStateSchema
    status: str = Field(..., description="Fetch status of the view")
    items: list[ProductSchema] = Field(default_factory=list)
    pagination: PaginationSchema | None = Field(
        default=None, description="Null when pagination controls are hidden"
    )
    page_window: list[int | None] = Field(
        default_factory=list, description="Page links, null marks an ellipsis"
    )
    summary: str = Field(..., description="Result count label")
    is_selection: bool = Field(default=False, description="Curated product selection")
    available_filters: AvailableFiltersSchema
