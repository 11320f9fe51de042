"""Domain layer - FilterState, catalog models, value objects, state machines.

This module exports the core domain building blocks:

- **FilterState**: What the shopper currently wants to see
- **Value Objects**: Facet enumerations and price types (Size, Color, PriceRange)
- **Catalog models**: Products, pagination and the result of one query
- **State Machines**: Fetch generation lifecycle (FetchStatus)
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from storefront.domain import FilterState, PriceBounds, PriceRange, Size

    state = FilterState(
        category_ids=("c1",),
        sizes=(Size.S, Size.M),
        price_range=PriceRange(min_price=500, max_price=1500),
    )
    state.has_active_filters()  # True
    state.normalized(PriceBounds(min_price=0, max_price=1000)).price_range
    # PriceRange(min_price=500, max_price=1000)
"""

from storefront.domain.base import ValueObject
from storefront.domain.catalog import (
    AvailableFilters,
    Brand,
    CatalogPage,
    Category,
    Pagination,
    Product,
)
from storefront.domain.exceptions import (
    DomainError,
    FilterError,
    InvalidFilterError,
    InvalidPriceRangeError,
    InvalidStateTransitionError,
)
from storefront.domain.filters import FilterState
from storefront.domain.state_machines import FetchStatus, validate_fetch_transition
from storefront.domain.value_objects import (
    DEFAULT_PRICE_BOUNDS,
    Color,
    PriceBounds,
    PriceRange,
    Size,
    SortField,
    SortOrder,
)

__all__ = [
    # Base
    "ValueObject",
    # Filters
    "FilterState",
    # Value objects
    "Color",
    "DEFAULT_PRICE_BOUNDS",
    "PriceBounds",
    "PriceRange",
    "Size",
    "SortField",
    "SortOrder",
    # Catalog
    "AvailableFilters",
    "Brand",
    "CatalogPage",
    "Category",
    "Pagination",
    "Product",
    # State machines
    "FetchStatus",
    "validate_fetch_transition",
    # Exceptions
    "DomainError",
    "FilterError",
    "InvalidFilterError",
    "InvalidPriceRangeError",
    "InvalidStateTransitionError",
]
