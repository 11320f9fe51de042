"""Query builder - FilterState to backend catalog queries.

Translates what the shopper asked for into the parameters the catalog
listing endpoint understands, and decides how many calls one view needs.

The unfiltered first page is served in random order so that the landing
view varies between visits. A random response does not carry reliable
totals or price bounds, so in that case a second, non-random call is
planned whose only purpose is to supply pagination and bounds.
"""

import json
from dataclasses import dataclass, replace

import structlog

from storefront.domain.filters import FilterState
from storefront.domain.value_objects import Color, PriceBounds, Size, SortField, SortOrder
from storefront.infrastructure.config import settings
from storefront.querystring.parsing import format_number

logger = structlog.get_logger()


def _id_param(ids: tuple[str, ...]) -> str | None:
    """One id is sent as a scalar, several as a JSON array."""
    if not ids:
        return None
    if len(ids) == 1:
        return ids[0]
    return json.dumps(list(ids), separators=(",", ":"))


@dataclass(frozen=True)
class CatalogQuery:
    """Parameters of one call to the catalog listing endpoint.

    Attributes:
        page: Page to fetch, None for a selection.
        limit: Page size, None for a selection.
        category_ids: Category constraint.
        brand_ids: Brand constraint.
        min_price: Lower price bound, None for no bound.
        max_price: Upper price bound, None for no bound.
        sort_by: Sort field.
        sort_order: Sort direction.
        sizes: Size constraint.
        colors: Color constraint.
        product_ids: Explicit products to fetch.
        random: Random ordering flag, None to leave it out.
    """

    page: int | None = None
    limit: int | None = None
    category_ids: tuple[str, ...] = ()
    brand_ids: tuple[str, ...] = ()
    min_price: float | None = None
    max_price: float | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    sizes: tuple[Size, ...] = ()
    colors: tuple[Color, ...] = ()
    product_ids: tuple[str, ...] | None = None
    random: bool | None = None

    @property
    def is_selection(self) -> bool:
        """Check if the query fetches an explicit product selection."""
        return self.product_ids is not None

    def to_params(self) -> dict[str, str]:
        """Render the query as backend request parameters.

        Returns:
            Parameter mapping with only the keys that are set.
        """
        if self.product_ids is not None:
            return {"product_ids": json.dumps(list(self.product_ids), separators=(",", ":"))}

        params: dict[str, str] = {}
        if self.page is not None:
            params["page"] = str(self.page)
        if self.limit is not None:
            params["limit"] = str(self.limit)

        category = _id_param(self.category_ids)
        if category is not None:
            params["categoryId"] = category
        brand = _id_param(self.brand_ids)
        if brand is not None:
            params["brandId"] = brand

        if self.min_price is not None:
            params["minPrice"] = format_number(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = format_number(self.max_price)

        if self.sort_by is not None:
            params["sortBy"] = self.sort_by.value
        if self.sort_order is not None:
            params["sortOrder"] = self.sort_order.value

        if self.sizes:
            params["size"] = ",".join(s.value for s in self.sizes)
        if self.colors:
            params["color"] = ",".join(c.value for c in self.colors)

        if self.random is not None:
            params["random"] = "true" if self.random else "false"
        return params


@dataclass(frozen=True)
class QueryPlan:
    """Backend calls needed to serve one FilterState.

    Attributes:
        display: Query whose items are shown.
        metadata: Query supplying pagination and price bounds, None when
            the display query supplies them itself.
    """

    display: CatalogQuery
    metadata: CatalogQuery | None = None

    @property
    def is_selection(self) -> bool:
        """Check if the plan serves an explicit product selection."""
        return self.display.is_selection

    @property
    def queries(self) -> list[CatalogQuery]:
        """All queries of the plan, display first."""
        if self.metadata is None:
            return [self.display]
        return [self.display, self.metadata]


class QueryBuilder:
    """Builds QueryPlans from filter states."""

    def __init__(self, limit: int | None = None) -> None:
        """Initialize the builder.

        Args:
            limit: Page size; defaults to the configured page size.
        """
        self.limit = limit if limit is not None else settings.page_size

    def build(self, state: FilterState, observed_bounds: PriceBounds | None = None) -> QueryPlan:
        """Plan the backend calls for a filter state.

        Args:
            state: Requested view.
            observed_bounds: Latest catalog price bounds, used to clamp
                the requested price range.

        Returns:
            QueryPlan with one call, or two when random sampling applies.
        """
        if state.explicit_product_ids is not None:
            return QueryPlan(display=CatalogQuery(product_ids=state.explicit_product_ids))

        effective = state.normalized(observed_bounds)
        price = effective.price_range

        base = CatalogQuery(
            page=effective.page,
            limit=self.limit,
            category_ids=effective.category_ids,
            brand_ids=effective.brand_ids,
            min_price=price.min_price if price else None,
            max_price=price.max_price if price else None,
            sort_by=effective.sort_by,
            sort_order=effective.sort_order,
            sizes=effective.sizes,
            colors=effective.colors,
        )

        if effective.is_random_eligible():
            logger.debug("Planning random landing page", limit=self.limit)
            return QueryPlan(
                display=replace(base, random=True),
                metadata=replace(base, random=False),
            )
        return QueryPlan(display=base)
