"""Shop controller - page-level owner of the filter state.

The URL is the source of truth for what the shopper wants to see. The
controller reads it through a UrlStore, hands the decoded FilterState to
the fetch orchestrator, and turns filter and page changes back into URL
writes. Query parameters the codec does not own are carried along.
"""

import asyncio
from typing import Any

import httpx
import structlog

from storefront.application.fetch_orchestrator import CatalogView, FetchOrchestrator
from storefront.application.filter_editor import FilterEditor
from storefront.domain.catalog import AvailableFilters, Brand, Category
from storefront.domain.exceptions import InvalidFilterError
from storefront.domain.filters import FilterState
from storefront.domain.value_objects import PriceBounds
from storefront.infrastructure.catalog_client import CatalogClient
from storefront.infrastructure.config import settings
from storefront.infrastructure.url_store import UrlStore
from storefront.querystring import decode, encode_params, strip_filter_keys

logger = structlog.get_logger()


def default_price_bounds() -> PriceBounds:
    """Price bounds used until the catalog reports its own."""
    return PriceBounds(
        min_price=settings.default_min_price,
        max_price=settings.default_max_price,
    )


class ShopController:
    """Connects the URL, the filter editor and the fetch orchestrator."""

    def __init__(
        self,
        url_store: UrlStore,
        client: CatalogClient,
        orchestrator: FetchOrchestrator | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            url_store: Current page URL.
            client: Catalog API client.
            orchestrator: Fetch orchestrator; one is created when omitted.
        """
        self.url_store = url_store
        self.client = client
        self.orchestrator = orchestrator or FetchOrchestrator(client)
        self._categories: tuple[Category, ...] = ()
        self._brands: tuple[Brand, ...] = ()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def price_bounds(self) -> PriceBounds:
        """Observed catalog price bounds, or the configured defaults."""
        return self.orchestrator.observed_bounds or default_price_bounds()

    @property
    def filter_state(self) -> FilterState:
        """FilterState decoded from the current URL."""
        return decode(self.url_store.get(), self.orchestrator.observed_bounds)

    @property
    def view(self) -> CatalogView:
        """Visible catalog view."""
        return self.orchestrator.view

    @property
    def available_filters(self) -> AvailableFilters:
        """Facet values for the filter controls."""
        return AvailableFilters(
            categories=self._categories,
            brands=self._brands,
            price_bounds=self.price_bounds,
        )

    def editor(self) -> FilterEditor:
        """Create a filter editor seeded from the current URL.

        Returns:
            FilterEditor that commits to this controller.
        """
        return FilterEditor(self.filter_state, self.price_bounds, commit=self.commit)

    # =========================================================================
    # Loading
    # =========================================================================

    async def load_facets(self) -> AvailableFilters:
        """Fetch categories and brands concurrently.

        A failed facet fetch leaves that facet empty; the listing itself
        does not depend on it.

        Returns:
            Updated available filters.
        """
        categories, brands = await asyncio.gather(
            self.client.list_categories(),
            self.client.list_brands(),
            return_exceptions=True,
        )

        if isinstance(categories, Exception):
            logger.warning("Failed to load categories", error=str(categories))
            categories = []
        if isinstance(brands, Exception):
            logger.warning("Failed to load brands", error=str(brands))
            brands = []

        self._categories = tuple(categories)
        self._brands = tuple(brands)
        return self.available_filters

    async def refresh(self) -> CatalogView:
        """Load the catalog for the current URL.

        Returns:
            Visible view after the load.
        """
        return await self.orchestrator.load(self.filter_state)

    # =========================================================================
    # URL Writes
    # =========================================================================

    def _write(self, state: FilterState) -> str:
        params = encode_params(state, self.price_bounds)
        params.extend(strip_filter_keys(self.url_store.get()))
        query = str(httpx.QueryParams(params))
        self.url_store.set(query)
        logger.debug("URL updated", query=query)
        return query

    def commit(self, state: FilterState) -> str:
        """Write a complete filter state to the URL.

        Args:
            state: State to write.

        Returns:
            New query string.
        """
        return self._write(state)

    def set_filters(self, **partial: Any) -> str:
        """Merge filter changes into the URL and return to page 1.

        Args:
            **partial: FilterState fields to replace.

        Returns:
            New query string.

        Raises:
            InvalidFilterError: If a field is unknown or a value is invalid.
        """
        partial["page"] = 1
        state = self.filter_state.with_changes(**partial)
        return self._write(state)

    def set_page(self, page: int) -> str:
        """Navigate to a page of the current view.

        A curated selection has a single page, so the URL is left as is.

        Args:
            page: 1-based page number.

        Returns:
            New (or unchanged) query string.

        Raises:
            InvalidFilterError: If the page is below 1.
        """
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise InvalidFilterError("page", page, "page must be an integer >= 1")

        state = self.filter_state
        if state.has_explicit_selection:
            logger.info("Ignoring page change on a product selection", page=page)
            return self.url_store.get()
        return self._write(state.with_changes(page=page))
