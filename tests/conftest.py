"""Pytest configuration and shared fixtures."""

from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.domain.catalog import CatalogPage, Pagination, Product
from storefront.domain.value_objects import PriceBounds
from storefront.infrastructure.catalog_client import CatalogClient


def _product(index: int) -> Product:
    return Product(
        id=f"p{index}",
        name=f"Product {index}",
        price=100.0 * index,
        category_id="c1",
    )


@pytest.fixture
def make_page() -> Callable[..., CatalogPage]:
    """Factory for catalog pages.

    Builds ``count`` products (p1..pN) on a page of a listing with
    ``total`` matches.
    """

    def factory(
        count: int = 3,
        total: int | None = None,
        page: int = 1,
        limit: int = 9,
        bounds: PriceBounds | None = PriceBounds(min_price=0, max_price=1000),
        selection: bool = False,
        first: int = 1,
    ) -> CatalogPage:
        items = tuple(_product(i) for i in range(first, first + count))
        if selection:
            pagination = Pagination.single_page(count)
        else:
            total = count if total is None else total
            total_pages = max(1, -(-total // limit))
            pagination = Pagination(
                total=total,
                page=page,
                limit=limit,
                total_pages=total_pages,
                has_next_page=page < total_pages,
                has_prev_page=page > 1,
            )
        return CatalogPage(
            items=items,
            pagination=pagination,
            price_bounds=bounds,
            is_selection=selection,
        )

    return factory


@pytest.fixture
def mock_catalog_client() -> MagicMock:
    """Create a mock catalog client."""
    client = MagicMock(spec=CatalogClient)
    client.list_products = AsyncMock()
    client.list_categories = AsyncMock(return_value=[])
    client.list_brands = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client
