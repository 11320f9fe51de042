"""Tests for the query builder."""

import json

import pytest

from storefront.application.query_builder import CatalogQuery, QueryBuilder
from storefront.domain import FilterState, PriceBounds, PriceRange

BOUNDS = PriceBounds(min_price=0, max_price=1000)


@pytest.fixture
def builder() -> QueryBuilder:
    """Create a builder with the default page size."""
    return QueryBuilder(limit=9)


class TestRandomPolicy:
    """Tests for random sampling of the landing page."""

    def test_landing_page_plans_two_calls(self, builder) -> None:
        """The unfiltered first page is random with a metadata call."""
        plan = builder.build(FilterState(), BOUNDS)

        assert len(plan.queries) == 2
        assert plan.display.to_params() == {"page": "1", "limit": "9", "random": "true"}
        assert plan.metadata.to_params() == {"page": "1", "limit": "9", "random": "false"}

    def test_second_page_is_not_random(self, builder) -> None:
        """Later pages are served in backend order."""
        plan = builder.build(FilterState(page=2), BOUNDS)

        assert plan.metadata is None
        assert "random" not in plan.display.to_params()

    @pytest.mark.parametrize(
        "state",
        [
            FilterState(category_ids=("c1",)),
            FilterState(sort_by="price"),
            FilterState(sort_order="asc"),
            FilterState(sizes=("S",)),
            FilterState(explicit_product_ids=("p1",)),
        ],
    )
    def test_any_filter_disables_random(self, builder, state) -> None:
        """Filters, sort or a selection turn random sampling off."""
        plan = builder.build(state, BOUNDS)

        assert plan.metadata is None
        assert "random" not in plan.display.to_params()

    def test_full_range_price_keeps_random(self, builder) -> None:
        """A price spanning the bounds is not a filter."""
        state = FilterState(price_range=PriceRange(min_price=0, max_price=1000))
        plan = builder.build(state, BOUNDS)

        assert plan.metadata is not None
        assert "minPrice" not in plan.display.to_params()


class TestParameters:
    """Tests for backend parameter mapping."""

    def test_single_ids_are_scalars(self, builder) -> None:
        """One category or brand is sent as a plain id."""
        params = builder.build(FilterState(category_ids=("c1",), brand_ids=("b1",))).display.to_params()
        assert params["categoryId"] == "c1"
        assert params["brandId"] == "b1"

    def test_several_ids_are_json(self, builder) -> None:
        """Several categories are sent as a JSON array."""
        params = builder.build(FilterState(category_ids=("c1", "c2"))).display.to_params()
        assert json.loads(params["categoryId"]) == ["c1", "c2"]

    def test_sizes_and_colors_comma_joined(self, builder) -> None:
        """Sizes and colors are comma separated."""
        state = FilterState(sizes=("S", "2XL"), colors=("Red", "Navy"))
        params = builder.build(state).display.to_params()
        assert params["size"] == "S,2XL"
        assert params["color"] == "Red,Navy"

    def test_sort(self, builder) -> None:
        """Sort keys are passed through."""
        params = builder.build(FilterState(sort_by="createdAt", sort_order="desc")).display.to_params()
        assert params["sortBy"] == "createdAt"
        assert params["sortOrder"] == "desc"

    def test_price_clamped(self, builder) -> None:
        """The price range is clamped to the observed bounds."""
        state = FilterState(page=2, price_range=PriceRange(min_price=500, max_price=1500))
        params = builder.build(state, BOUNDS).display.to_params()
        assert params["minPrice"] == "500"
        assert params["maxPrice"] == "1000"

    def test_collapsed_price_omitted(self, builder) -> None:
        """A price outside the bounds sends no price."""
        state = FilterState(page=2, price_range=PriceRange(min_price=2000, max_price=3000))
        params = builder.build(state, BOUNDS).display.to_params()
        assert "minPrice" not in params
        assert "maxPrice" not in params

    def test_price_without_bounds(self, builder) -> None:
        """Before bounds are known the range is sent as is."""
        state = FilterState(price_range=PriceRange(min_price=10.5, max_price=20))
        params = builder.build(state).display.to_params()
        assert params["minPrice"] == "10.5"
        assert params["maxPrice"] == "20"

    def test_page_and_limit(self, builder) -> None:
        """Page and the configured limit are always sent."""
        params = builder.build(FilterState(page=3)).display.to_params()
        assert params == {"page": "3", "limit": "9"}

    def test_default_limit_from_settings(self) -> None:
        """The page size defaults to the configured value."""
        from storefront.infrastructure.config import settings

        assert QueryBuilder().limit == settings.page_size


class TestExplicitSelection:
    """Tests for explicit product id precedence."""

    def test_only_product_ids_sent(self, builder) -> None:
        """A selection sends nothing but the ids."""
        state = FilterState(
            explicit_product_ids=("p1", "p2"),
            category_ids=("c1",),
            sort_by="price",
            price_range=PriceRange(min_price=5, max_price=10),
        )
        plan = builder.build(state, BOUNDS)

        assert plan.is_selection
        assert plan.queries == [plan.display]
        assert plan.display.to_params() == {"product_ids": '["p1","p2"]'}

    def test_catalog_query_selection_flag(self) -> None:
        """CatalogQuery knows when it is a selection."""
        assert CatalogQuery(product_ids=("p1",)).is_selection
        assert not CatalogQuery(page=1).is_selection
