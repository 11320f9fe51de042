"""Tests for FilterState."""

import pytest

from storefront.domain import (
    Color,
    FilterState,
    InvalidFilterError,
    PriceBounds,
    PriceRange,
    Size,
    SortField,
    SortOrder,
)

BOUNDS = PriceBounds(min_price=0, max_price=1000)


class TestFilterStateCreation:
    """Tests for FilterState construction and validation."""

    def test_default_state(self) -> None:
        """Default state is page 1 with nothing selected."""
        state = FilterState()
        assert state.page == 1
        assert state.category_ids == ()
        assert state.price_range is None
        assert state.explicit_product_ids is None
        assert not state.has_active_filters()

    def test_collections_become_tuples(self) -> None:
        """Lists are normalized to tuples."""
        state = FilterState(category_ids=["c1", "c2"], brand_ids=["b1"])
        assert state.category_ids == ("c1", "c2")
        assert state.brand_ids == ("b1",)

    def test_duplicates_removed_in_order(self) -> None:
        """Duplicate values are dropped, first occurrence wins."""
        state = FilterState(category_ids=("c2", "c1", "c2"), sizes=("M", "S", "M"))
        assert state.category_ids == ("c2", "c1")
        assert state.sizes == (Size.M, Size.S)

    def test_enum_values_coerced(self) -> None:
        """Raw strings are coerced to enum members."""
        state = FilterState(sort_by="price", sort_order="desc", colors=["Navy"])
        assert state.sort_by is SortField.PRICE
        assert state.sort_order is SortOrder.DESC
        assert state.colors == (Color.NAVY,)

    def test_blank_ids_dropped(self) -> None:
        """Whitespace-only identifiers are ignored."""
        state = FilterState(category_ids=(" c1 ", "", "  "))
        assert state.category_ids == ("c1",)

    @pytest.mark.parametrize("page", [0, -1, True, "2", 1.5])
    def test_invalid_page_raises(self, page) -> None:
        """Page must be an integer >= 1."""
        with pytest.raises(InvalidFilterError):
            FilterState(page=page)

    def test_unknown_size_raises(self) -> None:
        """Unknown sizes raise InvalidFilterError."""
        with pytest.raises(InvalidFilterError):
            FilterState(sizes=("XXS",))

    def test_string_collection_raises(self) -> None:
        """A bare string is not accepted as a collection."""
        with pytest.raises(InvalidFilterError):
            FilterState(category_ids="c1")

    def test_explicit_ids_pin_page(self) -> None:
        """A curated selection is always page 1."""
        state = FilterState(page=3, explicit_product_ids=("p1", "p2"))
        assert state.page == 1
        assert state.has_explicit_selection

    def test_empty_explicit_ids_become_none(self) -> None:
        """An empty selection means no selection."""
        state = FilterState(page=3, explicit_product_ids=(" ", ""))
        assert state.explicit_product_ids is None
        assert state.page == 3

    def test_state_is_frozen(self) -> None:
        """FilterState cannot be mutated."""
        state = FilterState()
        with pytest.raises(AttributeError):
            state.page = 2  # type: ignore[misc]


class TestFilterStateQueries:
    """Tests for FilterState predicates."""

    def test_page_is_not_a_filter(self) -> None:
        """Page number alone does not count as an active filter."""
        assert not FilterState(page=4).has_active_filters()

    @pytest.mark.parametrize(
        "changes",
        [
            {"sort_by": "name"},
            {"sort_order": "asc"},
            {"category_ids": ("c1",)},
            {"brand_ids": ("b1",)},
            {"sizes": ("S",)},
            {"colors": ("Red",)},
            {"price_range": PriceRange(min_price=10, max_price=20)},
            {"explicit_product_ids": ("p1",)},
        ],
    )
    def test_any_field_activates(self, changes) -> None:
        """Each filter field makes the state active."""
        state = FilterState(**changes)
        assert state.has_active_filters()
        assert not state.is_random_eligible()

    def test_default_first_page_is_random_eligible(self) -> None:
        """Only the unfiltered first page is random eligible."""
        assert FilterState().is_random_eligible()
        assert not FilterState(page=2).is_random_eligible()


class TestFilterStateDerivations:
    """Tests for with_changes, normalized and is_equivalent."""

    def test_with_changes_returns_new_state(self) -> None:
        """with_changes leaves the original untouched."""
        state = FilterState(category_ids=("c1",))
        changed = state.with_changes(page=2)
        assert changed.page == 2
        assert changed.category_ids == ("c1",)
        assert state.page == 1

    def test_with_changes_unknown_field_raises(self) -> None:
        """Unknown field names are rejected."""
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterState().with_changes(colour=("Red",))
        assert exc_info.value.details["field"] == "colour"

    def test_normalized_clamps_price(self) -> None:
        """A partially overlapping range is clamped."""
        state = FilterState(price_range=PriceRange(min_price=500, max_price=1500))
        assert state.normalized(BOUNDS).price_range == PriceRange(min_price=500, max_price=1000)

    def test_normalized_drops_collapsed_price(self) -> None:
        """A range outside the bounds resets to the full range."""
        state = FilterState(price_range=PriceRange(min_price=2000, max_price=3000))
        assert state.normalized(BOUNDS).price_range is None

    def test_normalized_drops_full_range(self) -> None:
        """A range spanning the bounds is the same as no range."""
        state = FilterState(price_range=PriceRange(min_price=0, max_price=1000))
        assert state.normalized(BOUNDS).price_range is None

    def test_normalized_without_bounds_is_identity(self) -> None:
        """Without bounds nothing is clamped."""
        state = FilterState(price_range=PriceRange(min_price=500, max_price=1500))
        assert state.normalized(None) is state

    def test_equivalent_ignores_facet_order(self) -> None:
        """Facets compare as sets."""
        left = FilterState(category_ids=("c1", "c2"), sizes=("S", "M"))
        right = FilterState(category_ids=("c2", "c1"), sizes=("M", "S"))
        assert left.is_equivalent(right)

    def test_equivalent_after_normalization(self) -> None:
        """A full-range price is equivalent to no price."""
        left = FilterState(price_range=PriceRange(min_price=0, max_price=1000))
        assert left.is_equivalent(FilterState(), BOUNDS)
        assert not left.is_equivalent(FilterState())

    def test_not_equivalent_on_page(self) -> None:
        """Different pages are different views."""
        assert not FilterState(page=2).is_equivalent(FilterState())
