"""Tests for the filter editor."""

from unittest.mock import MagicMock

import pytest

from storefront.application.filter_editor import FilterEditor
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


@pytest.fixture
def commit() -> MagicMock:
    """Commit callback."""
    return MagicMock()


@pytest.fixture
def editor(commit) -> FilterEditor:
    """Create an editor on the default state."""
    return FilterEditor(FilterState(), BOUNDS, commit=commit)


class TestDraft:
    """Tests for local edits."""

    def test_edits_do_not_commit(self, editor, commit) -> None:
        """Edits only change the draft."""
        editor.toggle_category("c1")
        editor.toggle_size("M")

        assert editor.draft.category_ids == ("c1",)
        assert editor.draft.sizes == (Size.M,)
        assert editor.is_dirty
        commit.assert_not_called()

    def test_toggle_removes(self, editor) -> None:
        """Toggling twice removes the value."""
        editor.toggle_color(Color.RED)
        editor.toggle_color(Color.BLUE)
        editor.toggle_color("Red")

        assert editor.draft.colors == (Color.BLUE,)

    def test_toggle_brand(self, editor) -> None:
        """Brands toggle like categories."""
        editor.toggle_brand("b1")
        assert editor.draft.brand_ids == ("b1",)

    def test_toggle_invalid_size(self, editor) -> None:
        """Unknown sizes are rejected."""
        with pytest.raises(InvalidFilterError):
            editor.toggle_size("XXS")

    def test_set_sort(self, editor) -> None:
        """Sort can be set and cleared."""
        editor.set_sort("price", "desc")
        assert editor.draft.sort_by is SortField.PRICE
        assert editor.draft.sort_order is SortOrder.DESC

        editor.set_sort(None)
        assert editor.draft.sort_by is None
        assert editor.draft.sort_order is None

    def test_edit_resets_page_and_selection(self, commit) -> None:
        """Editing leaves pagination and any curated selection."""
        editor = FilterEditor(FilterState(page=4), BOUNDS, commit=commit)
        editor.toggle_category("c1")
        assert editor.draft.page == 1

        editor = FilterEditor(FilterState(explicit_product_ids=("p1",)), BOUNDS)
        editor.toggle_category("c1")
        assert editor.draft.explicit_product_ids is None


class TestPriceEdits:
    """Tests for price controls."""

    def test_draft_price_defaults_to_bounds(self, editor) -> None:
        """Without a range the controls span the bounds."""
        assert editor.price == PriceRange(min_price=0, max_price=1000)

    def test_raising_min_raises_max(self, editor) -> None:
        """Min above max drags max along."""
        editor.set_max_price(300)
        editor.set_min_price(500)
        assert editor.draft.price_range == PriceRange(min_price=500, max_price=500)

    def test_lowering_max_lowers_min(self, editor) -> None:
        """Max below min drags min along."""
        editor.set_min_price(400)
        editor.set_max_price(200)
        assert editor.draft.price_range == PriceRange(min_price=200, max_price=200)

    def test_values_clamped_to_bounds(self, editor) -> None:
        """Prices outside the bounds are clamped."""
        editor.set_min_price(-50)
        editor.set_max_price(5000)
        assert editor.draft.price_range == PriceRange(min_price=0, max_price=1000)

    def test_slider_range(self, editor) -> None:
        """Both bounds can be set at once, in any order."""
        editor.set_price_range(800, 100)
        assert editor.draft.price_range == PriceRange(min_price=100, max_price=800)


class TestCommit:
    """Tests for apply and reset."""

    def test_apply_commits_draft(self, editor, commit) -> None:
        """Apply hands the draft to the commit callback."""
        editor.toggle_category("c1")
        editor.set_min_price(100)

        committed = editor.apply()

        assert committed.category_ids == ("c1",)
        assert committed.price_range == PriceRange(min_price=100, max_price=1000)
        commit.assert_called_once_with(committed)
        assert not editor.is_dirty

    def test_apply_full_range_as_absent(self, editor, commit) -> None:
        """A full-bounds price is committed as no price."""
        editor.set_price_range(0, 1000)

        committed = editor.apply()

        assert committed.price_range is None
        assert not committed.has_active_filters()

    def test_reset_clears_and_commits(self, commit) -> None:
        """Reset commits the default state immediately."""
        upstream = FilterState(
            page=3,
            category_ids=("c1",),
            price_range=PriceRange(min_price=10, max_price=20),
        )
        editor = FilterEditor(upstream, BOUNDS, commit=commit)

        committed = editor.reset()

        assert committed == FilterState()
        assert editor.draft == FilterState()
        commit.assert_called_once_with(FilterState())


class TestSync:
    """Tests for reseeding from upstream."""

    def test_same_upstream_keeps_draft(self, editor) -> None:
        """Re-syncing the same upstream keeps local edits."""
        editor.toggle_category("c1")

        assert not editor.sync(FilterState())
        assert editor.draft.category_ids == ("c1",)

    def test_external_change_reseeds(self, editor) -> None:
        """A new upstream (e.g. back navigation) replaces the draft."""
        editor.toggle_category("c1")

        assert editor.sync(FilterState(sizes=("L",)))
        assert editor.draft == FilterState(sizes=("L",))
        assert not editor.is_dirty

    def test_sync_updates_bounds(self, editor) -> None:
        """New bounds apply to later edits and clamp the reseeded draft."""
        upstream = FilterState(price_range=PriceRange(min_price=100, max_price=900))
        editor.sync(upstream, PriceBounds(min_price=0, max_price=500))

        assert editor.draft.price_range == PriceRange(min_price=100, max_price=500)
        editor.set_max_price(800)
        assert editor.draft.price_range == PriceRange(min_price=100, max_price=500)
