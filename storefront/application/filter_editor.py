"""Filter editor - uncommitted draft of the shopper's filters.

The editor keeps its own copy of the FilterState while the shopper
adjusts controls. Nothing reaches the URL until ``apply`` (or ``reset``)
commits the draft. The draft is reseeded from upstream only when the
upstream state changes from outside, e.g. on back/forward navigation.
"""

from typing import Any, Callable

import structlog

from storefront.domain.filters import FilterState
from storefront.domain.value_objects import (
    DEFAULT_PRICE_BOUNDS,
    Color,
    PriceBounds,
    PriceRange,
    Size,
    SortField,
    SortOrder,
)

logger = structlog.get_logger()

CommitCallback = Callable[[FilterState], Any]


class FilterEditor:
    """Working copy of a FilterState with commit-on-apply semantics.

    Every edit returns the draft to page 1 and leaves any curated product
    selection, so the committed draft is exactly what the URL will hold.
    """

    def __init__(
        self,
        upstream: FilterState | None = None,
        bounds: PriceBounds = DEFAULT_PRICE_BOUNDS,
        commit: CommitCallback | None = None,
    ) -> None:
        """Initialize the editor.

        Args:
            upstream: URL-derived state to seed the draft from.
            bounds: Catalog price bounds for the price controls.
            commit: Called with the committed state on apply and reset.
        """
        self.bounds = bounds
        self._commit = commit
        self._upstream = upstream or FilterState()
        self._draft = self._upstream.normalized(bounds)

    @property
    def draft(self) -> FilterState:
        """Current uncommitted state."""
        return self._draft

    @property
    def is_dirty(self) -> bool:
        """Check if the draft differs from upstream."""
        return not self._draft.is_equivalent(self._upstream, self.bounds)

    @property
    def price(self) -> PriceRange:
        """Effective price window of the draft, full bounds when unset."""
        return self._draft.price_range or self.bounds.as_range()

    def sync(self, upstream: FilterState, bounds: PriceBounds | None = None) -> bool:
        """Follow the upstream state.

        The draft is reseeded only when ``upstream`` differs from the
        last upstream seen, so local edits survive re-renders.

        Args:
            upstream: URL-derived state.
            bounds: Latest catalog price bounds, if known.

        Returns:
            True if the draft was reseeded.
        """
        if bounds is not None:
            self.bounds = bounds
        if upstream == self._upstream:
            return False

        self._upstream = upstream
        self._draft = upstream.normalized(self.bounds)
        logger.debug("Filter draft reseeded from upstream")
        return True

    # =========================================================================
    # Edits
    # =========================================================================

    def _edit(self, **changes: Any) -> FilterState:
        self._draft = self._draft.with_changes(page=1, explicit_product_ids=None, **changes)
        return self._draft

    @staticmethod
    def _toggled(values: tuple[Any, ...], value: Any) -> tuple[Any, ...]:
        if value in values:
            return tuple(v for v in values if v != value)
        return values + (value,)

    def toggle_category(self, category_id: str) -> FilterState:
        """Add or remove a category."""
        return self._edit(category_ids=self._toggled(self._draft.category_ids, category_id))

    def toggle_brand(self, brand_id: str) -> FilterState:
        """Add or remove a brand."""
        return self._edit(brand_ids=self._toggled(self._draft.brand_ids, brand_id))

    def toggle_size(self, size: Size | str) -> FilterState:
        """Add or remove a size."""
        return self._edit(sizes=self._toggled(self._draft.sizes, size))

    def toggle_color(self, color: Color | str) -> FilterState:
        """Add or remove a color."""
        return self._edit(colors=self._toggled(self._draft.colors, color))

    def set_sort(
        self,
        sort_by: SortField | str | None,
        sort_order: SortOrder | str | None = None,
    ) -> FilterState:
        """Set or clear the sort.

        Args:
            sort_by: Sort field, None to clear.
            sort_order: Sort direction, None to leave it unset.

        Returns:
            Updated draft.
        """
        return self._edit(sort_by=sort_by, sort_order=sort_order)

    def set_min_price(self, value: float) -> FilterState:
        """Set the lower price bound; the upper bound follows if needed.

        Args:
            value: New lower bound, clamped into the catalog bounds.

        Returns:
            Updated draft.
        """
        low = self.bounds.clamp_value(value)
        high = max(self.price.max_price, low)
        return self._edit(price_range=PriceRange(min_price=low, max_price=high))

    def set_max_price(self, value: float) -> FilterState:
        """Set the upper price bound; the lower bound follows if needed.

        Args:
            value: New upper bound, clamped into the catalog bounds.

        Returns:
            Updated draft.
        """
        high = self.bounds.clamp_value(value)
        low = min(self.price.min_price, high)
        return self._edit(price_range=PriceRange(min_price=low, max_price=high))

    def set_price_range(self, low: float, high: float) -> FilterState:
        """Set both price bounds at once, as a range slider does."""
        low, high = sorted((self.bounds.clamp_value(low), self.bounds.clamp_value(high)))
        return self._edit(price_range=PriceRange(min_price=low, max_price=high))

    # =========================================================================
    # Commit
    # =========================================================================

    def apply(self) -> FilterState:
        """Commit the draft.

        A price range spanning the full bounds is committed as no range.

        Returns:
            Committed state.
        """
        committed = self._draft.normalized(self.bounds)
        return self._do_commit(committed)

    def reset(self) -> FilterState:
        """Clear every filter and commit immediately.

        Returns:
            Committed (default) state.
        """
        self._draft = FilterState()
        return self._do_commit(self._draft)

    def _do_commit(self, state: FilterState) -> FilterState:
        self._draft = state
        self._upstream = state
        logger.info("Filters committed", active=state.has_active_filters())
        if self._commit is not None:
            self._commit(state)
        return state
