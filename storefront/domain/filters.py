"""FilterState - canonical description of the shopper's current catalog view.

FilterState is immutable. Every edit produces a new instance, which lets
the fetch orchestrator tell one selection from the next and lets the
filter editor keep an uncommitted copy without aliasing.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Self

from storefront.domain.exceptions import InvalidFilterError
from storefront.domain.value_objects import (
    Color,
    PriceBounds,
    PriceRange,
    Size,
    SortField,
    SortOrder,
)


def _unique(values: Iterable[Any]) -> tuple[Any, ...]:
    """Drop duplicates while keeping first-seen order."""
    return tuple(dict.fromkeys(values))


def _coerce(enum_type: type, field_name: str, value: Any) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidFilterError(field_name, value, f"not a valid {enum_type.__name__}") from None


def _check_collection(field_name: str, values: Any) -> None:
    # A bare string is iterable but is never a valid collection of values
    if isinstance(values, str):
        raise InvalidFilterError(field_name, values, "expected a collection, got a string")


def _clean_ids(field_name: str, values: Iterable[str]) -> tuple[str, ...]:
    _check_collection(field_name, values)
    cleaned = []
    for value in values:
        if not isinstance(value, str):
            raise InvalidFilterError(field_name, value, "identifiers must be strings")
        value = value.strip()
        if value:
            cleaned.append(value)
    return _unique(cleaned)


@dataclass(frozen=True)
class FilterState:
    """What the shopper currently wants to see.

    Collections are duplicate-free tuples in insertion order so that the
    URL and the backend query are deterministic. An empty collection
    means "no constraint" on that facet.

    When ``explicit_product_ids`` is set the view is a curated selection:
    every other field is ignored by the query builder and pagination is
    pinned to page 1.

    Attributes:
        page: 1-based page number.
        sort_by: Sort field, None when unsorted.
        sort_order: Sort direction, None when unset.
        category_ids: Selected category identifiers.
        brand_ids: Selected brand identifiers.
        sizes: Selected sizes.
        colors: Selected colors.
        price_range: Requested price window, None for the full range.
        explicit_product_ids: Curated product selection, order preserved.
    """

    page: int = 1
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    category_ids: tuple[str, ...] = field(default_factory=tuple)
    brand_ids: tuple[str, ...] = field(default_factory=tuple)
    sizes: tuple[Size, ...] = field(default_factory=tuple)
    colors: tuple[Color, ...] = field(default_factory=tuple)
    price_range: PriceRange | None = None
    explicit_product_ids: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise InvalidFilterError("page", self.page, "page must be an integer >= 1")

        if self.sort_by is not None:
            object.__setattr__(self, "sort_by", _coerce(SortField, "sort_by", self.sort_by))
        if self.sort_order is not None:
            object.__setattr__(self, "sort_order", _coerce(SortOrder, "sort_order", self.sort_order))

        object.__setattr__(self, "category_ids", _clean_ids("category_ids", self.category_ids))
        object.__setattr__(self, "brand_ids", _clean_ids("brand_ids", self.brand_ids))
        _check_collection("sizes", self.sizes)
        _check_collection("colors", self.colors)
        object.__setattr__(self, "sizes", _unique(_coerce(Size, "sizes", s) for s in self.sizes))
        object.__setattr__(self, "colors", _unique(_coerce(Color, "colors", c) for c in self.colors))

        if self.price_range is not None and not isinstance(self.price_range, PriceRange):
            raise InvalidFilterError("price_range", self.price_range, "expected a PriceRange")

        if self.explicit_product_ids is not None:
            ids = _clean_ids("explicit_product_ids", self.explicit_product_ids)
            object.__setattr__(self, "explicit_product_ids", ids or None)
        # A curated selection is never paginated
        if self.explicit_product_ids is not None and self.page != 1:
            object.__setattr__(self, "page", 1)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def has_explicit_selection(self) -> bool:
        """Check if the view is a curated product selection."""
        return self.explicit_product_ids is not None

    def has_active_filters(self) -> bool:
        """Check if any filter, sort or explicit selection constrains the view.

        The page number is not a filter.

        Returns:
            True if anything other than the page differs from the default view.
        """
        return bool(
            self.sort_by is not None
            or self.sort_order is not None
            or self.explicit_product_ids
            or self.category_ids
            or self.brand_ids
            or self.sizes
            or self.colors
            or self.price_range is not None
        )

    def is_random_eligible(self) -> bool:
        """Check if this is the unfiltered first page.

        Returns:
            True if the random-sampling policy applies.
        """
        return self.page == 1 and not self.has_active_filters()

    # =========================================================================
    # Derivations
    # =========================================================================

    def with_changes(self, **changes: Any) -> Self:
        """Create a copy with some fields replaced.

        Args:
            **changes: Field values to replace.

        Returns:
            New FilterState.

        Raises:
            InvalidFilterError: If a field name is unknown or a value is invalid.
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            name = sorted(unknown)[0]
            raise InvalidFilterError(name, changes[name], "unknown filter field")
        return replace(self, **changes)

    def normalized(self, bounds: PriceBounds | None) -> Self:
        """Resolve the price range against the observed catalog bounds.

        A range that collapses when clamped, or that spans the full bounds,
        is dropped so that "full range" has a single representation.

        Args:
            bounds: Catalog price bounds, None when not yet known.

        Returns:
            FilterState with an effective price range.
        """
        if self.price_range is None or bounds is None:
            return self
        clamped = self.price_range.clamp(bounds)
        if clamped is None or clamped.covers(bounds):
            return replace(self, price_range=None)
        return replace(self, price_range=clamped)

    def is_equivalent(self, other: "FilterState", bounds: PriceBounds | None = None) -> bool:
        """Compare two states after price normalization.

        Facet collections compare as sets.

        Args:
            other: State to compare with.
            bounds: Catalog price bounds used for normalization.

        Returns:
            True if both states select the same view.
        """
        left = self.normalized(bounds)
        right = other.normalized(bounds)
        return (
            left.page == right.page
            and left.sort_by == right.sort_by
            and left.sort_order == right.sort_order
            and set(left.category_ids) == set(right.category_ids)
            and set(left.brand_ids) == set(right.brand_ids)
            and set(left.sizes) == set(right.sizes)
            and set(left.colors) == set(right.colors)
            and left.price_range == right.price_range
            and left.explicit_product_ids == right.explicit_product_ids
        )
