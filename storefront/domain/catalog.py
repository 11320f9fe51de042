"""Catalog read models.

Products, facets and the paginated result of one catalog query.
A CatalogPage is replaced wholesale on every query, never mutated.
"""

from dataclasses import dataclass, field

from storefront.domain.value_objects import DEFAULT_PRICE_BOUNDS, Color, PriceBounds, Size


@dataclass(frozen=True)
class Category:
    """Catalog category used to populate the category facet."""

    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None


@dataclass(frozen=True)
class Brand:
    """Catalog brand used to populate the brand facet."""

    id: str
    name: str


@dataclass(frozen=True)
class Product:
    """Product summary shown in a listing.

    Attributes:
        id: Product identifier.
        name: Display name.
        price: Selling price.
        category_id: Owning category.
        brand_id: Owning brand, if any.
        in_stock: Whether the product can be ordered.
        compare_at_price: Price before discount, if any.
        available_sizes: Size labels the product is offered in.
        colors: Color names the product is offered in.
        images: Image URLs as reported by the backend.
        slug: URL slug, if any.
    """

    id: str
    name: str
    price: float
    category_id: str | None = None
    brand_id: str | None = None
    in_stock: bool = True
    compare_at_price: float | None = None
    available_sizes: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    images: tuple[str, ...] = ()
    slug: str | None = None


@dataclass(frozen=True)
class Pagination:
    """Pagination descriptor reported by the catalog.

    Attributes:
        total: Total matching products.
        page: Current page (1-based).
        limit: Page size.
        total_pages: Number of pages.
        has_next_page: Whether a following page exists.
        has_prev_page: Whether a preceding page exists.
    """

    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def single_page(cls, count: int) -> "Pagination":
        """Describe a result that fits on one page.

        Args:
            count: Number of items in the result.

        Returns:
            Pagination with one page holding every item.
        """
        return cls(
            total=count,
            page=1,
            limit=count,
            total_pages=1,
            has_next_page=False,
            has_prev_page=False,
        )

    @property
    def first_index(self) -> int:
        """1-based index of the first item on this page."""
        return (self.page - 1) * self.limit + 1

    @property
    def last_index(self) -> int:
        """1-based index of the last item on this page."""
        return min(self.page * self.limit, self.total)

    def page_window(self) -> list[int | None]:
        """Page links to render, with None marking an ellipsis.

        Every page is listed when there are at most five. Otherwise the
        first and last pages and the neighbours of the current page are
        listed, with an ellipsis two pages away from the current one.

        Returns:
            Page numbers and ellipsis markers in display order.
        """
        window: list[int | None] = []
        for number in range(1, self.total_pages + 1):
            if (
                self.total_pages <= 5
                or number in (1, self.total_pages)
                or self.page - 1 <= number <= self.page + 1
            ):
                window.append(number)
            elif number in (self.page - 2, self.page + 2):
                window.append(None)
        return window


@dataclass(frozen=True)
class CatalogPage:
    """Result of one catalog query generation.

    Attributes:
        items: Products to display, in backend order.
        pagination: Pagination descriptor for the query.
        price_bounds: Price bounds observed for the query, if reported.
        is_selection: True when the query served an explicit product selection.
    """

    items: tuple[Product, ...]
    pagination: Pagination
    price_bounds: PriceBounds | None = None
    is_selection: bool = False

    @property
    def is_empty(self) -> bool:
        """Check if the query matched nothing."""
        return len(self.items) == 0

    @property
    def show_pagination(self) -> bool:
        """Check if pagination controls should be rendered."""
        return not self.is_selection and self.pagination.total_pages > 1

    def summary(self) -> str:
        """Result-count label shown above the listing.

        Returns:
            Human-readable count of the results.
        """
        if self.is_selection:
            return f"{len(self.items)} selected products"
        if self.pagination.total == 0:
            return "0 products found"
        return (
            f"Showing {self.pagination.first_index}-{self.pagination.last_index} "
            f"of {self.pagination.total} products"
        )


@dataclass(frozen=True)
class AvailableFilters:
    """Facet values offered by the filter controls.

    Categories and brands are fetched once per page load; price bounds
    follow the latest catalog response.
    """

    categories: tuple[Category, ...] = ()
    brands: tuple[Brand, ...] = ()
    sizes: tuple[Size, ...] = field(default_factory=lambda: tuple(Size))
    colors: tuple[Color, ...] = field(default_factory=lambda: tuple(Color))
    price_bounds: PriceBounds = DEFAULT_PRICE_BOUNDS

    def category_name(self, category_id: str) -> str | None:
        """Look up a category name by id."""
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return None
