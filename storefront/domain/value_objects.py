"""Value Objects for the domain layer.

Closed enumerations used by the catalog facets and the immutable
price types shared by the codec, the query builder and the editor.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Self

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import InvalidPriceRangeError


# ============================================================================
# Facet Enumerations
# ============================================================================


class Size(str, Enum):
    """Garment sizes offered by the catalog."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "2XL"
    XXXL = "3XL"
    XXXXL = "4XL"
    XXXXXL = "5XL"

    @classmethod
    def parse(cls, raw: str) -> Self | None:
        """Resolve a size from its value or member name, case-insensitively.

        Args:
            raw: Size token, e.g. "m", "2XL" or "XXL".

        Returns:
            Matching Size or None when the token is unknown.
        """
        token = raw.strip().upper()
        for member in cls:
            if token in (member.value, member.name):
                return member
        return None


class Color(str, Enum):
    """Named colors offered by the catalog."""

    RED = "Red"
    BLUE = "Blue"
    GREEN = "Green"
    BLACK = "Black"
    WHITE = "White"
    YELLOW = "Yellow"
    ORANGE = "Orange"
    PURPLE = "Purple"
    GREY = "Grey"
    BROWN = "Brown"
    PINK = "Pink"
    NAVY = "Navy"
    BEIGE = "Beige"
    MAROON = "Maroon"
    TEAL = "Teal"
    OLIVE = "Olive"
    LAVENDER = "Lavender"
    CORAL = "Coral"
    TURQUOISE = "Turquoise"
    INDIGO = "Indigo"
    GOLD = "Gold"
    SILVER = "Silver"
    KHAKI = "Khaki"
    MINT = "Mint"
    CHARCOAL = "Charcoal"
    MUSTARD = "Mustard"

    @classmethod
    def parse(cls, raw: str) -> Self | None:
        """Resolve a color from its name, case-insensitively.

        Args:
            raw: Color token, e.g. "navy" or "Navy".

        Returns:
            Matching Color or None when the token is unknown.
        """
        token = raw.strip().lower()
        for member in cls:
            if token == member.value.lower():
                return member
        return None


class SortField(str, Enum):
    """Fields the catalog can be sorted by."""

    NAME = "name"
    PRICE = "price"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


# ============================================================================
# Price Value Objects
# ============================================================================


def _check_finite(value: float, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field} must be a finite number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        finite = False
    if not finite:
        raise ValueError(f"{field} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class PriceBounds(ValueObject):
    """Lowest and highest price observed across the catalog.

    Reported by the backend with every listing response and used to
    render the price controls and to clamp requested ranges.

    Attributes:
        min_price: Cheapest product price.
        max_price: Most expensive product price.
    """

    min_price: float
    max_price: float

    def __post_init__(self) -> None:
        """Validate bounds."""
        _check_finite(self.min_price, "min_price")
        _check_finite(self.max_price, "max_price")
        if self.min_price > self.max_price:
            raise InvalidPriceRangeError(self.min_price, self.max_price)

    def clamp_value(self, value: float) -> float:
        """Clamp a single price into the bounds."""
        return min(max(value, self.min_price), self.max_price)

    def as_range(self) -> "PriceRange":
        """Get the full range spanned by these bounds.

        Returns:
            PriceRange covering the bounds exactly.
        """
        return PriceRange(min_price=self.min_price, max_price=self.max_price)


@dataclass(frozen=True)
class PriceRange(ValueObject):
    """Requested price window.

    Attributes:
        min_price: Inclusive lower bound.
        max_price: Inclusive upper bound.
    """

    min_price: float
    max_price: float

    def __post_init__(self) -> None:
        """Validate range constraints."""
        _check_finite(self.min_price, "min_price")
        _check_finite(self.max_price, "max_price")
        if self.min_price > self.max_price:
            raise InvalidPriceRangeError(self.min_price, self.max_price)

    def clamp(self, bounds: PriceBounds) -> Self | None:
        """Clamp the range into the observed bounds.

        Args:
            bounds: Catalog price bounds.

        Returns:
            Clamped range, or None when clamping collapses it (min > max).
        """
        low = max(self.min_price, bounds.min_price)
        high = min(self.max_price, bounds.max_price)
        if low > high:
            return None
        return type(self)(min_price=low, max_price=high)

    def covers(self, bounds: PriceBounds) -> bool:
        """Check whether the range spans the full bounds.

        Args:
            bounds: Catalog price bounds.

        Returns:
            True if the range does not constrain anything within the bounds.
        """
        return self.min_price <= bounds.min_price and self.max_price >= bounds.max_price


# Used until the catalog reports its own bounds
DEFAULT_PRICE_BOUNDS = PriceBounds(min_price=0, max_price=5000)
