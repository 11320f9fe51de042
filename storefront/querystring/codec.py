"""URL codec for FilterState.

``encode`` writes a FilterState as a query string and ``decode`` reads
one back. ``decode(encode(state))`` reproduces an equivalent state;
``decode`` additionally accepts the looser encodings older links use and
never raises: a field that cannot be read is left unset and a warning
is logged.

Query keys:
    page          Page number, written only when > 1
    sortBy        name | price | createdAt
    sortOrder     asc | desc
    category      Repeated once per category id
    minPrice      Lower price bound, omitted with maxPrice for the full range
    maxPrice      Upper price bound
    sizes         JSON array of sizes
    colors        JSON array of colors
    brandIds      JSON array of brand ids
    products_ids  Comma separated product ids (curated selection)
"""

import json
from typing import Any, Callable, Mapping, TypeVar

import httpx
import structlog

from storefront.domain.exceptions import DomainError
from storefront.domain.filters import FilterState
from storefront.domain.value_objects import (
    Color,
    PriceBounds,
    PriceRange,
    Size,
    SortField,
    SortOrder,
)
from storefront.querystring.parsing import (
    format_number,
    parse_list,
    parse_number,
    parse_positive_int,
)

logger = structlog.get_logger()

T = TypeVar("T")

PAGE_KEY = "page"
SORT_BY_KEY = "sortBy"
SORT_ORDER_KEY = "sortOrder"
CATEGORY_KEY = "category"
MIN_PRICE_KEY = "minPrice"
MAX_PRICE_KEY = "maxPrice"
SIZES_KEY = "sizes"
COLORS_KEY = "colors"
BRAND_IDS_KEY = "brandIds"
PRODUCT_IDS_KEY = "products_ids"

FILTER_KEYS = (
    PAGE_KEY,
    SORT_BY_KEY,
    SORT_ORDER_KEY,
    CATEGORY_KEY,
    MIN_PRICE_KEY,
    MAX_PRICE_KEY,
    SIZES_KEY,
    COLORS_KEY,
    BRAND_IDS_KEY,
    PRODUCT_IDS_KEY,
)

QueryInput = str | httpx.QueryParams | Mapping[str, Any]


class _FieldError(Exception):
    """A query parameter could not be read."""


def _json_array(values: list[str]) -> str:
    return json.dumps(values, separators=(",", ":"))


# ============================================================================
# Encode
# ============================================================================


def encode_params(
    state: FilterState,
    bounds: PriceBounds | None = None,
) -> list[tuple[str, str]]:
    """Serialize a FilterState into ordered query parameters.

    Args:
        state: State to serialize.
        bounds: Catalog price bounds; a range spanning them is omitted.

    Returns:
        List of (key, value) pairs.
    """
    params: list[tuple[str, str]] = [(CATEGORY_KEY, cid) for cid in state.category_ids]

    price = state.price_range
    if price is not None and not (bounds is not None and price.covers(bounds)):
        params.append((MIN_PRICE_KEY, format_number(price.min_price)))
        params.append((MAX_PRICE_KEY, format_number(price.max_price)))

    if state.sort_by is not None:
        params.append((SORT_BY_KEY, state.sort_by.value))
    if state.sort_order is not None:
        params.append((SORT_ORDER_KEY, state.sort_order.value))

    if state.sizes:
        params.append((SIZES_KEY, _json_array([s.value for s in state.sizes])))
    if state.colors:
        params.append((COLORS_KEY, _json_array([c.value for c in state.colors])))
    if state.brand_ids:
        params.append((BRAND_IDS_KEY, _json_array(list(state.brand_ids))))

    if state.explicit_product_ids:
        params.append((PRODUCT_IDS_KEY, ",".join(state.explicit_product_ids)))

    if state.page > 1:
        params.append((PAGE_KEY, str(state.page)))

    return params


def encode(state: FilterState, bounds: PriceBounds | None = None) -> str:
    """Serialize a FilterState into a URL query string (without "?").

    Args:
        state: State to serialize.
        bounds: Catalog price bounds; a range spanning them is omitted.

    Returns:
        Encoded query string, empty for the default view.
    """
    return str(httpx.QueryParams(encode_params(state, bounds)))


# ============================================================================
# Decode
# ============================================================================


def _as_params(query: QueryInput) -> httpx.QueryParams:
    if isinstance(query, httpx.QueryParams):
        return query
    if isinstance(query, str):
        return httpx.QueryParams(query.lstrip("?"))
    return httpx.QueryParams(query)


def _read(key: str, raw: Any, reader: Callable[[], T]) -> T | None:
    """Run a field reader, turning any failure into an unset field."""
    try:
        return reader()
    except (_FieldError, DomainError, ValueError) as e:
        logger.warning(
            "Ignoring malformed query parameter",
            key=key,
            value=raw,
            reason=str(e),
        )
        return None


def _decode_page(params: httpx.QueryParams) -> int | None:
    raw = params.get(PAGE_KEY)
    if raw is None:
        return None

    def reader() -> int:
        page = parse_positive_int(raw)
        if page is None:
            raise _FieldError("page must be an integer >= 1")
        return page

    return _read(PAGE_KEY, raw, reader)


def _decode_choice(params: httpx.QueryParams, key: str, enum_type: type[T]) -> T | None:
    raw = params.get(key)
    if raw is None or not raw.strip():
        return None

    def reader() -> T:
        try:
            return enum_type(raw.strip())  # type: ignore[call-arg]
        except ValueError:
            allowed = ", ".join(m.value for m in enum_type)  # type: ignore[attr-defined]
            raise _FieldError(f"expected one of: {allowed}") from None

    return _read(key, raw, reader)


def _decode_categories(params: httpx.QueryParams) -> tuple[str, ...]:
    return tuple(v.strip() for v in params.get_list(CATEGORY_KEY) if v.strip())


def _decode_price(
    params: httpx.QueryParams,
    bounds: PriceBounds | None,
) -> PriceRange | None:
    raw_min = params.get(MIN_PRICE_KEY)
    raw_max = params.get(MAX_PRICE_KEY)
    if raw_min is None and raw_max is None:
        return None
    raw = f"{raw_min}..{raw_max}"

    def reader() -> PriceRange:
        if raw_min is None or raw_max is None:
            raise _FieldError("minPrice and maxPrice must be given together")
        low = parse_number(raw_min)
        high = parse_number(raw_max)
        if low is None or high is None:
            raise _FieldError("prices must be finite numbers")
        return PriceRange(min_price=low, max_price=high)

    price = _read(MIN_PRICE_KEY, raw, reader)
    if price is None or bounds is None:
        return price

    clamped = price.clamp(bounds)
    if clamped is None:
        logger.debug(
            "Price range outside catalog bounds, using full range",
            min_price=price.min_price,
            max_price=price.max_price,
            bounds_min=bounds.min_price,
            bounds_max=bounds.max_price,
        )
        return None
    if clamped.covers(bounds):
        return None
    return clamped


def _decode_list(params: httpx.QueryParams, key: str) -> tuple[str, ...] | None:
    raw = params.get(key)
    if raw is None or not raw.strip():
        return None

    def reader() -> tuple[str, ...]:
        attempt = parse_list(raw)
        if not attempt.ok:
            raise _FieldError(attempt.error or "unreadable list")
        return attempt.values or ()

    return _read(key, raw, reader)


def _decode_members(
    params: httpx.QueryParams,
    key: str,
    parse_member: Callable[[str], T | None],
) -> tuple[T, ...]:
    members = []
    for token in _decode_list(params, key) or ():
        member = parse_member(token)
        if member is None:
            logger.warning("Dropping unknown filter value", key=key, value=token)
            continue
        members.append(member)
    return tuple(members)


def _decode_product_ids(params: httpx.QueryParams) -> tuple[str, ...] | None:
    raw = params.get(PRODUCT_IDS_KEY)
    if raw is None or not raw.strip():
        return None

    def reader() -> tuple[str, ...]:
        attempt = parse_list(raw)
        if not attempt.ok:
            raise _FieldError(attempt.error or "unreadable product ids")
        return attempt.values or ()

    ids = _read(PRODUCT_IDS_KEY, raw, reader)
    return ids or None


def decode(query: QueryInput, bounds: PriceBounds | None = None) -> FilterState:
    """Parse a URL query string into a FilterState.

    Never raises: any field that fails to parse is treated as absent and
    a warning is logged.

    Args:
        query: Query string (with or without "?"), QueryParams or mapping.
        bounds: Catalog price bounds to clamp the price range into.

    Returns:
        Decoded FilterState.
    """
    params = _as_params(query)

    return FilterState(
        page=_decode_page(params) or 1,
        sort_by=_decode_choice(params, SORT_BY_KEY, SortField),
        sort_order=_decode_choice(params, SORT_ORDER_KEY, SortOrder),
        category_ids=_decode_categories(params),
        brand_ids=_decode_list(params, BRAND_IDS_KEY) or (),
        sizes=_decode_members(params, SIZES_KEY, Size.parse),
        colors=_decode_members(params, COLORS_KEY, Color.parse),
        price_range=_decode_price(params, bounds),
        explicit_product_ids=_decode_product_ids(params),
    )


def strip_filter_keys(query: QueryInput) -> list[tuple[str, str]]:
    """Keep only the query parameters the codec does not own.

    Args:
        query: Current query.

    Returns:
        Unrelated (key, value) pairs, e.g. tracking parameters.
    """
    return [(k, v) for k, v in _as_params(query).multi_items() if k not in FILTER_KEYS]
