"""Catalog API client.

Thin HTTP client for the remote catalog: product listings, categories
and brands. Responses are normalized into domain read models; every
failure (transport, non-2xx status, malformed body) is raised as a
CatalogRequestError carrying a message fit to show the shopper.
"""

from typing import Any, Mapping

import httpx
import structlog

from storefront.domain.catalog import Brand, CatalogPage, Category, Pagination, Product
from storefront.domain.exceptions import DomainError
from storefront.domain.value_objects import PriceBounds

logger = structlog.get_logger()

PRODUCTS_PATH = "/api/products"
CATEGORIES_PATH = "/api/categories"
BRANDS_PATH = "/api/brands"


class CatalogRequestError(Exception):
    """Error from a catalog API call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# ============================================================================
# Error Messages
# ============================================================================


def _status_hint(status_code: int) -> str:
    if status_code == 400:
        return "Please check the submitted data."
    if status_code == 401:
        return "Authentication required. Please log in."
    if status_code == 403:
        return "You do not have permission to perform this action."
    if status_code >= 500:
        return "The server encountered an error. Please try again later."
    return "Please try again."


def describe_error(
    path: str,
    status_code: int,
    reason: str | None,
    body: Any,
) -> str:
    """Build a human-readable message for a failed catalog response.

    The backend's own ``message`` (or ``error``) wins unless it is just
    a status code. Validation ``errors`` are appended as
    ``field: message`` pairs. Without either, the message falls back to
    the status code with a hint.

    Args:
        path: Request path.
        status_code: HTTP status code.
        reason: HTTP reason phrase, if any.
        body: Decoded JSON body, or None.

    Returns:
        Message suitable for display.
    """
    api_message: str | None = None
    validation: str | None = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                api_message = value.strip()
                break

        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            parts = []
            for err in errors:
                if not isinstance(err, dict):
                    continue
                text = err.get("message")
                if not isinstance(text, str):
                    text = "Invalid error structure"
                parts.append(f"{err['field']}: {text}" if err.get("field") else text)
            validation = "; ".join(parts) or None

    if api_message and not (len(api_message) == 3 and api_message.isdigit()):
        if validation:
            return f"{api_message}. Details: {validation}"
        return api_message
    if validation:
        return f"Invalid input. Details: {validation}"

    message = f"Request to {path} failed with status {status_code}"
    if reason:
        message += f": {reason}"
    return f"{message}. {_status_hint(status_code)}"


# ============================================================================
# Response Parsing
# ============================================================================


def _as_tuple(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    result = []
    for value in values:
        if isinstance(value, str):
            result.append(value)
        elif isinstance(value, dict) and isinstance(value.get("name"), str):
            result.append(value["name"])
        elif isinstance(value, dict) and isinstance(value.get("url"), str):
            result.append(value["url"])
    return tuple(result)


def parse_product(data: dict[str, Any]) -> Product:
    """Create a Product from a catalog API item.

    Args:
        data: Raw product item.

    Returns:
        Product instance.
    """
    stock = data.get("stock")
    in_stock = data.get("inStock")
    if in_stock is None:
        in_stock = stock is None or stock > 0

    images = _as_tuple(data.get("images")) or _as_tuple(data.get("media"))
    if not images and isinstance(data.get("imageUrl"), str):
        images = (data["imageUrl"],)

    return Product(
        id=str(data.get("id") or data["_id"]),
        name=data["name"],
        price=float(data["price"]),
        category_id=data.get("categoryId"),
        brand_id=data.get("brandId"),
        in_stock=bool(in_stock),
        compare_at_price=data.get("compareAtPrice"),
        available_sizes=_as_tuple(data.get("availableSizes")),
        colors=_as_tuple(data.get("colors")),
        images=images,
        slug=data.get("slug"),
    )


def parse_pagination(data: dict[str, Any]) -> Pagination:
    """Create a Pagination from a catalog pagination descriptor.

    Args:
        data: Raw descriptor with total, page, limit, totalPages,
            hasNextPage and hasPrevPage.

    Returns:
        Pagination instance.
    """
    return Pagination(
        total=int(data["total"]),
        page=int(data["page"]),
        limit=int(data["limit"]),
        total_pages=int(data["totalPages"]),
        has_next_page=bool(data["hasNextPage"]),
        has_prev_page=bool(data["hasPrevPage"]),
    )


def parse_price_bounds(filters: Any) -> PriceBounds | None:
    """Extract the available price bounds from a ``filters`` block.

    Args:
        filters: Raw ``filters`` object, e.g. ``{"available": {"minPrice": 0, "maxPrice": 900}}``.

    Returns:
        PriceBounds, or None when absent or inconsistent.
    """
    if not isinstance(filters, dict):
        return None
    available = filters.get("available")
    if not isinstance(available, dict):
        return None
    low = available.get("minPrice")
    high = available.get("maxPrice")
    if low is None or high is None:
        return None
    try:
        return PriceBounds(min_price=low, max_price=high)
    except (DomainError, ValueError):
        logger.warning("Ignoring invalid price bounds", min_price=low, max_price=high)
        return None


def parse_catalog_page(payload: Any, selection: bool = False) -> CatalogPage:
    """Normalize a product listing response.

    Accepts the flat shape ``{items, pagination, filters}`` and the
    envelope shape ``{type, message, data: {products | items}, meta}``.
    Selection responses carry no pagination; one page holding every
    item is synthesized for them.

    Args:
        payload: Decoded JSON body.
        selection: True when the request asked for explicit product ids.

    Returns:
        CatalogPage for the response.

    Raises:
        CatalogRequestError: If the body does not match either shape.
    """
    if not isinstance(payload, dict):
        raise CatalogRequestError("Malformed catalog response: expected a JSON object")

    if payload.get("type") == "ERROR":
        raise CatalogRequestError(payload.get("message") or "Catalog request failed")

    data = payload.get("data")
    if isinstance(data, dict):
        raw_items = data.get("products", data.get("items"))
        meta = payload.get("meta") if isinstance(payload.get("meta"), dict) else {}
        raw_pagination = meta if "total" in meta else None
        filters = meta.get("filters")
        selection = selection or "requestedIds" in data
    else:
        raw_items = payload.get("items")
        raw_pagination = payload.get("pagination")
        filters = payload.get("filters")

    if not isinstance(raw_items, list):
        raise CatalogRequestError("Malformed catalog response: missing product list")

    try:
        items = tuple(parse_product(item) for item in raw_items)
        if raw_pagination:
            pagination = parse_pagination(raw_pagination)
        elif selection:
            pagination = Pagination.single_page(len(items))
        else:
            raise CatalogRequestError("Malformed catalog response: missing pagination")
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogRequestError(f"Malformed catalog response: {e!r}") from e

    return CatalogPage(
        items=items,
        pagination=pagination,
        price_bounds=parse_price_bounds(filters),
        is_selection=selection,
    )


def _parse_listing(payload: Any, key: str) -> list[dict[str, Any]]:
    """Unwrap a flat array or a ``{data: {<key>: [...]}}`` envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if payload.get("type") == "ERROR":
            raise CatalogRequestError(payload.get("message") or f"Failed to fetch {key}")
        data = payload.get("data")
        if isinstance(data, dict) and isinstance(data.get(key), list):
            return data[key]
        if isinstance(data, list):
            return data
    raise CatalogRequestError(f"Invalid {key} response")


# ============================================================================
# Client
# ============================================================================


class CatalogClient:
    """HTTP client for the catalog API.

    Provides methods for the listing, category and brand endpoints.
    One instance is shared by every fetch generation; it holds no
    per-query state.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        request_id: str | None = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Catalog API base URL.
            timeout: Request timeout in seconds.
            request_id: Optional request ID for correlation.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.request_id = request_id
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.request_id:
                headers["X-Request-ID"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Make a GET request and decode the JSON body.

        Args:
            path: API endpoint path.
            params: Query parameters; None values are dropped.

        Returns:
            Decoded JSON body.

        Raises:
            CatalogRequestError: On transport error, error status or invalid JSON.
        """
        client = await self._get_client()

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("Making catalog request", path=path, params=params)

        try:
            response = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            logger.error("Catalog request timeout", path=path, error=str(e))
            raise CatalogRequestError(
                f"Request to {path} timed out. Please try again.",
                status_code=504,
            ) from e
        except httpx.RequestError as e:
            logger.error("Catalog request failed", path=path, error=str(e))
            raise CatalogRequestError(
                f"Could not reach the catalog service at {self.base_url}. "
                f"Check that it is running and reachable. Original error: {e}",
            ) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = describe_error(path, response.status_code, response.reason_phrase, body)
            logger.warning(
                "Catalog request rejected",
                path=path,
                status_code=response.status_code,
                message=message,
            )
            raise CatalogRequestError(
                message,
                status_code=response.status_code,
                details=body if isinstance(body, dict) else None,
            )

        if response.status_code == 204:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise CatalogRequestError(
                f"Malformed response from {path}: body is not valid JSON",
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def list_products(
        self,
        params: Mapping[str, Any],
        selection: bool = False,
    ) -> CatalogPage:
        """List products matching backend query parameters.

        Args:
            params: Backend listing parameters (see QueryBuilder).
            selection: True when the parameters ask for explicit product ids.

        Returns:
            CatalogPage for the response.

        Raises:
            CatalogRequestError: On API error or malformed response.
        """
        payload = await self._get(PRODUCTS_PATH, params)
        return parse_catalog_page(payload, selection=selection)

    async def list_categories(self) -> list[Category]:
        """List all catalog categories.

        Returns:
            Categories in backend order.

        Raises:
            CatalogRequestError: On API error or malformed response.
        """
        payload = await self._get(CATEGORIES_PATH)
        try:
            return [
                Category(
                    id=str(item.get("id") or item["_id"]),
                    name=item["name"],
                    description=item.get("description"),
                    parent_id=item.get("parentId"),
                )
                for item in _parse_listing(payload, "categories")
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise CatalogRequestError(f"Invalid categories response: {e!r}") from e

    async def list_brands(self, search_term: str | None = None) -> list[Brand]:
        """List catalog brands.

        Args:
            search_term: Optional name filter.

        Returns:
            Brands in backend order.

        Raises:
            CatalogRequestError: On API error or malformed response.
        """
        payload = await self._get(BRANDS_PATH, {"searchTerm": search_term})
        try:
            return [
                Brand(id=str(item.get("id") or item["_id"]), name=item["name"])
                for item in _parse_listing(payload, "brands")
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise CatalogRequestError(f"Invalid brands response: {e!r}") from e
