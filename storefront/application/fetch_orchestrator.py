"""Fetch orchestrator - turns filter states into visible catalog pages.

Every ``load`` starts a new generation. A generation runs the calls of
its QueryPlan concurrently and waits for all of them before anything
becomes visible. Generations are never cancelled: when an older one
finishes after a newer one has started, its result is discarded.

Only the newest generation moves the visible CatalogView:

    load(A) ──► gen 1 LOADING
    load(B) ──► gen 2 LOADING
    gen 2 done ──► SETTLED (B)
    gen 1 done ──► discarded
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Sequence

import structlog

from storefront.application.query_builder import QueryBuilder, QueryPlan
from storefront.domain.catalog import CatalogPage, Pagination, Product
from storefront.domain.filters import FilterState
from storefront.domain.state_machines import FetchStatus, validate_fetch_transition
from storefront.domain.value_objects import PriceBounds
from storefront.infrastructure.catalog_client import CatalogClient, CatalogRequestError

logger = structlog.get_logger()

GENERIC_FAILURE_MESSAGE = "Failed to load products. Please try again."

ViewListener = Callable[["CatalogView"], Any]


# ============================================================================
# Visible State
# ============================================================================


@dataclass(frozen=True)
class CatalogView:
    """What the shopper currently sees.

    Attributes:
        status: Status of the newest generation.
        generation: Newest generation number, 0 before the first load.
        state: FilterState of the newest generation.
        page: Last settled page; None before the first success and
            after a failure.
        error: User-facing message of the last failure.
    """

    status: FetchStatus = FetchStatus.IDLE
    generation: int = 0
    state: FilterState | None = None
    page: CatalogPage | None = None
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        """Check if the newest generation is in flight."""
        return self.status.is_busy()

    @property
    def items(self) -> tuple[Product, ...]:
        """Products to display."""
        return self.page.items if self.page is not None else ()

    @property
    def pagination(self) -> Pagination | None:
        """Pagination of the visible page, if any."""
        return self.page.pagination if self.page is not None else None


# ============================================================================
# Join
# ============================================================================


@dataclass(frozen=True)
class JoinResult:
    """Outcome of one generation's calls.

    Attributes:
        generation: Generation that issued the calls.
        pages: Results in plan order; empty when any call failed.
        error: First failure, if any.
    """

    generation: int
    pages: tuple[CatalogPage, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Check if every call succeeded."""
        return self.error is None


class GenerationJoin:
    """Runs the calls of one generation concurrently and waits for all of them.

    A partial success counts as a failure: the first exception (in plan
    order) is reported and every page is dropped.
    """

    async def run(
        self,
        generation: int,
        calls: Sequence[Awaitable[CatalogPage]],
    ) -> JoinResult:
        """Await all calls.

        Args:
            generation: Generation the calls belong to.
            calls: Awaitables in plan order.

        Returns:
            JoinResult tagged with the generation.
        """
        results = await asyncio.gather(*calls, return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                return JoinResult(generation=generation, error=result)
            if isinstance(result, BaseException):
                raise result

        return JoinResult(generation=generation, pages=tuple(results))


# ============================================================================
# Orchestrator
# ============================================================================


class FetchOrchestrator:
    """Owns the visible CatalogView and the generation counter."""

    def __init__(
        self,
        client: CatalogClient,
        builder: QueryBuilder | None = None,
        join: GenerationJoin | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Catalog API client.
            builder: Query builder; defaults to the configured page size.
            join: Join primitive for a generation's calls.
        """
        self.client = client
        self.builder = builder or QueryBuilder()
        self.join = join or GenerationJoin()
        self._generation = 0
        self._view = CatalogView()
        self._observed_bounds: PriceBounds | None = None
        self._listeners: list[ViewListener] = []

    @property
    def view(self) -> CatalogView:
        """Current visible state."""
        return self._view

    @property
    def generation(self) -> int:
        """Newest generation number."""
        return self._generation

    @property
    def observed_bounds(self) -> PriceBounds | None:
        """Latest price bounds reported by the catalog."""
        return self._observed_bounds

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a callback invoked with every new visible view.

        Args:
            listener: Callback receiving the CatalogView.

        Returns:
            Function removing the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, generation: int, target: FetchStatus, **changes: Any) -> None:
        validate_fetch_transition(generation, self._view.status, target)
        self._view = replace(self._view, status=target, generation=generation, **changes)
        for listener in list(self._listeners):
            listener(self._view)

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def load(self, state: FilterState) -> CatalogView:
        """Start a generation for a filter state and wait for it.

        Args:
            state: Requested view.

        Returns:
            Visible view after the generation finished. When a newer
            generation started meanwhile, the view reflects that one.
        """
        self._generation += 1
        generation = self._generation

        plan = self.builder.build(state, self._observed_bounds)
        logger.info(
            "Loading catalog",
            generation=generation,
            calls=len(plan.queries),
            selection=plan.is_selection,
        )
        self._transition(generation, FetchStatus.LOADING, state=state, error=None)

        result = await self.join.run(generation, self._calls(plan))

        if self._is_stale(generation):
            logger.info(
                "Discarding stale catalog response",
                generation=generation,
                current_generation=self._generation,
            )
            return self._view

        if not result.ok:
            self._fail(generation, result.error)
        else:
            self._settle(generation, result.pages)
        return self._view

    def _calls(self, plan: QueryPlan) -> list[Awaitable[CatalogPage]]:
        return [
            self.client.list_products(query.to_params(), selection=query.is_selection)
            for query in plan.queries
        ]

    def _settle(self, generation: int, pages: tuple[CatalogPage, ...]) -> None:
        display = pages[0]
        metadata = pages[-1]
        page = CatalogPage(
            items=display.items,
            pagination=metadata.pagination,
            price_bounds=metadata.price_bounds,
            is_selection=display.is_selection,
        )
        if page.price_bounds is not None:
            self._observed_bounds = page.price_bounds

        logger.info(
            "Catalog loaded",
            generation=generation,
            items=len(page.items),
            total=page.pagination.total,
        )
        self._transition(generation, FetchStatus.SETTLED, page=page, error=None)

    def _fail(self, generation: int, error: Exception | None) -> None:
        if isinstance(error, CatalogRequestError):
            message = error.message
            logger.warning(
                "Catalog load failed",
                generation=generation,
                status_code=error.status_code,
                error=message,
            )
        else:
            message = GENERIC_FAILURE_MESSAGE
            logger.error(
                "Catalog load failed unexpectedly",
                generation=generation,
                error=repr(error),
                exc_info=error,
            )
        self._transition(generation, FetchStatus.FAILED, page=None, error=message)
