"""Application layer module.

Contains the query builder, the fetch orchestrator, the filter editor
and the page-level shop controller that wires them to the URL.
"""

from storefront.application.fetch_orchestrator import (
    CatalogView,
    FetchOrchestrator,
    GenerationJoin,
    JoinResult,
)
from storefront.application.filter_editor import FilterEditor
from storefront.application.query_builder import CatalogQuery, QueryBuilder, QueryPlan
from storefront.application.shop_controller import ShopController

__all__ = [
    "CatalogQuery",
    "CatalogView",
    "FetchOrchestrator",
    "FilterEditor",
    "GenerationJoin",
    "JoinResult",
    "QueryBuilder",
    "QueryPlan",
    "ShopController",
]
