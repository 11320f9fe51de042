"""API middleware for the storefront API.

Provides:
- Request ID correlation
- Error handling with the standard error envelope
"""

import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.domain.exceptions import DomainError
from storefront.infrastructure.catalog_client import CatalogRequestError

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    """Build a response in the standard error envelope.

    Args:
        request: Request being answered.
        status_code: HTTP status code.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Extra context, a list or a mapping.

    Returns:
        JSON error response carrying the request ID.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID for log and client correlation.

    The ID is taken from the X-Request-ID header or generated, stored on
    ``request.state``, bound into the structlog context for the duration
    of the request, and echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                query=request.url.query,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


# Exception type -> (status code, error code), first match wins
ERROR_MAPPING: list[tuple[type[Exception], int, str]] = [
    (CatalogRequestError, status.HTTP_502_BAD_GATEWAY, "CATALOG_UNAVAILABLE"),
    (DomainError, status.HTTP_400_BAD_REQUEST, "INVALID_FILTER"),
]


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping the handlers into error envelopes.

    Catalog failures become 502, domain errors 400 and anything else 500.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            for exc_type, status_code, error_code in ERROR_MAPPING:
                if isinstance(e, exc_type):
                    logger.warning(
                        "Request failed",
                        path=request.url.path,
                        error_code=error_code,
                        error=e.message,
                    )
                    return error_response(request, status_code, error_code, e.message, e.details)

            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed):
    the error handler sits inside request ID correlation so that error
    responses still carry the request ID.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
