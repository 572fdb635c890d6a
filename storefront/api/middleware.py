"""API middleware.

Provides:
- Request ID correlation
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.errors import (
    CategoryNotFoundError,
    InvalidNavigationActionError,
    MalformedProviderResponse,
    StorefrontError,
)

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Error Handling
# ============================================================================


_STATUS_BY_ERROR: list[tuple[type[StorefrontError], int, str]] = [
    (CategoryNotFoundError, status.HTTP_404_NOT_FOUND, "CATEGORY_NOT_FOUND"),
    (InvalidNavigationActionError, status.HTTP_409_CONFLICT, "INVALID_NAVIGATION_ACTION"),
    (MalformedProviderResponse, status.HTTP_502_BAD_GATEWAY, "MALFORMED_PROVIDER_RESPONSE"),
]


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: dict | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or {},
            "request_id": request_id,
        },
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Map storefront errors to HTTP responses."""
    request_id = getattr(request.state, "request_id", None)
    for error_type, status_code, error_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            logger.warning(
                "Request rejected",
                error_code=error_code,
                error=exc.message,
            )
            return error_response(status_code, error_code, exc.message, exc.details, request_id)

    logger.error("Unmapped storefront error", error=exc.message)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "STOREFRONT_ERROR",
        exc.message,
        exc.details,
        request_id,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches unhandled exceptions and returns standardized error responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Handle errors uniformly.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or error response.
        """
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
                request_id=getattr(request.state, "request_id", None),
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure middleware and exception handlers for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(StorefrontError, storefront_error_handler)

    # Error handling (wraps route handlers)
    app.add_middleware(ErrorHandlerMiddleware)

    # Request ID correlation (outermost)
    app.add_middleware(RequestIdMiddleware)
