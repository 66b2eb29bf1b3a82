"""
Logging Middleware for FastAPI
Request/Response logging
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging_framework import LogCategory, get_logger


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request/response logging.

    Assigns every request an id (taken from X-Request-ID when the client
    sends one) and echoes it back with the processing time.
    """

    # Paths to skip logging
    SKIP_PATHS = {
        "/health",
        "/api/v1/health",
        "/favicon.ico",
        "/docs",
        "/redoc",
        "/openapi.json"
    }

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self._logger = get_logger("http")

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID", new_request_id())
        request.state.request_id = request_id

        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        self._logger.debug(
            f"→ {request.method} {request.url.path}",
            category=LogCategory.REQUEST,
            extra_data={"query_params": dict(request.query_params)}
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._logger.error(
                f"Request failed: {request.method} {request.url.path}",
                category=LogCategory.REQUEST,
                extra_data={"duration_ms": int(duration_ms), "error": str(e)},
                exc_info=True
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = str(int(duration_ms))

        self._logger.log_request(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=duration_ms
        )
        return response


def setup_logging_middleware(app):
    """Configure logging middleware for the application."""
    app.add_middleware(LoggingMiddleware)
