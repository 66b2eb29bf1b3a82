"""
Custom Exceptions and Exception Handlers
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from datetime import datetime, timezone
import uuid

from .logging_framework import LogCategory, get_logger

logger = get_logger("core.exceptions")


class PoetryConsoleError(Exception):
    """Base error for the analytics engine and its store adapters"""


class StoreReadError(PoetryConsoleError):
    """A collection could not be read from the document store"""

    def __init__(self, collection: str, error: str = None):
        self.collection = collection
        self.error = error
        message = f"Failed to read collection '{collection}'"
        if error:
            message = f"{message}: {error}"
        super().__init__(message)


class APIException(Exception):
    """Base API Exception"""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class PoemNotFoundException(APIException):
    def __init__(self, slug: str):
        super().__init__(
            code="POEM_NOT_FOUND",
            message="Poem not found.",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"slug": slug}
        )


class UnknownSeriesException(APIException):
    def __init__(self, entity: str, granularity: str):
        super().__init__(
            code="UNKNOWN_SERIES",
            message=f"No series '{granularity}' for '{entity}'.",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"entity": entity, "granularity": granularity}
        )


class ServiceUnavailableException(APIException):
    def __init__(self, service_name: str, error: str = None):
        super().__init__(
            code=f"SERVICE_{service_name.upper()}_UNAVAILABLE",
            message=f"{service_name} service is unavailable.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"service": service_name, "error": error}
        )


def _meta(request: Request = None) -> dict:
    request_id = getattr(request.state, "request_id", None) if request is not None else None
    return {
        "request_id": request_id or f"req_{uuid.uuid4().hex[:12]}",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle custom API exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details
            },
            "meta": _meta(request)
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"]
        })

    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed.",
                "details": {"errors": errors}
            },
            "meta": _meta(request)
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        category=LogCategory.ERROR,
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An internal server error occurred.",
                "details": None
            },
            "meta": _meta(request)
        }
    )
