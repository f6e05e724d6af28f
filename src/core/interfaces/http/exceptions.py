"""HTTP exception handlers.

Every non-proxy error leaves the API as ``{"error": {"code", "message"}}``.
Modules shape the response through the http_status_code and error_code class
attributes of their DomainException subclasses. The proxy route never reaches
these handlers; it answers with its own envelope.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.domain.exceptions import DomainException


def error_body(code: str, message: str, details: list | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}


async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions raised by route handlers."""
    status_code = getattr(exc, "http_status_code", status.HTTP_400_BAD_REQUEST)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")
    logger.info(f"{request.method} {request.url.path} -> {error_code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=error_body(error_code, exc.message),
    )


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Query parameter validation failures (bad concurrency, unknown sort)."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("INVALID_PARAMETERS", "Invalid request parameters", details),
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "An internal error occurred"),
    )
