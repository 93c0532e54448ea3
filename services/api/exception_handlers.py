"""FastAPI exception handlers for custom exceptions."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import ErrorKind, PhotoStoreError
from services.api.schemas import ErrorResponse

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.MISSING_PARAMETER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BACKEND_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.CONFIGURATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Message shown for a backend failure, keyed by the HTTP method that hit it
FAILURE_MESSAGES: dict[str, str] = {
    "POST": "Failed to upload file",
    "GET": "Failed to retrieve file",
    "PUT": "Failed to update file",
    "DELETE": "Failed to delete file",
}


def _error_body(code: int, message: str, error: str | None = None) -> dict:
    return ErrorResponse(code=code, message=message, error=error).model_dump(exclude_none=True)


async def photo_store_exception_handler(request: Request, exc: PhotoStoreError) -> JSONResponse:
    """Render a classified error as ``{code, message, error}``."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        message = FAILURE_MESSAGES.get(request.method, "Storage backend failure")
        body = _error_body(status_code, message, exc.message)
        logger.error(
            "{method} {path} failed: {type} - {message}",
            method=request.method,
            path=request.url.path,
            type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
        )
    else:
        body = _error_body(status_code, exc.message)
        logger.warning(
            "{method} {path} -> {status}: {message}",
            method=request.method,
            path=request.url.path,
            status=status_code,
            message=exc.message,
        )

    return JSONResponse(status_code=status_code, content=body)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(
        "Unhandled exception on {method} {path}",
        method=request.method,
        path=request.url.path,
    )
    message = FAILURE_MESSAGES.get(request.method, "Internal server error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, message, str(exc)),
    )
