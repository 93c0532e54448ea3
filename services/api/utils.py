"""Shared utilities for API routes."""

from __future__ import annotations

from fastapi import Request, UploadFile

from core.exceptions import ConfigurationError, MissingParameterError
from core.uploads import UploadOrchestrator


def get_orchestrator(request: Request) -> UploadOrchestrator:
    """FastAPI dependency returning the orchestrator built at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise ConfigurationError("Upload orchestrator is not initialised")
    return orchestrator


def require_params(operation: str, *values: object) -> None:
    """Reject the request before touching storage if any value is empty."""
    if any(value is None or value == "" for value in values):
        raise MissingParameterError(
            f"Missing required parameters for file {operation}.",
            {"operation": operation},
        )


async def read_upload(upload: UploadFile) -> tuple[bytes, str | None]:
    """Read a multipart upload into memory and release it."""
    try:
        data = await upload.read()
    finally:
        await upload.close()
    return data, upload.content_type
