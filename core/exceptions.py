"""Custom exception hierarchy for the photo storage service."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification shared by the store boundary and the HTTP layer."""

    MISSING_PARAMETER = "missing_parameter"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BACKEND_FAILURE = "backend_failure"
    CONFIGURATION = "configuration"


class PhotoStoreError(Exception):
    """Base exception for all photo storage errors."""

    kind: ErrorKind = ErrorKind.BACKEND_FAILURE

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PhotoStoreError):
    """Raised when configuration is invalid or missing."""

    kind = ErrorKind.CONFIGURATION


class MissingParameterError(PhotoStoreError):
    """Raised when a request lacks the file or the file name."""

    kind = ErrorKind.MISSING_PARAMETER


class StorageError(PhotoStoreError):
    """Raised when storage operations fail."""
    pass


class ObjectExistsError(StorageError):
    """Raised when an upload targets a key that is already taken."""

    kind = ErrorKind.CONFLICT


class ObjectNotFoundError(StorageError):
    """Raised when the requested object is not in the bucket."""

    kind = ErrorKind.NOT_FOUND


class BackendFailureError(StorageError):
    """Raised when the storage backend fails for any unclassified reason."""

    kind = ErrorKind.BACKEND_FAILURE
