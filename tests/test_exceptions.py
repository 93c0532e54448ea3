"""Tests for custom exception hierarchy."""

from core.exceptions import (
    BackendFailureError,
    ConfigurationError,
    ErrorKind,
    MissingParameterError,
    ObjectExistsError,
    ObjectNotFoundError,
    PhotoStoreError,
    StorageError,
)
from services.api.exception_handlers import STATUS_BY_KIND


def test_photo_store_error_base():
    """Test base PhotoStoreError."""
    error = PhotoStoreError("Test error", {"key": "value"})
    assert str(error) == "Test error"
    assert error.message == "Test error"
    assert error.details == {"key": "value"}
    assert error.kind is ErrorKind.BACKEND_FAILURE


def test_error_kinds():
    assert MissingParameterError("x").kind is ErrorKind.MISSING_PARAMETER
    assert ObjectExistsError("x").kind is ErrorKind.CONFLICT
    assert ObjectNotFoundError("x").kind is ErrorKind.NOT_FOUND
    assert BackendFailureError("x").kind is ErrorKind.BACKEND_FAILURE
    assert ConfigurationError("x").kind is ErrorKind.CONFIGURATION


def test_storage_errors_share_a_base():
    for cls in (ObjectExistsError, ObjectNotFoundError, BackendFailureError):
        assert issubclass(cls, StorageError)
        assert issubclass(cls, PhotoStoreError)


def test_every_kind_has_a_status():
    assert STATUS_BY_KIND[ErrorKind.MISSING_PARAMETER] == 400
    assert STATUS_BY_KIND[ErrorKind.CONFLICT] == 409
    assert STATUS_BY_KIND[ErrorKind.NOT_FOUND] == 404
    assert STATUS_BY_KIND[ErrorKind.BACKEND_FAILURE] == 500
    assert set(STATUS_BY_KIND) == set(ErrorKind)
