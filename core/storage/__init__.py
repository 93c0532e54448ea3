"""Storage abstraction (S3-compatible bucket or local filesystem fallback)."""

from __future__ import annotations

from typing import Protocol

from core.exceptions import ConfigurationError
from core.settings import StorageSettings


class ObjectStorage(Protocol):
    bucket: str

    def exists(self, key: str) -> bool:
        ...

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        ...

    def get_bytes(self, key: str) -> tuple[bytes, str | None]:  # returns data, content type
        ...

    def delete(self, key: str) -> None:
        ...


def build_storage(settings: StorageSettings) -> ObjectStorage:
    """Construct the configured backend. Called once at startup."""
    if not settings.bucket:
        raise ConfigurationError(
            "Storage bucket is not configured",
            {"env": "STORAGE_BUCKET_NAME"},
        )
    if settings.backend == "local":
        from core.storage.local import LocalStorage

        return LocalStorage(settings.local_root, bucket=settings.bucket)

    from core.storage.s3 import S3Storage

    return S3Storage(
        settings.bucket,
        region=settings.region,
        endpoint_url=settings.endpoint_url,
        project_id=settings.project_id,
        profile=settings.profile,
        credentials_file=settings.credentials_file,
    )


__all__ = ["ObjectStorage", "build_storage"]
