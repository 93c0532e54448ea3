"""Upload lifecycle for files kept under the bucket's photo prefix."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger

from core.exceptions import MissingParameterError, ObjectExistsError, ObjectNotFoundError
from core.settings import DEFAULT_PREFIX, DEFAULT_PUBLIC_BASE_URL, OverwritePolicy
from core.storage import ObjectStorage

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(slots=True)
class StoredFile:
    """A downloaded object and the metadata needed to serve it back."""

    file_name: str
    file_key: str
    content_type: str
    data: bytes
    public_url: str


class UploadOrchestrator:
    """Existence checks, writes and URL derivation on top of an injected store.

    The store is the only collaborator; the orchestrator keeps no other state,
    so one instance serves every request. Blocking SDK calls run in a worker
    thread. Nothing is retried or locked: concurrent writers to the same key
    race and the store keeps the last write.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        *,
        prefix: str = DEFAULT_PREFIX,
        public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
        policy: OverwritePolicy = OverwritePolicy.REJECT,
    ) -> None:
        self.storage = storage
        self.prefix = prefix.strip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self.policy = OverwritePolicy(policy)

    def file_key(self, file_name: str) -> str:
        return f"{self.prefix}/{file_name}" if self.prefix else file_name

    def public_url(self, file_name: str) -> str:
        return f"{self.public_base_url}/{self.storage.bucket}/{self.file_key(file_name)}"

    async def upload(self, file_name: str, data: bytes | None, content_type: str | None) -> str:
        """Store a new object and return its public URL.

        An existing object is rejected with ``ObjectExistsError`` or deleted
        first, depending on the overwrite policy.
        """
        _require(file_name, data, operation="upload")
        key = self.file_key(file_name)
        if await asyncio.to_thread(self.storage.exists, key):
            if self.policy is OverwritePolicy.REJECT:
                logger.warning("Upload rejected, {key} already exists", key=key)
                raise ObjectExistsError("File already exists", {"key": key})
            logger.info("Replacing existing object {key}", key=key)
            await asyncio.to_thread(self.storage.delete, key)

        await asyncio.to_thread(self.storage.put_bytes, key, data, content_type or DEFAULT_CONTENT_TYPE)
        logger.info("File {name} uploaded successfully", name=file_name)
        return self.public_url(file_name)

    async def update(self, file_name: str, data: bytes | None, content_type: str | None) -> str:
        """Overwrite an existing object; the URL is the same one ``upload`` returned."""
        _require(file_name, data, operation="update")
        key = await self._existing_key(file_name)
        await asyncio.to_thread(self.storage.put_bytes, key, data, content_type or DEFAULT_CONTENT_TYPE)
        logger.info("File {name} updated successfully", name=file_name)
        return self.public_url(file_name)

    async def fetch(self, file_name: str) -> str:
        """Confirm the object exists and return its URL without transferring bytes."""
        _require(file_name, operation="retrieval")
        await self._existing_key(file_name)
        return self.public_url(file_name)

    async def download(self, file_name: str) -> StoredFile:
        _require(file_name, operation="download")
        key = await self._existing_key(file_name)
        data, content_type = await asyncio.to_thread(self.storage.get_bytes, key)
        return StoredFile(
            file_name=file_name,
            file_key=key,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            data=data,
            public_url=self.public_url(file_name),
        )

    async def remove(self, file_name: str) -> None:
        _require(file_name, operation="deletion")
        key = await self._existing_key(file_name)
        await asyncio.to_thread(self.storage.delete, key)
        logger.info("File {name} deleted successfully", name=file_name)

    async def _existing_key(self, file_name: str) -> str:
        key = self.file_key(file_name)
        if not await asyncio.to_thread(self.storage.exists, key):
            logger.warning("No object stored at {key}", key=key)
            raise ObjectNotFoundError("File not found", {"key": key})
        return key


_MISSING = object()


def _require(file_name: str | None, data: object = _MISSING, *, operation: str) -> None:
    if not file_name or (data is not _MISSING and data is None):
        raise MissingParameterError(
            f"Missing required parameters for file {operation}.",
            {"operation": operation},
        )


__all__ = ["UploadOrchestrator", "StoredFile", "DEFAULT_CONTENT_TYPE"]
