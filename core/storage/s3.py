from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from core.exceptions import (
    BackendFailureError,
    ConfigurationError,
    ObjectNotFoundError,
    StorageError,
)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _translate(exc: Exception, operation: str, key: str) -> StorageError:
    """Map an SDK failure onto the storage error kinds."""
    details = {"operation": operation, "key": key}
    if isinstance(exc, ClientError):
        code = str(exc.response.get("Error", {}).get("Code", ""))
        details["code"] = code
        if code in _NOT_FOUND_CODES:
            return ObjectNotFoundError("File not found", details)
    return BackendFailureError(str(exc), details)


def _check_credentials_file(path: Path) -> None:
    """Refuse service-account JSON keys; boto needs an INI file with HMAC keys."""
    try:
        head = path.read_text(encoding="utf-8").lstrip()[:1]
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read storage credentials file: {exc}",
            {"credentials_file": str(path)},
        ) from exc
    if head == "{":
        raise ConfigurationError(
            "Storage credentials file looks like a JSON service-account key; "
            "S3-compatible access requires HMAC keys in a shared credentials (INI) file",
            {"credentials_file": str(path)},
        )


class S3Storage:
    """Bucket access through boto3.

    Works against AWS S3 and any S3-compatible endpoint; the default endpoint
    is the Google Cloud Storage interoperability API. Credentials come from the
    default boto chain, optionally narrowed by ``profile`` and ``credentials_file``
    (HMAC keys). ``project_id`` is sent as the ``x-goog-project-id`` header.
    """

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        project_id: Optional[str] = None,
        profile: Optional[str] = None,
        credentials_file: Optional[Path] = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.project_id = project_id
        if client is not None:
            self.client = client
            return
        if credentials_file:
            _check_credentials_file(Path(credentials_file))
        core_session = botocore.session.Session(profile=profile)
        if credentials_file:
            core_session.set_config_variable("credentials_file", str(credentials_file))
        try:
            session = boto3.session.Session(botocore_session=core_session, region_name=region)
            self.client = session.client("s3", endpoint_url=endpoint_url)
        except BotoCoreError as exc:
            raise ConfigurationError(
                f"Could not create storage client: {exc}",
                {"profile": profile or "", "credentials_file": str(credentials_file or "")},
            ) from exc
        if project_id:
            self.client.meta.events.register("before-sign.s3", self._add_project_header)
        logger.info(
            "S3 storage ready for bucket={bucket} endpoint={endpoint}",
            bucket=bucket,
            endpoint=endpoint_url or "aws",
        )

    def _add_project_header(self, request: Any, **kwargs: Any) -> None:
        request.headers["x-goog-project-id"] = self.project_id

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            error = _translate(exc, "exists", key)
            if isinstance(error, ObjectNotFoundError):
                return False
            raise error from exc
        return True

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, "put", key) from exc

    def get_bytes(self, key: str) -> tuple[bytes, str | None]:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"]
            try:
                data = body.read()
            finally:
                body.close()
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, "get", key) from exc
        return data, response.get("ContentType")

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, "delete", key) from exc


__all__ = ["S3Storage"]
