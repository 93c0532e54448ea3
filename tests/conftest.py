from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.settings import OverwritePolicy, Settings
from core.storage.local import LocalStorage
from core.uploads import UploadOrchestrator
from services.api.main import create_app

BUCKET = "test-bucket"
BASE_URL = "https://storage.googleapis.com"


class RecordingStorage(LocalStorage):
    """LocalStorage that remembers which primitives were called."""

    def __init__(self, root: Path, bucket: str = BUCKET) -> None:
        super().__init__(root, bucket=bucket)
        self.calls: list[tuple[str, str]] = []

    def exists(self, key: str) -> bool:
        self.calls.append(("exists", key))
        return super().exists(key)

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self.calls.append(("put", key))
        super().put_bytes(key, data, content_type)

    def get_bytes(self, key: str) -> tuple[bytes, str | None]:
        self.calls.append(("get", key))
        return super().get_bytes(key)

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        super().delete(key)


@pytest.fixture()
def storage(tmp_path: Path) -> RecordingStorage:
    return RecordingStorage(tmp_path / "bucket-root")


@pytest.fixture()
def orchestrator(storage: RecordingStorage) -> UploadOrchestrator:
    return UploadOrchestrator(storage, public_base_url=BASE_URL)


@pytest.fixture()
def replacing_orchestrator(storage: RecordingStorage) -> UploadOrchestrator:
    return UploadOrchestrator(storage, public_base_url=BASE_URL, policy=OverwritePolicy.REPLACE)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        storage={"backend": "local", "bucket": BUCKET, "local_root": str(tmp_path / "bucket-root")},
        logging={"level": "WARNING"},
    )


@pytest_asyncio.fixture()
async def client(settings: Settings, orchestrator: UploadOrchestrator):
    app = create_app(settings, orchestrator=orchestrator)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
