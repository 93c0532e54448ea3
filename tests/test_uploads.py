"""Tests for the upload orchestrator."""

from __future__ import annotations

import pytest

from core.exceptions import MissingParameterError, ObjectExistsError, ObjectNotFoundError
from core.uploads import DEFAULT_CONTENT_TYPE


def test_file_key_and_public_url(orchestrator):
    assert orchestrator.file_key("a.png") == "users-photo/a.png"
    assert orchestrator.public_url("a.png") == "https://storage.googleapis.com/test-bucket/users-photo/a.png"


@pytest.mark.asyncio()
async def test_upload_fresh_key_returns_url(orchestrator, storage):
    url = await orchestrator.upload("a.png", b"png-bytes", "image/png")

    assert url.endswith("/users-photo/a.png")
    assert storage.get_bytes("users-photo/a.png") == (b"png-bytes", "image/png")


@pytest.mark.asyncio()
async def test_upload_existing_key_is_rejected(orchestrator, storage):
    await orchestrator.upload("a.png", b"first", "image/png")

    with pytest.raises(ObjectExistsError) as excinfo:
        await orchestrator.upload("a.png", b"second", "image/png")

    assert excinfo.value.message == "File already exists"
    assert storage.get_bytes("users-photo/a.png")[0] == b"first"


@pytest.mark.asyncio()
async def test_upload_existing_key_is_replaced_under_replace_policy(replacing_orchestrator, storage):
    first = await replacing_orchestrator.upload("a.png", b"first", "image/png")
    second = await replacing_orchestrator.upload("a.png", b"second", "image/jpeg")

    assert first == second
    assert storage.get_bytes("users-photo/a.png") == (b"second", "image/jpeg")
    assert ("delete", "users-photo/a.png") in storage.calls


@pytest.mark.asyncio()
async def test_upload_without_content_type_uses_octet_stream(orchestrator, storage):
    await orchestrator.upload("blob", b"\x00\x01", None)

    assert storage.get_bytes("users-photo/blob")[1] == DEFAULT_CONTENT_TYPE


@pytest.mark.asyncio()
async def test_update_missing_key_raises_not_found(orchestrator, storage):
    with pytest.raises(ObjectNotFoundError):
        await orchestrator.update("ghost.png", b"data", "image/png")

    assert not storage.exists("users-photo/ghost.png")


@pytest.mark.asyncio()
async def test_update_replaces_content_and_keeps_url(orchestrator, storage):
    created = await orchestrator.upload("a.png", b"old", "image/png")
    updated = await orchestrator.update("a.png", b"new", "image/webp")

    assert created == updated
    assert storage.get_bytes("users-photo/a.png") == (b"new", "image/webp")


@pytest.mark.asyncio()
async def test_fetch_missing_key_raises_not_found(orchestrator):
    with pytest.raises(ObjectNotFoundError):
        await orchestrator.fetch("missing.png")


@pytest.mark.asyncio()
async def test_fetch_does_not_download(orchestrator, storage):
    await orchestrator.upload("a.png", b"data", "image/png")
    storage.calls.clear()

    url = await orchestrator.fetch("a.png")

    assert url.endswith("/users-photo/a.png")
    assert storage.calls == [("exists", "users-photo/a.png")]


@pytest.mark.asyncio()
async def test_download_returns_bytes_and_content_type(orchestrator):
    await orchestrator.upload("a.png", b"data", "image/png")

    stored = await orchestrator.download("a.png")

    assert stored.data == b"data"
    assert stored.content_type == "image/png"
    assert stored.file_key == "users-photo/a.png"


@pytest.mark.asyncio()
async def test_upload_remove_fetch_sequence(orchestrator):
    url = await orchestrator.upload("a.png", b"bytes", "image/png")
    assert url.endswith("/users-photo/a.png")

    await orchestrator.remove("a.png")

    with pytest.raises(ObjectNotFoundError):
        await orchestrator.fetch("a.png")


@pytest.mark.asyncio()
async def test_remove_missing_key_raises_not_found(orchestrator):
    with pytest.raises(ObjectNotFoundError):
        await orchestrator.remove("missing.png")


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    ("method", "args"),
    [
        ("upload", ("", b"data", "image/png")),
        ("upload", ("a.png", None, "image/png")),
        ("update", ("a.png", None, "image/png")),
        ("fetch", ("",)),
        ("remove", ("",)),
        ("download", ("",)),
    ],
)
async def test_missing_parameters_fail_before_store_calls(orchestrator, storage, method, args):
    with pytest.raises(MissingParameterError):
        await getattr(orchestrator, method)(*args)

    assert storage.calls == []


@pytest.mark.asyncio()
async def test_file_name_is_used_verbatim(orchestrator, storage):
    url = await orchestrator.upload("nested/dir/photo 1.png", b"x", "image/png")

    assert url.endswith("/users-photo/nested/dir/photo 1.png")
    assert storage.exists("users-photo/nested/dir/photo 1.png")
