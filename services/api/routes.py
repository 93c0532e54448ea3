from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from core.uploads import UploadOrchestrator
from services.api.schemas import AckResponse, FileUrlResponse, PublicUrlData
from services.api.utils import get_orchestrator, read_upload, require_params


router = APIRouter(prefix="/uploads", tags=["uploads"])

Orchestrator = Annotated[UploadOrchestrator, Depends(get_orchestrator)]
FileName = Annotated[str | None, Query(alias="fileOutputName")]
FormFileName = Annotated[str | None, Form(alias="fileOutputName")]
FilePart = Annotated[UploadFile | None, File()]


@router.post("", response_model=FileUrlResponse)
async def upload_file(
    orchestrator: Orchestrator,
    file: FilePart = None,
    file_name: FormFileName = None,
) -> FileUrlResponse:
    require_params("upload", file, file_name)
    data, content_type = await read_upload(file)
    public_url = await orchestrator.upload(file_name, data, content_type)
    return FileUrlResponse(message="File uploaded successfully", data=PublicUrlData(public_url=public_url))


@router.get("", response_model=FileUrlResponse)
async def get_file(orchestrator: Orchestrator, file_name: FileName = None) -> FileUrlResponse:
    require_params("retrieval", file_name)
    public_url = await orchestrator.fetch(file_name)
    return FileUrlResponse(message="File retrieved successfully", data=PublicUrlData(public_url=public_url))


@router.get("/content")
async def download_file(orchestrator: Orchestrator, file_name: FileName = None) -> Response:
    require_params("download", file_name)
    stored = await orchestrator.download(file_name)
    return Response(
        content=stored.data,
        media_type=stored.content_type,
        headers={"X-Public-Url": stored.public_url},
    )


@router.put("", response_model=FileUrlResponse)
async def update_file(
    orchestrator: Orchestrator,
    file: FilePart = None,
    file_name: FormFileName = None,
) -> FileUrlResponse:
    require_params("update", file, file_name)
    data, content_type = await read_upload(file)
    public_url = await orchestrator.update(file_name, data, content_type)
    return FileUrlResponse(message="File updated successfully", data=PublicUrlData(public_url=public_url))


@router.delete("", response_model=AckResponse)
async def delete_file(orchestrator: Orchestrator, file_name: FileName = None) -> AckResponse:
    require_params("deletion", file_name)
    await orchestrator.remove(file_name)
    return AckResponse(message="File deleted successfully")
