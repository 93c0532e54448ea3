"""Path-addressed upload route: ``POST /storage/{fileName}``."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from core.uploads import UploadOrchestrator
from services.api.schemas import FileUrlResponse, PublicUrlData
from services.api.utils import get_orchestrator, read_upload, require_params


router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/{file_name}", response_model=FileUrlResponse)
async def upload_named_file(
    file_name: str,
    orchestrator: Annotated[UploadOrchestrator, Depends(get_orchestrator)],
    file: Annotated[UploadFile | None, File()] = None,
) -> FileUrlResponse:
    require_params("upload", file, file_name)
    data, content_type = await read_upload(file)
    public_url = await orchestrator.upload(file_name, data, content_type)
    return FileUrlResponse(message="File uploaded successfully", data=PublicUrlData(public_url=public_url))
