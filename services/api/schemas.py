from __future__ import annotations

from pydantic import BaseModel


class PublicUrlData(BaseModel):
    public_url: str


class FileUrlResponse(BaseModel):
    code: int = 200
    message: str
    data: PublicUrlData


class AckResponse(BaseModel):
    code: int = 200
    message: str


class ErrorResponse(BaseModel):
    code: int
    message: str
    error: str | None = None
