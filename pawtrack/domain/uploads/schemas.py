from typing import Optional

from pydantic import BaseModel, field_validator


class UploadResponse(BaseModel):
    key: str
    url: str


class PresignRequest(BaseModel):
    filename: str
    contentType: str
    size: int

    @field_validator("size")
    @classmethod
    def check_size(cls, v):
        if v <= 0:
            raise ValueError("Size must be greater than 0")
        return v


class PresignResponse(BaseModel):
    useLocalUpload: bool
    uploadUrl: str
    key: Optional[str] = None
