from typing import Optional, List
from datetime import datetime

from pydantic import Field as PydanticField
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from src.core.schemas import CamelModel, StrictCamelModel, utc_now


class UploadedFile(SQLModel, table=True):
    """Trace en base d'un fichier déposé dans le stockage."""
    __tablename__ = "uploaded_files"

    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(unique=True, index=True, max_length=512)
    url: str = Field(max_length=1024)
    size: int
    mimetype: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)


class UploadedFileRead(CamelModel):
    id: int
    filename: str
    url: str
    size: int
    mimetype: str
    created_at: datetime


class UploadFilesResponse(CamelModel):
    success: bool = True
    files: List[UploadedFileRead]
    message: str


class UploadImagesResponse(CamelModel):
    success: bool = True
    image_urls: List[str]
    message: str


class DeleteImageRequest(StrictCamelModel):
    image_url: str = PydanticField(min_length=1)


class DeleteFileResponse(CamelModel):
    success: bool = True
    message: str
