from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db_session
from src.uploads.interfaces.repositories import AbstractUploadedFileRepository
from src.uploads.local_storage import LocalFileStorage
from src.uploads.repositories import SQLAlchemyUploadedFileRepository
from src.uploads.service import UploadService
from src.uploads.storage import AbstractFileStorage

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

# --- File Storage Dependency ---

def get_file_storage() -> AbstractFileStorage:
    """Fournit l'implémentation concrète du stockage.

    Actuellement, un dossier local servi par l'application (UPLOAD_DIR).
    """
    return LocalFileStorage(base_dir=settings.UPLOAD_DIR, url_prefix=settings.UPLOAD_URL_PREFIX)

FileStorageDep = Annotated[AbstractFileStorage, Depends(get_file_storage)]

# --- Upload Service Dependency ---

def get_uploaded_file_repository(session: SessionDep) -> AbstractUploadedFileRepository:
    return SQLAlchemyUploadedFileRepository(db_session=session)

UploadedFileRepositoryDep = Annotated[AbstractUploadedFileRepository, Depends(get_uploaded_file_repository)]

def get_upload_service(repository: UploadedFileRepositoryDep, storage: FileStorageDep) -> UploadService:
    """Injecte le repository et le stockage et fournit une instance de UploadService."""
    return UploadService(repository=repository, storage=storage)

UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
