import logging
from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.uploads.interfaces.repositories import AbstractUploadedFileRepository
from src.uploads.models import UploadedFile

logger = logging.getLogger(__name__)


class SQLAlchemyUploadedFileRepository(AbstractUploadedFileRepository):

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_filename(self, filename: str) -> Optional[UploadedFile]:
        result = await self.db.execute(select(UploadedFile).where(UploadedFile.filename == filename))
        return result.scalars().first()

    async def create(self, uploaded_file: UploadedFile) -> UploadedFile:
        self.db.add(uploaded_file)
        await self.db.commit()
        await self.db.refresh(uploaded_file)
        logger.debug(f"[UploadRepository] Trace enregistrée: {uploaded_file.filename}")
        return uploaded_file

    async def delete_by_filename(self, filename: str) -> int:
        result = await self.db.execute(delete(UploadedFile).where(UploadedFile.filename == filename))
        await self.db.commit()
        return result.rowcount
