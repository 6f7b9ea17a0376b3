"""
Service applicatif des uploads: validation, dépôt dans le stockage et trace en base.
"""
import logging
import uuid
from pathlib import PurePosixPath
from typing import List, Sequence, Set

from fastapi import UploadFile

from src.config import settings
from src.uploads.constants import ALLOWED_FILE_TYPES, ALLOWED_IMAGE_TYPES, FILES_PREFIX, IMAGES_PREFIX
from src.uploads.exceptions import (
    NoFilesProvidedException,
    FileTooLargeException,
    FileTypeNotAllowedException,
    UploadedFileNotFoundException,
    InvalidFileUrlException,
)
from src.uploads.interfaces.repositories import AbstractUploadedFileRepository
from src.uploads.models import UploadedFile, UploadedFileRead
from src.uploads.storage import AbstractFileStorage

logger = logging.getLogger(__name__)


def build_storage_name(original_name: str) -> str:
    """Nom unique '<uuid>_<nom d'origine>' (sans chemin)."""
    base_name = PurePosixPath((original_name or "file").replace("\\", "/")).name or "file"
    return f"{uuid.uuid4()}_{base_name}"


class UploadService:

    def __init__(self, repository: AbstractUploadedFileRepository, storage: AbstractFileStorage):
        self.repository = repository
        self.storage = storage

    async def _read_validated(self, upload: UploadFile, allowed_types: Set[str], max_size: int) -> bytes:
        filename = upload.filename or "file"
        # taille annoncée par le parseur multipart: refus avant lecture en mémoire
        if upload.size is not None and upload.size > max_size:
            raise FileTooLargeException(filename, max_size)
        content = await upload.read()
        if len(content) > max_size:
            raise FileTooLargeException(filename, max_size)
        if upload.content_type not in allowed_types:
            raise FileTypeNotAllowedException(filename, upload.content_type or "inconnu")
        return content

    async def _store(self, upload: UploadFile, content: bytes, prefix: str) -> UploadedFile:
        filename = build_storage_name(upload.filename)
        url = await self.storage.save(f"{prefix}/{filename}", content, upload.content_type)
        return await self.repository.create(
            UploadedFile(filename=filename, url=url, size=len(content), mimetype=upload.content_type)
        )

    async def upload_files(self, uploads: Sequence[UploadFile]) -> List[UploadedFileRead]:
        if not uploads:
            raise NoFilesProvidedException("files")
        # Tout valider avant d'écrire quoi que ce soit
        contents = [await self._read_validated(u, ALLOWED_FILE_TYPES, settings.MAX_FILE_SIZE) for u in uploads]
        stored = [await self._store(u, c, FILES_PREFIX) for u, c in zip(uploads, contents)]
        logger.info(f"[UploadService] {len(stored)} fichier(s) enregistré(s)")
        return [UploadedFileRead.model_validate(f) for f in stored]

    async def upload_images(self, uploads: Sequence[UploadFile]) -> List[str]:
        if not uploads:
            raise NoFilesProvidedException("images")
        contents = [await self._read_validated(u, ALLOWED_IMAGE_TYPES, settings.MAX_IMAGE_SIZE) for u in uploads]
        stored = [await self._store(u, c, IMAGES_PREFIX) for u, c in zip(uploads, contents)]
        logger.info(f"[UploadService] {len(stored)} image(s) enregistrée(s)")
        return [f.url for f in stored]

    async def delete_file(self, filename: str) -> None:
        uploaded = await self.repository.get_by_filename(filename)
        if uploaded is None:
            raise UploadedFileNotFoundException(filename)
        await self.storage.delete(f"{FILES_PREFIX}/{filename}")
        await self.repository.delete_by_filename(filename)
        logger.info(f"[UploadService] Fichier supprimé: {filename}")

    async def delete_image(self, image_url: str) -> None:
        key = self.storage.key_from_url(image_url)
        if key is None:
            raise InvalidFileUrlException(image_url)
        await self.storage.delete(key)
        # La trace peut ne pas exister (image ajoutée hors de ce module)
        await self.repository.delete_by_filename(PurePosixPath(key).name)
        logger.info(f"[UploadService] Image supprimée: {key}")
