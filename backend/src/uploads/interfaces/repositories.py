from abc import ABC, abstractmethod
from typing import Optional

from src.uploads.models import UploadedFile


class AbstractUploadedFileRepository(ABC):
    """Interface abstraite pour les traces de fichiers envoyés."""

    @abstractmethod
    async def get_by_filename(self, filename: str) -> Optional[UploadedFile]:
        pass

    @abstractmethod
    async def create(self, uploaded_file: UploadedFile) -> UploadedFile:
        pass

    @abstractmethod
    async def delete_by_filename(self, filename: str) -> int:
        """Supprime les traces portant ce nom; retourne le nombre de lignes supprimées."""
        pass
