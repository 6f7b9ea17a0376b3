import logging
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from src.uploads.exceptions import FileStorageException
from src.uploads.storage import AbstractFileStorage

logger = logging.getLogger(__name__)


class LocalFileStorage(AbstractFileStorage):
    """Stockage dans un dossier local, servi en fichiers statiques par l'application."""

    def __init__(self, base_dir: str, url_prefix: str):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        # La clé ne doit pas sortir du dossier d'upload
        if self.base_dir.resolve() not in path.parents:
            raise FileStorageException(f"Clé de fichier invalide: {key}")
        return path

    async def save(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        path = self._path_for(key)
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, mode="wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"[LocalFileStorage] Échec d'écriture de {key}: {e}", exc_info=True)
            raise FileStorageException(f"Impossible d'enregistrer le fichier {key}")
        logger.info(f"[LocalFileStorage] Fichier enregistré: {key} ({len(content)} octets)")
        return f"{self.url_prefix}/{key}"

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug(f"[LocalFileStorage] Fichier déjà absent: {key}")
            return
        except OSError as e:
            logger.error(f"[LocalFileStorage] Échec de suppression de {key}: {e}", exc_info=True)
            raise FileStorageException(f"Impossible de supprimer le fichier {key}")
        logger.info(f"[LocalFileStorage] Fichier supprimé: {key}")

    def key_from_url(self, url: str) -> Optional[str]:
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        key = url[len(prefix):]
        return key or None
