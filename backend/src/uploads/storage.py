from abc import ABC, abstractmethod
from typing import Optional


class AbstractFileStorage(ABC):
    """Interface abstraite pour le stockage des fichiers envoyés.

    Les fichiers sont adressés par une clé relative (ex: 'images/<uuid>_photo.png');
    l'URL publique est dérivée de la clé par l'implémentation.
    """

    @abstractmethod
    async def save(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Enregistre le contenu sous la clé donnée et retourne son URL publique.

        Raises:
            FileStorageException: Si l'écriture échoue.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Supprime le fichier. Une clé inconnue n'est pas une erreur."""
        raise NotImplementedError

    @abstractmethod
    def key_from_url(self, url: str) -> Optional[str]:
        """Retrouve la clé d'une URL produite par ce stockage, None sinon."""
        raise NotImplementedError
