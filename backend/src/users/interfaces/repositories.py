from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.users.models import User, UserCreateInternal


class AbstractUserRepository(ABC):
    """Interface abstraite pour le repository des utilisateurs."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Récupère un utilisateur par son ID. Retourne le modèle de table."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Récupère un utilisateur par son email. Retourne le modèle de table."""
        pass

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        """Tous les utilisateurs, les plus récents d'abord."""
        pass

    @abstractmethod
    async def create(self, user_data: UserCreateInternal) -> User:
        pass

    @abstractmethod
    async def update(self, user: User, values: Dict[str, Any]) -> User:
        pass
