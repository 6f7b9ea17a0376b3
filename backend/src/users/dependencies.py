"""
Module définissant les dépendances FastAPI pour le module utilisateur.

Fournit le repository SQLAlchemy des utilisateurs et le service UserService
injecté avec ce repository.
"""
import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.users.interfaces.repositories import AbstractUserRepository
from src.users.repositories import SQLAlchemyUserRepository
from src.users.service import UserService

logger = logging.getLogger(__name__)

# Type hint pour la dépendance de session DB
DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_user_repository(session: DbSessionDep) -> AbstractUserRepository:
    """Fournit une instance du repository des utilisateurs."""
    logger.debug("Fourniture de SQLAlchemyUserRepository")
    return SQLAlchemyUserRepository(db_session=session)

UserRepositoryDep = Annotated[AbstractUserRepository, Depends(get_user_repository)]


def get_user_service(repository: UserRepositoryDep) -> UserService:
    """
    Fournit une instance du service de gestion des utilisateurs.

    Args:
        repository: Repository utilisateur fourni par dépendance

    Returns:
        UserService: Instance du service de gestion des utilisateurs
    """
    logger.debug("Fourniture de UserService")
    return UserService(repository=repository)

UserServiceDep = Annotated[UserService, Depends(get_user_service)]
