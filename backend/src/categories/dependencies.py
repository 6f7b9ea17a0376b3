import logging
from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.categories.service import CategoryService
from src.categories.interfaces.repositories import AbstractCategoryRepository
from src.categories.repositories import SQLAlchemyCategoryRepository

logger = logging.getLogger(__name__)

# Dependency for DB Session
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

# --- Dépendance pour le Repository ---
def get_category_repository(session: SessionDep) -> AbstractCategoryRepository:
    """
    Fournit une instance du repository de catégories.
    """
    logger.debug("Providing SQLAlchemyCategoryRepository")
    return SQLAlchemyCategoryRepository(db_session=session)

CategoryRepositoryDep = Annotated[AbstractCategoryRepository, Depends(get_category_repository)]

# --- Dépendance Service Category ---
def get_category_service(repository: CategoryRepositoryDep) -> CategoryService:
    """
    Fournit une instance du service de gestion des catégories.

    Args:
        repository: Instance du repository de catégories.

    Returns:
        CategoryService: Instance du service de gestion des catégories.
    """
    logger.debug("Providing CategoryService with injected repository")
    return CategoryService(repository=repository)

CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
