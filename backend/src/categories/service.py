import logging
from typing import List

from src.categories.interfaces.repositories import AbstractCategoryRepository
from src.categories.models import CategoryCreate, CategoryUpdate, CategoryRead
from src.categories.exceptions import (
    CategoryNotFoundException,
    DuplicateCategoryNameException,
    CategoryInUseException,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service applicatif pour la gestion des catégories via Repository."""

    def __init__(self, repository: AbstractCategoryRepository):
        self.repository = repository

    async def list_category_names(self) -> List[str]:
        """Liste les noms de catégories, triés par ordre alphabétique."""
        names = await self.repository.list_names()
        logger.debug(f"[CategoryService] {len(names)} catégories listées")
        return names

    async def get_category(self, category_id: int) -> CategoryRead:
        """Récupère une catégorie par ID via le repository."""
        logger.debug(f"[CategoryService] Get Category ID: {category_id}")
        category = await self.repository.get_by_id(category_id=category_id)
        if not category:
            raise CategoryNotFoundException(category_id)
        return category

    async def create_category(self, category_data: CategoryCreate) -> CategoryRead:
        """Crée une nouvelle catégorie via le repository."""
        logger.info(f"[CategoryService] Create Category: {category_data.name}")
        if await self.repository.get_by_name(name=category_data.name):
            raise DuplicateCategoryNameException(category_data.name)

        created_category = await self.repository.create(category_data=category_data)
        logger.info(f"[CategoryService] Category ID {created_category.id} created via repository.")
        return created_category

    async def update_category(self, category_id: int, category_data: CategoryUpdate) -> CategoryRead:
        """Renomme une catégorie existante via le repository."""
        logger.info(f"[CategoryService] Update Category ID: {category_id}")
        existing_category_with_name = await self.repository.get_by_name(name=category_data.name)
        if existing_category_with_name and existing_category_with_name.id != category_id:
            raise DuplicateCategoryNameException(category_data.name)

        updated_category = await self.repository.update(category_id=category_id, category_data=category_data)
        if updated_category is None:
            raise CategoryNotFoundException(category_id)

        logger.info(f"[CategoryService] Category ID {category_id} updated via repository.")
        return updated_category

    async def delete_category(self, category_id: int) -> None:
        """Supprime une catégorie qui n'est plus utilisée par aucun produit."""
        logger.info(f"[CategoryService] Delete Category ID: {category_id}")
        if await self.repository.get_by_id(category_id=category_id) is None:
            raise CategoryNotFoundException(category_id)

        product_count = await self.repository.count_products(category_id)
        if product_count:
            logger.warning(f"[CategoryService] Category ID {category_id} still used by {product_count} product(s).")
            raise CategoryInUseException(category_id, product_count)

        await self.repository.delete(category_id=category_id)
        logger.info(f"[CategoryService] Category ID {category_id} deleted via repository.")
