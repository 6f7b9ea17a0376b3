# src/categories/repositories.py
import logging
from typing import List, Optional

from fastcrud import FastCRUD
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.categories.exceptions import DuplicateCategoryNameException
from src.categories.interfaces.repositories import AbstractCategoryRepository
from src.categories.models import Category, CategoryCreate, CategoryRead, CategoryUpdate
from src.products.models import Product

logger = logging.getLogger(__name__)


class SQLAlchemyCategoryRepository(AbstractCategoryRepository):
    """Implémentation SQLAlchemy du repository des catégories avec FastCRUD."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud = FastCRUD(Category)
        self.product_crud = FastCRUD(Product)

    async def get_by_id(self, category_id: int) -> Optional[CategoryRead]:
        logger.debug(f"[CategoryRepository] Getting category by ID: {category_id}")
        category = await self.crud.get(
            db=self.db, schema_to_select=CategoryRead, return_as_model=True, id=category_id
        )
        if not category:
            logger.warning(f"[CategoryRepository] Category not found by ID: {category_id}")
        return category

    async def get_by_name(self, name: str) -> Optional[Category]:
        logger.debug(f"[CategoryRepository] Getting category by name: {name}")
        result = await self.db.execute(select(Category).where(func.lower(Category.name) == name.lower()))
        return result.scalars().first()

    async def list_names(self) -> List[str]:
        result = await self.db.execute(select(Category.name).order_by(Category.name.asc()))
        return list(result.scalars().all())

    async def count_products(self, category_id: int) -> int:
        return await self.product_crud.count(db=self.db, category_id=category_id)

    async def create(self, category_data: CategoryCreate) -> CategoryRead:
        logger.debug(f"[CategoryRepository] Creating category: {category_data.name}")
        category = Category(name=category_data.name)
        self.db.add(category)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[CategoryRepository] Integrity error creating category {category_data.name}: {e}")
            raise DuplicateCategoryNameException(category_data.name)
        await self.db.refresh(category)
        return CategoryRead.model_validate(category)

    async def update(self, category_id: int, category_data: CategoryUpdate) -> Optional[CategoryRead]:
        logger.debug(f"[CategoryRepository] Updating category ID: {category_id}")
        category = await self.db.get(Category, category_id)
        if category is None:
            return None
        category.name = category_data.name
        self.db.add(category)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[CategoryRepository] Integrity error updating category {category_id}: {e}")
            raise DuplicateCategoryNameException(category_data.name)
        await self.db.refresh(category)
        return CategoryRead.model_validate(category)

    async def delete(self, category_id: int) -> bool:
        logger.debug(f"[CategoryRepository] Deleting category ID: {category_id}")
        category = await self.db.get(Category, category_id)
        if category is None:
            return False
        await self.db.delete(category)
        await self.db.commit()
        return True
