import logging
from typing import Optional, List, Dict, Any, Tuple

from fastcrud import FastCRUD
from sqlalchemy import select, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.categories.models import Category
from src.orders.models import OrderItem
from src.products.interfaces.repositories import AbstractProductRepository
from src.products.models import Product, ProductQuery
from src.reviews.models import Review

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "createdAt": Product.created_at,
    "price": Product.price,
    "name": Product.name,
    "rating": Product.rating,
}


class SQLAlchemyProductRepository(AbstractProductRepository):
    """Implémentation SQLAlchemy du repository produits."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.category_crud = FastCRUD(Category)
        self.order_item_crud = FastCRUD(OrderItem)

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        logger.debug(f"[ProductRepository] Getting product by ID: {product_id}")
        statement = (
            select(Product)
            .options(selectinload(Product.category))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(statement)
        return result.scalars().first()

    def _filters(self, query: ProductQuery) -> list:
        conditions = []
        if query.search:
            pattern = f"%{query.search}%"
            conditions.append(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
        if query.category:
            conditions.append(
                Product.category_id.in_(
                    select(Category.id).where(func.lower(Category.name) == query.category.lower())
                )
            )
        if query.min_price is not None:
            conditions.append(Product.price >= query.min_price)
        if query.max_price is not None:
            conditions.append(Product.price <= query.max_price)
        return conditions

    async def list(self, query: ProductQuery) -> Tuple[List[Product], int]:
        conditions = self._filters(query)
        total = (await self.db.execute(select(func.count(Product.id)).where(*conditions))).scalar_one()

        sort_column = SORT_COLUMNS[query.sort_by]
        ordering = sort_column.asc() if query.sort_order == "asc" else sort_column.desc()
        tie_breaker = Product.id.asc() if query.sort_order == "asc" else Product.id.desc()
        statement = (
            select(Product)
            .options(selectinload(Product.category))
            .where(*conditions)
            .order_by(ordering, tie_breaker)
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        result = await self.db.execute(statement)
        products = list(result.scalars().all())
        logger.debug(f"[ProductRepository] {len(products)}/{total} products for {query.model_dump(exclude_none=True)}")
        return products, total

    async def category_exists(self, category_id: int) -> bool:
        return await self.category_crud.exists(db=self.db, id=category_id)

    async def latest_reviews(self, product_id: int, limit: int) -> List[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_order_items(self, product_id: int) -> int:
        return await self.order_item_crud.count(db=self.db, product_id=product_id)

    async def create(self, values: Dict[str, Any]) -> Product:
        product = Product(**values)
        self.db.add(product)
        await self.db.commit()
        logger.info(f"[ProductRepository] Product created with ID: {product.id}")
        return await self.get_by_id(product.id)

    async def update(self, product: Product, values: Dict[str, Any]) -> Product:
        for field, value in values.items():
            setattr(product, field, value)
        self.db.add(product)
        await self.db.commit()
        return await self.get_by_id(product.id)

    async def delete(self, product: Product) -> None:
        product_id = product.id
        await self.db.execute(delete(Review).where(Review.product_id == product_id))
        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"[ProductRepository] Product {product_id} and its reviews deleted")
