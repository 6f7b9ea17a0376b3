# src/admin/repositories.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from fastcrud import FastCRUD
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.admin.interfaces.repositories import AbstractAnalyticsRepository
from src.orders.config import OrderStatus
from src.orders.models import Order, OrderItem
from src.products.models import Product
from src.users.models import User

logger = logging.getLogger(__name__)


class SQLAlchemyAnalyticsRepository(AbstractAnalyticsRepository):
    """Agrégations SQL du tableau de bord. Les comptages simples passent par FastCRUD."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.order_crud = FastCRUD(Order)
        self.product_crud = FastCRUD(Product)
        self.user_crud = FastCRUD(User)

    async def revenue(self, since: Optional[datetime] = None) -> Decimal:
        statement = select(func.coalesce(func.sum(Order.total), 0)).where(Order.status != OrderStatus.NEW)
        if since is not None:
            statement = statement.where(Order.created_at >= since)
        value = (await self.db.execute(statement)).scalar_one()
        return Decimal(str(value or 0))

    async def count_orders(self, since: Optional[datetime] = None) -> int:
        if since is None:
            return await self.order_crud.count(db=self.db)
        return await self.order_crud.count(db=self.db, created_at__gte=since)

    async def count_products(self) -> int:
        return await self.product_crud.count(db=self.db)

    async def count_users(self, since: Optional[datetime] = None) -> int:
        if since is None:
            return await self.user_crud.count(db=self.db)
        return await self.user_crud.count(db=self.db, created_at__gte=since)

    async def count_low_stock(self, threshold: int) -> int:
        return await self.product_crud.count(
            db=self.db, in_stock=True, stock_count__gt=0, stock_count__lte=threshold
        )

    async def count_out_of_stock(self) -> int:
        statement = select(func.count()).select_from(Product).where(self._out_of_stock())
        return (await self.db.execute(statement)).scalar_one()

    def _out_of_stock(self):
        return or_(Product.stock_count == 0, Product.in_stock.is_(False))

    async def orders_since(self, since: datetime) -> List[Tuple[Decimal, datetime, OrderStatus]]:
        statement = select(Order.total, Order.created_at, Order.status).where(Order.created_at >= since)
        result = await self.db.execute(statement)
        return [tuple(row) for row in result.all()]

    async def top_selling(self, limit: int) -> List[Tuple[int, int, Decimal]]:
        quantity = func.sum(OrderItem.quantity)
        statement = (
            select(OrderItem.product_id, quantity, func.avg(OrderItem.price))
            .group_by(OrderItem.product_id)
            .order_by(quantity.desc(), OrderItem.product_id)
            .limit(limit)
        )
        result = await self.db.execute(statement)
        return [
            (product_id, int(sold or 0), Decimal(str(avg_price or 0)))
            for product_id, sold, avg_price in result.all()
        ]

    async def quantities_sold(self, product_ids: List[int]) -> Dict[int, int]:
        if not product_ids:
            return {}
        statement = (
            select(OrderItem.product_id, func.sum(OrderItem.quantity))
            .where(OrderItem.product_id.in_(product_ids))
            .group_by(OrderItem.product_id)
        )
        result = await self.db.execute(statement)
        return {product_id: int(sold or 0) for product_id, sold in result.all()}

    async def units_sold_since(self, since: datetime) -> int:
        statement = (
            select(func.coalesce(func.sum(OrderItem.quantity), 0))
            .join(Order, Order.id == OrderItem.order_id)
            .where(Order.created_at >= since)
        )
        return int((await self.db.execute(statement)).scalar_one() or 0)

    async def get_products(self, product_ids: List[int]) -> Dict[int, Product]:
        if not product_ids:
            return {}
        result = await self.db.execute(select(Product).where(Product.id.in_(product_ids)))
        return {product.id: product for product in result.scalars().all()}

    async def low_stock_products(self, threshold: int) -> List[Product]:
        statement = (
            select(Product)
            .where(Product.in_stock.is_(True), Product.stock_count > 0, Product.stock_count <= threshold)
            .order_by(Product.stock_count, Product.id)
        )
        return list((await self.db.execute(statement)).scalars().all())

    async def out_of_stock_products(self) -> List[Product]:
        statement = select(Product).where(self._out_of_stock()).order_by(Product.id)
        return list((await self.db.execute(statement)).scalars().all())

    async def list_inventory(self) -> List[Product]:
        statement = (
            select(Product)
            .options(selectinload(Product.category))
            .order_by(Product.updated_at.desc(), Product.id.desc())
        )
        return list((await self.db.execute(statement)).scalars().all())

    async def get_product(self, product_id: int) -> Optional[Product]:
        return await self.db.get(Product, product_id)

    async def update_stock(self, product: Product, stock_count: int) -> Product:
        logger.debug(f"[AnalyticsRepository] Stock du produit {product.id} -> {stock_count}")
        product.stock_count = stock_count
        product.in_stock = stock_count > 0
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product
