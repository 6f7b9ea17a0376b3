# src/orders/repositories.py
import logging
from typing import List, Optional, Tuple, Dict, Any

from sqlalchemy import select, func, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.config import settings
from src.core.schemas import utc_now
from src.orders.config import OrderStatus
from src.orders.exceptions import OrderCreationFailedException
from src.orders.interfaces.repositories import AbstractOrderRepository, AbstractProductCatalog
from src.orders.models import Order, OrderItem
from src.products.models import Product
from src.users.models import User

logger = logging.getLogger(__name__)

# Jamais un hash bcrypt valide: le compte invité ne peut pas se connecter
GUEST_PASSWORD_HASH = "!guest-account-no-login"


class SQLAlchemyProductCatalog(AbstractProductCatalog):
    """Lecture groupée des produits référencés par une commande."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_products_by_ids(self, product_ids: List[int]) -> Dict[int, Product]:
        if not product_ids:
            return {}
        result = await self.db.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {product.id: product for product in result.scalars().all()}
        logger.debug(f"[ProductCatalog] {len(products)}/{len(product_ids)} produit(s) trouvé(s)")
        return products


class SQLAlchemyOrderRepository(AbstractOrderRepository):
    """Implémentation SQLAlchemy du repository des commandes, lignes chargées via selectinload."""

    def __init__(
        self,
        db_session: AsyncSession,
        guest_email: str = settings.GUEST_EMAIL,
        guest_name: str = settings.GUEST_NAME,
    ):
        self.db = db_session
        self.guest_email = guest_email
        self.guest_name = guest_name

    def _with_items(self):
        return (
            select(Order)
            .options(selectinload(Order.items))
            .execution_options(populate_existing=True)
        )

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        logger.debug(f"[OrderRepository] Getting order by ID: {order_id}")
        result = await self.db.execute(self._with_items().where(Order.id == order_id))
        return result.scalars().first()

    async def _ensure_guest_user(self) -> int:
        """Crée l'utilisateur invité s'il n'existe pas (sans conflit concurrent) et retourne son ID."""
        now = utc_now()
        values = {
            "email": self.guest_email,
            "name": self.guest_name,
            "password_hash": GUEST_PASSWORD_HASH,
            "is_admin": False,
            "created_at": now,
            "updated_at": now,
        }
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            statement = postgresql.insert(User).values(**values).on_conflict_do_nothing(index_elements=["email"])
            await self.db.execute(statement)
        elif dialect == "sqlite":
            statement = sqlite.insert(User).values(**values).on_conflict_do_nothing(index_elements=["email"])
            await self.db.execute(statement)
        else:
            exists = await self.db.execute(select(User.id).where(User.email == self.guest_email))
            if exists.scalar_one_or_none() is None:
                self.db.add(User(**values))
                await self.db.flush()

        result = await self.db.execute(select(User.id).where(User.email == self.guest_email))
        return result.scalar_one()

    async def create_order_with_items(
        self,
        order_data: Dict[str, Any],
        items_data: List[Dict[str, Any]],
    ) -> Order:
        logger.debug(f"[OrderRepository] Creating order with {len(items_data)} item(s)")
        try:
            guest_id = await self._ensure_guest_user()
            order = Order(user_id=guest_id, **order_data)
            order.items = [OrderItem(**item) for item in items_data]
            self.db.add(order)
            await self.db.flush()
            order_id = order.id
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[OrderRepository] Error creating order with items: {e}", exc_info=True)
            raise OrderCreationFailedException("Failed to create order")

        logger.info(f"[OrderRepository] Order ID {order_id} created with {len(items_data)} item(s).")
        return await self.get_by_id(order_id)

    async def list_by_phone(self, phone: str) -> List[Order]:
        logger.debug(f"[OrderRepository] Listing orders for phone: {phone}")
        statement = (
            self._with_items()
            .where(func.lower(Order.phone) == phone.lower())
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def update(self, order: Order, values: Dict[str, Any]) -> Order:
        order_id = order.id
        logger.debug(f"[OrderRepository] Updating order ID: {order_id} with {list(values)}")
        for field, value in values.items():
            setattr(order, field, value)
        self.db.add(order)
        await self.db.commit()
        return await self.get_by_id(order_id)

    def _filters(self, status: Optional[OrderStatus], search: Optional[str]) -> list:
        conditions = []
        if status is not None:
            conditions.append(Order.status == status)
        if search:
            pattern = f"%{search}%"
            matches = [
                Order.customer_name.ilike(pattern),
                Order.phone.ilike(pattern),
                Order.address.ilike(pattern),
            ]
            if search.isdigit():
                matches.append(Order.id == int(search))
            conditions.append(or_(*matches))
        return conditions

    async def list_orders(
        self,
        status: Optional[OrderStatus],
        search: Optional[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Order], int]:
        conditions = self._filters(status, search)

        count_statement = select(func.count()).select_from(Order).where(*conditions)
        total = (await self.db.execute(count_statement)).scalar_one()

        statement = (
            self._with_items()
            .where(*conditions)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(statement)
        return list(result.scalars().all()), total

    async def count_by_status(self) -> Dict[OrderStatus, int]:
        result = await self.db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status))
        counts = {status: 0 for status in OrderStatus}
        for status, count in result.all():
            counts[OrderStatus(status)] = count
        return counts

    async def completed_revenue(self) -> Any:
        statement = select(func.coalesce(func.sum(Order.total), 0)).where(Order.status == OrderStatus.COMPLETED)
        return (await self.db.execute(statement)).scalar_one()
