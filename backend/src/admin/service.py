"""
Service du tableau de bord administrateur: indicateurs, analytique des ventes et inventaire.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from src.admin.exceptions import InventoryProductNotFoundException
from src.admin.interfaces.repositories import AbstractAnalyticsRepository
from src.admin.models import (
    AnalyticsOverview,
    InventoryItem,
    InventoryProduct,
    InventoryResponse,
    InventoryUpdateResponse,
    OrderAnalyticsPoint,
    OrderAnalyticsResponse,
    ProductAnalytics,
    ProductAnalyticsResponse,
)
from src.core.schemas import utc_now
from src.orders.config import OrderStatus
from src.products.models import Product

logger = logging.getLogger(__name__)

TOP_SELLING_LIMIT = 10

# Fenêtre d'analyse et format de regroupement par période
PERIODS = {
    "week": (timedelta(days=7), "%Y-%m-%d"),
    "month": (timedelta(days=30), "%Y-%m-%d"),
    "year": (timedelta(days=365), "%Y-%m"),
}


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def money(value) -> float:
    return round(float(value or 0), 2)


class AdminService:
    """Lectures agrégées du tableau de bord et mise à jour du stock."""

    def __init__(self, repository: AbstractAnalyticsRepository, low_stock_threshold: int):
        self.repository = repository
        self.low_stock_threshold = low_stock_threshold

    def _is_low_stock(self, product: Product) -> bool:
        return 0 < product.stock_count <= self.low_stock_threshold

    async def get_overview(self, now: Optional[datetime] = None) -> AnalyticsOverview:
        month_start = start_of_month(now or utc_now())

        total_revenue = await self.repository.revenue()
        total_orders = await self.repository.count_orders()
        average = total_revenue / total_orders if total_orders else Decimal("0")

        return AnalyticsOverview(
            total_revenue=money(total_revenue),
            total_orders=total_orders,
            total_products=await self.repository.count_products(),
            total_users=await self.repository.count_users(),
            monthly_revenue=money(await self.repository.revenue(since=month_start)),
            monthly_orders=await self.repository.count_orders(since=month_start),
            monthly_new_users=await self.repository.count_users(since=month_start),
            average_order_value=money(average),
            low_stock_products=await self.repository.count_low_stock(self.low_stock_threshold),
            out_of_stock_products=await self.repository.count_out_of_stock(),
        )

    async def get_order_analytics(
        self, period: str = "month", now: Optional[datetime] = None
    ) -> OrderAnalyticsResponse:
        """
        Commandes et chiffre d'affaires regroupés par jour (semaine, mois) ou par mois (année).

        Une période inconnue est traitée comme "month". Le chiffre d'affaires exclut les commandes NEW.
        """
        window, date_format = PERIODS.get(period, PERIODS["month"])
        since = (now or utc_now()) - window
        rows = await self.repository.orders_since(since)

        buckets: Dict[str, dict] = {}
        for total, created_at, status in rows:
            bucket = buckets.setdefault(created_at.strftime(date_format), {"orders": 0, "revenue": Decimal("0")})
            bucket["orders"] += 1
            if OrderStatus(status) != OrderStatus.NEW:
                bucket["revenue"] += Decimal(str(total))

        data = [
            OrderAnalyticsPoint(date=date, orders=values["orders"], revenue=money(values["revenue"]))
            for date, values in sorted(buckets.items())
        ]
        total_revenue = sum((values["revenue"] for values in buckets.values()), Decimal("0"))
        total_orders = sum(point.orders for point in data)
        logger.debug(f"[AdminService] Analytique commandes ({period}): {len(data)} point(s)")
        return OrderAnalyticsResponse(
            data=data,
            total_revenue=money(total_revenue),
            total_orders=total_orders,
            average_daily_revenue=money(total_revenue / len(data)) if data else 0.0,
        )

    def _product_analytics(self, product: Product, sold: int, unit_price: Decimal) -> ProductAnalytics:
        return ProductAnalytics(
            id=product.id,
            name=product.name,
            total_sold=sold,
            total_revenue=money(unit_price * sold),
            rating=product.rating,
            review_count=product.review_count,
            stock_count=product.stock_count,
        )

    async def _with_sales(self, products: List[Product]) -> List[ProductAnalytics]:
        sold = await self.repository.quantities_sold([product.id for product in products])
        return [
            self._product_analytics(product, sold.get(product.id, 0), product.price)
            for product in products
        ]

    async def get_product_analytics(self, now: Optional[datetime] = None) -> ProductAnalyticsResponse:
        month_start = start_of_month(now or utc_now())

        top_rows = await self.repository.top_selling(TOP_SELLING_LIMIT)
        products = await self.repository.get_products([product_id for product_id, _, _ in top_rows])
        top_selling = []
        for product_id, sold, avg_price in top_rows:
            product = products.get(product_id)
            if product is None:
                continue
            top_selling.append(self._product_analytics(product, sold, avg_price))

        return ProductAnalyticsResponse(
            top_selling_products=top_selling,
            low_stock_products=await self._with_sales(
                await self.repository.low_stock_products(self.low_stock_threshold)
            ),
            out_of_stock_products=await self._with_sales(await self.repository.out_of_stock_products()),
            total_products_sold=await self.repository.units_sold_since(month_start),
        )

    async def get_inventory(self) -> InventoryResponse:
        products = await self.repository.list_inventory()
        inventory = [
            InventoryItem(
                id=product.id,
                name=product.name,
                stock_count=product.stock_count,
                in_stock=product.in_stock,
                category=product.category.name if product.category else None,
                price=product.price,
                updated_at=product.updated_at,
                low_stock_threshold=self.low_stock_threshold,
                is_low_stock=self._is_low_stock(product),
            )
            for product in products
        ]
        return InventoryResponse(
            inventory=inventory,
            total_products=len(products),
            in_stock_products=sum(1 for p in products if p.in_stock and p.stock_count > 0),
            out_of_stock_products=sum(1 for p in products if not p.in_stock or p.stock_count == 0),
            low_stock_products=sum(1 for item in inventory if item.is_low_stock),
        )

    async def update_inventory(self, product_id: int, stock_count: int) -> InventoryUpdateResponse:
        product = await self.repository.get_product(product_id)
        if product is None:
            logger.warning(f"[AdminService] Produit {product_id} introuvable pour mise à jour du stock.")
            raise InventoryProductNotFoundException(product_id)
        updated = await self.repository.update_stock(product, stock_count)
        logger.info(f"[AdminService] Stock du produit {product_id} fixé à {stock_count}.")
        return InventoryUpdateResponse(product=InventoryProduct.model_validate(updated))
