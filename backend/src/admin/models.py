# src/admin/models.py
"""
Schémas du tableau de bord administrateur (analytique et inventaire).

Aucune table propre: tout est agrégé à partir des commandes, lignes, produits et utilisateurs.
"""
from typing import List, Optional
from datetime import datetime

from pydantic import Field as PydanticField

from src.core.schemas import CamelModel, StrictCamelModel, Money


class AnalyticsOverview(CamelModel):
    total_revenue: float
    total_orders: int
    total_products: int
    total_users: int
    monthly_revenue: float
    monthly_orders: int
    monthly_new_users: int
    average_order_value: float
    low_stock_products: int
    out_of_stock_products: int


class OrderAnalyticsPoint(CamelModel):
    # "YYYY-MM-DD" (semaine, mois) ou "YYYY-MM" (année)
    date: str
    orders: int
    revenue: float


class OrderAnalyticsResponse(CamelModel):
    data: List[OrderAnalyticsPoint]
    total_revenue: float
    total_orders: int
    average_daily_revenue: float


class ProductAnalytics(CamelModel):
    id: int
    name: str
    total_sold: int
    total_revenue: float
    rating: float
    review_count: int
    stock_count: int
    cart_adds: int = 0


class ProductAnalyticsResponse(CamelModel):
    top_selling_products: List[ProductAnalytics]
    low_stock_products: List[ProductAnalytics]
    out_of_stock_products: List[ProductAnalytics]
    total_products_sold: int


class InventoryItem(CamelModel):
    id: int
    name: str
    stock_count: int
    in_stock: bool
    category: Optional[str] = None
    price: Money
    updated_at: datetime
    low_stock_threshold: int
    is_low_stock: bool


class InventoryResponse(CamelModel):
    inventory: List[InventoryItem]
    total_products: int
    in_stock_products: int
    out_of_stock_products: int
    low_stock_products: int


class InventoryUpdate(StrictCamelModel):
    stock_count: int = PydanticField(ge=0)


class InventoryProduct(CamelModel):
    id: int
    name: str
    stock_count: int
    in_stock: bool


class InventoryUpdateResponse(CamelModel):
    success: bool = True
    message: str = "Inventory updated successfully"
    product: InventoryProduct
