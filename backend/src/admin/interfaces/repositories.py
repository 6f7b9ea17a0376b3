from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from src.orders.config import OrderStatus
from src.products.models import Product


class AbstractAnalyticsRepository(ABC):
    """Lectures agrégées pour le tableau de bord et écriture du stock."""

    @abstractmethod
    async def revenue(self, since: Optional[datetime] = None) -> Decimal:
        """Somme des totaux des commandes sorties du statut NEW."""
        pass

    @abstractmethod
    async def count_orders(self, since: Optional[datetime] = None) -> int:
        pass

    @abstractmethod
    async def count_products(self) -> int:
        pass

    @abstractmethod
    async def count_users(self, since: Optional[datetime] = None) -> int:
        pass

    @abstractmethod
    async def count_low_stock(self, threshold: int) -> int:
        pass

    @abstractmethod
    async def count_out_of_stock(self) -> int:
        pass

    @abstractmethod
    async def orders_since(self, since: datetime) -> List[Tuple[Decimal, datetime, OrderStatus]]:
        """(total, created_at, status) des commandes créées depuis `since`."""
        pass

    @abstractmethod
    async def top_selling(self, limit: int) -> List[Tuple[int, int, Decimal]]:
        """(product_id, quantité vendue, prix moyen), les plus vendus d'abord."""
        pass

    @abstractmethod
    async def quantities_sold(self, product_ids: List[int]) -> Dict[int, int]:
        pass

    @abstractmethod
    async def units_sold_since(self, since: datetime) -> int:
        pass

    @abstractmethod
    async def get_products(self, product_ids: List[int]) -> Dict[int, Product]:
        pass

    @abstractmethod
    async def low_stock_products(self, threshold: int) -> List[Product]:
        pass

    @abstractmethod
    async def out_of_stock_products(self) -> List[Product]:
        pass

    @abstractmethod
    async def list_inventory(self) -> List[Product]:
        """Tous les produits, catégorie chargée, derniers modifiés d'abord."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    async def update_stock(self, product: Product, stock_count: int) -> Product:
        """Fixe le stock et en déduit la disponibilité."""
        pass
