from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from src.orders.config import OrderStatus
from src.orders.models import Order
from src.products.models import Product


class AbstractProductCatalog(ABC):
    """Lecture du catalogue utilisée par le contrôle d'intégrité des commandes."""

    @abstractmethod
    async def get_products_by_ids(self, product_ids: List[int]) -> Dict[int, Product]:
        """Produits existants indexés par ID. Les IDs inconnus sont absents du résultat."""
        pass


class AbstractOrderRepository(ABC):
    """Interface abstraite pour le repository des commandes et de leurs lignes."""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """Récupère une commande par son ID, lignes chargées."""
        pass

    @abstractmethod
    async def create_order_with_items(
        self,
        order_data: Dict[str, Any],
        items_data: List[Dict[str, Any]],
    ) -> Order:
        """
        Crée l'utilisateur invité si besoin, la commande et ses lignes dans une seule transaction.
        Rien n'est persisté en cas d'échec.
        """
        pass

    @abstractmethod
    async def list_by_phone(self, phone: str) -> List[Order]:
        """Commandes dont le téléphone correspond (insensible à la casse), les plus récentes d'abord."""
        pass

    @abstractmethod
    async def update(self, order: Order, values: Dict[str, Any]) -> Order:
        pass

    @abstractmethod
    async def list_orders(
        self,
        status: Optional[OrderStatus],
        search: Optional[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Order], int]:
        """Page de commandes filtrées et nombre total correspondant."""
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[OrderStatus, int]:
        pass

    @abstractmethod
    async def completed_revenue(self) -> Any:
        """Somme des totaux des commandes terminées."""
        pass
