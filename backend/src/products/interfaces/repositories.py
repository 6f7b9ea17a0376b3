from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Tuple

from src.products.models import Product, ProductQuery
from src.reviews.models import Review

class AbstractProductRepository(ABC):
    """Interface abstraite pour l'accès aux produits."""

    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Récupère un produit (catégorie chargée) par son ID."""
        pass

    @abstractmethod
    async def list(self, query: ProductQuery) -> Tuple[List[Product], int]:
        """Liste filtrée, triée et paginée; retourne aussi le total avant pagination."""
        pass

    @abstractmethod
    async def category_exists(self, category_id: int) -> bool:
        pass

    @abstractmethod
    async def latest_reviews(self, product_id: int, limit: int) -> List[Review]:
        pass

    @abstractmethod
    async def count_order_items(self, product_id: int) -> int:
        """Nombre de lignes de commande qui référencent le produit."""
        pass

    @abstractmethod
    async def create(self, values: Dict[str, Any]) -> Product:
        pass

    @abstractmethod
    async def update(self, product: Product, values: Dict[str, Any]) -> Product:
        pass

    @abstractmethod
    async def delete(self, product: Product) -> None:
        """Supprime le produit et ses avis."""
        pass
