# src/reviews/interfaces/repositories.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.reviews.models import Review


class AbstractReviewRepository(ABC):
    """Interface abstraite pour le repository des avis."""

    @abstractmethod
    async def product_exists(self, product_id: int) -> bool:
        pass

    @abstractmethod
    async def get_by_id(self, review_id: int) -> Optional[Review]:
        pass

    @abstractmethod
    async def get_by_product_and_user(self, product_id: int, user_id: int) -> Optional[Review]:
        pass

    @abstractmethod
    async def list_for_product(self, product_id: int, limit: Optional[int] = None) -> List[Review]:
        """Avis d'un produit, les plus récents d'abord."""
        pass

    @abstractmethod
    async def create(self, review: Review) -> Review:
        """Insère l'avis et recalcule la note du produit dans la même transaction."""
        pass

    @abstractmethod
    async def update(self, review: Review, values: Dict[str, Any]) -> Review:
        pass

    @abstractmethod
    async def delete(self, review: Review) -> None:
        pass
