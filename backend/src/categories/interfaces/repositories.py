# src/categories/interfaces/repositories.py
from abc import ABC, abstractmethod
from typing import List, Optional

from src.categories.models import Category, CategoryCreate, CategoryRead, CategoryUpdate


class AbstractCategoryRepository(ABC):
    """Interface abstraite pour le repository des catégories."""

    @abstractmethod
    async def get_by_id(self, category_id: int) -> Optional[CategoryRead]:
        """Récupère une catégorie par son ID (schéma Read)."""
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Category]:
        """Récupère une catégorie par son nom, sans tenir compte de la casse (modèle Table)."""
        pass

    @abstractmethod
    async def list_names(self) -> List[str]:
        """Noms de toutes les catégories, triés par ordre alphabétique."""
        pass

    @abstractmethod
    async def count_products(self, category_id: int) -> int:
        """Nombre de produits rattachés à la catégorie."""
        pass

    @abstractmethod
    async def create(self, category_data: CategoryCreate) -> CategoryRead:
        """Crée une nouvelle catégorie (retourne schéma Read)."""
        pass

    @abstractmethod
    async def update(self, category_id: int, category_data: CategoryUpdate) -> Optional[CategoryRead]:
        """Met à jour une catégorie (None si elle n'existe pas)."""
        pass

    @abstractmethod
    async def delete(self, category_id: int) -> bool:
        """Supprime une catégorie (False si elle n'existe pas)."""
        pass
