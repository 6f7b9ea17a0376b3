"""Exceptions personnalisées pour le module categories."""

from typing import Optional

from src.categories.constants import ERROR_CATEGORY_IN_USE


class CategoryException(Exception):
    """Classe de base des erreurs du module categories."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class CategoryNotFoundException(CategoryException):
    """Exception levée lorsqu'une catégorie n'est pas trouvée."""
    def __init__(self, category_id: Optional[int] = None, message: str = "Catégorie non trouvée"):
        self.category_id = category_id
        super().__init__(f"{message}{f' (ID: {category_id})' if category_id else ''}.")

class DuplicateCategoryNameException(CategoryException):
    """Exception levée lorsqu'une catégorie avec le même nom existe déjà."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Une catégorie avec le nom '{name}' existe déjà.")

class CategoryInUseException(CategoryException):
    """Exception levée lorsqu'on supprime une catégorie encore référencée par des produits."""
    def __init__(self, category_id: int, product_count: int):
        self.category_id = category_id
        self.product_count = product_count
        super().__init__(f"{ERROR_CATEGORY_IN_USE} ({product_count} produit(s), ID: {category_id}).")
