"""Exceptions personnalisées pour le module products."""


class ProductException(Exception):
    """Classe de base des erreurs du catalogue produits."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class ProductNotFoundException(ProductException):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")

class ProductCategoryNotFoundException(ProductException):
    """La catégorie référencée par le produit n'existe pas."""
    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with ID {category_id} not found")

class ProductInUseException(ProductException):
    """Suppression refusée: le produit figure dans des commandes."""
    def __init__(self, product_id: int, order_item_count: int):
        self.product_id = product_id
        self.order_item_count = order_item_count
        super().__init__(
            "Cannot delete product as it is referenced in existing orders. "
            "Consider marking it as out of stock instead."
        )
