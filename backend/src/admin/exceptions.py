"""Exceptions du module admin."""


class AdminException(Exception):
    """Classe de base des erreurs du tableau de bord admin."""
    kind = "AdminError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class InventoryProductNotFoundException(AdminException):
    kind = "ProductNotFound"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("Product not found")
