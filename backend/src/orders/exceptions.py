"""Exceptions spécifiques au domaine Order.

Chaque exception porte un `kind` stable, renvoyé tel quel aux clients dans le corps d'erreur.
"""
from decimal import Decimal


class OrderDomainException(Exception):
    """Classe de base pour les exceptions du domaine Order."""
    kind = "OrderError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TotalMismatchException(OrderDomainException):
    """Le total déclaré ne correspond pas à la somme des lignes."""
    kind = "TotalMismatch"

    def __init__(self, expected: Decimal, received: Decimal):
        self.expected = expected
        self.received = received
        super().__init__(f"Order total mismatch. Expected: {expected:.2f}, Received: {received:.2f}")


class OrderProductNotFoundException(OrderDomainException):
    kind = "ProductNotFound"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class OutOfStockException(OrderDomainException):
    kind = "OutOfStock"

    def __init__(self, product_id: int, product_name: str):
        self.product_id = product_id
        super().__init__(f'Product "{product_name}" is out of stock')


class InsufficientStockForOrderException(OrderDomainException):
    """Levée si le stock suivi est inférieur à la quantité demandée."""
    kind = "InsufficientStock"

    def __init__(self, product_id: int, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f'Not enough stock for product "{product_name}". Available: {available}, Requested: {requested}'
        )


class PriceMismatchException(OrderDomainException):
    kind = "PriceMismatch"

    def __init__(self, product_id: int, product_name: str, current_price: Decimal, order_price: Decimal):
        self.product_id = product_id
        self.current_price = current_price
        self.order_price = order_price
        super().__init__(
            f'Price mismatch for product "{product_name}". '
            f"Current price: {current_price}, Order price: {order_price}"
        )


class OrderNotFoundException(OrderDomainException):
    """Levée lorsqu'une commande spécifique n'est pas trouvée."""
    kind = "OrderNotFound"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order with ID {order_id} not found")


class OwnershipMismatchException(OrderDomainException):
    """Le téléphone fourni ne correspond pas à celui de la commande."""
    kind = "OwnershipMismatch"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__("Phone number does not match the order")


class OrderUpdateForbiddenException(OrderDomainException):
    """Levée lorsqu'une modification est interdite (commande terminée)."""
    kind = "OrderUpdateForbidden"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__("Completed orders can no longer be modified")


class OrderCreationFailedException(OrderDomainException):
    """Échec d'écriture en base pendant la création; rien n'a été persisté."""
    kind = "OrderCreationFailed"
