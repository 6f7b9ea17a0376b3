"""
Contrôle d'intégrité des commandes.

Vérifie une commande soumise par un client contre le catalogue avant toute écriture:
cohérence du total déclaré, existence des produits, disponibilité du stock et
dérive de prix. Les lignes validées sont enrichies avec le nom et l'image du produit.
"""
import logging
from decimal import Decimal
from typing import List, Sequence

from src.core.schemas import OrmBaseModel
from src.orders.config import MONEY_QUANTUM, PRICE_TOLERANCE, TOTAL_TOLERANCE
from src.orders.exceptions import (
    InsufficientStockForOrderException,
    OrderProductNotFoundException,
    OutOfStockException,
    PriceMismatchException,
    TotalMismatchException,
)
from src.orders.interfaces.repositories import AbstractProductCatalog
from src.orders.models import OrderItemIn
from src.products.models import Product

logger = logging.getLogger(__name__)


class ValidatedOrderItem(OrmBaseModel):
    """Ligne acceptée, prête à être persistée."""
    product_id: int
    name: str
    # prix soumis par le client, accepté dans la tolérance
    price: Decimal
    quantity: int
    image: str


class ValidatedOrder(OrmBaseModel):
    items: List[ValidatedOrderItem]
    total: Decimal


def compute_total(items: Sequence[OrderItemIn]) -> Decimal:
    return sum((item.price * item.quantity for item in items), Decimal("0"))


def check_total(items: Sequence[OrderItemIn], declared_total: Decimal) -> Decimal:
    """Retourne le total recalculé, ou lève TotalMismatch si l'écart dépasse la tolérance."""
    computed = compute_total(items)
    if abs(computed - declared_total) > TOTAL_TOLERANCE:
        raise TotalMismatchException(expected=computed, received=declared_total)
    return computed


def price_within_tolerance(current_price: Decimal, submitted_price: Decimal) -> bool:
    if current_price == 0:
        return submitted_price == 0
    return abs(current_price - submitted_price) / current_price <= PRICE_TOLERANCE


def check_item(product: Product, item: OrderItemIn) -> None:
    """Stock puis prix, pour une ligne dont le produit existe."""
    if not product.in_stock:
        raise OutOfStockException(product.id, product.name)
    # stock_count == 0: stock non suivi
    if 0 < product.stock_count < item.quantity:
        raise InsufficientStockForOrderException(
            product.id, product.name, available=product.stock_count, requested=item.quantity
        )
    if not price_within_tolerance(product.price, item.price):
        raise PriceMismatchException(product.id, product.name, product.price, item.price)


def primary_image(product: Product) -> str:
    return product.images[0] if product.images else ""


class OrderIntegrityValidator:
    """Valide et enrichit les lignes d'une commande à partir du catalogue."""

    def __init__(self, catalog: AbstractProductCatalog):
        self.catalog = catalog

    async def validate_and_enrich(
        self, items: Sequence[OrderItemIn], declared_total: Decimal
    ) -> ValidatedOrder:
        """
        Les contrôles s'arrêtent à la première erreur, dans cet ordre:
        total, puis pour chaque ligne dans l'ordre soumis: existence, stock, prix.

        Raises:
            TotalMismatchException, OrderProductNotFoundException, OutOfStockException,
            InsufficientStockForOrderException, PriceMismatchException
        """
        computed_total = check_total(items, declared_total)

        products = await self.catalog.get_products_by_ids(list({item.product_id for item in items}))

        validated: List[ValidatedOrderItem] = []
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise OrderProductNotFoundException(item.product_id)
            check_item(product, item)
            validated.append(
                ValidatedOrderItem(
                    product_id=product.id,
                    name=product.name,
                    price=item.price,
                    quantity=item.quantity,
                    image=primary_image(product),
                )
            )

        logger.debug(f"[OrderIntegrity] {len(validated)} ligne(s) validée(s), total {computed_total}")
        return ValidatedOrder(items=validated, total=computed_total.quantize(MONEY_QUANTUM))
