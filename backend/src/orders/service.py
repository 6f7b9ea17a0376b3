"""
Service de gestion des commandes.

Création contrôlée par OrderIntegrityValidator, consultation par téléphone,
cycle de vie des statuts, mise à jour des informations client et statistiques.
"""
import logging
import math
from typing import List, Optional, Union

from src.config import settings
from src.orders.config import ALLOWED_STATUS_TRANSITIONS, PROCESSING_STATUSES, OrderStatus
from src.orders.exceptions import (
    OrderNotFoundException,
    OrderUpdateForbiddenException,
    OwnershipMismatchException,
)
from src.orders.integrity import OrderIntegrityValidator
from src.orders.interfaces.repositories import AbstractOrderRepository
from src.orders.models import (
    AdminOrderUpdate,
    Order,
    OrderCreate,
    OrderInfoUpdate,
    OrderListResponse,
    OrderRead,
    OrderStats,
)

logger = logging.getLogger(__name__)


class OrderService:
    """Service applicatif des commandes."""

    def __init__(self, repository: AbstractOrderRepository, validator: OrderIntegrityValidator):
        self.repository = repository
        self.validator = validator

    async def _get_order_or_raise(self, order_id: int) -> Order:
        order = await self.repository.get_by_id(order_id)
        if order is None:
            logger.warning(f"[OrderService] Commande ID {order_id} non trouvée.")
            raise OrderNotFoundException(order_id)
        return order

    async def create_order(self, order_data: OrderCreate) -> OrderRead:
        """
        Valide la commande contre le catalogue puis la persiste avec ses lignes.

        Toutes les vérifications ont lieu avant la moindre écriture. Le total enregistré
        est la somme recalculée; chaque ligne conserve le prix soumis par le client.
        """
        customer = order_data.customer_info
        logger.info(
            f"[OrderService] Création de commande pour {customer.full_name} "
            f"({len(order_data.items)} ligne(s), total déclaré {order_data.total})"
        )
        validated = await self.validator.validate_and_enrich(order_data.items, order_data.total)

        order = await self.repository.create_order_with_items(
            order_data={
                "customer_name": customer.full_name,
                "phone": customer.phone,
                "address": customer.address,
                "notes": customer.notes,
                "total": validated.total,
                "status": OrderStatus.NEW,
            },
            items_data=[item.model_dump() for item in validated.items],
        )
        logger.info(f"[OrderService] Commande {order.id} créée (total {order.total}).")
        return OrderRead.model_validate(order)

    async def get_orders_by_phone(self, phone: str) -> List[OrderRead]:
        orders = await self.repository.list_by_phone(phone)
        logger.debug(f"[OrderService] {len(orders)} commande(s) pour le téléphone {phone}")
        return [OrderRead.model_validate(order) for order in orders]

    def _log_transition(self, order: Order, new_status: OrderStatus) -> None:
        current = OrderStatus(order.status)
        if new_status == current:
            return
        if new_status not in ALLOWED_STATUS_TRANSITIONS[current]:
            logger.warning(
                f"[OrderService] Transition inhabituelle pour la commande {order.id}: "
                f"{current.value} -> {new_status.value}"
            )
        else:
            logger.info(f"[OrderService] Commande {order.id}: {current.value} -> {new_status.value}")

    async def update_order_status(self, order_id: int, new_status: OrderStatus) -> OrderRead:
        """Change le statut (admin). Toute transition est appliquée; les sauts sont journalisés."""
        order = await self._get_order_or_raise(order_id)
        self._log_transition(order, new_status)
        updated = await self.repository.update(order, {"status": new_status})
        return OrderRead.model_validate(updated)

    async def update_order_info(
        self,
        order_id: int,
        update_data: Union[OrderInfoUpdate, AdminOrderUpdate],
        requester_phone: Optional[str] = None,
        is_admin: bool = False,
    ) -> OrderRead:
        """
        Met à jour les informations client d'une commande.

        Un client doit prouver la propriété via le téléphone de la commande
        et ne peut plus modifier une commande terminée. Un admin n'a aucune de ces restrictions.
        """
        order = await self._get_order_or_raise(order_id)

        if not is_admin:
            if requester_phone is None or requester_phone.lower() != order.phone.lower():
                logger.warning(f"[OrderService] Téléphone non concordant pour la commande {order_id}.")
                raise OwnershipMismatchException(order_id)
            if order.status == OrderStatus.COMPLETED:
                logger.warning(f"[OrderService] Modification refusée, commande {order_id} terminée.")
                raise OrderUpdateForbiddenException(order_id)

        values = update_data.model_dump(exclude_unset=True)
        if "status" in values:
            if is_admin:
                self._log_transition(order, values["status"])
            else:
                values.pop("status")

        if not values:
            return OrderRead.model_validate(order)

        updated = await self.repository.update(order, values)
        logger.info(f"[OrderService] Commande {order_id} mise à jour ({', '.join(values)}).")
        return OrderRead.model_validate(updated)

    async def list_all_orders(
        self,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> OrderListResponse:
        limit = min(limit, settings.MAX_PAGE_SIZE)
        orders, total = await self.repository.list_orders(
            status=status, search=search, offset=(page - 1) * limit, limit=limit
        )
        return OrderListResponse(
            orders=[OrderRead.model_validate(order) for order in orders],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    async def get_order_stats(self) -> OrderStats:
        counts = await self.repository.count_by_status()
        revenue = await self.repository.completed_revenue()
        return OrderStats(
            total_orders=sum(counts.values()),
            new_orders=counts.get(OrderStatus.NEW, 0),
            processing_orders=sum(counts.get(status, 0) for status in PROCESSING_STATUSES),
            completed_orders=counts.get(OrderStatus.COMPLETED, 0),
            total_revenue=round(float(revenue or 0), 2),
        )
