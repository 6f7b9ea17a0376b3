"""
Routes API des commandes.

Public: création d'une commande invité, consultation par téléphone,
mise à jour des informations client (preuve de propriété par téléphone).
Admin: liste filtrée, statistiques, changement de statut, mise à jour complète.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Path, status

from src.auth.dependencies import AdminUserDep, OptionalUserDep
from src.config import settings
from src.core.schemas import error_detail
from src.orders.config import OrderStatus
from src.orders.dependencies import OrderServiceDep
from src.orders.exceptions import (
    OrderDomainException,
    OrderNotFoundException,
    OrderCreationFailedException,
)
from src.orders.models import (
    AdminOrderUpdate,
    OrderCreate,
    OrderCreateResponse,
    OrderInfoUpdate,
    OrderListResponse,
    OrderMutationResponse,
    OrdersByPhoneResponse,
    OrderStats,
    OrderStatusUpdate,
    OrderRead,
    OrderUpdateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_order_service_errors(e: Exception):
    """Traduit les exceptions du domaine Order en HTTPException avec un corps {kind, message}."""
    if isinstance(e, OrderNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_detail(e.kind, e.message))
    if isinstance(e, OrderCreationFailedException):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_detail(e.kind, e.message)
        )
    if isinstance(e, OrderDomainException):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_detail(e.kind, e.message))
    logger.error(f"[Order API] Unexpected error: {e}", exc_info=True)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_detail("InternalError", "Internal server error processing order request."),
    )


def parse_status_filter(value: Optional[str]) -> Optional[OrderStatus]:
    """Statut de filtrage; une valeur inconnue est ignorée."""
    if not value:
        return None
    try:
        return OrderStatus(value.upper())
    except ValueError:
        logger.debug(f"[Order API] Filtre de statut inconnu ignoré: {value}")
        return None


@router.post("", response_model=OrderCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_order(order_data: OrderCreate, service: OrderServiceDep):
    """Crée une commande invité après contrôle du total, du stock et des prix."""
    try:
        order = await service.create_order(order_data)
    except Exception as e:
        handle_order_service_errors(e)
    return OrderCreateResponse(order=order)


@router.get("", response_model=OrdersByPhoneResponse)
async def get_orders_by_phone(service: OrderServiceDep, phone: str = Query(..., min_length=1)):
    """Commandes associées à un numéro de téléphone, les plus récentes d'abord."""
    orders = await service.get_orders_by_phone(phone)
    if not orders:
        message = "No orders found for this phone number"
    else:
        message = f"Found {len(orders)} order(s) for phone number"
    return OrdersByPhoneResponse(orders=orders, total=len(orders), message=message)


@router.get("/all", response_model=OrderListResponse)
async def list_all_orders(
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
):
    logger.info(f"[Order API] Liste des commandes demandée par admin {admin_user.id}")
    return await service.list_all_orders(
        status=parse_status_filter(status_filter), search=search, page=page, limit=limit
    )


@router.get("/stats", response_model=OrderStats)
async def get_order_stats(service: OrderServiceDep, admin_user: AdminUserDep):
    return await service.get_order_stats()


@router.put("/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    status_update: OrderStatusUpdate,
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    order_id: int = Path(..., ge=1),
):
    """Change le statut d'une commande (admin)."""
    try:
        order = await service.update_order_status(order_id, status_update.status)
    except Exception as e:
        handle_order_service_errors(e)
    return order


@router.put("/{order_id}/admin", response_model=OrderMutationResponse)
async def admin_update_order(
    update_data: AdminOrderUpdate,
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    order_id: int = Path(..., ge=1),
):
    """Mise à jour complète par un admin, statut compris, sans contrôle de propriété."""
    try:
        order = await service.update_order_info(order_id, update_data, is_admin=True)
    except Exception as e:
        handle_order_service_errors(e)
    return OrderMutationResponse(order=order)


@router.put("/{order_id}", response_model=OrderUpdateResponse)
async def update_order_info(
    update_data: OrderInfoUpdate,
    service: OrderServiceDep,
    current_user: OptionalUserDep,
    order_id: int = Path(..., ge=1),
    phone: Optional[str] = Query(None),
):
    """
    Mise à jour des informations client.

    Sans compte admin, le paramètre `phone` doit correspondre au téléphone de la commande.
    """
    is_admin = current_user is not None and current_user.is_admin
    try:
        order = await service.update_order_info(order_id, update_data, requester_phone=phone, is_admin=is_admin)
    except Exception as e:
        handle_order_service_errors(e)
    return OrderUpdateResponse(order=order)
