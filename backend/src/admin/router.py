"""
Routes du tableau de bord administrateur (/admin).

Toutes les routes exigent un compte administrateur.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Path, status

from src.admin.dependencies import AdminServiceDep
from src.admin.exceptions import AdminException, InventoryProductNotFoundException
from src.admin.models import (
    AnalyticsOverview,
    InventoryResponse,
    InventoryUpdate,
    InventoryUpdateResponse,
    OrderAnalyticsResponse,
    ProductAnalyticsResponse,
)
from src.auth.dependencies import AdminUserDep
from src.config import settings
from src.core.schemas import error_detail
from src.orders.dependencies import OrderServiceDep
from src.orders.models import AdminOrderUpdate, OrderListResponse, OrderMutationResponse, OrderStatusUpdate
from src.orders.router import handle_order_service_errors, parse_status_filter

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_admin_service_errors(e: Exception):
    if isinstance(e, InventoryProductNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_detail(e.kind, e.message))
    if isinstance(e, AdminException):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_detail(e.kind, e.message))
    logger.error(f"[Admin API] Unexpected error: {e}", exc_info=True)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_detail("InternalError", "Internal server error processing admin request."),
    )

# --- Commandes ---

@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
):
    return await service.list_all_orders(
        status=parse_status_filter(status_filter), search=search, page=page, limit=limit
    )


@router.put("/orders/{order_id}/status", response_model=OrderMutationResponse)
async def update_order_status(
    status_update: OrderStatusUpdate,
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    order_id: int = Path(..., ge=1),
):
    logger.info(f"[Admin API] Admin {admin_user.id} passe la commande {order_id} en {status_update.status.value}")
    try:
        order = await service.update_order_status(order_id, status_update.status)
    except Exception as e:
        handle_order_service_errors(e)
    return OrderMutationResponse(order=order)


@router.put("/orders/{order_id}", response_model=OrderMutationResponse)
async def update_order(
    update_data: AdminOrderUpdate,
    service: OrderServiceDep,
    admin_user: AdminUserDep,
    order_id: int = Path(..., ge=1),
):
    try:
        order = await service.update_order_info(order_id, update_data, is_admin=True)
    except Exception as e:
        handle_order_service_errors(e)
    return OrderMutationResponse(order=order)

# --- Analytique ---

@router.get("/analytics/overview", response_model=AnalyticsOverview)
async def analytics_overview(service: AdminServiceDep, admin_user: AdminUserDep):
    return await service.get_overview()


@router.get("/analytics/orders", response_model=OrderAnalyticsResponse)
async def order_analytics(
    service: AdminServiceDep,
    admin_user: AdminUserDep,
    period: str = Query("month"),
):
    """Commandes et revenus par jour (week, month) ou par mois (year)."""
    return await service.get_order_analytics(period)


@router.get("/analytics/products", response_model=ProductAnalyticsResponse)
async def product_analytics(service: AdminServiceDep, admin_user: AdminUserDep):
    return await service.get_product_analytics()

# --- Inventaire ---

@router.get("/inventory", response_model=InventoryResponse)
async def read_inventory(service: AdminServiceDep, admin_user: AdminUserDep):
    return await service.get_inventory()


@router.put("/inventory/{product_id}", response_model=InventoryUpdateResponse)
async def update_inventory(
    inventory_update: InventoryUpdate,
    service: AdminServiceDep,
    admin_user: AdminUserDep,
    product_id: int = Path(..., ge=1),
):
    try:
        return await service.update_inventory(product_id, inventory_update.stock_count)
    except Exception as e:
        handle_admin_service_errors(e)
