import logging
from decimal import Decimal
from typing import Optional, Literal

from fastapi import APIRouter, HTTPException, status, Query, Path

from src.auth.dependencies import AdminUserDep
from src.products.dependencies import ProductServiceDep
from src.products.models import (
    ProductCreate,
    ProductUpdate,
    ProductReadWithReviews,
    ProductQuery,
    ProductListResponse,
    ProductMutationResponse,
    ProductDeleteResponse,
)
from src.products.exceptions import (
    ProductException,
    ProductNotFoundException,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_product_service_errors(e: Exception):
    if isinstance(e, ProductNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    elif isinstance(e, ProductException):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    else:
        logger.error(f"[Product API] Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error processing product request.")


@router.get("", response_model=ProductListResponse)
async def read_products(
    service: ProductServiceDep,
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    sort_by: Literal["createdAt", "price", "name", "rating"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
):
    """Liste paginée des produits avec recherche, filtres et tri."""
    query = ProductQuery(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await service.list_products(query)


@router.get("/{product_id}", response_model=ProductReadWithReviews)
async def read_product(service: ProductServiceDep, product_id: int = Path(..., ge=1)):
    """Détail d'un produit avec ses 5 avis les plus récents."""
    try:
        return await service.get_product(product_id)
    except Exception as e:
        handle_product_service_errors(e)


@router.post("", response_model=ProductMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, service: ProductServiceDep, admin_user: AdminUserDep):
    """Crée un produit (Admin requis). Les images sont des URLs issues de /upload/images."""
    logger.info(f"[Product API] create_product by admin {admin_user.email}: {product.name}")
    try:
        created = await service.create_product(product)
    except Exception as e:
        handle_product_service_errors(e)
    return ProductMutationResponse(success=True, product=created, message="Product created successfully")


@router.put("/{product_id}", response_model=ProductMutationResponse)
async def update_product(
    product: ProductUpdate,
    service: ProductServiceDep,
    admin_user: AdminUserDep,
    product_id: int = Path(..., ge=1),
):
    logger.info(f"[Product API] update_product by admin {admin_user.email}: ID={product_id}")
    try:
        updated = await service.update_product(product_id, product)
    except Exception as e:
        handle_product_service_errors(e)
    return ProductMutationResponse(success=True, product=updated, message="Product updated successfully")


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
async def delete_product(service: ProductServiceDep, admin_user: AdminUserDep, product_id: int = Path(..., ge=1)):
    logger.info(f"[Product API] delete_product by admin {admin_user.email}: ID={product_id}")
    try:
        await service.delete_product(product_id)
    except Exception as e:
        handle_product_service_errors(e)
    return ProductDeleteResponse(success=True, message="Product deleted successfully")
