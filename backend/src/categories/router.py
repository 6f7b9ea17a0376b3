import logging

from fastapi import APIRouter, Path, HTTPException, status

from src.categories.dependencies import CategoryServiceDep
from src.categories.models import (
    CategoryRead,
    CategoryCreate,
    CategoryUpdate,
    CategoryNamesResponse,
    CategoryMutationResponse,
    CategoryDeleteResponse,
)
from src.categories.constants import ERROR_CATEGORY_NOT_FOUND, ERROR_CATEGORY_NAME_EXISTS, MSG_CATEGORY_DELETED
from src.categories.exceptions import (
    CategoryException,
    CategoryNotFoundException,
    DuplicateCategoryNameException,
    CategoryInUseException,
)
from src.auth.dependencies import AdminUserDep

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Error Handling Helper ---
def handle_category_service_errors(e: Exception):
    if isinstance(e, CategoryNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_CATEGORY_NOT_FOUND)
    elif isinstance(e, DuplicateCategoryNameException):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ERROR_CATEGORY_NAME_EXISTS)
    elif isinstance(e, (CategoryInUseException, CategoryException)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    else:
        logger.error(f"[Category API] Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error processing category request.")

# --- Category Endpoints --- #

@router.get("", response_model=CategoryNamesResponse)
async def read_categories(service: CategoryServiceDep):
    """Récupère les noms de toutes les catégories (ordre alphabétique)."""
    return CategoryNamesResponse(categories=await service.list_category_names())

@router.post("", response_model=CategoryMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_new_category(
    category: CategoryCreate,
    service: CategoryServiceDep,
    current_admin_user: AdminUserDep,
):
    """Crée une nouvelle catégorie (Admin requis)."""
    logger.info(f"API create_category by admin {current_admin_user.email}: name={category.name}")
    try:
        created_category = await service.create_category(category_data=category)
    except Exception as e:
        handle_category_service_errors(e)
    return CategoryMutationResponse(success=True, category=created_category)

@router.get("/{category_id}", response_model=CategoryRead)
async def read_category(service: CategoryServiceDep, category_id: int = Path(..., ge=1)):
    """Récupère une catégorie par son ID."""
    try:
        return await service.get_category(category_id=category_id)
    except Exception as e:
        handle_category_service_errors(e)

@router.put("/{category_id}", response_model=CategoryMutationResponse)
async def update_existing_category(
    category: CategoryUpdate,
    service: CategoryServiceDep,
    current_admin_user: AdminUserDep,
    category_id: int = Path(..., ge=1),
):
    """Renomme une catégorie existante (Admin requis)."""
    logger.info(f"API update_category by admin {current_admin_user.email}: ID={category_id}")
    try:
        updated_category = await service.update_category(category_id=category_id, category_data=category)
    except Exception as e:
        handle_category_service_errors(e)
    return CategoryMutationResponse(success=True, category=updated_category)

@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
async def delete_existing_category(
    service: CategoryServiceDep,
    current_admin_user: AdminUserDep,
    category_id: int = Path(..., ge=1),
):
    """Supprime une catégorie qu'aucun produit n'utilise (Admin requis)."""
    logger.info(f"API delete_category by admin {current_admin_user.email}: ID={category_id}")
    try:
        await service.delete_category(category_id=category_id)
    except Exception as e:
        handle_category_service_errors(e)
    return CategoryDeleteResponse(success=True, message=MSG_CATEGORY_DELETED)
