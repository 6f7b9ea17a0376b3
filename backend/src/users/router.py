"""
Module définissant les routes API FastAPI pour les utilisateurs.

Contient les endpoints pour:
- GET /users : Liste de tous les utilisateurs (admin).
- GET /users/me : Informations de l'utilisateur connecté.
- PUT /users/{user_id} : Mise à jour d'un profil (soi-même ou admin).
"""
import logging

from fastapi import APIRouter, HTTPException, status

from src.users import models
from src.users.dependencies import UserServiceDep
from src.users.exceptions import (
    UserError,
    UserNotFoundError,
    UserAlreadyExistsError,
    UserUpdateForbiddenError,
)
from src.auth.dependencies import CurrentUserDep, AdminUserDep

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_user_service_errors(e: Exception):
    """Traduit les exceptions du service utilisateur en HTTPException."""
    if isinstance(e, UserNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, UserAlreadyExistsError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already taken")
    if isinstance(e, UserUpdateForbiddenError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    if isinstance(e, UserError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    logger.error(f"[Router] Erreur inattendue du service utilisateur: {e}", exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne du serveur.")


@router.get("", response_model=models.UserListResponse)
async def list_users(user_service: UserServiceDep, admin_user: AdminUserDep):
    """Liste tous les utilisateurs (admin uniquement), les plus récents d'abord."""
    logger.info("[Router] Liste des utilisateurs demandée par admin ID: %s", admin_user.id)
    users = await user_service.list_users()
    return models.UserListResponse(users=users)


@router.get("/me", response_model=models.UserResponse)
async def read_users_me(current_user: CurrentUserDep, user_service: UserServiceDep):
    """Récupère les informations de l'utilisateur actuellement connecté."""
    logger.info("[Router] Récupération infos pour user ID: %s", current_user.id)
    try:
        user = await user_service.get_user_by_id(current_user.id)
    except Exception as e:
        handle_user_service_errors(e)
    return models.UserResponse(user=user)


@router.put("/{user_id}", response_model=models.UserUpdateResponse)
async def update_user(
    user_id: int,
    user_update: models.UserUpdate,
    current_user: CurrentUserDep,
    user_service: UserServiceDep,
):
    """Met à jour un profil utilisateur (le sien, ou n'importe lequel pour un admin)."""
    logger.info("[Router] Mise à jour du profil %s par user ID: %s", user_id, current_user.id)
    try:
        user = await user_service.update_user(current_user, user_id, user_update)
    except Exception as e:
        handle_user_service_errors(e)
    return models.UserUpdateResponse(success=True, user=user)


user_router = router
