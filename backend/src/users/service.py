"""
Module contenant la logique métier (services) pour les utilisateurs.
"""
import logging
from typing import List, Optional

from src.users.models import User, UserCreateInternal, UserRead, UserUpdate
from src.users.interfaces.repositories import AbstractUserRepository
from src.users.exceptions import UserAlreadyExistsError, UserNotFoundError, UserUpdateForbiddenError

# Import des fonctions de sécurité (hashage)
from src.auth.security import get_password_hash

logger = logging.getLogger(__name__)

class UserService:
    """Service pour gérer les opérations sur les utilisateurs."""

    def __init__(self, repository: AbstractUserRepository):
        self.repository = repository

    async def create_user(self, email: str, password: str, name: Optional[str] = None, is_admin: bool = False) -> User:
        """Crée un nouvel utilisateur avec un mot de passe haché. Retourne le modèle de table."""
        logger.debug(f"[UserService] Tentative de création utilisateur: {email}")

        if await self.repository.email_exists(email):
            logger.warning(f"[UserService] Email déjà existant: {email}")
            raise UserAlreadyExistsError(email)

        user = await self.repository.create(
            UserCreateInternal(
                email=email,
                name=name,
                password_hash=get_password_hash(password),
                is_admin=is_admin,
            )
        )
        logger.info(f"[UserService] Utilisateur créé avec ID: {user.id}")
        return user

    async def get_user_by_id(self, user_id: int) -> UserRead:
        logger.debug(f"[UserService] Récupération utilisateur ID: {user_id}")
        user = await self.repository.get_by_id(user_id)
        if user is None:
            logger.warning(f"[UserService] Utilisateur ID {user_id} non trouvé.")
            raise UserNotFoundError(user_id)
        return UserRead.model_validate(user)

    async def list_users(self) -> List[UserRead]:
        users = await self.repository.list_all()
        logger.debug(f"[UserService] {len(users)} utilisateurs listés.")
        return [UserRead.model_validate(user) for user in users]

    async def update_user(self, current_user: UserRead, target_user_id: int, user_update: UserUpdate) -> UserRead:
        """
        Met à jour le profil d'un utilisateur.

        Un utilisateur ne peut modifier que son propre profil, sauf s'il est administrateur.
        Seuls les champs présents dans la requête sont modifiés.
        """
        if current_user.id != target_user_id and not current_user.is_admin:
            logger.warning(
                f"[UserService] Utilisateur {current_user.id} a tenté de modifier le profil {target_user_id}."
            )
            raise UserUpdateForbiddenError(target_user_id)

        user = await self.repository.get_by_id(target_user_id)
        if user is None:
            raise UserNotFoundError(target_user_id)

        values = user_update.model_dump(exclude_unset=True)
        if values.get("email") and values["email"] != user.email:
            if await self.repository.email_exists(values["email"]):
                raise UserAlreadyExistsError(values["email"])

        updated = await self.repository.update(user, values)
        logger.info(f"[UserService] Utilisateur {target_user_id} mis à jour ({', '.join(values) or 'aucun champ'}).")
        return UserRead.model_validate(updated)
