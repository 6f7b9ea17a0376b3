# src/users/repositories.py
import logging
from typing import Any, Dict, List, Optional

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.users.exceptions import UserAlreadyExistsError
from src.users.interfaces.repositories import AbstractUserRepository
from src.users.models import User, UserCreateInternal

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(AbstractUserRepository):
    """Implémentation SQLAlchemy du repository des utilisateurs avec FastCRUD."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud = FastCRUD(User)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        logger.debug(f"[UserRepository] Getting user by ID: {user_id}")
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"[UserRepository] Getting user by email: {email}")
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def email_exists(self, email: str) -> bool:
        return await self.crud.exists(db=self.db, email=email)

    async def list_all(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def create(self, user_data: UserCreateInternal) -> User:
        logger.debug(f"[UserRepository] Creating user: {user_data.email}")
        user = User(**user_data.model_dump())
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[UserRepository] Integrity error creating user {user_data.email}: {e}")
            raise UserAlreadyExistsError(user_data.email)
        await self.db.refresh(user)
        return user

    async def update(self, user: User, values: Dict[str, Any]) -> User:
        logger.debug(f"[UserRepository] Updating user ID: {user.id} with {list(values)}")
        user_id, email = user.id, values.get("email", user.email)
        for field, value in values.items():
            setattr(user, field, value)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[UserRepository] Integrity error updating user {user_id}: {e}")
            raise UserAlreadyExistsError(email)
        await self.db.refresh(user)
        return user
