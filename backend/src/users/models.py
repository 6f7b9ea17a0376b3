# src/users/models.py
"""
Module définissant les modèles SQLModel pour l'entité User.

Ce module contient :
- User : Modèle de table SQLModel (table=True).
- UserCreateInternal : données prêtes à insérer (mot de passe déjà haché).
- UserRead, UserUpdate : Schémas Pydantic exposés par l'API (camelCase).
"""
from typing import Optional, List
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from pydantic import EmailStr, Field as PydanticField, field_validator

from src.core.schemas import CamelModel, StrictCamelModel, utc_now

# =====================================================
# Modèle de table
# =====================================================

class User(SQLModel, table=True):
    """Modèle de table SQLModel pour les utilisateurs (clients, admins, invité)."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)
    name: Optional[str] = Field(default=None, max_length=100)
    password_hash: str = Field(nullable=False, max_length=255)
    is_admin: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )


class UserCreateInternal(SQLModel):
    """Données d'insertion d'un utilisateur, mot de passe déjà haché."""
    email: str
    name: Optional[str] = None
    password_hash: str
    is_admin: bool = False

# =====================================================
# Schémas API
# =====================================================

class UserRead(CamelModel):
    """Représentation publique d'un utilisateur. Le hash n'est jamais exposé."""
    id: int
    email: str
    name: Optional[str] = None
    is_admin: bool = False
    created_at: datetime
    updated_at: datetime


class UserUpdate(StrictCamelModel):
    """Mise à jour partielle du profil."""
    email: Optional[EmailStr] = None
    name: Optional[str] = PydanticField(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def email_not_null(cls, value):
        # la colonne email est obligatoire
        if value is None:
            raise ValueError("must not be null")
        return value


class UserResponse(CamelModel):
    user: UserRead


class UserListResponse(CamelModel):
    users: List[UserRead]


class UserUpdateResponse(CamelModel):
    success: bool = True
    user: UserRead
