"""
Schémas de requête et de réponse pour l'authentification.
"""
from typing import Optional

from pydantic import EmailStr, Field
from sqlmodel import SQLModel

from src.core.schemas import CamelModel, StrictCamelModel
from src.users.models import UserRead

# =====================================================
# Schémas: Token OAuth2
# =====================================================

class Token(SQLModel):
    """Schéma pour la réponse du token d'accès (formulaire OAuth2)."""
    access_token: str
    token_type: str

# =====================================================
# Schémas: Inscription / Connexion
# =====================================================

class SigninRequest(StrictCamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SignupRequest(SigninRequest):
    name: Optional[str] = Field(default=None, max_length=100)


class AuthResponse(CamelModel):
    success: bool = True
    user: UserRead
    token: Optional[str] = None


class LogoutResponse(CamelModel):
    success: bool = True


class MeResponse(CamelModel):
    user: UserRead
