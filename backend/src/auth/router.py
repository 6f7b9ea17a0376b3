"""
Module définissant les routes API FastAPI pour l'authentification.

Contient les endpoints pour:
- /signup, /signin : Inscription et connexion (JSON), retour du token
- /token : Connexion par formulaire OAuth2 (documentation interactive)
- /logout : Déconnexion (sans état)
- /me : Récupération des informations de l'utilisateur connecté
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from src.auth.dependencies import AuthServiceDep, CurrentUserDep
from src.auth.exceptions import InvalidCredentialsException, CredentialsTakenException
from src.auth.models import Token, SignupRequest, SigninRequest, AuthResponse, LogoutResponse, MeResponse
from src.auth.security import create_user_token
from src.users.exceptions import UserAlreadyExistsError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, auth_service: AuthServiceDep):
    """Crée un compte et retourne l'utilisateur avec son token."""
    logger.info("[Router] Inscription demandée pour: %s", payload.email)
    try:
        return await auth_service.signup(email=payload.email, password=payload.password, name=payload.name)
    except UserAlreadyExistsError:
        logger.warning("[Router] Email déjà utilisé: %s", payload.email)
        raise CredentialsTakenException()

@router.post("/signin", response_model=AuthResponse)
async def signin(payload: SigninRequest, auth_service: AuthServiceDep):
    logger.info("[Router] Tentative de login pour: %s", payload.email)
    response = await auth_service.signin(email=payload.email, password=payload.password)
    if response is None:
        raise InvalidCredentialsException()
    return response

@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDep,
):
    """
    Authentifie l'utilisateur et retourne un token JWT.

    - **username**: Email de l'utilisateur (utilisé comme identifiant)
    - **password**: Mot de passe de l'utilisateur
    """
    user = await auth_service.authenticate_user(email=form_data.username, password=form_data.password)
    if not user:
        logger.warning("[Router] Échec authentification pour: %s", form_data.username)
        raise InvalidCredentialsException()

    access_token = create_user_token(user.id, user.email)
    logger.info("[Router] Token créé pour user ID: %s", user.id)
    return Token(access_token=access_token, token_type="bearer")

@router.post("/logout", response_model=LogoutResponse)
async def logout():
    """Les tokens JWT sont sans état: le client n'a qu'à oublier le sien."""
    return LogoutResponse(success=True)

@router.get("/me", response_model=MeResponse)
async def read_users_me(current_user: CurrentUserDep):
    """
    Récupère les informations de l'utilisateur actuellement connecté.

    Nécessite un token JWT valide dans l'en-tête Authorization.
    """
    logger.info("[Router] Récupération infos pour user ID: %s", current_user.id)
    return MeResponse(user=current_user)

auth_router = router
