"""
Exceptions personnalisées pour le module d'authentification.
"""
from fastapi import HTTPException, status

from src.auth.constants import (
    ERROR_CREDENTIALS_INVALID,
    ERROR_CREDENTIALS_TAKEN,
    ERROR_TOKEN_INVALID,
    ERROR_TOKEN_MISSING,
    ERROR_PERMISSION_DENIED,
    HEADER_WWW_AUTHENTICATE,
    HEADER_WWW_AUTHENTICATE_VALUE,
)

class InvalidCredentialsException(HTTPException):
    """Exception pour des identifiants de connexion invalides."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_CREDENTIALS_INVALID,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )

class CredentialsTakenException(HTTPException):
    """Exception levée à l'inscription quand l'email est déjà utilisé."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=ERROR_CREDENTIALS_TAKEN,
        )

class TokenInvalidException(HTTPException):
    """Exception pour un token JWT invalide, expiré, ou dont l'utilisateur n'existe plus."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_TOKEN_INVALID,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )

class TokenMissingException(HTTPException):
    """Exception pour un token JWT manquant."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_TOKEN_MISSING,
            headers={HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE},
        )

class PermissionDeniedException(HTTPException):
    """Exception pour une route admin appelée par un non-admin."""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ERROR_PERMISSION_DENIED,
        )
