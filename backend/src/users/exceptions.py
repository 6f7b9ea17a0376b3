"""
Exceptions personnalisées pour le module de gestion des utilisateurs.
"""

class UserError(Exception):
    """Classe de base pour les exceptions liées aux utilisateurs."""
    def __init__(self, message: str = "Erreur utilisateur"):
        self.message = message
        super().__init__(self.message)

class UserNotFoundError(UserError):
    """Levée lorsque l'utilisateur n'est pas trouvé."""
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"Utilisateur {user_id} non trouvé")

class UserAlreadyExistsError(UserError):
    """Levée lorsqu'un utilisateur avec cet email existe déjà."""
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Un utilisateur avec l'email {email} existe déjà")

class UserUpdateForbiddenError(UserError):
    """Levée lorsqu'un utilisateur tente de modifier le profil d'un autre."""
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("Vous ne pouvez modifier que votre propre profil")
