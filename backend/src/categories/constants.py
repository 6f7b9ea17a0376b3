"""Constantes du module categories."""

# Messages d'erreur
ERROR_CATEGORY_NOT_FOUND = "Category not found"
ERROR_CATEGORY_NAME_EXISTS = "Category name already exists"
ERROR_CATEGORY_IN_USE = "Category is still used by products"
MSG_CATEGORY_DELETED = "Category deleted successfully"

# Contraintes de nom
CATEGORY_NAME_MIN_LENGTH = 2
CATEGORY_NAME_MAX_LENGTH = 50
