"""Exceptions personnalisées pour le module reviews."""


class ReviewException(Exception):
    """Classe de base des erreurs liées aux avis."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class ReviewNotFoundException(ReviewException):
    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__("Review not found")

class ReviewProductNotFoundException(ReviewException):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("Product not found")

class DuplicateReviewException(ReviewException):
    """Un utilisateur ne peut laisser qu'un avis par produit."""
    def __init__(self, product_id: int, user_id: int):
        self.product_id = product_id
        self.user_id = user_id
        super().__init__("You have already reviewed this product")

class ReviewPermissionException(ReviewException):
    def __init__(self, message: str):
        super().__init__(message)

class ReviewUpdateFailedException(ReviewException):
    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__("Review could not be updated")
