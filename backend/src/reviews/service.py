import logging

from src.reviews.interfaces.repositories import AbstractReviewRepository
from src.reviews.models import (
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReviewRead,
    ReviewListResponse,
)
from src.reviews.exceptions import (
    ReviewNotFoundException,
    ReviewProductNotFoundException,
    DuplicateReviewException,
    ReviewPermissionException,
)
from src.users.models import UserRead

logger = logging.getLogger(__name__)


class ReviewService:
    """Service applicatif pour les avis produits."""

    def __init__(self, repository: AbstractReviewRepository):
        self.repository = repository

    async def _ensure_product(self, product_id: int) -> None:
        if not await self.repository.product_exists(product_id):
            raise ReviewProductNotFoundException(product_id)

    async def _get_review(self, product_id: int, review_id: int) -> Review:
        review = await self.repository.get_by_id(review_id)
        if review is None or review.product_id != product_id:
            raise ReviewNotFoundException(review_id)
        return review

    async def create_review(self, product_id: int, user: UserRead, review_data: ReviewCreate) -> ReviewRead:
        logger.info(f"[ReviewService] Nouvel avis de l'utilisateur {user.id} sur le produit {product_id}")
        await self._ensure_product(product_id)

        if await self.repository.get_by_product_and_user(product_id, user.id):
            logger.warning(f"[ReviewService] Avis déjà existant: produit {product_id}, utilisateur {user.id}")
            raise DuplicateReviewException(product_id, user.id)

        review = await self.repository.create(
            Review(
                product_id=product_id,
                user_id=user.id,
                user_name=user.name or user.email,
                rating=review_data.rating,
                comment=review_data.comment,
            )
        )
        return ReviewRead.model_validate(review)

    async def get_product_reviews(self, product_id: int) -> ReviewListResponse:
        await self._ensure_product(product_id)
        reviews = await self.repository.list_for_product(product_id)
        total = len(reviews)
        average = sum(review.rating for review in reviews) / total if total else 0
        return ReviewListResponse(
            reviews=[ReviewRead.model_validate(review) for review in reviews],
            total=total,
            average_rating=round(average, 1),
        )

    async def get_review(self, product_id: int, review_id: int) -> ReviewRead:
        return ReviewRead.model_validate(await self._get_review(product_id, review_id))

    async def update_review(self, product_id: int, review_id: int, user: UserRead, review_data: ReviewUpdate) -> ReviewRead:
        review = await self._get_review(product_id, review_id)
        if review.user_id != user.id:
            logger.warning(f"[ReviewService] Utilisateur {user.id} a tenté de modifier l'avis {review_id}")
            raise ReviewPermissionException("You can only update your own reviews")

        values = review_data.model_dump(exclude_unset=True)
        updated = await self.repository.update(review, values)
        logger.info(f"[ReviewService] Avis {review_id} mis à jour")
        return ReviewRead.model_validate(updated)

    async def delete_review(self, product_id: int, review_id: int, user: UserRead) -> None:
        review = await self._get_review(product_id, review_id)
        if review.user_id != user.id and not user.is_admin:
            logger.warning(f"[ReviewService] Utilisateur {user.id} a tenté de supprimer l'avis {review_id}")
            raise ReviewPermissionException("You can only delete your own reviews")

        await self.repository.delete(review)
        logger.info(f"[ReviewService] Avis {review_id} supprimé")
