# src/reviews/repositories.py
import logging
from typing import Any, Dict, List, Optional

from fastcrud import FastCRUD
from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.products.models import Product
from src.reviews.exceptions import DuplicateReviewException, ReviewUpdateFailedException
from src.reviews.interfaces.repositories import AbstractReviewRepository
from src.reviews.models import Review

logger = logging.getLogger(__name__)


class SQLAlchemyReviewRepository(AbstractReviewRepository):
    """Implémentation SQLAlchemy du repository des avis."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.product_crud = FastCRUD(Product)

    async def product_exists(self, product_id: int) -> bool:
        return await self.product_crud.exists(db=self.db, id=product_id)

    async def get_by_id(self, review_id: int) -> Optional[Review]:
        logger.debug(f"[ReviewRepository] Getting review by ID: {review_id}")
        return await self.db.get(Review, review_id)

    async def get_by_product_and_user(self, product_id: int, user_id: int) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(Review.product_id == product_id, Review.user_id == user_id)
        )
        return result.scalars().first()

    async def list_for_product(self, product_id: int, limit: Optional[int] = None) -> List[Review]:
        statement = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def _refresh_product_rating(self, product_id: int) -> None:
        """Recalcule la note moyenne (1 décimale) et le nombre d'avis du produit."""
        result = await self.db.execute(
            select(func.avg(Review.rating), func.count(Review.id)).where(Review.product_id == product_id)
        )
        average, count = result.one()
        rating = round(float(average or 0), 1)
        await self.db.execute(
            update(Product).where(Product.id == product_id).values(rating=rating, review_count=count)
        )
        logger.debug(f"[ReviewRepository] Product {product_id} rating={rating} reviews={count}")

    async def create(self, review: Review) -> Review:
        product_id, user_id = review.product_id, review.user_id
        self.db.add(review)
        try:
            await self.db.flush()
            await self._refresh_product_rating(product_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[ReviewRepository] Integrity error creating review for product {product_id}: {e}")
            raise DuplicateReviewException(product_id, user_id)
        await self.db.refresh(review)
        return review

    async def update(self, review: Review, values: Dict[str, Any]) -> Review:
        for field, value in values.items():
            setattr(review, field, value)
        self.db.add(review)
        review_id, product_id = review.id, review.product_id
        try:
            await self.db.flush()
            await self._refresh_product_rating(product_id)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[ReviewRepository] Integrity error updating review {review_id}: {e}")
            raise ReviewUpdateFailedException(review_id)
        await self.db.refresh(review)
        return review

    async def delete(self, review: Review) -> None:
        product_id = review.product_id
        await self.db.delete(review)
        await self.db.flush()
        await self._refresh_product_rating(product_id)
        await self.db.commit()
