import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.reviews.interfaces.repositories import AbstractReviewRepository
from src.reviews.repositories import SQLAlchemyReviewRepository
from src.reviews.service import ReviewService

logger = logging.getLogger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_review_repository(session: SessionDep) -> AbstractReviewRepository:
    return SQLAlchemyReviewRepository(db_session=session)

ReviewRepositoryDep = Annotated[AbstractReviewRepository, Depends(get_review_repository)]


def get_review_service(repository: ReviewRepositoryDep) -> ReviewService:
    logger.debug("Providing ReviewService with injected repository")
    return ReviewService(repository=repository)

ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]
