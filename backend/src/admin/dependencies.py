import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.admin.interfaces.repositories import AbstractAnalyticsRepository
from src.admin.repositories import SQLAlchemyAnalyticsRepository
from src.admin.service import AdminService
from src.config import settings
from src.database import get_db_session

logger = logging.getLogger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_analytics_repository(session: SessionDep) -> AbstractAnalyticsRepository:
    return SQLAlchemyAnalyticsRepository(db_session=session)

AnalyticsRepositoryDep = Annotated[AbstractAnalyticsRepository, Depends(get_analytics_repository)]


def get_admin_service(repository: AnalyticsRepositoryDep) -> AdminService:
    logger.debug("Providing AdminService")
    return AdminService(repository=repository, low_stock_threshold=settings.LOW_STOCK_THRESHOLD)

AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
