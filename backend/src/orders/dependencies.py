import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.orders.integrity import OrderIntegrityValidator
from src.orders.interfaces.repositories import AbstractOrderRepository, AbstractProductCatalog
from src.orders.repositories import SQLAlchemyOrderRepository, SQLAlchemyProductCatalog
from src.orders.service import OrderService

logger = logging.getLogger(__name__)

# --- Database Session Dependency ---
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_order_repository(session: SessionDep) -> AbstractOrderRepository:
    logger.debug("Providing SQLAlchemyOrderRepository")
    return SQLAlchemyOrderRepository(db_session=session)

OrderRepositoryDep = Annotated[AbstractOrderRepository, Depends(get_order_repository)]


def get_product_catalog(session: SessionDep) -> AbstractProductCatalog:
    return SQLAlchemyProductCatalog(db_session=session)

ProductCatalogDep = Annotated[AbstractProductCatalog, Depends(get_product_catalog)]


def get_order_service(repository: OrderRepositoryDep, catalog: ProductCatalogDep) -> OrderService:
    """Fournit OrderService; repository et catalogue partagent la session de la requête."""
    logger.debug("Providing OrderService")
    return OrderService(repository=repository, validator=OrderIntegrityValidator(catalog))

OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
