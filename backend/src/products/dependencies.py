import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db_session
from src.products.interfaces.repositories import AbstractProductRepository
from src.products.repositories import SQLAlchemyProductRepository
from src.products.service import ProductService
from src.uploads.dependencies import FileStorageDep

logger = logging.getLogger(__name__)

# --- Dependency Getters --- #

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

def get_product_repository(session: SessionDep) -> AbstractProductRepository:
    """Provides an instance of the SQLAlchemyProductRepository."""
    logger.debug("Providing SQLAlchemyProductRepository")
    return SQLAlchemyProductRepository(db=session)

ProductRepositoryDep = Annotated[AbstractProductRepository, Depends(get_product_repository)]

def get_product_service(repository: ProductRepositoryDep, storage: FileStorageDep) -> ProductService:
    """Provides an instance of ProductService with its repository and file storage."""
    logger.debug("Providing ProductService")
    return ProductService(repository=repository, storage=storage)

ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
