"""
Service applicatif du catalogue produits.

Les images sont déposées au préalable via le module uploads; ce service ne
manipule que leurs URLs, et supprime du stockage celles qui ne sont plus
référencées (au mieux, sans faire échouer l'opération principale).
"""
import logging
import math
from typing import Iterable

from src.config import settings
from src.products.interfaces.repositories import AbstractProductRepository
from src.products.models import (
    Product,
    ProductCreate,
    ProductUpdate,
    ProductRead,
    ProductReadWithReviews,
    ProductQuery,
    ProductListResponse,
)
from src.products.exceptions import (
    ProductNotFoundException,
    ProductCategoryNotFoundException,
    ProductInUseException,
)
from src.reviews.models import ReviewSummary
from src.uploads.exceptions import FileStorageException
from src.uploads.storage import AbstractFileStorage

logger = logging.getLogger(__name__)

LATEST_REVIEWS_LIMIT = 5


class ProductService:
    """Service pour la gestion des produits."""

    def __init__(self, repository: AbstractProductRepository, storage: AbstractFileStorage):
        self.repository = repository
        self.storage = storage

    async def _get_or_raise(self, product_id: int) -> Product:
        product = await self.repository.get_by_id(product_id)
        if product is None:
            logger.warning(f"[ProductService] Produit ID {product_id} non trouvé")
            raise ProductNotFoundException(product_id)
        return product

    async def _ensure_category(self, category_id) -> None:
        if category_id is not None and not await self.repository.category_exists(category_id):
            raise ProductCategoryNotFoundException(category_id)

    async def _discard_images(self, urls: Iterable[str]) -> None:
        """Suppression au mieux des images devenues orphelines."""
        for url in urls:
            key = self.storage.key_from_url(url)
            if key is None:
                logger.debug(f"[ProductService] Image externe ignorée: {url}")
                continue
            try:
                await self.storage.delete(key)
            except FileStorageException as e:
                logger.warning(f"[ProductService] Image {url} non supprimée: {e.message}")

    async def list_products(self, query: ProductQuery) -> ProductListResponse:
        query = query.model_copy(update={"limit": min(query.limit, settings.MAX_PAGE_SIZE)})
        products, total = await self.repository.list(query)
        return ProductListResponse(
            products=[ProductRead.model_validate(p) for p in products],
            total=total,
            page=query.page,
            total_pages=math.ceil(total / query.limit),
            limit=query.limit,
        )

    async def get_product(self, product_id: int) -> ProductReadWithReviews:
        """Produit avec ses 5 avis les plus récents."""
        product = await self._get_or_raise(product_id)
        reviews = await self.repository.latest_reviews(product_id, LATEST_REVIEWS_LIMIT)
        product_read = ProductRead.model_validate(product)
        return ProductReadWithReviews(
            **product_read.model_dump(),
            reviews=[ReviewSummary.model_validate(r) for r in reviews],
        )

    async def create_product(self, product_data: ProductCreate) -> ProductRead:
        logger.info(f"[ProductService] Création du produit: {product_data.name}")
        await self._ensure_category(product_data.category_id)
        product = await self.repository.create(product_data.model_dump())
        return ProductRead.model_validate(product)

    async def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductRead:
        product = await self._get_or_raise(product_id)
        values = product_data.model_dump(exclude_unset=True)
        if "category_id" in values:
            await self._ensure_category(values["category_id"])

        # Colonnes non nulles: un null explicite vaut "ne pas modifier"
        for field in ("name", "description", "price", "images", "features", "specifications", "in_stock", "stock_count"):
            if field in values and values[field] is None:
                del values[field]

        dropped_images = []
        if "images" in values:
            dropped_images = [url for url in product.images if url not in values["images"]]

        updated = await self.repository.update(product, values)
        logger.info(f"[ProductService] Produit {product_id} mis à jour ({', '.join(values) or 'aucun champ'})")
        await self._discard_images(dropped_images)
        return ProductRead.model_validate(updated)

    async def delete_product(self, product_id: int) -> None:
        product = await self._get_or_raise(product_id)
        order_item_count = await self.repository.count_order_items(product_id)
        if order_item_count:
            logger.warning(f"[ProductService] Produit {product_id} référencé par {order_item_count} ligne(s) de commande")
            raise ProductInUseException(product_id, order_item_count)

        images = list(product.images)
        await self.repository.delete(product)
        logger.info(f"[ProductService] Produit {product_id} supprimé")
        await self._discard_images(images)
