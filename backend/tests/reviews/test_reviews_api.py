"""
Tests d'intégration pour les avis produits (/api/products/{id}/reviews).
"""
import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.products.models import Product
from src.reviews.exceptions import ReviewUpdateFailedException
from src.reviews.repositories import SQLAlchemyReviewRepository

API_PREFIX = settings.API_PREFIX


def reviews_url(product_id: int) -> str:
    return f"{API_PREFIX}/products/{product_id}/reviews"


async def post_review(client: AsyncClient, product_id: int, headers: dict, rating: int, comment: str = None) -> dict:
    body = {"rating": rating}
    if comment is not None:
        body["comment"] = comment
    response = await client.post(reviews_url(product_id), json=body, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["review"]


async def test_create_review_updates_product_rating(
    test_client: AsyncClient, test_product: Product, auth_headers_user: dict, auth_headers_user_2: dict
):
    review = await post_review(test_client, test_product.id, auth_headers_user, 5, "Beautiful and sturdy lantern")
    assert review["userName"] == "Test User"
    assert review["rating"] == 5
    await post_review(test_client, test_product.id, auth_headers_user_2, 4)

    product = (await test_client.get(f"{API_PREFIX}/products/{test_product.id}")).json()
    assert product["rating"] == 4.5
    assert product["reviewCount"] == 2
    assert len(product["reviews"]) == 2

    listing = (await test_client.get(reviews_url(test_product.id))).json()
    assert listing["total"] == 2
    assert listing["averageRating"] == 4.5


async def test_one_review_per_user(test_client: AsyncClient, test_product: Product, auth_headers_user: dict):
    await post_review(test_client, test_product.id, auth_headers_user, 3)
    response = await test_client.post(reviews_url(test_product.id), json={"rating": 4}, headers=auth_headers_user)
    assert response.status_code == status.HTTP_409_CONFLICT


async def test_review_requires_authentication(test_client: AsyncClient, test_product: Product):
    response = await test_client.post(reviews_url(test_product.id), json={"rating": 4})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_review_validation(test_client: AsyncClient, test_product: Product, auth_headers_user: dict):
    out_of_range = await test_client.post(reviews_url(test_product.id), json={"rating": 6}, headers=auth_headers_user)
    assert out_of_range.status_code == status.HTTP_400_BAD_REQUEST

    short_comment = await test_client.post(
        reviews_url(test_product.id), json={"rating": 4, "comment": "too short"}, headers=auth_headers_user
    )
    assert short_comment.status_code == status.HTTP_400_BAD_REQUEST


async def test_review_unknown_product(test_client: AsyncClient, auth_headers_user: dict):
    response = await test_client.post(reviews_url(9999), json={"rating": 4}, headers=auth_headers_user)
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_update_review_author_only(
    test_client: AsyncClient, test_product: Product, auth_headers_user: dict, auth_headers_user_2: dict
):
    review = await post_review(test_client, test_product.id, auth_headers_user, 2)
    url = f"{reviews_url(test_product.id)}/{review['id']}"

    forbidden = await test_client.put(url, json={"rating": 5}, headers=auth_headers_user_2)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = await test_client.put(url, json={"rating": 5}, headers=auth_headers_user)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["review"]["rating"] == 5

    product = (await test_client.get(f"{API_PREFIX}/products/{test_product.id}")).json()
    assert product["rating"] == 5.0


async def test_delete_review_by_admin(
    test_client: AsyncClient, test_product: Product, auth_headers_user: dict, auth_headers_admin: dict
):
    review = await post_review(test_client, test_product.id, auth_headers_user, 1)
    response = await test_client.delete(
        f"{reviews_url(test_product.id)}/{review['id']}", headers=auth_headers_admin
    )
    assert response.status_code == status.HTTP_200_OK

    product = (await test_client.get(f"{API_PREFIX}/products/{test_product.id}")).json()
    assert product["reviewCount"] == 0
    assert product["rating"] == 0


async def test_review_belongs_to_product(
    test_client: AsyncClient, test_product: Product, untracked_product: Product, auth_headers_user: dict
):
    review = await post_review(test_client, test_product.id, auth_headers_user, 4)
    response = await test_client.get(f"{reviews_url(untracked_product.id)}/{review['id']}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_update_review_rejects_null_rating(
    test_client: AsyncClient, test_product: Product, auth_headers_user: dict
):
    review = await post_review(test_client, test_product.id, auth_headers_user, 4)
    url = f"{reviews_url(test_product.id)}/{review['id']}"

    response = await test_client.put(url, json={"rating": None}, headers=auth_headers_user)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"

    # commentaire seul: la note reste inchangée
    response = await test_client.put(url, json={"comment": "Still glowing after a month"}, headers=auth_headers_user)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["review"]["rating"] == 4


async def test_repository_update_integrity_error(
    test_client: AsyncClient, db_session: AsyncSession, test_product: Product, auth_headers_user: dict
):
    created = await post_review(test_client, test_product.id, auth_headers_user, 3)
    repository = SQLAlchemyReviewRepository(db_session)
    review = await repository.get_by_id(created["id"])

    with pytest.raises(ReviewUpdateFailedException):
        await repository.update(review, {"rating": None})

    stored = await repository.get_by_id(created["id"])
    assert stored.rating == 3
