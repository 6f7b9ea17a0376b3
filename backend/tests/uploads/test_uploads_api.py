"""
Tests d'intégration pour les uploads (/api/upload), avec le stockage en mémoire.
"""
from httpx import AsyncClient
from fastapi import status

from src.config import settings

API_PREFIX = settings.API_PREFIX

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_upload_images(test_client: AsyncClient, auth_headers_admin: dict, file_storage):
    response = await test_client.post(
        f"{API_PREFIX}/upload/images",
        files=[("files", ("lantern.png", PNG_BYTES, "image/png"))],
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    [url] = data["imageUrls"]
    assert url.startswith("/static/uploads/images/")
    assert url.endswith("_lantern.png")
    assert list(file_storage.files.values()) == [PNG_BYTES]


async def test_upload_images_rejects_other_types(test_client: AsyncClient, auth_headers_admin: dict, file_storage):
    response = await test_client.post(
        f"{API_PREFIX}/upload/images",
        files=[("files", ("notes.pdf", b"%PDF-1.4", "application/pdf"))],
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert file_storage.files == {}


async def test_upload_images_too_large(test_client: AsyncClient, auth_headers_admin: dict, file_storage):
    content = b"\x00" * (settings.MAX_IMAGE_SIZE + 1)
    response = await test_client.post(
        f"{API_PREFIX}/upload/images",
        files=[("files", ("big.png", content, "image/png"))],
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert file_storage.files == {}


async def test_upload_requires_admin(test_client: AsyncClient, auth_headers_user: dict):
    response = await test_client.post(
        f"{API_PREFIX}/upload/images",
        files=[("files", ("lantern.png", PNG_BYTES, "image/png"))],
        headers=auth_headers_user,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_upload_and_delete_file(test_client: AsyncClient, auth_headers_admin: dict, file_storage):
    response = await test_client.post(
        f"{API_PREFIX}/upload",
        files=[("files", ("manual.pdf", b"%PDF-1.4", "application/pdf"))],
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_200_OK
    [stored] = response.json()["files"]
    assert stored["mimetype"] == "application/pdf"
    assert stored["size"] == 8
    assert stored["url"] == f"/static/uploads/files/{stored['filename']}"

    deleted = await test_client.delete(f"{API_PREFIX}/upload/{stored['filename']}", headers=auth_headers_admin)
    assert deleted.status_code == status.HTTP_200_OK
    assert file_storage.deleted == [f"files/{stored['filename']}"]

    again = await test_client.delete(f"{API_PREFIX}/upload/{stored['filename']}", headers=auth_headers_admin)
    assert again.status_code == status.HTTP_404_NOT_FOUND


async def test_delete_image_by_url(test_client: AsyncClient, auth_headers_admin: dict, file_storage):
    uploaded = await test_client.post(
        f"{API_PREFIX}/upload/images",
        files=[("files", ("lantern.png", PNG_BYTES, "image/png"))],
        headers=auth_headers_admin,
    )
    [url] = uploaded.json()["imageUrls"]

    response = await test_client.request(
        "DELETE", f"{API_PREFIX}/upload/images", json={"imageUrl": url}, headers=auth_headers_admin
    )
    assert response.status_code == status.HTTP_200_OK
    assert file_storage.files == {}


async def test_delete_image_foreign_url(test_client: AsyncClient, auth_headers_admin: dict):
    response = await test_client.request(
        "DELETE",
        f"{API_PREFIX}/upload/images",
        json={"imageUrl": "https://cdn.example.com/lantern.png"},
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
