"""
Tests d'intégration des endpoints commandes (/api/orders).
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.orders.models import Order, OrderItem
from src.users.models import User

API_PREFIX = settings.API_PREFIX


async def count_rows(db_session: AsyncSession, model) -> int:
    return (await db_session.execute(select(func.count()).select_from(model))).scalar_one()


async def create_order(test_client: AsyncClient, payload: dict) -> dict:
    response = await test_client.post(f"{API_PREFIX}/orders", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["order"]

# --- POST /orders ---

async def test_create_order_success(test_client: AsyncClient, db_session: AsyncSession, order_payload: dict):
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Order created successfully"
    order = data["order"]
    assert order["status"] == "NEW"
    assert order["total"] == 25.0
    assert order["customerName"] == "Jane Doe"
    assert order["notes"] == "Leave at the door"
    assert [item["name"] for item in order["items"]] == ["Paper Lantern", "Silk Lantern"]
    assert order["items"][0]["image"] == "/static/uploads/images/a_lantern.png"
    assert order["items"][1]["image"] == ""
    assert order["items"][0]["price"] == 10.0
    assert order["items"][0]["quantity"] == 2


async def test_create_order_attaches_guest_user_once(
    test_client: AsyncClient, db_session: AsyncSession, order_payload: dict
):
    await create_order(test_client, order_payload)
    await create_order(test_client, order_payload)

    guests = (await db_session.execute(select(User).where(User.email == settings.GUEST_EMAIL))).scalars().all()
    assert len(guests) == 1
    orders = (await db_session.execute(select(Order))).scalars().all()
    assert {order.user_id for order in orders} == {guests[0].id}


async def test_guest_account_cannot_sign_in(test_client: AsyncClient, order_payload: dict):
    await create_order(test_client, order_payload)
    response = await test_client.post(
        f"{API_PREFIX}/auth/signin", json={"email": settings.GUEST_EMAIL, "password": "no-password-required"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_create_order_total_mismatch_writes_nothing(
    test_client: AsyncClient, db_session: AsyncSession, order_payload: dict
):
    order_payload["total"] = 30.0
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    detail = response.json()["detail"]
    assert detail["kind"] == "TotalMismatch"
    assert detail["message"] == "Order total mismatch. Expected: 25.00, Received: 30.00"
    assert await count_rows(db_session, Order) == 0
    assert await count_rows(db_session, OrderItem) == 0
    assert await count_rows(db_session, User) == 0


async def test_create_order_unknown_product(test_client: AsyncClient, order_payload: dict):
    order_payload["items"].append({"productId": 9999, "quantity": 1, "price": 0})
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == {"kind": "ProductNotFound", "message": "Product with ID 9999 not found"}


async def test_create_order_insufficient_stock(test_client: AsyncClient, test_product, db_session: AsyncSession):
    payload = {
        "items": [{"productId": test_product.id, "quantity": 6, "price": 10.0}],
        "customerInfo": {"fullName": "Jane Doe", "phone": "555", "address": "Somewhere"},
        "total": 60.0,
    }
    response = await test_client.post(f"{API_PREFIX}/orders", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "InsufficientStock"
    assert await count_rows(db_session, Order) == 0


async def test_create_order_out_of_stock(test_client: AsyncClient, out_of_stock_product):
    payload = {
        "items": [{"productId": out_of_stock_product.id, "quantity": 1, "price": 80.0}],
        "customerInfo": {"fullName": "Jane Doe", "phone": "555", "address": "Somewhere"},
        "total": 80.0,
    }
    response = await test_client.post(f"{API_PREFIX}/orders", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["message"] == 'Product "Stone Lantern" is out of stock'


async def test_create_order_price_mismatch(test_client: AsyncClient, order_payload: dict):
    order_payload["items"][0]["price"] = 9.0
    order_payload["total"] = 23.0
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "PriceMismatch"


async def test_create_order_malformed_body(test_client: AsyncClient, order_payload: dict):
    order_payload["items"] = []
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"


async def test_create_order_rejects_zero_quantity(test_client: AsyncClient, order_payload: dict):
    order_payload["items"][0]["quantity"] = 0
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"


async def test_create_order_rejects_sub_cent_price(
    test_client: AsyncClient, db_session: AsyncSession, test_product
):
    # 9.995 est dans la tolérance de 5% mais ne tient pas dans une colonne à 2 décimales
    payload = {
        "items": [{"productId": test_product.id, "quantity": 100, "price": 9.995}],
        "customerInfo": {"fullName": "Jane Doe", "phone": "555", "address": "Somewhere"},
        "total": 999.5,
    }
    response = await test_client.post(f"{API_PREFIX}/orders", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"
    assert await count_rows(db_session, Order) == 0
    assert await count_rows(db_session, OrderItem) == 0


async def test_create_order_rejects_sub_cent_total(test_client: AsyncClient, order_payload: dict):
    order_payload["total"] = 25.001
    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"


async def test_create_order_store_failure_writes_nothing(
    test_client: AsyncClient, db_session: AsyncSession, order_payload: dict, monkeypatch
):
    monkeypatch.setattr(db_session, "flush", AsyncMock(side_effect=SQLAlchemyError("disk I/O error")))

    response = await test_client.post(f"{API_PREFIX}/orders", json=order_payload)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == {"kind": "OrderCreationFailed", "message": "Failed to create order"}
    assert await count_rows(db_session, Order) == 0
    assert await count_rows(db_session, OrderItem) == 0
    # le compte invité inséré dans la même transaction est annulé aussi
    assert await count_rows(db_session, User) == 0


async def test_created_order_timestamps_are_utc(
    test_client: AsyncClient, db_session: AsyncSession, order_payload: dict
):
    before = datetime.now(timezone.utc)
    order = await create_order(test_client, order_payload)

    assert Order.__table__.c.created_at.type.timezone is True
    assert Order.__table__.c.updated_at.type.timezone is True
    stored = await db_session.get(Order, order["id"])
    # SQLite ne conserve pas le fuseau: la valeur relue est en UTC naïf
    created_at = stored.created_at.replace(tzinfo=timezone.utc)
    assert before - timedelta(seconds=1) <= created_at <= datetime.now(timezone.utc)

# --- GET /orders?phone= ---

async def test_get_orders_by_phone_is_case_insensitive(test_client: AsyncClient, order_payload: dict):
    order_payload["customerInfo"]["phone"] = "+1-555-abc"
    first = await create_order(test_client, order_payload)
    second = await create_order(test_client, order_payload)

    lower = (await test_client.get(f"{API_PREFIX}/orders", params={"phone": "+1-555-abc"})).json()
    upper = (await test_client.get(f"{API_PREFIX}/orders", params={"phone": "+1-555-ABC"})).json()

    assert lower["total"] == 2
    assert lower["message"] == "Found 2 order(s) for phone number"
    assert [o["id"] for o in lower["orders"]] == [second["id"], first["id"]]
    assert [o["id"] for o in upper["orders"]] == [o["id"] for o in lower["orders"]]


async def test_get_orders_by_phone_none_found(test_client: AsyncClient):
    response = await test_client.get(f"{API_PREFIX}/orders", params={"phone": "+0-000"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["orders"] == []
    assert data["total"] == 0
    assert data["message"] == "No orders found for this phone number"


async def test_get_orders_without_phone(test_client: AsyncClient):
    response = await test_client.get(f"{API_PREFIX}/orders")
    assert response.status_code == status.HTTP_400_BAD_REQUEST

# --- PUT /orders/{id}/status ---

async def test_update_status_admin(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}/status", json={"status": "SHIPPING"}, headers=auth_headers_admin
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "SHIPPING"


async def test_update_status_requires_admin(test_client: AsyncClient, auth_headers_user: dict, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}/status", json={"status": "SHIPPING"}, headers=auth_headers_user
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await test_client.put(f"{API_PREFIX}/orders/{order['id']}/status", json={"status": "SHIPPING"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_update_status_unknown_order(test_client: AsyncClient, auth_headers_admin: dict):
    response = await test_client.put(
        f"{API_PREFIX}/orders/4242/status", json={"status": "COMPLETED"}, headers=auth_headers_admin
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"]["kind"] == "OrderNotFound"


async def test_update_status_invalid_value(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}/status", json={"status": "LOST"}, headers=auth_headers_admin
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

# --- PUT /orders/{id} ---

async def test_update_info_with_matching_phone(test_client: AsyncClient, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}",
        params={"phone": "+1-555-0100"},
        json={"notes": "Call on arrival"},
    )

    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["order"]
    assert updated["notes"] == "Call on arrival"
    assert updated["customerName"] == order["customerName"]
    assert updated["phone"] == order["phone"]
    assert updated["address"] == order["address"]


async def test_update_info_phone_mismatch(test_client: AsyncClient, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}", params={"phone": "+9-999"}, json={"notes": "hijack"}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "OwnershipMismatch"


async def test_update_info_customer_cannot_change_status(test_client: AsyncClient, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}", params={"phone": "+1-555-0100"}, json={"status": "COMPLETED"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "ValidationError"


async def test_update_info_completed_order_forbidden(
    test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict
):
    order = await create_order(test_client, order_payload)
    await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}/status", json={"status": "COMPLETED"}, headers=auth_headers_admin
    )
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}", params={"phone": "+1-555-0100"}, json={"notes": "late"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["kind"] == "OrderUpdateForbidden"


async def test_update_info_admin_without_phone(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}", json={"address": "2 New Road"}, headers=auth_headers_admin
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["order"]["address"] == "2 New Road"


async def test_update_info_unknown_order(test_client: AsyncClient):
    response = await test_client.put(f"{API_PREFIX}/orders/4242", params={"phone": "1"}, json={"notes": "x"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

# --- Admin: liste, stats, mise à jour complète ---

async def test_list_all_orders_filters(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    first = await create_order(test_client, order_payload)
    order_payload["customerInfo"]["fullName"] = "John Smith"
    second = await create_order(test_client, order_payload)
    await test_client.put(
        f"{API_PREFIX}/orders/{second['id']}/status", json={"status": "NEGOTIATING"}, headers=auth_headers_admin
    )

    everything = (await test_client.get(f"{API_PREFIX}/orders/all", headers=auth_headers_admin)).json()
    assert everything["total"] == 2
    assert everything["page"] == 1
    assert everything["totalPages"] == 1

    by_status = (
        await test_client.get(f"{API_PREFIX}/orders/all", params={"status": "NEGOTIATING"}, headers=auth_headers_admin)
    ).json()
    assert [o["id"] for o in by_status["orders"]] == [second["id"]]

    by_name = (
        await test_client.get(f"{API_PREFIX}/orders/all", params={"search": "jane"}, headers=auth_headers_admin)
    ).json()
    assert [o["id"] for o in by_name["orders"]] == [first["id"]]

    unknown_status = (
        await test_client.get(f"{API_PREFIX}/orders/all", params={"status": "LOST"}, headers=auth_headers_admin)
    ).json()
    assert unknown_status["total"] == 2


async def test_order_stats(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    first = await create_order(test_client, order_payload)
    await create_order(test_client, order_payload)
    await test_client.put(
        f"{API_PREFIX}/orders/{first['id']}/status", json={"status": "COMPLETED"}, headers=auth_headers_admin
    )

    response = await test_client.get(f"{API_PREFIX}/orders/stats", headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "totalOrders": 2,
        "newOrders": 1,
        "processingOrders": 0,
        "completedOrders": 1,
        "totalRevenue": 25.0,
    }


async def test_admin_full_update_sets_status(test_client: AsyncClient, auth_headers_admin: dict, order_payload: dict):
    order = await create_order(test_client, order_payload)
    response = await test_client.put(
        f"{API_PREFIX}/orders/{order['id']}/admin",
        json={"status": "SHIPPING", "customerName": "Jane D."},
        headers=auth_headers_admin,
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["order"]
    assert updated["status"] == "SHIPPING"
    assert updated["customerName"] == "Jane D."
