"""
Tests unitaires de AdminService (repository simulé).
"""
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.admin.exceptions import InventoryProductNotFoundException
from src.admin.service import AdminService, start_of_month
from src.categories.models import Category
from src.orders.config import OrderStatus
from src.products.models import Product

NOW = datetime(2024, 3, 15, 12, 30)


@pytest.fixture
def repository():
    return AsyncMock()


@pytest.fixture
def service(repository) -> AdminService:
    return AdminService(repository=repository, low_stock_threshold=10)


def test_start_of_month():
    assert start_of_month(NOW) == datetime(2024, 3, 1)


async def test_order_analytics_groups_by_day(service, repository):
    repository.orders_since.return_value = [
        (Decimal("20.00"), datetime(2024, 3, 14, 9), OrderStatus.SHIPPING),
        (Decimal("5.00"), datetime(2024, 3, 14, 18), OrderStatus.NEW),
        (Decimal("10.50"), datetime(2024, 3, 10, 8), OrderStatus.COMPLETED),
    ]

    result = await service.get_order_analytics("week", now=NOW)

    assert repository.orders_since.call_args.args[0] == datetime(2024, 3, 8, 12, 30)
    assert [(p.date, p.orders, p.revenue) for p in result.data] == [
        ("2024-03-10", 1, 10.5),
        ("2024-03-14", 2, 20.0),
    ]
    assert result.total_orders == 3
    assert result.total_revenue == 30.5
    assert result.average_daily_revenue == 15.25


async def test_order_analytics_year_groups_by_month(service, repository):
    repository.orders_since.return_value = [
        (Decimal("1.00"), datetime(2023, 12, 31), OrderStatus.COMPLETED),
        (Decimal("2.00"), datetime(2024, 1, 2), OrderStatus.COMPLETED),
        (Decimal("3.00"), datetime(2024, 1, 20), OrderStatus.NEGOTIATING),
    ]

    result = await service.get_order_analytics("year", now=NOW)

    assert [(p.date, p.orders, p.revenue) for p in result.data] == [("2023-12", 1, 1.0), ("2024-01", 2, 5.0)]


async def test_order_analytics_unknown_period_uses_month(service, repository):
    repository.orders_since.return_value = []

    result = await service.get_order_analytics("decade", now=NOW)

    assert repository.orders_since.call_args.args[0] == datetime(2024, 2, 14, 12, 30)
    assert result.data == []
    assert result.average_daily_revenue == 0.0


async def test_overview_average_order_value(service, repository):
    repository.revenue.side_effect = [Decimal("100.00"), Decimal("40.00")]
    repository.count_orders.side_effect = [3, 1]
    repository.count_products.return_value = 7
    repository.count_users.side_effect = [5, 2]
    repository.count_low_stock.return_value = 1
    repository.count_out_of_stock.return_value = 2

    overview = await service.get_overview(now=NOW)

    assert overview.total_revenue == 100.0
    assert overview.monthly_revenue == 40.0
    assert overview.average_order_value == 33.33
    assert overview.monthly_new_users == 2
    assert repository.revenue.call_args_list[1].kwargs == {"since": datetime(2024, 3, 1)}
    repository.count_low_stock.assert_awaited_once_with(10)


async def test_overview_without_orders(service, repository):
    repository.revenue.return_value = Decimal("0")
    repository.count_orders.return_value = 0
    repository.count_products.return_value = 0
    repository.count_users.return_value = 0
    repository.count_low_stock.return_value = 0
    repository.count_out_of_stock.return_value = 0

    overview = await service.get_overview(now=NOW)
    assert overview.average_order_value == 0.0


async def test_inventory_flags_low_stock(service, repository):
    category = Category(id=1, name="Lanterns")
    repository.list_inventory.return_value = [
        Product(id=1, name="Low", price=Decimal("1"), stock_count=3, in_stock=True, updated_at=NOW, category=category),
        Product(id=2, name="Plenty", price=Decimal("1"), stock_count=50, in_stock=True, updated_at=NOW),
        Product(id=3, name="Empty", price=Decimal("1"), stock_count=0, in_stock=False, updated_at=NOW),
    ]

    inventory = await service.get_inventory()

    assert [item.is_low_stock for item in inventory.inventory] == [True, False, False]
    assert inventory.inventory[0].category == "Lanterns"
    assert inventory.inventory[1].category is None
    assert inventory.in_stock_products == 2
    assert inventory.out_of_stock_products == 1
    assert inventory.low_stock_products == 1


async def test_update_inventory_unknown_product(service, repository):
    repository.get_product.return_value = None
    with pytest.raises(InventoryProductNotFoundException):
        await service.update_inventory(99, 5)
    repository.update_stock.assert_not_called()
