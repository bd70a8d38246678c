"""
Unit Tests: OrderService

Tests for services/order.py covering:
- create_order() with and without a free courier
- active / assigned order lookups
- update_status() transitions, courier release and the delivered notification
- delay_order()
"""

import re

import pytest

import config
from enums.employee_status import EmployeeStatus
from enums.order_status import OrderStatus
from exceptions import InvalidOrderTransitionException, OrderNotFoundException
from models.cart_item import CartItemDTO
from models.fields import NotificationFields, OrderFields
from models.product import ProductDTO
from services.order import OrderService, generate_order_number
from fakes import seed_banner, seed_customer, seed_employee, seed_order, seed_product


@pytest.fixture
def customer_id(client):
    return seed_customer(client)


@pytest.fixture
def items():
    return [CartItemDTO.from_product(ProductDTO(id="recA", name="Мандарин", price=100, available_stock=5), 2)]


class TestCreateOrder:

    def test_order_number_format(self):
        assert re.fullmatch(r"ED-\d{6}", generate_order_number())

    @pytest.mark.asyncio
    async def test_free_courier_is_assigned(self, client, customer_id, items):
        employee_id = seed_employee(client)

        order, assigned = await OrderService.create_order(customer_id, items, 299, "ул. Мира, 5", client)

        assert assigned
        assert order.employee_ids == [employee_id]
        assert order.status == OrderStatus.ACCEPTED
        assert order.products == "Мандарин - 2 шт"
        assert order.total_amount == 299

    @pytest.mark.asyncio
    async def test_busy_and_offline_couriers_are_skipped(self, client, customer_id, items):
        busy = seed_employee(client, password="1")
        seed_employee(client, password="2", status=EmployeeStatus.OFFLINE)
        seed_order(client, customer_id, OrderStatus.DELIVERING, employee_ids=[busy])

        order, assigned = await OrderService.create_order(customer_id, items, 299, "ул. Мира, 5", client)

        assert not assigned
        assert order.employee_ids == []

    @pytest.mark.asyncio
    async def test_courier_of_finished_order_is_free(self, client, customer_id, items):
        employee_id = seed_employee(client)
        seed_order(client, customer_id, OrderStatus.DELIVERED, employee_ids=[employee_id])

        order, assigned = await OrderService.create_order(customer_id, items, 299, "ул. Мира, 5", client)

        assert assigned
        assert order.employee_ids == [employee_id]

    @pytest.mark.asyncio
    async def test_courier_lookup_failure_still_creates_order(self, client, customer_id, items):
        seed_employee(client)
        client.fail(config.EMPLOYEES_TABLE, "list")

        order, assigned = await OrderService.create_order(customer_id, items, 299, "ул. Мира, 5", client)

        assert not assigned
        assert order.id in client.table(config.ORDERS_TABLE).records


class TestLookups:

    @pytest.mark.asyncio
    async def test_active_order_prefers_unfinished(self, client, customer_id):
        seed_order(client, customer_id, OrderStatus.DELIVERED)
        active = seed_order(client, customer_id, OrderStatus.PACKING)
        seed_order(client, customer_id, OrderStatus.CANCELLED)

        order = await OrderService.get_user_active_order(customer_id, client)

        assert order.id == active

    @pytest.mark.asyncio
    async def test_active_order_falls_back_to_newest_delivered(self, client, customer_id):
        seed_order(client, customer_id, OrderStatus.DELIVERED)
        newest = seed_order(client, customer_id, OrderStatus.DELIVERED)
        seed_order(client, seed_customer(client, email="other@example.com"), OrderStatus.ACCEPTED)

        order = await OrderService.get_user_active_order(customer_id, client)

        assert order.id == newest

    @pytest.mark.asyncio
    async def test_no_orders(self, client, customer_id):
        seed_order(client, customer_id, OrderStatus.CANCELLED)
        assert await OrderService.get_user_active_order(customer_id, client) is None

    @pytest.mark.asyncio
    async def test_assigned_order_skips_finished(self, client, customer_id):
        employee_id = seed_employee(client)
        product_id = seed_product(client, "Мандарин", 100, 5, barcode="4600000000001")
        seed_order(client, customer_id, OrderStatus.DELIVERED, employee_ids=[employee_id])
        active = seed_order(client, customer_id, OrderStatus.ASSEMBLING, employee_ids=[employee_id],
                            product_ids=[product_id], quantities="Мандарин - 3 шт")

        details = await OrderService.get_assigned_order(employee_id, client)

        assert details.id == active
        assert details.products_info[0].quantity == 3
        assert details.products_info[0].barcode == "4600000000001"

    @pytest.mark.asyncio
    async def test_nothing_assigned(self, client):
        assert await OrderService.get_assigned_order(seed_employee(client), client) is None


class TestUpdateStatus:

    @pytest.mark.asyncio
    async def test_valid_step(self, client, customer_id):
        order_id = seed_order(client, customer_id, OrderStatus.ACCEPTED)

        updated = await OrderService.update_status(order_id, OrderStatus.ASSEMBLING, client)

        assert updated.status == OrderStatus.ASSEMBLING
        assert client.fields(config.ORDERS_TABLE, order_id)[OrderFields.STATUS] == "сборка"

    @pytest.mark.asyncio
    async def test_invalid_step_writes_nothing(self, client, customer_id):
        order_id = seed_order(client, customer_id, OrderStatus.ACCEPTED)

        with pytest.raises(InvalidOrderTransitionException):
            await OrderService.update_status(order_id, OrderStatus.DELIVERED, client)

        assert client.calls_for(config.ORDERS_TABLE, "patch") == []

    @pytest.mark.asyncio
    async def test_missing_order(self, client):
        with pytest.raises(OrderNotFoundException):
            await OrderService.update_status("recMISSING", OrderStatus.ASSEMBLING, client)

    @pytest.mark.asyncio
    async def test_cancel_releases_courier(self, client, customer_id):
        employee_id = seed_employee(client)
        order_id = seed_order(client, customer_id, OrderStatus.PACKING, employee_ids=[employee_id])

        updated = await OrderService.update_status(order_id, OrderStatus.CANCELLED, client)

        assert updated.employee_ids == []
        assert client.fields(config.ORDERS_TABLE, order_id)[OrderFields.EMPLOYEES] == []
        assert client.table(config.NOTIFICATIONS_TABLE).records == {}

    @pytest.mark.asyncio
    async def test_delivery_notifies_customer(self, client, customer_id):
        seed_banner(client, "увед доставлен", "https://img/delivered.png")
        order_id = seed_order(client, customer_id, OrderStatus.DELIVERING, total=299)

        await OrderService.update_status(order_id, OrderStatus.DELIVERED, client)

        notifications = list(client.table(config.NOTIFICATIONS_TABLE).records.values())
        assert len(notifications) == 1
        fields = notifications[0]["fields"]
        assert fields[NotificationFields.CUSTOMER] == [customer_id]
        assert "299" in fields[NotificationFields.TEXT]
        assert fields[NotificationFields.ICON] == [{"url": "https://img/delivered.png"}]

    @pytest.mark.asyncio
    async def test_failed_notification_keeps_delivered_status(self, client, customer_id):
        order_id = seed_order(client, customer_id, OrderStatus.DELIVERING)
        client.fail(config.BANNERS_TABLE, "list")

        updated = await OrderService.update_status(order_id, OrderStatus.DELIVERED, client)

        assert updated.status == OrderStatus.DELIVERED
        assert client.fields(config.ORDERS_TABLE, order_id)[OrderFields.STATUS] == "доставлен"


class TestDelay:

    @pytest.mark.asyncio
    async def test_delivering_order_is_delayed(self, client, customer_id):
        order_id = seed_order(client, customer_id, OrderStatus.DELIVERING, delivery_time=15)

        order = await OrderService.delay_order(order_id, client)

        assert order.delivery_time == 30
        assert client.fields(config.ORDERS_TABLE, order_id)[OrderFields.DELIVERY_TIME] == 30

    @pytest.mark.asyncio
    async def test_other_statuses_cannot_be_delayed(self, client, customer_id):
        order_id = seed_order(client, customer_id, OrderStatus.PACKING)
        with pytest.raises(InvalidOrderTransitionException):
            await OrderService.delay_order(order_id, client)
