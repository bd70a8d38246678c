"""
Unit Tests: CustomerOrderTracker

Tests for services/order_tracker.py covering:
- snapshot restore and thank-you TTL
- following a cached order / discovering one on the server
- review offer vs thank-you after delivery
- failure handling and stale poll results
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

import config
from enums.order_status import OrderStatus
from enums.user_role import UserRole
from models.fields import OrderFields, ReviewFields
from models.order import OrderDTO
from models.user import UserDTO
from services.order import OrderService
from services.order_tracker import CustomerOrderTracker
from utils.local_store import LocalStoreKeys
from fakes import seed_customer, seed_order, seed_product


@pytest.fixture
def user(client):
    return UserDTO(id=seed_customer(client), email="anna@example.com")


@pytest.fixture
def products(client):
    return [seed_product(client, "Мандарин", 100, 5), seed_product(client, "Хлеб", 50, 5)]


def _delivered_order(client, user, products):
    return seed_order(client, user.id, OrderStatus.DELIVERED, product_ids=products,
                      quantities="Мандарин - 2 шт, Хлеб - 1 шт")


def _review(client, email, product_id):
    client.insert(config.REVIEWS_TABLE, {
        ReviewFields.EMAIL: email, ReviewFields.PRODUCT: [product_id], ReviewFields.RATING: 5,
    })


class TestRestore:

    def test_snapshot_is_restored(self, client, store, user):
        store.set(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT, OrderDTO(id="recO1").model_dump(mode="json"))
        tracker = CustomerOrderTracker(client, store, user)
        assert tracker.active_order.id == "recO1"

    def test_unreadable_snapshot_is_dropped(self, client, store, user):
        store.set(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT, {"status": "принят"})
        tracker = CustomerOrderTracker(client, store, user)
        assert tracker.active_order is None
        assert LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT not in store

    def test_thank_you_within_ttl(self, client, store, user, clock):
        store.set(LocalStoreKeys.THANK_YOU_ORDER, {"id": "recO1", "timestamp": int(clock() * 1000) - 60_000})
        tracker = CustomerOrderTracker(client, store, user, clock=clock)
        assert tracker.thank_you_order_id == "recO1"

    def test_expired_thank_you_is_removed(self, client, store, user, clock):
        expired_at = int((clock() - config.THANK_YOU_TTL_SECONDS - 1) * 1000)
        store.set(LocalStoreKeys.THANK_YOU_ORDER, {"id": "recO1", "timestamp": expired_at})
        tracker = CustomerOrderTracker(client, store, user, clock=clock)
        assert tracker.thank_you_order_id is None
        assert LocalStoreKeys.THANK_YOU_ORDER not in store


class TestPolling:

    @pytest.mark.asyncio
    async def test_discovers_unfinished_order(self, client, store, user):
        order_id = seed_order(client, user.id, OrderStatus.ASSEMBLING)
        tracker = CustomerOrderTracker(client, store, user)

        order = await tracker.poll()

        assert order.id == order_id
        assert store.get(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT)["id"] == order_id

    @pytest.mark.asyncio
    async def test_discovery_ignores_finished_orders(self, client, store, user, products):
        _delivered_order(client, user, products)
        tracker = CustomerOrderTracker(client, store, user)

        assert await tracker.poll() is None
        assert tracker.reviewable_order is None

    @pytest.mark.asyncio
    async def test_follows_cached_order(self, client, store, user):
        order_id = seed_order(client, user.id, OrderStatus.ACCEPTED)
        tracker = CustomerOrderTracker(client, store, user)
        await tracker.poll()
        client.update(config.ORDERS_TABLE, order_id, {OrderFields.STATUS: OrderStatus.DELIVERING.value})

        order = await tracker.poll()

        assert order.status == OrderStatus.DELIVERING

    @pytest.mark.asyncio
    async def test_delivery_offers_review_of_unreviewed_products(self, client, store, user, products):
        order_id = seed_order(client, user.id, OrderStatus.DELIVERING, product_ids=products,
                              quantities="Мандарин - 2 шт, Хлеб - 1 шт")
        _review(client, user.email, products[0])
        tracker = CustomerOrderTracker(client, store, user)
        await tracker.poll()
        client.update(config.ORDERS_TABLE, order_id, {OrderFields.STATUS: OrderStatus.DELIVERED.value})

        assert await tracker.poll() is None

        assert tracker.active_order is None
        assert LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT not in store
        assert [info.name for info in tracker.reviewable_order.products_info] == ["Хлеб"]

    @pytest.mark.asyncio
    async def test_delivery_of_reviewed_products_shows_thank_you(self, client, store, user, products, clock):
        order_id = _delivered_order(client, user, products)
        for product_id in products:
            _review(client, user.email, product_id)
        tracker = CustomerOrderTracker(client, store, user, clock=clock)
        tracker.set_active_order(OrderDTO(id=order_id))

        await tracker.poll()

        assert tracker.reviewable_order is None
        assert tracker.thank_you_order_id == order_id
        assert store.get(LocalStoreKeys.THANK_YOU_ORDER)["id"] == order_id

    @pytest.mark.asyncio
    async def test_dismissed_order_is_not_offered_again(self, client, store, user, products):
        order_id = _delivered_order(client, user, products)
        store.set(LocalStoreKeys.DISMISSED_REVIEW_ORDERS, [order_id])
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id=order_id))

        await tracker.poll()

        assert tracker.reviewable_order is None
        assert tracker.thank_you_order_id is None

    @pytest.mark.asyncio
    async def test_cancelled_order_is_cleared(self, client, store, user):
        order_id = seed_order(client, user.id, OrderStatus.CANCELLED)
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id=order_id))

        await tracker.poll()

        assert tracker.active_order is None
        assert tracker.reviewable_order is None

    @pytest.mark.asyncio
    async def test_missing_cached_order_is_kept(self, client, store, user):
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id="recLAGGING"))

        await tracker.poll()

        assert tracker.active_order.id == "recLAGGING"

    @pytest.mark.asyncio
    async def test_failure_keeps_state_and_sets_error(self, client, store, user):
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id="recO1", status=OrderStatus.PACKING))
        client.fail(config.ORDERS_TABLE, "get")

        order = await tracker.poll()

        assert order.id == "recO1"
        assert tracker.error is not None

        client.recover()
        await tracker.poll()
        assert tracker.error is None

    @pytest.mark.asyncio
    async def test_employees_are_not_tracked(self, client, store):
        tracker = CustomerOrderTracker(client, store, UserDTO(id="recE1", role=UserRole.EMPLOYEE))
        assert await tracker.poll() is None
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_stale_poll_does_not_overwrite_newer_order(self, client, store, user):
        order_id = seed_order(client, user.id, OrderStatus.ACCEPTED)
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id=order_id))
        release = asyncio.Event()
        original = OrderService.get_full_order_details

        async def slow_details(requested_id, requested_client):
            details = await original(requested_id, requested_client)
            await release.wait()
            return details

        with patch.object(OrderService, "get_full_order_details", new=AsyncMock(side_effect=slow_details)):
            slow_poll = asyncio.create_task(tracker.poll())
            await asyncio.sleep(0)
            tracker.set_active_order(OrderDTO(id=order_id, status=OrderStatus.ASSEMBLING))
            release.set()
            await slow_poll

        assert tracker.active_order.status == OrderStatus.ASSEMBLING


class TestDismissals:

    @pytest.mark.asyncio
    async def test_dismiss_review_remembers_order(self, client, store, user, products):
        order_id = _delivered_order(client, user, products)
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id=order_id))
        await tracker.poll()

        tracker.dismiss_review()

        assert tracker.reviewable_order is None
        assert order_id in store.get(LocalStoreKeys.DISMISSED_REVIEW_ORDERS)

    def test_dismiss_thank_you(self, client, store, user):
        tracker = CustomerOrderTracker(client, store, user)
        tracker.show_thank_you("recO1")

        tracker.dismiss_thank_you()

        assert tracker.thank_you_order_id is None
        assert LocalStoreKeys.THANK_YOU_ORDER not in store
        assert "recO1" in store.get(LocalStoreKeys.DISMISSED_REVIEW_ORDERS)

    def test_clear_order(self, client, store, user):
        tracker = CustomerOrderTracker(client, store, user)
        tracker.set_active_order(OrderDTO(id="recO1"))

        tracker.clear_order()

        assert tracker.active_order is None
        assert LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT not in store
