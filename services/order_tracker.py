import logging
import time
from typing import Callable

from pydantic import ValidationError

import config
from airtable import AirtableClient
from enums.order_status import OrderStatus
from exceptions import RemoteCallException
from models.order import FullOrderDetailsDTO, OrderDTO
from models.user import UserDTO
from services.order import OrderService
from services.review import ReviewService
from utils.local_store import LocalStore, LocalStoreKeys
from utils.sequence_guard import SequenceGuard

logger = logging.getLogger(__name__)


class CustomerOrderTracker:
    """
    Follows the customer's current order.

    The last seen order is cached locally and stays the source of truth: it is
    only dropped once the server reports it finished. Without a cached order the
    server is asked for an unfinished one (e.g. after logging in on a new device).
    A delivered order offers a review of the products not reviewed yet, or a
    short-lived thank-you when every product already has a review.
    """

    def __init__(self, client: AirtableClient, store: LocalStore, user: UserDTO | None,
                 clock: Callable[[], float] = time.time):
        self.client = client
        self.store = store
        self.user = user
        self.clock = clock
        self.active_order: OrderDTO | None = None
        self.reviewable_order: FullOrderDetailsDTO | None = None
        self.thank_you_order_id: str | None = None
        self.is_loading = False
        self.error: str | None = None
        self._guard = SequenceGuard()
        self.restore()

    def restore(self) -> None:
        snapshot = self.store.get(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT)
        if snapshot:
            try:
                self.active_order = OrderDTO.model_validate(snapshot)
            except ValidationError as e:
                logger.warning(f"[OrderTracker] Discarding unreadable order snapshot: {e}")
                self.store.delete(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT)

        thank_you = self.store.get(LocalStoreKeys.THANK_YOU_ORDER)
        if isinstance(thank_you, dict) and thank_you.get("id"):
            shown_at = thank_you.get("timestamp", 0) / 1000
            if self.clock() - shown_at < config.THANK_YOU_TTL_SECONDS:
                self.thank_you_order_id = thank_you["id"]
            else:
                self.store.delete(LocalStoreKeys.THANK_YOU_ORDER)

    def _snapshot(self, order: OrderDTO | None) -> None:
        self.active_order = order
        if order is None:
            self.store.delete(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT)
        else:
            self.store.set(LocalStoreKeys.ACTIVE_ORDER_SNAPSHOT, order.model_dump(mode="json"))

    @property
    def dismissed_review_ids(self) -> set[str]:
        return set(self.store.get(LocalStoreKeys.DISMISSED_REVIEW_ORDERS, []))

    def _add_dismissed(self, order_id: str) -> None:
        self.store.set(LocalStoreKeys.DISMISSED_REVIEW_ORDERS, sorted(self.dismissed_review_ids | {order_id}))

    async def poll(self) -> OrderDTO | None:
        if self.user is None or self.user.is_employee:
            self.active_order = None
            self.reviewable_order = None
            return None

        token = self._guard.begin()
        self.is_loading = True
        try:
            if self.active_order is not None:
                await self._follow(token, self.active_order.id)
            else:
                await self._discover(token)
            self.error = None
        except RemoteCallException as e:
            logger.error(f"[OrderTracker] Failed to poll order of user {self.user.id}: {e}")
            self.error = str(e)
        finally:
            self.is_loading = False
        return self.active_order

    def _accept(self, token: int) -> bool:
        if not self._guard.is_current(token):
            logger.debug("[OrderTracker] Dropping stale order poll")
            return False
        self._guard.commit(token)
        return True

    async def _follow(self, token: int, order_id: str) -> None:
        details = await OrderService.get_full_order_details(order_id, self.client)
        if not self._accept(token):
            return
        if details is None:
            # The base can lag behind a fresh write; keep showing the cached order
            logger.warning(f"[OrderTracker] Order {order_id} not found, keeping cached state")
            return

        if not details.is_terminal:
            self._snapshot(details)
            self.reviewable_order = None
            return

        self._snapshot(None)
        logger.info(f"[OrderTracker] Order {order_id} finished with status '{details.status.value}'")
        if details.status == OrderStatus.DELIVERED and details.id not in self.dismissed_review_ids:
            await self._offer_review(details)

    async def _discover(self, token: int) -> None:
        found = await OrderService.get_user_active_order(self.user.id, self.client)
        if not self._accept(token):
            return
        if found is not None and not found.is_terminal:
            logger.info(f"[OrderTracker] Found active order {found.id} of user {self.user.id}")
            self._snapshot(found)
            self.reviewable_order = None
            self.dismiss_thank_you()

    async def _offer_review(self, details: FullOrderDetailsDTO) -> None:
        reviewed = await ReviewService.get_reviewed_product_ids(self.user.email, self.client)
        remaining = [info for info in details.products_info if info.id not in reviewed]
        if remaining:
            self.reviewable_order = details.model_copy(update={"products_info": remaining})
            logger.info(f"[OrderTracker] {len(remaining)} products of order {details.id} await review")
        else:
            self.show_thank_you(details.id)

    def show_thank_you(self, order_id: str) -> None:
        self.thank_you_order_id = order_id
        self.store.set(LocalStoreKeys.THANK_YOU_ORDER, {"id": order_id, "timestamp": int(self.clock() * 1000)})

    def set_active_order(self, order: OrderDTO) -> None:
        """Track an order placed on this device right away."""
        self._guard.supersede()
        self._snapshot(order)
        self.reviewable_order = None
        self.dismiss_thank_you()

    def clear_order(self) -> None:
        if self.reviewable_order is not None:
            self._add_dismissed(self.reviewable_order.id)
        self._snapshot(None)
        self.reviewable_order = None
        self.dismiss_thank_you()

    def dismiss_review(self) -> None:
        if self.reviewable_order is not None:
            self._add_dismissed(self.reviewable_order.id)
            self.reviewable_order = None

    def dismiss_thank_you(self) -> None:
        if self.thank_you_order_id is not None:
            self._add_dismissed(self.thank_you_order_id)
            self.thank_you_order_id = None
        self.store.delete(LocalStoreKeys.THANK_YOU_ORDER)
