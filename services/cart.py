import asyncio
import logging
import time
from typing import Callable

import config
from airtable import AirtableClient
from enums.app_entity import AppEntity
from exceptions import RemoteCallException
from models.cart_item import CartChange, CartItemDTO
from models.product import ProductDTO
from models.user import UserDTO
from repositories.customer import CustomerRepository
from utils.localizator import Localizator
from utils.quantity_codec import format_quantity

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart of one customer, kept consistent with live stock.

    Every mutation schedules a debounced save of the whole cart to the customer
    record. Rejected mutations leave the cart untouched and raise a toast instead.
    """

    def __init__(self, client: AirtableClient, user: UserDTO | None = None,
                 clock: Callable[[], float] = time.monotonic):
        self.client = client
        self.user = user
        self.clock = clock
        self.items: list[CartItemDTO] = []
        self.is_loading = False
        self._initial_load = True
        self._save_task: asyncio.Task | None = None
        self._dirty = False
        self._adjustments: dict[str, float] = {}
        self._adjustments_expire_at = 0.0
        self._toast: str | None = None
        self._toast_expire_at = 0.0

    # ------------------------------------------------------------------ derived

    def _find(self, product_id: str) -> CartItemDTO | None:
        return next((item for item in self.items if item.id == product_id), None)

    @property
    def in_stock_items(self) -> list[CartItemDTO]:
        return [item for item in self.items if item.available_stock > 0]

    @property
    def cart_total(self) -> float:
        return sum(item.line_total for item in self.in_stock_items)

    @property
    def cart_weight(self) -> float:
        return sum(item.weight_of(item.quantity) for item in self.in_stock_items)

    @property
    def cart_count(self) -> float:
        """Piece units plus one per weight-based position."""
        count = 0
        for item in self.in_stock_items:
            if item.is_weight_based:
                count += 1 if item.quantity_in_stock > 0 else 0
            else:
                count += item.quantity_in_stock
        return count

    @property
    def adjustment_notifications(self) -> dict[str, float]:
        if self._adjustments and self.clock() >= self._adjustments_expire_at:
            self._adjustments = {}
        return dict(self._adjustments)

    @property
    def toast(self) -> str | None:
        if self._toast is not None and self.clock() >= self._toast_expire_at:
            self._toast = None
        return self._toast

    def _show_toast(self, message_key: str, **params) -> None:
        self._toast = Localizator.format_text(AppEntity.CUSTOMER, message_key, **params)
        self._toast_expire_at = self.clock() + config.TOAST_SECONDS

    def _reject(self, message_key: str, **params) -> CartChange:
        self._show_toast(message_key, **params)
        logger.debug(f"[Cart] Rejected: {message_key} {params}")
        return CartChange(accepted=False, message_key=message_key, params=params)

    def _exceeds_weight(self, extra_weight: float) -> bool:
        return round(self.cart_weight + extra_weight, 3) > config.MAX_CART_WEIGHT_KG

    # ---------------------------------------------------------------- mutations

    def add_to_cart(self, product: ProductDTO) -> CartChange:
        step = product.add_step
        if self._exceeds_weight(product.weight_of(step)):
            return self._reject("cart_weight_limit", max_weight=format_quantity(config.MAX_CART_WEIGHT_KG))

        existing = self._find(product.id)
        if existing is not None:
            new_quantity = round(existing.quantity + step, 2)
            if new_quantity > product.available_stock:
                return self._reject("cart_stock_limit",
                                    available=format_quantity(product.available_stock), unit=product.unit)
            self._replace(existing.model_copy(update={"quantity": new_quantity}))
        else:
            if step > product.available_stock:
                return self._reject("cart_out_of_stock")
            self.items = self.items + [CartItemDTO.from_product(product, step)]

        self._changed()
        return CartChange(accepted=True, message_key="cart_item_added", params={"name": product.name})

    def update_quantity(self, product_id: str, quantity: float) -> CartChange:
        item = self._find(product_id)
        if item is None:
            return CartChange(accepted=False, message_key="cart_item_missing")

        # Only increases are checked against the weight cap, and only by the delta
        if quantity > item.quantity and self._exceeds_weight(item.weight_of(quantity - item.quantity)):
            return self._reject("cart_weight_limit", max_weight=format_quantity(config.MAX_CART_WEIGHT_KG))

        clamped = False
        if quantity > item.available_stock:
            self._show_toast("cart_stock_limit", available=format_quantity(item.available_stock), unit=item.unit)
            quantity = item.available_stock
            clamped = True

        if quantity <= 0:
            return self.remove_from_cart(product_id)

        self._replace(item.model_copy(update={"quantity": round(quantity, 3)}))
        self._changed()
        if clamped:
            return CartChange(accepted=True, message_key="cart_stock_limit",
                              params={"available": format_quantity(item.available_stock), "unit": item.unit})
        return CartChange(accepted=True, message_key="cart_item_updated")

    def remove_from_cart(self, product_id: str) -> CartChange:
        if self._find(product_id) is None:
            return CartChange(accepted=False, message_key="cart_item_missing")
        self.items = [item for item in self.items if item.id != product_id]
        self._changed()
        return CartChange(accepted=True, message_key="cart_item_removed")

    def clear(self) -> CartChange:
        self.items = []
        self._changed()
        return CartChange(accepted=True, message_key="cart_cleared")

    def finalize_order(self) -> None:
        """Empty the cart after a successful checkout."""
        self.clear()

    def _replace(self, updated: CartItemDTO) -> None:
        self.items = [updated if item.id == updated.id else item for item in self.items]

    def reconcile(self, products: list[ProductDTO]) -> dict[str, float]:
        """
        Align cached stock with a fresh product load.

        Quantities above fresh stock are clamped down and the removed amount is
        reported as an adjustment notice. Products that disappeared from the
        catalog count as out of stock; such items stay in the cart, unavailable.
        Returns the notices recorded by this pass.
        """
        fresh_stock = {p.id: p.available_stock for p in products}
        notices: dict[str, float] = {}
        changed = False
        reconciled = []

        for item in self.items:
            new_stock = fresh_stock.get(item.id, 0)
            update = {}
            if new_stock != item.available_stock:
                update["available_stock"] = new_stock
            if item.quantity > new_stock:
                update["quantity"] = new_stock
                notices[item.id] = round(item.quantity - new_stock, 3)
            if update:
                changed = True
                item = item.model_copy(update=update)
            reconciled.append(item)

        if not changed:
            return {}

        self.items = reconciled
        if notices:
            logger.info(f"[Cart] Clamped {len(notices)} items to fresh stock")
            self._adjustments = notices
            self._adjustments_expire_at = self.clock() + config.ADJUSTMENT_NOTICE_SECONDS
        self._changed()
        return notices

    # -------------------------------------------------------------- persistence

    async def load(self) -> None:
        """Load the saved cart once per login; employees always get an empty cart."""
        self.is_loading = True
        self._initial_load = True
        self._dirty = False
        try:
            if self.user is None or self.user.is_employee:
                self.items = []
                return
            self.items = await CustomerRepository.get_cart(self.user.id, self.client)
            logger.info(f"[Cart] Loaded {len(self.items)} items for user {self.user.id}")
        except RemoteCallException as e:
            logger.error(f"[Cart] Failed to load cart for user {self.user.id}: {e}")
            self.items = []
        finally:
            self.is_loading = False
            self._initial_load = False

    def _changed(self) -> None:
        if self._initial_load or self.user is None or self.user.is_employee:
            return
        self._dirty = True
        self._schedule_save()

    def _schedule_save(self) -> None:
        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()
        try:
            self._save_task = asyncio.get_running_loop().create_task(self._save_later())
        except RuntimeError:
            # No running loop, flush() persists the dirty cart
            self._save_task = None
            logger.debug("[Cart] No event loop, save deferred until flush")

    async def _save_later(self) -> None:
        await asyncio.sleep(config.CART_SAVE_DEBOUNCE_SECONDS)
        await self.save()

    async def save(self) -> None:
        if self.user is None:
            return
        self._dirty = False
        try:
            await CustomerRepository.update_cart(self.user.id, self.items, self.cart_total, self.client)
            logger.debug(f"[Cart] Saved {len(self.items)} items for user {self.user.id}")
        except RemoteCallException as e:
            self._dirty = True
            logger.error(f"[Cart] Failed to save cart for user {self.user.id}: {e}")

    async def flush(self) -> None:
        """Persist now instead of waiting for the debounce delay."""
        pending = self._save_task is not None and not self._save_task.done()
        if pending:
            self._save_task.cancel()
        self._save_task = None
        if pending or self._dirty:
            await self.save()

    async def close(self) -> None:
        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()
            try:
                await self._save_task
            except asyncio.CancelledError:
                pass
        self._save_task = None
        self._dirty = False
