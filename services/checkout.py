import logging

import config
from airtable import AirtableClient
from enums.app_entity import AppEntity
from enums.checkout_outcome import CheckoutOutcome
from exceptions import (
    ActiveOrderExistsException,
    EmptyCartException,
    MissingSessionException,
    ValidationException,
)
from models.cart_item import CartItemDTO
from models.checkout import CheckoutResult
from models.order import OrderDTO
from models.user import UserDTO
from repositories.product import ProductRepository
from services.cart import CartService
from services.catalog import ProductCatalog
from services.order import OrderService
from utils.error_handler import ERROR_MAPPING, handle_service_error

logger = logging.getLogger(__name__)


class CheckoutService:
    @staticmethod
    def purchasable_items(items: list[CartItemDTO]) -> list[CartItemDTO]:
        """Items fully covered by current stock."""
        return [item for item in items if item.available_stock > 0 and 0 < item.quantity <= item.available_stock]

    @staticmethod
    def _validate(user: UserDTO | None, cart: CartService, active_order: OrderDTO | None) -> list[CartItemDTO]:
        if active_order is not None and not active_order.is_terminal:
            raise ActiveOrderExistsException(user.id if user else "", active_order.id)
        if user is None:
            raise MissingSessionException("checkout")
        items = CheckoutService.purchasable_items(cart.items)
        if not items:
            raise EmptyCartException(user.id)
        return items

    @staticmethod
    async def checkout(user: UserDTO | None, cart: CartService, address: str, active_order: OrderDTO | None,
                       client: AirtableClient, catalog: ProductCatalog | None = None) -> CheckoutResult:
        """
        Place an order for everything in stock in the cart.

        Precondition failures are returned as REJECTED without writing anything.
        Otherwise the order is created (CONFIRMED with a courier, QUEUED without),
        stock is decremented, the catalog reloaded and the cart emptied. Remote
        failures propagate; the caller retries by submitting again.
        """
        try:
            items = CheckoutService._validate(user, cart, active_order)
        except ValidationException as e:
            return CheckoutResult(
                outcome=CheckoutOutcome.REJECTED,
                message_key=ERROR_MAPPING[type(e)],
                params={"message": handle_service_error(e, AppEntity.CUSTOMER)},
            )

        total = sum(item.line_total for item in items) + config.DELIVERY_FEE
        order, assigned = await OrderService.create_order(user.id, items, total, address, client)

        await ProductRepository.update_stock(items, client)
        if catalog is not None:
            await catalog.refresh()
        cart.finalize_order()

        if assigned:
            return CheckoutResult(outcome=CheckoutOutcome.CONFIRMED, message_key="checkout_confirmed", order=order)
        logger.info(f"[Checkout] No free courier, order {order.id} queued")
        return CheckoutResult(outcome=CheckoutOutcome.QUEUED, message_key="checkout_queued", order=order)
