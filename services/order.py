import logging
import time

import config
from airtable import AirtableClient
from enums.order_status import OrderStatus
from exceptions import InvalidOrderTransitionException, OrderNotFoundException, RemoteCallException
from models.cart_item import CartItemDTO
from models.fields import OrderFields
from models.order import FullOrderDetailsDTO, OrderDTO
from repositories.employee import EmployeeRepository
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from services.courier import CourierService
from services.notification import NotificationService
from utils import record_mapper
from utils.order_state_machine import OrderStateMachine

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    """ED- followed by the last six digits of the current epoch milliseconds."""
    return f"ED-{str(int(time.time() * 1000))[-6:]}"


class OrderService:
    @staticmethod
    async def create_order(customer_id: str, items: list[CartItemDTO], total: float, address: str,
                           client: AirtableClient) -> tuple[OrderDTO, bool]:
        """
        Create an order, assigning a free courier when there is one.

        Returns the created order and whether a courier was assigned. A failed
        courier lookup does not block the order; it is created unassigned and
        waits for a courier to claim it.
        """
        try:
            employee = await CourierService.find_available_employee(client)
        except RemoteCallException as e:
            logger.warning(f"[Order] Courier lookup failed, queueing order: {e}")
            employee = None

        fields = record_mapper.order_fields(
            customer_id, items, total, address,
            employee.id if employee else None,
            generate_order_number(),
        )
        order = await OrderRepository.create(fields, client)
        logger.info(f"[Order] Created order {order.id} ({order.order_number}) for user {customer_id}, "
                    f"{'assigned to ' + employee.id if employee else 'queued'}")
        return order, employee is not None

    @staticmethod
    async def get_full_order_details(order_id: str, client: AirtableClient) -> FullOrderDetailsDTO | None:
        record = await OrderRepository.get_record(order_id, client)
        if record is None:
            return None
        order = record_mapper.order_from_record(record)
        products = await ProductRepository.get_by_ids(order.product_ids, client)
        return record_mapper.full_order_details(record, products)

    @staticmethod
    async def get_user_active_order(customer_id: str, client: AirtableClient) -> OrderDTO | None:
        """Newest order that is not finished; otherwise the newest delivered one."""
        orders = await OrderRepository.get_by_customer(customer_id, client)
        active = next((order for order in orders if not order.is_terminal), None)
        if active is not None:
            return active
        return next((order for order in orders if order.status == OrderStatus.DELIVERED), None)

    @staticmethod
    async def get_assigned_order(employee_id: str, client: AirtableClient) -> FullOrderDetailsDTO | None:
        order_ids = await EmployeeRepository.get_order_ids(employee_id, client)
        if not order_ids:
            return None
        orders = await OrderRepository.get_by_ids(order_ids, client)
        active = next((order for order in orders if not order.is_terminal), None)
        if active is None:
            return None
        return await OrderService.get_full_order_details(active.id, client)

    @staticmethod
    async def update_status(order_id: str, new_status: OrderStatus, client: AirtableClient,
                            employee_id: str | None = None) -> FullOrderDetailsDTO:
        """
        Move an order one step along its lifecycle.

        The order is re-read right before the write so the transition is checked
        against current state and the delivered notification reaches the right
        customer. Final statuses release the courier. The notification is best
        effort and never undoes the status change.
        """
        details = await OrderService.get_full_order_details(order_id, client)
        if details is None:
            raise OrderNotFoundException(order_id)

        OrderStateMachine.validate_transition(order_id, details.status, new_status, employee_id)

        fields = {OrderFields.STATUS: new_status.value}
        if new_status.is_terminal:
            fields[OrderFields.EMPLOYEES] = []
        await OrderRepository.update(order_id, fields, client)

        updated = details.model_copy(update={
            "status": new_status,
            "employee_ids": [] if new_status.is_terminal else details.employee_ids,
        })
        if new_status == OrderStatus.DELIVERED:
            await NotificationService.create_delivered_notification(details, client)
        return updated

    @staticmethod
    async def delay_order(order_id: str, client: AirtableClient) -> OrderDTO:
        """Extend the delivery time of an order that is on its way."""
        order = await OrderRepository.get_by_id(order_id, client)
        if order is None:
            raise OrderNotFoundException(order_id)
        if not OrderStateMachine.can_delay(order.status):
            raise InvalidOrderTransitionException(order_id, order.status.value, order.status.value)

        delivery_time = order.delivery_time + config.ORDER_DELAY_MINUTES
        await OrderRepository.update(order_id, {OrderFields.DELIVERY_TIME: delivery_time}, client)
        logger.info(f"[Order] Order {order_id} delayed, delivery time now {delivery_time} min")
        return order.model_copy(update={"delivery_time": delivery_time})
