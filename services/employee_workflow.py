import logging

import config
from airtable import AirtableClient
from enums.app_entity import AppEntity
from enums.employee_app_status import EmployeeAppStatus
from enums.employee_status import EmployeeStatus
from enums.order_status import OrderStatus
from exceptions import InvalidOrderTransitionException, MissingSessionException, RemoteCallException
from models.order import FullOrderDetailsDTO
from models.user import UserDTO
from services.courier import CourierService
from services.order import OrderService
from utils.localizator import Localizator
from utils.order_state_machine import OrderStateMachine, get_next_valid_statuses
from utils.sequence_guard import SequenceGuard

logger = logging.getLogger(__name__)


class EmployeeWorkflow:
    """
    Courier side of the app.

    An online courier polls for the order assigned to them and, while free,
    claims the oldest queued order. Finishing or cancelling an order makes the
    courier free again.
    """

    def __init__(self, client: AirtableClient, user: UserDTO | None):
        self.client = client
        self.user = user
        self.status = EmployeeAppStatus.ONLINE \
            if user is not None and user.status == EmployeeStatus.ONLINE else EmployeeAppStatus.OFFLINE
        self.active_order: FullOrderDetailsDTO | None = None
        self.message: str | None = None
        self._guard = SequenceGuard()

    def _employee_id(self, operation: str) -> str:
        if self.user is None or not self.user.is_employee:
            raise MissingSessionException(operation)
        return self.user.id

    @property
    def poll_interval(self) -> float:
        if self.status == EmployeeAppStatus.DELIVERING:
            return config.DELIVERING_POLL_INTERVAL_SECONDS
        return config.EMPLOYEE_POLL_INTERVAL_SECONDS

    @property
    def available_statuses(self) -> list[OrderStatus]:
        if self.active_order is None:
            return []
        return get_next_valid_statuses(self.active_order.status)

    # ---------------------------------------------------------------- availability

    async def go_online(self) -> None:
        employee_id = self._employee_id("go_online")
        await CourierService.set_employee_status(employee_id, EmployeeStatus.ONLINE, self.client)
        if self.status == EmployeeAppStatus.OFFLINE:
            self.status = EmployeeAppStatus.ONLINE

    async def go_offline(self) -> None:
        employee_id = self._employee_id("go_offline")
        await CourierService.set_employee_status(employee_id, EmployeeStatus.OFFLINE, self.client)
        self._guard.supersede()
        self.status = EmployeeAppStatus.OFFLINE
        self.active_order = None

    # --------------------------------------------------------------------- polling

    async def poll(self) -> FullOrderDetailsDTO | None:
        if self.user is None or not self.user.is_employee or self.status == EmployeeAppStatus.OFFLINE:
            return None

        token = self._guard.begin()
        try:
            order = await OrderService.get_assigned_order(self.user.id, self.client)
            claimed = False
            if order is None and self.status == EmployeeAppStatus.ONLINE:
                order = await CourierService.claim_queued_order(self.user.id, self.client)
                claimed = order is not None
        except RemoteCallException as e:
            logger.error(f"[Employee] Poll failed for employee {self.user.id}: {e}")
            return self.active_order

        if not self._guard.is_current(token) or self.status == EmployeeAppStatus.OFFLINE:
            logger.debug("[Employee] Dropping stale poll result")
            return self.active_order
        self._guard.commit(token)

        if order is None:
            if self.active_order is not None:
                logger.info(f"[Employee] Order {self.active_order.id} is no longer assigned to {self.user.id}")
            self.active_order = None
            self.status = EmployeeAppStatus.ONLINE
            return None

        if claimed:
            self.message = Localizator.format_text(AppEntity.EMPLOYEE, "order_claimed",
                                                   order_number=order.order_number)
        self.active_order = order
        self.status = EmployeeAppStatus.DELIVERING
        return order

    # ------------------------------------------------------------------ the order

    def _current_order(self, operation: str) -> FullOrderDetailsDTO:
        self._employee_id(operation)
        if self.active_order is None:
            raise MissingSessionException(operation)
        return self.active_order

    async def update_order_status(self, new_status: OrderStatus) -> FullOrderDetailsDTO:
        order = self._current_order("update_order_status")
        updated = await OrderService.update_status(order.id, new_status, self.client, employee_id=self.user.id)
        # A poll started before the write would bring back the old status
        self._guard.supersede()
        if updated.is_terminal:
            self.active_order = None
            self.status = EmployeeAppStatus.ONLINE
        else:
            self.active_order = updated
        return updated

    async def advance(self) -> FullOrderDetailsDTO:
        """Move the order to the next status of the delivery chain."""
        order = self._current_order("advance")
        next_status = OrderStateMachine.next_status(order.status)
        if next_status is None:
            raise InvalidOrderTransitionException(order.id, order.status.value, order.status.value)
        return await self.update_order_status(next_status)

    async def cancel(self) -> FullOrderDetailsDTO:
        return await self.update_order_status(OrderStatus.CANCELLED)

    async def delay(self) -> FullOrderDetailsDTO:
        order = self._current_order("delay")
        delayed = await OrderService.delay_order(order.id, self.client)
        self._guard.supersede()
        self.active_order = order.model_copy(update={"delivery_time": delayed.delivery_time})
        self.message = Localizator.format_text(AppEntity.EMPLOYEE, "order_delayed",
                                               minutes=delayed.delivery_time)
        return self.active_order
