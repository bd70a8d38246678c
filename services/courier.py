import logging

from airtable import AirtableClient
from enums.employee_status import EmployeeStatus
from enums.order_status import OrderStatus
from models.fields import OrderFields
from models.order import FullOrderDetailsDTO
from models.user import UserDTO
from repositories.employee import EmployeeRepository
from repositories.order import OrderRepository

logger = logging.getLogger(__name__)


class CourierService:
    @staticmethod
    async def find_available_employee(client: AirtableClient) -> UserDTO | None:
        """First online employee not linked to any undelivered, uncancelled order."""
        busy_ids = await OrderRepository.get_busy_employee_ids(client)
        online = await EmployeeRepository.get_online(client)
        available = next((employee for employee in online if employee.id not in busy_ids), None)
        logger.info(f"[Courier] {len(online)} online, {len(busy_ids)} busy, "
                    f"assigning {available.id if available else 'nobody'}")
        return available

    @staticmethod
    async def claim_queued_order(employee_id: str, client: AirtableClient) -> FullOrderDetailsDTO | None:
        """
        Assign the oldest unassigned accepted order to the employee.

        The base has no compare-and-set, so two couriers can claim the same order.
        After writing, the order is read back: if another courier's write landed
        last the claim is abandoned. A courier whose write was overwritten after
        the read-back loses the order on its next poll, because the order no
        longer shows up as assigned to it.
        """
        from services.order import OrderService

        queued = await OrderRepository.get_oldest_queued(client)
        if queued is None:
            return None

        await OrderRepository.update(queued.id, {OrderFields.EMPLOYEES: [employee_id]}, client)

        details = await OrderService.get_full_order_details(queued.id, client)
        if details is None:
            logger.warning(f"[Courier] Order {queued.id} vanished after claim by {employee_id}")
            return None
        if details.employee_ids != [employee_id]:
            logger.warning(f"[Courier] Lost claim race for order {queued.id}: "
                           f"now assigned to {details.employee_ids}")
            return None
        if details.status != OrderStatus.ACCEPTED:
            logger.warning(f"[Courier] Order {queued.id} moved to {details.status.value} during claim by {employee_id}")
            return None

        logger.info(f"[Courier] Employee {employee_id} claimed queued order {queued.id}")
        return details

    @staticmethod
    async def set_employee_status(employee_id: str, status: EmployeeStatus, client: AirtableClient) -> None:
        await EmployeeRepository.update_status(employee_id, status, client)
        logger.info(f"[Courier] Employee {employee_id} is now '{status.value}'")
