import config
from airtable import AirtableClient
from enums.order_status import OrderStatus
from models.fields import OrderFields
from models.order import OrderDTO
from utils import record_mapper
from utils.formula import and_, field_equals, find_in_linked, is_empty, not_, record_id_in

ACTIVE_ORDER_FORMULA = and_(
    not_(field_equals(OrderFields.STATUS, OrderStatus.DELIVERED.value)),
    not_(field_equals(OrderFields.STATUS, OrderStatus.CANCELLED.value)),
)

QUEUED_ORDER_FORMULA = and_(
    field_equals(OrderFields.STATUS, OrderStatus.ACCEPTED.value),
    is_empty(OrderFields.EMPLOYEES),
)


class OrderRepository:
    @staticmethod
    async def create(fields: dict, client: AirtableClient) -> OrderDTO:
        records = await client.table(config.ORDERS_TABLE).create_many([fields])
        return record_mapper.order_from_record(records[0])

    @staticmethod
    async def get_record(order_id: str, client: AirtableClient) -> dict | None:
        return await client.table(config.ORDERS_TABLE).get(order_id)

    @staticmethod
    async def get_by_id(order_id: str, client: AirtableClient) -> OrderDTO | None:
        record = await OrderRepository.get_record(order_id, client)
        if record is None:
            return None
        return record_mapper.order_from_record(record)

    @staticmethod
    async def get_by_ids(order_ids: list[str], client: AirtableClient) -> list[OrderDTO]:
        if not order_ids:
            return []
        records = await client.table(config.ORDERS_TABLE).list(record_id_in(order_ids))
        return [record_mapper.order_from_record(record) for record in records]

    @staticmethod
    async def get_by_customer(customer_id: str, client: AirtableClient) -> list[OrderDTO]:
        """Orders linked to the customer, newest first."""
        records = await client.table(config.ORDERS_TABLE).list(
            find_in_linked(OrderFields.CUSTOMER, customer_id),
            sort_field=OrderFields.CREATED_AT,
            sort_direction="desc",
        )
        return [record_mapper.order_from_record(record) for record in records]

    @staticmethod
    async def get_busy_employee_ids(client: AirtableClient) -> set[str]:
        """Employees linked to any order that is not delivered or cancelled."""
        records = await client.table(config.ORDERS_TABLE).list(
            ACTIVE_ORDER_FORMULA, fields=[OrderFields.EMPLOYEES]
        )
        busy = set()
        for record in records:
            busy.update(record_mapper.order_from_record(record).employee_ids)
        return busy

    @staticmethod
    async def get_oldest_queued(client: AirtableClient) -> OrderDTO | None:
        record = await client.table(config.ORDERS_TABLE).first(
            QUEUED_ORDER_FORMULA, sort_field=OrderFields.CREATED_AT, sort_direction="asc"
        )
        if record is None:
            return None
        return record_mapper.order_from_record(record)

    @staticmethod
    async def update(order_id: str, fields: dict, client: AirtableClient) -> None:
        await client.table(config.ORDERS_TABLE).patch(order_id, fields)
