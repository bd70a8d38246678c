import config
from airtable import AirtableClient
from enums.employee_status import EmployeeStatus
from models.fields import EmployeeFields
from models.user import UserDTO
from utils import record_mapper
from utils.formula import field_equals


class EmployeeRepository:
    @staticmethod
    async def get_by_password(password: str, client: AirtableClient) -> UserDTO | None:
        record = await client.table(config.EMPLOYEES_TABLE).first(field_equals(EmployeeFields.PASSWORD, password))
        if record is None:
            return None
        return record_mapper.employee_from_record(record)

    @staticmethod
    async def get_order_ids(employee_id: str, client: AirtableClient) -> list[str]:
        record = await client.table(config.EMPLOYEES_TABLE).get(employee_id)
        if record is None:
            return []
        return record_mapper.employee_order_ids(record)

    @staticmethod
    async def get_online(client: AirtableClient) -> list[UserDTO]:
        records = await client.table(config.EMPLOYEES_TABLE).list(
            field_equals(EmployeeFields.STATUS, EmployeeStatus.ONLINE.value)
        )
        return [record_mapper.employee_from_record(record) for record in records]

    @staticmethod
    async def update_status(employee_id: str, status: EmployeeStatus, client: AirtableClient) -> None:
        await client.table(config.EMPLOYEES_TABLE).patch(employee_id, {EmployeeFields.STATUS: status.value})
