import config
from airtable import AirtableClient
from models.fields import NotificationFields
from models.notification import NotificationDTO
from utils import record_mapper
from utils.formula import find_in_linked


class NotificationRepository:
    @staticmethod
    async def create(text: str, customer_id: str, icon_url: str, client: AirtableClient) -> None:
        await client.table(config.NOTIFICATIONS_TABLE).create_many(
            [record_mapper.notification_fields(text, customer_id, icon_url)]
        )

    @staticmethod
    async def get_by_customer(customer_id: str, client: AirtableClient) -> list[NotificationDTO]:
        records = await client.table(config.NOTIFICATIONS_TABLE).list(
            find_in_linked(NotificationFields.CUSTOMER, customer_id),
            sort_field=NotificationFields.SENT_AT,
            sort_direction="desc",
        )
        return [record_mapper.notification_from_record(record) for record in records]
