import config
from airtable import AirtableClient
from utils import record_mapper


class FeedbackRepository:
    @staticmethod
    async def create(topic: str, text: str, error_text: str | None, client: AirtableClient) -> None:
        await client.table(config.FEEDBACK_TABLE).create(record_mapper.feedback_fields(topic, text, error_text))
