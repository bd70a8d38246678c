import config
from airtable import AirtableClient
from models.fields import BannerFields
from utils import record_mapper
from utils.formula import field_equals


class BannerRepository:
    @staticmethod
    async def get_url(name: str, client: AirtableClient) -> str | None:
        record = await client.table(config.BANNERS_TABLE).first(field_equals(BannerFields.NAME, name))
        if record is None:
            return None
        return record_mapper.banner_url(record)
