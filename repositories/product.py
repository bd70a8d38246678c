import logging

import config
from airtable import AirtableClient
from models.cart_item import CartItemDTO
from models.fields import ProductFields
from models.product import ProductDTO
from utils import record_mapper
from utils.formula import record_id_in

logger = logging.getLogger(__name__)


class ProductRepository:
    @staticmethod
    async def get_all(client: AirtableClient) -> list[ProductDTO]:
        records = await client.table(config.PRODUCTS_TABLE).list()
        return record_mapper.products_from_records(records)

    @staticmethod
    async def get_by_ids(product_ids: list[str], client: AirtableClient) -> list[ProductDTO]:
        if not product_ids:
            return []
        records = await client.table(config.PRODUCTS_TABLE).list(record_id_in(product_ids))
        return record_mapper.products_from_records(records)

    @staticmethod
    async def update_stock(items: list[CartItemDTO], client: AirtableClient) -> None:
        """Write availableStock - quantity for every purchased item."""
        records = [
            {"id": item.id, "fields": {ProductFields.STOCK: round(max(item.available_stock - item.quantity, 0), 3)}}
            for item in items
        ]
        if not records:
            return
        await client.table(config.PRODUCTS_TABLE).batch_patch(records)
        logger.info(f"Decremented stock of {len(records)} products")

    @staticmethod
    async def update_rating(product_id: str, rating: float, client: AirtableClient) -> None:
        await client.table(config.PRODUCTS_TABLE).patch(product_id, {ProductFields.RATING: rating})
