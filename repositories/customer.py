import config
from airtable import AirtableClient
from models.cart_item import CartItemDTO
from models.fields import CustomerFields
from models.user import UserDTO
from repositories.product import ProductRepository
from utils import record_mapper
from utils.formula import field_equals


class CustomerRepository:
    @staticmethod
    async def get_by_email(email: str, client: AirtableClient) -> UserDTO | None:
        record = await client.table(config.CUSTOMERS_TABLE).first(field_equals(CustomerFields.EMAIL, email))
        if record is None:
            return None
        return record_mapper.customer_from_record(record)

    @staticmethod
    async def create(name: str, email: str, phone: str, password: str, client: AirtableClient) -> UserDTO:
        record = await client.table(config.CUSTOMERS_TABLE).create(
            record_mapper.customer_fields(name, email, phone, password)
        )
        return record_mapper.customer_from_record(record)

    @staticmethod
    async def get_cart(user_id: str, client: AirtableClient) -> list[CartItemDTO]:
        record = await client.table(config.CUSTOMERS_TABLE).get(user_id)
        if record is None:
            return []
        fields = record.get("fields") or {}
        product_ids = fields.get(CustomerFields.CART_PRODUCTS) or []
        if not product_ids or not fields.get(CustomerFields.CART_QUANTITIES):
            return []
        products = await ProductRepository.get_by_ids(product_ids, client)
        return record_mapper.cart_items_from_record(record, products)

    @staticmethod
    async def update_cart(user_id: str, items: list[CartItemDTO], total: float, client: AirtableClient) -> None:
        await client.table(config.CUSTOMERS_TABLE).patch(user_id, record_mapper.cart_fields(items, total))
