import config
from airtable import AirtableClient
from models.fields import ReviewFields
from models.review import ReviewDTO
from utils import record_mapper
from utils.formula import field_equals


class ReviewRepository:
    @staticmethod
    async def create(email: str, product_id: str, rating: int, text: str | None, client: AirtableClient) -> None:
        await client.table(config.REVIEWS_TABLE).create(
            record_mapper.review_fields(email, product_id, rating, text)
        )

    @staticmethod
    async def get_product_ids_by_email(email: str, client: AirtableClient) -> set[str]:
        records = await client.table(config.REVIEWS_TABLE).list(
            field_equals(ReviewFields.EMAIL, email), fields=[ReviewFields.PRODUCT]
        )
        product_ids = set()
        for record in records:
            product_ids.update(record_mapper.review_from_record(record).product_ids)
        return product_ids

    @staticmethod
    async def get_by_product(product_id: str, client: AirtableClient) -> list[ReviewDTO]:
        """
        Reviews linked to the product, newest first.

        Linked-record formulas match on the primary field rather than the record
        id, so the whole table is fetched and filtered locally.
        """
        records = await client.table(config.REVIEWS_TABLE).list()
        reviews = [record_mapper.review_from_record(record) for record in records]
        reviews = [review for review in reviews if product_id in review.product_ids]
        reviews.sort(key=lambda review: review.created_at.timestamp() if review.created_at else 0, reverse=True)
        return reviews
