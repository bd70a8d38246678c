import asyncio
import logging
import math

import config
from airtable import AirtableClient
from exceptions import InvalidRatingException, RemoteCallException
from models.review import ReviewDTO
from repositories.product import ProductRepository
from repositories.review import ReviewRepository

logger = logging.getLogger(__name__)

MAX_RATING = 5


def round_rating(value: float) -> float:
    """Round half up to one decimal (2.25 -> 2.3)."""
    return math.floor(value * 10 + 0.5) / 10


class ReviewService:
    @staticmethod
    async def submit_review(email: str, product_id: str, rating: int, text: str | None,
                            client: AirtableClient) -> float:
        """
        Store a review and refresh the product's average rating.

        Returns the rating written to the product.
        """
        if not 1 <= rating <= MAX_RATING:
            raise InvalidRatingException(rating)

        await ReviewRepository.create(email, product_id, rating, text, client)
        # Freshly created records take a moment to show up in list queries
        await asyncio.sleep(config.REVIEW_SETTLE_SECONDS)
        return await ReviewService.update_product_rating(product_id, rating, client)

    @staticmethod
    async def update_product_rating(product_id: str, new_rating: int, client: AirtableClient) -> float:
        """Mean of all reviews, one decimal, capped at 5; the new rating alone if none are visible yet."""
        reviews = await ReviewRepository.get_by_product(product_id, client)
        if reviews:
            average = sum(review.rating or 0 for review in reviews) / len(reviews)
            final_rating = min(round_rating(average), MAX_RATING)
        else:
            final_rating = new_rating

        await ProductRepository.update_rating(product_id, final_rating, client)
        logger.info(f"[Reviews] Product {product_id} rating is now {final_rating} ({len(reviews)} reviews)")
        return final_rating

    @staticmethod
    async def get_reviewed_product_ids(email: str, client: AirtableClient) -> set[str]:
        try:
            return await ReviewRepository.get_product_ids_by_email(email, client)
        except RemoteCallException as e:
            logger.error(f"[Reviews] Failed to fetch reviews of {email}: {e}")
            return set()

    @staticmethod
    async def get_reviews_for_product(product_id: str, client: AirtableClient) -> list[ReviewDTO]:
        return await ReviewRepository.get_by_product(product_id, client)
