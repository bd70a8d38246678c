import logging

from airtable import AirtableClient
from exceptions import FeedbackSubmitException, RemoteCallException
from repositories.feedback import FeedbackRepository

logger = logging.getLogger(__name__)


class FeedbackService:
    @staticmethod
    async def submit(topic: str, text: str, client: AirtableClient, error_text: str | None = None) -> None:
        """Send a beta-tester report (idea, bug or question) to the feedback table."""
        try:
            await FeedbackRepository.create(topic, text, error_text, client)
        except RemoteCallException as e:
            logger.error(f"[Feedback] Could not submit '{topic}': {e}")
            raise FeedbackSubmitException(topic, str(e)) from e
        logger.info(f"[Feedback] Submitted '{topic}'")
