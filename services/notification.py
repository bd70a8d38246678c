import logging
from datetime import datetime

from airtable import AirtableClient
from enums.app_entity import AppEntity
from exceptions import RemoteCallException
from models.notification import NotificationDTO
from models.order import FullOrderDetailsDTO
from models.user import UserDTO
from repositories.banner import BannerRepository
from repositories.notification import NotificationRepository
from utils.local_store import LocalStore, LocalStoreKeys
from utils.localizator import Localizator
from utils.sequence_guard import SequenceGuard

logger = logging.getLogger(__name__)

DELIVERED_BANNER_NAME = "увед доставлен"


class NotificationService:
    """Customer inbox: remote notifications plus the locally remembered read ids."""

    def __init__(self, client: AirtableClient, store: LocalStore, user: UserDTO | None):
        self.client = client
        self.store = store
        self.user = user
        self.notifications: list[NotificationDTO] = []
        self.is_loading = False
        self._guard = SequenceGuard()

    @property
    def read_ids(self) -> set[str]:
        return set(self.store.get(LocalStoreKeys.READ_NOTIFICATIONS, []))

    @property
    def unread_count(self) -> int:
        read = self.read_ids
        return sum(1 for n in self.notifications if n.id not in read)

    async def fetch(self) -> list[NotificationDTO]:
        if self.user is None or self.user.is_employee:
            self.notifications = []
            return self.notifications

        token = self._guard.begin()
        self.is_loading = True
        try:
            notifications = await NotificationRepository.get_by_customer(self.user.id, self.client)
        except RemoteCallException as e:
            logger.error(f"[Notifications] Could not fetch notifications for user {self.user.id}: {e}")
            return self.notifications
        finally:
            self.is_loading = False

        if self._guard.is_current(token):
            self._guard.commit(token)
            self.notifications = notifications
        return self.notifications

    def mark_all_as_read(self) -> None:
        read = self.read_ids | {n.id for n in self.notifications}
        self.store.set(LocalStoreKeys.READ_NOTIFICATIONS, sorted(read))

    @staticmethod
    def delivered_text(details: FullOrderDetailsDTO) -> str:
        created_at = details.created_at or datetime.now().astimezone()
        return Localizator.format_text(
            AppEntity.COMMON, "notification_order_delivered",
            total=f"{details.total_amount:.0f}",
            time=created_at.astimezone().strftime("%H:%M"),
        )

    @staticmethod
    async def create_delivered_notification(details: FullOrderDetailsDTO, client: AirtableClient) -> bool:
        """
        Tell the customer their order arrived.

        Best effort: a missing customer, a missing icon or a failed write is
        logged and reported as False, never raised.
        """
        if not details.customer_id:
            logger.error(f"[Notifications] Order {details.id} has no customer, cannot notify")
            return False
        try:
            icon_url = await BannerRepository.get_url(DELIVERED_BANNER_NAME, client)
            if not icon_url:
                logger.error(f"[Notifications] Banner '{DELIVERED_BANNER_NAME}' not found, cannot notify")
                return False
            await NotificationRepository.create(
                NotificationService.delivered_text(details), details.customer_id, icon_url, client
            )
        except RemoteCallException as e:
            logger.error(f"[Notifications] Failed to create delivered notification for order {details.id}: {e}")
            return False
        logger.info(f"[Notifications] Notified user {details.customer_id} about delivered order {details.id}")
        return True
