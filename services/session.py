import logging

from airtable import AirtableClient
from exceptions import MissingSessionException
from jobs.poller import Poller
from jobs.sync_job import build_pollers
from models.checkout import CheckoutResult
from models.product import ProductDTO
from models.user import UserDTO
from services.auth import AuthService
from services.cart import CartService
from services.catalog import ProductCatalog
from services.checkout import CheckoutService
from services.employee_workflow import EmployeeWorkflow
from services.favorites import FavoritesService
from services.notification import NotificationService
from services.order_tracker import CustomerOrderTracker
from services.review import ReviewService
from utils.local_store import LocalStore

logger = logging.getLogger(__name__)


class StorefrontSession:
    """
    Everything one device needs, wired together for the current user.

    Services that depend on who is logged in are rebuilt on login and logout;
    the catalog and favorites outlive the user.
    """

    def __init__(self, client: AirtableClient, store: LocalStore):
        self.client = client
        self.store = store
        self.auth = AuthService(client, store)
        self.catalog = ProductCatalog(client)
        self.favorites = FavoritesService(store)
        self.catalog.subscribe(self._on_products)
        self.pollers: list[Poller] = []
        self._bind(None)

    @property
    def user(self) -> UserDTO | None:
        return self.auth.user

    def _bind(self, user: UserDTO | None) -> None:
        self.cart = CartService(self.client, user)
        self.tracker = CustomerOrderTracker(self.client, self.store, user)
        self.notifications = NotificationService(self.client, self.store, user)
        self.employee_workflow = EmployeeWorkflow(self.client, user)

    async def _on_products(self, products: list[ProductDTO]) -> None:
        self.cart.reconcile(products)

    async def _start_user(self, user: UserDTO) -> UserDTO:
        # Pollers hold the previous user's services, rebuild them after binding
        was_running = bool(self.pollers)
        await self.stop()
        await self.cart.close()
        self._bind(user)
        await self.cart.load()
        if self.catalog.products:
            self.cart.reconcile(self.catalog.products)
        if was_running:
            self.start()
        return user

    async def restore(self) -> UserDTO | None:
        user = self.auth.restore()
        if user is not None:
            await self._start_user(user)
        return user

    async def login(self, login: str, password: str) -> UserDTO:
        return await self._start_user(await self.auth.login(login, password))

    async def register(self, name: str, email: str, phone: str, password: str) -> UserDTO:
        return await self._start_user(await self.auth.register(name, email, phone, password))

    def start(self) -> None:
        """Start the background pollers for the current user."""
        if self.pollers:
            return
        self.pollers = build_pollers(self)
        for poller in self.pollers:
            poller.start()

    async def stop(self) -> None:
        for poller in self.pollers:
            await poller.stop()
        self.pollers = []
        await self.cart.flush()

    async def close(self) -> None:
        await self.stop()
        await self.cart.close()

    async def logout(self) -> None:
        await self.stop()
        await self.cart.close()
        await self.auth.logout()
        self._bind(None)

    async def checkout(self, address: str) -> CheckoutResult:
        result = await CheckoutService.checkout(
            self.user, self.cart, address, self.tracker.active_order, self.client, self.catalog
        )
        if result.is_placed:
            self.tracker.set_active_order(result.order)
        return result

    async def submit_reviews(self, reviews: dict[str, tuple[int, str | None]]) -> dict[str, float]:
        """
        Submit ratings for the products of the delivered order awaiting review.

        `reviews` maps product id to (rating, text). Returns the new product
        ratings; the review prompt is closed afterwards.
        """
        if self.user is None:
            raise MissingSessionException("submit_reviews")
        order = self.tracker.reviewable_order
        if order is None:
            return {}

        allowed = {info.id for info in order.products_info}
        ratings = {}
        for product_id, (rating, text) in reviews.items():
            if product_id not in allowed:
                logger.warning(f"[Session] Product {product_id} is not part of order {order.id}, skipping review")
                continue
            ratings[product_id] = await ReviewService.submit_review(
                self.user.email, product_id, rating, text, self.client
            )
        self.tracker.dismiss_review()
        logger.info(f"[Session] Submitted {len(ratings)} reviews for order {order.id}")
        return ratings
