import inspect
import logging
from typing import Awaitable, Callable

from airtable import AirtableClient
from exceptions import RemoteCallException
from models.product import ProductDTO
from repositories.product import ProductRepository
from utils.sequence_guard import SequenceGuard

logger = logging.getLogger(__name__)

ProductsListener = Callable[[list[ProductDTO]], Awaitable[None] | object]


class ProductCatalog:
    """
    In-memory copy of the product catalog.

    refresh() reloads it from the remote base and notifies subscribers (the cart
    reconciles against every fresh load). A failed refresh keeps the previous
    products and records the error.
    """

    def __init__(self, client: AirtableClient):
        self.client = client
        self.products: list[ProductDTO] = []
        self.is_loading = True
        self.error: str | None = None
        self._listeners: list[ProductsListener] = []
        self._guard = SequenceGuard()

    def subscribe(self, listener: ProductsListener) -> None:
        self._listeners.append(listener)

    async def refresh(self) -> list[ProductDTO]:
        token = self._guard.begin()
        try:
            products = await ProductRepository.get_all(self.client)
        except RemoteCallException as e:
            logger.error(f"[Catalog] Failed to load products: {e}")
            self.error = str(e)
            return self.products
        finally:
            self.is_loading = False

        if not self._guard.is_current(token):
            logger.debug("[Catalog] Dropping stale product load")
            return self.products
        self._guard.commit(token)

        self.products = products
        self.error = None
        logger.debug(f"[Catalog] Loaded {len(products)} products")
        for listener in self._listeners:
            result = listener(products)
            if inspect.isawaitable(result):
                await result
        return products

    def get(self, product_id: str) -> ProductDTO | None:
        return next((p for p in self.products if p.id == product_id), None)

    @property
    def categories(self) -> list[str]:
        return sorted({p.category for p in self.products})

    def search(self, query: str | None = None, category: str | None = None,
               only_ids: set[str] | None = None) -> list[ProductDTO]:
        """Filter by case-insensitive name match, category and an optional id set (favorites)."""
        needle = (query or "").strip().lower()
        return [
            p for p in self.products
            if (not needle or needle in p.name.lower())
            and (category is None or p.category == category)
            and (only_ids is None or p.id in only_ids)
        ]
