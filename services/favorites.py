from utils.local_store import LocalStore, LocalStoreKeys


class FavoritesService:
    """Favorite product ids, remembered on this device only."""

    def __init__(self, store: LocalStore):
        self.store = store

    @property
    def product_ids(self) -> list[str]:
        return list(self.store.get(LocalStoreKeys.FAVORITE_PRODUCTS, []))

    @property
    def count(self) -> int:
        return len(self.product_ids)

    def is_favorite(self, product_id: str) -> bool:
        return product_id in self.product_ids

    def add(self, product_id: str) -> None:
        ids = self.product_ids
        if product_id not in ids:
            self.store.set(LocalStoreKeys.FAVORITE_PRODUCTS, ids + [product_id])

    def remove(self, product_id: str) -> None:
        ids = self.product_ids
        if product_id in ids:
            self.store.set(LocalStoreKeys.FAVORITE_PRODUCTS, [i for i in ids if i != product_id])

    def toggle(self, product_id: str) -> bool:
        """Flip the favorite flag; returns the new state."""
        if self.is_favorite(product_id):
            self.remove(product_id)
            return False
        self.add(product_id)
        return True
