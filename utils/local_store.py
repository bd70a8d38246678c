"""Device-local persisted state: a small JSON document of key -> value."""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LocalStoreKeys:
    AUTH_USER = "authUser"
    FAVORITE_PRODUCTS = "favoriteProducts"
    DISMISSED_REVIEW_ORDERS = "dismissedReviewOrders"
    READ_NOTIFICATIONS = "readNotifications"
    THANK_YOU_ORDER = "thankYouOrder"
    ACTIVE_ORDER_SNAPSHOT = "activeOrderSnapshot"


class LocalStore:
    """
    Key/value state kept in a single JSON file with 0600 permissions.

    Every write goes straight to disk. A missing or corrupt file is treated as
    empty; write failures are logged and the in-memory value is kept.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                self._data = data
            else:
                logger.warning(f"Ignoring local state in {self.path}: not a JSON object")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load local state from {self.path}: {e}")

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.chmod(self.path, 0o600)
        except OSError as e:
            logger.error(f"Could not save local state to {self.path}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def delete(self, *keys: str) -> None:
        removed = False
        for key in keys:
            if key in self._data:
                del self._data[key]
                removed = True
        if removed:
            self._save()

    def __contains__(self, key: str) -> bool:
        return key in self._data
