from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .exceptions import NewsFetchError
from .messages import message
from .models import NewsItem

logger = logging.getLogger(__name__)


class NewsBoard:
    """
    The in-memory "current batch" slot shown to readers.

    Every refresh takes a generation token from `begin()`. Only the holder of the
    latest token may write the slot, so a slow refresh that finishes after a newer
    one is dropped instead of overwriting fresher news.
    """

    def __init__(self, fetch: Callable[[], List[NewsItem]], *, language: str = "ja") -> None:
        self._fetch = fetch
        self._language = language
        self._lock = threading.Lock()
        self._generation = 0
        self.items: List[NewsItem] = []
        self.error: Optional[str] = None
        self.updated_at: Optional[datetime] = None
        self.loading = False

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            self.loading = True
            self.error = None
            return self._generation

    def commit(self, token: int, items: List[NewsItem]) -> bool:
        """Replace the batch wholesale. Returns False when `token` is stale."""
        with self._lock:
            if token != self._generation:
                logger.info("Dropping stale refresh %d (latest is %d)", token, self._generation)
                return False
            self.items = list(items)
            self.error = None
            self.updated_at = datetime.now(timezone.utc)
            self.loading = False
            return True

    def fail(self, token: int, error: str) -> bool:
        """Record a user-facing error; the previous batch stays visible. False when stale."""
        with self._lock:
            if token != self._generation:
                logger.info("Dropping stale failure %d (latest is %d)", token, self._generation)
                return False
            self.error = error
            self.loading = False
            return True

    def refresh(self) -> bool:
        """Fetch once and publish the outcome if no newer refresh started meanwhile."""
        token = self.begin()
        try:
            items = self._fetch()
        except NewsFetchError as e:
            return self.fail(token, e.message)
        except Exception:
            # Unexpected failures still end the refresh with a readable message
            logger.exception("Refresh %d crashed", token)
            return self.fail(token, message("network", self._language))
        return self.commit(token, items)
