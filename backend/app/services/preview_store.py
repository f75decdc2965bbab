import threading
import time
from collections import OrderedDict
from typing import Callable, Optional


class PreviewStore:
    """
    In-memory preview HTML keyed by preview id.

    - bounded: past `capacity` the oldest entry is evicted
    - entries expire `ttl_seconds` after they were stored (checked lazily)
    - thread-safe; concurrent runs write disjoint keys
    """

    def __init__(self, capacity: int = 500, ttl_seconds: float = 86400,
                 clock: Callable[[], float] = time.monotonic):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # preview_id -> (html, expires_at)
        self._items: "OrderedDict[str, tuple[str, float]]" = OrderedDict()

    def _purge_expired_unlocked(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._items.items() if expires_at <= now]
        for key in expired:
            del self._items[key]

    def put(self, preview_id: str, html: str) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired_unlocked(now)
            self._items.pop(preview_id, None)
            self._items[preview_id] = (html, now + self.ttl_seconds)
            while len(self._items) > self.capacity:
                self._items.popitem(last=False)

    def get(self, preview_id: str) -> Optional[str]:
        now = self._clock()
        with self._lock:
            item = self._items.get(preview_id)
            if item is None:
                return None
            html, expires_at = item
            if expires_at <= now:
                del self._items[preview_id]
                return None
            return html

    def __contains__(self, preview_id: str) -> bool:
        return self.get(preview_id) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired_unlocked(self._clock())
            return len(self._items)
