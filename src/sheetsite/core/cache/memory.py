"""Short-lived in-process cache of fetched tab rows."""

import copy
import threading
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

from sheetsite.config import TAB_CACHE_TTL
from sheetsite.protocols import TabFetcherProtocol


class TabCache:
    """Memoize tab rows for a fixed time-to-live.

    Entries never get evicted except by expiry; the key space is bounded by the
    fixed set of tab names.
    """

    def __init__(
        self,
        ttl: float = TAB_CACHE_TTL,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, list[dict[str, Any]]]] = {}
        # Tabs are fetched from worker threads.
        self._lock = threading.Lock()

    def get(self, spreadsheet_id: str, tab_name: str) -> list[dict[str, Any]] | None:
        """Return fresh rows for the tab, or None if absent or stale."""
        with self._lock:
            entry = self._entries.get((spreadsheet_id, tab_name))
        if entry is None:
            return None
        stored_at, rows = entry
        if self._clock() - stored_at >= self.ttl:
            return None
        return copy.deepcopy(rows)

    def put(self, spreadsheet_id: str, tab_name: str, rows: list[dict[str, Any]]) -> None:
        with self._lock:
            self._entries[(spreadsheet_id, tab_name)] = (self._clock(), copy.deepcopy(rows))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class CachedTabFetcher:
    """Wrap a tab fetcher with a TabCache. Failed fetches are not cached."""

    def __init__(self, fetcher: TabFetcherProtocol, cache: TabCache | None = None) -> None:
        self._fetcher = fetcher
        self.cache = cache or TabCache()

    def fetch_tab(self, spreadsheet_id: str, tab_name: str) -> list[dict[str, Any]]:
        rows = self.cache.get(spreadsheet_id, tab_name)
        if rows is not None:
            logger.debug("Tab {!r} served from memory cache", tab_name)
            return rows

        rows = self._fetcher.fetch_tab(spreadsheet_id, tab_name)
        self.cache.put(spreadsheet_id, tab_name, rows)
        return rows
