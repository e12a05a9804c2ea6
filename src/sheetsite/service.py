"""Serve site snapshots from cache or the spreadsheet, and refresh them."""

import sqlite3
import time

from loguru import logger

from sheetsite.assembler import SiteDataAssembler
from sheetsite.config import SheetsConfig
from sheetsite.core.cache.memory import CachedTabFetcher, TabCache
from sheetsite.core.cache.store import SqliteCacheStore
from sheetsite.core.database.sites import SqliteSiteStore
from sheetsite.errors import CacheUnavailableError, SiteNotFoundError, SiteStoreError
from sheetsite.fetcher import SheetsFetcher
from sheetsite.models.site import SiteRecord, SiteSnapshot, ValidationResult
from sheetsite.protocols import CacheStoreProtocol, SiteStoreProtocol


def is_refresh_needed(record: SiteRecord, max_age: int | None) -> bool:
    """Check if a site's cached data is stale under the given policy.

    Args:
        record: Site metadata with the last successful fetch time.
        max_age: Maximum seconds between fetches, or None to never expire.

    Returns:
        True if the site should be refetched before serving.
    """
    if record.last_fetched is None:
        return True
    if max_age is None:
        return False
    return (time.time() - record.last_fetched) >= max_age


class SiteDataService:
    """Resolve site data through an optional snapshot cache.

    With a cache store, snapshots persist across requests until refreshed. Without
    one, every call assembles afresh (the assembler's fetcher may still memoize tabs).
    """

    def __init__(
        self,
        assembler: SiteDataAssembler,
        *,
        cache_store: CacheStoreProtocol | None = None,
        site_store: SiteStoreProtocol | None = None,
        max_age: int | None = None,
    ) -> None:
        self.assembler = assembler
        self.cache_store = cache_store
        self.site_store = site_store
        self.max_age = max_age

    def _read_cache(self, site_id: str) -> SiteSnapshot | None:
        if self.cache_store is None:
            return None
        try:
            return self.cache_store.get(site_id)
        except CacheUnavailableError:
            logger.opt(exception=True).warning(
                "Cache read failed for site {}, fetching live", site_id
            )
            return None

    def _write_cache(self, site_id: str, snapshot: SiteSnapshot) -> None:
        if self.cache_store is not None:
            try:
                self.cache_store.put(site_id, snapshot)
            except CacheUnavailableError:
                logger.opt(exception=True).warning("Cache write failed for site {}", site_id)

        if self.site_store is not None:
            try:
                self.site_store.mark_fetched(site_id, snapshot.fetched_at)
            except (SiteNotFoundError, SiteStoreError):
                logger.opt(exception=True).warning(
                    "Could not update fetch time of site {}", site_id
                )

    def get_site_data(
        self, site_id: str, spreadsheet_id: str, *, force_refresh: bool = False
    ) -> SiteSnapshot:
        """Return the site's snapshot, from cache unless missing or force_refresh is set.

        Raises:
            SheetsFetchError: A live fetch was needed and one of the tabs failed.
        """
        if not force_refresh:
            cached = self._read_cache(site_id)
            if cached is not None:
                logger.debug("Site {} served from cache", site_id)
                return cached

        snapshot = self.assembler.assemble_all(spreadsheet_id)
        self._write_cache(site_id, snapshot)
        return snapshot

    def _require_site(self, site_id: str) -> SiteRecord:
        record = self.site_store.get(site_id) if self.site_store is not None else None
        if record is None:
            raise SiteNotFoundError(site_id)
        return record

    def load_site(self, site_id: str) -> SiteSnapshot:
        """Serve a registered site, refreshing it when stale under max_age."""
        record = self._require_site(site_id)
        stale = is_refresh_needed(record, self.max_age)
        if stale:
            logger.debug("Site {} is stale, refreshing", site_id)
        return self.get_site_data(site_id, record.spreadsheet_id, force_refresh=stale)

    def refresh_site(self, site_id: str) -> SiteSnapshot:
        """Refetch a registered site and replace its cached snapshot."""
        record = self._require_site(site_id)
        snapshot = self.get_site_data(site_id, record.spreadsheet_id, force_refresh=True)
        logger.info("Refreshed site {}", site_id)
        return snapshot

    def invalidate(self, site_id: str) -> None:
        if self.cache_store is not None:
            self.cache_store.invalidate(site_id)

    def validate_spreadsheet(self, spreadsheet_id: str) -> ValidationResult:
        return self.assembler.validate(spreadsheet_id)


def build_cached_service(conn: sqlite3.Connection, config: SheetsConfig) -> SiteDataService:
    """Wire the persistent variant: live fetches, snapshots cached in SQLite."""
    assembler = SiteDataAssembler(SheetsFetcher(config), active_only=config.active_only)
    return SiteDataService(
        assembler,
        cache_store=SqliteCacheStore(conn),
        site_store=SqliteSiteStore(conn),
        max_age=config.max_age,
    )


def build_static_service(config: SheetsConfig) -> SiteDataService:
    """Wire the static-generation variant: no snapshot store, tabs memoized in memory."""
    fetcher = CachedTabFetcher(SheetsFetcher(config), TabCache(config.tab_cache_ttl))
    return SiteDataService(SiteDataAssembler(fetcher, active_only=config.active_only))
