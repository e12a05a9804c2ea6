"""Protocols for dependency injection in the site data pipeline."""

from typing import Any, Protocol, runtime_checkable

from sheetsite.models.site import SiteRecord, SiteSnapshot


@runtime_checkable
class TabFetcherProtocol(Protocol):
    """Protocol for anything that returns the raw rows of one spreadsheet tab."""

    def fetch_tab(self, spreadsheet_id: str, tab_name: str) -> list[dict[str, Any]]:
        """Fetch one tab and return rows keyed by column label."""
        ...


@runtime_checkable
class CacheStoreProtocol(Protocol):
    """Protocol for snapshot caches keyed by site id.

    Storage failures, including unreadable entries, raise CacheUnavailableError.
    """

    def get(self, site_id: str) -> SiteSnapshot | None:
        """Return the cached snapshot, or None on a miss."""
        ...

    def put(self, site_id: str, snapshot: SiteSnapshot) -> None:
        """Replace whatever is cached for the site with this snapshot."""
        ...

    def invalidate(self, site_id: str) -> None:
        """Drop the cached snapshot for the site."""
        ...


@runtime_checkable
class SiteStoreProtocol(Protocol):
    """Protocol for the site metadata collaborator.

    Storage failures raise SiteStoreError.
    """

    def get(self, site_id: str) -> SiteRecord | None:
        """Return the site record, or None if unknown."""
        ...

    def mark_fetched(self, site_id: str, fetched_at: float) -> None:
        """Record a successful refresh and bump the cache version."""
        ...
