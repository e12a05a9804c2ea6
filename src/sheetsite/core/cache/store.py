"""Persistent snapshot cache backed by the ``cache`` table."""

import json
import sqlite3

from loguru import logger

from sheetsite.config import REQUIRED_TABS
from sheetsite.errors import CacheUnavailableError
from sheetsite.models.site import SiteSnapshot


class SqliteCacheStore:
    """Store one row per (site, tab), each holding the normalized tab data as JSON.

    There is no TTL here; callers decide staleness from the site record.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, site_id: str) -> SiteSnapshot | None:
        """Return the cached snapshot, or None if absent or incomplete.

        Raises:
            CacheUnavailableError: The rows could not be read or no longer decode.
        """
        try:
            rows = self._conn.execute(
                "SELECT tab_name, data, created_at FROM cache WHERE site_id = ?",
                (site_id,),
            ).fetchall()
        except sqlite3.Error as e:
            msg = f"Cache read failed for site {site_id!r}: {e}"
            raise CacheUnavailableError(msg) from e

        if not rows:
            return None

        try:
            payloads = {tab_name: json.loads(data) for tab_name, data, _created in rows}
        except ValueError as e:
            msg = f"Cache for site {site_id!r} holds invalid JSON: {e}"
            raise CacheUnavailableError(msg) from e

        missing = [tab for tab in REQUIRED_TABS if tab not in payloads]
        if missing:
            logger.warning("Cache for site {} lacks tabs {}, ignoring it", site_id, missing)
            return None

        fetched_at = max(created for _tab, _data, created in rows)
        try:
            return SiteSnapshot.from_tab_payloads(payloads, fetched_at=fetched_at)
        except (TypeError, KeyError, ValueError, AttributeError) as e:
            msg = f"Cache for site {site_id!r} does not match the site models: {e!r}"
            raise CacheUnavailableError(msg) from e

    def put(self, site_id: str, snapshot: SiteSnapshot) -> None:
        """Replace the site's cache rows with the snapshot, in one transaction."""
        payloads = snapshot.tab_payloads()
        try:
            with self._conn:
                self._conn.execute("DELETE FROM cache WHERE site_id = ?", (site_id,))
                self._conn.executemany(
                    """INSERT INTO cache (site_id, tab_name, data, created_at)
                       VALUES (?, ?, ?, ?)""",
                    [
                        (site_id, tab_name, json.dumps(payloads[tab_name]), snapshot.fetched_at)
                        for tab_name in REQUIRED_TABS
                    ],
                )
        except sqlite3.Error as e:
            msg = f"Cache write failed for site {site_id!r}: {e}"
            raise CacheUnavailableError(msg) from e
        logger.debug("Cached snapshot for site {}", site_id)

    def invalidate(self, site_id: str) -> None:
        try:
            with self._conn:
                self._conn.execute("DELETE FROM cache WHERE site_id = ?", (site_id,))
        except sqlite3.Error as e:
            msg = f"Cache invalidation failed for site {site_id!r}: {e}"
            raise CacheUnavailableError(msg) from e
