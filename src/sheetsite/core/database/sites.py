"""Site metadata records stored in the ``sites`` table."""

import sqlite3
import time
from typing import Any

from sheetsite.errors import SiteNotFoundError, SiteStoreError
from sheetsite.models.site import SiteRecord

_SELECT_SITES = "SELECT id, spreadsheet_id, title, last_fetched, cache_version FROM sites"


def _record(row: tuple[Any, ...]) -> SiteRecord:
    return SiteRecord(
        id=row[0],
        spreadsheet_id=row[1],
        title=row[2],
        last_fetched=row[3],
        cache_version=row[4],
    )


class SqliteSiteStore:
    """Read and update site records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, site_id: str) -> SiteRecord | None:
        try:
            row = self._conn.execute(_SELECT_SITES + " WHERE id = ?", (site_id,)).fetchone()
        except sqlite3.Error as e:
            msg = f"Could not read site {site_id!r}: {e}"
            raise SiteStoreError(msg) from e
        return _record(row) if row else None

    def add(self, site_id: str, spreadsheet_id: str, *, title: str = "") -> SiteRecord:
        """Create or re-point a site. Changing the spreadsheet keeps the fetch history."""
        with self._conn:
            self._conn.execute(
                """INSERT INTO sites (id, spreadsheet_id, title, created_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       spreadsheet_id = excluded.spreadsheet_id,
                       title = excluded.title""",
                (site_id, spreadsheet_id, title, int(time.time())),
            )
        row = self._conn.execute(_SELECT_SITES + " WHERE id = ?", (site_id,)).fetchone()
        return _record(row)

    def mark_fetched(self, site_id: str, fetched_at: float) -> None:
        """Set last_fetched and move cache_version strictly forward."""
        record = self.get(site_id)
        if record is None:
            raise SiteNotFoundError(site_id)
        version = max(record.cache_version + 1, int(fetched_at * 1000))
        try:
            with self._conn:
                self._conn.execute(
                    "UPDATE sites SET last_fetched = ?, cache_version = ? WHERE id = ?",
                    (fetched_at, version, site_id),
                )
        except sqlite3.Error as e:
            msg = f"Could not update site {site_id!r}: {e}"
            raise SiteStoreError(msg) from e

    def list_sites(self) -> list[SiteRecord]:
        return [_record(row) for row in self._conn.execute(_SELECT_SITES + " ORDER BY id")]
