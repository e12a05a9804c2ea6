"""Fetch all site tabs and compose them into one snapshot."""

import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any

from loguru import logger

from sheetsite.config import REQUIRED_TABS
from sheetsite.core.normalize.rows import TabKind, normalize_rows, reduce_settings
from sheetsite.errors import SheetsFetchError, missing_tabs_message
from sheetsite.models.site import SiteSnapshot, ValidationResult
from sheetsite.protocols import TabFetcherProtocol


class SiteDataAssembler:
    """Build SiteSnapshots from a spreadsheet.

    All four tabs are fetched concurrently for every snapshot, so a snapshot never
    mixes tabs from different assemblies.
    """

    def __init__(self, fetcher: TabFetcherProtocol, *, active_only: bool = True) -> None:
        self._fetcher = fetcher
        self.active_only = active_only

    def _fetch(self, spreadsheet_id: str, tab_name: str) -> list[dict[str, Any]]:
        try:
            return self._fetcher.fetch_tab(spreadsheet_id, tab_name)
        except SheetsFetchError:
            raise
        except Exception as e:
            raise SheetsFetchError(tab_name, str(e)) from e

    def _submit_all(
        self, executor: ThreadPoolExecutor, spreadsheet_id: str
    ) -> dict[Future[list[dict[str, Any]]], str]:
        return {
            executor.submit(self._fetch, spreadsheet_id, tab_name): tab_name
            for tab_name in REQUIRED_TABS
        }

    def fetch_raw_tabs(self, spreadsheet_id: str) -> dict[str, list[dict[str, Any]]]:
        """Fetch the four required tabs in parallel.

        The first failure is re-raised right away; requests already in flight
        are left to finish and their results are discarded.
        """
        raw: dict[str, list[dict[str, Any]]] = {}
        executor = ThreadPoolExecutor(max_workers=len(REQUIRED_TABS), thread_name_prefix="tab")
        try:
            futures = self._submit_all(executor, spreadsheet_id)
            for future in as_completed(futures):
                raw[futures[future]] = future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return raw

    def assemble_all(self, spreadsheet_id: str) -> SiteSnapshot:
        """Fetch and normalize every tab into a SiteSnapshot. Fails if any tab fails."""
        fetched_at = time.time()
        try:
            raw = self.fetch_raw_tabs(spreadsheet_id)
        except SheetsFetchError as e:
            logger.warning("Assembly of {} aborted: {}", spreadsheet_id, e)
            raise

        def entities(kind: TabKind) -> tuple[Any, ...]:
            return tuple(normalize_rows(raw[kind], kind, active_only=self.active_only))

        snapshot = SiteSnapshot(
            folders=entities(TabKind.MAIN_MENU),
            pages=entities(TabKind.PAGES),
            blocks=entities(TabKind.CONTENT),
            settings=reduce_settings(normalize_rows(raw[TabKind.SETTINGS], TabKind.SETTINGS)),
            fetched_at=fetched_at,
        )
        logger.info(
            "Assembled {}: {} folders, {} pages, {} blocks, {} settings",
            spreadsheet_id,
            len(snapshot.folders),
            len(snapshot.pages),
            len(snapshot.blocks),
            len(snapshot.settings),
        )
        return snapshot

    def validate(self, spreadsheet_id: str) -> ValidationResult:
        """Check that every required tab can be fetched. Column contents are not checked."""
        failed: set[str] = set()
        with ThreadPoolExecutor(
            max_workers=len(REQUIRED_TABS), thread_name_prefix="tab"
        ) as executor:
            futures = self._submit_all(executor, spreadsheet_id)
            for future in as_completed(futures):
                tab_name = futures[future]
                try:
                    future.result()
                except SheetsFetchError as e:
                    logger.debug("Validation: tab {!r} not fetchable: {}", tab_name, e)
                    failed.add(tab_name)

        missing = tuple(tab for tab in REQUIRED_TABS if tab in failed)
        if missing:
            return ValidationResult(
                valid=False, message=missing_tabs_message(missing), missing_tabs=missing
            )
        return ValidationResult(valid=True)
