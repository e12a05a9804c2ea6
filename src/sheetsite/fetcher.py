"""Google Sheets tabular-query client."""

import json
import re
from typing import Any

import requests
from loguru import logger

from sheetsite.config import GVIZ_URL_TEMPLATE, SheetsConfig
from sheetsite.errors import (
    MalformedResponseError,
    UpstreamReportedError,
    UpstreamUnreachableError,
)

# The endpoint answers with JSON wrapped in a JavaScript callback invocation.
_ENVELOPE_RE = re.compile(r"google\.visualization\.Query\.setResponse\((.*)\);\s*$", re.DOTALL)


def parse_envelope(text: str) -> dict[str, Any] | None:
    """Strip the callback envelope and parse the JSON payload.

    Returns:
        The decoded payload, or None if the envelope or the JSON inside it is malformed.
    """
    match = _ENVELOPE_RE.search(text)
    if not match:
        return None
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def rows_from_table(table: dict[str, Any]) -> list[dict[str, Any]]:
    """Convert a gviz ``table`` object into a list of ``{label: value}`` rows.

    Columns without a label are dropped. Every labeled column appears in every row;
    absent or empty cells map to None.
    """
    labels: list[str | None] = [col.get("label") or None for col in table.get("cols", [])]

    rows: list[dict[str, Any]] = []
    for raw_row in table.get("rows", []):
        cells = (raw_row or {}).get("c") or []
        row: dict[str, Any] = {}
        for index, label in enumerate(labels):
            if label is None:
                continue
            cell = cells[index] if index < len(cells) else None
            row[label] = cell.get("v") if isinstance(cell, dict) else None
        rows.append(row)
    return rows


def _upstream_error_message(payload: dict[str, Any]) -> str:
    errors = payload.get("errors") or []
    first = errors[0] if errors and isinstance(errors[0], dict) else {}
    return first.get("message") or first.get("detailed_message") or "Unknown error"


class SheetsFetcher:
    """Fetch individual spreadsheet tabs through the gviz query endpoint."""

    def __init__(self, config: SheetsConfig | None = None) -> None:
        self.config = config or SheetsConfig()
        self.sess = requests.Session()

    def tab_url(self, spreadsheet_id: str) -> str:
        return GVIZ_URL_TEMPLATE.format(spreadsheet_id=spreadsheet_id)

    def fetch_tab(self, spreadsheet_id: str, tab_name: str) -> list[dict[str, Any]]:
        """Fetch one tab and return its rows keyed by column label.

        Raises:
            UpstreamUnreachableError: Network failure, timeout, or non-success status.
            MalformedResponseError: Body lacks the callback envelope or holds invalid JSON.
            UpstreamReportedError: The endpoint reported ``status: "error"``.
        """
        logger.debug("Fetching tab {!r} of spreadsheet {!r}", tab_name, spreadsheet_id)

        try:
            r = self.sess.get(
                self.tab_url(spreadsheet_id),
                params={"tqx": "out:json", "sheet": tab_name},
                timeout=self.config.fetch_timeout,
            )
            r.raise_for_status()
        except requests.Timeout as e:
            msg = f"timed out after {self.config.fetch_timeout}s"
            raise UpstreamUnreachableError(tab_name, msg) from e
        except requests.RequestException as e:
            raise UpstreamUnreachableError(tab_name, str(e)) from e

        payload = parse_envelope(r.text)
        if payload is None:
            msg = "Invalid response format from Google Sheets"
            raise MalformedResponseError(tab_name, msg)

        if payload.get("status") == "error":
            raise UpstreamReportedError(tab_name, _upstream_error_message(payload))

        table = payload.get("table")
        if not isinstance(table, dict):
            msg = "response has no table"
            raise MalformedResponseError(tab_name, msg)

        rows = rows_from_table(table)
        logger.debug("Tab {!r}: {} rows", tab_name, len(rows))
        return rows
