"""Tests for SheetsFetcher — gviz envelope parsing and error mapping."""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from sheetsite.config import SheetsConfig
from sheetsite.errors import (
    MalformedResponseError,
    SheetsFetchError,
    UpstreamReportedError,
    UpstreamUnreachableError,
)
from sheetsite.fetcher import SheetsFetcher, parse_envelope, rows_from_table
from tests.unit.sheet_data import gviz_text

TABLE = {
    "cols": [
        {"id": "A", "label": "id", "type": "number"},
        {"id": "B", "label": "folder_name", "type": "string"},
        {"id": "C", "label": "", "type": "string"},
        {"id": "D", "label": "active", "type": "string"},
    ],
    "rows": [
        {"c": [{"v": 1.0, "f": "1"}, {"v": "About"}, {"v": "scratch"}, {"v": "yes"}]},
        {"c": [{"v": 2.0}, None, {"v": "x"}, {"v": "no"}]},
        {"c": [{"v": 3.0}, {"v": "Short row"}]},
    ],
}


@pytest.fixture
def fetcher_with_mock_session() -> tuple[SheetsFetcher, MagicMock]:
    """Create a SheetsFetcher with a mocked requests.Session."""
    with patch("sheetsite.fetcher.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        fetcher = SheetsFetcher(SheetsConfig(fetch_timeout=7.5))
    return fetcher, mock_session


def _make_response(text: str) -> MagicMock:
    """Create a mock HTTP response with the given body."""
    response = MagicMock()
    response.text = text
    return response


def _ok(table: dict[str, Any]) -> str:
    return gviz_text({"version": "0.6", "status": "ok", "table": table})


def test_parse_envelope_strips_callback_wrapper() -> None:
    assert parse_envelope(gviz_text({"status": "ok"})) == {"status": "ok"}


def test_parse_envelope_returns_none_without_wrapper() -> None:
    assert parse_envelope('{"status": "ok"}') is None
    assert parse_envelope("<html>Sign in</html>") is None


def test_parse_envelope_returns_none_for_invalid_json() -> None:
    assert parse_envelope("google.visualization.Query.setResponse({not json});") is None


def test_rows_from_table_returns_one_entry_per_row() -> None:
    rows = rows_from_table(TABLE)
    assert len(rows) == 3
    assert all(set(row) == {"id", "folder_name", "active"} for row in rows)


def test_rows_from_table_drops_unlabeled_columns_and_keeps_nulls() -> None:
    rows = rows_from_table(TABLE)
    assert rows[0] == {"id": 1.0, "folder_name": "About", "active": "yes"}
    assert rows[1] == {"id": 2.0, "folder_name": None, "active": "no"}
    # Trailing empty cells are omitted by the endpoint.
    assert rows[2] == {"id": 3.0, "folder_name": "Short row", "active": None}


def test_fetch_tab_requests_gviz_endpoint_with_timeout(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value = _make_response(_ok(TABLE))

    fetcher.fetch_tab("sheet123", "main_menu")

    args, kwargs = mock_session.get.call_args
    assert args[0] == "https://docs.google.com/spreadsheets/d/sheet123/gviz/tq"
    assert kwargs["params"] == {"tqx": "out:json", "sheet": "main_menu"}
    assert kwargs["timeout"] == 7.5


def test_fetch_tab_returns_rows(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value = _make_response(_ok(TABLE))

    rows = fetcher.fetch_tab("sheet123", "main_menu")

    assert rows == rows_from_table(TABLE)


def test_fetch_tab_raises_malformed_when_envelope_missing(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value = _make_response("<!DOCTYPE html><html></html>")

    with pytest.raises(MalformedResponseError, match="Invalid response format") as excinfo:
        fetcher.fetch_tab("sheet123", "pages")
    assert excinfo.value.tab_name == "pages"


def test_fetch_tab_raises_upstream_reported_error_with_message(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value = _make_response(
        gviz_text(
            {
                "status": "error",
                "errors": [{"reason": "invalid_query", "message": "Invalid sheet: settings"}],
            }
        )
    )

    with pytest.raises(UpstreamReportedError, match="Invalid sheet: settings") as excinfo:
        fetcher.fetch_tab("sheet123", "settings")
    assert excinfo.value.tab_name == "settings"
    assert excinfo.value.upstream_message == "Invalid sheet: settings"


def test_fetch_tab_reports_unknown_error_without_message(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value = _make_response(gviz_text({"status": "error"}))

    with pytest.raises(UpstreamReportedError, match="Unknown error"):
        fetcher.fetch_tab("sheet123", "settings")


def test_fetch_tab_raises_unreachable_on_http_error(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

    with pytest.raises(UpstreamUnreachableError, match="content") as excinfo:
        fetcher.fetch_tab("sheet123", "content")
    assert excinfo.value.tab_name == "content"


def test_fetch_tab_raises_unreachable_on_timeout(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.side_effect = requests.Timeout("slow")

    with pytest.raises(UpstreamUnreachableError, match="timed out"):
        fetcher.fetch_tab("sheet123", "pages")


def test_fetch_errors_share_a_base_class(
    fetcher_with_mock_session: tuple[SheetsFetcher, MagicMock],
) -> None:
    fetcher, mock_session = fetcher_with_mock_session
    mock_session.get.side_effect = requests.ConnectionError("dns")

    with pytest.raises(SheetsFetchError):
        fetcher.fetch_tab("sheet123", "pages")
