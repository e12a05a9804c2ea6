"""Tests for configuration loading."""

from pathlib import Path

import pytest

from sheetsite.config import (
    FETCH_TIMEOUT,
    TAB_CACHE_TTL,
    SheetsConfig,
    resolve_data_directory,
)


def test_from_env_defaults() -> None:
    config = SheetsConfig.from_env({})
    assert config.spreadsheet_id is None
    assert config.fetch_timeout == FETCH_TIMEOUT
    assert config.tab_cache_ttl == TAB_CACHE_TTL
    assert config.max_age is None
    assert config.active_only is True


def test_from_env_reads_overrides() -> None:
    config = SheetsConfig.from_env(
        {
            "SHEETSITE_SPREADSHEET_ID": "abc",
            "SHEETSITE_FETCH_TIMEOUT": "3.5",
            "SHEETSITE_TAB_CACHE_TTL": "60",
            "SHEETSITE_MAX_AGE": "900",
            "SHEETSITE_ACTIVE_ONLY": "no",
        }
    )
    assert config.spreadsheet_id == "abc"
    assert config.fetch_timeout == 3.5
    assert config.tab_cache_ttl == 60
    assert config.max_age == 900
    assert config.active_only is False


def test_resolve_data_directory_honours_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SHEETSITE_DATA_DIR", str(tmp_path))
    assert resolve_data_directory() == tmp_path
