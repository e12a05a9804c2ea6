"""Shared test fixtures."""

import sqlite3

import pytest

from sheetsite.core.database.schema import create_schema
from tests.unit.fakes import FakeFetcher
from tests.unit.sheet_data import SITE_TABS


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(SITE_TABS)


@pytest.fixture
def db() -> sqlite3.Connection:
    """Return an in-memory DB with the schema created."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return conn
