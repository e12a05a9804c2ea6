"""Configuration constants and runtime settings for sheetsite."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# Tabular-query endpoint of a published spreadsheet.
GVIZ_URL_TEMPLATE: str = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"

# Tabs every site spreadsheet must expose, in assembly order.
REQUIRED_TABS: tuple[str, ...] = ("main_menu", "pages", "content", "settings")

# Seconds a tab stays fresh in the in-process tab cache.
TAB_CACHE_TTL: int = 5 * 60

# Seconds before a single tab request is abandoned.
FETCH_TIMEOUT: float = 15.0

# Directory with the site database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/sheetsite").expanduser(),
    Path("~/.sheetsite").expanduser(),
]

DATABASE_FILENAME = "sites.db"


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the first candidate if none exist."""
    override = os.environ.get("SHEETSITE_DATA_DIR")
    if override:
        return Path(override).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SheetsConfig:
    """Explicit configuration handed to fetchers, assemblers and services."""

    spreadsheet_id: str | None = None
    fetch_timeout: float = FETCH_TIMEOUT
    tab_cache_ttl: float = TAB_CACHE_TTL
    # Seconds before a persisted snapshot counts as stale. None: only explicit refreshes.
    max_age: int | None = None
    active_only: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SheetsConfig":
        """Build a config from SHEETSITE_* environment variables."""
        env = os.environ if environ is None else environ

        max_age_raw = env.get("SHEETSITE_MAX_AGE")
        active_raw = env.get("SHEETSITE_ACTIVE_ONLY")
        return cls(
            spreadsheet_id=env.get("SHEETSITE_SPREADSHEET_ID") or None,
            fetch_timeout=float(env.get("SHEETSITE_FETCH_TIMEOUT", FETCH_TIMEOUT)),
            tab_cache_ttl=float(env.get("SHEETSITE_TAB_CACHE_TTL", TAB_CACHE_TTL)),
            max_age=int(max_age_raw) if max_age_raw else None,
            active_only=_env_bool(active_raw) if active_raw is not None else True,
        )
