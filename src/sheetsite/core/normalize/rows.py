"""Normalize raw spreadsheet rows into typed site entities."""

import math
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from loguru import logger

from sheetsite.models.site import (
    HEADING_LEVELS,
    ContentBlock,
    ContentType,
    MenuFolder,
    Page,
    SettingRow,
)


class TabKind(StrEnum):
    """The four tabs a site spreadsheet is made of."""

    MAIN_MENU = "main_menu"
    PAGES = "pages"
    CONTENT = "content"
    SETTINGS = "settings"


def canonical_id(value: Any) -> str:
    """Coerce an id cell to its canonical string form.

    Numeric cells arrive as floats (``3.0``); they must compare equal to ``"3"``.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def coerce_order(value: Any) -> float:
    """Coerce a display_order cell to a number. Blank or unparseable cells become 0."""
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Unparseable display_order {!r}, using 0", value)
        return 0
    if math.isnan(number):
        return 0
    return int(number) if number.is_integer() else number


def is_active(value: Any) -> bool:
    """True iff the cell reads "yes", case-insensitively."""
    return isinstance(value, str) and value.strip().lower() == "yes"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


def _content_type(value: Any) -> ContentType:
    raw = _text(value).strip().lower()
    try:
        return ContentType(raw)
    except ValueError:
        logger.warning("Unknown content_type {!r}, rendering as text", value)
        return ContentType.TEXT


def _heading_level(value: Any) -> str | None:
    raw = _text(value).strip().lower()
    return raw if raw in HEADING_LEVELS else None


def normalize_folder(row: dict[str, Any]) -> MenuFolder:
    return MenuFolder(
        id=canonical_id(row.get("id")),
        name=_text(row.get("folder_name")),
        display_order=coerce_order(row.get("display_order")),
        active=is_active(row.get("active")),
        slug=_text(row.get("slug")).strip(),
        short_description=_optional_text(row.get("short_description")),
    )


def normalize_page(row: dict[str, Any]) -> Page:
    return Page(
        id=canonical_id(row.get("id")),
        folder_id=canonical_id(row.get("folder_id")),
        name=_text(row.get("page_name")),
        display_order=coerce_order(row.get("display_order")),
        active=is_active(row.get("active")),
        slug=_text(row.get("slug")).strip(),
        meta_description=_optional_text(row.get("meta_description")),
        seo_title=_optional_text(row.get("seo_title")),
    )


def normalize_block(row: dict[str, Any]) -> ContentBlock:
    return ContentBlock(
        id=canonical_id(row.get("id")),
        page_id=canonical_id(row.get("page_id")),
        content_type=_content_type(row.get("content_type")),
        display_order=coerce_order(row.get("display_order")),
        content=_text(row.get("content")),
        active=is_active(row.get("active")),
        title=_optional_text(row.get("title")),
        description=_optional_text(row.get("description")),
        heading_level=_heading_level(row.get("heading_level")),
    )


def normalize_settings(rows: Iterable[dict[str, Any]]) -> list[SettingRow]:
    """Keep rows with a non-empty key; values are taken verbatim."""
    result: list[SettingRow] = []
    for row in rows:
        key = _text(row.get("key")).strip()
        if not key:
            continue
        result.append(SettingRow(key=key, value=_text(row.get("value"))))
    return result


def reduce_settings(rows: Iterable[SettingRow]) -> dict[str, str]:
    """Fold settings rows into a mapping. Later duplicates overwrite earlier ones."""
    settings: dict[str, str] = {}
    for row in rows:
        settings[row.key] = row.value
    return settings


_ENTITY_NORMALIZERS = {
    TabKind.MAIN_MENU: normalize_folder,
    TabKind.PAGES: normalize_page,
    TabKind.CONTENT: normalize_block,
}


def normalize_rows(
    raw_rows: Iterable[dict[str, Any]],
    tab_kind: TabKind | str,
    *,
    active_only: bool = False,
) -> list[Any]:
    """Convert raw tab rows into typed entities.

    Args:
        raw_rows: Rows as returned by the fetcher, keyed by column label.
        tab_kind: Which tab the rows came from.
        active_only: Drop rows whose ``active`` flag is not "yes". Ignored for settings.

    Returns:
        Entities sorted by display_order (stable), or SettingRow list for settings.
    """
    kind = TabKind(tab_kind)
    if kind is TabKind.SETTINGS:
        return normalize_settings(raw_rows)

    normalize = _ENTITY_NORMALIZERS[kind]
    entities = [normalize(row) for row in raw_rows]
    if active_only:
        entities = [e for e in entities if e.active]
    return sorted(entities, key=lambda e: e.display_order)
