"""Domain models for spreadsheet-backed sites."""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any


class ContentType(StrEnum):
    """Kinds of content block a page can hold."""

    TEXT = "text"
    TITLE = "title"
    IMAGE = "image"
    YOUTUBE = "youtube"
    LINK = "link"
    LIST = "list"
    TABLE = "table"
    SEPARATOR = "separator"
    FILE = "file"


HEADING_LEVELS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


@dataclass(frozen=True)
class MenuFolder:
    """A top-level menu folder (row of the main_menu tab)."""

    id: str
    name: str
    display_order: float
    active: bool
    slug: str
    short_description: str | None = None


@dataclass(frozen=True)
class Page:
    """A page inside a menu folder."""

    id: str
    folder_id: str
    name: str
    display_order: float
    active: bool
    slug: str
    meta_description: str | None = None
    seo_title: str | None = None


@dataclass(frozen=True)
class ContentBlock:
    """A single content block of a page."""

    id: str
    page_id: str
    content_type: ContentType
    display_order: float
    content: str
    active: bool
    title: str | None = None
    description: str | None = None
    heading_level: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentBlock":
        return cls(**{**data, "content_type": ContentType(data["content_type"])})


@dataclass(frozen=True)
class SettingRow:
    """One key/value row of the settings tab."""

    key: str
    value: str


@dataclass(frozen=True)
class SiteSnapshot:
    """All four tab collections of one site at one fetch instant."""

    folders: tuple[MenuFolder, ...] = ()
    pages: tuple[Page, ...] = ()
    blocks: tuple[ContentBlock, ...] = ()
    settings: dict[str, str] = field(default_factory=dict)
    fetched_at: float = 0.0

    def tab_payloads(self) -> dict[str, Any]:
        """Return JSON-serializable data per tab name, as stored in the cache."""
        return {
            "main_menu": [asdict(f) for f in self.folders],
            "pages": [asdict(p) for p in self.pages],
            "content": [asdict(b) for b in self.blocks],
            "settings": dict(self.settings),
        }

    @classmethod
    def from_tab_payloads(cls, payloads: dict[str, Any], *, fetched_at: float) -> "SiteSnapshot":
        """Rebuild a snapshot from the per-tab data produced by tab_payloads()."""
        return cls(
            folders=tuple(MenuFolder(**f) for f in payloads["main_menu"]),
            pages=tuple(Page(**p) for p in payloads["pages"]),
            blocks=tuple(ContentBlock.from_dict(b) for b in payloads["content"]),
            settings=dict(payloads["settings"]),
            fetched_at=fetched_at,
        )


@dataclass(frozen=True)
class SiteRecord:
    """Site metadata: which spreadsheet backs the site and when it was last fetched."""

    id: str
    spreadsheet_id: str
    title: str = ""
    last_fetched: float | None = None
    cache_version: int = 0


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking that a spreadsheet exposes every required tab."""

    valid: bool
    message: str | None = None
    missing_tabs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.message is not None:
            data["message"] = self.message
        return data
