"""Resolve presentation settings with the defaults the site renderer uses."""

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_PRIMARY_COLOR = "#3b82f6"
DEFAULT_SECONDARY_COLOR = "#1e40af"
DEFAULT_TEXT_COLOR = "#111827"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_FONT_FAMILY = "system-ui, -apple-system, sans-serif"
DEFAULT_CONTENT_SPACING = "1.5rem"


@dataclass(frozen=True)
class Theme:
    primary_color: str
    secondary_color: str
    text_color: str
    background_color: str
    heading_color: str
    font_family: str
    content_spacing: str
    rtl: bool = False
    site_name: str | None = None
    footer_text: str | None = None


def resolve_theme(settings: Mapping[str, str]) -> Theme:
    """Apply defaults for recognized keys. Blank values count as unset."""

    def pick(key: str, default: str) -> str:
        return settings.get(key) or default

    text_color = pick("textColor", DEFAULT_TEXT_COLOR)
    spacing = settings.get("contentSpacing")
    return Theme(
        primary_color=pick("primaryColor", DEFAULT_PRIMARY_COLOR),
        secondary_color=pick("secondaryColor", DEFAULT_SECONDARY_COLOR),
        text_color=text_color,
        background_color=pick("backgroundColor", DEFAULT_BACKGROUND_COLOR),
        heading_color=pick("headingColor", text_color),
        font_family=pick("fontFamily", DEFAULT_FONT_FAMILY),
        content_spacing=f"{spacing}px" if spacing else DEFAULT_CONTENT_SPACING,
        rtl=(settings.get("rtl") or "").lower() == "true",
        site_name=settings.get("siteName") or None,
        footer_text=settings.get("footerText") or None,
    )
