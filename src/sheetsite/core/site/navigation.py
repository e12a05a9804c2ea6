"""Navigation and lookup queries over a site snapshot.

A page is reachable only when it is active and its folder exists and is active.
Every query here re-checks the active flags, so results are the same whether or
not the snapshot was built with inactive rows filtered out.
"""

from dataclasses import dataclass

from sheetsite.models.site import ContentBlock, MenuFolder, Page, SiteSnapshot


@dataclass(frozen=True)
class MenuEntry:
    """A folder and its reachable pages, in display order."""

    folder: MenuFolder
    pages: tuple[Page, ...]


def menu_folders(snapshot: SiteSnapshot) -> list[MenuFolder]:
    return [f for f in snapshot.folders if f.active]


def folder_pages(snapshot: SiteSnapshot, folder_id: str) -> list[Page]:
    return [p for p in snapshot.pages if p.active and p.folder_id == folder_id]


def navigation(snapshot: SiteSnapshot) -> list[MenuEntry]:
    """Build the site menu: active folders, each with its active pages."""
    return [
        MenuEntry(folder=folder, pages=tuple(folder_pages(snapshot, folder.id)))
        for folder in menu_folders(snapshot)
    ]


def find_folder(snapshot: SiteSnapshot, slug: str) -> MenuFolder | None:
    return next((f for f in menu_folders(snapshot) if f.slug == slug), None)


def find_page(snapshot: SiteSnapshot, folder_slug: str, page_slug: str) -> Page | None:
    """Resolve a (folder slug, page slug) address to a reachable page."""
    folder = find_folder(snapshot, folder_slug)
    if folder is None:
        return None
    return next((p for p in folder_pages(snapshot, folder.id) if p.slug == page_slug), None)


def page_blocks(snapshot: SiteSnapshot, page_id: str) -> list[ContentBlock]:
    return [b for b in snapshot.blocks if b.active and b.page_id == page_id]


def orphaned_pages(snapshot: SiteSnapshot) -> list[Page]:
    """Active pages whose folder is missing or inactive."""
    active_folder_ids = {f.id for f in menu_folders(snapshot)}
    return [p for p in snapshot.pages if p.active and p.folder_id not in active_folder_ids]


def static_paths(snapshot: SiteSnapshot) -> list[tuple[str, str]]:
    """List (folder_slug, page_slug) for every reachable page, for static generation."""
    return [
        (entry.folder.slug, page.slug)
        for entry in navigation(snapshot)
        for page in entry.pages
    ]
