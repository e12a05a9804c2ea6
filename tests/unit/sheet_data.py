"""Sample spreadsheet data shared by the tests."""

import json
from typing import Any


# Raw rows as the fetcher returns them: numeric cells arrive as floats.
SITE_TABS: dict[str, list[dict[str, Any]]] = {
    "main_menu": [
        {
            "id": 2.0,
            "folder_name": "Blog",
            "display_order": 2.0,
            "active": "yes",
            "slug": "blog",
            "short_description": None,
        },
        {
            "id": 1.0,
            "folder_name": "About",
            "display_order": 1.0,
            "active": "Yes",
            "slug": "about",
            "short_description": "Who we are",
        },
        {
            "id": 3.0,
            "folder_name": "Archive",
            "display_order": 3.0,
            "active": "no",
            "slug": "archive",
            "short_description": None,
        },
    ],
    "pages": [
        {
            "id": 10.0,
            "folder_id": "1",
            "page_name": "Team",
            "display_order": 1.0,
            "active": "yes",
            "slug": "team",
            "meta_description": "Our team",
            "seo_title": None,
        },
        {
            "id": 11.0,
            "folder_id": 2.0,
            "page_name": "First post",
            "display_order": 1.0,
            "active": "YES",
            "slug": "first-post",
            "meta_description": None,
            "seo_title": "First!",
        },
        {
            "id": 12.0,
            "folder_id": 3.0,
            "page_name": "Old post",
            "display_order": 1.0,
            "active": "yes",
            "slug": "old-post",
            "meta_description": None,
            "seo_title": None,
        },
    ],
    "content": [
        {
            "id": 101.0,
            "page_id": 10.0,
            "content_type": "text",
            "display_order": 2.0,
            "content": "We build things.",
            "title": None,
            "description": None,
            "heading_level": None,
            "active": "yes",
        },
        {
            "id": 100.0,
            "page_id": "10",
            "content_type": "title",
            "display_order": 1.0,
            "content": "Meet the team",
            "title": None,
            "description": None,
            "heading_level": "h2",
            "active": "yes",
        },
        {
            "id": 102.0,
            "page_id": 10.0,
            "content_type": "image",
            "display_order": 3.0,
            "content": "https://example.com/team.png",
            "title": "Team photo",
            "description": None,
            "heading_level": None,
            "active": "no",
        },
    ],
    "settings": [
        {"key": "siteName", "value": "Acme"},
        {"key": "primaryColor", "value": "#ff0000"},
        {"key": None, "value": "ignored"},
    ],
}


def gviz_text(payload: dict[str, Any]) -> str:
    """Wrap a payload the way the gviz endpoint does."""
    return (
        "/*O_o*/\ngoogle.visualization.Query.setResponse("
        + json.dumps(payload)
        + ");"
    )
