"""Builders for Contentful API payloads and a recording fake client."""

from typing import Any, Dict, List, Optional

from contentful_pipeline.models import EntryCollection, Space


def make_entry(entry_id: str, fields: Optional[Dict[str, Dict[str, Any]]] = None, created_at: str = "2024-01-01T00:00:00Z") -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "sys": {
            "id": entry_id,
            "type": "Entry",
            "createdAt": created_at,
            "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": "blogPost"}},
        }
    }
    if fields is not None:
        payload["fields"] = fields
    return payload


def make_asset(asset_id: str, url: str = "//images.ctfassets.net/space/asset/photo.jpg", title: Optional[Dict[str, str]] = None, locales=("en-US",)) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "file": {loc: {"url": url, "contentType": "image/jpeg"} for loc in locales},
    }
    if title is not None:
        fields["title"] = title
    return {"sys": {"id": asset_id, "type": "Asset"}, "fields": fields}


def make_page(
    items: List[Dict[str, Any]],
    total: Optional[int] = None,
    assets: Optional[List[Dict[str, Any]]] = None,
    entries: Optional[List[Dict[str, Any]]] = None,
    skip: int = 0,
    limit: int = 100,
) -> Dict[str, Any]:
    return {
        "sys": {"type": "Array"},
        "total": len(items) if total is None else total,
        "skip": skip,
        "limit": limit,
        "items": items,
        "includes": {"Asset": assets or [], "Entry": entries or []},
    }


def make_space(*locales, space_id: str = "467") -> Dict[str, Any]:
    """``locales`` are (code, default) pairs."""
    return {
        "sys": {"id": space_id, "type": "Space"},
        "name": "Test space",
        "locales": [{"code": code, "name": code, "default": default} for code, default in locales],
    }


class RecordingClient:
    """
    Fake delivery client that records queries and returns prepared pages.

    pages: raw page payloads, one per get_entries() call. Once exhausted,
    the last page is returned again.
    """
    def __init__(self, pages, space=None):
        self.pages = list(pages)
        self.space = space or make_space(("en-US", True))
        self.queries: List[Dict[str, Any]] = []
        self.space_calls = 0

    def get_space(self) -> Space:
        self.space_calls += 1
        return Space.from_api(self.space)

    def get_entries(self, query: Dict[str, Any]) -> EntryCollection:
        self.queries.append(dict(query))
        index = min(len(self.queries) - 1, len(self.pages) - 1)
        return EntryCollection.from_api(self.pages[index])
