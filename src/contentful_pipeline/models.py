"""Data Models Module

Defines Pydantic models for the Contentful source: the immutable query
configuration, the space/locale descriptor, remote entries and assets as
returned by the Content Delivery API (queried with ``locale=*``), page
collections and the documents handed to the host pipeline.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Contentful caps include depth at 10 and page size at 1000
MAX_INCLUDE_DEPTH = 10
MAX_PAGE_LIMIT = 1000


class _Missing:
    """Marker for a field (or a locale of a field) with no value."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class QueryConfig(BaseModel):
    """Options controlling which entries are fetched and how they are mapped.

    Instances are frozen. Use ``with_options`` to derive a changed copy, so
    one configuration can be shared between runs without surprises.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    content_field: str = ""
    content_type: Optional[str] = None
    locale: str = ""
    include: int = Field(default=1, ge=0, le=MAX_INCLUDE_DEPTH)
    limit: int = Field(default=100, ge=1, le=MAX_PAGE_LIMIT)
    skip: int = Field(default=0, ge=0)
    recursive: bool = False

    def with_options(self, **changes: Any) -> "QueryConfig":
        """Return a new validated config with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})


class Locale(BaseModel):
    code: str
    name: Optional[str] = None
    default: bool = False


class Space(BaseModel):
    """Space descriptor; only the locales matter to the source."""
    id: str
    name: Optional[str] = None
    locales: List[Locale] = Field(default_factory=list)

    @property
    def default_locale(self) -> Optional[Locale]:
        return next((loc for loc in self.locales if loc.default), None)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Space":
        return cls(
            id=str((payload.get("sys") or {}).get("id", "")),
            name=payload.get("name"),
            locales=[
                Locale(
                    code=loc["code"],
                    name=loc.get("name"),
                    default=bool(loc.get("default", False)),
                )
                for loc in payload.get("locales") or []
            ],
        )


class Resource(BaseModel):
    """Common shape of entries and assets fetched with ``locale=*``.

    ``fields`` maps each field name to a ``{locale_code: value}`` mapping.
    """
    id: str
    sys: Dict[str, Any] = Field(default_factory=dict)
    fields: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]):
        sys = payload.get("sys") or {}
        return cls(
            id=str(sys.get("id", "")),
            sys=sys,
            fields=payload.get("fields") or {},
        )

    @property
    def created_at(self) -> Optional[str]:
        return self.sys.get("createdAt")

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def localized(self, name: str, locale: str) -> Any:
        """Value of field ``name`` for ``locale``, or ``MISSING``."""
        values = self.fields.get(name)
        if not isinstance(values, dict) or locale not in values:
            return MISSING
        return values[locale]

    def localized_fields(self, locale: str) -> Dict[str, Any]:
        """All fields resolved to ``locale``; fields without a value are left out."""
        resolved: Dict[str, Any] = {}
        for name in self.fields:
            value = self.localized(name, locale)
            if value is not MISSING:
                resolved[name] = value
        return resolved


class Entry(Resource):
    @property
    def content_type(self) -> Optional[str]:
        content_type = self.sys.get("contentType") or {}
        return (content_type.get("sys") or {}).get("id")


class Asset(Resource):
    def title(self, locale: str) -> Optional[str]:
        value = self.localized("title", locale)
        return None if value is MISSING else value

    def url(self, locale: str) -> Optional[str]:
        file_info = self.localized("file", locale)
        if not isinstance(file_info, dict):
            return None
        return file_info.get("url")


class EntryCollection(BaseModel):
    """One page of entries, or the accumulation of several pages.

    ``total`` is the count reported by Contentful on the first page.
    """
    items: List[Entry] = Field(default_factory=list)
    included_assets: List[Asset] = Field(default_factory=list)
    included_entries: List[Entry] = Field(default_factory=list)
    total: int = 0
    skip: int = 0
    limit: int = 100

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "EntryCollection":
        includes = payload.get("includes") or {}
        return cls(
            items=[Entry.from_api(item) for item in payload.get("items") or []],
            included_assets=[Asset.from_api(a) for a in includes.get("Asset") or []],
            included_entries=[Entry.from_api(e) for e in includes.get("Entry") or []],
            total=int(payload.get("total", 0)),
            skip=int(payload.get("skip", 0)),
            limit=int(payload.get("limit", 100)),
        )


class Document(BaseModel):
    """Document handed to the host pipeline.

    Metadata keeps insertion order: the entry's localized fields first,
    then the system keys from ``keys``.
    """
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_content(cls, content: str, metadata: Dict[str, Any]) -> "Document":
        # model_construct keeps the shared include lists by identity
        return cls.model_construct(content=content, metadata=metadata)

    def get(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)
