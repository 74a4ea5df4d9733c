"""Document Transformation Module

Maps fetched Contentful entries onto pipeline documents.

Key responsibilities:
  - Resolve the locale filter against the locales of the space
  - Pick the content of each document from the configured content field
  - Resolve every entry field to the document's locale for metadata
  - Attach the system metadata keys (entry id, locale, included collections)
"""

from typing import Any, Callable, Dict, Iterator, List, Optional
import json
import logging

from . import keys
from .errors import LocaleNotFoundError
from .models import MISSING, Document, Entry, EntryCollection, QueryConfig, Space

logger = logging.getLogger(__name__)

ALL_LOCALES = "*"
NO_CONTENT = "No content"

DocumentFactory = Callable[[str, Dict[str, Any]], Any]


def resolve_locales(space: Space, locale_filter: Optional[str]) -> List[str]:
    """Resolve a locale filter to the locale codes to emit, in space order.

    - ``"*"``: every locale of the space
    - empty/None: the default locale only
    - anything else: exact, case-sensitive code match

    Raises:
        LocaleNotFoundError: If nothing matches.
    """
    if locale_filter == ALL_LOCALES:
        codes = [loc.code for loc in space.locales]
    elif not locale_filter:
        codes = [loc.code for loc in space.locales if loc.default]
    else:
        codes = [loc.code for loc in space.locales if loc.code == locale_filter]

    if not codes:
        raise LocaleNotFoundError(locale_filter or "<default>")
    return codes


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    # rich text, numbers, links and the like
    return json.dumps(value, ensure_ascii=False)


def extract_content(entry: Entry, content_field: str, locale: str) -> str:
    """Content of the document for ``entry`` in ``locale``.

    Empty when no content field is configured, ``NO_CONTENT`` when the
    entry has no value for the field in this locale.
    """
    if not content_field:
        return ""
    value = entry.localized(content_field, locale)
    if value is MISSING:
        logger.debug("Entry %s has no '%s' value for locale %s", entry.id, content_field, locale)
        return NO_CONTENT
    return _as_text(value)


def build_metadata(
    entry: Entry,
    locale: str,
    included_assets: List[Any],
    included_entries: List[Any],
) -> Dict[str, Any]:
    metadata = entry.localized_fields(locale)
    metadata[keys.ENTRY_ID] = entry.id
    metadata[keys.ENTRY_LOCALE] = locale
    metadata[keys.INCLUDED_ASSETS] = included_assets
    metadata[keys.INCLUDED_ENTRIES] = included_entries
    return metadata


def to_documents(
    collection: EntryCollection,
    locales: List[str],
    config: QueryConfig,
    document_factory: DocumentFactory = Document.from_content,
) -> Iterator[Any]:
    """Yield one document per (entry, locale) pair, entries outermost.

    Every document shares the same included asset/entry lists.
    """
    included_assets = collection.included_assets
    included_entries = collection.included_entries
    for entry in collection.items:
        for locale in locales:
            content = extract_content(entry, config.content_field, locale)
            metadata = build_metadata(entry, locale, included_assets, included_entries)
            yield document_factory(content, metadata)
