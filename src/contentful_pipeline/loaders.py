"""Entry Loader Module

Fetches entries from Contentful, optionally walking every page of the
result set. Pages are requested strictly one after another: each page's
offset and the stop condition depend on the page before it.
"""

from typing import Any, Dict, List, Protocol, Set
import logging

from .errors import ContentfulFetchError
from .models import EntryCollection, QueryConfig, Resource
from .query import build_query

logger = logging.getLogger(__name__)


class EntriesClient(Protocol):
    def get_entries(self, query: Dict[str, Any]) -> EntryCollection: ...


def _merge_by_id(target: List[Resource], seen: Set[str], incoming: List[Resource]) -> int:
    """Append resources whose id is not in ``seen``; first occurrence wins."""
    added = 0
    for resource in incoming:
        if resource.id in seen:
            continue
        seen.add(resource.id)
        target.append(resource)
        added += 1
    return added


def _fetch_page(client: EntriesClient, query: Dict[str, Any]) -> EntryCollection:
    try:
        return client.get_entries(query)
    except ContentfulFetchError as exc:
        logger.exception(
            "Contentful fetch failed (skip=%s, status=%s, request_id=%s): %s",
            query.get("skip"),
            exc.status_code,
            exc.request_id,
            exc.details,
        )
        raise


def load_entries(client: EntriesClient, config: QueryConfig) -> EntryCollection:
    """Fetch entries for ``config``.

    Without ``config.recursive`` a single page is returned as-is, even if
    Contentful reports more entries. In recursive mode the window advances
    by ``config.limit`` until a page comes back with fewer than ``limit``
    items; that short page ends the walk even if the reported total is
    higher. Included assets and entries are merged across pages, each
    deduplicated by id against its own seen-set.

    Raises:
        ContentfulFetchError: If any page fails. Nothing partial is returned.
    """
    skip = config.skip
    first = _fetch_page(client, build_query(config, skip=skip))
    logger.info(
        "Fetched first page: %d entries (total reported: %d)",
        len(first.items),
        first.total,
    )

    if not config.recursive:
        return first

    if first.total <= len(first.items) or len(first.items) < config.limit:
        logger.debug("First page holds all available entries; no further pages")
        return first

    items = list(first.items)
    included_assets: List[Resource] = []
    included_entries: List[Resource] = []
    seen_assets: Set[str] = set()
    seen_entries: Set[str] = set()
    _merge_by_id(included_assets, seen_assets, first.included_assets)
    _merge_by_id(included_entries, seen_entries, first.included_entries)

    pages = 1
    while True:
        skip += config.limit
        page = _fetch_page(client, build_query(config, skip=skip))
        pages += 1
        items.extend(page.items)
        new_assets = _merge_by_id(included_assets, seen_assets, page.included_assets)
        new_entries = _merge_by_id(included_entries, seen_entries, page.included_entries)
        logger.debug(
            "Page %d (skip=%d): %d entries, %d new assets, %d new included entries",
            pages,
            skip,
            len(page.items),
            new_assets,
            new_entries,
        )
        if len(page.items) < config.limit:
            break

    logger.info(
        "✓ Fetched %d entries across %d pages (%d included assets, %d included entries)",
        len(items),
        pages,
        len(included_assets),
        len(included_entries),
    )
    return EntryCollection(
        items=items,
        included_assets=included_assets,
        included_entries=included_entries,
        total=first.total,
        skip=config.skip,
        limit=config.limit,
    )
