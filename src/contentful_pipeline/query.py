"""Query construction for the Contentful entries endpoint."""

from typing import Any, Dict, Optional

from .models import QueryConfig

# Ascending creation time gives a stable pagination window
ORDER_BY_CREATED = "sys.createdAt"


def build_query(config: QueryConfig, skip: Optional[int] = None) -> Dict[str, Any]:
    """Build the query parameters for one page of entries.

    All locales are always requested; locale selection happens locally
    when documents are produced. ``skip`` overrides ``config.skip`` and is
    used by the paginator to advance the window.
    """
    query: Dict[str, Any] = {
        "locale": "*",
        "include": config.include,
        "order": ORDER_BY_CREATED,
        "limit": config.limit,
        "skip": config.skip if skip is None else skip,
    }
    if config.content_type:
        query["content_type"] = config.content_type
    return query
