"""
Contentful Source Pipeline

This module provides the Contentful source stage and a small runner that
writes the produced documents to disk.

Features:
- One document per (entry, locale) pair with localized field metadata
- Recursive pagination over the whole result set
- Fails before fetching entries when the locale filter matches nothing
- Timestamped versioning of output files with run metadata
"""

from pathlib import Path
import json
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging
import time
from datetime import datetime

from . import keys
from .client import ContentfulDeliveryClient, ContentfulSettings
from .loaders import load_entries
from .models import Document, EntryCollection, QueryConfig, Space
from .transformers import DocumentFactory, resolve_locales, to_documents


logger = logging.getLogger(__name__)


class ContentfulSource:
    """Pipeline stage producing documents from Contentful entries.

    ``client`` is anything exposing ``get_space()`` and ``get_entries(query)``,
    normally a ``ContentfulDeliveryClient``.

    Example:
        >>> source = ContentfulSource.from_settings(
        ...     ContentfulSettings.from_env(),
        ...     QueryConfig(content_type="blogPost", content_field="body", recursive=True),
        ... )
        >>> for doc in source.execute():
        ...     print(doc.get(keys.ENTRY_ID), doc.content[:40])
    """

    def __init__(self, client: Any, config: Optional[QueryConfig] = None):
        self.client = client
        self.config = config or QueryConfig()

    @classmethod
    def from_settings(
        cls,
        settings: ContentfulSettings,
        config: Optional[QueryConfig] = None,
    ) -> "ContentfulSource":
        return cls(ContentfulDeliveryClient.from_settings(settings), config)

    def fetch(self) -> Tuple[Space, List[str], EntryCollection]:
        """Fetch the space, resolve locales and load all entries.

        Raises:
            LocaleNotFoundError: Before any entry is fetched.
            ContentfulFetchError: If any remote call fails.
        """
        space = self.client.get_space()
        locales = resolve_locales(space, self.config.locale)
        logger.info("Resolved locales for space %s: %s", space.id, ", ".join(locales))
        collection = load_entries(self.client, self.config)
        return space, locales, collection

    def execute(self, document_factory: DocumentFactory = Document.from_content) -> Iterator[Any]:
        """Fetch eagerly, then return a lazy iterator over the documents.

        Consuming the iterator never triggers another fetch; call
        ``execute`` again for fresh data.
        """
        _, locales, collection = self.fetch()
        logger.info(
            "Producing %d documents (%d entries x %d locales)",
            len(collection.items) * len(locales),
            len(collection.items),
            len(locales),
        )
        return to_documents(collection, locales, self.config, document_factory)


def _ids(resources: List[Any]) -> List[str]:
    return [resource.id for resource in resources]


def serialize_document(doc: Document) -> Dict[str, Any]:
    """JSON-ready form of ``doc``; included collections become id lists."""
    metadata = dict(doc.metadata)
    metadata[keys.INCLUDED_ASSETS] = _ids(metadata.get(keys.INCLUDED_ASSETS) or [])
    metadata[keys.INCLUDED_ENTRIES] = _ids(metadata.get(keys.INCLUDED_ENTRIES) or [])
    return {"content": doc.content, "metadata": metadata}


def run_pipeline(
    source: ContentfulSource,
    output_dir: Path | str = "output",
    dry_run: bool = False,
    keep_history: bool = True,
) -> Tuple[int, int, Dict[str, Path]]:
    """
    Run the Contentful source and write its documents to JSON.

    Pipeline Steps:
    1. Fetch space, resolve locales, load entries (all pages if recursive)
    2. Map entries to documents
    3. Save documents and included resources with versioning

    Output Strategy:
    - Creates timestamped outputs: documents_20251216_010530.json
    - Included assets/entries are written once to includes_<ts>.json and
      referenced by id from each document
    - Optional: keeps historical runs for auditing

    Args:
        source: Configured Contentful source
        output_dir: Directory for all output files
        dry_run: Fetch and map, but write nothing
        keep_history: If True, keep timestamped versions; if False, overwrite

    Returns:
        Tuple of (entries_fetched, documents_produced, output_paths_dict)

    Raises:
        LocaleNotFoundError: If the locale filter matches no locale
        ContentfulFetchError: If a Contentful request fails
        OSError: If outputs cannot be written
    """
    output_dir = Path(output_dir)

    run_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    job_start = time.time()

    # ========== STEP 1: FETCH ==========
    t0 = time.time()
    logger.info("STEP 1/3: Fetching entries from Contentful")
    _, locales, collection = source.fetch()
    logger.info(
        "✓ Fetched %d entries in %.2fs",
        len(collection.items),
        time.time() - t0,
    )

    # ========== STEP 2: MAP TO DOCUMENTS ==========
    t1 = time.time()
    logger.info("STEP 2/3: Mapping %d entries to documents", len(collection.items))
    documents = [
        serialize_document(doc)
        for doc in to_documents(collection, locales, source.config)
    ]
    logger.info("✓ Mapped %d documents in %.2fs", len(documents), time.time() - t1)

    output_paths: Dict[str, Path] = {}
    if dry_run:
        logger.info("DRY RUN: skipping write of documents")
        return len(collection.items), len(documents), output_paths

    # ========== STEP 3: SAVE ==========
    logger.info("STEP 3/3: Saving documents")
    output_dir.mkdir(parents=True, exist_ok=True)
    suffix = f"_{run_timestamp}" if keep_history else ""
    documents_path = output_dir / f"documents{suffix}.json"
    includes_path = output_dir / f"includes{suffix}.json"

    includes = {
        "assets": [asset.model_dump(mode="json") for asset in collection.included_assets],
        "entries": [entry.model_dump(mode="json") for entry in collection.included_entries],
    }
    # includes first: documents reference them by id
    try:
        with includes_path.open("w", encoding="utf-8") as f:
            json.dump(includes, f, ensure_ascii=False, indent=2)
        output_paths["includes"] = includes_path
        with documents_path.open("w", encoding="utf-8") as f:
            json.dump(documents, f, ensure_ascii=False, indent=2)
        output_paths["documents"] = documents_path
        logger.info("✓ Wrote %d documents to %s", len(documents), documents_path.name)
    except Exception:
        logger.exception("Failed to save documents")
        raise

    _save_metadata(output_dir, run_timestamp, keep_history, {
        "locales": locales,
        "query": source.config.model_dump(),
        "entries_fetched": len(collection.items),
        "total_reported": collection.total,
        "documents": len(documents),
        "included_assets": len(collection.included_assets),
        "included_entries": len(collection.included_entries),
        "outputs": {k: str(v) for k, v in output_paths.items()},
        "duration_seconds": time.time() - job_start,
    })

    return len(collection.items), len(documents), output_paths


def _save_metadata(
    output_dir: Path,
    run_timestamp: str,
    keep_history: bool,
    metadata: Dict[str, Any]
) -> None:
    """Save pipeline run metadata."""
    if keep_history:
        meta_filename = f"run_metadata_{run_timestamp}.json"
    else:
        meta_filename = "run_metadata.json"

    meta_path = output_dir / meta_filename
    metadata["timestamp"] = run_timestamp

    try:
        with meta_path.open("w", encoding="utf-8") as f:
            json.dump(metadata, f, ensure_ascii=False, indent=2)
        logger.info("✓ Saved: %s", meta_filename)
    except Exception:
        logger.warning("Failed to save metadata (non-fatal)", exc_info=True)
