"""Metadata Keys Module

Metadata keys attached to every document produced by the Contentful source.
Templates and later pipeline stages should look these up by name rather than
by literal string. The literal values are part of the public contract.
"""

ENTRY_ID = "ContentfulId"
ENTRY_LOCALE = "ContentfulLocale"
INCLUDED_ASSETS = "ContentfulIncludedAssets"
INCLUDED_ENTRIES = "ContentfulIncludedEntries"

SYSTEM_KEYS = (ENTRY_ID, ENTRY_LOCALE, INCLUDED_ASSETS, INCLUDED_ENTRIES)


class ContentfulKeys:
    """Namespace holding the metadata keys for Contentful documents."""
    ENTRY_ID = ENTRY_ID
    ENTRY_LOCALE = ENTRY_LOCALE
    INCLUDED_ASSETS = INCLUDED_ASSETS
    INCLUDED_ENTRIES = INCLUDED_ENTRIES
