from contentful_pipeline import keys
from contentful_pipeline.keys import ContentfulKeys


def test_contentful_keys_mirror_module_constants():
    assert ContentfulKeys.ENTRY_ID == keys.ENTRY_ID == "ContentfulId"
    assert ContentfulKeys.ENTRY_LOCALE == keys.ENTRY_LOCALE == "ContentfulLocale"
    assert ContentfulKeys.INCLUDED_ASSETS == keys.INCLUDED_ASSETS == "ContentfulIncludedAssets"
    assert ContentfulKeys.INCLUDED_ENTRIES == keys.INCLUDED_ENTRIES == "ContentfulIncludedEntries"


def test_system_keys_are_distinct():
    assert len(set(keys.SYSTEM_KEYS)) == len(keys.SYSTEM_KEYS) == 4
