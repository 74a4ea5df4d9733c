import logging

import pytest

from contentful_pipeline.errors import ContentfulFetchError
from contentful_pipeline.loaders import load_entries
from contentful_pipeline.models import QueryConfig
from tests.helpers import RecordingClient, make_asset, make_entry, make_page


def _entries(prefix, count):
    return [make_entry(f"{prefix}-{i}") for i in range(count)]


def test_non_recursive_fetches_once_even_if_more_remain():
    client = RecordingClient([make_page(_entries("a", 6), total=24)])

    result = load_entries(client, QueryConfig(limit=6))

    assert len(client.queries) == 1
    assert len(result.items) == 6
    assert result.total == 24


def test_recursive_walks_pages_until_short_page():
    """
    limit=6, four full pages then an empty one, total=24
    -> 5 fetches and 24 entries.
    """
    pages = [make_page(_entries(f"p{n}", 6), total=24) for n in range(4)]
    pages.append(make_page([], total=24))
    client = RecordingClient(pages)

    result = load_entries(client, QueryConfig(limit=6, recursive=True))

    assert len(client.queries) == 5
    assert [q["skip"] for q in client.queries] == [0, 6, 12, 18, 24]
    assert len(result.items) == 24
    assert result.total == 24


def test_recursive_starts_from_configured_skip():
    pages = [
        make_page(_entries("a", 2), total=10),
        make_page(_entries("b", 1), total=10),
    ]
    client = RecordingClient(pages)

    result = load_entries(client, QueryConfig(limit=2, skip=4, recursive=True))

    assert [q["skip"] for q in client.queries] == [4, 6]
    assert len(result.items) == 3


def test_short_first_page_stops_regardless_of_total():
    client = RecordingClient([make_page(_entries("a", 3), total=500)])

    result = load_entries(client, QueryConfig(limit=6, recursive=True))

    assert len(client.queries) == 1
    assert len(result.items) == 3


def test_total_not_above_first_page_needs_no_more_fetches():
    client = RecordingClient([make_page(_entries("a", 6), total=6)])

    load_entries(client, QueryConfig(limit=6, recursive=True))

    assert len(client.queries) == 1


def test_empty_first_page_is_not_an_error():
    client = RecordingClient([make_page([], total=0)])

    result = load_entries(client, QueryConfig(recursive=True))

    assert result.items == []


def test_short_page_wins_over_stale_total():
    pages = [
        make_page(_entries("a", 2), total=100),
        make_page(_entries("b", 2), total=100),
        make_page(_entries("c", 1), total=100),
    ]
    client = RecordingClient(pages)

    result = load_entries(client, QueryConfig(limit=2, recursive=True))

    assert len(client.queries) == 3
    assert len(result.items) == 5


def test_includes_are_deduplicated_per_collection():
    """
    Assets and included entries each dedup against their own ids. An
    included entry sharing an id with an asset must still be kept.
    """
    pages = [
        make_page(
            _entries("a", 2),
            total=4,
            assets=[make_asset("img-1", url="//first"), make_asset("shared")],
            entries=[make_entry("author-1")],
        ),
        make_page(
            _entries("b", 2),
            total=4,
            assets=[make_asset("img-1", url="//second"), make_asset("img-2")],
            entries=[make_entry("author-1"), make_entry("shared")],
        ),
        make_page([], total=4),
    ]
    client = RecordingClient(pages)

    result = load_entries(client, QueryConfig(limit=2, recursive=True))

    asset_ids = [a.id for a in result.included_assets]
    entry_ids = [e.id for e in result.included_entries]
    assert asset_ids == ["img-1", "shared", "img-2"]
    assert entry_ids == ["author-1", "shared"]
    # first occurrence wins
    assert result.included_assets[0].url("en-US") == "//first"


class FailingClient:
    def __init__(self, fail_on_call):
        self.fail_on_call = fail_on_call
        self.calls = 0

    def get_entries(self, query):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise ContentfulFetchError(
                "Rate limit exceeded",
                status_code=429,
                details={"reasons": "too many requests"},
                request_id="req-123",
            )
        return RecordingClient([make_page(_entries(f"c{self.calls}", 2), total=10)]).get_entries(query)


def test_fetch_error_on_later_page_aborts_and_logs(caplog):
    client = FailingClient(fail_on_call=2)

    with caplog.at_level(logging.ERROR, logger="contentful_pipeline.loaders"):
        with pytest.raises(ContentfulFetchError) as excinfo:
            load_entries(client, QueryConfig(limit=2, recursive=True))

    assert excinfo.value.request_id == "req-123"
    assert client.calls == 2
    assert "req-123" in caplog.text


def test_fetch_error_on_first_page_propagates():
    client = FailingClient(fail_on_call=1)

    with pytest.raises(ContentfulFetchError):
        load_entries(client, QueryConfig())
