"""Tests for cursor pagination over database rows."""

import asyncio

import pytest

from notion_cloner.errors import CloneError, TransientFetchError
from notion_cloner.extractors.notion_extractor import NotionExtractor

from tests.fakes import FakeNotionClient, title_value


def make_database(client, count):
    database_id = client.add_database({"Name": {"type": "title", "title": {}}})
    for i in range(count):
        client.add_page(database_id, {"Name": title_value(f"Row {i}")})
    return database_id


@pytest.mark.parametrize("count,page_size,expected_calls", [
    (0, 3, 1),
    (2, 3, 1),
    (3, 3, 1),
    (7, 3, 3),
    (9, 3, 3),
])
def test_issues_one_query_per_page(count, page_size, expected_calls):
    client = FakeNotionClient(page_size=page_size)
    database_id = make_database(client, count)

    rows = asyncio.run(NotionExtractor(client).fetch_all(database_id))

    assert client.count("query_database") == expected_calls
    assert [row.identity_key for row in rows] == [f"Row {i}" for i in range(count)]


def test_cursor_is_absent_on_first_call_then_follows_next_cursor():
    client = FakeNotionClient(page_size=2)
    database_id = make_database(client, 5)

    asyncio.run(NotionExtractor(client).fetch_all(database_id))

    cursors = [call[2] for call in client.calls if call[0] == "query_database"]
    assert cursors == [None, "2", "4"]


def test_requests_the_maximum_page_size():
    client = FakeNotionClient()
    database_id = make_database(client, 1)

    asyncio.run(NotionExtractor(client, page_size=500).fetch_all(database_id))

    assert client.calls[-1][3] == 100


def test_extraction_result_counts_pages():
    client = FakeNotionClient(page_size=4)
    database_id = make_database(client, 10)

    result = asyncio.run(NotionExtractor(client).extract(database_id))

    assert result.total_extracted == 10
    assert result.pages_fetched == 3
    assert result.completed_at is not None


def test_failure_mid_pagination_aborts_with_transient_error():
    client = FakeNotionClient(page_size=2)
    database_id = make_database(client, 6)

    def fail_on_second_page(db, cursor):
        if cursor == "2":
            raise CloneError("POST /databases/query failed (502)", "bad gateway")

    client.query_hook = fail_on_second_page

    with pytest.raises(TransientFetchError) as exc_info:
        asyncio.run(NotionExtractor(client).fetch_all(database_id))

    assert "bad gateway" in str(exc_info.value)
    assert client.count("query_database") == 2


def test_unknown_database_raises_transient_error():
    client = FakeNotionClient()

    with pytest.raises(TransientFetchError):
        asyncio.run(NotionExtractor(client).fetch_all("55555555-5555-5555-5555-555555555555"))


def test_has_more_without_cursor_is_an_error():
    class NoCursorClient(FakeNotionClient):
        def query_database(self, database_id, start_cursor=None, page_size=100):
            return {"results": [], "has_more": True, "next_cursor": None}

    with pytest.raises(TransientFetchError):
        asyncio.run(NotionExtractor(NoCursorClient()).fetch_all("db"))
