"""Tests for database creation and batch row replication."""

import asyncio
import math

import pytest

from notion_cloner.errors import CloneError, ValidationError
from notion_cloner.loaders.base import batch_iterator
from notion_cloner.loaders.notion_loader import NotionLoader
from notion_cloner.models.record import SourceRow

from tests.fakes import PARENT_PAGE, FakeNotionClient, fail_titles, title_value


def make_rows(count):
    return [
        SourceRow(
            id=f"source-{i}",
            properties={
                "Name": title_value(f"Row {i}"),
                "Formula": {"type": "formula", "formula": {"number": i}},
            },
        )
        for i in range(count)
    ]


def target_database(client):
    return client.add_database({"Name": {"type": "title", "title": {}}})


def test_batch_iterator():
    assert [list(b) for b in batch_iterator(list(range(7)), 3)] == [[0, 1, 2], [3, 4, 5], [6]]
    assert list(batch_iterator([], 3)) == []


@pytest.mark.parametrize("count", [0, 1, 10, 11, 25])
def test_one_create_call_per_row_in_sequential_batches(count):
    client = FakeNotionClient()
    database_id = target_database(client)
    loader = NotionLoader(client, batch_size=10)

    result = asyncio.run(loader.load_all(database_id, make_rows(count)))

    assert client.count("create_page") == count
    assert result.batches == math.ceil(count / 10)
    assert result.total_succeeded == count
    assert result.total_failed == 0


def test_concurrency_is_bounded_by_batch_size():
    client = FakeNotionClient(delay=0.01)
    database_id = target_database(client)
    loader = NotionLoader(client, batch_size=4)

    asyncio.run(loader.load_all(database_id, make_rows(13)))

    assert 1 <= client.max_in_flight <= 4


def test_every_kth_failure_is_counted_and_does_not_raise():
    client = FakeNotionClient()
    database_id = target_database(client)
    client.create_page_hook = fail_titles(*[f"Row {i}" for i in range(0, 23, 3)])
    loader = NotionLoader(client, batch_size=10)

    result = asyncio.run(loader.load_all(database_id, make_rows(23)))

    failures = len(range(0, 23, 3))
    assert client.count("create_page") == 23
    assert result.total_failed == failures
    assert result.total_succeeded == 23 - failures
    assert {e["record_id"] for e in result.errors} == {f"source-{i}" for i in range(0, 23, 3)}
    assert all(e["error_type"] == "CloneError" for e in result.errors)


def test_rows_are_filtered_before_creation():
    client = FakeNotionClient()
    database_id = target_database(client)

    asyncio.run(NotionLoader(client).load_all(database_id, make_rows(1)))

    sent = client.calls[-1][2]
    assert list(sent) == ["Name"]


def test_id_map_pairs_source_and_created_rows():
    client = FakeNotionClient()
    database_id = target_database(client)
    client.create_page_hook = fail_titles("Row 1")

    result = asyncio.run(NotionLoader(client).load_all(database_id, make_rows(3)))

    assert set(result.id_map) == {"source-0", "source-2"}
    for source_id, target_id in result.id_map.items():
        assert client.pages[target_id]["parent"]["database_id"] == database_id


def test_unexpected_exception_from_load_row_is_settled():
    class ExplodingLoader(NotionLoader):
        async def load_row(self, database_id, row):
            if row.id == "source-1":
                raise RuntimeError("boom")
            return await super().load_row(database_id, row)

    client = FakeNotionClient()
    database_id = target_database(client)

    result = asyncio.run(ExplodingLoader(client, batch_size=2).load_all(database_id, make_rows(4)))

    assert result.total_attempted == 4
    assert result.total_failed == 1
    assert result.errors[0]["error"] == "boom"


def test_create_database_sends_title_and_schema():
    client = FakeNotionClient()
    schema = {"Name": {"type": "title", "title": {}}}

    database_id = asyncio.run(NotionLoader(client).create_database(PARENT_PAGE, "Copy", schema))

    _, parent, title, properties = client.calls[-1]
    assert parent == PARENT_PAGE
    assert title == [{"type": "text", "text": {"content": "Copy"}}]
    assert properties == schema
    assert database_id in client.databases


def test_create_database_failure_is_fatal():
    client = FakeNotionClient()
    client.create_database_error = ValidationError("POST /databases failed (400)", "bad schema")

    with pytest.raises(ValidationError):
        asyncio.run(NotionLoader(client).create_database(PARENT_PAGE, "Copy", {}))


def test_create_database_wraps_unknown_errors():
    client = FakeNotionClient()
    client.create_database_error = OSError("connection reset")

    with pytest.raises(CloneError):
        asyncio.run(NotionLoader(client).create_database(PARENT_PAGE, "Copy", {}))


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        NotionLoader(FakeNotionClient(), batch_size=0)
