"""Shared fixtures."""

import pytest

from tests.fakes import (
    SOURCE_DB,
    FakeNotionClient,
    relation_value,
    select_schema,
    select_value,
    title_value,
)


@pytest.fixture
def fake_client():
    return FakeNotionClient()


@pytest.fixture
def source_database(fake_client):
    """Source database with the Name/Status/Related layout and three rows."""
    fake_client.add_database(
        {
            "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            "Status": select_schema("To Do", "In Progress", "Done"),
            "Related": {
                "id": "rel",
                "name": "Related",
                "type": "relation",
                "relation": {"database_id": "33333333-3333-3333-3333-333333333333"},
            },
        },
        database_id=SOURCE_DB,
    )
    for title, status in [("Alpha", "To Do"), ("Beta", "Done"), ("Gamma", "In Progress")]:
        fake_client.add_page(SOURCE_DB, {
            "Name": title_value(title),
            "Status": select_value(status),
            "Related": relation_value("44444444-4444-4444-4444-444444444444"),
        })
    return SOURCE_DB
