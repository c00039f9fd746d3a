"""Tests for row property filtering."""

from notion_cloner.services.property_filter import PropertyFilter, filter_properties


def test_filters_out_problematic_properties():
    properties = {
        "Name": {"type": "title", "title": [{"text": {"content": "Test"}}]},
        "Related Items": {"type": "relation", "relation": [{"id": "page-id"}]},
        "Status": {"type": "select", "select": {"name": "In Progress"}},
        "Total Count": {"type": "rollup", "rollup": {"number": 5}},
        "Auto Calc": {"type": "formula", "formula": {"string": "computed"}},
        "Created By": {"type": "created_by", "created_by": {"id": "user-id"}},
        "Edited By": {"type": "last_edited_by", "last_edited_by": {"id": "user-id"}},
        "Created": {"type": "created_time", "created_time": "2023-01-01T00:00:00.000Z"},
        "Last Edited": {"type": "last_edited_time", "last_edited_time": "2023-01-01T00:00:00.000Z"},
    }

    assert filter_properties(properties) == {
        "Name": {"type": "title", "title": [{"text": {"content": "Test"}}]},
        "Status": {"type": "select", "select": {"name": "In Progress"}},
    }


def test_empty_properties():
    assert filter_properties({}) == {}


def test_done_is_renamed():
    properties = {
        "Name": {"type": "title", "title": [{"text": {"content": "Test"}}]},
        "Done": {"type": "checkbox", "checkbox": True},
        "Status": {"type": "select", "select": {"name": "In Progress"}},
    }

    result = PropertyFilter().filter(properties)

    assert result == {
        "Name": {"type": "title", "title": [{"text": {"content": "Test"}}]},
        "1. Done": {"type": "checkbox", "checkbox": True},
        "Status": {"type": "select", "select": {"name": "In Progress"}},
    }
    assert "Done" not in result


def test_last_edited_by_is_dropped_not_renamed():
    properties = {"Last Edited By": {"type": "last_edited_by", "last_edited_by": {"id": "u"}}}

    assert filter_properties(properties) == {}


def test_values_pass_through_unchanged():
    value = {"type": "date", "date": {"start": "2024-01-01", "end": None}}

    result = filter_properties({"Due": value})

    assert result["Due"] is value
