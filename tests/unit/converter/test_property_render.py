"""Tests for converter/properties.py: property values, tables, metadata."""

from __future__ import annotations

from datetime import datetime

import pytest
from conftest import span

from notionmark.converter.properties import (
    EMPTY_DATABASE_TEXT,
    database_title,
    extract_icon,
    page_title,
    render_database_table,
    render_property_table,
    render_property_value,
)


@pytest.mark.parametrize(
    ("prop", "expected"),
    [
        ({"type": "title", "title": [span("Doc", bold=True)]}, "Doc"),
        ({"type": "rich_text", "rich_text": [span("a|b")]}, "a\\|b"),
        ({"type": "number", "number": 42.0}, "42"),
        ({"type": "number", "number": 3.5}, "3.5"),
        ({"type": "number", "number": None}, ""),
        ({"type": "select", "select": {"name": "High"}}, "High"),
        ({"type": "select", "select": None}, ""),
        ({"type": "multi_select", "multi_select": [{"name": "a"}, {"name": "b"}]}, "a, b"),
        ({"type": "status", "status": {"name": "Done"}}, "Done"),
        ({"type": "date", "date": {"start": "2024-01-01"}}, "2024-01-01"),
        (
            {"type": "date", "date": {"start": "2024-01-01", "end": "2024-01-05"}},
            "2024-01-01 -> 2024-01-05",
        ),
        ({"type": "checkbox", "checkbox": True}, "[x]"),
        ({"type": "checkbox", "checkbox": False}, "[ ]"),
        ({"type": "url", "url": "https://e.com"}, "https://e.com"),
        ({"type": "email", "email": "a@b.c"}, "a@b.c"),
        ({"type": "phone_number", "phone_number": "+1 555"}, "+1 555"),
        ({"type": "formula", "formula": {"type": "string", "string": "s"}}, "s"),
        ({"type": "formula", "formula": {"type": "number", "number": 7.0}}, "7"),
        ({"type": "formula", "formula": {"type": "boolean", "boolean": True}}, "true"),
        ({"type": "formula", "formula": {"type": "date", "date": {"start": "2024-02-02"}}}, "2024-02-02"),
        ({"type": "relation", "relation": [{"id": "r1"}, {"id": "r2"}]}, "r1, r2"),
        ({"type": "rollup", "rollup": {"type": "number", "number": 2}}, "2"),
        ({"type": "rollup", "rollup": {"type": "array", "array": [1, 2, 3]}}, "Array (3 items)"),
        ({"type": "rollup", "rollup": {"type": "incomplete"}}, "Rollup (incomplete)"),
        ({"type": "people", "people": [{"name": "Ada"}, {"id": "u-2"}]}, "Ada, u-2"),
        ({"type": "files", "files": [{"name": "a.pdf"}]}, "a.pdf"),
        ({"type": "created_by", "created_by": {"name": "Bob"}}, "Bob"),
        ({"type": "last_edited_by", "last_edited_by": {"id": "u-3"}}, "u-3"),
        ({"type": "button", "button": {}}, "[button]"),
    ],
)
def test_render_property_value(prop, expected):
    assert render_property_value(prop) == expected


def test_timestamps_are_local_and_locale_formatted():
    value = "2024-03-04T05:06:07.000Z"
    expected = datetime.fromisoformat("2024-03-04T05:06:07+00:00").astimezone().strftime("%x, %X")
    assert render_property_value({"type": "created_time", "created_time": value}) == expected


def test_unparseable_timestamp_is_kept():
    prop = {"type": "last_edited_time", "last_edited_time": "yesterday"}
    assert render_property_value(prop) == "yesterday"


def test_values_are_table_safe():
    prop = {"type": "select", "select": {"name": "a|b\nc"}}
    assert render_property_value(prop) == "a\\|b<br>c"


class TestPropertyTable:
    def test_rows_in_order(self):
        props = {
            "Name": {"type": "title", "title": [span("Doc")]},
            "Tags": {"type": "multi_select", "multi_select": [{"name": "x"}]},
        }
        assert render_property_table(props) == (
            "| Property | Value |\n|---|---|\n| Name | Doc |\n| Tags | x |"
        )

    def test_empty(self):
        assert render_property_table({}) == ""
        assert render_property_table(None) == ""


class TestDatabaseTable:
    def test_rows_follow_first_row_columns(self):
        pages = [
            {"properties": {
                "Name": {"type": "title", "title": [span("One")]},
                "Done": {"type": "checkbox", "checkbox": True},
            }},
            {"properties": {"Name": {"type": "title", "title": [span("Two")]}}},
        ]
        assert render_database_table(pages) == (
            "| Name | Done |\n| --- | --- |\n| One | [x] |\n| Two |  |"
        )

    def test_empty_database(self):
        assert render_database_table([]) == EMPTY_DATABASE_TEXT


class TestMetadata:
    def test_page_title(self):
        page = {"properties": {"Name": {"type": "title", "title": [span("My "), span("Page")]}}}
        assert page_title(page) == "My Page"

    def test_page_title_fallback(self):
        assert page_title({"properties": {}}) == "Untitled Page"
        assert page_title({}) == "Untitled Page"

    def test_database_title(self):
        assert database_title({"title": [span("Tasks", bold=True)]}) == "**Tasks**"
        assert database_title({"title": []}) == "Untitled Database"

    def test_extract_icon(self):
        assert extract_icon({"type": "emoji", "emoji": "\U0001F680"}) == "\U0001F680"
        assert extract_icon({"type": "external", "external": {"url": "https://e.com/i.png"}}) == (
            "https://e.com/i.png"
        )
        assert extract_icon({"type": "file", "file": {"url": "https://s3/x.png"}}) == "https://s3/x.png"
        assert extract_icon(None) is None
        assert extract_icon({"type": "custom_emoji"}) is None
