"""Shared test fixtures for the notionmark test suite."""

from __future__ import annotations

from typing import Any

import pytest

from notionmark.config import NotionmarkConfig
from notionmark.converter.assembler import DocumentAssembler
from notionmark.converter.serializer import BlockSerializer
from notionmark.models import Block


@pytest.fixture
def config() -> NotionmarkConfig:
    """Default test configuration with a dummy token."""
    return NotionmarkConfig(token="test_token_1234")


@pytest.fixture
def assembler(config: NotionmarkConfig) -> DocumentAssembler:
    """Document assembler using the default test config."""
    return DocumentAssembler(config)


@pytest.fixture
def serializer(config: NotionmarkConfig) -> BlockSerializer:
    """Block serializer using the default test config."""
    return BlockSerializer(config)


# ---------------------------------------------------------------------------
# Builders shared across test modules
# ---------------------------------------------------------------------------

def span(text: str, href: str | None = None, **annotations: bool) -> dict[str, Any]:
    """A Notion rich_text object as returned by the API."""
    return {
        "type": "text",
        "text": {"content": text, "link": {"url": href} if href else None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
            **annotations,
        },
        "plain_text": text,
        "href": href,
    }


def raw_block(
    block_type: str,
    block_id: str = "blk-1",
    has_children: bool = False,
    **payload: Any,
) -> dict[str, Any]:
    """A raw Notion block object."""
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: payload,
    }


def text_block(block_type: str, text: str, level: int = 0, block_id: str = "blk-1") -> Block:
    """A flattened block whose payload is a single plain span."""
    return Block.from_api(raw_block(block_type, block_id, rich_text=[span(text)]), level)


def row_block(cells: list[str], level: int = 1, block_id: str = "row") -> Block:
    """A flattened ``table_row`` with one plain span per cell."""
    return Block.from_api(
        raw_block("table_row", block_id, cells=[[span(c)] for c in cells]), level
    )


def table_block(has_header: bool = True, level: int = 0, width: int = 2) -> Block:
    return Block.from_api(
        raw_block(
            "table",
            "tbl-1",
            has_children=True,
            table_width=width,
            has_column_header=has_header,
            has_row_header=False,
        ),
        level,
    )


def list_response(results: list[dict[str, Any]], next_cursor: str | None = None) -> dict[str, Any]:
    """A paginated list response."""
    return {
        "object": "list",
        "results": results,
        "has_more": next_cursor is not None,
        "next_cursor": next_cursor,
    }
