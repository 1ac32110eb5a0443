"""Notion blocks to Markdown conversion pipeline.

Public API:

- :class:`DocumentAssembler` -- flattened block sequence to a document.
- :class:`BlockSerializer` -- one block to a Markdown fragment.
- :class:`TableReconstructor` -- table blocks and their rows to pipe tables.
- :func:`render_spans` -- rich_text arrays to inline Markdown.
- :func:`render_property_table` / :func:`render_database_table` -- page
  properties and database rows to tables.
"""

from notionmark.converter.assembler import ERROR_SENTINEL, DocumentAssembler
from notionmark.converter.properties import (
    render_database_table,
    render_property_table,
    render_property_value,
)
from notionmark.converter.rich_text import render_spans
from notionmark.converter.serializer import BlockSerializer
from notionmark.converter.tables import TableReconstructor

__all__ = [
    "ERROR_SENTINEL",
    "BlockSerializer",
    "DocumentAssembler",
    "TableReconstructor",
    "render_database_table",
    "render_property_table",
    "render_property_value",
    "render_spans",
]
