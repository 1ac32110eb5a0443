"""Full-document assembly.

:class:`DocumentAssembler` walks a flattened block sequence, serializes
each entry, hands ``table`` blocks and their rows to the
:class:`TableReconstructor`, and joins the fragments:

* two tight fragments (bulleted, numbered, to-do) are separated by a
  single newline, whatever their levels;
* any other adjacent pair is separated by one blank line.

The result has no trailing whitespace and ends with exactly one newline
when non-empty.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from notionmark.config import NotionmarkConfig
from notionmark.models import Block, BlockType, ListCounterState
from notionmark.observability import get_logger

from .properties import render_property_table
from .serializer import BlockSerializer
from .tables import TableReconstructor

log = get_logger("notionmark.assembler")

ERROR_SENTINEL = "Error converting blocks to Markdown."


class DocumentAssembler:
    """Turns a flattened block sequence into one Markdown document.

    Parameters
    ----------
    config:
        Formatting options (indentation unit, toggle style).
    """

    def __init__(self, config: NotionmarkConfig) -> None:
        self._config = config
        self._serializer = BlockSerializer(config, nested_renderer=self._render_nested)
        self._tables = TableReconstructor()

    def assemble(
        self,
        blocks: Sequence[Block],
        page_properties: Mapping[str, Any] | None = None,
        is_top_level: bool = True,
    ) -> str:
        """Render *blocks* (and optionally a property table) to Markdown.

        Parameters
        ----------
        blocks:
            The flattened sequence from :class:`BlockTreeFetcher`.
        page_properties:
            Raw page properties.  Rendered as a ``Property | Value`` table
            ahead of the content, but only for the top-level call.
        is_top_level:
            ``False`` for embedded sub-page content.

        Returns
        -------
        str
            The document, or :data:`ERROR_SENTINEL` if rendering failed.
        """
        try:
            parts: list[str] = []
            if page_properties and is_top_level:
                table = render_property_table(page_properties)
                if table:
                    parts.append(table)
            body = self._render_sequence(blocks, offset=0)
            if body:
                parts.append(body)
            markdown = "\n\n".join(parts).rstrip()
        except Exception:
            log.exception(
                "Failed to convert blocks to Markdown",
                extra={"extra_fields": {"op": "assemble", "block_count": len(blocks)}},
            )
            return ERROR_SENTINEL
        return f"{markdown}\n" if markdown else ""

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render_nested(self, blocks: Sequence[Block]) -> str:
        """Sub-page content, one level deeper than its ``child_page`` block."""
        return self._render_sequence(blocks, offset=1)

    def _render_sequence(self, blocks: Sequence[Block], offset: int) -> str:
        counters = ListCounterState()
        out: list[str] = []
        last_tight: bool | None = None
        open_toggles: list[int] = []
        use_details = self._config.toggle_style == "details"

        def emit(fragment: str, tight: bool) -> None:
            nonlocal last_tight
            if last_tight is not None:
                out.append("\n" if tight and last_tight else "\n\n")
            out.append(fragment)
            last_tight = tight

        def close_toggles(level: int) -> None:
            while open_toggles and level <= open_toggles[-1]:
                toggle_level = open_toggles.pop()
                emit(f"{self._serializer.indent(toggle_level + offset)}</details>", False)

        i = 0
        while i < len(blocks):
            block = blocks[i]
            if use_details:
                close_toggles(block.level)

            if block.type is BlockType.TABLE:
                self._serializer.update_counters(block, counters)
                fragment, i = self._tables.reconstruct(
                    blocks, i, self._serializer.indent(block.level + offset)
                )
                if fragment:
                    emit(fragment, False)
                continue

            fragment = self._serializer.serialize(block, counters, offset)
            if fragment:
                emit(fragment, block.is_tight)
            if use_details and block.type is BlockType.TOGGLE:
                open_toggles.append(block.level)
            i += 1

        if use_details:
            close_toggles(-1)
        return "".join(out)
