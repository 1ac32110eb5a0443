"""Table reconstruction: a ``table`` block plus its flattened rows to GFM.

The fetcher emits a table's ``table_row`` children right after the table
block, one indentation level deeper.  :class:`TableReconstructor` scans
forward from the table, collects those rows and renders a pipe table::

    | A | B |
    | -------- | -------- |
    | 1 | 2 |

Cell text goes through :func:`render_spans` in ``table_cell`` context, so
pipes are escaped and newlines become ``<br>``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from notionmark.models import Block, BlockType, ConversionContext

from .rich_text import render_spans

SEPARATOR_CELL = "--------"


def _row_cells(row: Block) -> list[str]:
    cells: Any = row.data.get("cells") or []
    rendered: list[str] = []
    for cell in cells:
        spans = cell if isinstance(cell, list) else []
        rendered.append(render_spans(spans, ConversionContext.TABLE_CELL).strip())
    return rendered


def _fit(cells: list[str], width: int) -> list[str]:
    """Pad with empty cells or truncate so the row has exactly *width* cells."""
    if len(cells) < width:
        return cells + [""] * (width - len(cells))
    return cells[:width]


def _format_row(cells: list[str], indent: str) -> str:
    return f"{indent}| " + " | ".join(cells) + " |"


class TableReconstructor:
    """Builds pipe tables from a table block and the rows that follow it."""

    def collect_rows(self, blocks: Sequence[Block], index: int) -> tuple[list[Block], int]:
        """Gather the rows belonging to the table at ``blocks[index]``.

        Rows exactly one level below the table are collected; deeper rows
        are skipped; a shallower row or any non-row block ends the scan.

        Returns
        -------
        tuple[list[Block], int]
            The collected rows and the index of the first block after them.
        """
        table = blocks[index]
        rows: list[Block] = []
        j = index + 1
        while j < len(blocks):
            candidate = blocks[j]
            if candidate.type is not BlockType.TABLE_ROW:
                break
            if candidate.level == table.level + 1:
                rows.append(candidate)
            elif candidate.level <= table.level:
                break
            j += 1
        return rows, j

    def render(self, table: Block, rows: Sequence[Block], indent: str = "") -> str:
        """Render *rows* as a pipe table; ``""`` when there is nothing to show.

        The header row is the first row when the table declares
        ``has_column_header``; otherwise an empty header row is emitted so
        the result is still a valid pipe table.  The column count comes from
        the header row, or from the first data row when there is no header.
        """
        if not rows:
            return ""

        has_header = bool(table.data.get("has_column_header", False))
        header = _row_cells(rows[0]) if has_header else None
        data_rows = [_row_cells(r) for r in (rows[1:] if has_header else rows)]

        if header is not None:
            width = len(header)
        elif data_rows:
            width = len(data_rows[0])
        else:
            width = 0
        if width == 0:
            return ""

        lines = [
            _format_row(_fit(header, width) if header is not None else [""] * width, indent),
            _format_row([SEPARATOR_CELL] * width, indent),
        ]
        lines.extend(_format_row(_fit(cells, width), indent) for cells in data_rows)
        return "\n".join(lines)

    def reconstruct(
        self,
        blocks: Sequence[Block],
        index: int,
        indent: str = "",
    ) -> tuple[str, int]:
        """Render the table at ``blocks[index]`` and report where it ends."""
        rows, next_index = self.collect_rows(blocks, index)
        return self.render(blocks[index], rows, indent), next_index
