"""Recursive, paginated block-tree fetching.

:class:`BlockTreeFetcher` walks a page's block tree depth-first and returns
one flat list of :class:`~notionmark.models.Block` entries in reading
order, each annotated with its indentation level:

* children of list items, toggles and to-dos sit one level deeper;
* a ``column_list`` is followed by its columns at the same level, each
  column followed by its own content one level deeper;
* a ``table`` is followed by its ``table_row`` children one level deeper;
* a ``child_page`` is expanded in place (title, icon and content embedded
  by value) while ``depth < max_depth``;
* a ``child_database`` is never expanded.

All calls are awaited sequentially so the order of the result always
matches the document.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from notionmark.config import NotionmarkConfig
from notionmark.converter.properties import extract_icon, page_title
from notionmark.models import NESTING_TYPES, Block, BlockType, ChildPageDetails
from notionmark.notion_api import AsyncBlockAPI, AsyncPageAPI
from notionmark.observability import NoopMetricsHook, get_logger

log = get_logger("notionmark.fetcher")


class BlockTreeFetcher:
    """Flattens a Notion block tree into an indentation-annotated list.

    Parameters
    ----------
    blocks:
        Endpoint wrapper used to list block children.
    pages:
        Endpoint wrapper used to retrieve sub-page metadata.
    config:
        Supplies ``page_size`` and the default ``max_expansion_depth``.
    """

    def __init__(
        self,
        blocks: AsyncBlockAPI,
        pages: AsyncPageAPI,
        config: NotionmarkConfig,
    ) -> None:
        self._blocks = blocks
        self._pages = pages
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    async def fetch_children(
        self,
        container_id: str,
        level: int = 0,
        depth: int = 0,
        max_depth: int | None = None,
    ) -> list[Block]:
        """Fetch every descendant of *container_id* as a flat list.

        Parameters
        ----------
        container_id:
            Page or block id whose children are fetched.
        level:
            Indentation level assigned to the direct children.
        depth:
            Current sub-page expansion depth (``0`` for the root page).
        max_depth:
            Sub-pages are expanded while ``depth < max_depth``.  Defaults
            to ``config.max_expansion_depth``.

        Returns
        -------
        list[Block]
            Blocks in reading order.

        Raises
        ------
        NotionmarkError
            When listing the children of *container_id* (or of any nested
            container other than a sub-page) fails.
        """
        if max_depth is None:
            max_depth = self._config.max_expansion_depth

        flattened: list[Block] = []
        async for raw in self._iter_children(container_id):
            if not raw.get("type"):
                continue
            block = Block.from_api(raw, level)

            if block.type is BlockType.COLUMN_LIST:
                flattened.append(block)
                if block.has_children:
                    flattened.extend(await self._fetch_columns(block, depth, max_depth))
            elif block.type is BlockType.TABLE:
                flattened.append(block)
                if block.has_children:
                    rows = await self.fetch_children(block.id, level + 1, depth, max_depth)
                    flattened.extend(r for r in rows if r.type is BlockType.TABLE_ROW)
            elif block.type is BlockType.CHILD_PAGE:
                if depth < max_depth:
                    await self._expand_child_page(block, depth, max_depth)
                else:
                    block.expanded = False
                flattened.append(block)
            elif block.type is BlockType.CHILD_DATABASE:
                flattened.append(block)
            else:
                flattened.append(block)
                if block.has_children:
                    child_level = level + 1 if block.type in NESTING_TYPES else level
                    flattened.extend(
                        await self.fetch_children(block.id, child_level, depth, max_depth)
                    )
        return flattened

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _iter_children(self, block_id: str) -> AsyncIterator[dict[str, Any]]:
        """Yield raw child objects, following continuation cursors."""
        cursor: str | None = None
        while True:
            page = await self._blocks.list_children(
                block_id, cursor=cursor, page_size=self._config.page_size
            )
            for item in page.get("results") or []:
                if isinstance(item, dict):
                    yield item
            cursor = page.get("next_cursor")
            if not cursor:
                break

    async def _fetch_columns(self, column_list: Block, depth: int, max_depth: int) -> list[Block]:
        """Columns at the layout's level, each followed by its content."""
        flattened: list[Block] = []
        async for raw in self._iter_children(column_list.id):
            if not raw.get("type"):
                continue
            column = Block.from_api(raw, column_list.level)
            flattened.append(column)
            if column.type is BlockType.COLUMN and column.has_children:
                flattened.extend(
                    await self.fetch_children(column.id, column.level + 1, depth, max_depth)
                )
        return flattened

    async def _expand_child_page(self, block: Block, depth: int, max_depth: int) -> None:
        """Embed a sub-page's metadata and content into *block*.

        Any failure leaves the block unexpanded; it never propagates.
        """
        try:
            page = await self._pages.retrieve(block.id)
            nested = await self.fetch_children(block.id, 0, depth + 1, max_depth)
        except Exception as exc:
            block.expanded = False
            self._metrics.increment("notionmark.subpage_expansion_failures_total")
            log.warning(
                "Sub-page expansion failed; rendering as a link",
                extra={
                    "extra_fields": {
                        "op": "expand_child_page",
                        "block_id": block.id,
                        "depth": depth,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    }
                },
            )
            return

        block.details = ChildPageDetails(
            title=page_title(page),
            icon=extract_icon(page.get("icon")),
            blocks=nested,
            properties=dict(page.get("properties") or {}),
        )
        block.expanded = True
