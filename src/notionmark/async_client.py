"""Asynchronous notionmark client.

:class:`AsyncNotionmarkClient` is the entry point: it resolves a Notion
URL, fetches the page (or database) and returns it as Markdown.

Usage::

    import asyncio
    from notionmark import AsyncNotionmarkClient

    async def main():
        async with AsyncNotionmarkClient(token="secret_xxx") as client:
            doc = await client.fetch_document(
                "https://www.notion.so/Roadmap-0123456789abcdef0123456789abcdef"
            )
            print(doc.title)
            print(doc.markdown)

    asyncio.run(main())
"""

from __future__ import annotations

import time
from typing import Any

from notionmark.comment import compose_comment, render_document_section, render_failure_section
from notionmark.config import NotionmarkConfig
from notionmark.converter.assembler import DocumentAssembler
from notionmark.converter.properties import (
    database_title,
    extract_icon,
    page_title,
    render_database_table,
)
from notionmark.errors import (
    NotionmarkAuthError,
    NotionmarkError,
    NotionmarkFetchError,
    NotionmarkInvalidLocatorError,
    NotionmarkNotFoundError,
    NotionmarkPermissionError,
    NotionmarkRateLimitError,
)
from notionmark.fetcher import BlockTreeFetcher
from notionmark.locator import classify_locator, extract_notion_urls
from notionmark.models import Locator, LocatorKind, NotionDocument
from notionmark.notion_api.blocks import AsyncBlockAPI
from notionmark.notion_api.databases import AsyncDatabaseAPI
from notionmark.notion_api.pages import AsyncPageAPI
from notionmark.notion_api.transport import AsyncNotionTransport
from notionmark.observability import NoopMetricsHook, get_logger

log = get_logger("notionmark.client")


def _classify_failure(exc: Exception, url: str) -> NotionmarkError:
    """Re-raise a fetch failure as a classified error naming *url*."""
    if isinstance(exc, NotionmarkNotFoundError):
        return NotionmarkNotFoundError(
            message=(
                f"Notion page/database not found: {url}. Please check if the page "
                "exists and the integration has access to it."
            ),
            context={**exc.context, "url": url},
            cause=exc,
        )
    if isinstance(exc, NotionmarkAuthError):
        return NotionmarkAuthError(
            message=(
                "Unauthorized access to Notion. Please check if your integration "
                f"token is valid and has access to the page: {url}"
            ),
            context={**exc.context, "url": url},
            cause=exc,
        )
    if isinstance(exc, NotionmarkPermissionError):
        return NotionmarkPermissionError(
            message=(
                f"Insufficient permissions to access Notion page: {url}. Please "
                "ensure the integration is connected to the page's workspace."
            ),
            context={**exc.context, "url": url},
            cause=exc,
        )
    if isinstance(exc, NotionmarkRateLimitError):
        return NotionmarkRateLimitError(
            message="Notion API rate limit exceeded. Please try again later.",
            context={**exc.context, "url": url},
            cause=exc,
        )
    context = dict(exc.context) if isinstance(exc, NotionmarkError) else {}
    return NotionmarkFetchError(
        message=f"Failed to fetch Notion content from {url}: {exc}",
        context={**context, "url": url, "error_type": type(exc).__name__},
        cause=exc,
    )


class AsyncNotionmarkClient:
    """Asynchronous Notion-to-Markdown client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`NotionmarkConfig`.
    """

    def __init__(self, token: str, **kwargs: Any) -> None:
        self._config = NotionmarkConfig(token=token, **kwargs)
        self._transport = AsyncNotionTransport(self._config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._databases = AsyncDatabaseAPI(self._transport)
        self._assembler = DocumentAssembler(self._config)
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def fetch_document(
        self,
        locator: str | Locator,
        max_depth: int | None = None,
    ) -> NotionDocument:
        """Fetch a page or database and convert it to Markdown.

        Parameters
        ----------
        locator:
            A Notion URL (or bare id), or an already classified
            :class:`Locator`.  URLs containing ``/database/`` are treated
            as databases.
        max_depth:
            Sub-page expansion depth.  Defaults to
            ``config.max_expansion_depth``.

        Returns
        -------
        NotionDocument

        Raises
        ------
        NotionmarkInvalidLocatorError
            If no page or database id can be found in *locator*.
        NotionmarkNotFoundError, NotionmarkAuthError, NotionmarkPermissionError, NotionmarkRateLimitError
            For the corresponding API failures.
        NotionmarkFetchError
            For any other failure.
        """
        if not isinstance(locator, Locator):
            locator = classify_locator(locator)
        url = locator.url or locator.id

        t0 = time.monotonic()
        try:
            if locator.kind is LocatorKind.DATABASE:
                database = await self._databases.retrieve(locator.id)
                title = database_title(database)
                icon = extract_icon(database.get("icon"))
                markdown = await self.database_to_markdown(locator.id)
            else:
                page = await self._pages.retrieve(locator.id)
                title = page_title(page)
                icon = extract_icon(page.get("icon"))
                markdown = await self._render_page(locator.id, page, max_depth)
        except NotionmarkInvalidLocatorError:
            raise
        except Exception as exc:
            log.warning(
                "Document fetch failed",
                extra={
                    "extra_fields": {
                        "op": "fetch_document",
                        "url": url,
                        "kind": locator.kind.value,
                        "error_type": type(exc).__name__,
                    }
                },
            )
            raise _classify_failure(exc, url) from exc

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing(
            "notionmark.page_export_duration_ms",
            elapsed_ms,
            tags={"kind": locator.kind.value},
        )
        log.info(
            "Document converted",
            extra={
                "extra_fields": {
                    "op": "fetch_document",
                    "url": url,
                    "kind": locator.kind.value,
                    "duration_ms": round(elapsed_ms, 1),
                }
            },
        )
        return NotionDocument(title=title, markdown=markdown, url=url, icon=icon, kind=locator.kind)

    async def page_to_markdown(self, page_id: str, max_depth: int | None = None) -> str:
        """Convert a page, including its property table, to Markdown.

        API errors propagate unmodified.
        """
        page = await self._pages.retrieve(page_id)
        return await self._render_page(page_id, page, max_depth)

    async def database_to_markdown(self, database_id: str) -> str:
        """Query every row of a database and render them as one table."""
        rows: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            response = await self._databases.query(
                database_id, cursor=cursor, page_size=self._config.page_size
            )
            rows.extend(r for r in response.get("results") or [] if isinstance(r, dict))
            cursor = response.get("next_cursor")
            if not cursor:
                break
        return render_database_table(rows)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def render_comment(self, text: str) -> str | None:
        """Convert every Notion URL in *text* into one comment body.

        Documents are fetched one after another; each failure becomes a
        failure section instead of aborting the batch.

        Returns
        -------
        str | None
            The comment body, or ``None`` when *text* has no Notion URLs.
        """
        urls = extract_notion_urls(text)
        if not urls:
            log.info("No Notion URLs found", extra={"extra_fields": {"op": "render_comment"}})
            return None

        sections: list[str] = []
        errors = 0
        for url in urls:
            try:
                doc = await self.fetch_document(url)
            except NotionmarkError as exc:
                errors += 1
                log.warning(
                    "Failed to process Notion URL",
                    extra={"extra_fields": {"op": "render_comment", "url": url, "error": exc.message}},
                )
                sections.append(render_failure_section(url, exc.message))
                continue
            sections.append(render_document_section(doc))
        return compose_comment(sections, total=len(urls), errors=errors)

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionmarkClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _render_page(
        self,
        page_id: str,
        page: dict[str, Any],
        max_depth: int | None,
    ) -> str:
        fetcher = BlockTreeFetcher(self._blocks, self._pages, self._config)
        blocks = await fetcher.fetch_children(page_id, level=0, depth=0, max_depth=max_depth)
        return self._assembler.assemble(blocks, page.get("properties"), is_top_level=True)
