"""notionmark -- Notion pages and databases as flat Markdown.

Public re-exports
-----------------

* **Client:** :class:`AsyncNotionmarkClient`
* **Configuration:** :class:`NotionmarkConfig`
* **Errors:** Every :class:`NotionmarkError` subclass and :class:`ErrorCode`
* **Conversion:** :class:`BlockTreeFetcher`, :class:`DocumentAssembler`
* **Locators and comments:** :func:`extract_notion_urls`,
  :func:`classify_locator`, :func:`compose_comment`
* **Models:** :class:`Block`, :class:`NotionDocument` and supporting types

Usage::

    from notionmark import AsyncNotionmarkClient

    async with AsyncNotionmarkClient(token="secret_xxx") as client:
        doc = await client.fetch_document("https://www.notion.so/<page-id>")
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from notionmark.async_client import AsyncNotionmarkClient

# ── Comments and locators ──────────────────────────────────────────────
from notionmark.comment import (
    HIDDEN_MARKER,
    compose_comment,
    render_document_section,
    render_failure_section,
)

# ── Configuration ───────────────────────────────────────────────────────
from notionmark.config import NotionmarkConfig

# ── Conversion ──────────────────────────────────────────────────────────
from notionmark.converter import (
    ERROR_SENTINEL,
    BlockSerializer,
    DocumentAssembler,
    TableReconstructor,
    render_spans,
)

# ── Errors ──────────────────────────────────────────────────────────────
from notionmark.errors import (
    ErrorCode,
    NotionmarkAuthError,
    NotionmarkError,
    NotionmarkFetchError,
    NotionmarkInvalidLocatorError,
    NotionmarkNetworkError,
    NotionmarkNotFoundError,
    NotionmarkPermissionError,
    NotionmarkRateLimitError,
    NotionmarkRetryExhaustedError,
    NotionmarkValidationError,
)
from notionmark.fetcher import BlockTreeFetcher
from notionmark.locator import classify_locator, extract_notion_urls

# ── Models ──────────────────────────────────────────────────────────────
from notionmark.models import (
    Annotations,
    Block,
    BlockType,
    ChildPageDetails,
    ConversionContext,
    ListCounterState,
    Locator,
    LocatorKind,
    NotionDocument,
    RichTextSpan,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Client
    "AsyncNotionmarkClient",
    # Configuration
    "NotionmarkConfig",
    # Error base + code enum
    "NotionmarkError",
    "ErrorCode",
    # API / transport errors
    "NotionmarkValidationError",
    "NotionmarkAuthError",
    "NotionmarkPermissionError",
    "NotionmarkNotFoundError",
    "NotionmarkRateLimitError",
    "NotionmarkRetryExhaustedError",
    "NotionmarkNetworkError",
    "NotionmarkInvalidLocatorError",
    "NotionmarkFetchError",
    # Conversion
    "BlockTreeFetcher",
    "DocumentAssembler",
    "BlockSerializer",
    "TableReconstructor",
    "render_spans",
    "ERROR_SENTINEL",
    # Locators and comments
    "extract_notion_urls",
    "classify_locator",
    "compose_comment",
    "render_document_section",
    "render_failure_section",
    "HIDDEN_MARKER",
    # Models
    "Block",
    "BlockType",
    "ChildPageDetails",
    "ConversionContext",
    "ListCounterState",
    "RichTextSpan",
    "Annotations",
    "Locator",
    "LocatorKind",
    "NotionDocument",
]
