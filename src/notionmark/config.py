"""Configuration for notionmark.

:class:`NotionmarkConfig` captures every tuneable knob: API access, the
shape of the fetched block tree, Markdown rendering choices, and the retry
and pacing behaviour of the HTTP transport.  Instances are passed to
:class:`~notionmark.async_client.AsyncNotionmarkClient` and to each
component it builds.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal

DEFAULT_MAX_EXPANSION_DEPTH = 1
"""Sub-pages are embedded one level deep unless configured otherwise."""

MAX_PAGE_SIZE = 100
"""Largest ``page_size`` the Notion list endpoints accept."""


@dataclass
class NotionmarkConfig:
    """Complete configuration for a notionmark client.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    max_expansion_depth:
        How many levels of ``child_page`` blocks are fetched and embedded.
        ``0`` renders every sub-page as a plain link.
    page_size:
        Items requested per call when listing children or querying a
        database (1 to 100).
    indent_unit:
        String repeated once per indentation level in the output.
    toggle_style:
        How toggle blocks are rendered.

        * ``"flatten"`` -- the toggle text followed by its indented
          children, no collapsible markup.
        * ``"details"`` -- an HTML ``<details>``/``<summary>`` block.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale backoff intervals randomly to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notionmark.observability.MetricsHook` backend.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Fetching ────────────────────────────────────────────────────────
    max_expansion_depth: int = DEFAULT_MAX_EXPANSION_DEPTH

    page_size: int = MAX_PAGE_SIZE

    # ── Rendering ───────────────────────────────────────────────────────
    indent_unit: str = "  "

    toggle_style: Literal["flatten", "details"] = "flatten"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.max_expansion_depth < 0:
            raise ValueError(
                f"max_expansion_depth must be >= 0, got {self.max_expansion_depth}"
            )
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.toggle_style not in ("flatten", "details"):
            raise ValueError(
                f"toggle_style must be 'flatten' or 'details', got {self.toggle_style!r}"
            )
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionmarkConfig({', '.join(parts)})"
