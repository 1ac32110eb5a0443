"""Composite comment bodies embedding converted documents.

Each converted document becomes a collapsible ``<details>`` section; the
sections are joined under a status header and followed by a hidden marker
so a previously posted comment can be found and updated in place.
"""

from __future__ import annotations

from collections.abc import Sequence

from notionmark.models import LocatorKind, NotionDocument

HIDDEN_MARKER = "<!-- NOTION_TO_GITHUB_COMMENTS -->"

DEFAULT_PAGE_ICON = "\U0001F4C4"
DEFAULT_DATABASE_ICON = "\U0001F5C3\uFE0F"
FAILURE_ICON = "\u26A0\uFE0F"


def icon_html(icon: str | None, kind: LocatorKind = LocatorKind.PAGE) -> str:
    """An ``<img>`` tag for URL icons, the emoji itself, or a default."""
    if icon and icon.startswith(("http://", "https://")):
        return f'<img src="{icon}" width="16" height="16" alt="icon">'
    if icon:
        return icon
    return DEFAULT_DATABASE_ICON if kind is LocatorKind.DATABASE else DEFAULT_PAGE_ICON


def render_document_section(doc: NotionDocument) -> str:
    """Wrap a converted document in a collapsible section."""
    return (
        "<details>\n"
        f"<summary>&nbsp;&nbsp;{icon_html(doc.icon, doc.kind)} {doc.title}</summary>\n"
        f'<a href="{doc.url}" target="_blank" rel="noopener noreferrer">{doc.url}</a>\n'
        "<br>\n<br>\n\n"
        f"{doc.markdown}\n"
        "</details>"
    )


def render_failure_section(url: str, message: str) -> str:
    """A collapsible section reporting a document that could not be fetched."""
    return (
        "<details>\n"
        f"<summary>&nbsp;&nbsp;{FAILURE_ICON} Failed to fetch: {url}</summary>\n\n"
        f"Could not retrieve: {message}\n"
        "</details>"
    )


def compose_comment(sections: Sequence[str], total: int, errors: int = 0) -> str:
    """Join *sections* under a status header and append the hidden marker.

    Parameters
    ----------
    sections:
        Output of :func:`render_document_section` /
        :func:`render_failure_section`.
    total:
        Number of locators processed.
    errors:
        How many of them failed.
    """
    if errors > 0:
        status = f"{total - errors} success, {errors} error(s)"
    else:
        status = f"{total} processed"
    body = f"### \U0001F916 Notion Context ({status})\n\n" + "\n\n".join(sections)
    return f"{body}\n{HIDDEN_MARKER}"
