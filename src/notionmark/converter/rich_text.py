"""Inline rendering: Notion rich_text arrays to Markdown strings.

The output depends on the :class:`~notionmark.models.ConversionContext`:

* ``diagram_content`` -- verbatim, literal ``\\n`` sequences become real
  line breaks (Mermaid sources stored with escaped newlines).
* ``code_content`` -- verbatim.
* ``table_cell`` -- newlines become ``<br>``, pipes are escaped, no styles.
* ``standard`` / ``code_caption`` -- literal ``\\n`` becomes a Markdown
  hard break, then style markers and links are applied.

Annotation combination order (innermost first)::

    code -> bold -> italic -> strikethrough -> underline -> link
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from notionmark.models import ConversionContext, RichTextSpan

# A backslash followed by "n", as stored by some Notion clients.
LITERAL_NEWLINE = "\\n"

HARD_BREAK = "  \n"

TABLE_LINE_BREAK = "<br>"

_REAL_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def escape_table_cell(text: str) -> str:
    """Make *text* safe inside a pipe-table cell.

    Real and literally escaped newlines become ``<br>``; ``|`` becomes
    ``\\|``.  Only newline characters are substituted.
    """
    text = _REAL_NEWLINE_RE.sub(TABLE_LINE_BREAK, text)
    text = text.replace(LITERAL_NEWLINE, TABLE_LINE_BREAK)
    return text.replace("|", "\\|")


def escape_link_target(href: str) -> str:
    """Escape underscores so Markdown renderers keep the URL intact."""
    return href.replace("_", "\\_")


def _render_span(span: RichTextSpan, context: ConversionContext) -> str:
    text = span.content

    if context is ConversionContext.DIAGRAM_CONTENT:
        return text.replace(LITERAL_NEWLINE, "\n")
    if context is ConversionContext.CODE_CONTENT:
        return text
    if context is ConversionContext.TABLE_CELL:
        return escape_table_cell(text)

    text = text.replace(LITERAL_NEWLINE, HARD_BREAK)

    ann = span.annotations
    if ann.code:
        text = f"`{text}`"
    if ann.bold:
        text = f"**{text}**"
    if ann.italic:
        text = f"_{text}_"
    if ann.strikethrough:
        text = f"~~{text}~~"
    if ann.underline:
        text = f"<u>{text}</u>"

    if span.href:
        text = f"[{text}]({escape_link_target(span.href)})"

    return text


def render_spans(
    spans: Iterable[RichTextSpan | Mapping[str, Any]] | None,
    context: ConversionContext = ConversionContext.STANDARD,
) -> str:
    """Render a rich_text array under *context*.

    Parameters
    ----------
    spans:
        Notion rich_text objects (dicts) or :class:`RichTextSpan` values.
        ``None`` and empty arrays render as ``""``.
    context:
        The rendering context; see the module docstring.

    Returns
    -------
    str
        The concatenated rendering of every span.
    """
    if not spans:
        return ""
    return "".join(
        _render_span(RichTextSpan.coerce(item), context)
        for item in spans
        if isinstance(item, (RichTextSpan, Mapping))
    )


def plain_text(spans: Iterable[Mapping[str, Any]] | None) -> str:
    """Concatenate the unstyled content of a rich_text array."""
    if not spans:
        return ""
    return "".join(RichTextSpan.from_api(s).content for s in spans if isinstance(s, Mapping))
