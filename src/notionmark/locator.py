"""Notion URL extraction and classification.

:func:`extract_notion_urls` pulls Notion links out of free text such as a
pull-request description; :func:`classify_locator` turns one of them into
a :class:`~notionmark.models.Locator`.

>>> extract_notion_urls("See https://notion.so/Notes-0123456789abcdef0123456789abcdef.")
['https://notion.so/Notes-0123456789abcdef0123456789abcdef']
"""

from __future__ import annotations

import re

from notionmark.errors import NotionmarkInvalidLocatorError
from notionmark.models import Locator, LocatorKind

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
_TRAILING_PUNCTUATION_RE = re.compile(r"[.,;!?)]+$")
_HTML_ENTITY_TAIL_RE = re.compile(r"(&quot;|&gt;|&lt;|&#39;|&amp;).*$")
_QUOTE_TAIL_RE = re.compile(r'".*$')

_HEX32 = r"[a-f0-9]{32}"
_UUID = r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}"
# Everything up to and including a ?p= / ?page_id= parameter holding an id.
_PAGE_PARAM_RE = re.compile(rf"^(.*[?&](?:p|page_id)=(?:{_UUID}|{_HEX32}))")

_NOTION_DOMAINS = ("notion.so", "notion.site")

_UUID_ID_RE = re.compile(
    r"([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})"
)
_HEX_ID_RE = re.compile(r"([0-9a-fA-F]{32})")


def _clean_url(url: str) -> str:
    url = _TRAILING_PUNCTUATION_RE.sub("", url)
    url = _HTML_ENTITY_TAIL_RE.sub("", url)
    url = _QUOTE_TAIL_RE.sub("", url)
    match = _PAGE_PARAM_RE.match(url)
    if match:
        url = match.group(1)
    return url


def extract_notion_urls(text: str | None) -> list[str]:
    """Return the distinct Notion URLs in *text*, in order of appearance.

    URLs inside HTML comments are ignored.  Trailing punctuation and
    attached HTML entities are stripped, and a URL carrying a ``?p=`` or
    ``?page_id=`` id is cut right after that id.  Only ``notion.so`` and
    ``notion.site`` links are kept.
    """
    if not text or not isinstance(text, str):
        return []

    found: dict[str, None] = {}
    for match in _URL_RE.finditer(_HTML_COMMENT_RE.sub("", text)):
        url = _clean_url(match.group(0))
        if any(domain in url for domain in _NOTION_DOMAINS):
            found.setdefault(url, None)
    return list(found)


def classify_locator(text: str) -> Locator:
    """Classify a page or database URL (or a bare id).

    Parameters
    ----------
    text:
        A Notion URL, a hyphenated UUID, or a 32-character hex id.

    Returns
    -------
    Locator
        ``kind`` is :attr:`LocatorKind.DATABASE` when the text contains
        ``/database/``; ``id`` is the id without hyphens.

    Raises
    ------
    NotionmarkInvalidLocatorError
        If no id can be found.
    """
    match = _UUID_ID_RE.search(text or "")
    if match:
        block_id = match.group(1).replace("-", "")
    else:
        match = _HEX_ID_RE.search(text or "")
        if not match:
            raise NotionmarkInvalidLocatorError(
                message=f"Invalid Notion URL format: {text}",
                context={"locator": text},
            )
        block_id = match.group(1)

    kind = LocatorKind.DATABASE if "/database/" in text else LocatorKind.PAGE
    return Locator(kind=kind, id=block_id.lower(), url=text)
