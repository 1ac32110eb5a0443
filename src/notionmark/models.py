"""Data models for notionmark.

The central type is :class:`Block`: one entry of the *flattened* block
sequence produced by :class:`~notionmark.fetcher.BlockTreeFetcher`.  Nesting
is expressed only through :attr:`Block.level`; there is deliberately no
nested tree type, because list numbering and spacing rules are defined over
the flat reading order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockType(str, Enum):
    """Closed set of block kinds the serializer knows how to render.

    Anything else maps to :attr:`UNSUPPORTED`; the raw type name is kept on
    :attr:`Block.raw_type` so the placeholder can name it.
    """

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    QUOTE = "quote"
    TOGGLE = "toggle"
    CODE = "code"
    CALLOUT = "callout"
    DIVIDER = "divider"
    EMBED = "embed"
    LINK_PREVIEW = "link_preview"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    TABLE = "table"
    TABLE_ROW = "table_row"
    IMAGE = "image"
    SYNCED_BLOCK = "synced_block"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, raw: str | None) -> BlockType:
        """Map an API type name onto the closed set."""
        try:
            return cls(raw)
        except ValueError:
            return cls.UNSUPPORTED


class ConversionContext(str, Enum):
    """Where a rich-text array is being rendered.

    Controls escaping and whether style annotations apply.
    """

    STANDARD = "standard"
    TABLE_CELL = "table_cell"
    CODE_CONTENT = "code_content"
    CODE_CAPTION = "code_caption"
    DIAGRAM_CONTENT = "diagram_content"


class LocatorKind(str, Enum):
    """What a locator points at."""

    PAGE = "page"
    DATABASE = "database"


# Block kinds that are separated by single newlines instead of blank lines.
TIGHT_TYPES: frozenset[BlockType] = frozenset({
    BlockType.BULLETED_LIST_ITEM,
    BlockType.NUMBERED_LIST_ITEM,
    BlockType.TO_DO,
})

# Containers whose children sit one indentation level deeper.
NESTING_TYPES: frozenset[BlockType] = frozenset({
    BlockType.BULLETED_LIST_ITEM,
    BlockType.NUMBERED_LIST_ITEM,
    BlockType.TOGGLE,
    BlockType.TO_DO,
})


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotations:
    """Style flags of a rich-text span."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False

    @classmethod
    def from_api(cls, data: Mapping[str, Any] | None) -> Annotations:
        if not data:
            return cls()
        return cls(
            bold=bool(data.get("bold", False)),
            italic=bool(data.get("italic", False)),
            strikethrough=bool(data.get("strikethrough", False)),
            underline=bool(data.get("underline", False)),
            code=bool(data.get("code", False)),
        )


@dataclass(frozen=True)
class RichTextSpan:
    """A styled inline run of text with an optional hyperlink."""

    content: str
    annotations: Annotations = field(default_factory=Annotations)
    href: str | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> RichTextSpan:
        """Build a span from a Notion rich_text object.

        API responses carry ``plain_text``; locally built objects often only
        have ``text.content``.  Missing fields degrade to empty values.
        """
        content = data.get("plain_text")
        if content is None:
            text = data.get("text") or {}
            content = text.get("content", "") if isinstance(text, Mapping) else ""
        return cls(
            content=str(content or ""),
            annotations=Annotations.from_api(data.get("annotations")),
            href=data.get("href") or None,
        )

    @classmethod
    def coerce(cls, item: RichTextSpan | Mapping[str, Any]) -> RichTextSpan:
        if isinstance(item, RichTextSpan):
            return item
        return cls.from_api(item)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class ChildPageDetails:
    """Expansion metadata attached to a fetched ``child_page`` block."""

    title: str
    icon: str | None
    blocks: list[Block] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class Block:
    """One entry of the flattened block sequence.

    Attributes
    ----------
    type:
        The block kind, or :attr:`BlockType.UNSUPPORTED`.
    raw_type:
        The type name exactly as the API reported it.
    id:
        Block id (may be empty for locally built blocks).
    data:
        The type-specific payload, i.e. ``raw[raw_type]``.
    has_children:
        Whether the API reported nested children.
    level:
        Indentation level, ``0`` for top-level blocks.
    details:
        Embedded sub-page content for expanded ``child_page`` blocks.
    expanded:
        ``True`` once a ``child_page`` has been embedded, ``False`` when it
        was not (depth exhausted or fetch failed), ``None`` for other kinds.
    """

    type: BlockType
    raw_type: str
    id: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    has_children: bool = False
    level: int = 0
    details: ChildPageDetails | None = None
    expanded: bool | None = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any], level: int = 0) -> Block:
        """Wrap a raw Notion block object at the given indentation level."""
        raw_type = raw.get("type") or "unknown"
        payload = raw.get(raw_type)
        return cls(
            type=BlockType.parse(raw_type),
            raw_type=raw_type,
            id=raw.get("id") or "",
            data=dict(payload) if isinstance(payload, Mapping) else {},
            has_children=bool(raw.get("has_children", False)),
            level=level,
        )

    @property
    def is_tight(self) -> bool:
        return self.type in TIGHT_TYPES


class ListCounterState:
    """Running numbered-list counts, keyed by indentation level.

    A fresh instance is created for every serialization pass; nested
    sub-page content gets its own.
    """

    __slots__ = ("_counts",)

    def __init__(self) -> None:
        self._counts: dict[int, int] = {}

    def advance(self, level: int) -> int:
        """Increment and return the counter for *level*."""
        value = self.get(level) + 1
        self._counts[level] = value
        return value

    def reset(self, level: int) -> None:
        self._counts[level] = 0

    def clear_deeper(self, level: int) -> None:
        """Forget the counters of every level below *level*."""
        for key in [k for k in self._counts if k > level]:
            del self._counts[key]

    def get(self, level: int) -> int:
        return self._counts.get(level, 0)


# ---------------------------------------------------------------------------
# Locators and results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Locator:
    """A classified reference to a Notion page or database.

    Attributes
    ----------
    kind:
        Page or database.
    id:
        The 32-character id without hyphens.
    url:
        The free-text locator the id was extracted from.
    """

    kind: LocatorKind
    id: str
    url: str = ""


@dataclass
class NotionDocument:
    """A converted page or database.

    Attributes
    ----------
    title:
        Plain-text title (``"Untitled Page"`` / ``"Untitled Database"`` when
        absent).
    markdown:
        The assembled Markdown body.
    url:
        The locator the document was fetched from.
    icon:
        Emoji or icon URL, if the page or database has one.
    kind:
        Whether the source was a page or a database.
    """

    title: str
    markdown: str
    url: str
    icon: str | None = None
    kind: LocatorKind = LocatorKind.PAGE
