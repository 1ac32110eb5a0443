"""Single-block Markdown serialization.

:class:`BlockSerializer` turns one entry of the flattened block sequence
into a Markdown fragment.  Fragments carry no trailing newline; spacing
between fragments is the assembler's job.  An empty fragment means "no
output" (tables and their rows, images, layout wrappers, empty paragraphs).

Indentation is ``config.indent_unit`` repeated ``level`` times and is
prefixed to every non-blank line of the fragment.

Usage::

    from notionmark.config import NotionmarkConfig
    from notionmark.converter.serializer import BlockSerializer
    from notionmark.models import Block, ListCounterState

    serializer = BlockSerializer(NotionmarkConfig())
    md = serializer.serialize(Block.from_api(raw), ListCounterState())
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from notionmark.config import NotionmarkConfig
from notionmark.models import Block, BlockType, ConversionContext, ListCounterState
from notionmark.observability import get_logger

from .properties import UNTITLED_PAGE, extract_icon
from .rich_text import render_spans

log = get_logger("notionmark.serializer")

DEFAULT_PAGE_ICON = "\U0001F4C4"

# Renders the nested content of an expanded sub-page one level deeper than
# its parent; the result is relative to the parent's indentation.
NestedRenderer = Callable[[Sequence[Block]], str]


def notion_url(block_id: str, host: str = "notion.so") -> str:
    """Build a Notion URL from a block or page id."""
    return f"https://{host}/{block_id.replace('-', '')}"


def indent_lines(text: str, indent: str) -> str:
    """Prefix every non-blank line of *text* with *indent*."""
    if not indent or not text:
        return text
    return "\n".join(f"{indent}{line}" if line.strip() else line for line in text.split("\n"))


def _summary_icon(icon: str | None) -> str:
    if not icon:
        return DEFAULT_PAGE_ICON
    if icon.startswith(("http://", "https://")):
        return f'<img src="{icon}" width="16" height="16" alt="icon">'
    return icon


class BlockSerializer:
    """Dispatches a flattened block to its per-type renderer.

    Parameters
    ----------
    config:
        Supplies ``indent_unit`` and ``toggle_style``.
    nested_renderer:
        Called with the nested blocks of an expanded sub-page.  When not
        set, expanded sub-pages render only their disclosure header.
    """

    def __init__(
        self,
        config: NotionmarkConfig,
        nested_renderer: NestedRenderer | None = None,
    ) -> None:
        self._config = config
        self._nested_renderer = nested_renderer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def indent(self, level: int) -> str:
        return self._config.indent_unit * max(level, 0)

    @staticmethod
    def update_counters(block: Block, counters: ListCounterState) -> int:
        """Apply *block* to the numbered-list state.

        Counters of deeper levels are dropped, since a block at a shallower
        level ends any nested list.  Returns the item number for numbered
        items and ``0`` otherwise.
        """
        counters.clear_deeper(block.level)
        if block.type is BlockType.NUMBERED_LIST_ITEM:
            return counters.advance(block.level)
        counters.reset(block.level)
        return 0

    def serialize(self, block: Block, counters: ListCounterState, offset: int = 0) -> str:
        """Render *block* as an indented Markdown fragment.

        Parameters
        ----------
        block:
            The block to render.
        counters:
            Numbered-list state for the sequence *block* belongs to.  A
            numbered item advances its level's counter; any other kind
            resets it.
        offset:
            Extra indentation levels added to ``block.level``.

        Returns
        -------
        str
            The fragment without a trailing newline, or ``""``.
        """
        number = self.update_counters(block, counters)
        if block.type is BlockType.NUMBERED_LIST_ITEM:
            text = self._render_numbered_list_item(block, number)
        else:
            renderer = _BLOCK_RENDERERS.get(block.type, BlockSerializer._render_unexpected)
            text = renderer(self, block)
        return indent_lines(text, self.indent(block.level + offset))

    # ------------------------------------------------------------------
    # Text blocks
    # ------------------------------------------------------------------

    def _text(self, block: Block) -> str:
        return render_spans(block.data.get("rich_text"), ConversionContext.STANDARD)

    def _render_paragraph(self, block: Block) -> str:
        text = self._text(block)
        return text if text.strip() else ""

    def _render_heading(self, block: Block, level: int) -> str:
        return f"{'#' * level} {self._text(block)}"

    def _render_heading_1(self, block: Block) -> str:
        return self._render_heading(block, 1)

    def _render_heading_2(self, block: Block) -> str:
        return self._render_heading(block, 2)

    def _render_heading_3(self, block: Block) -> str:
        return self._render_heading(block, 3)

    def _render_bulleted_list_item(self, block: Block) -> str:
        return f"* {self._text(block)}"

    def _render_numbered_list_item(self, block: Block, number: int) -> str:
        return f"{number}. {self._text(block)}"

    def _render_to_do(self, block: Block) -> str:
        checkbox = "[x]" if block.data.get("checked") else "[ ]"
        return f"- {checkbox} {self._text(block)}"

    def _render_quote(self, block: Block) -> str:
        text = self._text(block)
        if not text:
            return "> "
        return "\n".join(f"> {line.strip()}" if line.strip() else "> " for line in text.split("\n"))

    def _render_toggle(self, block: Block) -> str:
        text = self._text(block)
        if self._config.toggle_style == "details":
            return f"<details>\n  <summary>{text}</summary>"
        return text

    def _render_callout(self, block: Block) -> str:
        icon = block.data.get("icon")
        if not isinstance(icon, Mapping):
            icon = {}
        prefix = ""
        if icon.get("type") == "emoji" and icon.get("emoji"):
            prefix = f"{icon['emoji']} "
        else:
            url = extract_icon(icon)
            if url:
                prefix = f"![icon]({url}) "
        lines = (prefix + self._text(block)).split("\n")
        return "\n".join(f"> {line}" for line in lines)

    # ------------------------------------------------------------------
    # Code
    # ------------------------------------------------------------------

    def _render_code(self, block: Block) -> str:
        language = block.data.get("language") or ""
        if language == "plain text":
            language = ""
        context = (
            ConversionContext.DIAGRAM_CONTENT
            if language == "mermaid"
            else ConversionContext.CODE_CONTENT
        )
        content = render_spans(block.data.get("rich_text"), context)
        caption = render_spans(block.data.get("caption"), ConversionContext.CODE_CAPTION).strip()
        if not content.strip() and not caption:
            return ""

        if content and not content.endswith("\n"):
            content += "\n"
        fence = f"```{language}\n{content}```"
        if caption:
            return f"{fence}\n\n{caption}"
        return fence

    # ------------------------------------------------------------------
    # Links, embeds and rules
    # ------------------------------------------------------------------

    def _render_divider(self, block: Block) -> str:
        return "---"

    def _render_embed(self, block: Block) -> str:
        url = block.data.get("url")
        return f'<iframe src="{url}"></iframe>' if url else ""

    def _render_link_preview(self, block: Block) -> str:
        url = block.data.get("url")
        return f"[{url}]({url})" if url else ""

    def _render_child_database(self, block: Block) -> str:
        title = block.data.get("title") or ""
        return f"[Database: {title}]({notion_url(block.id, 'www.notion.so')})"

    def _render_child_page(self, block: Block) -> str:
        url = notion_url(block.id)
        details = block.details
        if not block.expanded or details is None:
            title = block.data.get("title") or UNTITLED_PAGE
            return f"[{title}]({url})"

        parts = [
            "<details>",
            f"  <summary>{_summary_icon(details.icon)} {details.title}</summary>",
            "",
            f'  <a href="{url}" target="_blank" rel="noopener noreferrer">{url}</a>',
        ]
        if details.blocks and self._nested_renderer is not None:
            nested = self._nested_renderer(details.blocks)
            if nested.strip():
                parts.extend(["", nested.rstrip()])
        parts.extend(["", "</details>"])
        return "\n".join(parts)

    # ------------------------------------------------------------------
    # No direct output and placeholders
    # ------------------------------------------------------------------

    def _render_nothing(self, block: Block) -> str:
        return ""

    def _render_synced_block(self, block: Block) -> str:
        return f"[Unsupported Block Type: {block.raw_type}, ID: {block.id}]"

    def _render_unexpected(self, block: Block) -> str:
        log.warning(
            "Unexpected block type",
            extra={"extra_fields": {"block_type": block.raw_type, "block_id": block.id}},
        )
        return f"[Unexpected Block Type: {block.raw_type}, ID: {block.id}]"


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

_BlockRenderer = Callable[[BlockSerializer, Block], str]

# numbered_list_item needs the counter value and is handled in serialize().
# UNSUPPORTED falls through to _render_unexpected.
_BLOCK_RENDERERS: dict[BlockType, _BlockRenderer] = {
    BlockType.PARAGRAPH: BlockSerializer._render_paragraph,
    BlockType.HEADING_1: BlockSerializer._render_heading_1,
    BlockType.HEADING_2: BlockSerializer._render_heading_2,
    BlockType.HEADING_3: BlockSerializer._render_heading_3,
    BlockType.BULLETED_LIST_ITEM: BlockSerializer._render_bulleted_list_item,
    BlockType.TO_DO: BlockSerializer._render_to_do,
    BlockType.QUOTE: BlockSerializer._render_quote,
    BlockType.TOGGLE: BlockSerializer._render_toggle,
    BlockType.CODE: BlockSerializer._render_code,
    BlockType.CALLOUT: BlockSerializer._render_callout,
    BlockType.DIVIDER: BlockSerializer._render_divider,
    BlockType.EMBED: BlockSerializer._render_embed,
    BlockType.LINK_PREVIEW: BlockSerializer._render_link_preview,
    BlockType.CHILD_PAGE: BlockSerializer._render_child_page,
    BlockType.CHILD_DATABASE: BlockSerializer._render_child_database,
    BlockType.SYNCED_BLOCK: BlockSerializer._render_synced_block,
    BlockType.TABLE: BlockSerializer._render_nothing,
    BlockType.TABLE_ROW: BlockSerializer._render_nothing,
    BlockType.IMAGE: BlockSerializer._render_nothing,
    BlockType.COLUMN_LIST: BlockSerializer._render_nothing,
    BlockType.COLUMN: BlockSerializer._render_nothing,
}
