"""Tests for converter/serializer.py: per-type block rendering."""

from __future__ import annotations

from conftest import raw_block, span, text_block

from notionmark.config import NotionmarkConfig
from notionmark.converter.serializer import BlockSerializer, indent_lines, notion_url
from notionmark.models import Block, ChildPageDetails, ListCounterState

PAGE_ID = "12345678-1234-1234-1234-1234567890ab"


def _render(serializer: BlockSerializer, block: Block) -> str:
    return serializer.serialize(block, ListCounterState())


def _block(block_type: str, level: int = 0, block_id: str = "blk-1", **payload) -> Block:
    return Block.from_api(raw_block(block_type, block_id, **payload), level)


# =========================================================================
# Text blocks
# =========================================================================


class TestTextBlocks:
    def test_headings(self, serializer):
        assert _render(serializer, text_block("heading_1", "Title")) == "# Title"
        assert _render(serializer, text_block("heading_2", "Sub")) == "## Sub"
        assert _render(serializer, text_block("heading_3", "Minor")) == "### Minor"

    def test_paragraph(self, serializer):
        assert _render(serializer, text_block("paragraph", "Body.")) == "Body."

    def test_empty_paragraph_is_empty(self, serializer):
        assert _render(serializer, _block("paragraph", rich_text=[])) == ""
        assert _render(serializer, _block("paragraph", rich_text=[span("")])) == ""

    def test_bulleted_item(self, serializer):
        assert _render(serializer, text_block("bulleted_list_item", "item")) == "* item"

    def test_to_do(self, serializer):
        unchecked = _block("to_do", rich_text=[span("task")], checked=False)
        checked = _block("to_do", rich_text=[span("done")], checked=True)
        assert _render(serializer, unchecked) == "- [ ] task"
        assert _render(serializer, checked) == "- [x] done"

    def test_quote_prefixes_each_line(self, serializer):
        block = _block("quote", rich_text=[span("first\n\nthird")])
        assert _render(serializer, block) == "> first\n> \n> third"

    def test_empty_quote(self, serializer):
        assert _render(serializer, _block("quote", rich_text=[])) == "> "

    def test_toggle_is_flattened_by_default(self, serializer):
        assert _render(serializer, text_block("toggle", "Click me")) == "Click me"

    def test_toggle_details_style(self):
        serializer = BlockSerializer(NotionmarkConfig(toggle_style="details"))
        result = _render(serializer, text_block("toggle", "More"))
        assert result == "<details>\n  <summary>More</summary>"

    def test_callout_with_emoji(self, serializer):
        block = _block(
            "callout", rich_text=[span("Note")], icon={"type": "emoji", "emoji": "\U0001F4A1"}
        )
        assert _render(serializer, block) == "> \U0001F4A1 Note"

    def test_callout_with_external_icon(self, serializer):
        block = _block(
            "callout",
            rich_text=[span("Note")],
            icon={"type": "external", "external": {"url": "https://e.com/i.png"}},
        )
        assert _render(serializer, block) == "> ![icon](https://e.com/i.png) Note"

    def test_callout_without_icon(self, serializer):
        assert _render(serializer, _block("callout", rich_text=[span("Plain")])) == "> Plain"

    def test_callout_with_malformed_icon(self, serializer):
        block = _block("callout", rich_text=[span("x")], icon="\U0001F4A1")
        assert _render(serializer, block) == "> x"


# =========================================================================
# Numbering
# =========================================================================


class TestNumbering:
    def test_contiguous_items_increment(self, serializer):
        counters = ListCounterState()
        out = [
            serializer.serialize(text_block("numbered_list_item", t), counters)
            for t in ("a", "b", "c")
        ]
        assert out == ["1. a", "2. b", "3. c"]

    def test_other_type_at_same_level_resets(self, serializer):
        counters = ListCounterState()
        serializer.serialize(text_block("numbered_list_item", "a"), counters)
        serializer.serialize(text_block("numbered_list_item", "b"), counters)
        serializer.serialize(text_block("paragraph", "break"), counters)
        assert serializer.serialize(text_block("numbered_list_item", "c"), counters) == "1. c"

    def test_deeper_block_does_not_reset(self, serializer):
        counters = ListCounterState()
        serializer.serialize(text_block("numbered_list_item", "a"), counters)
        serializer.serialize(text_block("bulleted_list_item", "child", level=1), counters)
        result = serializer.serialize(text_block("numbered_list_item", "b"), counters)
        assert result == "2. b"

    def test_nested_list_restarts_under_new_parent(self, serializer):
        counters = ListCounterState()
        serializer.serialize(text_block("numbered_list_item", "a"), counters)
        serializer.serialize(text_block("numbered_list_item", "x", level=1), counters)
        serializer.serialize(text_block("numbered_list_item", "b"), counters)
        result = serializer.serialize(text_block("numbered_list_item", "y", level=1), counters)
        assert result == "  1. y"

    def test_shallower_block_clears_deeper_counters(self, serializer):
        counters = ListCounterState()
        serializer.serialize(text_block("numbered_list_item", "a"), counters)
        serializer.serialize(text_block("numbered_list_item", "x", level=1), counters)
        serializer.serialize(text_block("numbered_list_item", "y", level=1), counters)
        assert counters.get(1) == 2

        serializer.serialize(text_block("numbered_list_item", "b"), counters)
        assert counters.get(0) == 2
        assert counters.get(1) == 0

    def test_table_resets_counter(self, serializer):
        counters = ListCounterState()
        serializer.serialize(text_block("numbered_list_item", "a"), counters)
        serializer.serialize(_block("table", has_column_header=True), counters)
        assert serializer.serialize(text_block("numbered_list_item", "b"), counters) == "1. b"


# =========================================================================
# Code
# =========================================================================


class TestCode:
    def test_fenced_with_language(self, serializer):
        block = _block("code", rich_text=[span("print(1)")], language="python", caption=[])
        assert _render(serializer, block) == "```python\nprint(1)\n```"

    def test_plain_text_language_omitted(self, serializer):
        block = _block("code", rich_text=[span("x")], language="plain text", caption=[])
        assert _render(serializer, block) == "```\nx\n```"

    def test_content_is_verbatim(self, serializer):
        block = _block("code", rich_text=[span("a | **b**", bold=True)], language="text")
        assert _render(serializer, block) == "```text\na | **b**\n```"

    def test_mermaid_expands_literal_newlines(self, serializer):
        block = _block("code", rich_text=[span("graph TD\\nA-->B")], language="mermaid")
        assert _render(serializer, block) == "```mermaid\ngraph TD\nA-->B\n```"

    def test_caption_below_fence(self, serializer):
        block = _block(
            "code", rich_text=[span("x")], language="js", caption=[span("Figure", italic=True)]
        )
        assert _render(serializer, block) == "```js\nx\n```\n\n_Figure_"

    def test_empty_code_and_caption_is_empty(self, serializer):
        block = _block("code", rich_text=[], language="python", caption=[])
        assert _render(serializer, block) == ""

    def test_indented_code_indents_every_line(self, serializer):
        block = _block("code", level=1, rich_text=[span("a\nb")], language="")
        assert _render(serializer, block) == "  ```\n  a\n  b\n  ```"


# =========================================================================
# Links, embeds and pages
# =========================================================================


class TestLinksAndPages:
    def test_divider(self, serializer):
        assert _render(serializer, _block("divider")) == "---"

    def test_embed(self, serializer):
        block = _block("embed", url="https://e.com/v")
        assert _render(serializer, block) == '<iframe src="https://e.com/v"></iframe>'

    def test_embed_without_url_is_empty(self, serializer):
        assert _render(serializer, _block("embed")) == ""

    def test_link_preview(self, serializer):
        block = _block("link_preview", url="https://github.com/x")
        assert _render(serializer, block) == "[https://github.com/x](https://github.com/x)"

    def test_child_database_link(self, serializer):
        block = _block("child_database", block_id=PAGE_ID, title="Tasks")
        assert _render(serializer, block) == (
            "[Database: Tasks](https://www.notion.so/123456781234123412341234567890ab)"
        )

    def test_unexpanded_child_page_is_a_link(self, serializer):
        block = _block("child_page", block_id=PAGE_ID, title="Sub")
        block.expanded = False
        assert _render(serializer, block) == f"[Sub]({notion_url(PAGE_ID)})"

    def test_expanded_child_page_without_renderer(self, serializer):
        block = _block("child_page", block_id=PAGE_ID, title="Sub")
        block.expanded = True
        block.details = ChildPageDetails(title="Sub", icon=None, blocks=[])
        url = notion_url(PAGE_ID)
        assert _render(serializer, block) == (
            "<details>\n"
            "  <summary>\U0001F4C4 Sub</summary>\n"
            "\n"
            f'  <a href="{url}" target="_blank" rel="noopener noreferrer">{url}</a>\n'
            "\n"
            "</details>"
        )

    def test_expanded_child_page_url_icon(self, serializer):
        block = _block("child_page", block_id=PAGE_ID, title="Sub")
        block.expanded = True
        block.details = ChildPageDetails(title="Sub", icon="https://e.com/i.png", blocks=[])
        summary = _render(serializer, block).splitlines()[1]
        assert summary == (
            '  <summary><img src="https://e.com/i.png" width="16" height="16" alt="icon"> Sub</summary>'
        )

    def test_expanded_child_page_uses_nested_renderer(self, config):
        calls: list[list[Block]] = []

        def nested(blocks):
            calls.append(list(blocks))
            return "  nested body"

        serializer = BlockSerializer(config, nested_renderer=nested)
        inner = [text_block("paragraph", "inside")]
        block = _block("child_page", level=1, block_id=PAGE_ID, title="Sub")
        block.expanded = True
        block.details = ChildPageDetails(title="Sub", icon="\U0001F680", blocks=inner)

        lines = _render(serializer, block).split("\n")
        assert calls == [inner]
        assert lines[0] == "  <details>"
        assert lines[1] == "    <summary>\U0001F680 Sub</summary>"
        assert "    nested body" in lines
        assert lines[-1] == "  </details>"


# =========================================================================
# No output and placeholders
# =========================================================================


class TestPlaceholders:
    def test_silent_types(self, serializer):
        for block_type in ("image", "table", "table_row", "column_list", "column"):
            assert _render(serializer, _block(block_type)) == ""

    def test_synced_block_placeholder(self, serializer):
        block = _block("synced_block", block_id="s-1")
        assert _render(serializer, block) == "[Unsupported Block Type: synced_block, ID: s-1]"

    def test_unknown_type_placeholder(self, serializer):
        block = _block("bookmark", block_id="b-9", url="https://e.com")
        assert _render(serializer, block) == "[Unexpected Block Type: bookmark, ID: b-9]"

    def test_placeholder_is_indented(self, serializer):
        block = _block("equation", level=2, block_id="e-1", expression="x")
        assert _render(serializer, block) == "    [Unexpected Block Type: equation, ID: e-1]"

    def test_missing_type_names_unknown(self, serializer):
        block = Block.from_api({"id": "z"})
        assert _render(serializer, block) == "[Unexpected Block Type: unknown, ID: z]"


class TestIndentation:
    def test_indent_is_unit_times_level(self, serializer):
        for level in range(4):
            result = _render(serializer, text_block("bulleted_list_item", "x", level=level))
            assert result == "  " * level + "* x"

    def test_custom_indent_unit(self):
        serializer = BlockSerializer(NotionmarkConfig(indent_unit="\t"))
        assert _render(serializer, text_block("paragraph", "x", level=2)) == "\t\tx"

    def test_offset_adds_levels(self, serializer):
        block = text_block("paragraph", "x", level=1)
        assert serializer.serialize(block, ListCounterState(), offset=1) == "    x"

    def test_indent_lines_skips_blank_lines(self):
        assert indent_lines("a\n\nb", "  ") == "  a\n\n  b"
