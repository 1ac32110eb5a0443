"""Tests for locator.py: URL extraction and classification."""

from __future__ import annotations

import pytest

from notionmark.errors import ErrorCode, NotionmarkInvalidLocatorError
from notionmark.locator import classify_locator, extract_notion_urls
from notionmark.models import LocatorKind

HEX = "0123456789abcdef0123456789abcdef"
UUID = "01234567-89ab-cdef-0123-456789abcdef"


class TestExtractNotionUrls:
    def test_finds_urls_in_order(self):
        text = f"First https://www.notion.so/A-{HEX} then https://team.notion.site/B-{HEX[::-1]}"
        assert extract_notion_urls(text) == [
            f"https://www.notion.so/A-{HEX}",
            f"https://team.notion.site/B-{HEX[::-1]}",
        ]

    def test_duplicates_are_dropped(self):
        url = f"https://notion.so/{HEX}"
        assert extract_notion_urls(f"{url} and again {url}") == [url]

    def test_other_domains_are_ignored(self):
        assert extract_notion_urls("see https://github.com/org/repo and http://e.com") == []

    @pytest.mark.parametrize("suffix", [".", ",", ";", "!", "?", ")", ")."])
    def test_trailing_punctuation_is_stripped(self, suffix):
        url = f"https://notion.so/Page-{HEX}"
        assert extract_notion_urls(f"({url}{suffix}") == [url]

    def test_html_entity_tail_is_stripped(self):
        url = f"https://notion.so/Page-{HEX}"
        assert extract_notion_urls(f"{url}&quot;>link") == [url]

    def test_quote_tail_is_stripped(self):
        url = f"https://notion.so/Page-{HEX}"
        assert extract_notion_urls(f'<a href="{url}">x</a>') == [url]

    def test_commented_urls_are_ignored(self):
        text = f"<!-- https://notion.so/{HEX} -->\nnothing here"
        assert extract_notion_urls(text) == []

    def test_page_parameter_truncates(self):
        url = f"https://www.notion.so/workspace/Board-{HEX}?v=abc&p={UUID}&pm=s"
        expected = f"https://www.notion.so/workspace/Board-{HEX}?v=abc&p={UUID}"
        assert extract_notion_urls(url) == [expected]

    @pytest.mark.parametrize("text", [None, "", "   ", 42])
    def test_empty_input(self, text):
        assert extract_notion_urls(text) == []


class TestClassifyLocator:
    def test_page_url_with_hex_id(self):
        locator = classify_locator(f"https://www.notion.so/Roadmap-{HEX}")
        assert locator.kind is LocatorKind.PAGE
        assert locator.id == HEX
        assert locator.url == f"https://www.notion.so/Roadmap-{HEX}"

    def test_uuid_is_normalized(self):
        assert classify_locator(UUID.upper()).id == HEX

    def test_database_path(self):
        locator = classify_locator(f"https://www.notion.so/team/database/{HEX}")
        assert locator.kind is LocatorKind.DATABASE
        assert locator.id == HEX

    def test_view_links_are_pages(self):
        assert classify_locator(f"https://www.notion.so/{HEX}?v=1").kind is LocatorKind.PAGE

    def test_bare_hex_id(self):
        assert classify_locator(HEX).id == HEX

    @pytest.mark.parametrize("text", ["https://www.notion.so/no-id-here", "", "abc123"])
    def test_invalid(self, text):
        with pytest.raises(NotionmarkInvalidLocatorError) as exc_info:
            classify_locator(text)
        assert exc_info.value.code == ErrorCode.INVALID_LOCATOR
        assert exc_info.value.message == f"Invalid Notion URL format: {text}"
