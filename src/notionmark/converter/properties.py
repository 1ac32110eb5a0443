"""Page properties and database rows to Markdown tables.

Property values are raw Notion API objects; rendering dispatches on their
``type`` field.  Unknown types render as a bracketed placeholder such as
``[button]`` rather than being dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from notionmark.models import ConversionContext

from .rich_text import escape_table_cell, plain_text, render_spans

EMPTY_DATABASE_TEXT = "The database is empty or no items were fetched."

UNTITLED_PAGE = "Untitled Page"
UNTITLED_DATABASE = "Untitled Database"


# ---------------------------------------------------------------------------
# Metadata helpers
# ---------------------------------------------------------------------------

def extract_icon(icon: Mapping[str, Any] | None) -> str | None:
    """Return an emoji or icon URL from a Notion ``icon`` object."""
    if not icon:
        return None
    icon_type = icon.get("type")
    if icon_type == "emoji":
        return icon.get("emoji") or None
    if icon_type in ("external", "file"):
        return (icon.get(icon_type) or {}).get("url") or None
    return None


def page_title(page: Mapping[str, Any]) -> str:
    """Plain-text title of a page object, or ``"Untitled Page"``."""
    properties = page.get("properties") or {}
    for prop in properties.values():
        if isinstance(prop, Mapping) and prop.get("type") == "title":
            title = plain_text(prop.get("title"))
            if title:
                return title
    return UNTITLED_PAGE


def database_title(database: Mapping[str, Any]) -> str:
    """Rendered title of a database object, or ``"Untitled Database"``."""
    title = render_spans(database.get("title"), ConversionContext.STANDARD)
    return title or UNTITLED_DATABASE


# ---------------------------------------------------------------------------
# Value formatting
# ---------------------------------------------------------------------------

def _format_number(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_timestamp(value: Any) -> str:
    """ISO-8601 timestamp to the local time zone, in the locale's format."""
    if not value:
        return ""
    try:
        moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return moment.astimezone().strftime("%x, %X")


def _format_date(date: Mapping[str, Any] | None) -> str:
    if not date:
        return ""
    text = date.get("start") or ""
    if date.get("end"):
        text += f" -> {date['end']}"
    return text


def _format_user(user: Mapping[str, Any] | None) -> str:
    if not user:
        return ""
    return user.get("name") or user.get("id") or ""


def _format_formula(formula: Mapping[str, Any] | None) -> str:
    if not formula:
        return ""
    kind = formula.get("type")
    if kind == "string":
        return formula.get("string") or ""
    if kind == "number":
        return _format_number(formula.get("number"))
    if kind == "boolean":
        return "true" if formula.get("boolean") else "false"
    if kind == "date":
        return (formula.get("date") or {}).get("start") or ""
    return ""


def _format_rollup(rollup: Mapping[str, Any] | None) -> str:
    if not rollup:
        return ""
    kind = rollup.get("type")
    if kind == "number":
        return _format_number(rollup.get("number"))
    if kind == "date":
        return (rollup.get("date") or {}).get("start") or ""
    if kind == "array":
        return f"Array ({len(rollup.get('array') or [])} items)"
    return f"Rollup ({kind or 'unknown'})"


def _named(items: Sequence[Mapping[str, Any]] | None) -> str:
    return ", ".join(item.get("name", "") for item in items or [])


_Formatter = Callable[[Mapping[str, Any]], str]

_VALUE_FORMATTERS: dict[str, _Formatter] = {
    "number": lambda p: _format_number(p.get("number")),
    "select": lambda p: (p.get("select") or {}).get("name", ""),
    "multi_select": lambda p: _named(p.get("multi_select")),
    "status": lambda p: (p.get("status") or {}).get("name", ""),
    "date": lambda p: _format_date(p.get("date")),
    "checkbox": lambda p: "[x]" if p.get("checkbox") else "[ ]",
    "url": lambda p: p.get("url") or "",
    "email": lambda p: p.get("email") or "",
    "phone_number": lambda p: p.get("phone_number") or "",
    "formula": lambda p: _format_formula(p.get("formula")),
    "relation": lambda p: ", ".join(r.get("id", "") for r in p.get("relation") or []),
    "rollup": lambda p: _format_rollup(p.get("rollup")),
    "people": lambda p: ", ".join(_format_user(u) for u in p.get("people") or []),
    "files": lambda p: _named(p.get("files")),
    "created_time": lambda p: _format_timestamp(p.get("created_time")),
    "last_edited_time": lambda p: _format_timestamp(p.get("last_edited_time")),
    "created_by": lambda p: _format_user(p.get("created_by")),
    "last_edited_by": lambda p: _format_user(p.get("last_edited_by")),
}


def render_property_value(prop: Mapping[str, Any]) -> str:
    """Render one property value as table-cell-safe text."""
    prop_type = prop.get("type", "")
    if prop_type in ("title", "rich_text"):
        return render_spans(prop.get(prop_type), ConversionContext.TABLE_CELL)

    formatter = _VALUE_FORMATTERS.get(prop_type)
    if formatter is None:
        return escape_table_cell(f"[{prop_type or 'unknown'}]")
    return escape_table_cell(formatter(prop))


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def render_property_table(properties: Mapping[str, Any] | None) -> str:
    """Render a page's properties as a two-column ``Property | Value`` table.

    Returns ``""`` when there are no properties.
    """
    if not properties:
        return ""
    rows = [
        f"| {escape_table_cell(name)} | {render_property_value(prop)} |"
        for name, prop in properties.items()
        if isinstance(prop, Mapping)
    ]
    if not rows:
        return ""
    return "\n".join(["| Property | Value |", "|---|---|", *rows])


def render_database_table(pages: Sequence[Mapping[str, Any]]) -> str:
    """Render database rows as one pipe table.

    Columns are the property names of the first row, in order.
    """
    if not pages:
        return EMPTY_DATABASE_TEXT

    headers = list((pages[0].get("properties") or {}).keys())
    lines = [
        "| " + " | ".join(escape_table_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for page in pages:
        properties = page.get("properties") or {}
        cells = [
            render_property_value(properties[h]) if isinstance(properties.get(h), Mapping) else ""
            for h in headers
        ]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)
