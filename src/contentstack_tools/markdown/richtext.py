"""
JSON Rich Text to Markdown
===========================
Converts a JSON RTE tree (``doc`` root, nested paragraphs, headings, lists,
links, images, tables, code blocks and marked-up text runs) into Markdown.

The walk knows nothing about content types; it only looks at node shapes.
Unknown node types render as their concatenated children.

Example::

    from contentstack_tools import render_rich_text

    render_rich_text({
        "type": "doc",
        "children": [
            {"type": "p", "children": [{"text": "Hello "}, {"text": "world", "bold": True}]},
        ],
    })
    # 'Hello **world**'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models.richtext import Container, RichTextNode, TextLeaf, to_rich_text_node
from .formatting import escape_table_cell, separator_row, table_row

_MARK_WRAPPERS: dict[str, tuple[str, str]] = {
    "bold": ("**", "**"),
    "italic": ("*", "*"),
    "underline": ("<u>", "</u>"),
    "strikethrough": ("~~", "~~"),
    "code": ("`", "`"),
    "superscript": ("<sup>", "</sup>"),
    "subscript": ("<sub>", "</sub>"),
}

_HEADINGS = {f"h{n}": n for n in range(1, 7)}
_ROW_TYPES = ("tr", "row")
_SECTION_TYPES = ("thead", "tbody", "tfoot")


def render_rich_text(node: RichTextNode | Mapping[str, Any] | None) -> str:
    """Render a rich text node (or raw JSON RTE mapping) to Markdown."""
    parsed = to_rich_text_node(node)
    if parsed is None:
        return ""
    return _render(parsed)


def _render(node: RichTextNode) -> str:
    if isinstance(node, TextLeaf):
        return _render_leaf(node)
    return _render_container(node)


def _render_leaf(leaf: TextLeaf) -> str:
    # Empty text is still wrapped: an empty bold run renders as "****".
    text = leaf.text
    for mark in leaf.marks():
        opening, closing = _MARK_WRAPPERS[mark]
        text = f"{opening}{text}{closing}"
    return text


def _render_container(node: Container) -> str:
    content = "".join(_render(child) for child in node.children)
    node_type = node.type

    if node_type == "doc":
        return content.strip()
    if node_type == "p":
        return f"{content}\n\n"
    if node_type in _HEADINGS:
        return f"{'#' * _HEADINGS[node_type]} {content}\n\n"
    if node_type == "blockquote":
        return "> " + "\n> ".join(content.strip().split("\n")) + "\n\n"
    if node_type == "ul":
        items = [f"- {_render(child).strip()}" for child in node.children]
        return "\n".join(items) + "\n\n"
    if node_type == "ol":
        items = [f"{i}. {_render(child).strip()}" for i, child in enumerate(node.children, 1)]
        return "\n".join(items) + "\n\n"
    if node_type == "li":
        return content.strip()
    if node_type in ("code_block", "code"):
        language = node.attr("language")
        return f"```{language}\n{content.strip()}\n```\n\n"
    if node_type == "hr":
        return "---\n\n"
    if node_type in ("a", "link"):
        return f"[{content}]({node.attr('url', 'href')})"
    if node_type in ("img", "image"):
        alt = node.attr("alt") or "Image"
        return f"![{alt}]({node.attr('src', 'url')})\n\n"
    if node_type == "table":
        return _render_table(node)
    # tr/row/td/th/cell and unknown types
    return content


def _table_rows(node: Container) -> list[Container]:
    rows: list[Container] = []
    for child in node.children:
        if not isinstance(child, Container):
            continue
        if child.type in _ROW_TYPES:
            rows.append(child)
        elif child.type in _SECTION_TYPES:
            rows.extend(_table_rows(child))
    return rows


def _render_table(node: Container) -> str:
    rows = _table_rows(node)
    if not rows:
        return ""

    lines = [
        table_row([escape_table_cell(_render(cell).strip()) for cell in row.children])
        for row in rows
    ]
    lines.insert(1, separator_row(len(rows[0].children)))
    return "\n".join(lines) + "\n\n"
