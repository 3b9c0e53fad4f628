"""
Rich Text Tree – Model
=======================
JSON Rich Text Editor content as a recursive algebraic data type.

A node is either:

- ``TextLeaf``   a run of text with inline marks (bold, italic, ...)
- ``Container``  a typed node (``doc``, ``p``, ``h1``, ``ul``, ``table`` ...)
                 holding an ordered tuple of child nodes and an ``attrs`` map

``to_rich_text_node`` lifts raw API mappings into this type without ever
failing: anything that does not look like a node is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Order in which inline marks wrap leaf text, innermost first.
INLINE_MARKS: tuple[str, ...] = (
    "bold",
    "italic",
    "underline",
    "strikethrough",
    "code",
    "superscript",
    "subscript",
)


class TextLeaf(BaseModel):
    """A text run. Marks are applied in ``INLINE_MARKS`` order."""
    model_config = ConfigDict(frozen=True, extra="allow")

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    superscript: bool = False
    subscript: bool = False

    def marks(self) -> list[str]:
        return [mark for mark in INLINE_MARKS if getattr(self, mark)]


class Container(BaseModel):
    """A typed node with children. The document root has ``type == "doc"``."""
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str | None = None
    children: tuple[RichTextNode, ...] = ()
    attrs: dict[str, Any] = Field(default_factory=dict)
    uid: str | None = None

    def attr(self, *names: str) -> str:
        """First non-empty string attribute among ``names``, else ""."""
        for name in names:
            value = self.attrs.get(name)
            if isinstance(value, str) and value:
                return value
        return ""


RichTextNode = Union[TextLeaf, Container]

Container.model_rebuild()


def to_rich_text_node(raw: Any) -> RichTextNode | None:
    """
    Lift a raw JSON RTE mapping into a ``RichTextNode``.

    A mapping with a string ``text`` becomes a ``TextLeaf`` (mark flags are
    read by truthiness); any other mapping becomes a ``Container``. Returns
    None for values that are not nodes at all.
    """
    if isinstance(raw, (TextLeaf, Container)):
        return raw
    if not isinstance(raw, Mapping):
        return None

    text = raw.get("text")
    if isinstance(text, str):
        return TextLeaf(text=text, **{mark: bool(raw.get(mark)) for mark in INLINE_MARKS})

    node_type = raw.get("type")
    raw_children = raw.get("children")
    children: list[RichTextNode] = []
    if isinstance(raw_children, (list, tuple)):
        for child in raw_children:
            node = to_rich_text_node(child)
            if node is None:
                logger.debug("Dropping non-node rich text child of type %s", type(child).__name__)
                continue
            children.append(node)

    attrs = raw.get("attrs")
    uid = raw.get("uid")
    return Container(
        type=node_type if isinstance(node_type, str) else None,
        children=tuple(children),
        attrs=dict(attrs) if isinstance(attrs, Mapping) else {},
        uid=uid if isinstance(uid, str) else None,
    )
