"""
Entry to Markdown
==================
Renders a Contentstack entry as GitHub-flavoured Markdown, walking the entry
in lock-step with its content type schema.

Layout:

- the title field becomes the top heading, the description field a blockquote
- primitive fields become ``**Label:** value`` lines
- simple groups become ``| Field | Value |`` tables, complex groups nested headings
- repeatable groups become one table with a row per instance
- modular blocks become one sub-section per block, separated by rules

Rendering is best-effort presentation: values of the wrong shape render as
nothing rather than raising.

Example::

    from contentstack_tools import RenderOptions, render_entry

    markdown = render_entry(entry, content_type, RenderOptions(heading_level=2))
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from ..models.blocks import MatchedBlock, match_block
from ..models.content_type import (
    BlockDefinition,
    ContentType,
    FieldDefinition,
    FieldType,
    is_system_field,
)
from ..models.options import RenderOptions
from .formatting import (
    blockquote,
    escape_table_cell,
    heading,
    is_empty,
    separator_row,
    table_row,
)
from .richtext import render_rich_text

logger = logging.getLogger(__name__)

# Text values longer than this are quoted inside blocks.
LONG_TEXT_THRESHOLD = 100


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def render_entry(
    entry: Mapping[str, Any],
    content_type: ContentType | Mapping[str, Any],
    options: RenderOptions | None = None,
) -> str:
    """
    Convert an entry to a formatted Markdown string.

    Parameters
    ----------
    entry:
        The entry as returned by the API (a mapping of field uid to value).
    content_type:
        The content type schema, as a ``ContentType`` or raw mapping.
        Raises ``ContentTypeError`` if it has no field list.
    options:
        Rendering options; defaults to ``RenderOptions()``.
    """
    ct = ContentType.coerce(content_type)
    opts = options or RenderOptions()
    values = _as_mapping(entry)
    lines: list[str] = []

    title = values.get(opts.title_field)
    if isinstance(title, str) and title:
        lines += [heading(title, opts.heading_level), ""]

    description = values.get(opts.description_field)
    if isinstance(description, str) and description:
        lines += [f"> {description}", ""]

    level = opts.section_level
    for field in ct.fields:
        if field.uid in (opts.title_field, opts.description_field):
            continue
        if _hidden(field, opts):
            continue
        value = values.get(field.uid)
        if opts.skip_empty and is_empty(value):
            continue

        if field.is_group or field.is_blocks:
            lines += ["---", "", heading(field.label, level), ""]
            lines.append(_render_structured(field, value, level, opts))
            lines.append("")
            continue

        rendered = render_primitive(value, field, opts)
        if not rendered:
            continue
        if field.data_type == FieldType.FILE.value or field.is_json_rte:
            lines += ["---", "", heading(field.label, level), "", rendered, ""]
        elif field.multiple and field.data_type == FieldType.TEXT.value:
            lines += ["---", "", f"**{field.label}:** {rendered}", ""]
        else:
            lines += [f"**{field.label}:** {rendered}", ""]

    return "\n".join(lines).strip()


# ---------------------------------------------------------------------------
# Primitive values
# ---------------------------------------------------------------------------


def render_primitive(value: Any, field: FieldDefinition, options: RenderOptions) -> str:
    """Render a leaf value according to its field's data type."""
    if is_empty(value):
        return ""

    data_type = field.data_type

    if data_type == FieldType.TEXT.value:
        if isinstance(value, (list, tuple)):
            return " · ".join(f"`{v}`" for v in value)
        return str(value)

    if data_type == FieldType.TAXONOMY.value:
        terms = value if isinstance(value, (list, tuple)) else [value]
        return "\n".join(
            f"- {t.get('term_uid', '')}" for t in terms if isinstance(t, Mapping)
        )

    if data_type == FieldType.JSON.value:
        if field.is_json_rte:
            return render_rich_text(value) if isinstance(value, Mapping) else ""
        return f"```json\n{json.dumps(value, indent=2, ensure_ascii=False, default=str)}\n```"

    if isinstance(value, (list, tuple)):
        rendered = [_render_scalar(v, data_type, options) for v in value]
        joiner = "\n\n" if data_type == FieldType.FILE.value else ", "
        return joiner.join(r for r in rendered if r)

    return _render_scalar(value, data_type, options)


def _render_scalar(value: Any, data_type: str, options: RenderOptions) -> str:
    if value is None:
        return ""

    if data_type == FieldType.NUMBER.value:
        try:
            return options.format_number(float(value) if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return str(value)

    if data_type == FieldType.BOOLEAN.value:
        return "**Yes**" if value else "**No**"

    if data_type == FieldType.ISODATE.value:
        return options.format_date(str(value))

    if data_type == FieldType.LINK.value:
        if not isinstance(value, Mapping):
            return ""
        title, href = value.get("title"), value.get("href")
        if href:
            return f"[{title or href}]({href})"
        return title or ""

    if data_type == FieldType.FILE.value:
        return _render_asset(value)

    if data_type in (FieldType.REFERENCE.value, FieldType.GLOBAL_FIELD.value):
        if not isinstance(value, Mapping):
            return ""
        return value.get("title") or f"uid: {value.get('uid')}"

    return str(value)


def _render_asset(asset: Any) -> str:
    if not isinstance(asset, Mapping):
        return ""
    name = asset.get("title") or asset.get("filename")
    url = asset.get("url")
    if not url:
        return name or ""
    if _is_image(asset):
        return f"![{name or 'Image'}]({url})"
    return f"[{name or 'File'}]({url})"


def _is_image(asset: Any) -> bool:
    if not isinstance(asset, Mapping):
        return False
    content_type = asset.get("content_type")
    return isinstance(content_type, str) and content_type.startswith("image/")


def _has_url(value: Any) -> bool:
    return isinstance(value, Mapping) and bool(value.get("url"))


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


def _render_structured(field: FieldDefinition, value: Any, level: int, opts: RenderOptions) -> str:
    """Body of a group or blocks section whose heading sits at ``level``."""
    if field.is_blocks:
        return blocks_to_markdown(value, field.block_definitions, level + 1, opts)
    if field.multiple:
        return repeatable_group_to_table(value, field.children, opts)
    if field.has_nested_groups() or not opts.use_tables:
        return group_to_headings(_as_mapping(value), field.children, level + 1, opts)
    return group_to_table(_as_mapping(value), field.children, opts)


def group_to_table(
    value: Mapping[str, Any],
    schema: list[FieldDefinition],
    opts: RenderOptions,
) -> str:
    """Two-column ``Field | Value`` table; image assets are placed above it."""
    rows = ["| Field | Value |", "|-------|-------|"]
    images: list[str] = []

    for field in schema:
        if _hidden(field, opts):
            continue
        field_value = value.get(field.uid)
        if opts.skip_empty and is_empty(field_value):
            continue

        if field.data_type == FieldType.FILE.value and _has_url(field_value) and _is_image(field_value):
            images.append(f"![{field.label}]({field_value['url']})")
            continue

        rendered = render_primitive(field_value, field, opts)
        if rendered:
            rows.append(f"| **{escape_table_cell(field.label)}** | {escape_table_cell(rendered)} |")

    parts: list[str] = []
    if images:
        parts += ["\n\n".join(images), ""]
    if len(rows) > 2:
        parts.append("\n".join(rows))
    return "\n".join(parts)


def group_to_headings(
    value: Mapping[str, Any],
    schema: list[FieldDefinition],
    level: int,
    opts: RenderOptions,
) -> str:
    """Complex group: nested headings for sub-groups, labelled lines for leaves."""
    lines: list[str] = []

    for field in schema:
        if _hidden(field, opts):
            continue
        field_value = value.get(field.uid)
        if opts.skip_empty and is_empty(field_value):
            continue

        if field.is_group or field.is_blocks:
            lines += [heading(field.label, level), ""]
            lines.append(_render_structured(field, field_value, level, opts))
            if field.is_group:
                lines.append("")
            continue

        rendered = render_primitive(field_value, field, opts)
        if not rendered:
            continue
        if field.data_type == FieldType.FILE.value and _has_url(field_value):
            lines.append(rendered)
        elif field.is_json_rte:
            lines += [f"**{field.label}:**", "", rendered]
        else:
            lines.append(f"**{field.label}:** {rendered}")
        lines.append("")

    return "\n".join(lines).strip()


def repeatable_group_to_table(
    values: Any,
    schema: list[FieldDefinition],
    opts: RenderOptions,
) -> str:
    """One column per visible sub-field, one row per instance."""
    if not isinstance(values, (list, tuple)) or not values:
        return ""

    columns = [
        f for f in schema
        if not is_system_field(f.uid) and (opts.include_system_fields or not f.uid.startswith("_"))
    ]
    if not columns:
        return ""

    lines = [table_row([f.label for f in columns]), separator_row(len(columns))]
    for item in values:
        instance = _as_mapping(item)
        cells = []
        for field in columns:
            field_value = instance.get(field.uid)
            if is_empty(field_value):
                cells.append("")
            else:
                cells.append(escape_table_cell(render_primitive(field_value, field, opts)))
        lines.append(table_row(cells))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Modular blocks
# ---------------------------------------------------------------------------


def blocks_to_markdown(
    items: Any,
    definitions: list[BlockDefinition],
    level: int,
    opts: RenderOptions,
) -> str:
    """One section per recognised block, separated by horizontal rules."""
    if not isinstance(items, (list, tuple)) or not items:
        return ""

    lines: list[str] = []
    for item in items:
        match = match_block(item, definitions)
        if not isinstance(match, MatchedBlock):
            logger.debug("Skipping blocks item with unknown variant %r", match.key)
            continue
        lines += _render_block(match, level, opts)
        lines += ["---", ""]

    if len(lines) >= 2 and lines[-2] == "---":
        del lines[-2]
    return "\n".join(lines).strip()


def _render_block(block: MatchedBlock, level: int, opts: RenderOptions) -> list[str]:
    definition = block.definition
    values = block.fields
    title_field = definition.title_field()
    title_value = values.get(title_field.uid) if title_field else None

    if isinstance(title_value, str) and title_value:
        lines = [heading(f"{definition.label}: {title_value}", level), ""]
    else:
        lines = [heading(definition.label, level), ""]

    if block.key == "quote":
        quote_text = values.get("quote_text")
        attribution = values.get("attribution")
        if quote_text:
            lines.append(f'> *"{quote_text}"*')
            if attribution:
                lines += [">", f"> — **{attribution}**"]
            lines.append("")
        return lines

    if definition.is_reference:
        reference = _render_scalar(block.payload, FieldType.REFERENCE.value, opts)
        if reference:
            lines += [f"**{definition.label}:** {reference}", ""]
        return lines

    for field in definition.fields:
        if _hidden(field, opts):
            continue
        if title_field is not None and field.uid == title_field.uid:
            continue
        field_value = values.get(field.uid)
        if opts.skip_empty and is_empty(field_value):
            continue

        rendered = render_primitive(field_value, field, opts)
        if not rendered:
            continue
        if field.data_type == FieldType.FILE.value and _has_url(field_value):
            lines.append(rendered)
        elif field.is_json_rte:
            lines.append(blockquote(rendered))
        elif field.is_multiline or (
            field.data_type == FieldType.TEXT.value and len(rendered) > LONG_TEXT_THRESHOLD
        ):
            lines.append(f"> {rendered}")
        else:
            lines.append(f"**{field.label}:** {rendered}")
        lines.append("")

    return lines


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _hidden(field: FieldDefinition, opts: RenderOptions) -> bool:
    return is_system_field(field.uid) and not opts.include_system_fields


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}
