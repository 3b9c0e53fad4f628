"""
Validator Builder
==================
Compiles a content type schema into a pydantic model and wraps it in an
``EntryValidator``.

Every schema field becomes one model field whose alias is the field ``uid``
(the Python attribute name is positional, so uids such as ``_metadata`` or
``schema`` never clash with ``BaseModel`` attributes). Groups and block
payloads compile to nested models; blocks compile to a list of block item
models that accept exactly one declared variant tag.

Example::

    from contentstack_tools import ValidatorBuilder

    validator = ValidatorBuilder(content_type).upsert().draft().build()
    result = validator.check({"title": "Work in progress"})
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    StrictBool,
    StrictStr,
    create_model,
    model_validator,
)
from pydantic.fields import FieldInfo
from pydantic_core import PydanticCustomError

from ..exceptions import ContentTypeError
from ..models.blocks import variant_key
from ..models.content_type import BlockDefinition, ContentType, FieldDefinition, FieldType
from ..models.dates import ISO_TIMESTAMP_RE, parse_instant
from ..models.values import (
    Asset,
    IsoDate,
    ItemMetadata,
    Link,
    NonEmptyStr,
    Reference,
    RichTextDocument,
    TaxonomyTerm,
)
from ..validator.entry_validator import EntryValidator

logger = logging.getLogger(__name__)

# Deeper schemas are rejected as malformed.
MAX_SCHEMA_DEPTH = 64

_ENTRY_CONFIG = ConfigDict(extra="ignore")
_RECORD_CONFIG = ConfigDict(extra="allow")


class ValidatorMode(str, Enum):
    """
    ``read`` validates entries as returned by the Delivery API (assets are
    objects); ``upsert`` validates payloads sent to the Management API
    (assets are referenced by uid).
    """
    READ = "read"
    UPSERT = "upsert"


# ---------------------------------------------------------------------------
# Leaf checks
# ---------------------------------------------------------------------------


def check_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Input should be a number")
    return value


Number = Annotated[Any, PlainValidator(check_number)]


def _pattern_check(pattern: re.Pattern[str]) -> AfterValidator:
    def check(value: str) -> str:
        if pattern.search(value) is None:
            raise PydanticCustomError(
                "string_pattern_mismatch",
                "String should match pattern '{pattern}'",
                {"pattern": pattern.pattern},
            )
        return value

    return AfterValidator(check)


def _choice_check(choices: list[Any]) -> AfterValidator:
    def check(value: Any) -> Any:
        for choice in choices:
            if value == choice and isinstance(value, bool) == isinstance(choice, bool):
                return value
        raise PydanticCustomError(
            "literal_error",
            "Input should be one of {expected}",
            {"expected": ", ".join(repr(c) for c in choices)},
        )

    return AfterValidator(check)


# JavaScript named groups and backreferences, as written in Contentstack field formats.
_JS_NAMED_GROUP_RE = re.compile(r"\(\?<(?=[A-Za-z_])")
_JS_BACKREF_RE = re.compile(r"\\k<(\w+)>")


def compile_format(pattern: str) -> re.Pattern[str]:
    """Compile a field ``format`` (a JavaScript regex) with ``re``."""
    pattern = _JS_NAMED_GROUP_RE.sub("(?P<", pattern)
    return re.compile(_JS_BACKREF_RE.sub(r"(?P=\1)", pattern))


def _date_range_check(start: datetime | None, end: datetime | None) -> AfterValidator:
    def check(value: str) -> str:
        instant = parse_instant(value) if ISO_TIMESTAMP_RE.match(value) else None
        if instant is None:
            raise PydanticCustomError(
                "iso_date_format",
                "Expected a UTC timestamp such as 2024-01-31T00:00:00.000Z",
            )
        if (start is not None and instant < start) or (end is not None and instant > end):
            raise PydanticCustomError("date_out_of_range", "Date out of allowed range")
        return value

    return AfterValidator(check)


def _parse_bound(field: FieldDefinition, raw: str | None) -> datetime | None:
    if not raw:
        return None
    bound = parse_instant(raw)
    if bound is None:
        logger.warning("Ignoring unparseable date bound %r on field %r", raw, field.uid)
    return bound


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class _BlockItemBase(BaseModel):
    """An item of a blocks field: ``{<variant uid>: payload, "_metadata": ...}``."""
    model_config = _RECORD_CONFIG

    @model_validator(mode="before")
    @classmethod
    def single_declared_variant(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        key = variant_key(data)
        declared = {info.alias for info in cls.model_fields.values()}
        if key not in declared:
            raise PydanticCustomError(
                "no_matching_variant",
                "Block item {key} matches none of the declared block variants",
                {"key": repr(key)},
            )
        return data


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


def _model_name(prefix: str, uid: str | None) -> str:
    return f"{prefix}_{re.sub(r'[^0-9A-Za-z_]', '_', uid or 'anonymous')}"


class _SchemaCompiler:
    """Recursive field tree → pydantic annotation transform for one mode."""

    def __init__(self, mode: ValidatorMode, draft: bool) -> None:
        self.mode = mode
        self.draft = draft

    # -- entry -------------------------------------------------------------

    def entry_model(self, content_type: ContentType) -> type[BaseModel]:
        return self._record_model(
            _model_name("Entry", content_type.uid),
            content_type.fields,
            config=_ENTRY_CONFIG,
            depth=0,
        )

    # -- fields ------------------------------------------------------------

    def field(self, field: FieldDefinition, depth: int) -> tuple[Any, FieldInfo]:
        if depth > MAX_SCHEMA_DEPTH:
            raise ContentTypeError(f"Content type schema nests deeper than {MAX_SCHEMA_DEPTH} levels")

        annotation = self._base(field, depth)
        # Taxonomy values are already term lists; Contentstack marks them multiple.
        if field.multiple and field.data_type not in (
            FieldType.GROUP.value,
            FieldType.BLOCKS.value,
            FieldType.TAXONOMY.value,
        ):
            annotation = list[annotation]

        description = field.description_text
        if not field.mandatory:
            return Optional[annotation], Field(None, alias=field.uid, description=description)
        if self.draft:
            # Absent is fine, an explicit null is still checked against the type.
            return annotation, Field(None, alias=field.uid, description=description)
        return annotation, Field(..., alias=field.uid, description=description)

    def _base(self, field: FieldDefinition, depth: int) -> Any:
        kind = field.kind

        if kind is FieldType.TEXT:
            return self._text(field)
        if kind is FieldType.NUMBER:
            return Number
        if kind is FieldType.BOOLEAN:
            return StrictBool
        if kind is FieldType.ISODATE:
            return self._isodate(field)
        if kind is FieldType.FILE:
            return NonEmptyStr if self.mode is ValidatorMode.UPSERT else Asset
        if kind is FieldType.LINK:
            return Link
        if kind in (FieldType.REFERENCE, FieldType.GLOBAL_FIELD):
            return Reference
        if kind is FieldType.TAXONOMY:
            return list[TaxonomyTerm]
        if kind is FieldType.JSON:
            return RichTextDocument if field.is_json_rte else Any
        if kind is FieldType.GROUP:
            return self._group(field, depth)
        if kind is FieldType.BLOCKS:
            return self._blocks(field, depth)

        logger.debug("Field %r has unknown data_type %r; accepting any value", field.uid, field.data_type)
        return Any

    def _text(self, field: FieldDefinition) -> Any:
        if field.is_rich_text:
            return StrictStr

        choices = field.enum_values()
        if choices:
            return Annotated[Any, _choice_check(choices)]

        if field.format:
            try:
                pattern = compile_format(field.format)
            except re.error as e:
                logger.warning("Ignoring invalid format %r on field %r: %s", field.format, field.uid, e)
                return StrictStr
            return Annotated[StrictStr, _pattern_check(pattern)]

        return StrictStr

    def _isodate(self, field: FieldDefinition) -> Any:
        if not (field.start_date or field.end_date):
            return IsoDate
        start = _parse_bound(field, field.start_date)
        end = _parse_bound(field, field.end_date)
        return Annotated[StrictStr, _date_range_check(start, end)]

    def _group(self, field: FieldDefinition, depth: int) -> Any:
        model = self._record_model(
            _model_name("Group", field.uid),
            field.children,
            config=_RECORD_CONFIG,
            depth=depth + 1,
            with_metadata=field.multiple,
        )
        if not field.multiple:
            return model
        if field.max_instance and field.max_instance > 0:
            return Annotated[list[model], Field(max_length=field.max_instance)]
        return list[model]

    def _blocks(self, field: FieldDefinition, depth: int) -> Any:
        definitions = field.block_definitions
        if not definitions:
            return list[Any]

        variants: dict[str, Any] = {}
        for i, block in enumerate(definitions):
            payload = self._block_payload(field, block, depth + 1)
            variants[f"v{i}"] = (payload, Field(None, alias=block.uid))

        item = create_model(
            _model_name("Blocks", field.uid),
            __base__=_BlockItemBase,
            **variants,
        )
        return list[item]

    def _block_payload(self, field: FieldDefinition, block: BlockDefinition, depth: int) -> Any:
        if block.is_reference:
            return Reference
        return self._record_model(
            _model_name(f"Block_{field.uid}", block.uid),
            block.fields,
            config=_RECORD_CONFIG,
            depth=depth,
            with_metadata=True,
        )

    # -- records -----------------------------------------------------------

    def _record_model(
        self,
        name: str,
        fields: list[FieldDefinition],
        *,
        config: ConfigDict,
        depth: int,
        with_metadata: bool = False,
    ) -> type[BaseModel]:
        definitions: dict[str, Any] = {}
        for i, child in enumerate(fields):
            definitions[f"f{i}"] = self.field(child, depth)

        if with_metadata and not any(child.uid == "_metadata" for child in fields):
            definitions["item_metadata"] = (Optional[ItemMetadata], Field(None, alias="_metadata"))

        return create_model(name, __config__=config, **definitions)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def field_annotation(
    field: FieldDefinition | Mapping[str, Any],
    mode: ValidatorMode | str = ValidatorMode.READ,
    *,
    draft: bool = False,
) -> tuple[Any, FieldInfo]:
    """
    Return the ``(annotation, FieldInfo)`` pair a single field compiles to.

    Useful for embedding one content type field in a hand-written model::

        annotation, info = field_annotation(ct.field("title"))
        Model = create_model("Model", title=(annotation, info))
    """
    if not isinstance(field, FieldDefinition):
        field = FieldDefinition.model_validate(dict(field))
    return _SchemaCompiler(ValidatorMode(mode), draft).field(field, depth=0)


def build_validator(
    content_type: ContentType | Mapping[str, Any],
    mode: ValidatorMode | str = ValidatorMode.READ,
    *,
    draft: bool = False,
) -> EntryValidator:
    """
    Compile ``content_type`` into an ``EntryValidator``.

    Raises ``ContentTypeError`` if the content type has no field list.
    """
    ct = ContentType.coerce(content_type)
    mode = ValidatorMode(mode)
    model = _SchemaCompiler(mode, draft).entry_model(ct)
    logger.debug(
        "Compiled validator for %r (%d fields, mode=%s, draft=%s)",
        ct.uid, len(ct.fields), mode.value, draft,
    )
    return EntryValidator(model, ct, mode=mode, draft=draft)


class ValidatorBuilder:
    """
    Fluent builder for ``EntryValidator`` objects.

    Defaults to read mode, full strictness.
    """

    def __init__(self, content_type: ContentType | Mapping[str, Any]) -> None:
        self._content_type = ContentType.coerce(content_type)
        self._mode = ValidatorMode.READ
        self._draft = False

    def read(self) -> "ValidatorBuilder":
        """Validate entries as read from the Delivery API."""
        self._mode = ValidatorMode.READ
        return self

    def upsert(self) -> "ValidatorBuilder":
        """Validate payloads for create/update calls (file fields are asset uids)."""
        self._mode = ValidatorMode.UPSERT
        return self

    def with_mode(self, mode: ValidatorMode | str) -> "ValidatorBuilder":
        self._mode = ValidatorMode(mode)
        return self

    def draft(self, enabled: bool = True) -> "ValidatorBuilder":
        """Make every field optional, recursively."""
        self._draft = enabled
        return self

    def build(self) -> EntryValidator:
        return build_validator(self._content_type, self._mode, draft=self._draft)
