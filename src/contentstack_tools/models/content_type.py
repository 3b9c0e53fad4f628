"""
Content Type Schema – Core Model
=================================
Python representation of a Contentstack content type schema as returned by
the Content Management API.

A content type is an ordered tree of field definitions. Both the validator
builder and the Markdown renderer dispatch on ``FieldDefinition.data_type``
using the same nesting rules:

- ``group``        one nested object (or a list of them when ``multiple``)
- ``blocks``       a list of single-key tagged objects, one key per variant
- anything else    a primitive leaf, scalar or list depending on ``multiple``

All models are open records: attributes the CMS adds that are not modelled
here (``unique``, ``non_localizable``, ``extensions`` ...) are kept as extras.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ContentTypeError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """
    Known ``data_type`` values.
    The set is open-ended: unknown types are accepted on ``FieldDefinition``
    and treated permissively by the validator and renderer.
    """
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ISODATE = "isodate"
    FILE = "file"
    LINK = "link"
    REFERENCE = "reference"
    GLOBAL_FIELD = "global_field"
    GROUP = "group"
    BLOCKS = "blocks"
    JSON = "json"
    TAXONOMY = "taxonomy"


# Fields Contentstack adds to every entry. Hidden from rendered output unless
# explicitly requested; validation does not special-case them.
SYSTEM_FIELDS: frozenset[str] = frozenset({
    "uid",
    "locale",
    "created_at",
    "updated_at",
    "created_by",
    "updated_by",
    "ACL",
    "_version",
    "_in_progress",
    "_embedded_items",
    "publish_details",
    "_metadata",
    "tags",
})


def is_system_field(uid: str) -> bool:
    return uid in SYSTEM_FIELDS


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------

class EnumChoice(BaseModel):
    """A single choice of a select field."""
    model_config = ConfigDict(frozen=True, extra="allow")

    value: Any = Field(..., description="The value stored in the entry")
    key: str | None = Field(None, description="Optional display key")


class FieldEnum(BaseModel):
    """Enum configuration of a select field."""
    model_config = ConfigDict(frozen=True, extra="allow")

    choices: list[EnumChoice] = Field(default_factory=list)
    advanced: bool = False

    @field_validator("choices", mode="before")
    @classmethod
    def null_choices_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("advanced", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class FieldMetadata(BaseModel):
    """Display settings, editor flavour and hints attached to a field."""
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    description: str | None = None
    instruction: str | None = None
    markdown: bool = False
    allow_rich_text: bool = Field(False, description="HTML rich text editor")
    allow_json_rte: bool = Field(False, description="JSON rich text editor")
    multiline: bool = False
    rich_text_type: str | None = Field(None, description="basic | advanced | custom")
    default_value: Any = None
    is_default: bool = Field(False, alias="_default", description="Default/system field marker")

    @field_validator("markdown", "allow_rich_text", "allow_json_rte", "multiline", "is_default", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class TaxonomyConfig(BaseModel):
    """Taxonomy binding of a taxonomy field."""
    model_config = ConfigDict(frozen=True, extra="allow")

    taxonomy_uid: str
    max_terms: int | None = None
    mandatory: bool = False
    non_localizable: bool = False

    @field_validator("mandatory", "non_localizable", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v


# ---------------------------------------------------------------------------
# Field and block definitions
# ---------------------------------------------------------------------------

class BlockDefinition(BaseModel):
    """
    One variant of a ``blocks`` field.

    Either carries an inline ``schema`` or points at a shared global field via
    ``reference_to``; never both.
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    uid: str = Field(..., description="Variant tag used as the single key of each item")
    title: str | None = None
    reference_to: str | None = Field(None, description="Global field uid for reference blocks")
    fields: list[FieldDefinition] = Field(default_factory=list, alias="schema")

    @field_validator("fields", mode="before")
    @classmethod
    def null_schema_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def label(self) -> str:
        return self.title or self.uid

    @property
    def is_reference(self) -> bool:
        return bool(self.reference_to)

    def title_field(self) -> FieldDefinition | None:
        """First mandatory text field; its value names the block instance."""
        for field in self.fields:
            if field.data_type == FieldType.TEXT.value and field.mandatory:
                return field
        return None


class FieldDefinition(BaseModel):
    """A node of the content type schema tree."""
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    uid: str = Field(..., description="Key of the field within its parent")
    # Absent or unknown types are validated and rendered permissively.
    data_type: str | None = Field(None, description="text | number | boolean | isodate | file | link | ...")
    display_name: str | None = None
    mandatory: bool = False
    multiple: bool = False
    unique: bool = Field(False, description="Carried for completeness; never enforced")
    enum: FieldEnum | None = None
    fields: list[FieldDefinition] | None = Field(None, alias="schema")
    blocks: list[BlockDefinition] | None = None
    field_metadata: FieldMetadata = Field(default_factory=FieldMetadata)
    format: str | None = Field(None, description="Regex constraint for text fields")
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    max_instance: int | None = Field(None, description="Cap on repeatable group length")
    reference_to: str | list[str] | None = None
    taxonomies: list[TaxonomyConfig] = Field(default_factory=list)

    @field_validator("mandatory", "multiple", "unique", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("field_metadata", mode="before")
    @classmethod
    def null_metadata_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("taxonomies", mode="before")
    @classmethod
    def null_taxonomies_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def kind(self) -> FieldType | None:
        """The data type as a ``FieldType``, or None for unknown types."""
        try:
            return FieldType(self.data_type)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.display_name or self.uid

    @property
    def description_text(self) -> str:
        return self.field_metadata.description or self.display_name or self.uid

    @property
    def is_rich_text(self) -> bool:
        return self.data_type == FieldType.TEXT.value and self.field_metadata.allow_rich_text

    @property
    def is_json_rte(self) -> bool:
        return self.data_type == FieldType.JSON.value and self.field_metadata.allow_json_rte

    @property
    def is_multiline(self) -> bool:
        return self.field_metadata.multiline

    @property
    def is_group(self) -> bool:
        return self.data_type == FieldType.GROUP.value

    @property
    def is_repeatable_group(self) -> bool:
        return self.is_group and self.multiple

    @property
    def is_blocks(self) -> bool:
        return self.data_type == FieldType.BLOCKS.value

    @property
    def children(self) -> list[FieldDefinition]:
        return self.fields or []

    @property
    def block_definitions(self) -> list[BlockDefinition]:
        return self.blocks or []

    def has_nested_groups(self) -> bool:
        """True if any child is a group or blocks field (complex structure)."""
        return any(f.is_group or f.is_blocks for f in self.children)

    def enum_values(self) -> list[Any]:
        if self.enum is None:
            return []
        return [c.value for c in self.enum.choices]

    def __repr__(self) -> str:
        flags = "".join([
            "!" if self.mandatory else "",
            "[]" if self.multiple else "",
        ])
        return f"FieldDefinition({self.uid!r}: {self.data_type}{flags})"


# ---------------------------------------------------------------------------
# Content type
# ---------------------------------------------------------------------------

class ContentType(BaseModel):
    """
    Root of a content type schema.

    Required: ``schema`` (the ordered top-level field list).
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    uid: str | None = None
    title: str | None = None
    fields: list[FieldDefinition] = Field(..., alias="schema")

    @classmethod
    def coerce(cls, content_type: ContentType | Mapping[str, Any]) -> ContentType:
        """
        Accept a ``ContentType`` or a raw API mapping.

        Raises ``ContentTypeError`` if the mapping has no field list or the
        field definitions are malformed.
        """
        if isinstance(content_type, ContentType):
            return content_type
        if not isinstance(content_type, Mapping) or content_type.get("schema") is None:
            raise ContentTypeError("Invalid Contentstack content type schema: missing 'schema' field list")
        try:
            return cls.model_validate(dict(content_type))
        except ValidationError as e:
            raise ContentTypeError(f"Invalid Contentstack content type schema: {e}") from e

    def field(self, uid: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.uid == uid:
                return f
        return None

    def __repr__(self) -> str:
        return f"ContentType(uid={self.uid!r}, fields={len(self.fields)})"


FieldDefinition.model_rebuild()
BlockDefinition.model_rebuild()
