"""
contentstack-tools – Schema-driven validation and Markdown for Contentstack
============================================================================
Turns a Contentstack content type schema into:

- an entry validator (pydantic-backed, read or upsert mode, full or draft)
- a Markdown rendering of an entry, including JSON rich text

Quick Start::

    from contentstack_tools import ValidatorBuilder, render_entry, extract_missing_fields

    content_type = {
        "uid": "cricketer",
        "title": "Cricketer",
        "schema": [
            {"uid": "title", "data_type": "text", "display_name": "Name", "mandatory": True},
            {"uid": "born", "data_type": "isodate", "display_name": "Born"},
            {"uid": "test_runs", "data_type": "number", "display_name": "Test Runs"},
        ],
    }

    # Validate
    validator = ValidatorBuilder(content_type).build()
    result = validator.check({"born": "1973-04-24", "test_runs": 15921})
    print(result.ok, extract_missing_fields(result))   # False ['title']

    # Render
    print(render_entry(
        {"title": "Sachin Tendulkar", "born": "1973-04-24", "test_runs": 15921},
        content_type,
    ))
    # # Sachin Tendulkar
    #
    # **Born:** April 24, 1973
    #
    # **Test Runs:** 15,921
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Exceptions
from .exceptions import (
    ContentstackToolsError,
    ContentTypeError,
    EntryValidationError,
)

# Core models
from .models.content_type import (
    SYSTEM_FIELDS,
    BlockDefinition,
    ContentType,
    EnumChoice,
    FieldDefinition,
    FieldEnum,
    FieldMetadata,
    FieldType,
    TaxonomyConfig,
    is_system_field,
)
from .models.blocks import (
    BlockMatch,
    MatchedBlock,
    UnknownBlock,
    match_block,
    variant_key,
)
from .models.richtext import (
    Container,
    RichTextNode,
    TextLeaf,
    to_rich_text_node,
)
from .models.values import (
    Asset,
    IsoDate,
    ItemMetadata,
    Link,
    Reference,
    RichTextDocument,
    RichTextNodeShape,
    TaxonomyTerm,
)
from .models.options import RenderOptions

# Validation
from .validator.entry_validator import (
    EntryValidator,
    IssueKind,
    ValidationIssue,
    ValidationResult,
    extract_missing_fields,
    validate_draft,
    validate_entry,
)
from .builder.validator_builder import (
    ValidatorBuilder,
    ValidatorMode,
    build_validator,
    field_annotation,
)

# Markdown
from .markdown.formatting import format_date_human, format_number_with_commas
from .markdown.richtext import render_rich_text
from .markdown.entry import render_entry

__all__ = [
    # Exceptions
    "ContentstackToolsError",
    "ContentTypeError",
    "EntryValidationError",
    # Models
    "SYSTEM_FIELDS",
    "BlockDefinition",
    "ContentType",
    "EnumChoice",
    "FieldDefinition",
    "FieldEnum",
    "FieldMetadata",
    "FieldType",
    "TaxonomyConfig",
    "is_system_field",
    "BlockMatch",
    "MatchedBlock",
    "UnknownBlock",
    "match_block",
    "variant_key",
    "Container",
    "RichTextNode",
    "TextLeaf",
    "to_rich_text_node",
    "Asset",
    "IsoDate",
    "ItemMetadata",
    "Link",
    "Reference",
    "RichTextDocument",
    "RichTextNodeShape",
    "TaxonomyTerm",
    "RenderOptions",
    # Validation
    "EntryValidator",
    "IssueKind",
    "ValidationIssue",
    "ValidationResult",
    "extract_missing_fields",
    "validate_draft",
    "validate_entry",
    "ValidatorBuilder",
    "ValidatorMode",
    "build_validator",
    "field_annotation",
    # Markdown
    "format_date_human",
    "format_number_with_commas",
    "render_rich_text",
    "render_entry",
]
