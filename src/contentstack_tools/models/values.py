"""
Entry Value Shapes
===================
Pydantic models for the structured values that appear inside entries:
assets, references, links, taxonomy terms and JSON RTE documents.

All object shapes are open records: declared keys are checked, unknown keys
are kept as-is and come back out of ``model_dump``.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictStr
from pydantic_core import PydanticCustomError

from .dates import is_iso_date

NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]


def check_iso_date(value: str) -> str:
    if not is_iso_date(value):
        raise PydanticCustomError("iso_date_format", "Invalid ISO date/datetime format")
    return value


IsoDate = Annotated[StrictStr, AfterValidator(check_iso_date)]
"""``YYYY-MM-DD`` or ``YYYY-MM-DDTHH:MM:SS[.mmm]Z?``."""


class Asset(BaseModel):
    """An asset object as returned by the Delivery/Management API."""
    model_config = ConfigDict(extra="allow")

    uid: NonEmptyStr
    url: StrictStr | None = None


class Reference(BaseModel):
    """A reference to another entry (also used for global field blocks)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uid: NonEmptyStr
    content_type_uid: StrictStr | None = Field(None, alias="_content_type_uid")


class Link(BaseModel):
    """A link field value."""
    model_config = ConfigDict(extra="allow")

    title: StrictStr | None = None
    href: StrictStr | None = None


class TaxonomyTerm(BaseModel):
    """One selected term of a taxonomy field."""
    model_config = ConfigDict(extra="ignore")

    taxonomy_uid: NonEmptyStr
    term_uid: NonEmptyStr


class ItemMetadata(BaseModel):
    """``_metadata`` carried by repeatable group instances and block items."""
    model_config = ConfigDict(extra="allow")

    uid: StrictStr | None = None


class RichTextNodeShape(BaseModel):
    """Shape check for a JSON RTE node, applied recursively to ``children``."""
    model_config = ConfigDict(extra="allow")

    type: StrictStr | None = None
    text: StrictStr | None = None
    children: list[RichTextNodeShape] | None = None
    attrs: dict[str, Any] | None = None
    uid: StrictStr | None = None
    bold: StrictBool | None = None
    italic: StrictBool | None = None
    underline: StrictBool | None = None
    strikethrough: StrictBool | None = None
    code: StrictBool | None = None
    superscript: StrictBool | None = None
    subscript: StrictBool | None = None


def check_document_root(value: str) -> str:
    if value != "doc":
        raise PydanticCustomError("rich_text_root", "Rich text document root must have type 'doc'")
    return value


class RichTextDocument(BaseModel):
    """Shape check for a JSON RTE document root."""
    model_config = ConfigDict(extra="allow")

    type: Annotated[StrictStr, AfterValidator(check_document_root)]
    uid: StrictStr | None = None
    attrs: dict[str, Any] | None = None
    children: list[RichTextNodeShape]


RichTextNodeShape.model_rebuild()
