"""
Render Options
===============
Immutable configuration for ``render_entry``. A fresh value is built for
every call and passed down through the recursive renderer; nothing here is
process-wide state.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from ..markdown.formatting import format_date_human, format_number_with_commas


class RenderOptions(BaseModel):
    """Options for Markdown generation. Every field has a default."""
    model_config = ConfigDict(frozen=True)

    heading_level: int = Field(1, ge=1, le=6, description="Heading level of the entry title")
    format_date: Callable[[str], str] = Field(
        format_date_human, description="Formatter for isodate values"
    )
    format_number: Callable[[float], str] = Field(
        format_number_with_commas, description="Formatter for number values"
    )
    skip_empty: bool = Field(True, description="Skip null/blank/empty-list values")
    include_system_fields: bool = Field(False, description="Render CMS-managed fields")
    use_tables: bool = Field(True, description="Render simple groups as Field | Value tables")
    title_field: str = Field("title", description="Field rendered as the main heading")
    description_field: str = Field(
        "meta_description", description="Field rendered as a blockquote under the title"
    )

    def with_overrides(self, **changes: Any) -> "RenderOptions":
        """Return a validated copy with ``changes`` applied."""
        return RenderOptions(**{**self.__dict__, **changes})

    @property
    def section_level(self) -> int:
        """Heading level of top-level field sections."""
        return self.heading_level + 1
