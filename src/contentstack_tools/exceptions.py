"""Custom exceptions for contentstack-tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validator.entry_validator import ValidationIssue


class ContentstackToolsError(Exception):
    """Base exception for contentstack-tools errors."""


class ContentTypeError(ContentstackToolsError, ValueError):
    """Raised when a content type definition is malformed (e.g. no field list)."""


class EntryValidationError(ContentstackToolsError):
    """
    Raised by ``EntryValidator.parse`` when an entry does not validate.

    ``EntryValidator.check`` never raises; it returns the same issues inside
    a ``ValidationResult``.
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        summary = "; ".join(f"{i.path or '<entry>'}: {i.kind.value}" for i in issues[:5])
        if len(issues) > 5:
            summary += f" (+{len(issues) - 5} more)"
        super().__init__(f"Entry failed validation with {len(issues)} issue(s): {summary}")
