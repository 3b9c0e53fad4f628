"""
Entry Validator
================
Checks entry data against a compiled content type validator and reports
every problem as a ``ValidationIssue`` with a dot/bracket path and a kind.

``check`` never raises for bad entry data; ``parse`` raises
``EntryValidationError`` instead of returning a failed result.

Example::

    from contentstack_tools import build_validator, extract_missing_fields

    result = build_validator(content_type).check(entry)
    if not result.ok:
        for issue in result.issues:
            print(f"[{issue.kind.value}] {issue.path}: {issue.message}")
        print("Still needed:", extract_missing_fields(result))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, ValidationError

from ..exceptions import EntryValidationError
from ..models.content_type import ContentType

if TYPE_CHECKING:
    from ..builder.validator_builder import ValidatorMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class IssueKind(str, Enum):
    TYPE_MISMATCH = "type_mismatch"
    MISSING_REQUIRED = "missing_required"
    PATTERN_MISMATCH = "pattern_mismatch"
    RANGE_VIOLATION = "range_violation"
    NO_MATCHING_VARIANT = "no_matching_variant"
    INVALID_CHOICE = "invalid_choice"


# pydantic error type -> issue kind; anything else is a type mismatch.
_KIND_BY_ERROR_TYPE: dict[str, IssueKind] = {
    "missing": IssueKind.MISSING_REQUIRED,
    "string_pattern_mismatch": IssueKind.PATTERN_MISMATCH,
    "iso_date_format": IssueKind.PATTERN_MISMATCH,
    "date_out_of_range": IssueKind.RANGE_VIOLATION,
    "too_long": IssueKind.RANGE_VIOLATION,
    "too_short": IssueKind.RANGE_VIOLATION,
    "literal_error": IssueKind.INVALID_CHOICE,
    "no_matching_variant": IssueKind.NO_MATCHING_VARIANT,
}


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    kind: IssueKind
    message: str
    loc: tuple[str | int, ...] = ()

    def __str__(self) -> str:
        return f"{self.path or '<entry>'}: [{self.kind.value}] {self.message}"


@dataclass
class ValidationResult:
    """Outcome of checking one entry. ``value`` is set only when ``ok``."""
    ok: bool
    value: dict[str, Any] | None = None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def missing_fields(self) -> list[str]:
        return extract_missing_fields(self.issues)

    def of_kind(self, kind: IssueKind | str) -> list[ValidationIssue]:
        kind = IssueKind(kind)
        return [i for i in self.issues if i.kind is kind]

    def __str__(self) -> str:
        status = "PASS" if self.ok else "FAIL"
        return f"[{status}] {len(self.issues)} issue(s), {len(self.missing_fields)} missing field(s)"


def format_path(loc: Sequence[str | int]) -> str:
    """``("members", 0, "name")`` -> ``"members[0].name"``; the root is ``""``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """Translate a pydantic ``ValidationError`` into ordered issues."""
    issues = []
    for detail in error.errors(include_url=False):
        loc = tuple(detail["loc"])
        kind = _KIND_BY_ERROR_TYPE.get(detail["type"], IssueKind.TYPE_MISMATCH)
        issues.append(ValidationIssue(format_path(loc), kind, detail["msg"], loc))
    return issues


def extract_missing_fields(
    result_or_issues: Union[ValidationResult, Iterable[ValidationIssue]],
) -> list[str]:
    """
    Paths of required fields that were absent, in encounter order.

    Wrong-typed values are not reported; only issues of kind
    ``missing_required``.
    """
    issues = result_or_issues.issues if isinstance(result_or_issues, ValidationResult) else result_or_issues
    return [i.path for i in issues if i.kind is IssueKind.MISSING_REQUIRED]


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class EntryValidator:
    """
    A compiled validator for one content type.

    Built by ``build_validator`` / ``ValidatorBuilder``; reusable and safe
    to share between threads.
    """

    def __init__(
        self,
        model: type[BaseModel],
        content_type: ContentType,
        *,
        mode: ValidatorMode,
        draft: bool = False,
    ) -> None:
        self._model = model
        self.content_type = content_type
        self.mode = mode
        self.draft = draft

    @property
    def model(self) -> type[BaseModel]:
        """The underlying pydantic model (aliases are the field uids)."""
        return self._model

    def check(self, entry: Any) -> ValidationResult:
        try:
            instance = self._model.model_validate(entry)
        except ValidationError as e:
            issues = issues_from_error(e)
            logger.debug("Entry failed %s validation with %d issue(s)", self.content_type.uid, len(issues))
            return ValidationResult(ok=False, issues=issues)
        return ValidationResult(ok=True, value=instance.model_dump(by_alias=True, exclude_unset=True))

    safe_parse = check

    def parse(self, entry: Any) -> dict[str, Any]:
        """Return the validated value or raise ``EntryValidationError``."""
        result = self.check(entry)
        if not result.ok:
            raise EntryValidationError(result.issues)
        return result.value

    def partial(self) -> "EntryValidator":
        """The draft variant of this validator: every field optional, recursively."""
        if self.draft:
            return self
        from ..builder.validator_builder import build_validator

        return build_validator(self.content_type, self.mode, draft=True)

    def check_batch(self, entries: Iterable[Any]) -> list[ValidationResult]:
        return [self.check(entry) for entry in entries]

    def __repr__(self) -> str:
        return (
            f"EntryValidator(content_type={self.content_type.uid!r}, "
            f"mode={self.mode.value}, draft={self.draft})"
        )


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


def validate_entry(
    content_type: ContentType | Mapping[str, Any],
    entry: Any,
    mode: ValidatorMode | str = "read",
) -> ValidationResult:
    """Build a full validator for ``content_type`` and check ``entry``."""
    from ..builder.validator_builder import build_validator

    return build_validator(content_type, mode).check(entry)


def validate_draft(
    content_type: ContentType | Mapping[str, Any],
    entry: Any,
    mode: ValidatorMode | str = "read",
) -> ValidationResult:
    """Like ``validate_entry`` but with every field optional."""
    from ..builder.validator_builder import build_validator

    return build_validator(content_type, mode, draft=True).check(entry)
