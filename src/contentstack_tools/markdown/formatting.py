"""
Formatting Helpers
===================
Human-readable number/date formatting and small Markdown building blocks
shared by the rich text and entry renderers.
"""

from __future__ import annotations

import re
from typing import Any

from ..models.dates import parse_calendar_date

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_TRAILING_ZERO_RE = re.compile(r"\.0$")


def format_date_human(iso_date: str) -> str:
    """
    Format an ISO date string as ``Month D, YYYY``.

    "2012-03-16" and "2012-03-16T00:00:00.000Z" both give "March 16, 2012".
    Strings that are not ISO dates are returned unchanged.
    """
    if not isinstance(iso_date, str):
        return str(iso_date)
    day = parse_calendar_date(iso_date)
    if day is None:
        return iso_date
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def format_number_with_commas(num: float) -> str:
    """
    Format a number with thousands separators, abbreviating large values.

    1000 -> "1,000", 1500000 -> "1.5M", 40000000 -> "40M", 1000000000 -> "1B"
    """
    if num >= 1_000_000_000:
        return _TRAILING_ZERO_RE.sub("", f"{num / 1_000_000_000:.1f}") + "B"
    if num >= 1_000_000:
        return _TRAILING_ZERO_RE.sub("", f"{num / 1_000_000:.1f}") + "M"
    if isinstance(num, int) or float(num).is_integer():
        return f"{int(num):,}"
    return f"{num:,.3f}".rstrip("0").rstrip(".")


def is_empty(value: Any) -> bool:
    """None, a blank string, or an empty list."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple)) and len(value) == 0:
        return True
    return False


def heading(text: str, level: int) -> str:
    safe_level = min(max(level, 1), 6)
    return f"{'#' * safe_level} {text}"


def escape_table_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def table_row(cells: list[str]) -> str:
    return f"| {' | '.join(cells)} |"


def separator_row(count: int) -> str:
    return table_row(["---"] * count)


def blockquote(text: str) -> str:
    return "> " + "\n> ".join(text.strip().split("\n"))
