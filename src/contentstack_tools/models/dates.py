"""ISO 8601 date helpers shared by the validator (date bounds) and the renderer."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

# Accepted by plain isodate fields: a calendar date or a UTC-ish timestamp.
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?$")

# Required when a field declares startDate/endDate.
ISO_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")

_GENERIC_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:[T ](?P<time>\d{2}:\d{2}(?::\d{2})?)(?P<fraction>\.\d+)?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?)?$"
)


def is_iso_date(value: str) -> bool:
    return bool(ISO_DATE_RE.match(value) or ISO_DATETIME_RE.match(value))


def parse_calendar_date(value: str) -> date | None:
    """Calendar date as written in an ISO date/datetime string, or None."""
    m = _GENERIC_RE.match(value.strip())
    if not m:
        return None
    try:
        return date.fromisoformat(m.group("date"))
    except ValueError:
        return None


def parse_instant(value: str) -> datetime | None:
    """
    Parse an ISO date or datetime to an aware UTC datetime.

    Date-only strings and timestamps without an offset are read as UTC.
    Returns None when the string is not a valid ISO date.
    """
    m = _GENERIC_RE.match(value.strip())
    if not m:
        return None
    try:
        day = date.fromisoformat(m.group("date"))
        moment = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        if m.group("time"):
            parts = [int(p) for p in m.group("time").split(":")]
            hour, minute = parts[0], parts[1]
            second = parts[2] if len(parts) > 2 else 0
            moment = moment.replace(hour=hour, minute=minute, second=second)
        if m.group("fraction"):
            digits = m.group("fraction")[1:7].ljust(6, "0")
            moment = moment.replace(microsecond=int(digits))
    except ValueError:
        return None

    tz = m.group("tz")
    if tz and tz != "Z":
        sign = 1 if tz[0] == "+" else -1
        hh, mm = int(tz[1:3]), int(tz[-2:])
        moment -= sign * timedelta(hours=hh, minutes=mm)
    return moment
