from __future__ import annotations

import re
from datetime import date, datetime

from django.utils.dateparse import parse_datetime, parse_time

from imports.exceptions import RowValidationError

LIST_DELIMITER = ";"

_DMY_DASH = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_DMY_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_INT = re.compile(r"^[+-]?\d+$")
# Signed 64-bit, the widest integer column any backend stores
INT_MIN, INT_MAX = -(2 ** 63), 2 ** 63 - 1
_TIME = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")

# Tried only after the three literal formats above.
FALLBACK_DATE_FORMATS = (
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)

DATE_FORMAT_HINT = "Use DD-MM-YYYY, DD/MM/YYYY, or YYYY-MM-DD"


def clean_str(v) -> str | None:
    """Trim a cell; empty cells are treated as absent."""
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def parse_int(v) -> int | None:
    s = clean_str(v)
    if s is None:
        return None
    if not _INT.match(s):
        raise ValueError(f"not an integer: {s!r}")
    value = int(s)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"integer out of range: {s!r}")
    return value


def parse_bool(v) -> bool | None:
    s = clean_str(v)
    if s is None:
        return None
    s = s.lower()
    if s == "true":
        return True
    if s == "false":
        return False
    raise ValueError(f"not a boolean: {s!r}")


def split_list(v) -> list[str]:
    s = clean_str(v)
    if s is None:
        return []
    return [part.strip() for part in s.split(LIST_DELIMITER) if part.strip()]


def normalize_date(v) -> str | None:
    """
    Normalize a date cell to YYYY-MM-DD.

    Formats are tried in order: DD-MM-YYYY, DD/MM/YYYY, YYYY-MM-DD, then a
    handful of common spellings. Returns None when nothing matches (or the
    day does not exist), which callers turn into a row error.
    """
    s = clean_str(v)
    if s is None:
        return None

    for pattern, day_first in ((_DMY_DASH, True), (_DMY_SLASH, True), (_YMD, False)):
        m = pattern.match(s)
        if not m:
            continue
        if day_first:
            day, month, year = m.groups()
        else:
            year, month, day = m.groups()
        try:
            return date(int(year), int(month), int(day)).isoformat()
        except ValueError:
            return None

    return _parse_generic_date(s)


def _parse_generic_date(s: str) -> str | None:
    try:
        dt = parse_datetime(s)
    except ValueError:
        dt = None
    if dt is not None:
        return dt.date().isoformat()

    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def normalize_time(v) -> str | None:
    """HH:MM or HH:MM:SS -> HH:MM:SS, None if invalid."""
    s = clean_str(v)
    if s is None or not _TIME.match(s):
        return None
    try:
        t = parse_time(s if s.count(":") == 2 else f"{s}:00")
    except ValueError:
        return None
    if t is None:
        return None
    return t.strftime("%H:%M:%S")


def normalize_value(column, raw):
    """
    Coerce one resolved cell according to the column's kind.

    Returns the Python value to store (None when the cell is absent) or
    raises RowValidationError with an operator-facing message.
    """
    kind = column.kind
    s = clean_str(raw)

    if kind == "list":
        return split_list(s)

    if s is None:
        return None

    if kind == "str":
        if column.choices:
            value = s.lower()
            if value not in column.choices:
                raise RowValidationError(
                    f"Invalid {column.header} '{s}'. Expected one of: {', '.join(column.choices)}"
                )
            return value
        return s

    if kind == "int":
        try:
            return parse_int(s)
        except ValueError:
            raise RowValidationError(f"Invalid number '{s}' for {column.header}")

    if kind == "bool":
        try:
            return parse_bool(s)
        except ValueError:
            raise RowValidationError(f"Invalid value '{s}' for {column.header} (expected true or false)")

    if kind == "date":
        normalized = normalize_date(s)
        if normalized is None:
            raise RowValidationError(f"Invalid {column.header.lower()} format '{s}'. {DATE_FORMAT_HINT}")
        return date.fromisoformat(normalized)

    if kind == "time":
        normalized = normalize_time(s)
        if normalized is None:
            raise RowValidationError(f"Invalid {column.header.lower()} format '{s}'. Use HH:MM or HH:MM:SS")
        return datetime.strptime(normalized, "%H:%M:%S").time()

    raise ValueError(f"Unknown column kind: {kind}")
