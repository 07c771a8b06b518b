"""Calendar date and month-key helpers."""

from __future__ import annotations

from calendar import monthrange
import datetime as dt
import re

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(value: dt.date | dt.datetime | str) -> dt.date:
    """Normalize a date, datetime or ISO string to a date.

    ISO timestamps are truncated to their date part.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r}. Use YYYY-MM-DD format.") from exc


def month_of(value: dt.date | dt.datetime | str | None) -> str | None:
    """Return the YYYY-MM key of a date, or None for empty input."""
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    return f"{parsed.year:04d}-{parsed.month:02d}"


def parse_month(key: str) -> tuple[int, int]:
    """Split a YYYY-MM key into (year, month)."""
    match = MONTH_PATTERN.match(str(key or "").strip())
    if not match:
        raise ValueError(f"Invalid month: {key!r}. Use YYYY-MM format.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {key!r}. Month must be 01-12.")
    return year, month


def shift_month(key: str, offset: int) -> str:
    """Move a month key by offset calendar months."""
    year, month = parse_month(key)
    total_month = month - 1 + offset
    year += total_month // 12
    month = total_month % 12 + 1
    return f"{year:04d}-{month:02d}"


def month_window(anchor: str, size: int) -> list[str]:
    """Return the size consecutive months ending at anchor, oldest first."""
    if size < 1:
        raise ValueError("Window size must be at least 1")
    parse_month(anchor)
    return [shift_month(anchor, offset) for offset in range(-(size - 1), 1)]


def days_in_month(key: str) -> int:
    year, month = parse_month(key)
    return monthrange(year, month)[1]
