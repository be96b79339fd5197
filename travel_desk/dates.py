# dates.py
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional, Union

import dateparser

DateInput = Union[str, date, datetime, None]

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_ISO_DATE_TIME = re.compile(r"\d{4}-\d{2}-\d{2}T")
_PT_BR_DATE = re.compile(r"(\d{2})/(\d{2})/(\d{4})")


def to_api_date(value: DateInput) -> Optional[str]:
    """Normalize any accepted date input (date, ISO, dd/MM/yyyy) to YYYY-MM-DD.

    Returns None for empty, unparseable or non-date input.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    if _ISO_DATE.fullmatch(trimmed):
        return trimmed

    if _ISO_DATE_TIME.match(trimmed):
        return trimmed[:10]

    pt_match = _PT_BR_DATE.fullmatch(trimmed)
    if pt_match:
        day, month, year = pt_match.groups()
        return f"{year}-{month}-{day}"

    parsed = dateparser.parse(
        trimmed,
        languages=["pt", "en"],
        settings={"DATE_ORDER": "DMY"},
    )
    if parsed is None:
        return None
    return to_api_date(parsed)


def format_date_for_display(value: DateInput) -> str:
    """Format any accepted date input as dd/MM/yyyy (empty string if invalid)."""
    api_date = to_api_date(value)
    if not api_date:
        return ""

    year, month, day = api_date.split("-")
    return f"{day}/{month}/{year}"
