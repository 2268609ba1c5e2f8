"""Date normalization for price series and purchase dates.

Accepted text forms:
    YYYY-MM-DD   (ISO, as produced by HTML date inputs)
    MM/DD/YYYY   (US, as used by the bundled price files)
    MM/DD/YY     (two-digit year, read as 20YY)

Month and day may be written with or without a leading zero.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from cryptocalc.errors import InvalidDate
from cryptocalc.models import Granularity

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_US_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")


def parse_date(value: object) -> date:
    """Parse a date object or supported date string into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(f"Invalid date: {value!r}")

    text = value.strip()
    if m := _ISO_RE.match(text):
        year, month, day = int(m[1]), int(m[2]), int(m[3])
    elif m := _US_RE.match(text):
        month, day = int(m[1]), int(m[2])
        year = int(m[3]) if len(m[3]) == 4 else 2000 + int(m[3])
    else:
        raise InvalidDate(
            f"Invalid date format: {value!r}. Use YYYY-MM-DD or MM/DD/YYYY."
        )

    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(f"Invalid date: {value!r} ({exc})") from exc


def canonical_key(
    d: date, granularity: Granularity = Granularity.DAILY
) -> tuple[int, int, int]:
    """(year, month, day) comparison key for a date at the given granularity."""
    if granularity is Granularity.MONTHLY:
        return (d.year, d.month, 1)
    return (d.year, d.month, d.day)


def normalize(value: object, granularity: Granularity = Granularity.DAILY) -> tuple[int, int, int]:
    return canonical_key(parse_date(value), granularity)
