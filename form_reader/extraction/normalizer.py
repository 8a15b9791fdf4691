"""Field-specific canonicalization of captured OCR values.

Every normalizer is total: any string input yields a string, and none
of them raise. Empty input stays empty.
"""

import re
from datetime import datetime

from form_reader.utils.logger import get_logger

logger = get_logger(__name__)


# Tried in order; month-first wins for ambiguous numeric dates.
DATE_FORMATS: list[str] = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m.%d.%Y",
    "%m/%d/%y",
    "%m-%d-%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%b. %d, %Y",
    "%b. %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B, %Y",
    "%d %b, %Y",
    "%d-%b-%Y",
    "%d-%B-%Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%B %Y",
    "%b %Y",
    "%B, %Y",
    "%b, %Y",
    "%Y",
]

# Two-digit years from here up belong to the 1900s.
_CENTURY_PIVOT = 50

_WHITESPACE = re.compile(r"\s+")
_NOT_PHONE_CHAR = re.compile(r"[^\d-]")
_ORDINAL = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)


def normalize_email(value: str) -> str:
    """Lowercase an email and drop every whitespace character."""
    return _WHITESPACE.sub("", value.lower())


def normalize_phone(value: str) -> str:
    """Keep only decimal digits and hyphens.

    Signs, parentheses, dots, and spaces are dropped; no separators are
    inserted.
    """
    return _NOT_PHONE_CHAR.sub("", value)


def _expand_short_year(parsed: datetime) -> datetime:
    short_year = parsed.year % 100
    century = 1900 if short_year >= _CENTURY_PIVOT else 2000
    return parsed.replace(year=century + short_year)


def parse_date(value: str) -> datetime | None:
    """Parse a free-form date string against the known formats.

    Two-digit years 50-99 map to 1950-1999 and 00-49 to 2000-2049.
    Missing day or month components default to 1.

    Args:
        value: Captured date text.

    Returns:
        Parsed datetime, or ``None`` if no format matches.
    """
    cleaned = _WHITESPACE.sub(" ", value).strip().rstrip(".,")
    cleaned = _ORDINAL.sub(r"\1", cleaned)
    if not cleaned:
        return None

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
        if "%y" in fmt:
            parsed = _expand_short_year(parsed)
        return parsed
    return None


def normalize_date(value: str) -> str:
    """Format a date as ISO ``YYYY-MM-DD``.

    Unparseable text is returned unchanged so that nothing the user can
    see is silently discarded.
    """
    parsed = parse_date(value)
    if parsed is None:
        if value:
            logger.debug("Unrecognized date, keeping raw value: %r", value)
        return value
    return parsed.date().isoformat()
