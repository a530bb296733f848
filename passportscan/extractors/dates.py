"""
Date normalisation for travel documents.

Travel documents print dates day-first: either numerically with `/`, `-`
or `.` separators, or as `DD MMM YYYY`. Both are converted to ISO
`YYYY-MM-DD`. Numeric dates are always read as day-month-year, whatever
the separator; this is the document convention, not a locale setting.

Anything that is not a real calendar date becomes "".
"""

from __future__ import annotations

import logging
import re
from datetime import date

logger = logging.getLogger(__name__)

MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

_MONTH_ALTERNATION = "|".join(MONTHS)

# Either family, as it appears inside OCR text (used for finding dates)
DATE_PATTERN = re.compile(
    rf"\b\d{{1,2}}[/\-.]\d{{1,2}}[/\-.]\d{{4}}\b"
    rf"|\b\d{{1,2}}[ \t]+(?:{_MONTH_ALTERNATION})[ \t]+\d{{4}}\b",
    re.IGNORECASE,
)

_TEXT_MONTH_DATE = re.compile(
    rf"(\d{{1,2}})\s+({_MONTH_ALTERNATION})\s+(\d{{4}})",
    re.IGNORECASE,
)
_NUMERIC_DATE = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})")


def _to_iso(year: int, month: int, day: int) -> str:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


class DateNormalizer:
    """
    Converts document date text to ISO format.

    Example:
        >>> DateNormalizer().normalize("01 JAN 1970")
        '1970-01-01'
        >>> DateNormalizer().normalize("15/03/1990")
        '1990-03-15'
        >>> DateNormalizer().normalize("31/02/2020")
        ''
    """

    def normalize(self, date_text: str) -> str:
        """
        Normalise one date string.

        Args:
            date_text: Text containing a date in either supported family.

        Returns:
            "YYYY-MM-DD", or "" if no valid calendar date was found.
        """
        if not date_text:
            return ""

        match = _TEXT_MONTH_DATE.search(date_text)
        if match:
            day, month_name, year = match.groups()
            iso = _to_iso(int(year), MONTHS[month_name.upper()], int(day))
            if iso:
                return iso

        match = _NUMERIC_DATE.search(date_text)
        if match:
            day, month, year = match.groups()
            iso = _to_iso(int(year), int(month), int(day))
            if iso:
                return iso

        logger.debug("Could not parse date: %r", date_text)
        return ""


_default_normalizer = DateNormalizer()


def normalize_date(date_text: str) -> str:
    """Module-level shortcut for DateNormalizer().normalize()."""
    return _default_normalizer.normalize(date_text)


def find_dates(text: str) -> list[str]:
    """All date-like substrings of text, in order of appearance."""
    return [match.group(0) for match in DATE_PATTERN.finditer(text)]


def parse_iso_date(value: str) -> date | None:
    """Parse a YYYY-MM-DD string produced by normalize(); None if empty/invalid."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
