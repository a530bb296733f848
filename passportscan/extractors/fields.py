"""
Field extraction from recognised passport text.

Ordered pattern rules populate each field independently; one field
missing never blocks another. A field with no match stays "".

Names: the first line-local pair of all-caps tokens that are not
printed labels or country words wins; otherwise the first lines are
scanned token by token.
"""

from __future__ import annotations

import logging
import re

from passportscan.extractors.dates import DateNormalizer, find_dates
from passportscan.extractors.names import NameCorrector
from passportscan.models import ParsedFields
from passportscan.reference import ReferenceData, default_reference_data

logger = logging.getLogger(__name__)


# =============================================================================
# PATTERNS
# =============================================================================

# Priority order: letter-prefixed passport numbers, then bare digit runs
DOCUMENT_NUMBER_PATTERNS = (
    re.compile(r"\b[A-Z]{1,3}\d{6,9}\b"),
    re.compile(r"(?<!\d)\d{6,12}(?!\d)"),
)

# Lookahead so overlapping pairs on one line are all considered
FULL_NAME_PATTERN = re.compile(r"(?=\b([A-Z]{2,20})[ \t]+([A-Z]{2,20})\b)")

NAME_TOKEN_PATTERN = re.compile(r"[A-Z]{2,20}")
MIN_SCANNED_NAME_LENGTH = 3

DEFAULT_NAME_SCAN_LINES = 8


def _keyword_pattern(keyword: str, allow_line_breaks: bool = False) -> re.Pattern[str]:
    separator = r"\s+" if allow_line_breaks else r"[ \t]+"
    body = separator.join(re.escape(word) for word in keyword.split())
    return re.compile(rf"\b{body}\b", re.IGNORECASE)


class FieldExtractor:
    """
    Parses ParsedFields out of raw recognised text.

    Example:
        >>> extractor = FieldExtractor()
        >>> fields = extractor.extract("PASSPORT\\nJOHN SMITH\\nA1234567\\nUSA")
        >>> fields.name, fields.surname, fields.document_number
        ('JOHN', 'SMITH', 'A1234567')
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        corrector: NameCorrector | None = None,
        date_normalizer: DateNormalizer | None = None,
        name_scan_lines: int = DEFAULT_NAME_SCAN_LINES,
    ) -> None:
        self.reference = reference or default_reference_data()
        self.corrector = corrector or NameCorrector(self.reference)
        self.date_normalizer = date_normalizer or DateNormalizer()
        self.name_scan_lines = name_scan_lines

        keywords = self.reference.nationality_keywords
        self._line_keywords = [(kw, _keyword_pattern(kw)) for kw in keywords]
        # One alternation in priority order; search() then returns the leftmost hit
        self._text_pattern = (
            re.compile(
                "|".join(_keyword_pattern(kw, allow_line_breaks=True).pattern for kw in keywords),
                re.IGNORECASE,
            )
            if keywords
            else None
        )

    def extract(self, raw_text: str) -> ParsedFields:
        """
        Extract all fields from one block of recognised text.

        Args:
            raw_text: Text of the winning recognition attempt.

        Returns:
            ParsedFields; unmatched fields are empty strings.
        """
        fields = ParsedFields()
        if not raw_text or not raw_text.strip():
            return fields

        lines = [line.strip() for line in raw_text.splitlines() if line.strip()]

        fields.document_number = self.extract_document_number(raw_text)
        fields.date_of_birth, fields.expiration_date = self.extract_dates(raw_text)
        fields.name, fields.surname = self.extract_names(raw_text, lines)
        fields.nationality = self.extract_nationality(raw_text, lines)

        logger.debug("Parsed fields: %s", fields)
        return fields

    def extract_document_number(self, text: str) -> str:
        for pattern in DOCUMENT_NUMBER_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return ""

    def extract_dates(self, text: str) -> tuple[str, str]:
        """(date of birth, expiration date); a single date is taken as birth."""
        found = find_dates(text)
        if not found:
            return "", ""
        date_of_birth = self.date_normalizer.normalize(found[0])
        expiration = self.date_normalizer.normalize(found[1]) if len(found) >= 2 else ""
        return date_of_birth, expiration

    def extract_names(self, text: str, lines: list[str]) -> tuple[str, str]:
        """(given name, surname), both passed through NameCorrector."""
        excluded = self.reference.non_name_words

        for match in FULL_NAME_PATTERN.finditer(text):
            first, second = match.group(1), match.group(2)
            if first in excluded or second in excluded:
                continue
            return self.corrector.correct(first), self.corrector.correct(second)

        name = ""
        raw_name = ""
        for line in lines[: self.name_scan_lines]:
            for word in line.split():
                if (
                    not NAME_TOKEN_PATTERN.fullmatch(word)
                    or len(word) < MIN_SCANNED_NAME_LENGTH
                    or word in excluded
                ):
                    continue
                if not name:
                    raw_name = word
                    name = self.corrector.correct(word)
                elif word not in (raw_name, name):
                    return name, self.corrector.correct(word)
        return name, ""

    def extract_nationality(self, text: str, lines: list[str]) -> str:
        """
        First keyword found line by line, else anywhere in the text.

        Keywords that are also reference names (GEORGIA) only win a line
        when no other keyword is printed on any line.
        """
        names = self.reference.reference_name_set
        unambiguous = [(kw, p) for kw, p in self._line_keywords if kw not in names]
        ambiguous = [(kw, p) for kw, p in self._line_keywords if kw in names]
        for candidates in (unambiguous, ambiguous):
            for line in lines:
                for keyword, pattern in candidates:
                    if pattern.search(line):
                        return keyword

        if self._text_pattern is not None:
            match = self._text_pattern.search(text)
            if match:
                return " ".join(match.group(0).upper().split())
        return ""
