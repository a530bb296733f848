"""
Field extraction from recognised text.

- FieldExtractor: ordered pattern rules per field
- NameCorrector: exact table, edit distance, letter-confusion repair
- DateNormalizer: day-first document dates to ISO
- RecordValidator: completeness check and confidence
"""

from passportscan.extractors.dates import (
    DATE_PATTERN,
    DateNormalizer,
    find_dates,
    normalize_date,
)
from passportscan.extractors.fields import FieldExtractor
from passportscan.extractors.names import (
    NameCorrection,
    NameCorrector,
    levenshtein_distance,
    similarity,
)
from passportscan.extractors.validators import (
    REQUIRED_FIELDS,
    RecordValidator,
    assess_document,
    validate_record,
)

__all__ = [
    "FieldExtractor",
    # Names
    "NameCorrector",
    "NameCorrection",
    "levenshtein_distance",
    "similarity",
    # Dates
    "DateNormalizer",
    "DATE_PATTERN",
    "find_dates",
    "normalize_date",
    # Validation
    "RecordValidator",
    "REQUIRED_FIELDS",
    "validate_record",
    "assess_document",
]
