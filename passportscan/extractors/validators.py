"""
Validation of extracted passport records.

RecordValidator reports which required fields are missing and how
complete the record is. assess_document() derives validity-period and
holder-age facts used by the booking screens. Both are pure functions of
the parsed fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from passportscan.extractors.dates import parse_iso_date
from passportscan.models import DocumentStatus, ParsedFields, ValidationOutcome

# (attribute, label used in error messages)
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("surname", "Surname"),
    ("document_number", "Document number"),
    ("nationality", "Nationality"),
    ("date_of_birth", "Date of birth"),
    ("expiration_date", "Expiration date"),
)

EXPIRY_WARNING_DAYS = 30

# Upper age bounds (exclusive) for each category; older holders are "senior"
AGE_CATEGORIES: tuple[tuple[int, str], ...] = (
    (2, "infant"),
    (12, "child"),
    (18, "teen"),
    (65, "adult"),
)


@dataclass
class RecordValidator:
    """Checks that every required field was extracted."""

    required_fields: tuple[tuple[str, str], ...] = REQUIRED_FIELDS

    def validate(self, fields: ParsedFields) -> ValidationOutcome:
        """
        Validate a parsed record.

        Returns:
            ValidationOutcome with one "<Field> not found" error per
            missing field and confidence = percentage of fields present.
        """
        errors = []
        present = 0
        for attribute, label in self.required_fields:
            if getattr(fields, attribute, ""):
                present += 1
            else:
                errors.append(f"{label} not found")

        total = len(self.required_fields)
        confidence = round(100 * present / total) if total else 0
        return ValidationOutcome(is_valid=not errors, errors=errors, confidence=confidence)


def validate_record(fields: ParsedFields) -> ValidationOutcome:
    """Validate against the standard required-field list."""
    return RecordValidator().validate(fields)


def age_on(birth: date, today: date) -> int:
    """Whole years between birth and today."""
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def age_category(age: int) -> str:
    for bound, category in AGE_CATEGORIES:
        if age < bound:
            return category
    return "senior"


def assess_document(fields: ParsedFields, today: date | None = None) -> DocumentStatus:
    """
    Derive expiry and holder-age facts from a parsed record.

    Args:
        fields: Parsed passport fields.
        today: Reference date (defaults to date.today()).

    Returns:
        DocumentStatus; values depending on a missing date are None.
    """
    today = today or date.today()
    status = DocumentStatus()

    expiration = parse_iso_date(fields.expiration_date)
    if expiration is not None:
        status.is_expired = expiration <= today
        status.expires_soon = expiration <= today + timedelta(days=EXPIRY_WARNING_DAYS)

    birth = parse_iso_date(fields.date_of_birth)
    if birth is not None and birth <= today:
        status.age = age_on(birth, today)
        status.age_category = age_category(status.age)

    return status
