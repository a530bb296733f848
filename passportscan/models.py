"""
Data models for PassportScan.

These models carry a single extraction from the uploaded image to the
structured record handed back to the caller:

    ImageVariant -> RecognitionAttempt -> ScoredAttempt -> ParsedFields
    -> ExtractionResult (+ ValidationOutcome, DocumentStatus)

Serialised forms use the camelCase keys the REST layer returns.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class VariantKind(Enum):
    """Preprocessing applied to produce an image variant."""

    ORIGINAL = "original"
    HIGH_CONTRAST_BW = "high-contrast-bw"
    ENHANCED_CONTRAST = "enhanced-contrast"
    DENOISED_SHARPENED = "denoised-sharpened"
    UPSCALED = "upscaled"
    ADAPTIVE_THRESHOLD = "adaptive-threshold"
    HIGH_QUALITY = "high-quality"


# Generation order for derived variants (ORIGINAL is always first)
DERIVED_VARIANT_KINDS: tuple[VariantKind, ...] = (
    VariantKind.HIGH_CONTRAST_BW,
    VariantKind.ENHANCED_CONTRAST,
    VariantKind.DENOISED_SHARPENED,
    VariantKind.UPSCALED,
    VariantKind.ADAPTIVE_THRESHOLD,
    VariantKind.HIGH_QUALITY,
)


# =============================================================================
# PIPELINE INTERMEDIATES
# =============================================================================


@dataclass(frozen=True)
class ImageVariant:
    """A preprocessed image written to disk for one recognition pass.

    Only ORIGINAL points at a file the pipeline did not create; every other
    kind lives in the scratch directory and is deleted after the run.
    """

    kind: VariantKind
    path: Path

    @property
    def is_original(self) -> bool:
        return self.kind is VariantKind.ORIGINAL


@dataclass(frozen=True)
class RecognitionAttempt:
    """Raw engine output for one (variant, configuration) pair."""

    variant_kind: VariantKind
    config_name: str
    raw_text: str
    engine_confidence: float  # 0-100, as reported by the engine


@dataclass(frozen=True)
class ScoredAttempt:
    """A recognition attempt with its heuristic selection score.

    `attempt` is None for the sentinel returned when nothing was recognised.
    """

    attempt: RecognitionAttempt | None
    score: float

    @classmethod
    def empty(cls) -> ScoredAttempt:
        """Sentinel for an empty attempt list."""
        return cls(attempt=None, score=0.0)

    @property
    def raw_text(self) -> str:
        return self.attempt.raw_text if self.attempt else ""

    @property
    def confidence(self) -> float:
        return self.attempt.engine_confidence if self.attempt else 0.0

    @property
    def method(self) -> str:
        """Identifies the winning variant/configuration, e.g. 'upscaled/standard'."""
        if self.attempt is None:
            return "none"
        return f"{self.attempt.variant_kind.value}/{self.attempt.config_name}"


# =============================================================================
# OUTPUT RECORDS
# =============================================================================


@dataclass
class ParsedFields:
    """Fields parsed from the winning text. Missing fields are empty strings."""

    name: str = ""
    surname: str = ""
    document_number: str = ""
    nationality: str = ""
    date_of_birth: str = ""  # YYYY-MM-DD
    expiration_date: str = ""  # YYYY-MM-DD

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON shape returned to API callers."""
        return {
            "name": self.name,
            "surname": self.surname,
            "documentNumber": self.document_number,
            "nationality": self.nationality,
            "dateOfBirth": self.date_of_birth,
            "expirationDate": self.expiration_date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParsedFields:
        """Create from the JSON shape."""
        return cls(
            name=data.get("name", ""),
            surname=data.get("surname", ""),
            document_number=data.get("documentNumber", ""),
            nationality=data.get("nationality", ""),
            date_of_birth=data.get("dateOfBirth", ""),
            expiration_date=data.get("expirationDate", ""),
        )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip()


@dataclass
class ExtractionResult:
    """The pipeline's single output value."""

    success: bool
    data: ParsedFields | None
    raw_text: str = ""
    confidence: float = 0.0
    method: str = "none"
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> ExtractionResult:
        """Result for an orchestration failure (e.g. unreadable upload)."""
        return cls(success=False, data=None, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "data": self.data.to_dict() if self.data is not None else None,
            "rawText": self.raw_text,
            "confidence": self.confidence,
            "method": self.method,
            "error": self.error,
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class ValidationOutcome:
    """Completeness check of a ParsedFields record."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    confidence: int = 0  # 0-100

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "confidence": self.confidence,
        }


@dataclass
class DocumentStatus:
    """Derived facts about the document holder and validity period.

    Values are None when the date they depend on was not extracted.
    """

    is_expired: bool | None = None
    expires_soon: bool | None = None
    age: int | None = None
    age_category: str | None = None  # "infant", "child", "teen", "adult", "senior"

    def to_dict(self) -> dict[str, Any]:
        return {
            "isExpired": self.is_expired,
            "expiresSoon": self.expires_soon,
            "age": self.age,
            "ageCategory": self.age_category,
        }
