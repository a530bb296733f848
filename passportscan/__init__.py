"""
PassportScan: structured records from photographed travel documents.

Turns a passport or ID upload into given name, surname, document number,
nationality, date of birth and expiration date, despite noisy photos and
an imperfect OCR engine.

Example:
    >>> import passportscan
    >>> result = passportscan.extract_document("uploads/passports/abc.jpg")
    >>> result.data.document_number
    'A1234567'
    >>> passportscan.validate_record(result.data).confidence
    100
"""

from passportscan.config import ExtractionConfig, preset
from passportscan.exceptions import (
    PassportScanError,
    RecognitionError,
    ReferenceDataError,
    SourceImageError,
)
from passportscan.extractors import (
    DateNormalizer,
    FieldExtractor,
    NameCorrector,
    RecordValidator,
    assess_document,
    levenshtein_distance,
    normalize_date,
    validate_record,
)
from passportscan.models import (
    DocumentStatus,
    ExtractionResult,
    ImageVariant,
    ParsedFields,
    RecognitionAttempt,
    ScoredAttempt,
    ValidationOutcome,
    VariantKind,
)
from passportscan.ocr import (
    ImageVariantGenerator,
    RecognitionRunner,
    ResultSelector,
    TesseractEngine,
)
from passportscan.pipeline import (
    ExtractionPipeline,
    create_pipeline,
    extract_batch,
    extract_document,
)
from passportscan.reference import ReferenceData, default_reference_data, load_reference_data

__version__ = "0.1.0"
__all__ = [
    # Main API
    "extract_document",
    "extract_batch",
    "create_pipeline",
    "ExtractionPipeline",
    # Configuration
    "ExtractionConfig",
    "preset",
    "ReferenceData",
    "load_reference_data",
    "default_reference_data",
    # Stages
    "ImageVariantGenerator",
    "RecognitionRunner",
    "TesseractEngine",
    "ResultSelector",
    "FieldExtractor",
    "NameCorrector",
    "DateNormalizer",
    "RecordValidator",
    # Functions
    "levenshtein_distance",
    "normalize_date",
    "validate_record",
    "assess_document",
    # Models
    "VariantKind",
    "ImageVariant",
    "RecognitionAttempt",
    "ScoredAttempt",
    "ParsedFields",
    "ExtractionResult",
    "ValidationOutcome",
    "DocumentStatus",
    # Exceptions
    "PassportScanError",
    "SourceImageError",
    "RecognitionError",
    "ReferenceDataError",
]
