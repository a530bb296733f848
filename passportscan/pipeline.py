"""
Passport/ID extraction pipeline orchestrator.

Wires the stages together for one upload:
1. open_source: check the upload is readable (rasterise PDFs)
2. ImageVariantGenerator: write preprocessed variants
3. RecognitionRunner: one engine call per variant/configuration
4. ResultSelector: pick the single best attempt
5. FieldExtractor: parse fields from the winning text only

Scratch files are deleted on every exit path. The only failure reported
to the caller is an upload that cannot be opened or an unexpected error
in orchestration; everything else degrades to low-confidence output.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from passportscan.config import ExtractionConfig, preset
from passportscan.exceptions import SourceImageError
from passportscan.extractors.fields import FieldExtractor
from passportscan.extractors.names import NameCorrector
from passportscan.extractors.validators import RecordValidator
from passportscan.models import (
    ExtractionResult,
    ParsedFields,
    RecognitionAttempt,
    ScoredAttempt,
    ValidationOutcome,
)
from passportscan.ocr.engine import RecognitionEngine, TesseractEngine, options_for
from passportscan.ocr.runner import ProgressHook, RecognitionRunner
from passportscan.ocr.scoring import ResultSelector
from passportscan.ocr.variants import ImageVariantGenerator
from passportscan.readers.source import open_source
from passportscan.reference import ReferenceData, default_reference_data, load_reference_data

logger = logging.getLogger(__name__)


@dataclass
class ExtractionPipeline:
    """
    End-to-end extraction of a passport/ID record from an image.

    Components not supplied are built from the config and shared
    reference data.

    Attributes:
        config: Variant/configuration counts and thresholds.
        engine: Recognition engine (Tesseract by default).
        reference: Name lists, correction table and keywords.
        progress: Optional hook for recognition progress events.

    Example:
        >>> from passportscan.pipeline import ExtractionPipeline
        >>> pipeline = ExtractionPipeline()
        >>> result = pipeline.extract("uploads/passports/abc.jpg")
        >>> result.data.surname if result.success else result.error
        'SMITH'
    """

    config: ExtractionConfig = field(default_factory=ExtractionConfig)
    engine: RecognitionEngine | None = None
    reference: ReferenceData | None = None
    progress: ProgressHook | None = None

    generator: ImageVariantGenerator | None = field(default=None)
    runner: RecognitionRunner | None = field(default=None)
    selector: ResultSelector | None = field(default=None)
    extractor: FieldExtractor | None = field(default=None)
    validator: RecordValidator = field(default_factory=RecordValidator)

    def __post_init__(self) -> None:
        """Initialize pipeline components."""
        if self.reference is None:
            self.reference = default_reference_data()
        if self.engine is None:
            self.engine = TesseractEngine()

        if self.generator is None:
            self.generator = ImageVariantGenerator(
                variant_kinds=self.config.variant_kinds,
                scratch_dir=self.config.scratch_dir,
                prefix=self.config.scratch_prefix,
            )

        if self.runner is None:
            self.runner = RecognitionRunner(
                engine=self.engine,
                language=self.config.language,
                progress=self.progress,
                parallel=self.config.parallel,
                max_workers=self.config.max_workers,
            )

        if self.selector is None:
            self.selector = ResultSelector(
                reference=self.reference,
                min_text_length=self.config.min_text_length,
                max_text_length=self.config.max_text_length,
            )

        if self.extractor is None:
            corrector = NameCorrector(
                self.reference,
                max_distance=self.config.fuzzy_max_distance,
                min_similarity=self.config.fuzzy_min_similarity,
            )
            self.extractor = FieldExtractor(
                self.reference,
                corrector=corrector,
                name_scan_lines=self.config.name_scan_lines,
            )

        self._options = options_for(self.config.recognition_configs)

    def extract(self, image_path: str | Path) -> ExtractionResult:
        """
        Extract passport fields from one uploaded image.

        Args:
            image_path: Location of the upload (JPEG/PNG/PDF).

        Returns:
            ExtractionResult; success is False only when the upload could
            not be opened or orchestration itself failed.
        """
        start_time = time.time()
        path = Path(image_path)
        logger.info("Starting OCR processing for %s", path)

        try:
            source = open_source(path, self.config.scratch_dir, self.config.render_dpi)
        except SourceImageError as e:
            logger.error("OCR processing failed for %s: %s", path, e)
            return ExtractionResult.failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error opening %s", path)
            return ExtractionResult.failure(str(e))

        try:
            with self.generator.generated(source) as variants:
                attempts, stats = self.runner.run_all(variants, self._options)
            best, fields = self.process_attempts(attempts)
        except Exception as e:
            logger.exception("OCR processing error for %s", path)
            return ExtractionResult.failure(str(e))
        finally:
            source.release()

        logger.info(
            "OCR completed for %s: %d/%d attempts succeeded, winner %s "
            "(confidence %.1f) in %.0f ms",
            path.name,
            stats.attempts_made - stats.attempts_failed,
            stats.attempts_made,
            best.method,
            best.confidence,
            (time.time() - start_time) * 1000,
        )

        return ExtractionResult(
            success=True,
            data=fields,
            raw_text=best.raw_text,
            confidence=best.confidence,
            method=best.method,
        )

    def process_attempts(
        self, attempts: list[RecognitionAttempt]
    ) -> tuple[ScoredAttempt, ParsedFields]:
        """
        Select the winning attempt and parse its text.

        Fields come from the winner alone; attempts are never merged.
        """
        best = self.selector.select(attempts)
        return best, self.extractor.extract(best.raw_text)

    def validate(self, fields: ParsedFields) -> ValidationOutcome:
        return self.validator.validate(fields)

    def extract_and_validate(
        self, image_path: str | Path
    ) -> tuple[ExtractionResult, ValidationOutcome | None]:
        """
        Extract and validate in one call.

        Returns:
            (result, validation); validation is None when extraction failed.
        """
        result = self.extract(image_path)
        if not result.success or result.data is None:
            return result, None
        return result, self.validate(result.data)

    def get_info(self) -> dict[str, Any]:
        """Get pipeline configuration information."""
        return {
            "language": self.config.language,
            "variants": ["original"] + [kind.value for kind in self.config.variant_kinds],
            "recognition_configs": list(self.config.recognition_configs),
            "attempts_per_document": self.config.attempts_per_document,
            "parallel": self.config.parallel,
            "engine": type(self.engine).__name__,
            "reference_names": len(self.reference.reference_names),
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def create_pipeline(
    preset_name: str = "balanced",
    engine: RecognitionEngine | None = None,
    reference_path: Path | None = None,
    progress: ProgressHook | None = None,
    **overrides: Any,
) -> ExtractionPipeline:
    """
    Create a pipeline from a named preset.

    Args:
        preset_name: "fast", "balanced" or "thorough".
        engine: Recognition engine (Tesseract by default).
        reference_path: Alternative reference data YAML.
        progress: Optional recognition progress hook.
        **overrides: ExtractionConfig fields to change from the preset.

    Returns:
        Configured ExtractionPipeline instance.
    """
    config = preset(preset_name)
    if overrides:
        config = replace(config, **overrides)

    reference = load_reference_data(reference_path) if reference_path else None
    return ExtractionPipeline(
        config=config,
        engine=engine,
        reference=reference,
        progress=progress,
    )


def extract_document(
    image_path: str | Path,
    config: ExtractionConfig | None = None,
    engine: RecognitionEngine | None = None,
) -> ExtractionResult:
    """Extract one document with a throwaway pipeline."""
    pipeline = ExtractionPipeline(config=config or ExtractionConfig(), engine=engine)
    return pipeline.extract(image_path)


def extract_batch(
    image_paths: Iterable[str | Path],
    config: ExtractionConfig | None = None,
    engine: RecognitionEngine | None = None,
) -> Iterator[tuple[Path, ExtractionResult]]:
    """
    Extract several documents sequentially, yielding as each completes.

    Yields:
        (path, ExtractionResult) tuples, failures included.
    """
    pipeline = ExtractionPipeline(config=config or ExtractionConfig(), engine=engine)
    for image_path in image_paths:
        path = Path(image_path)
        yield path, pipeline.extract(path)
