"""
Recognition runner.

Runs the recognition engine over every (variant, configuration) pair.
A failed engine call is reported through the progress hook and dropped;
it never stops the remaining attempts.

Results are always returned in enumeration order (variants in generation
order, configurations in declaration order), including when the calls
run on a thread pool, because the scorer breaks ties by position.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from passportscan.models import ImageVariant, RecognitionAttempt, VariantKind
from passportscan.ocr.engine import RecognitionEngine, RecognitionOptions, TesseractEngine

logger = logging.getLogger(__name__)


# =============================================================================
# PROGRESS EVENTS
# =============================================================================


@dataclass(frozen=True)
class ProgressEvent:
    """One step of the recognition loop."""

    stage: str  # "attempt_started", "attempt_succeeded", "attempt_failed"
    variant_kind: VariantKind
    config_name: str
    detail: str = ""


ProgressHook = Callable[[ProgressEvent], None]


def log_progress(event: ProgressEvent) -> None:
    """Default hook: forward events to the module logger."""
    if event.stage == "attempt_failed":
        logger.warning(
            "Recognition failed for %s/%s: %s",
            event.variant_kind.value,
            event.config_name,
            event.detail,
        )
    else:
        logger.debug(
            "%s %s/%s %s",
            event.stage,
            event.variant_kind.value,
            event.config_name,
            event.detail,
        )


@dataclass
class RunnerStats:
    """Counters for one run_all() call."""

    attempts_made: int = 0
    attempts_failed: int = 0
    total_time_ms: float = 0.0


# =============================================================================
# RUNNER
# =============================================================================


@dataclass
class RecognitionRunner:
    """
    Invokes the recognition engine once per variant/configuration pair.

    Attributes:
        engine: Recognition engine (Tesseract by default).
        language: Language code passed to the engine.
        progress: Hook receiving ProgressEvent notifications.
        parallel: Run engine calls on a thread pool.
        max_workers: Pool size when parallel.

    Example:
        >>> runner = RecognitionRunner(engine=TesseractEngine())
        >>> attempts = runner.run(variant, [STANDARD_OPTIONS])
    """

    engine: RecognitionEngine = field(default_factory=TesseractEngine)
    language: str = "eng"
    progress: ProgressHook | None = None
    parallel: bool = False
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.progress is None:
            self.progress = log_progress

    def _notify(self, event: ProgressEvent) -> None:
        try:
            self.progress(event)
        except Exception as e:
            logger.warning("Progress hook raised %s; ignoring", e)

    def _attempt(
        self, variant: ImageVariant, options: RecognitionOptions
    ) -> RecognitionAttempt | None:
        """Run one engine call; None when the engine raised."""
        self._notify(ProgressEvent("attempt_started", variant.kind, options.name))
        try:
            output = self.engine.recognize(Path(variant.path), self.language, options)
        except Exception as e:
            self._notify(ProgressEvent("attempt_failed", variant.kind, options.name, str(e)))
            return None

        confidence = max(0.0, min(100.0, float(output.confidence)))
        self._notify(
            ProgressEvent(
                "attempt_succeeded",
                variant.kind,
                options.name,
                f"confidence={confidence:.1f} chars={len(output.text)}",
            )
        )
        return RecognitionAttempt(
            variant_kind=variant.kind,
            config_name=options.name,
            raw_text=output.text or "",
            engine_confidence=confidence,
        )

    def run(
        self, variant: ImageVariant, configs: list[RecognitionOptions]
    ) -> list[RecognitionAttempt]:
        """
        Recognise one variant under each configuration.

        Args:
            variant: Image to recognise.
            configs: Engine configurations, in declaration order.

        Returns:
            One attempt per configuration that did not fail.
        """
        attempts = []
        for options in configs:
            attempt = self._attempt(variant, options)
            if attempt is not None:
                attempts.append(attempt)
        return attempts

    def run_all(
        self,
        variants: list[ImageVariant],
        configs: list[RecognitionOptions],
    ) -> tuple[list[RecognitionAttempt], RunnerStats]:
        """
        Recognise every variant under every configuration.

        Returns:
            Tuple of (attempts in enumeration order, statistics). The
            attempt list is empty if every call failed.
        """
        start_time = time.time()
        pairs = [(variant, options) for variant in variants for options in configs]

        if self.parallel and len(pairs) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields in submission order, not completion order
                results = list(pool.map(lambda pair: self._attempt(*pair), pairs))
        else:
            results = [self._attempt(variant, options) for variant, options in pairs]

        attempts = [attempt for attempt in results if attempt is not None]
        stats = RunnerStats(
            attempts_made=len(pairs),
            attempts_failed=len(pairs) - len(attempts),
            total_time_ms=(time.time() - start_time) * 1000,
        )
        return attempts, stats
