"""
Image preprocessing, recognition and attempt selection.

This module turns one uploaded image into the single best block of
recognised text:
- ImageVariantGenerator writes preprocessed variants
- RecognitionRunner calls the engine per variant/configuration
- ResultSelector scores the attempts and picks the winner

Example:
    >>> from passportscan.ocr import RecognitionRunner, TesseractEngine
    >>> runner = RecognitionRunner(engine=TesseractEngine())
"""

from passportscan.ocr.engine import (
    NOISE_REDUCTION_OPTIONS,
    OPTION_PRESETS,
    RAW_LINE_OPTIONS,
    STANDARD_OPTIONS,
    EngineOutput,
    RecognitionEngine,
    RecognitionOptions,
    TesseractEngine,
    detect_tesseract,
    options_for,
)
from passportscan.ocr.runner import (
    ProgressEvent,
    ProgressHook,
    RecognitionRunner,
    RunnerStats,
    log_progress,
)
from passportscan.ocr.scoring import ResultSelector
from passportscan.ocr.variants import TRANSFORMS, ImageVariantGenerator

__all__ = [
    # Variants
    "ImageVariantGenerator",
    "TRANSFORMS",
    # Engine
    "RecognitionEngine",
    "RecognitionOptions",
    "EngineOutput",
    "TesseractEngine",
    "detect_tesseract",
    "options_for",
    "OPTION_PRESETS",
    "STANDARD_OPTIONS",
    "NOISE_REDUCTION_OPTIONS",
    "RAW_LINE_OPTIONS",
    # Runner
    "RecognitionRunner",
    "RunnerStats",
    "ProgressEvent",
    "ProgressHook",
    "log_progress",
    # Selection
    "ResultSelector",
]
