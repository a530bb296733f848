"""
Recognition engine contract and the Tesseract binding.

The pipeline never talks to an OCR library directly. It calls an object
satisfying RecognitionEngine:

    recognize(image_path, language, options) -> EngineOutput(text, confidence)

and treats any exception from it as a failed attempt. TesseractEngine is
the production implementation; tests substitute fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from PIL import Image

from passportscan.exceptions import RecognitionError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Uppercase letters, digits, space and document punctuation
DOCUMENT_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 /-.,"

# Tesseract page segmentation modes
PSM_SINGLE_BLOCK = 6
PSM_SINGLE_LINE = 7

# Tesseract engine modes
OEM_LSTM_ONLY = 1

DEFAULT_TIMEOUT_S = 30


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class EngineOutput:
    """Text and mean word confidence (0-100) from one engine call."""

    text: str
    confidence: float


@dataclass(frozen=True)
class RecognitionOptions:
    """A named parameter set for the recognition engine."""

    name: str
    char_whitelist: str = DOCUMENT_WHITELIST
    page_segmentation_mode: int = PSM_SINGLE_BLOCK
    engine_mode: int = OEM_LSTM_ONLY
    min_linesize: float | None = None
    min_xheight: float | None = None
    variables: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def to_tesseract_config(self) -> str:
        """
        Render as a Tesseract command-line config string.

        The whitelist contains a space, so it is quoted; pytesseract
        splits the config with shlex.
        """
        parts = [
            f"--psm {self.page_segmentation_mode}",
            f"--oem {self.engine_mode}",
            f'-c "tessedit_char_whitelist={self.char_whitelist}"',
        ]
        if self.min_linesize is not None:
            parts.append(f"-c textord_min_linesize={self.min_linesize}")
        if self.min_xheight is not None:
            parts.append(f"-c textord_min_xheight={self.min_xheight}")
        for key, value in self.variables:
            parts.append(f"-c {key}={value}")
        return " ".join(parts)


STANDARD_OPTIONS = RecognitionOptions(
    name="standard",
    min_linesize=1.5,
    min_xheight=6.0,
)

NOISE_REDUCTION_OPTIONS = RecognitionOptions(
    name="noise_reduction",
    min_linesize=1.5,
    min_xheight=6.0,
    variables=(
        ("tessedit_do_invert", "0"),
        ("textord_heavy_nr", "1"),
        ("textord_old_baselines", "0"),
    ),
)

RAW_LINE_OPTIONS = RecognitionOptions(
    name="raw_line",
    page_segmentation_mode=PSM_SINGLE_LINE,
)

# Declaration order is the enumeration order used for tie-breaks
OPTION_PRESETS: dict[str, RecognitionOptions] = {
    options.name: options
    for options in (STANDARD_OPTIONS, NOISE_REDUCTION_OPTIONS, RAW_LINE_OPTIONS)
}


def options_for(names: tuple[str, ...] | list[str]) -> list[RecognitionOptions]:
    """Resolve preset names to options, keeping the given order."""
    return [OPTION_PRESETS[name] for name in names]


# =============================================================================
# ENGINES
# =============================================================================


class RecognitionEngine(Protocol):
    """Anything that can turn an image file into text with a confidence."""

    def recognize(
        self, image_path: Path, language: str, options: RecognitionOptions
    ) -> EngineOutput: ...


def detect_tesseract() -> bool:
    """Check if Tesseract is installed and usable."""
    try:
        import pytesseract

        pytesseract.get_tesseract_version()
        return True
    except ImportError:
        logger.debug("pytesseract not installed")
        return False
    except pytesseract.TesseractNotFoundError:
        logger.debug("Tesseract binary not found")
        return False


@dataclass
class TesseractEngine:
    """
    Recognition engine backed by the Tesseract binary via pytesseract.

    Attributes:
        timeout: Seconds before a single call is abandoned (0 = no limit).

    Example:
        >>> engine = TesseractEngine()
        >>> out = engine.recognize(Path("scan.png"), "eng", STANDARD_OPTIONS)
        >>> out.confidence
        87.5
    """

    timeout: int = DEFAULT_TIMEOUT_S

    def recognize(
        self, image_path: Path, language: str, options: RecognitionOptions
    ) -> EngineOutput:
        """
        Run Tesseract on one image file.

        Returns:
            EngineOutput with text (line breaks preserved) and the mean
            confidence of recognised words.

        Raises:
            RecognitionError: If Tesseract fails or times out.
        """
        import pytesseract

        try:
            with Image.open(image_path) as image:
                data = pytesseract.image_to_data(
                    image,
                    lang=language,
                    config=options.to_tesseract_config(),
                    output_type=pytesseract.Output.DICT,
                    timeout=self.timeout,
                )
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            raise RecognitionError(
                f"Tesseract failed on {image_path.name} ({options.name}): {e}"
            ) from e

        return _output_from_data(data)


def _output_from_data(data: dict[str, list]) -> EngineOutput:
    """
    Rebuild text and mean confidence from image_to_data output.

    Words are grouped by (block, paragraph, line) so the text keeps the
    line structure field extraction relies on.
    """
    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences = []

    for i, text in enumerate(data["text"]):
        word = str(text).strip()
        if not word:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(word)

        conf = float(data["conf"][i])
        if conf > 0:  # -1 means no confidence
            confidences.append(conf)

    text = "\n".join(" ".join(words) for words in lines.values())
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return EngineOutput(text=text, confidence=confidence)
