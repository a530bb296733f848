"""
Configuration for PassportScan document extraction.

The number of image variants and engine configurations attempted is the
main speed/accuracy trade-off. Three presets cover the useful range:

- FAST: one enhanced variant, one engine pass per variant
- BALANCED (default): four variants, two engine passes each
- THOROUGH: every variant under every engine configuration
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from passportscan.models import DERIVED_VARIANT_KINDS, VariantKind
from passportscan.ocr.engine import OPTION_PRESETS


@dataclass
class ExtractionConfig:
    """
    Configuration for passport/ID extraction.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Example:
        >>> config = ExtractionConfig(
        ...     variant_kinds=(VariantKind.UPSCALED,),
        ...     recognition_configs=("standard", "raw_line"),
        ... )
        >>> result = passportscan.extract_document("passport.jpg", config)
    """

    # Recognition
    language: str = "eng"
    variant_kinds: tuple[VariantKind, ...] = (
        VariantKind.HIGH_QUALITY,
        VariantKind.ENHANCED_CONTRAST,
        VariantKind.ADAPTIVE_THRESHOLD,
    )
    recognition_configs: tuple[str, ...] = ("standard", "noise_reduction")

    # Resources
    scratch_dir: Path | None = None  # None = system temp dir
    parallel: bool = False
    max_workers: int = 4
    render_dpi: int = 300  # for PDF uploads

    # Result selection
    min_text_length: int = 50
    max_text_length: int = 2000

    # Name correction
    fuzzy_max_distance: int = 3
    fuzzy_min_similarity: float = 0.6
    name_scan_lines: int = 8

    scratch_prefix: str = "passportscan"

    def __post_init__(self):
        """Validate configuration."""
        self.variant_kinds = tuple(self.variant_kinds)
        self.recognition_configs = tuple(self.recognition_configs)

        for kind in self.variant_kinds:
            if kind not in DERIVED_VARIANT_KINDS:
                raise ValueError(
                    f"variant_kinds must only contain derived kinds {DERIVED_VARIANT_KINDS}, "
                    f"got {kind!r}"
                )
        if len(set(self.variant_kinds)) != len(self.variant_kinds):
            raise ValueError(f"variant_kinds contains duplicates: {self.variant_kinds}")

        if not self.recognition_configs:
            raise ValueError("recognition_configs must name at least one configuration")
        for name in self.recognition_configs:
            if name not in OPTION_PRESETS:
                raise ValueError(
                    f"recognition_configs must be drawn from {tuple(OPTION_PRESETS)}, "
                    f"got {name!r}"
                )

        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.render_dpi < 72:
            raise ValueError(f"render_dpi must be >= 72, got {self.render_dpi}")
        if self.min_text_length < 0 or self.max_text_length <= self.min_text_length:
            raise ValueError(
                f"text length bounds must satisfy 0 <= min < max, "
                f"got ({self.min_text_length}, {self.max_text_length})"
            )
        if self.fuzzy_max_distance < 0:
            raise ValueError(f"fuzzy_max_distance must be >= 0, got {self.fuzzy_max_distance}")
        if not 0.0 <= self.fuzzy_min_similarity < 1.0:
            raise ValueError(
                f"fuzzy_min_similarity must be in [0.0, 1.0), got {self.fuzzy_min_similarity}"
            )
        if self.name_scan_lines < 1:
            raise ValueError(f"name_scan_lines must be >= 1, got {self.name_scan_lines}")

    @property
    def attempts_per_document(self) -> int:
        """Upper bound on engine calls for one upload."""
        return (1 + len(self.variant_kinds)) * len(self.recognition_configs)


# =============================================================================
# PRESETS
# =============================================================================

PRESET_NAMES = ("fast", "balanced", "thorough")


def preset(name: str) -> ExtractionConfig:
    """
    Return a fresh config for a named preset.

    Args:
        name: One of "fast", "balanced", "thorough".

    Raises:
        ValueError: For an unknown preset name.
    """
    if name == "fast":
        return ExtractionConfig(
            variant_kinds=(VariantKind.HIGH_QUALITY,),
            recognition_configs=("standard",),
        )
    if name == "balanced":
        return ExtractionConfig()
    if name == "thorough":
        return ExtractionConfig(
            variant_kinds=DERIVED_VARIANT_KINDS,
            recognition_configs=tuple(OPTION_PRESETS),
        )
    raise ValueError(f"preset must be one of {PRESET_NAMES}, got {name!r}")
