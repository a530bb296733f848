"""
Image variant generation.

One photographed passport rarely suits every recognition pass: glare
defeats a fixed threshold, small renders lose thin strokes, noisy scans
get worse when sharpened. Instead of guessing, we write a handful of
deterministic variants and let the scorer pick the best text afterwards.

Every variant starts from the same source; none depends on another. All
parameters are fixed constants.
"""

from __future__ import annotations

import logging
import tempfile
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageChops, ImageFilter, ImageOps

from passportscan.models import DERIVED_VARIANT_KINDS, ImageVariant, VariantKind
from passportscan.readers.source import SourceImage

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

FIXED_THRESHOLD = 128

# Linear contrast: out = gain * in + bias
ENHANCED_GAIN = 1.5
ENHANCED_BIAS = -(128 * 0.5)
HIGH_QUALITY_GAIN = 1.2
HIGH_QUALITY_BIAS = -(128 * 0.2)

# Target heights for Lanczos resizing
UPSCALE_HEIGHT = 3000
HIGH_QUALITY_HEIGHT = 1500

# Adaptive (local mean) threshold
ADAPTIVE_RADIUS = 15
ADAPTIVE_OFFSET = 10

MEDIAN_SIZE = 3


# =============================================================================
# TRANSFORMS
# =============================================================================


def _normalized_grey(image: Image.Image) -> Image.Image:
    """Greyscale with min/max stretch to the full 0-255 range."""
    return ImageOps.autocontrast(image.convert("L"))


def _linear(image: Image.Image, gain: float, bias: float) -> Image.Image:
    return image.point(lambda v: max(0, min(255, int(gain * v + bias))))


def _resize_to_height(image: Image.Image, height: int) -> Image.Image:
    width = max(1, round(image.width * height / image.height))
    return image.resize((width, height), Image.Resampling.LANCZOS)


def high_contrast_bw(image: Image.Image) -> Image.Image:
    grey = _normalized_grey(image)
    return grey.point(lambda v: 255 if v >= FIXED_THRESHOLD else 0)


def enhanced_contrast(image: Image.Image) -> Image.Image:
    return _linear(_normalized_grey(image), ENHANCED_GAIN, ENHANCED_BIAS)


def denoised_sharpened(image: Image.Image) -> Image.Image:
    grey = _normalized_grey(image).filter(ImageFilter.MedianFilter(MEDIAN_SIZE))
    return grey.filter(ImageFilter.UnsharpMask(radius=2, percent=150, threshold=3))


def upscaled(image: Image.Image) -> Image.Image:
    return _normalized_grey(_resize_to_height(image, UPSCALE_HEIGHT))


def adaptive_threshold(image: Image.Image) -> Image.Image:
    """
    Local-mean threshold.

    A pixel turns black when it is more than ADAPTIVE_OFFSET darker than
    the mean of its neighbourhood, which survives uneven lighting that
    defeats a global threshold.
    """
    grey = _normalized_grey(image)
    local_mean = grey.filter(ImageFilter.BoxBlur(ADAPTIVE_RADIUS))
    darkness = ImageChops.subtract(local_mean, grey)
    return darkness.point(lambda v: 0 if v > ADAPTIVE_OFFSET else 255)


def high_quality(image: Image.Image) -> Image.Image:
    grey = _normalized_grey(_resize_to_height(image, HIGH_QUALITY_HEIGHT))
    grey = _linear(grey, HIGH_QUALITY_GAIN, HIGH_QUALITY_BIAS)
    return grey.filter(ImageFilter.UnsharpMask(radius=1, percent=120, threshold=2))


TRANSFORMS: dict[VariantKind, Callable[[Image.Image], Image.Image]] = {
    VariantKind.HIGH_CONTRAST_BW: high_contrast_bw,
    VariantKind.ENHANCED_CONTRAST: enhanced_contrast,
    VariantKind.DENOISED_SHARPENED: denoised_sharpened,
    VariantKind.UPSCALED: upscaled,
    VariantKind.ADAPTIVE_THRESHOLD: adaptive_threshold,
    VariantKind.HIGH_QUALITY: high_quality,
}


# =============================================================================
# GENERATOR
# =============================================================================


@dataclass
class ImageVariantGenerator:
    """
    Writes preprocessed variants of a source image to a scratch directory.

    The original image is always the first variant. If any transform
    fails, generation falls back to the original alone so recognition
    always has something to work on.

    Attributes:
        variant_kinds: Derived variants to produce, in order.
        scratch_dir: Directory for variant files (default: system temp).
        prefix: Filename prefix for variant files.

    Example:
        >>> generator = ImageVariantGenerator()
        >>> with generator.generated(source) as variants:
        ...     [v.kind.value for v in variants]
        ['original', 'high-contrast-bw', ...]
    """

    variant_kinds: tuple[VariantKind, ...] = DERIVED_VARIANT_KINDS
    scratch_dir: Path | None = None
    prefix: str = "passportscan"

    def _scratch(self) -> Path:
        return Path(self.scratch_dir) if self.scratch_dir else Path(tempfile.gettempdir())

    def generate(self, source: SourceImage) -> list[ImageVariant]:
        """
        Produce the ordered variant list for one source image.

        Args:
            source: Opened source image.

        Returns:
            [original, *derived]; just [original] if preprocessing failed.
        """
        original = ImageVariant(kind=VariantKind.ORIGINAL, path=source.image_path)
        if not self.variant_kinds:
            return [original]

        token = uuid.uuid4().hex[:8]
        scratch = self._scratch()
        produced: list[ImageVariant] = []

        try:
            scratch.mkdir(parents=True, exist_ok=True)
            with Image.open(source.image_path) as opened:
                image = ImageOps.exif_transpose(opened)
                image.load()

            for kind in self.variant_kinds:
                out_path = scratch / f"{self.prefix}_{source.path.stem}_{token}_{kind.value}.png"
                TRANSFORMS[kind](image).save(out_path, format="PNG")
                produced.append(ImageVariant(kind=kind, path=out_path))
        except Exception as e:
            logger.warning(
                "Preprocessing failed for %s (%s); using original image only",
                source.path.name,
                e,
            )
            self.cleanup(produced)
            return [original]

        logger.debug("Generated %d variants for %s", len(produced), source.path.name)
        return [original, *produced]

    def cleanup(self, variants: list[ImageVariant]) -> int:
        """
        Delete generated variant files. The original is never touched.

        Failures are logged and ignored.

        Returns:
            Number of files deleted.
        """
        deleted = 0
        for variant in variants:
            if variant.is_original:
                continue
            try:
                variant.path.unlink()
                deleted += 1
            except FileNotFoundError:
                logger.debug("Variant file already removed: %s", variant.path)
            except OSError as e:
                logger.warning("Could not delete temp file %s: %s", variant.path, e)
        return deleted

    @contextmanager
    def generated(self, source: SourceImage) -> Iterator[list[ImageVariant]]:
        """Generate variants and delete them on every exit path."""
        variants = self.generate(source)
        try:
            yield variants
        finally:
            self.cleanup(variants)
