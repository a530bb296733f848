"""
Source document reader.

Opens the caller's upload and makes sure there is a raster image to work
on. Images are checked with Pillow; single-page PDF scans are rasterised
with PyMuPDF into a scratch PNG that lives only for one pipeline run.

The caller's file is read-only to the pipeline and is never deleted.
"""

from __future__ import annotations

import logging
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError

from passportscan.exceptions import SourceImageError

logger = logging.getLogger(__name__)

DEFAULT_DPI = 300
PDF_SUFFIXES = {".pdf"}


@dataclass
class SourceImage:
    """
    An upload ready for preprocessing.

    Attributes:
        path: The caller's file.
        image_path: Raster image the pipeline reads (same as path for images).
        width: Raster width in pixels.
        height: Raster height in pixels.
        format: "JPEG", "PNG", "PDF", ...
        rendered: True when image_path is a scratch raster of a PDF page.
    """

    path: Path
    image_path: Path
    width: int
    height: int
    format: str
    rendered: bool = False

    def release(self) -> None:
        """Delete the scratch raster, if any. Never touches the caller's file."""
        if not self.rendered or self.image_path == self.path:
            return
        try:
            self.image_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete rendered page %s: %s", self.image_path, e)


def open_source(
    path: str | Path,
    scratch_dir: Path | None = None,
    dpi: int = DEFAULT_DPI,
) -> SourceImage:
    """
    Open an uploaded passport/ID image or PDF scan.

    Args:
        path: Location of the upload.
        scratch_dir: Where to write the PDF raster (default: system temp).
        dpi: Rendering resolution for PDF pages.

    Returns:
        SourceImage describing a readable raster.

    Raises:
        SourceImageError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceImageError(f"Source image not found: {path}")

    if path.suffix.lower() in PDF_SUFFIXES:
        return _render_pdf(path, scratch_dir, dpi)

    try:
        with Image.open(path) as image:
            width, height = image.size
            image_format = image.format or path.suffix.lstrip(".").upper()
            image.verify()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise SourceImageError(f"Cannot open source image {path}: {e}") from e

    return SourceImage(
        path=path,
        image_path=path,
        width=width,
        height=height,
        format=image_format,
    )


def _render_pdf(path: Path, scratch_dir: Path | None, dpi: int) -> SourceImage:
    """Render the first page of a PDF scan to a scratch PNG."""
    scratch = Path(scratch_dir) if scratch_dir else Path(tempfile.gettempdir())
    out_path = scratch / f"{path.stem}_{uuid.uuid4().hex[:8]}_page.png"

    try:
        scratch.mkdir(parents=True, exist_ok=True)
        doc = fitz.open(path)
    except Exception as e:
        raise SourceImageError(f"Failed to open PDF {path}: {e}") from e

    try:
        if len(doc) == 0:
            raise SourceImageError(f"PDF has no pages: {path}")
        if len(doc) > 1:
            logger.info("PDF %s has %d pages; using the first", path.name, len(doc))

        scale = dpi / 72.0
        pix = doc[0].get_pixmap(matrix=fitz.Matrix(scale, scale))
        pix.save(str(out_path))
        width, height = pix.width, pix.height
    except SourceImageError:
        raise
    except Exception as e:
        out_path.unlink(missing_ok=True)
        raise SourceImageError(f"Failed to render PDF {path}: {e}") from e
    finally:
        doc.close()

    logger.debug("Rendered %s page 1 at %d dpi -> %s", path.name, dpi, out_path)
    return SourceImage(
        path=path,
        image_path=out_path,
        width=width,
        height=height,
        format="PDF",
        rendered=True,
    )
