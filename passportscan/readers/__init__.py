"""Upload reading: image validation and PDF rasterisation (PyMuPDF)."""

from passportscan.readers.source import SourceImage, open_source

__all__ = [
    "SourceImage",
    "open_source",
]
