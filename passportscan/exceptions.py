"""
Exception classes for PassportScan.

All PassportScan exceptions inherit from PassportScanError,
making it easy to catch all library errors.

Most failures inside the extraction pipeline are recoverable and are
logged rather than raised (a broken variant falls back to the original
image, a failed engine call is dropped). These exceptions surface only
at the seams where recovery is not possible.

Example:
    >>> try:
    ...     source = open_source("missing.jpg")
    ... except passportscan.SourceImageError as e:
    ...     print(f"Cannot read upload: {e}")
"""


class PassportScanError(Exception):
    """
    Base exception for all PassportScan errors.

    Catch this to handle any PassportScan-specific error.
    """

    pass


class SourceImageError(PassportScanError):
    """
    Raised when the uploaded document cannot be opened at all.

    The pipeline reports this as ExtractionResult(success=False).
    """

    pass


class RecognitionError(PassportScanError):
    """
    Raised by a recognition engine when a single call fails.

    RecognitionRunner swallows it and omits the attempt.
    """

    pass


class ReferenceDataError(PassportScanError):
    """
    Raised for a missing or malformed reference data file.

    Example:
        >>> load_reference_data(Path("broken.yaml"))
        ReferenceDataError: reference data must be a mapping, got list
    """

    pass
