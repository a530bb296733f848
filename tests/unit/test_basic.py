"""
Basic tests for PassportScan package structure.

These tests verify the public API is importable and
the packaged reference data is found.
"""

import pytest


class TestImports:
    """Test that the public API is importable."""

    def test_import_package(self):
        """Can import the main package."""
        import passportscan

        assert passportscan.__version__ == "0.1.0"

    def test_import_entry_points(self):
        """Can import the extraction functions."""
        from passportscan import create_pipeline, extract_batch, extract_document

        assert callable(extract_document)
        assert callable(extract_batch)
        assert callable(create_pipeline)

    def test_import_config(self):
        """Default configuration is the balanced preset."""
        from passportscan import ExtractionConfig, preset

        assert ExtractionConfig() == preset("balanced")

    def test_import_core_types(self):
        """Can import core data types."""
        from passportscan import ParsedFields, VariantKind

        assert VariantKind.ORIGINAL.value == "original"
        assert ParsedFields().to_dict()["documentNumber"] == ""

    def test_import_exceptions(self):
        """Can import exception classes."""
        from passportscan import (
            PassportScanError,
            RecognitionError,
            ReferenceDataError,
            SourceImageError,
        )

        # Verify inheritance
        assert issubclass(SourceImageError, PassportScanError)
        assert issubclass(RecognitionError, PassportScanError)
        assert issubclass(ReferenceDataError, PassportScanError)

    @pytest.mark.parametrize(
        "name",
        ["ImageVariantGenerator", "RecognitionRunner", "ResultSelector", "FieldExtractor",
         "NameCorrector", "DateNormalizer", "RecordValidator"],
    )
    def test_pipeline_stages_exported(self, name):
        import passportscan

        assert name in passportscan.__all__
        assert hasattr(passportscan, name)


def test_packaged_reference_data_found():
    from passportscan.reference import DEFAULT_REFERENCE_PATH

    assert DEFAULT_REFERENCE_PATH.is_file()
