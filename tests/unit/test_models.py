"""Tests for PassportScan data models."""

import json
from pathlib import Path

from passportscan.models import (
    ExtractionResult,
    ImageVariant,
    ParsedFields,
    RecognitionAttempt,
    ScoredAttempt,
    VariantKind,
)


class TestParsedFields:
    def test_defaults_are_empty(self):
        fields = ParsedFields()
        assert all(value == "" for value in fields.to_dict().values())
        assert fields.full_name == ""

    def test_json_keys(self):
        fields = ParsedFields(document_number="A1234567", date_of_birth="1990-03-15")
        data = fields.to_dict()
        assert list(data) == [
            "name",
            "surname",
            "documentNumber",
            "nationality",
            "dateOfBirth",
            "expirationDate",
        ]
        assert ParsedFields.from_dict(data) == fields

    def test_full_name(self):
        assert ParsedFields(name="JOHN", surname="SMITH").full_name == "JOHN SMITH"
        assert ParsedFields(surname="SMITH").full_name == "SMITH"


class TestScoredAttempt:
    def test_method(self):
        attempt = RecognitionAttempt(VariantKind.ADAPTIVE_THRESHOLD, "noise_reduction", "X", 42.0)
        scored = ScoredAttempt(attempt, 10.0)
        assert scored.method == "adaptive-threshold/noise_reduction"
        assert scored.confidence == 42.0
        assert scored.raw_text == "X"

    def test_empty_sentinel(self):
        empty = ScoredAttempt.empty()
        assert (empty.method, empty.confidence, empty.raw_text) == ("none", 0.0, "")


class TestExtractionResult:
    def test_failure(self):
        result = ExtractionResult.failure("Source image not found: x.jpg")
        assert not result.success
        assert result.data is None
        assert result.to_dict() == {
            "success": False,
            "data": None,
            "rawText": "",
            "confidence": 0.0,
            "method": "none",
            "error": "Source image not found: x.jpg",
        }

    def test_to_json(self):
        result = ExtractionResult(
            success=True,
            data=ParsedFields(name="JOHN"),
            raw_text="JOHN",
            confidence=81.5,
            method="original/standard",
        )
        decoded = json.loads(result.to_json())
        assert decoded["data"]["name"] == "JOHN"
        assert decoded["method"] == "original/standard"
        assert decoded["error"] is None


def test_only_original_is_original():
    assert ImageVariant(VariantKind.ORIGINAL, Path("a.png")).is_original
    assert not ImageVariant(VariantKind.UPSCALED, Path("a.png")).is_original
