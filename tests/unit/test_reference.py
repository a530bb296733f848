"""Tests for reference data loading."""

import dataclasses

import pytest

from passportscan.exceptions import ReferenceDataError
from passportscan.reference import (
    ReferenceData,
    default_reference_data,
    load_reference_data,
)


class TestReferenceData:
    def test_identity_corrections_dropped(self, reference):
        assert "MARY" not in reference.exact_corrections
        assert reference.exact_corrections["JNFI"] == "JOHN"

    def test_entries_normalised(self):
        data = ReferenceData(
            exact_corrections={" jnf ": "john"},
            given_names=(" john ", "JOHN", "", "mary"),
        )
        assert data.exact_corrections == {"JNF": "JOHN"}
        assert data.given_names == ("JOHN", "MARY")

    def test_reference_names_order(self, reference):
        assert reference.reference_names[:4] == ("JOHN", "MARY", "JAMES", "MARIA")
        assert reference.reference_names[-1] == "GARCIA"

    def test_non_name_words(self, reference):
        words = reference.non_name_words
        assert {"PASSPORT", "UNITED", "STATES", "USA"} <= words
        assert "JOHN" not in words

    def test_country_named_holder_not_banned(self):
        data = ReferenceData(
            given_names=("GEORGIA",),
            nationality_keywords=("USA", "GEORGIA", "UNITED STATES"),
            document_labels=("PASSPORT",),
        )
        assert "GEORGIA" not in data.non_name_words
        assert {"USA", "UNITED", "STATES", "PASSPORT"} <= data.non_name_words

    def test_immutable(self, reference):
        with pytest.raises(dataclasses.FrozenInstanceError):
            reference.given_names = ("X",)
        with pytest.raises(TypeError):
            reference.exact_corrections["NEW"] = "ENTRY"


class TestLoadReferenceData:
    def test_packaged_data(self):
        data = load_reference_data()
        assert "JOHN" in data.given_names
        assert "SMITH" in data.surnames
        assert data.exact_corrections["JNFI"] == "JOHN"
        assert "USA" in data.nationality_keywords
        assert "PASSPORT" in data.document_labels

    def test_default_is_cached(self):
        assert default_reference_data() is default_reference_data()

    def test_custom_file(self, tmp_path):
        path = tmp_path / "reference.yaml"
        path.write_text(
            "given_names: [ANNA]\n"
            "surnames: [KOWALSKA]\n"
            "nationality_keywords: [POLAND]\n",
            encoding="utf-8",
        )
        data = load_reference_data(path)
        assert data.reference_names == ("ANNA", "KOWALSKA")
        assert data.exact_corrections == {}
        assert data.document_labels == frozenset()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError, match="Cannot read"):
            load_reference_data(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("given_names: [unclosed\n", encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="Malformed"):
            load_reference_data(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- JOHN\n- MARY\n", encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="must be a mapping"):
            load_reference_data(path)

    def test_section_shape_checked(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("given_names: JOHN\n", encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="given_names must be a list"):
            load_reference_data(path)
