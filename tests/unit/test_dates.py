"""Tests for date normalisation."""

from datetime import date

import pytest

from passportscan.extractors.dates import (
    DateNormalizer,
    find_dates,
    normalize_date,
    parse_iso_date,
)


class TestDateNormalizer:
    """Tests for DateNormalizer.normalize()."""

    @pytest.fixture
    def normalizer(self):
        return DateNormalizer()

    def test_text_month(self, normalizer):
        assert normalizer.normalize("01 JAN 1970") == "1970-01-01"
        assert normalizer.normalize("15 MAR 1990") == "1990-03-15"

    def test_text_month_case_insensitive(self, normalizer):
        assert normalizer.normalize("5 mar 1990") == "1990-03-05"

    @pytest.mark.parametrize("text", ["15/03/1990", "15-03-1990", "15.03.1990"])
    def test_numeric_separators(self, normalizer, text):
        assert normalizer.normalize(text) == "1990-03-15"

    def test_numeric_is_day_first(self, normalizer):
        """03/04 is the 3rd of April, never March 4th."""
        assert normalizer.normalize("03/04/2020") == "2020-04-03"

    def test_single_digit_parts(self, normalizer):
        assert normalizer.normalize("1/6/1985") == "1985-06-01"

    @pytest.mark.parametrize(
        "text",
        ["31/02/2020", "13/13/2020", "00/01/2020", "30 FEB 2021", "29/02/2019"],
    )
    def test_impossible_dates_are_empty(self, normalizer, text):
        assert normalizer.normalize(text) == ""

    def test_leap_day(self, normalizer):
        assert normalizer.normalize("29/02/2020") == "2020-02-29"

    @pytest.mark.parametrize("text", ["", "hello", "1990", "15 XYZ 1990"])
    def test_unparseable_is_empty(self, normalizer, text):
        assert normalizer.normalize(text) == ""

    def test_date_embedded_in_text(self, normalizer):
        assert normalizer.normalize("DOB: 15 MAR 1990 M") == "1990-03-15"

    def test_module_shortcut(self):
        assert normalize_date("20 MAR 2030") == "2030-03-20"


class TestFindDates:
    """Tests for locating dates inside OCR text."""

    def test_order_of_appearance(self):
        text = "DOB 15 MAR 1990\nEXP 20/03/2030"
        assert find_dates(text) == ["15 MAR 1990", "20/03/2030"]

    def test_no_dates(self):
        assert find_dates("JOHN SMITH A1234567") == []

    def test_text_month_does_not_span_lines(self):
        assert find_dates("15\nMAR\n1990") == []


class TestParseIsoDate:
    def test_valid(self):
        assert parse_iso_date("1990-03-15") == date(1990, 3, 15)

    def test_empty_and_invalid(self):
        assert parse_iso_date("") is None
        assert parse_iso_date("2020-02-30") is None
