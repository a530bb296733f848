"""Tests for recognition options and the Tesseract binding."""

import shlex
from pathlib import Path

import pytesseract
import pytest

from passportscan.exceptions import RecognitionError
from passportscan.ocr.engine import (
    DOCUMENT_WHITELIST,
    NOISE_REDUCTION_OPTIONS,
    RAW_LINE_OPTIONS,
    STANDARD_OPTIONS,
    TesseractEngine,
    _output_from_data,
    options_for,
)


def tesseract_data(words, confs, lines):
    count = len(words)
    return {
        "text": words,
        "conf": confs,
        "block_num": [1] * count,
        "par_num": [1] * count,
        "line_num": lines,
    }


class TestRecognitionOptions:
    def test_standard_config_string(self):
        config = STANDARD_OPTIONS.to_tesseract_config()
        assert config.startswith("--psm 6 --oem 1")
        assert "-c textord_min_linesize=1.5" in config
        assert "-c textord_min_xheight=6.0" in config

    def test_whitelist_survives_shell_split(self):
        """pytesseract splits with shlex; the whitelist contains a space."""
        tokens = shlex.split(STANDARD_OPTIONS.to_tesseract_config())
        assert f"tessedit_char_whitelist={DOCUMENT_WHITELIST}" in tokens

    def test_noise_reduction_variables(self):
        config = NOISE_REDUCTION_OPTIONS.to_tesseract_config()
        assert "-c textord_heavy_nr=1" in config
        assert "-c tessedit_do_invert=0" in config

    def test_raw_line(self):
        config = RAW_LINE_OPTIONS.to_tesseract_config()
        assert "--psm 7" in config
        assert "textord_min_linesize" not in config

    def test_options_for_keeps_order(self):
        names = [opts.name for opts in options_for(["raw_line", "standard"])]
        assert names == ["raw_line", "standard"]


class TestOutputFromData:
    def test_lines_and_mean_confidence(self):
        data = tesseract_data(
            ["", "JOHN", "SMITH", "A1234567", " "],
            ["-1", 90, "80", 70.0, -1],
            [0, 1, 1, 2, 2],
        )
        output = _output_from_data(data)
        assert output.text == "JOHN SMITH\nA1234567"
        assert output.confidence == 80.0

    def test_nothing_recognised(self):
        output = _output_from_data(tesseract_data(["", " "], [-1, -1], [0, 0]))
        assert output.text == ""
        assert output.confidence == 0.0


class TestTesseractEngine:
    def test_recognize(self, sample_image, monkeypatch):
        captured = {}

        def fake_image_to_data(image, lang, config, output_type, timeout):
            captured.update(lang=lang, config=config, timeout=timeout)
            return tesseract_data(["USA"], [88], [1])

        monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)
        output = TesseractEngine(timeout=5).recognize(sample_image, "eng", STANDARD_OPTIONS)

        assert output.text == "USA"
        assert output.confidence == 88.0
        assert captured == {
            "lang": "eng",
            "config": STANDARD_OPTIONS.to_tesseract_config(),
            "timeout": 5,
        }

    def test_engine_failure_wrapped(self, sample_image, monkeypatch):
        def failing(*args, **kwargs):
            raise pytesseract.TesseractError(1, "boom")

        monkeypatch.setattr(pytesseract, "image_to_data", failing)
        with pytest.raises(RecognitionError, match="standard"):
            TesseractEngine().recognize(sample_image, "eng", STANDARD_OPTIONS)

    def test_unreadable_image(self, tmp_path):
        with pytest.raises(RecognitionError):
            TesseractEngine().recognize(Path(tmp_path / "gone.png"), "eng", STANDARD_OPTIONS)
