"""
Pytest configuration and fixtures for PassportScan tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from passportscan.ocr.engine import EngineOutput, RecognitionOptions
from passportscan.reference import ReferenceData

SAMPLE_TEXT = "PASSPORT\nJOHN SMITH\nA1234567\nUSA\n15 MAR 1990\n20 MAR 2030"


class FakeEngine:
    """
    Recognition engine double.

    `outputs` maps (variant filename suffix, config name) to an EngineOutput
    or an exception instance to raise; unmapped calls return `default`.
    Calls are recorded in order.
    """

    def __init__(self, outputs=None, default=None):
        self.outputs = outputs or {}
        self.default = default or EngineOutput(text="", confidence=0.0)
        self.calls: list[tuple[Path, str, str]] = []

    def _lookup(self, image_path: Path, config_name: str):
        for (suffix, name), value in self.outputs.items():
            if name == config_name and image_path.stem.endswith(suffix):
                return value
        return self.default

    def recognize(self, image_path: Path, language: str, options: RecognitionOptions):
        self.calls.append((Path(image_path), language, options.name))
        value = self._lookup(Path(image_path), options.name)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    """Small synthetic reference data, independent of the packaged YAML."""
    return ReferenceData(
        exact_corrections={"JNFI": "JOHN", "SIE": "DOE", "MARY": "MARY"},
        given_names=("JOHN", "MARY", "JAMES", "MARIA"),
        surnames=("SMITH", "DOE", "JOHNSON", "GARCIA"),
        nationality_keywords=("USA", "UNITED STATES", "CANADA", "FRANCE"),
        document_labels=frozenset({"PASSPORT", "NAME", "SURNAME", "NATIONALITY", "TYPE"}),
    )


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Engine returning the sample passport text for every call."""
    return FakeEngine(default=EngineOutput(text=SAMPLE_TEXT, confidence=80.0))


@pytest.fixture
def sample_image(tmp_path) -> Path:
    """A small RGB passport-like PNG with some dark strokes."""
    image = Image.new("RGB", (240, 160), "white")
    draw = ImageDraw.Draw(image)
    draw.rectangle((20, 20, 100, 60), fill="black")
    draw.line((20, 100, 220, 100), fill=(40, 40, 40), width=3)
    path = tmp_path / "upload" / "passport.png"
    path.parent.mkdir()
    image.save(path)
    return path


@pytest.fixture
def scratch_dir(tmp_path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def make_engine():
    """Factory for FakeEngine instances with custom outputs."""
    return FakeEngine
