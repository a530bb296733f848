"""Tests for the passportscan command line."""

import json

import pytest

from passportscan import cli


@pytest.fixture
def patched_cli(monkeypatch, fake_engine):
    """Route the CLI's pipelines through the fake engine."""
    real_create = cli.create_pipeline

    def create(*args, **kwargs):
        return real_create(*args, engine=fake_engine, **kwargs)

    monkeypatch.setattr(cli, "create_pipeline", create)
    monkeypatch.setattr(cli, "detect_tesseract", lambda: False)
    return fake_engine


def read_reports(capsys):
    out = capsys.readouterr().out
    return [json.loads(line) for line in out.splitlines() if line.strip()]


class TestExtractCommand:
    def test_single_file(self, patched_cli, sample_image, scratch_dir, capsys):
        code = cli.main(["extract", str(sample_image), "--scratch-dir", str(scratch_dir)])

        assert code == 0
        [report] = read_reports(capsys)
        assert report["file"] == str(sample_image)
        assert report["success"] is True
        assert report["data"]["documentNumber"] == "A1234567"
        assert report["data"]["dateOfBirth"] == "1990-03-15"
        assert report["validation"]["isValid"] is True
        assert report["status"]["ageCategory"] == "adult"
        assert list(scratch_dir.iterdir()) == []

    def test_failure_sets_exit_code(self, patched_cli, sample_image, tmp_path, capsys):
        missing = tmp_path / "missing.jpg"
        code = cli.main(["extract", str(sample_image), str(missing), "--preset", "fast"])

        assert code == 1
        reports = read_reports(capsys)
        assert [r["success"] for r in reports] == [True, False]
        assert reports[1]["validation"] is None
        assert reports[1]["status"] is None

    def test_preset_controls_attempts(self, patched_cli, sample_image, capsys):
        cli.main(["extract", str(sample_image), "--preset", "fast"])
        assert len(patched_cli.calls) == 2

    def test_language_passed_through(self, patched_cli, sample_image, capsys):
        cli.main(["extract", str(sample_image), "--preset", "fast", "--lang", "deu"])
        assert {call[1] for call in patched_cli.calls} == {"deu"}

    def test_unknown_preset_rejected(self, sample_image):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["extract", str(sample_image), "--preset", "turbo"])
        assert excinfo.value.code == 2


def test_info_command(patched_cli, capsys):
    assert cli.main(["info", "--preset", "thorough"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["attempts_per_document"] == 21
    assert info["tesseract_available"] is False
