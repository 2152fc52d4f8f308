"""
Tests for the image-to-text command line entry point.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import cli
from ocr.models import OCRError


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "scan.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


def fake_recognizer(text):
    calls = []

    def recognize(image, language, engine="auto"):
        calls.append((image, language, engine))
        return text

    recognize.calls = calls
    return recognize


def test_cli_prints_and_exports(image_path, tmp_path, monkeypatch, capsys):
    recognize = fake_recognizer("A\tB\n1\t2")
    monkeypatch.setattr(cli, "recognize_text", recognize)
    out_dir = tmp_path / "out"

    exit_code = cli.main([
        str(image_path), "--lang", "spa", "--engine", "tesseract",
        "--format", "txt", "xlsx", "--output-dir", str(out_dir), "--print",
    ])

    assert exit_code == 0
    assert recognize.calls == [(image_path, "spa", "tesseract")]
    assert (out_dir / "extracted-text.txt").read_text(encoding="utf-8") == "A\tB\n1\t2"
    assert (out_dir / "structured-data.xlsx").exists()
    assert "A\tB\n1\t2" in capsys.readouterr().out


def test_cli_uses_first_image_only(image_path, tmp_path, monkeypatch):
    recognize = fake_recognizer("hello")
    monkeypatch.setattr(cli, "recognize_text", recognize)

    exit_code = cli.main([str(image_path), str(tmp_path / "other.png")])

    assert exit_code == 0
    assert [call[0] for call in recognize.calls] == [image_path]


def test_cli_missing_image(tmp_path, capsys):
    exit_code = cli.main([str(tmp_path / "missing.png")])

    assert exit_code == 1
    assert "not found" in capsys.readouterr().err


def test_cli_recognition_failure(image_path, monkeypatch, capsys):
    def broken(image, language, engine="auto"):
        raise OCRError("no engine")

    monkeypatch.setattr(cli, "recognize_text", broken)

    assert cli.main([str(image_path)]) == 1
    assert "Could not extract text" in capsys.readouterr().err


def test_cli_empty_spreadsheet_is_an_error(image_path, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(cli, "recognize_text", fake_recognizer("   \n"))

    exit_code = cli.main([str(image_path), "--format", "xlsx", "--output-dir", str(tmp_path)])

    assert exit_code == 1
    assert "No structured data found to export" in capsys.readouterr().err
    assert not (tmp_path / "structured-data.xlsx").exists()


def test_cli_rejects_unknown_language(image_path):
    with pytest.raises(SystemExit):
        cli.main([str(image_path), "--lang", "jpn"])


def test_cli_unsupported_configured_language(image_path, monkeypatch, capsys):
    monkeypatch.setattr(cli.config, "OCR_LANGUAGE", "xx")
    monkeypatch.setattr(cli, "recognize_text", fake_recognizer("hello"))

    assert cli.main([str(image_path)]) == 1
    assert "Unsupported OCR language" in capsys.readouterr().err
