"""
Tests for OCR recognition with the engines replaced by fakes.
"""

import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from ocr import reader
from ocr.models import OCRError, OCRResult


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "scan.png"
    Image.new("RGB", (20, 10), "white").save(path)
    return path


@pytest.fixture
def failing_engines(monkeypatch):
    """Make every engine raise unless a test overrides it."""
    def fail(*args, **kwargs):
        raise RuntimeError("engine unavailable")

    monkeypatch.setattr(reader, "_recognize_with_tesseract", fail)
    monkeypatch.setattr(reader, "_recognize_with_easyocr", fail)
    monkeypatch.setattr(reader, "_recognize_with_vision", fail)


def test_unsupported_language_is_rejected(image_path):
    with pytest.raises(ValueError):
        reader.recognize_text(image_path, language="xyz")


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(FileNotFoundError):
        reader.recognize_text(tmp_path / "missing.png")


def test_unsupported_extension_is_rejected(tmp_path):
    path = tmp_path / "scan.gif"
    path.write_bytes(b"GIF89a")

    with pytest.raises(ValueError):
        reader.recognize_text(path)


def test_unknown_engine_is_rejected(image_path):
    with pytest.raises(ValueError):
        reader.recognize_text(image_path, engine="magic")


def test_tesseract_text_is_returned_verbatim(image_path, monkeypatch):
    import pytesseract

    calls = {}

    def fake_image_to_string(img, lang=None):
        calls["lang"] = lang
        return "Name\tAge\n  Alice\t30\n"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    result = reader.recognize_text(image_path, language="fra", engine="tesseract")

    assert isinstance(result, OCRResult)
    assert result.text == "Name\tAge\n  Alice\t30\n"
    assert calls["lang"] == "fra"
    assert result.metadata.engine == "tesseract"
    assert result.metadata.language == "fra"
    assert result.metadata.image_dimensions == (20, 10)


def test_auto_falls_back_to_easyocr(image_path, monkeypatch, failing_engines):
    monkeypatch.setattr(reader, "_recognize_with_easyocr", lambda path, language: "from easyocr")

    result = reader.recognize_text(image_path, enable_vision=False)

    assert result.text == "from easyocr"
    assert result.metadata.engine == "easyocr"


def test_empty_text_moves_on_to_next_engine(image_path, monkeypatch, failing_engines):
    monkeypatch.setattr(reader, "_recognize_with_tesseract", lambda path, language: "   ")
    monkeypatch.setattr(reader, "_recognize_with_easyocr", lambda path, language: "found it")

    result = reader.recognize_text(image_path, enable_vision=False)

    assert result.metadata.engine == "easyocr"
    assert result.text == "found it"


def test_blank_image_returns_empty_text_instead_of_failing(image_path, monkeypatch, failing_engines):
    monkeypatch.setattr(reader, "_recognize_with_tesseract", lambda path, language: "")

    result = reader.recognize_text(image_path, enable_vision=False)

    assert result.text == ""
    assert result.metadata.engine == "tesseract"


def test_all_engines_failing_raises_ocr_error(image_path, failing_engines):
    with pytest.raises(OCRError):
        reader.recognize_text(image_path, enable_vision=True)


def test_vision_is_skipped_in_auto_mode_unless_enabled(image_path, monkeypatch, failing_engines):
    called = []

    def fake_vision(path):
        called.append(path)
        return "vision text", "gpt-4o"

    monkeypatch.setattr(reader, "_recognize_with_vision", fake_vision)

    with pytest.raises(OCRError):
        reader.recognize_text(image_path, enable_vision=False)
    assert called == []

    result = reader.recognize_text(image_path, enable_vision=True)
    assert result.text == "vision text"
    assert result.metadata.engine == "vision"
    assert result.metadata.vision_model == "gpt-4o"


def test_vision_requires_api_key(image_path, monkeypatch):
    monkeypatch.setattr(reader.config, "OPENAI_API_KEY", None)

    with pytest.raises(ValueError):
        reader._recognize_with_vision(image_path)


def test_easyocr_language_codes_cover_supported_languages():
    assert set(reader.EASYOCR_LANGUAGES) == set(reader.get_supported_languages())


@pytest.mark.parametrize("content,expected", [
    ("```\nhello\nworld\n```", "hello\nworld"),
    ("```text\nhello\n```", "hello"),
    ("plain text", "plain text"),
])
def test_strip_code_fence(content, expected):
    assert reader._strip_code_fence(content) == expected


def test_supported_languages():
    assert reader.get_supported_languages() == {
        "eng": "English",
        "ara": "Arabic",
        "spa": "Spanish",
        "fra": "French",
        "deu": "German",
    }
