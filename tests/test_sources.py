"""
Tests for image intake: source type detection and validation.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from sources import SourceType, detect_source_type, resolve_image_source, select_first_file


@pytest.mark.parametrize("source", ["scan.png", "scan.JPG", "photo.jpeg", "page.bmp", "page.tif", "page.TIFF"])
def test_image_extensions_are_detected(source):
    assert detect_source_type(source) == SourceType.IMAGE


@pytest.mark.parametrize("source", ["report.pdf", "notes.txt", "archive", ""])
def test_other_sources_are_unknown(source):
    assert detect_source_type(source) == SourceType.UNKNOWN


def test_select_first_file():
    assert select_first_file([]) is None
    assert select_first_file(None) is None
    assert select_first_file(["a.png", "b.png"]) == "a.png"


def test_resolve_image_source_accepts_existing_image(tmp_path):
    path = tmp_path / "scan.jpg"
    path.write_bytes(b"\xff\xd8\xff")

    assert resolve_image_source(str(path)) == path


def test_resolve_image_source_rejects_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        resolve_image_source(tmp_path / "missing.png")


def test_resolve_image_source_rejects_directory(tmp_path):
    folder = tmp_path / "images.png"
    folder.mkdir()

    with pytest.raises(FileNotFoundError):
        resolve_image_source(folder)


def test_resolve_image_source_rejects_non_image(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    with pytest.raises(ValueError):
        resolve_image_source(path)
