"""
Data models for OCR processing.

Defines the recognition result, its metadata, and the set of languages
the recognizer accepts.
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass, field


# Tesseract language codes offered to the user, with display names
SUPPORTED_LANGUAGES: Dict[str, str] = {
    "eng": "English",
    "ara": "Arabic",
    "spa": "Spanish",
    "fra": "French",
    "deu": "German",
}

DEFAULT_LANGUAGE = "eng"


class OCRError(RuntimeError):
    """Raised when no OCR engine could recognize text in an image."""
    pass


def validate_language(language: str) -> str:
    """
    Check that a language code is one of the supported ones.

    Args:
        language: Tesseract-style language code (e.g. "eng")

    Returns:
        The language code unchanged

    Raises:
        ValueError: If the language is not supported
    """
    if language not in SUPPORTED_LANGUAGES:
        supported = ", ".join(SUPPORTED_LANGUAGES)
        raise ValueError(f"Unsupported OCR language: {language!r} (supported: {supported})")
    return language


@dataclass
class OCRMetadata:
    """
    Metadata about the OCR extraction process.

    Attributes:
        engine: OCR engine used ("tesseract", "easyocr", "vision")
        language: Language code passed to the engine
        processing_time: Time taken for OCR in seconds
        image_dimensions: Tuple of (width, height) in pixels
        vision_model: Vision API model used if the Vision engine was used
    """
    engine: str = "none"
    language: str = DEFAULT_LANGUAGE
    processing_time: float = 0.0
    image_dimensions: Optional[Tuple[int, int]] = None
    vision_model: Optional[str] = None


@dataclass
class OCRResult:
    """
    Complete OCR extraction result.

    Attributes:
        text: Full recognized text, verbatim from the engine
        metadata: OCR processing metadata
    """
    text: str
    metadata: OCRMetadata = field(default_factory=OCRMetadata)
