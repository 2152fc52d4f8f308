"""
OCR module for recognizing text in images.

This module provides OCR capabilities for the converter, supporting:
- Image files (PNG, JPG, JPEG, BMP, TIFF)
- Tesseract, EasyOCR and OpenAI Vision engines
- English, Arabic, Spanish, French and German
"""

from .reader import recognize_text, get_supported_languages, is_supported_image
from .models import (
    OCRResult,
    OCRMetadata,
    OCRError,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
    validate_language,
)

__all__ = [
    "recognize_text",
    "get_supported_languages",
    "is_supported_image",
    "OCRResult",
    "OCRMetadata",
    "OCRError",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    "validate_language",
]
