"""
OCR text recognition from images.

This module provides the interface to OCR engines (Tesseract, EasyOCR, AI Vision).
Engines are tried in order and the first one that returns text wins.
"""

from typing import Dict, List, Optional, Tuple, Union
from pathlib import Path
import logging
import base64
import io
import time

import config
from .models import (
    OCRError,
    OCRMetadata,
    OCRResult,
    SUPPORTED_LANGUAGES,
    validate_language,
)

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff'}

ENGINE_ORDER = ("tesseract", "easyocr", "vision")

# EasyOCR uses ISO 639-1 codes instead of Tesseract's three-letter codes
EASYOCR_LANGUAGES = {
    "eng": "en",
    "ara": "ar",
    "spa": "es",
    "fra": "fr",
    "deu": "de",
}

VISION_FALLBACK_MODEL = "gpt-4-turbo"

VISION_PROMPT = (
    "Extract all text from this image. Return only the text exactly as it "
    "appears, preserving line breaks and the spacing between columns. "
    "Do not add commentary or markdown formatting."
)


def get_supported_languages() -> Dict[str, str]:
    """Return the supported language codes mapped to display names."""
    return dict(SUPPORTED_LANGUAGES)


def is_supported_image(path: Union[str, Path]) -> bool:
    """Check the file extension against the supported image formats."""
    return Path(path).suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS


def recognize_text(
    image_path: Union[str, Path],
    language: str = "eng",
    engine: str = "auto",
    enable_vision: Optional[bool] = None
) -> OCRResult:
    """
    Recognize text in an image file using OCR.

    Args:
        image_path: Path to image file (PNG, JPG, JPEG, BMP, TIFF)
        language: Language code for OCR ("eng", "ara", "spa", "fra", "deu")
        engine: OCR engine to use ("tesseract", "easyocr", "vision", "auto")
        enable_vision: Whether Vision API may be used in "auto" mode
            (default: ENABLE_OPENAI from config)

    Returns:
        OCRResult with the recognized text and metadata

    Raises:
        FileNotFoundError: If image file does not exist
        ValueError: If image format, language or engine is unsupported
        OCRError: If every engine tried failed
    """
    image_path = Path(image_path)
    validate_language(language)

    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    if not is_supported_image(image_path):
        raise ValueError(f"Unsupported image format: {image_path.suffix}")

    if enable_vision is None:
        enable_vision = config.ENABLE_OPENAI

    engines = _select_engines(engine, enable_vision)
    logger.info(f"[OCR] Recognizing text in image: {image_path} (engine: {engine}, language: {language})")

    started = time.perf_counter()
    dimensions = _get_image_dimensions(image_path)

    text: Optional[str] = None
    used_engine: Optional[str] = None
    vision_model: Optional[str] = None
    last_error: Optional[Exception] = None

    for name in engines:
        try:
            if name == "tesseract":
                engine_text = _recognize_with_tesseract(image_path, language)
            elif name == "easyocr":
                engine_text = _recognize_with_easyocr(image_path, language)
            else:
                engine_text, vision_model = _recognize_with_vision(image_path)
        except Exception as e:
            last_error = e
            logger.debug(f"[OCR] {name} failed: {e}")
            continue

        text = engine_text
        used_engine = name
        if engine_text.strip():
            logger.info(f"[OCR] {name} used")
            break
        logger.debug(f"[OCR] {name} returned no text")

    if used_engine is None:
        raise OCRError(f"No OCR engine could process {image_path.name}: {last_error}") from last_error

    metadata = OCRMetadata(
        engine=used_engine,
        language=language,
        processing_time=time.perf_counter() - started,
        image_dimensions=dimensions,
        vision_model=vision_model if used_engine == "vision" else None
    )

    logger.info(f"[OCR] Recognized {len(text)} characters in {metadata.processing_time:.2f}s")
    return OCRResult(text=text, metadata=metadata)


def _select_engines(engine: str, enable_vision: bool) -> List[str]:
    """
    Resolve the engine argument to the ordered list of engines to try.

    Raises:
        ValueError: If the engine name is unknown
    """
    if engine == "auto":
        return [name for name in ENGINE_ORDER if name != "vision" or enable_vision]
    if engine in ENGINE_ORDER:
        return [engine]
    raise ValueError(f"Unknown OCR engine: {engine!r} (expected auto, {', '.join(ENGINE_ORDER)})")


def _recognize_with_tesseract(image_path: Path, language: str) -> str:
    """Recognize text using Tesseract OCR."""
    import pytesseract
    from PIL import Image

    if config.TESSERACT_CMD:
        pytesseract.pytesseract.tesseract_cmd = config.TESSERACT_CMD

    with Image.open(image_path) as img:
        text = pytesseract.image_to_string(img, lang=language)

    logger.debug(f"[OCR] Tesseract recognized {len(text)} characters")
    return str(text)


def _recognize_with_easyocr(image_path: Path, language: str) -> str:
    """Recognize text using EasyOCR, one detected text box (often a fragment of a line) per output line."""
    import easyocr

    reader = easyocr.Reader([EASYOCR_LANGUAGES[language]])
    results = reader.readtext(str(image_path), detail=0)

    text = "\n".join(str(line) for line in results)
    logger.debug(f"[OCR] EasyOCR recognized {len(results)} text lines")
    return text


def _recognize_with_vision(image_path: Path) -> Tuple[str, str]:
    """
    Recognize text using OpenAI Vision API.

    Args:
        image_path: Path to image file

    Returns:
        Tuple of (recognized text, vision model name)

    Raises:
        ValueError: If API key is not available
        Exception: If API call fails
    """
    if not config.OPENAI_API_KEY:
        raise ValueError("OPENAI_API_KEY not found. Set it in .env file or environment variable.")

    from openai import OpenAI
    from PIL import Image

    client = OpenAI(api_key=config.OPENAI_API_KEY)

    with Image.open(image_path) as img:
        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        img_base64 = base64.b64encode(buffered.getvalue()).decode('utf-8')

    vision_model = config.IMAGE_MODEL
    logger.info(f"[OCR Vision] Using model: {vision_model} (fallback: {VISION_FALLBACK_MODEL})")

    def create(model: str):
        return client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": VISION_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:image/png;base64,{img_base64}"}
                        }
                    ]
                }
            ],
            max_tokens=4000
        )

    try:
        response = create(vision_model)
    except Exception as e:
        if vision_model == VISION_FALLBACK_MODEL:
            raise
        logger.warning(f"[OCR Vision] Model {vision_model} failed: {e}, trying fallback {VISION_FALLBACK_MODEL}")
        vision_model = VISION_FALLBACK_MODEL
        response = create(vision_model)

    content = response.choices[0].message.content or ""
    return _strip_code_fence(content), vision_model


def _strip_code_fence(content: str) -> str:
    """Remove a surrounding markdown code block if the model added one."""
    stripped = content.strip()
    if not stripped.startswith("```"):
        return content
    body = stripped[3:]
    # Drop an optional language tag on the opening fence
    newline = body.find("\n")
    body = body[newline + 1:] if newline != -1 else ""
    if body.rstrip().endswith("```"):
        body = body.rstrip()[:-3]
    return body.strip("\n")


def _get_image_dimensions(image_path: Path) -> Optional[Tuple[int, int]]:
    """
    Get image dimensions (width, height) in pixels.

    Args:
        image_path: Path to image file

    Returns:
        Tuple of (width, height) or None if unable to read
    """
    try:
        from PIL import Image
        with Image.open(image_path) as img:
            return img.size
    except Exception as e:
        logger.warning(f"Failed to get image dimensions: {e}")
        return None
