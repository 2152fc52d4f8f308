"""
Configuration module for loading environment variables.

This module loads environment variables from .env file and exposes
configuration values for OCR, exports, logging and the optional
OpenAI Vision engine.
"""

import os
from dotenv import load_dotenv
load_dotenv()

# OCR configuration
OCR_LANGUAGE = os.getenv("OCR_LANGUAGE", "eng")
OCR_ENGINE = os.getenv("OCR_ENGINE", "auto")
TESSERACT_CMD = os.getenv("TESSERACT_CMD") or None

# Output configuration
OUTPUT_DIR = os.getenv("OUTPUT_DIR", ".")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# OpenAI Vision configuration (last engine in the auto chain, off by default)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "gpt-4o")
ENABLE_OPENAI = os.getenv("ENABLE_OPENAI", "false").lower() in ("true", "1", "yes", "on")
