"""
Source detection and intake utilities.

Decides whether a user-supplied file can be sent to OCR and picks the file
to use when several are given at once.
"""

from typing import Optional, Sequence, Union
from pathlib import Path
from enum import Enum
import logging

from ocr.reader import is_supported_image

logger = logging.getLogger(__name__)


class SourceType(Enum):
    """Supported input source types."""
    IMAGE = "image"
    UNKNOWN = "unknown"


def detect_source_type(source: Union[str, Path]) -> SourceType:
    """
    Detect the type of an input source.

    Args:
        source: File path

    Returns:
        SourceType enum value
    """
    if not source:
        return SourceType.UNKNOWN
    if is_supported_image(source):
        return SourceType.IMAGE
    return SourceType.UNKNOWN


def select_first_file(files: Optional[Sequence[Union[str, Path]]]) -> Optional[Union[str, Path]]:
    """
    Pick the file to use from a selection or drop.

    Only the first file is used; the rest are ignored.

    Args:
        files: Selected or dropped files, possibly empty

    Returns:
        First file, or None if nothing was supplied
    """
    if not files:
        return None
    if len(files) > 1:
        logger.debug(f"[sources] {len(files)} files supplied, using the first: {files[0]}")
    return files[0]


def resolve_image_source(source: Union[str, Path]) -> Path:
    """
    Validate an image source and return it as a Path.

    Args:
        source: Path to an image file

    Returns:
        Path to the image

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a supported image type
    """
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")

    source_type = detect_source_type(path)
    if source_type != SourceType.IMAGE:
        raise ValueError(f"Unknown or unsupported source type: {path.suffix or path.name}")

    logger.debug(f"[sources] Accepted image source: {path}")
    return path
