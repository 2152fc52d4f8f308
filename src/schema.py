"""
Record keys and export format definitions.

Shared constants for the shapes produced by structured data inference and
the files written by the exporters.
"""

from typing import Dict
from enum import Enum


# Fallback line record keys
LINE_NUMBER_KEY = "Line Number"
CONTENT_KEY = "Content"

# Sheet name used for spreadsheet exports
EXCEL_SHEET_NAME = "Extracted Data"


def placeholder_column_name(index: int) -> str:
    """
    Generated name for a column without a header.

    Args:
        index: 0-based column position

    Returns:
        "Column N" with N 1-based
    """
    return f"Column {index + 1}"


class ExportFormat(Enum):
    """Supported export formats."""
    TXT = "txt"
    PDF = "pdf"
    MD = "md"
    XLSX = "xlsx"

    @property
    def default_filename(self) -> str:
        return DEFAULT_FILENAMES[self]

    @classmethod
    def from_string(cls, value: str) -> "ExportFormat":
        """
        Parse a format name, accepting a leading dot and any case.

        Raises:
            ValueError: If the format is not supported
        """
        normalized = (value or "").strip().lower().lstrip(".")
        if normalized == "markdown":
            normalized = "md"
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(f.value for f in cls)
            raise ValueError(f"Unsupported export format: {value!r} (supported: {supported})")


DEFAULT_FILENAMES: Dict[ExportFormat, str] = {
    ExportFormat.TXT: "extracted-text.txt",
    ExportFormat.PDF: "extracted-text.pdf",
    ExportFormat.MD: "extracted-text.md",
    ExportFormat.XLSX: "structured-data.xlsx",
}
