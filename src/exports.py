"""
Export recognized text to files.

Plain text, Markdown and PDF exports write the raw OCR text verbatim.
The Excel export writes the row dictionaries produced by structured data
inference to a single sheet.

Every export is written to a temporary file next to the target and moved
into place only once complete, so a failed export leaves no partial file.
"""

from typing import Any, Callable, Dict, List, Union
from pathlib import Path
import logging
import os

import fitz  # PyMuPDF
import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from schema import EXCEL_SHEET_NAME

logger = logging.getLogger(__name__)

# 10 mm page margin, in PDF points
PDF_MARGIN = 10 / 25.4 * 72
PDF_FONT_SIZE = 16


class ExportError(Exception):
    """Raised when an export cannot be produced."""
    pass


def _write_atomically(path: Union[str, Path], write: Callable[[Path], None]) -> Path:
    """
    Run a writer against a temporary file and move it over the target.

    Args:
        path: Final output path (parent directories are created)
        write: Callable that writes the complete file to the path it is given

    Returns:
        Final output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    try:
        write(tmp_path)
        os.replace(tmp_path, path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
    return path


def _write_text_file(text: str, path: Union[str, Path], label: str) -> Path:
    def write(target: Path) -> None:
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    written = _write_atomically(path, write)
    logger.info(f"[export] Wrote {label} ({len(text)} chars): {written}")
    return written


def export_text(text: str, path: Union[str, Path]) -> Path:
    """Write the raw text verbatim to a .txt file."""
    return _write_text_file(text, path, "text")


def export_markdown(text: str, path: Union[str, Path]) -> Path:
    """Write the raw text verbatim to a .md file."""
    return _write_text_file(text, path, "markdown")


def export_pdf(text: str, path: Union[str, Path]) -> Path:
    """
    Write the raw text to a single-page PDF.

    The text starts at a 10 mm margin from the top-left corner; lines are
    not wrapped.

    Args:
        text: Raw OCR text
        path: Output .pdf path

    Returns:
        Path of the written file
    """
    def write(target: Path) -> None:
        doc = fitz.open()
        try:
            page = doc.new_page()
            page.insert_text(
                fitz.Point(PDF_MARGIN, PDF_MARGIN),
                text,
                fontsize=PDF_FONT_SIZE,
                fontname="helv"
            )
            doc.save(str(target))
        finally:
            doc.close()

    written = _write_atomically(path, write)
    logger.info(f"[export] Wrote PDF: {written}")
    return written


def _column_order(rows: List[Dict[str, Any]]) -> List[str]:
    """Column names in first-seen order across all rows."""
    columns: List[str] = []
    seen = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def calculate_column_widths(rows: List[Dict[str, Any]]) -> List[int]:
    """
    Calculate spreadsheet column widths in characters.

    Each width is the longer of the column name and the longest value
    in that column.

    Args:
        rows: Row dictionaries

    Returns:
        One width per column, in column order
    """
    widths = []
    for column in _column_order(rows):
        cell_lengths = [len(str(row.get(column) or "")) for row in rows]
        widths.append(max([len(str(column))] + cell_lengths))
    return widths


def _clean_cell_value(value: Any) -> Any:
    """Strip control characters (e.g. Tesseract's page-break form feed) that worksheets reject."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _keep_formula_text_as_strings(worksheet) -> None:
    """Store recognized text starting with "=" as text, not as a formula."""
    for row in worksheet.iter_rows():
        for cell in row:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"


def export_excel(
    rows: List[Dict[str, Any]],
    path: Union[str, Path],
    sheet_name: str = EXCEL_SHEET_NAME
) -> Path:
    """
    Write row dictionaries to an .xlsx workbook with a single sheet.

    Args:
        rows: Row dictionaries from structured data inference
        path: Output .xlsx path
        sheet_name: Worksheet name

    Returns:
        Path of the written file

    Raises:
        ExportError: If there are no rows to export
    """
    if not rows:
        raise ExportError("No structured data found to export")

    rows = [
        {_clean_cell_value(key): _clean_cell_value(value) for key, value in row.items()}
        for row in rows
    ]
    columns = _column_order(rows)
    df = pd.DataFrame(rows, columns=columns)
    widths = calculate_column_widths(rows)

    def write(target: Path) -> None:
        with pd.ExcelWriter(target, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            worksheet = writer.sheets[sheet_name]
            _keep_formula_text_as_strings(worksheet)
            for index, width in enumerate(widths, 1):
                worksheet.column_dimensions[get_column_letter(index)].width = width

    written = _write_atomically(path, write)
    logger.info(f"[export] Wrote spreadsheet ({len(rows)} rows x {len(columns)} columns): {written}")
    return written
