"""
Structured data inference for raw OCR text.

This module decides whether a block of recognized text looks like a table
and reshapes it into row dictionaries suitable for spreadsheet export.
Tables are detected heuristically from the linear text only (no layout or
bounding-box information):

- Lines with a tab, a pipe, or at least three whitespace-separated words are
  treated as candidate table rows
- The first candidate row supplies the column headers
- Every later candidate row becomes one record keyed by those headers

When the text does not look tabular, each non-blank line becomes a
{"Line Number", "Content"} record instead.
"""

import re
import logging
from typing import Any, Dict, List, Pattern, Union

from schema import LINE_NUMBER_KEY, CONTENT_KEY, placeholder_column_name

logger = logging.getLogger(__name__)

# Three or more word tokens separated by whitespace runs
MULTI_WORD_PATTERN = re.compile(r'(?:\w+\s+){2,}\w+')

# Tab or pipe anywhere in the line
SEPARATOR_CHAR_PATTERN = re.compile(r'[|\t]')

# Two or more consecutive whitespace characters
MULTI_SPACE_PATTERN = re.compile(r'\s{2,}')

TAB = '\t'
PIPE = '|'
SINGLE_SPACE = ' '

Separator = Union[str, Pattern[str]]

MIN_CANDIDATE_ROWS = 2
MIN_HEADERS = 2


def split_lines(raw_text: str) -> List[str]:
    """
    Split raw text into lines, dropping empty and whitespace-only lines.

    Args:
        raw_text: Verbatim OCR output

    Returns:
        Non-blank lines in original order (content is not trimmed)
    """
    if not raw_text:
        return []
    return [line for line in raw_text.split('\n') if line.strip() != '']


def is_candidate_row(line: str) -> bool:
    """Check whether a line looks like it could belong to a table."""
    return bool(MULTI_WORD_PATTERN.search(line) or SEPARATOR_CHAR_PATTERN.search(line))


def find_candidate_rows(lines: List[str]) -> List[str]:
    """
    Filter lines down to likely table rows, preserving order.

    Args:
        lines: Non-blank lines from split_lines()

    Returns:
        Lines that contain a tab or pipe, or three or more words
    """
    return [line for line in lines if is_candidate_row(line)]


def detect_separator(line: str) -> Separator:
    """
    Pick the column separator for a table from its first row.

    Priority: tab > pipe > run of two or more spaces > single space.

    Args:
        line: First candidate row

    Returns:
        Separator string, or the compiled multi-space pattern
    """
    if TAB in line:
        return TAB
    if PIPE in line:
        return PIPE
    if MULTI_SPACE_PATTERN.search(line):
        return MULTI_SPACE_PATTERN
    return SINGLE_SPACE


def split_on_separator(line: str, separator: Separator) -> List[str]:
    """Split a line on the separator and trim each token (empty tokens are kept)."""
    if isinstance(separator, str):
        parts = line.split(separator)
    else:
        parts = separator.split(line)
    return [part.strip() for part in parts]


def extract_headers(line: str, separator: Separator) -> List[str]:
    """
    Extract column headers from the header row.

    Duplicate names are preserved; empty tokens are dropped.

    Args:
        line: Header row (first candidate row)
        separator: Separator from detect_separator()

    Returns:
        Ordered list of non-empty header names
    """
    return [token for token in split_on_separator(line, separator) if token != '']


def build_row_records(
    rows: List[str],
    headers: List[str],
    separator: Separator
) -> List[Dict[str, Any]]:
    """
    Convert data rows into dictionaries keyed by header.

    Values beyond the header count are discarded and missing values become
    empty strings. When two headers share a name the later column overwrites
    the earlier one in the record.

    Args:
        rows: Candidate rows after the header row
        headers: Column names from extract_headers()
        separator: Separator used for the header row

    Returns:
        One dictionary per data row
    """
    records: List[Dict[str, Any]] = []
    for row in rows:
        values = split_on_separator(row, separator)
        record: Dict[str, Any] = {}
        for index, header in enumerate(headers):
            key = header or placeholder_column_name(index)
            record[key] = values[index] if index < len(values) else ''
        records.append(record)
    return records


def build_line_records(lines: List[str]) -> List[Dict[str, Any]]:
    """Fallback shape: one {"Line Number", "Content"} record per line, numbered from 1."""
    return [
        {LINE_NUMBER_KEY: number, CONTENT_KEY: line}
        for number, line in enumerate(lines, 1)
    ]


def infer_structured_data(raw_text: str) -> List[Dict[str, Any]]:
    """
    Infer tabular structure from raw OCR text.

    The table path is taken only when there are at least two candidate rows
    and the header row yields at least two column names. Otherwise every
    non-blank line is returned as a line record. Blank input gives an empty
    list.

    Args:
        raw_text: Verbatim OCR output

    Returns:
        List of row dictionaries (table) or line dictionaries (fallback)
    """
    lines = split_lines(raw_text)
    if not lines:
        logger.debug("[inference] No non-blank lines in text")
        return []

    candidates = find_candidate_rows(lines)

    if len(candidates) >= MIN_CANDIDATE_ROWS:
        separator = detect_separator(candidates[0])
        headers = extract_headers(candidates[0], separator)

        if len(headers) >= MIN_HEADERS:
            records = build_row_records(candidates[1:], headers, separator)
            logger.debug(f"[inference] Table detected: {len(headers)} columns, {len(records)} rows")
            return records

        logger.debug(f"[inference] Header row has {len(headers)} column(s), falling back to lines")
    else:
        logger.debug(f"[inference] Only {len(candidates)} candidate row(s), falling back to lines")

    return build_line_records(lines)
