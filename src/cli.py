"""
Image to Text Converter — command line entry point.

Recognizes text in an image and exports it as plain text, PDF, Markdown
and/or an Excel spreadsheet of the inferred table.
"""

import sys
import argparse
import logging
from functools import partial
from pathlib import Path
from typing import List, Optional

import config
from converter import OCRConverter
from ocr import SUPPORTED_LANGUAGES, recognize_text
from ocr.reader import ENGINE_ORDER
from schema import ExportFormat

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-to-text",
        description="Extract text from images and export in multiple formats",
    )
    parser.add_argument(
        "images",
        nargs="+",
        type=Path,
        help="Image file(s) to recognize (JPG, PNG, BMP, TIFF); only the first is used",
    )
    parser.add_argument(
        "--lang",
        default=config.OCR_LANGUAGE,
        choices=sorted(SUPPORTED_LANGUAGES),
        help="OCR language (default: %(default)s)",
    )
    parser.add_argument(
        "--engine",
        default=config.OCR_ENGINE,
        choices=("auto",) + ENGINE_ORDER,
        help="OCR engine (default: %(default)s)",
    )
    parser.add_argument(
        "--format",
        dest="formats",
        nargs="+",
        type=ExportFormat.from_string,
        default=[],
        metavar="{txt,pdf,md,xlsx}",
        help="Export format(s) to write",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(config.OUTPUT_DIR),
        help="Directory for exported files (default: %(default)s)",
    )
    parser.add_argument(
        "--print",
        dest="print_text",
        action="store_true",
        help="Print the extracted text to stdout",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="Logging level (default: %(default)s)",
    )
    return parser


def _alert(message: str) -> None:
    print(message, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        converter = OCRConverter(
            recognizer=partial(recognize_text, engine=args.engine),
            notifier=_alert,
            language=args.lang,
        )
    except ValueError as e:
        _alert(str(e))
        return 1

    try:
        converter.set_image_from_files(args.images)
    except (FileNotFoundError, ValueError) as e:
        _alert(str(e))
        return 1

    if converter.extract_text() is None:
        _alert(f"Could not extract text from {converter.image}")
        return 1

    if args.print_text:
        print(converter.text)

    failed = False
    for fmt in dict.fromkeys(args.formats):
        path = converter.export(fmt, args.output_dir)
        if path is None:
            failed = True
        else:
            print(f"Saved {fmt.value.upper()}: {path}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
