"""
Image-to-text conversion session.

Holds the state of one conversion (selected image, OCR language, extracted
text) and wires the recognizer, structured data inference and exporters
together. Recognition failures leave the previous text untouched; export
failures are reported through the notifier and never leave a partial file.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Union
from pathlib import Path
import logging

import config
from exports import (
    ExportError,
    export_excel,
    export_markdown,
    export_pdf,
    export_text,
)
from inference import infer_structured_data
from ocr import OCRResult, recognize_text, validate_language
from schema import ExportFormat
from sources import resolve_image_source, select_first_file

logger = logging.getLogger(__name__)

Recognizer = Callable[[Path, str], Union[str, OCRResult]]
Notifier = Callable[[str], None]

NO_TEXT_MESSAGE = "No extracted text to export"
NO_STRUCTURED_DATA_MESSAGE = "No structured data found to export"
EXCEL_FAILED_MESSAGE = "Failed to generate Excel file. Please try again."

TEXT_EXPORTERS: Dict[ExportFormat, Callable[[str, Path], Path]] = {
    ExportFormat.TXT: export_text,
    ExportFormat.PDF: export_pdf,
    ExportFormat.MD: export_markdown,
}


def _default_recognizer(image: Path, language: str) -> OCRResult:
    return recognize_text(image, language, engine=config.OCR_ENGINE)


def _log_alert(message: str) -> None:
    logger.warning(f"[alert] {message}")


class OCRConverter:
    """
    One image-to-text conversion session.

    Attributes:
        image: Path of the selected image, or None
        language: OCR language code
        text: Most recently extracted text ("" until extraction succeeds)
        loading: True while recognition is running
        last_result: OCRResult from the last successful extraction, if the
            recognizer returned one
    """

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        notifier: Optional[Notifier] = None,
        language: Optional[str] = None
    ):
        self.recognizer = recognizer or _default_recognizer
        self.notifier = notifier or _log_alert
        self.language = validate_language(language or config.OCR_LANGUAGE)
        self.image: Optional[Path] = None
        self.text = ""
        self.loading = False
        self.last_result: Optional[OCRResult] = None

    def set_image(self, source: Union[str, Path]) -> Path:
        """
        Select the image to recognize.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a supported image
        """
        self.image = resolve_image_source(source)
        logger.info(f"[converter] Image selected: {self.image}")
        return self.image

    def set_image_from_files(self, files: Sequence[Union[str, Path]]) -> Optional[Path]:
        """Select the first of several chosen or dropped files; no-op when empty."""
        first = select_first_file(files)
        if first is None:
            return None
        return self.set_image(first)

    def set_language(self, language: str) -> str:
        """
        Change the OCR language.

        Raises:
            ValueError: If the language is not supported
        """
        self.language = validate_language(language)
        return self.language

    def extract_text(self) -> Optional[str]:
        """
        Run OCR on the selected image and store the text.

        Returns:
            The extracted text, or None if no image is selected or
            recognition failed (the previous text is kept in that case)
        """
        if self.image is None:
            logger.debug("[converter] No image selected, nothing to extract")
            return None

        self.loading = True
        try:
            result = self.recognizer(self.image, self.language)
        except Exception as e:
            logger.error(f"[converter] Error extracting text: {e}")
            return None
        finally:
            self.loading = False

        if isinstance(result, OCRResult):
            self.last_result = result
            self.text = result.text
        else:
            self.last_result = None
            self.text = str(result)

        logger.info(f"[converter] Extracted {len(self.text)} characters from {self.image.name}")
        return self.text

    def structured_data(self) -> List[Dict[str, Any]]:
        """Rows inferred from the current text."""
        return infer_structured_data(self.text)

    def _output_path(self, fmt: ExportFormat, output_dir: Optional[Union[str, Path]]) -> Path:
        return Path(output_dir or config.OUTPUT_DIR) / fmt.default_filename

    def _download_text_format(self, fmt: ExportFormat, output_dir: Optional[Union[str, Path]]) -> Optional[Path]:
        if not self.text:
            self.notifier(NO_TEXT_MESSAGE)
            return None

        path = self._output_path(fmt, output_dir)
        try:
            return TEXT_EXPORTERS[fmt](self.text, path)
        except Exception as e:
            logger.error(f"[converter] Error generating {fmt.value} file: {e}")
            self.notifier(f"Failed to generate {fmt.value.upper()} file. Please try again.")
            return None

    def download_text(self, output_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Save the extracted text as extracted-text.txt."""
        return self._download_text_format(ExportFormat.TXT, output_dir)

    def download_pdf(self, output_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Save the extracted text as extracted-text.pdf."""
        return self._download_text_format(ExportFormat.PDF, output_dir)

    def download_markdown(self, output_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Save the extracted text as extracted-text.md."""
        return self._download_text_format(ExportFormat.MD, output_dir)

    def download_excel(self, output_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Infer structured data from the text and save it as structured-data.xlsx.

        An empty result is reported through the notifier without writing
        anything, as is any failure while generating the workbook.
        """
        rows = self.structured_data()
        if not rows:
            self.notifier(NO_STRUCTURED_DATA_MESSAGE)
            return None

        path = self._output_path(ExportFormat.XLSX, output_dir)
        try:
            return export_excel(rows, path)
        except ExportError as e:
            self.notifier(str(e))
            return None
        except Exception as e:
            logger.error(f"[converter] Error generating Excel file: {e}")
            self.notifier(EXCEL_FAILED_MESSAGE)
            return None

    def export(self, fmt: Union[ExportFormat, str], output_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Export the current text in the given format."""
        if not isinstance(fmt, ExportFormat):
            fmt = ExportFormat.from_string(fmt)
        if fmt == ExportFormat.XLSX:
            return self.download_excel(output_dir)
        return self._download_text_format(fmt, output_dir)
