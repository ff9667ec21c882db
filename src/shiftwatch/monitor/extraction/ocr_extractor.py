"""Recognized-text extraction using the Tesseract command-line tool."""

import logging
import subprocess
import tempfile
from pathlib import Path

from ..errors import ExtractionError, ToolNotFoundError, UnsupportedFormatError, classify_error
from ..models import ExtractionOutcome, Failure, Success

logger = logging.getLogger(__name__)

# Container formats tesseract cannot read
UNSUPPORTED_OCR_EXTENSIONS = {'.avif'}

OCR_TIMEOUT_SECONDS = 60


def extract_text(data: bytes, filename: str, timeout: float = OCR_TIMEOUT_SECONDS) -> str:
    """
    Run OCR over image content.

    The content is written to a temporary file named after ``filename`` so
    tesseract can pick its decoder by extension.

    Args:
        data: Image content
        filename: Original filename (used for its extension)
        timeout: Seconds before tesseract is abandoned

    Returns:
        Recognized text as printed by tesseract

    Raises:
        UnsupportedFormatError: If the format is declared unsupported for OCR
        ToolNotFoundError: If tesseract is not installed
        ExtractionError: If tesseract fails or times out
    """
    ext = Path(filename).suffix.lower()
    if ext in UNSUPPORTED_OCR_EXTENSIONS:
        raise UnsupportedFormatError(
            f"{ext.lstrip('.').upper()} format not supported for OCR",
            extension=ext,
        )

    with tempfile.TemporaryDirectory(prefix="shiftwatch-ocr-") as temp_dir:
        image_path = Path(temp_dir) / f"image{ext}"
        image_path.write_bytes(data)

        try:
            result = subprocess.run(
                ['tesseract', str(image_path), 'stdout'],
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError("tesseract not found - OCR extraction disabled") from e
        except subprocess.CalledProcessError as e:
            raise ExtractionError(
                f"tesseract failed: {(e.stderr or '').strip() or f'exit code {e.returncode}'}",
                returncode=e.returncode,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionError(f"tesseract timed out after {timeout}s") from e

    return result.stdout


def recognize_text(data: bytes, filename: str, enabled: bool = True) -> ExtractionOutcome:
    """
    Recognized-text extraction channel.

    Never raises: every failure is returned as a Failure with its category.
    """
    if not enabled:
        return Failure("OCR disabled by configuration", 'disabled')

    try:
        return Success(extract_text(data, filename))
    except Exception as e:
        logger.debug(f"OCR extraction failed: {{'file': {filename!r}, 'error': {str(e)!r}, 'category': {classify_error(e)!r}}}")
        return Failure(str(e), classify_error(e))
