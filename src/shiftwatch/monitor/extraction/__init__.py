"""Extraction channels for media items."""

from .exif_extractor import extract_exif_text, extract_metadata
from .ocr_extractor import extract_text, recognize_text

__all__ = [
    'extract_exif_text',
    'extract_metadata',
    'extract_text',
    'recognize_text',
]
