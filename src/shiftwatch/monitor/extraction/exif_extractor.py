"""EXIF metadata extraction using Pillow."""

import io
import logging
from typing import Any, List

import filetype
from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import GPSTAGS, IFD, TAGS
from PIL.TiffImagePlugin import IFDRational

from ..errors import ExtractionError, UnsupportedFormatError, classify_error
from ..models import ExtractionOutcome, Failure, Success

logger = logging.getLogger(__name__)

# Pointer tags whose values are IFD offsets, not metadata
_IFD_POINTER_TAGS = {IFD.Exif, IFD.GPSInfo, IFD.Interop}


def extract_exif_text(data: bytes) -> str:
    """
    Render an image's EXIF metadata as text, one ``Tag: value`` line per tag.

    Main IFD tags come first, then the Exif sub-IFD, then GPS tags, each in
    tag-id order. Binary-valued tags are skipped.

    Args:
        data: Image content

    Returns:
        Newline-terminated metadata dump

    Raises:
        UnsupportedFormatError: If content is not a recognized image
        ExtractionError: If the image cannot be decoded or carries no EXIF
    """
    kind = filetype.guess(data)
    if kind is None or not kind.mime.startswith('image/'):
        raise UnsupportedFormatError("Content is not a recognized image format")

    lines: List[str] = []
    try:
        with Image.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            if not exif:
                raise ExtractionError("No EXIF data found", mime_type=kind.mime)

            for tag_id in sorted(exif):
                if tag_id in _IFD_POINTER_TAGS:
                    continue
                _append_tag(lines, TAGS.get(tag_id, str(tag_id)), exif[tag_id])

            exif_ifd = exif.get_ifd(IFD.Exif)
            for tag_id in sorted(exif_ifd):
                _append_tag(lines, TAGS.get(tag_id, str(tag_id)), exif_ifd[tag_id])

            gps_ifd = exif.get_ifd(IFD.GPSInfo)
            for tag_id in sorted(gps_ifd):
                _append_tag(lines, GPSTAGS.get(tag_id, str(tag_id)), gps_ifd[tag_id])
    except (UnidentifiedImageError, OSError) as e:
        raise ExtractionError(f"Cannot decode image: {e}", mime_type=kind.mime) from e

    return "".join(f"{line}\n" for line in lines)


def _append_tag(lines: List[str], name: str, value: Any) -> None:
    formatted = _format_value(value)
    if formatted is not None:
        lines.append(f"{name}: {formatted}")


def _format_value(value: Any):
    """Format an EXIF value for display, or None for binary values."""
    if isinstance(value, bytes):
        return None
    if isinstance(value, str):
        return value.strip("\x00 ").strip()
    if isinstance(value, IFDRational):
        return _format_rational(value)
    if isinstance(value, tuple):
        parts = [_format_value(v) for v in value]
        if any(p is None for p in parts):
            return None
        return ", ".join(parts)
    return str(value)


def _format_rational(value: IFDRational) -> str:
    if value.denominator == 0:
        return "0"
    return f"{value.numerator}/{value.denominator}"


def extract_metadata(data: bytes) -> ExtractionOutcome:
    """
    Metadata extraction channel.

    Never raises: every failure is returned as a Failure with its category.
    """
    try:
        return Success(extract_exif_text(data))
    except Exception as e:
        logger.debug(f"EXIF extraction failed: {{'error': {str(e)!r}, 'category': {classify_error(e)!r}}}")
        return Failure(str(e), classify_error(e))
