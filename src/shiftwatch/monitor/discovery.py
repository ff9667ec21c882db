"""Discovery of monitored files in the watch directory."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .models import Category

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.avif')
DEFAULT_MEDIA_NAME_FILTER = 'map'


@dataclass(frozen=True)
class MonitoredFile:
    """A local reference copy and its category."""
    name: str
    path: Path
    category: Category


def classify_filename(
    filename: str,
    image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
    media_name_filter: str = DEFAULT_MEDIA_NAME_FILTER,
) -> Optional[Category]:
    """
    Decide whether a filename is monitored, and as which category.

    Images are monitored only when their lowercase name contains
    ``media_name_filter``.

    Returns:
        Category, or None if the file is not monitored
    """
    lower = filename.lower()
    ext = Path(lower).suffix

    if ext == '.csv':
        return Category.TABULAR
    if ext == '.pdf':
        return Category.OPAQUE_DOCUMENT
    if ext in {e.lower() for e in image_extensions} and media_name_filter.lower() in lower:
        return Category.MEDIA
    return None


def discover_files(
    directory: Path,
    image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
    media_name_filter: str = DEFAULT_MEDIA_NAME_FILTER,
) -> List[MonitoredFile]:
    """
    List monitored files directly inside ``directory``, sorted by name.

    The sort order is the order in which a cycle visits items and feeds
    their fingerprints into the cycle fingerprint.

    Raises:
        OSError: If the directory cannot be listed
    """
    image_extensions = tuple(image_extensions)
    files = []

    for entry in directory.iterdir():
        if not entry.is_file():
            continue
        category = classify_filename(entry.name, image_extensions, media_name_filter)
        if category is not None:
            files.append(MonitoredFile(name=entry.name, path=entry, category=category))

    files.sort(key=lambda f: f.name)

    counts = {c.value: sum(1 for f in files if f.category is c) for c in Category}
    logger.info(f"Discovered files: {{'directory': {str(directory)!r}, 'counts': {counts}}}")

    return files
