"""Size bounding and special variants of reports handed to the shift log."""

from .models import DiffReport

DEFAULT_MAX_REPORT_CHARS = 500
TRUNCATION_MARKER = "... (truncated)"


def truncate_report(text: str, max_chars: int = DEFAULT_MAX_REPORT_CHARS) -> str:
    """
    Bound a rendered report to ``max_chars`` characters.

    Text longer than the bound is cut and ends with ``TRUNCATION_MARKER``;
    the result, marker included, never exceeds ``max_chars``.

    Raises:
        ValueError: If the bound cannot hold the marker, or text is empty
    """
    if not text:
        raise ValueError("Refusing to hand off an empty report")
    if max_chars <= len(TRUNCATION_MARKER):
        raise ValueError(f"max_chars must exceed {len(TRUNCATION_MARKER)}, got {max_chars}")
    if len(text) <= max_chars:
        return text
    return text[:max_chars - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def unavailable_report(name: str, status_code: int, url: str) -> DiffReport:
    """Report for an item whose remote counterpart returned a non-success status."""
    return DiffReport(lines=[
        f"{name}: Remote unavailable (HTTP {status_code}) - potential deletion or rename (URL: {url})"
    ])


def fetch_failed_report(name: str, cause: str, url: str) -> DiffReport:
    """Report for an item whose remote counterpart could not be retrieved at all."""
    return DiffReport(lines=[
        f"{name}: Remote unavailable ({cause}) - potential deletion or rename (URL: {url})"
    ])
