"""Error classes for the drift monitor."""

import httpx

from shiftwatch.common import ShiftWatchError


class MonitorError(ShiftWatchError):
    """Base error for drift monitor operations."""
    pass


class TransportError(MonitorError):
    """Remote fetch failed before a response was received."""
    pass


class ParseError(MonitorError):
    """Tabular content is malformed and cannot be compared row by row."""
    pass


class ExtractionError(MonitorError):
    """Metadata or recognized-text extraction failed."""
    pass


class UnsupportedFormatError(ExtractionError):
    """Format is declared unsupported by an extraction channel."""
    pass


class ToolNotFoundError(ExtractionError):
    """Required external tool is not available."""
    pass


class IOError(MonitorError):
    """Local read or write failed."""
    pass


class LogSinkError(MonitorError):
    """Destination shift log could not be opened or written."""
    pass


def classify_error(exception: Exception) -> str:
    """
    Classify an exception into an error category.

    Args:
        exception: The exception to classify

    Returns:
        Error category string: 'transport', 'parse', 'unsupported',
        'tool_missing', 'extraction', 'io', 'permission', or 'unknown'
    """
    if isinstance(exception, TransportError):
        return 'transport'
    elif isinstance(exception, ParseError):
        return 'parse'
    elif isinstance(exception, UnsupportedFormatError):
        return 'unsupported'
    elif isinstance(exception, ToolNotFoundError):
        return 'tool_missing'
    elif isinstance(exception, ExtractionError):
        return 'extraction'
    elif isinstance(exception, (IOError, LogSinkError)):
        return 'io'
    elif isinstance(exception, httpx.TransportError):
        return 'transport'
    elif isinstance(exception, PermissionError):
        return 'permission'
    elif isinstance(exception, OSError):
        return 'io'
    elif isinstance(exception, (ValueError, KeyError, AttributeError)):
        return 'parse'
    else:
        return 'unknown'
