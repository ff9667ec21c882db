"""Common utilities for shiftwatch packages."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import ShiftWatchError
from .digest import (
    fingerprint, fingerprint_of_file, short_fingerprint, ZERO_FINGERPRINT
)

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'ShiftWatchError',
    'fingerprint',
    'fingerprint_of_file',
    'short_fingerprint',
    'ZERO_FINGERPRINT',
]
