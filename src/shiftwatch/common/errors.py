"""Base error definitions for shiftwatch packages."""

from typing import Any, Dict


class ShiftWatchError(Exception):
    """Base exception for all shiftwatch errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
