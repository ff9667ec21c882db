"""Append-only shift log and drift snapshots."""

import logging
from pathlib import Path
from typing import List

from .errors import IOError, LogSinkError
from .models import SnapshotRequest

logger = logging.getLogger(__name__)


def snapshot_name(name: str, timestamp: str) -> str:
    """Derive the snapshot filename: original name, timestamp suffix, ``.changed``."""
    return f"{name}_{timestamp.replace(' ', '_')}.changed"


class ShiftLog:
    """Append-only text file receiving complete diff reports."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def append(self, entries: List[str]) -> None:
        """
        Append entries, each followed by a blank line.

        Raises:
            LogSinkError: If the log cannot be opened or written
        """
        try:
            with open(self.path, 'a', encoding='utf-8') as f:
                for entry in entries:
                    f.write(entry.rstrip("\n") + "\n\n")
        except OSError as e:
            raise LogSinkError(f"Cannot write shift log {self.path}: {e}", path=str(self.path)) from e


class SnapshotWriter:
    """Persists drifted remote content next to the local reference copies."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def write(self, request: SnapshotRequest) -> Path:
        """
        Write the snapshot file.

        Raises:
            IOError: If the file cannot be written
        """
        path = self.directory / request.snapshot_name
        try:
            path.write_bytes(request.data)
        except OSError as e:
            raise IOError(f"Cannot save changed file {path}: {e}", path=str(path)) from e
        logger.debug(f"Snapshot saved: {{'item': {request.name!r}, 'path': {str(path)!r}}}")
        return path
