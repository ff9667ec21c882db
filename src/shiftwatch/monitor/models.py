"""Value types exchanged between the drift monitor's components.

Every instance is created for one comparison and discarded once its report
has been handed off; nothing here is shared across items or cycles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from shiftwatch.common import fingerprint

# Itemized change lines stop once a single diff reaches this many changes
MAX_DIFF_CHANGES = 10

NO_SPECIFIC_CHANGES_LINE = "No specific changes identified (full content mismatch)"

Row = List[str]
Table = List[Row]


class Category(str, Enum):
    """Logical category of a monitored item."""
    TABULAR = "tabular"
    OPAQUE_DOCUMENT = "opaque-document"
    MEDIA = "media"


@dataclass(frozen=True)
class ContentBlob:
    """Immutable content of one side of a comparison."""
    data: bytes
    category: Category

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.data)


@dataclass(frozen=True)
class Success:
    """Extraction channel produced text."""
    text: str


@dataclass(frozen=True)
class Failure:
    """Extraction channel failed.

    Attributes:
        cause: Human-readable failure description
        category: Error category from ``classify_error``; ``'unsupported'``
            marks a declared-unsupported format
    """
    cause: str
    category: str = 'extraction'

    @property
    def unsupported(self) -> bool:
        return self.category == 'unsupported'


ExtractionOutcome = Union[Success, Failure]


@dataclass
class ChangeCounter:
    """Running tally of itemized changes for one diff."""
    cap: int = MAX_DIFF_CHANGES
    added: int = 0
    omitted: int = 0
    modified: int = 0

    @property
    def total(self) -> int:
        return self.added + self.omitted + self.modified

    @property
    def exhausted(self) -> bool:
        return self.total >= self.cap


@dataclass
class DiffReport:
    """Header plus ordered change lines.

    A report with no recorded lines renders its ``fallback`` line instead,
    so rendered text is never empty.
    """
    header: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    fallback: str = NO_SPECIFIC_CHANGES_LINE

    def add(self, line: str) -> None:
        self.lines.append(line)

    def extend(self, lines: List[str]) -> None:
        self.lines.extend(lines)

    @property
    def change_lines(self) -> List[str]:
        """Recorded lines, or the fallback line when nothing was recorded."""
        return list(self.lines) if self.lines else [self.fallback]

    def render(self) -> str:
        parts = [self.header] if self.header else []
        parts.extend(self.change_lines)
        return "\n".join(parts) + "\n"


@dataclass(frozen=True)
class TabularItem:
    """Drifted item whose both sides parsed as tables."""
    name: str
    local_table: Table
    remote_table: Table


@dataclass(frozen=True)
class OpaqueDocumentItem:
    """Drifted item with no structural decomposition."""
    name: str
    local: bytes
    remote: bytes
    kind: str = "PDF"


@dataclass(frozen=True)
class MediaItem:
    """Drifted image plus both extraction channels for each side."""
    name: str
    local: bytes
    remote: bytes
    local_meta: ExtractionOutcome
    remote_meta: ExtractionOutcome
    local_text: ExtractionOutcome
    remote_text: ExtractionOutcome


DiffItem = Union[TabularItem, OpaqueDocumentItem, MediaItem]


@dataclass(frozen=True)
class SnapshotRequest:
    """Hint that a drifted remote blob should be persisted under ``snapshot_name``."""
    name: str
    snapshot_name: str
    data: bytes
