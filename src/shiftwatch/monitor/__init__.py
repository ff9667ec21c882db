"""Drift monitor: change detection and diff reports for monitored files."""

from .models import (
    Category,
    ContentBlob,
    Success,
    Failure,
    ExtractionOutcome,
    ChangeCounter,
    DiffReport,
    TabularItem,
    OpaqueDocumentItem,
    MediaItem,
    SnapshotRequest,
    MAX_DIFF_CHANGES,
)
from .differ import diff_item, diff_lines, diff_opaque, diff_rows, reconcile_media
from .report import truncate_report, TRUNCATION_MARKER
from .cycle import CycleRunner, CycleSummary, cycle_fingerprint

__all__ = [
    'Category',
    'ContentBlob',
    'Success',
    'Failure',
    'ExtractionOutcome',
    'ChangeCounter',
    'DiffReport',
    'TabularItem',
    'OpaqueDocumentItem',
    'MediaItem',
    'SnapshotRequest',
    'MAX_DIFF_CHANGES',
    'diff_item',
    'diff_lines',
    'diff_opaque',
    'diff_rows',
    'reconcile_media',
    'truncate_report',
    'TRUNCATION_MARKER',
    'CycleRunner',
    'CycleSummary',
    'cycle_fingerprint',
]
