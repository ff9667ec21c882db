"""Comparison strategies producing diff reports."""

from .dispatch import diff_item
from .lines import diff_lines
from .media import reconcile_channel, reconcile_media, METADATA_CHANNEL, TEXT_CHANNEL
from .opaque import diff_opaque
from .rows import diff_rows

__all__ = [
    'diff_item',
    'diff_lines',
    'diff_opaque',
    'diff_rows',
    'reconcile_channel',
    'reconcile_media',
    'METADATA_CHANNEL',
    'TEXT_CHANNEL',
]
