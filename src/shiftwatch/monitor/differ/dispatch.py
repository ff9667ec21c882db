"""Selection of the comparison strategy for a drifted item."""

from ..models import DiffItem, DiffReport, MediaItem, OpaqueDocumentItem, TabularItem
from .media import reconcile_media
from .opaque import diff_opaque
from .rows import diff_rows


def diff_item(item: DiffItem) -> DiffReport:
    """Produce the diff report for one drifted item according to its variant."""
    match item:
        case TabularItem():
            return diff_rows(item.local_table, item.remote_table, name=item.name)
        case OpaqueDocumentItem():
            return diff_opaque(item.local, item.remote, label=item.name, kind=item.kind)
        case MediaItem():
            return reconcile_media(
                item.local,
                item.remote,
                item.local_meta,
                item.remote_meta,
                item.local_text,
                item.remote_text,
                name=item.name,
            )
    raise TypeError(f"Unsupported diff item: {type(item).__name__}")
