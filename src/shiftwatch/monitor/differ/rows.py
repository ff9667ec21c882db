"""Positional row/field comparison for tabular content."""

from typing import Optional

from ..models import ChangeCounter, DiffReport, MAX_DIFF_CHANGES, Row, Table


def diff_rows(
    local: Table,
    remote: Table,
    name: Optional[str] = None,
    cap: int = MAX_DIFF_CHANGES,
) -> DiffReport:
    """
    Compare two tables row by row.

    Row i of the local table is compared with row i of the remote table; there
    is no key-based alignment. Only the first differing field of a row is
    reported. Itemization stops silently once ``cap`` changes are recorded.

    Args:
        local: Local reference table
        remote: Remote table
        name: Optional item name used in the report header
        cap: Maximum number of itemized changes

    Returns:
        DiffReport with 1-based row/column positions
    """
    report = DiffReport(header=f"Diff for {name}" if name else None)
    counter = ChangeCounter(cap=cap)

    for i in range(max(len(local), len(remote))):
        if counter.exhausted:
            break

        # An empty row counts as absent
        local_row = local[i] if i < len(local) else []
        remote_row = remote[i] if i < len(remote) else []

        if not local_row and not remote_row:
            continue
        if not local_row:
            counter.added += 1
            report.add(f"Added row {i + 1}: {','.join(remote_row)}")
        elif not remote_row:
            counter.omitted += 1
            report.add(f"Omitted row {i + 1}: {','.join(local_row)}")
        else:
            j = first_differing_field(local_row, remote_row)
            if j is not None:
                counter.modified += 1
                report.add(
                    f"Modified field in row {i + 1}, col {j + 1}: "
                    f"'{_field(local_row, j)}' → '{_field(remote_row, j)}'"
                )

    return report


def first_differing_field(local_row: Row, remote_row: Row) -> Optional[int]:
    """Index of the first field that differs, treating missing fields as empty."""
    for j in range(max(len(local_row), len(remote_row))):
        if _field(local_row, j) != _field(remote_row, j):
            return j
    return None


def _field(row: Row, index: int) -> str:
    return row[index] if index < len(row) else ""
