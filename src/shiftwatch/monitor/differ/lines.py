"""Generic line-oriented text comparison."""

from ..models import ChangeCounter, DiffReport, MAX_DIFF_CHANGES


def diff_lines(
    local_text: str,
    remote_text: str,
    label: str,
    cap: int = MAX_DIFF_CHANGES,
) -> DiffReport:
    """
    Compare two text blobs line by line.

    Lines are trimmed before comparison. An empty line on one side against a
    non-empty line on the other counts as added/omitted; two unequal non-empty
    lines count as modified.

    Args:
        local_text: Local text
        remote_text: Remote text
        label: Section label used in every line (e.g. "EXIF", "OCR")
        cap: Maximum number of itemized changes

    Returns:
        Header-less DiffReport falling back to "No <label> changes identified"
    """
    report = DiffReport(fallback=f"No {label} changes identified")
    counter = ChangeCounter(cap=cap)

    local_lines = local_text.split("\n")
    remote_lines = remote_text.split("\n")

    for i in range(max(len(local_lines), len(remote_lines))):
        if counter.exhausted:
            break

        local_line = local_lines[i].strip() if i < len(local_lines) else ""
        remote_line = remote_lines[i].strip() if i < len(remote_lines) else ""

        if not local_line and remote_line:
            counter.added += 1
            report.add(f"Added {label} line {i + 1}: {remote_line}")
        elif not remote_line and local_line:
            counter.omitted += 1
            report.add(f"Omitted {label} line {i + 1}: {local_line}")
        elif local_line != remote_line:
            counter.modified += 1
            report.add(f"Modified {label} line {i + 1}: '{local_line}' → '{remote_line}'")

    return report
