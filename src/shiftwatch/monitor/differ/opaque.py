"""Fingerprint-only comparison for formats with no structural parser."""

from shiftwatch.common import fingerprint

from ..models import DiffReport


def fingerprint_line(local_fingerprint: str, remote_fingerprint: str) -> str:
    return f"File Hash: Local={local_fingerprint}, Remote={remote_fingerprint}"


def diff_opaque(local: bytes, remote: bytes, label: str, kind: str = "PDF") -> DiffReport:
    """
    Report that two opaque blobs differ, with both full fingerprints.

    No content-level detail is produced regardless of size.
    """
    return DiffReport(
        header=f"{kind} Diff for {label}",
        lines=[fingerprint_line(fingerprint(local), fingerprint(remote))],
    )
