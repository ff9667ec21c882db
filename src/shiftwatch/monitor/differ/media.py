"""Reconciliation of fingerprint and extraction-channel comparisons for images.

Each channel (structured metadata, recognized text) has two outcomes, one per
side. The pair is resolved by a fixed table:

    local     remote    output
    -------   -------   ---------------------------------------------
    Success   Success   "<channel> unchanged" or "<channel> changed:" + line diff
    Success   Failure   local value in full, plus the remote failure cause
    Failure   Success   remote value in full, plus the local failure cause
    Failure   Failure   both failure causes, no content comparison

Every row produces at least one line, so a channel section is never empty.
"""

from typing import List, Optional

from shiftwatch.common import fingerprint

from ..models import DiffReport, ExtractionOutcome, Failure, Success
from .lines import diff_lines
from .opaque import fingerprint_line

METADATA_CHANNEL = "EXIF"
TEXT_CHANNEL = "OCR"


def reconcile_channel(
    channel: str,
    local: ExtractionOutcome,
    remote: ExtractionOutcome,
) -> List[str]:
    """Resolve one channel's pair of extraction outcomes into report lines."""
    match (local, remote):
        case (Success(local_value), Success(remote_value)) if local_value == remote_value:
            return [f"{channel} unchanged"]
        case (Success(local_value), Success(remote_value)):
            return [f"{channel} changed:"] + diff_lines(local_value, remote_value, channel).change_lines
        case (Success(local_value), Failure(cause)):
            return [
                f"{channel}: local present, remote extraction failed",
                f"Remote {channel} error: {cause}",
                f"Local {channel}:",
                local_value.rstrip("\n"),
            ]
        case (Failure(cause), Success(remote_value)):
            return [
                f"{channel}: remote added, local extraction failed",
                f"Local {channel} error: {cause}",
                f"Remote {channel}:",
                remote_value.rstrip("\n"),
            ]
        case (Failure(local_cause), Failure(remote_cause)):
            return [
                f"{channel}: both extractions failed",
                f"Local {channel} error: {local_cause}",
                f"Remote {channel} error: {remote_cause}",
            ]
    raise TypeError(
        f"Expected extraction outcomes, got {type(local).__name__} and {type(remote).__name__}"
    )


def reconcile_media(
    local: bytes,
    remote: bytes,
    local_meta: ExtractionOutcome,
    remote_meta: ExtractionOutcome,
    local_text: ExtractionOutcome,
    remote_text: ExtractionOutcome,
    name: Optional[str] = None,
) -> DiffReport:
    """
    Build an image diff report.

    Starts with both full fingerprints, then the metadata section and the
    recognized-text section, each resolved independently.
    """
    report = DiffReport(header=f"Image Diff for {name}" if name else None)
    report.add(fingerprint_line(fingerprint(local), fingerprint(remote)))
    report.extend(reconcile_channel(METADATA_CHANNEL, local_meta, remote_meta))
    report.extend(reconcile_channel(TEXT_CHANNEL, local_text, remote_text))
    return report
