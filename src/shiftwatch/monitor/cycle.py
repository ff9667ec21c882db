"""Monitoring cycle: fetch, fingerprint, diff, and log every monitored item.

Items are processed strictly one after another, in sorted filename order,
with a fixed pause between fetches. A failure for one item degrades that
item's report and the cycle moves on; nothing is retried within a cycle.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from shiftwatch.common import (
    LogContext, ZERO_FINGERPRINT, fingerprint, fingerprint_of_file, short_fingerprint
)

from .config import WatchConfig
from .differ import diff_item
from .discovery import (
    DEFAULT_IMAGE_EXTENSIONS, DEFAULT_MEDIA_NAME_FILTER, MonitoredFile, discover_files
)
from .errors import IOError, LogSinkError, ParseError, TransportError
from .extraction import extract_metadata, recognize_text
from .fetcher import RemoteFetcher
from .models import (
    Category, ContentBlob, DiffItem, MediaItem, OpaqueDocumentItem, SnapshotRequest, TabularItem
)
from .report import (
    DEFAULT_MAX_REPORT_CHARS, fetch_failed_report, truncate_report, unavailable_report
)
from .sinks import ShiftLog, SnapshotWriter, snapshot_name
from .tabular import parse_table

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%b %d, %Y - %I:%M%p"


@dataclass
class ItemResult:
    """Outcome of checking one item.

    Attributes:
        name: Item filename
        fingerprint: Remote fingerprint contributed to the cycle fingerprint,
            or None if the item was skipped
        report: Bounded log entry if drift was detected
        snapshot: Snapshot hint if drift was detected
    """
    name: str
    fingerprint: Optional[str]
    report: Optional[str] = None
    snapshot: Optional[SnapshotRequest] = None


@dataclass
class CycleSummary:
    """Result of one monitoring cycle."""
    timestamp: str
    item_count: int
    fingerprint: str
    shifts: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def display_fingerprint(self) -> str:
        return f"0x{self.fingerprint}"


def cycle_fingerprint(fingerprints: Iterable[str]) -> str:
    """Fingerprint of the concatenation of per-item fingerprints, in order."""
    return fingerprint("".join(fingerprints).encode('ascii'))


def build_diff_item(
    name: str,
    local: ContentBlob,
    remote: ContentBlob,
    use_ocr: bool = True,
) -> DiffItem:
    """
    Prepare the tagged variant carrying exactly what its differ needs.

    Both blobs must share a category.

    Raises:
        ParseError: If either side of a tabular item is malformed
    """
    if local.category != remote.category:
        raise ValueError(f"Category mismatch: {local.category.value!r} vs {remote.category.value!r}")

    match local.category:
        case Category.TABULAR:
            return TabularItem(
                name=name,
                local_table=_parse_side(name, "local", local.data),
                remote_table=_parse_side(name, "remote", remote.data),
            )
        case Category.OPAQUE_DOCUMENT:
            return OpaqueDocumentItem(name=name, local=local.data, remote=remote.data)
        case Category.MEDIA:
            return MediaItem(
                name=name,
                local=local.data,
                remote=remote.data,
                local_meta=extract_metadata(local.data),
                remote_meta=extract_metadata(remote.data),
                local_text=recognize_text(local.data, name, enabled=use_ocr),
                remote_text=recognize_text(remote.data, name, enabled=use_ocr),
            )
    raise ValueError(f"Unknown category: {local.category!r}")


def _parse_side(name: str, side: str, data: bytes):
    try:
        return parse_table(data)
    except ParseError as e:
        raise ParseError(f"CSV: {name} | Error parsing {side}: {e}", side=side, **e.context) from e


class CycleRunner:
    """Runs baseline fetches and monitoring cycles over one watch directory."""

    def __init__(
        self,
        directory: Path,
        fetcher: RemoteFetcher,
        shift_log: ShiftLog,
        snapshots: SnapshotWriter,
        fetch_pause_seconds: float = 5.0,
        max_report_chars: int = DEFAULT_MAX_REPORT_CHARS,
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        media_name_filter: str = DEFAULT_MEDIA_NAME_FILTER,
        use_ocr: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.directory = directory
        self.fetcher = fetcher
        self.shift_log = shift_log
        self.snapshots = snapshots
        self.fetch_pause_seconds = fetch_pause_seconds
        self.max_report_chars = max_report_chars
        self.image_extensions = tuple(image_extensions)
        self.media_name_filter = media_name_filter
        self.use_ocr = use_ocr
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls, config: WatchConfig, fetcher: Optional[RemoteFetcher] = None) -> "CycleRunner":
        directory = Path(config.watch_directory) if config.watch_directory else Path.cwd()
        log_path = Path(config.shift_log)
        if not log_path.is_absolute():
            log_path = directory / log_path

        if fetcher is None:
            fetcher = RemoteFetcher(
                base_url=config.base_url,
                timeout=config.request_timeout_seconds,
                user_agent=config.user_agent,
            )

        return cls(
            directory=directory,
            fetcher=fetcher,
            shift_log=ShiftLog(log_path),
            snapshots=SnapshotWriter(directory),
            fetch_pause_seconds=config.fetch_pause_seconds,
            max_report_chars=config.max_report_chars,
            image_extensions=config.image_extensions,
            media_name_filter=config.media_name_filter,
            use_ocr=config.use_ocr,
        )

    def timestamp(self) -> str:
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def discover(self) -> List[MonitoredFile]:
        return discover_files(self.directory, self.image_extensions, self.media_name_filter)

    def _pause(self, index: int) -> None:
        if index > 0 and self.fetch_pause_seconds > 0:
            self._sleep(self.fetch_pause_seconds)

    def fetch_baselines(self) -> int:
        """
        Overwrite every local reference copy with its current remote content.

        Returns:
            Number of baselines saved
        """
        logger.info("Baseline mode: fetching remote counterparts as initial baselines")
        try:
            files = self.discover()
        except OSError as e:
            logger.error(f"Cannot list watch directory: {{'directory': {str(self.directory)!r}, 'error': {str(e)!r}}}")
            return 0

        saved = 0
        for index, monitored in enumerate(files):
            self._pause(index)
            try:
                fetched = self.fetcher.fetch(monitored.name)
            except TransportError as e:
                logger.error(f"Baseline fetch failed: {{'item': {monitored.name!r}, 'error': {e.message!r}}}")
                continue

            if not fetched.ok:
                logger.warning(f"Baseline unavailable: {{'item': {monitored.name!r}, 'status': {fetched.status_code}, 'url': {fetched.url!r}}}")
                continue

            try:
                monitored.path.write_bytes(fetched.content)
            except OSError as e:
                logger.error(f"Baseline save failed: {{'item': {monitored.name!r}, 'error': {str(e)!r}}}")
                continue

            saved += 1
            logger.info(f"Baseline saved: {{'item': {monitored.name!r}}}")

        return saved

    def run_cycle(self) -> CycleSummary:
        """
        Check every monitored item once and append drift reports to the shift log.

        Returns:
            CycleSummary with the cycle fingerprint and logged reports
        """
        timestamp = self.timestamp()
        logger.info(f"Starting cycle: {{'directory': {str(self.directory)!r}}}")

        try:
            files = self.discover()
        except OSError as e:
            logger.error(f"Cannot list watch directory: {{'directory': {str(self.directory)!r}, 'error': {str(e)!r}}}")
            files = []

        fingerprints: List[str] = []
        shifts: List[str] = []
        skipped: List[str] = []

        for index, monitored in enumerate(files):
            self._pause(index)
            with LogContext(logger, item=monitored.name):
                result = self.check_item(monitored, timestamp)

            if result.fingerprint is None:
                skipped.append(result.name)
            else:
                fingerprints.append(result.fingerprint)
            if result.report is not None:
                shifts.append(result.report)

        if shifts:
            try:
                self.shift_log.append(shifts)
            except LogSinkError as e:
                logger.error(f"Error opening shift log: {{'path': {str(self.shift_log.path)!r}, 'error': {e.message!r}}}")

        summary = CycleSummary(
            timestamp=timestamp,
            item_count=len(files),
            fingerprint=cycle_fingerprint(fingerprints),
            shifts=shifts,
            skipped=skipped,
        )
        logger.info(
            f"Cycle complete: {{'items': {summary.item_count}, 'shifts': {len(shifts)}, "
            f"'skipped': {len(skipped)}, 'fingerprint': {summary.display_fingerprint!r}}}"
        )
        return summary

    def check_item(self, monitored: MonitoredFile, timestamp: str) -> ItemResult:
        """Fetch, fingerprint and, on drift, diff one monitored item."""
        name = monitored.name

        try:
            fetched = self.fetcher.fetch(name)
        except TransportError as e:
            url = e.context.get('url', '')
            logger.error(f"Fetch failed: {{'item': {name!r}, 'error': {e.message!r}, 'url': {url!r}}}")
            report = fetch_failed_report(name, e.message, url)
            return ItemResult(
                name=name,
                fingerprint=ZERO_FINGERPRINT,
                report=self._bounded_entry(timestamp, report.render()),
            )

        if not fetched.ok:
            logger.warning(f"Shift detected, remote unavailable: {{'item': {name!r}, 'status': {fetched.status_code}}}")
            report = unavailable_report(name, fetched.status_code, fetched.url)
            return ItemResult(
                name=name,
                fingerprint=ZERO_FINGERPRINT,
                report=self._bounded_entry(timestamp, report.render()),
            )

        remote = ContentBlob(data=fetched.content, category=monitored.category)
        remote_fingerprint = remote.fingerprint

        try:
            local_fingerprint = fingerprint_of_file(monitored.path)
        except OSError as e:
            logger.error(f"Local hash failed: {{'item': {name!r}, 'error': {str(e)!r}}}")
            return ItemResult(name=name, fingerprint=None)

        if local_fingerprint == remote_fingerprint:
            logger.info(f"No change: {{'item': {name!r}, 'hash': {short_fingerprint(remote_fingerprint)!r}}}")
            return ItemResult(name=name, fingerprint=remote_fingerprint)

        logger.warning(f"Shift detected: {{'item': {name!r}, 'category': {monitored.category.value!r}}}")

        try:
            local = ContentBlob(data=monitored.path.read_bytes(), category=monitored.category)
        except OSError as e:
            logger.error(f"Local read failed: {{'item': {name!r}, 'error': {str(e)!r}}}")
            return ItemResult(name=name, fingerprint=None)

        try:
            item = build_diff_item(name, local, remote, use_ocr=self.use_ocr)
            text = diff_item(item).render()
        except ParseError as e:
            logger.warning(f"Diff unavailable: {{'item': {name!r}, 'error': {e.message!r}}}")
            text = e.message

        snapshot = SnapshotRequest(
            name=name,
            snapshot_name=snapshot_name(name, timestamp),
            data=remote.data,
        )
        try:
            self.snapshots.write(snapshot)
        except IOError as e:
            logger.error(f"Save changed file failed: {{'item': {name!r}, 'error': {e.message!r}}}")

        return ItemResult(
            name=name,
            fingerprint=remote_fingerprint,
            report=self._bounded_entry(timestamp, text),
            snapshot=snapshot,
        )

    def _bounded_entry(self, timestamp: str, text: str) -> str:
        return truncate_report(f"[{timestamp}] {text}", self.max_report_chars)
