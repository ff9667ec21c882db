"""Tests for the monitoring cycle driver."""

import io
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image, ExifTags

from shiftwatch.common import ZERO_FINGERPRINT, fingerprint
from shiftwatch.common.digest import fingerprint_of_file as real_fingerprint_of_file
from shiftwatch.monitor.cycle import (
    CycleRunner,
    build_diff_item,
    cycle_fingerprint,
)
from shiftwatch.monitor.config import WatchConfig
from shiftwatch.monitor.errors import ParseError, TransportError
from shiftwatch.monitor.fetcher import FetchResult
from shiftwatch.monitor.models import (
    Category, ContentBlob, Failure, MediaItem, OpaqueDocumentItem, TabularItem,
)
from shiftwatch.monitor.report import TRUNCATION_MARKER
from shiftwatch.monitor.sinks import ShiftLog, SnapshotWriter

TIMESTAMP = "Jan 02, 2026 - 03:04PM"


class FakeFetcher:
    """Serves remote content from a dict; values may be bytes, a status code, or an exception."""

    def __init__(self, remote):
        self.remote = remote
        self.requested = []
        self.closed = False

    def fetch(self, filename):
        self.requested.append(filename)
        url = f"https://example.test/{filename}?t=1"
        value = self.remote[filename]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, int):
            return FetchResult(url=url, status_code=value, content=b"404: Not Found")
        return FetchResult(url=url, status_code=200, content=value)

    def close(self):
        self.closed = True


def _blob(data, category):
    return ContentBlob(data=data, category=category)


def _jpeg(model):
    exif = Image.Exif()
    exif[ExifTags.Base.Make] = "Canon"
    exif[ExifTags.Base.Model] = model
    buffer = io.BytesIO()
    Image.new('RGB', (32, 32), color='green').save(buffer, 'JPEG', exif=exif)
    return buffer.getvalue()


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def make_runner(tmp_path, sleep):
    def factory(local, remote, **kwargs):
        for name, data in local.items():
            (tmp_path / name).write_bytes(data)
        fetcher = FakeFetcher(remote)
        options = dict(
            fetch_pause_seconds=5.0,
            use_ocr=False,
            sleep=sleep,
            clock=lambda: datetime(2026, 1, 2, 15, 4),
        )
        options.update(kwargs)
        runner = CycleRunner(
            directory=tmp_path,
            fetcher=fetcher,
            shift_log=options.pop('shift_log', ShiftLog(tmp_path / "shifts.log")),
            snapshots=SnapshotWriter(tmp_path),
            **options,
        )
        return runner
    return factory


class TestRunCycle:
    """Tests for CycleRunner.run_cycle."""

    def test_no_change(self, tmp_path, make_runner, sleep):
        content = {"a.csv": b"a,b\n", "b.pdf": b"%PDF-1.4"}
        runner = make_runner(content, content)

        summary = runner.run_cycle()

        assert summary.item_count == 2
        assert summary.shifts == []
        assert summary.fingerprint == cycle_fingerprint(
            [fingerprint(b"a,b\n"), fingerprint(b"%PDF-1.4")]
        )
        assert summary.display_fingerprint == f"0x{summary.fingerprint}"
        assert not (tmp_path / "shifts.log").exists()
        sleep.assert_called_once_with(5.0)

    def test_items_visited_in_sorted_order(self, make_runner):
        content = {"z.csv": b"1\n", "a_map.png": b"2", "m.pdf": b"3"}
        runner = make_runner(content, content)

        runner.run_cycle()

        assert runner.fetcher.requested == ["a_map.png", "m.pdf", "z.csv"]

    def test_cycle_fingerprint_is_stable_across_cycles(self, make_runner):
        content = {"a.csv": b"a\n"}
        runner = make_runner(content, content)

        assert runner.run_cycle().fingerprint == runner.run_cycle().fingerprint

    def test_tabular_drift(self, tmp_path, make_runner):
        runner = make_runner(
            {"prices.csv": b"a,b\nc,d\n"},
            {"prices.csv": b"a,x\nc,d\n"},
        )

        summary = runner.run_cycle()

        assert summary.shifts == [
            f"[{TIMESTAMP}] Diff for prices.csv\n"
            "Modified field in row 1, col 2: 'b' → 'x'\n"
        ]
        assert summary.fingerprint == cycle_fingerprint([fingerprint(b"a,x\nc,d\n")])
        assert "Modified field in row 1, col 2" in (tmp_path / "shifts.log").read_text(encoding='utf-8')
        snapshot = tmp_path / "prices.csv_Jan_02,_2026_-_03:04PM.changed"
        assert snapshot.read_bytes() == b"a,x\nc,d\n"
        assert (tmp_path / "prices.csv").read_bytes() == b"a,b\nc,d\n"

    def test_tabular_drift_without_row_changes(self, make_runner):
        runner = make_runner({"a.csv": b"a,b\n"}, {"a.csv": b"a,b\r\n"})

        summary = runner.run_cycle()

        assert summary.shifts[0].endswith("No specific changes identified (full content mismatch)\n")

    def test_parse_error_reported_without_row_diff(self, make_runner):
        runner = make_runner({"a.csv": b"a,b\n"}, {"a.csv": b"a,b\nc\n"})

        summary = runner.run_cycle()

        assert summary.shifts == [
            f"[{TIMESTAMP}] CSV: a.csv | Error parsing remote: "
            "record on line 2: wrong number of fields"
        ]

    def test_opaque_drift(self, make_runner):
        runner = make_runner({"terms.pdf": b"%PDF old"}, {"terms.pdf": b"%PDF new"})

        summary = runner.run_cycle()

        assert summary.shifts == [
            f"[{TIMESTAMP}] PDF Diff for terms.pdf\n"
            f"File Hash: Local={fingerprint(b'%PDF old')}, Remote={fingerprint(b'%PDF new')}\n"
        ]

    def test_media_drift(self, make_runner):
        runner = make_runner(
            {"site_map.jpg": _jpeg("A")},
            {"site_map.jpg": _jpeg("B")},
        )

        summary = runner.run_cycle()
        entry = summary.shifts[0]

        assert entry.startswith(f"[{TIMESTAMP}] Image Diff for site_map.jpg\nFile Hash: Local=")
        assert "EXIF changed:" in entry
        assert "'Model: A' → 'Model: B'" in entry
        assert "OCR: both extractions failed" in entry

    def test_remote_unavailable(self, make_runner):
        runner = make_runner({"a.csv": b"a\n", "b.csv": b"b\n"}, {"a.csv": 404, "b.csv": b"b\n"})

        summary = runner.run_cycle()

        assert summary.shifts == [
            f"[{TIMESTAMP}] a.csv: Remote unavailable (HTTP 404) - potential deletion "
            "or rename (URL: https://example.test/a.csv?t=1)\n"
        ]
        assert summary.fingerprint == cycle_fingerprint([ZERO_FINGERPRINT, fingerprint(b"b\n")])

    def test_transport_error_reported_as_unavailable(self, tmp_path, make_runner):
        runner = make_runner(
            {"a.csv": b"a\n"},
            {"a.csv": TransportError("Fetch failed: timeout", url="https://example.test/a.csv")},
        )

        summary = runner.run_cycle()

        assert summary.shifts == [
            f"[{TIMESTAMP}] a.csv: Remote unavailable (Fetch failed: timeout) - potential deletion "
            "or rename (URL: https://example.test/a.csv)\n"
        ]
        assert summary.fingerprint == cycle_fingerprint([ZERO_FINGERPRINT])
        assert "Fetch failed: timeout" in (tmp_path / "shifts.log").read_text(encoding='utf-8')

    def test_local_read_failure_skips_item(self, make_runner):
        content = {"a.csv": b"a\n", "b.csv": b"b\n"}
        runner = make_runner(content, content)

        def flaky(path):
            if path.name == "a.csv":
                raise PermissionError("denied")
            return real_fingerprint_of_file(path)

        with patch('shiftwatch.monitor.cycle.fingerprint_of_file', side_effect=flaky):
            summary = runner.run_cycle()

        assert summary.skipped == ["a.csv"]
        assert summary.fingerprint == cycle_fingerprint([fingerprint(b"b\n")])

    def test_reports_are_bounded(self, make_runner):
        local = "".join(f"{i},{'x' * 80}\n" for i in range(20)).encode()
        remote = "".join(f"{i},{'y' * 80}\n" for i in range(20)).encode()
        runner = make_runner({"wide.csv": local}, {"wide.csv": remote})

        entry = runner.run_cycle().shifts[0]

        assert len(entry) == 500
        assert entry.endswith(TRUNCATION_MARKER)

    def test_log_sink_failure_still_produces_summary(self, tmp_path, make_runner):
        runner = make_runner(
            {"a.csv": b"a\n"},
            {"a.csv": b"b\n"},
            shift_log=ShiftLog(tmp_path / "missing" / "shifts.log"),
        )

        summary = runner.run_cycle()

        assert len(summary.shifts) == 1
        assert summary.fingerprint == cycle_fingerprint([fingerprint(b"b\n")])

    def test_empty_directory(self, make_runner, sleep):
        summary = make_runner({}, {}).run_cycle()

        assert summary.item_count == 0
        assert summary.fingerprint == fingerprint(b"")
        sleep.assert_not_called()


class TestFetchBaselines:
    """Tests for CycleRunner.fetch_baselines."""

    def test_overwrites_local_copies(self, tmp_path, make_runner, sleep):
        runner = make_runner(
            {"a.csv": b"old\n", "b.pdf": b"old", "c.csv": b"keep\n"},
            {"a.csv": b"new\n", "b.pdf": TransportError("down"), "c.csv": 404},
        )

        saved = runner.fetch_baselines()

        assert saved == 1
        assert (tmp_path / "a.csv").read_bytes() == b"new\n"
        assert (tmp_path / "b.pdf").read_bytes() == b"old"
        assert (tmp_path / "c.csv").read_bytes() == b"keep\n"
        assert sleep.call_count == 2


class TestBuildDiffItem:
    """Tests for build_diff_item function."""

    def test_tabular(self):
        item = build_diff_item("a.csv", _blob(b"a\n", Category.TABULAR), _blob(b"b\n", Category.TABULAR))
        assert item == TabularItem(name="a.csv", local_table=[["a"]], remote_table=[["b"]])

    def test_tabular_parse_error_names_side(self):
        with pytest.raises(ParseError) as exc_info:
            build_diff_item("a.csv", _blob(b"a,b\nc\n", Category.TABULAR), _blob(b"a\n", Category.TABULAR))

        assert exc_info.value.message.startswith("CSV: a.csv | Error parsing local: ")
        assert exc_info.value.context["side"] == "local"

    def test_opaque(self):
        item = build_diff_item("b.pdf", _blob(b"1", Category.OPAQUE_DOCUMENT), _blob(b"2", Category.OPAQUE_DOCUMENT))
        assert item == OpaqueDocumentItem(name="b.pdf", local=b"1", remote=b"2")

    def test_media_collects_all_four_outcomes(self):
        item = build_diff_item("map.avif", _blob(b"1", Category.MEDIA), _blob(b"2", Category.MEDIA), use_ocr=True)

        assert isinstance(item, MediaItem)
        assert isinstance(item.local_meta, Failure)
        assert item.local_meta.unsupported
        assert item.local_text.unsupported
        assert item.remote_text.unsupported

    def test_category_mismatch(self):
        with pytest.raises(ValueError):
            build_diff_item("a.csv", _blob(b"a", Category.TABULAR), _blob(b"a", Category.MEDIA))


class TestFromConfig:
    """Tests for CycleRunner.from_config."""

    def test_paths_resolved_against_watch_directory(self, tmp_path):
        config = WatchConfig(watch_directory=str(tmp_path), fetch_pause_seconds=1.5, use_ocr=False)
        fetcher = FakeFetcher({})

        runner = CycleRunner.from_config(config, fetcher=fetcher)

        assert runner.directory == tmp_path
        assert runner.shift_log.path == tmp_path / "shifts.log"
        assert runner.snapshots.directory == tmp_path
        assert runner.fetch_pause_seconds == 1.5
        assert runner.fetcher is fetcher
        assert runner.use_ocr is False
