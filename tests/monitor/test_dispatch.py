"""Tests for diff strategy selection over item variants."""

import pytest

from shiftwatch.monitor.differ import diff_item
from shiftwatch.monitor.models import (
    Failure, MediaItem, OpaqueDocumentItem, Success, TabularItem,
)


class TestDiffItem:
    """Tests for diff_item function."""

    def test_tabular_item(self):
        item = TabularItem(name="a.csv", local_table=[["1"]], remote_table=[["2"]])

        report = diff_item(item)

        assert report.header == "Diff for a.csv"
        assert report.lines == ["Modified field in row 1, col 1: '1' → '2'"]

    def test_opaque_item(self):
        report = diff_item(OpaqueDocumentItem(name="b.pdf", local=b"1", remote=b"2"))

        assert report.header == "PDF Diff for b.pdf"
        assert report.lines[0].startswith("File Hash: Local=")

    def test_media_item(self):
        item = MediaItem(
            name="map.png", local=b"1", remote=b"2",
            local_meta=Failure("no exif"), remote_meta=Failure("no exif"),
            local_text=Success("A"), remote_text=Success("B"),
        )

        report = diff_item(item)

        assert report.header == "Image Diff for map.png"
        assert "EXIF: both extractions failed" in report.lines
        assert "OCR changed:" in report.lines

    def test_unknown_item(self):
        with pytest.raises(TypeError):
            diff_item(object())
