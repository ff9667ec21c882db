"""Tests for recognized-text extraction."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from shiftwatch.monitor.errors import ExtractionError, ToolNotFoundError, UnsupportedFormatError
from shiftwatch.monitor.extraction import extract_text, recognize_text
from shiftwatch.monitor.models import Failure, Success

RUN = 'shiftwatch.monitor.extraction.ocr_extractor.subprocess.run'


class TestExtractText:
    """Tests for extract_text function."""

    def test_runs_tesseract_on_temporary_copy(self):
        seen = {}

        def fake_run(cmd, **kwargs):
            image_path = Path(cmd[1])
            seen['cmd'] = cmd
            seen['suffix'] = image_path.suffix
            seen['content'] = image_path.read_bytes()
            return MagicMock(stdout="North Gate\n")

        with patch(RUN, side_effect=fake_run):
            text = extract_text(b"png-bytes", "site_map.PNG")

        assert text == "North Gate\n"
        assert seen['cmd'][0] == 'tesseract'
        assert seen['cmd'][2] == 'stdout'
        assert seen['suffix'] == '.png'
        assert seen['content'] == b"png-bytes"
        assert not Path(seen['cmd'][1]).exists()

    def test_avif_declared_unsupported(self):
        with patch(RUN) as mock_run:
            with pytest.raises(UnsupportedFormatError, match="AVIF format not supported for OCR"):
                extract_text(b"avif-bytes", "map.avif")
        mock_run.assert_not_called()

    def test_missing_tool(self):
        with patch(RUN, side_effect=FileNotFoundError("tesseract")):
            with pytest.raises(ToolNotFoundError):
                extract_text(b"x", "map.jpg")

    def test_tool_failure(self):
        error = subprocess.CalledProcessError(1, ['tesseract'], stderr="Error in pixReadMem")
        with patch(RUN, side_effect=error):
            with pytest.raises(ExtractionError, match="pixReadMem"):
                extract_text(b"x", "map.jpg")

    def test_timeout(self):
        with patch(RUN, side_effect=subprocess.TimeoutExpired(['tesseract'], 60)):
            with pytest.raises(ExtractionError, match="timed out"):
                extract_text(b"x", "map.jpg")


class TestRecognizeText:
    """Tests for the recognized-text extraction channel."""

    def test_success(self):
        with patch(RUN, return_value=MagicMock(stdout="Gate B\n")):
            assert recognize_text(b"x", "map.jpg") == Success("Gate B\n")

    def test_unsupported_failure_category(self):
        outcome = recognize_text(b"x", "map.avif")

        assert isinstance(outcome, Failure)
        assert outcome.unsupported
        assert outcome.cause == "AVIF format not supported for OCR"

    def test_missing_tool_failure_category(self):
        with patch(RUN, side_effect=FileNotFoundError("tesseract")):
            outcome = recognize_text(b"x", "map.jpg")

        assert outcome.category == 'tool_missing'

    def test_disabled(self):
        with patch(RUN) as mock_run:
            outcome = recognize_text(b"x", "map.jpg", enabled=False)

        assert outcome == Failure("OCR disabled by configuration", 'disabled')
        mock_run.assert_not_called()
