"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import responses
from unittest.mock import patch
from requests.exceptions import ConnectionError

from setup_bindiff.core.download import (
    DownloadProgress,
    download_file,
    format_progress,
)
from setup_bindiff.core.exceptions import DownloadError

URL = "https://github.com/cs2-analysis/bindiff/releases/latest/download/BinDiff-Linux.zip"


class TestDownloadProgress:
    """Test DownloadProgress dataclass."""

    def test_percentage(self):
        progress = DownloadProgress(bytes_downloaded=50, total_bytes=200, speed_bps=0)
        assert progress.percentage == 25.0

    def test_percentage_unknown_total(self):
        progress = DownloadProgress(bytes_downloaded=50, total_bytes=0, speed_bps=0)
        assert progress.percentage == 0.0

    def test_format_known_size(self):
        """Test formatting with known total size."""
        progress = DownloadProgress(
            bytes_downloaded=52428800,  # 50 MB
            total_bytes=104857600,  # 100 MB
            speed_bps=1048576,  # 1 MB/s
        )

        result = format_progress(progress)

        assert "50.0/100.0 MB" in result
        assert "50.0%" in result
        assert "1.0 MB/s" in result

    def test_format_unknown_size(self):
        """Test formatting with unknown total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760, total_bytes=0, speed_bps=2097152
        )

        assert str(progress) == "10.0 MB at 2.0 MB/s"


class TestDownloadFile:
    """Test download_file function."""

    def test_empty_url(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "file.zip")

    def test_empty_destination(self):
        with pytest.raises(ValueError, match="Destination path cannot be empty"):
            download_file(URL, None)

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test simple download writes the body to disk."""
        content = b"PK\x03\x04 release archive"
        destination = tmp_path / "nested" / "BinDiff-Linux.zip"

        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_follows_redirect(self, tmp_path):
        """Test the floating release redirect is followed."""
        target = "https://objects.example.com/BinDiff-Linux.zip"
        responses.add(
            responses.GET, URL, status=302, headers={"Location": target}
        )
        responses.add(responses.GET, target, body=b"zip", status=200)

        result = download_file(URL, tmp_path / "a.zip")

        assert result.read_bytes() == b"zip"

    @responses.activate
    def test_progress_callback(self, tmp_path):
        """Test the progress callback sees the completed download."""
        content = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        updates = []

        download_file(URL, tmp_path / "a.zip", progress_callback=updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == len(content)
        assert updates[-1].percentage == 100.0

    @responses.activate
    @patch("setup_bindiff.core.download.time.sleep")
    def test_http_error_retried_then_raised(self, mock_sleep, tmp_path):
        """Test a persistent 404 is retried and then reported as DownloadError."""
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError, match="after 3 attempts"):
            download_file(URL, tmp_path / "a.zip", max_retries=3)

        assert len(responses.calls) == 3
        assert mock_sleep.call_count == 2

    @responses.activate
    @patch("setup_bindiff.core.download.time.sleep")
    def test_retry_then_success(self, mock_sleep, tmp_path):
        """Test a transient connection error is retried."""
        responses.add(responses.GET, URL, body=ConnectionError("reset"))
        responses.add(responses.GET, URL, body=b"ok", status=200)

        result = download_file(URL, tmp_path / "a.zip")

        assert result.read_bytes() == b"ok"
        mock_sleep.assert_called_once_with(1)
