"""Tests for source classification, the workspace, and resolution."""

from pathlib import Path
from unittest.mock import patch

import pytest

from cliptrim.errors import FetchHttpError, InvalidSource, SourceNotFound
from cliptrim.models import SourceKind, TimeRange
from cliptrim.sources import (
    TemporaryWorkspace,
    classify,
    download_filename,
    resolve_source,
)

RANGE = TimeRange(start=5.0, end=10.0, start_text="00:00:05", end_text="00:00:10")


class TestClassify:
    @pytest.mark.parametrize(
        "source",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "http://m.youtube.com/watch?v=abc",
        ],
    )
    def test_streaming(self, source):
        assert classify(source).kind is SourceKind.STREAMING

    @pytest.mark.parametrize(
        "source",
        ["https://example.com/video.mp4", "http://cdn.test/a/b/c.webm?sig=1"],
    )
    def test_generic_url(self, source):
        assert classify(source).kind is SourceKind.GENERIC_URL

    @pytest.mark.parametrize(
        "source",
        ["clip.mp4", "/home/user/Videos/clip.mp4", "C:\\Videos\\clip.mp4", "ftp://host/x.mp4"],
    )
    def test_local(self, source):
        d = classify(source)
        assert d.kind is SourceKind.LOCAL
        assert not d.is_remote

    def test_descriptor_is_immutable(self):
        d = classify("clip.mp4")
        with pytest.raises(AttributeError):
            d.kind = SourceKind.STREAMING

    def test_malformed_url(self):
        with pytest.raises(InvalidSource, match="Invalid URL"):
            classify("http://[oops/video.mp4")


class TestDownloadFilename:
    def test_last_segment(self):
        assert download_filename("https://example.com/media/video.mp4") == "video.mp4"

    def test_query_ignored(self):
        assert download_filename("https://example.com/v.webm?token=abc") == "v.webm"

    def test_percent_decoded(self):
        assert download_filename("https://example.com/my%20clip.mp4") == "my clip.mp4"

    @pytest.mark.parametrize("url", ["https://example.com/", "https://example.com"])
    def test_default_when_empty(self, url):
        assert download_filename(url) == "downloaded_video.mp4"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com/%2Ftmp%2Fescaped.mp4", "escaped.mp4"),
            ("https://example.com/..%2F..%2Fx.mp4", "x.mp4"),
            ("https://example.com/..%5C..%5Cx.mp4", "x.mp4"),
        ],
    )
    def test_encoded_separators_stripped(self, url, expected):
        assert download_filename(url) == expected

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a/..",
            "https://example.com/a/%2E%2E",
            "https://example.com/%2F",
            "https://example.com/bad%00.mp4",
        ],
    )
    def test_unusable_name_falls_back(self, url):
        assert download_filename(url) == "downloaded_video.mp4"


class TestTemporaryWorkspace:
    def test_lazy_creation(self):
        with TemporaryWorkspace() as ws:
            assert not ws.created
        assert not ws.created

    def test_removed_on_exit(self):
        with TemporaryWorkspace() as ws:
            path = ws.path
            (path / "video.mp4").write_bytes(b"data")
            assert path.is_dir()
        assert not path.exists()

    def test_removed_on_error(self):
        with pytest.raises(RuntimeError):
            with TemporaryWorkspace() as ws:
                path = ws.path
                raise RuntimeError("boom")
        assert not path.exists()

    def test_path_is_stable(self):
        with TemporaryWorkspace() as ws:
            assert ws.path == ws.path


class TestResolveSource:
    def test_local_existing(self, local_clip: Path):
        with TemporaryWorkspace() as ws:
            resolved = resolve_source(classify(str(local_clip)), RANGE, ws)
            assert resolved.path == local_clip
            assert resolved.already_trimmed is False
            assert not ws.created

    def test_local_missing(self, tmp_path: Path):
        missing = tmp_path / "nope.mp4"
        with TemporaryWorkspace() as ws:
            with pytest.raises(SourceNotFound, match="not found"):
                resolve_source(classify(str(missing)), RANGE, ws)

    @patch("cliptrim.sources.fetch.fetch_url")
    @patch("cliptrim.sources.segments.download_segment")
    def test_streaming_downloads_segment(self, mock_segment, mock_fetch):
        url = "https://www.youtube.com/watch?v=abc"
        with TemporaryWorkspace() as ws:
            mock_segment.return_value = ws.path / "video.mp4"
            resolved = resolve_source(classify(url), RANGE, ws)

            assert resolved.already_trimmed is True
            assert resolved.path == ws.path / "video.mp4"
            args, kwargs = mock_segment.call_args
            assert args == (url, ws.path, 5.0, 10.0)
            assert kwargs["concurrent_fragments"] == 4
        mock_fetch.assert_not_called()

    @patch("cliptrim.sources.segments.download_segment")
    @patch("cliptrim.sources.fetch.fetch_url")
    def test_generic_url_fetches_whole_file(self, mock_fetch, mock_segment):
        url = "https://example.com/files/movie.mp4"
        with TemporaryWorkspace() as ws:
            resolved = resolve_source(classify(url), RANGE, ws)

            assert resolved.already_trimmed is False
            assert resolved.path == ws.path / "movie.mp4"
            mock_fetch.assert_called_once_with(url, ws.path / "movie.mp4", chunk_size=64 * 1024)
        mock_segment.assert_not_called()

    @patch("cliptrim.sources.fetch.fetch_url")
    def test_fetch_errors_propagate(self, mock_fetch):
        mock_fetch.side_effect = FetchHttpError("HTTP status 404", status_code=404)
        with TemporaryWorkspace() as ws:
            with pytest.raises(FetchHttpError):
                resolve_source(classify("https://example.com/x.mp4"), RANGE, ws)

    @patch("cliptrim.sources.fetch.fetch_url")
    def test_generic_url_stays_in_workspace(self, mock_fetch, tmp_path: Path):
        target = tmp_path / "escaped.mp4"
        url = "https://example.com/" + str(target).replace("/", "%2F")
        with TemporaryWorkspace() as ws:
            resolved = resolve_source(classify(url), RANGE, ws)
            assert resolved.path.parent == ws.path
            assert mock_fetch.call_args[0][1] == ws.path / "escaped.mp4"
