"""Source classification and acquisition.

A source is a local path, a direct HTTP(S) link, or a streaming-platform URL.
Remote sources are fetched into a TemporaryWorkspace owned by the caller.
"""

import shutil
import tempfile
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from cliptrim import fetch, segments
from cliptrim.errors import InvalidSource, SourceNotFound
from cliptrim.logging_utils import get_logger
from cliptrim.models import ResolvedSource, SourceDescriptor, SourceKind, TimeRange
from cliptrim.settings import Settings

log = get_logger(__name__)

STREAMING_HOSTS = ("youtube.com", "youtu.be")
DEFAULT_DOWNLOAD_NAME = "downloaded_video.mp4"


def classify(source: str) -> SourceDescriptor:
    """Decide how *source* will be acquired, from its shape alone.

    Raises InvalidSource for an http(s) source that is not a parseable URL.
    """
    source = source.strip()
    if not source.startswith("http"):
        return SourceDescriptor(source, SourceKind.LOCAL)
    try:
        urlparse(source)
    except ValueError as e:
        raise InvalidSource(f"Invalid URL: {e}") from e
    if any(host in source for host in STREAMING_HOSTS):
        return SourceDescriptor(source, SourceKind.STREAMING)
    return SourceDescriptor(source, SourceKind.GENERIC_URL)


def download_filename(url: str) -> str:
    """Last path segment of *url*, or a generic video name when there is none.

    The decoded segment is reduced to a bare file name, so encoded separators
    and dot segments cannot point outside the download directory.
    """
    try:
        segment = urlparse(url).path.rsplit("/", 1)[-1]
    except ValueError as e:
        raise InvalidSource(f"Invalid URL: {e}") from e
    name = PurePosixPath(unquote(segment).replace("\\", "/")).name
    if name in ("", ".", "..") or "\x00" in name:
        return DEFAULT_DOWNLOAD_NAME
    return name


class TemporaryWorkspace:
    """A scratch directory that is created on first use and always removed.

    Use as a context manager; leaving the block deletes the directory and
    everything in it regardless of how the block exited.
    """

    def __init__(self, prefix: str = "cliptrim_"):
        self._prefix = prefix
        self._path: Path | None = None

    @property
    def created(self) -> bool:
        return self._path is not None

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = Path(tempfile.mkdtemp(prefix=self._prefix))
            log.debug("Created workspace %s", self._path)
        return self._path

    def close(self) -> None:
        if self._path is not None:
            shutil.rmtree(self._path, ignore_errors=True)
            log.debug("Removed workspace %s", self._path)
            self._path = None

    def __enter__(self) -> "TemporaryWorkspace":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def resolve_source(
    source: SourceDescriptor,
    time_range: TimeRange,
    workspace: TemporaryWorkspace,
    settings: Settings | None = None,
) -> ResolvedSource:
    """Produce a local file for *source*, downloading into *workspace* if remote."""
    settings = settings or Settings()

    if source.kind is SourceKind.LOCAL:
        path = Path(source.value).expanduser()
        if not path.exists():
            raise SourceNotFound(f"Local video file not found: {path}")
        return ResolvedSource(path=path, already_trimmed=False)

    if source.kind is SourceKind.STREAMING:
        path = segments.download_segment(
            source.value,
            workspace.path,
            time_range.start,
            time_range.end,
            ytdlp_bin=settings.ytdlp_bin,
            format_selector=settings.ytdlp_format,
            concurrent_fragments=settings.concurrent_fragments,
        )
        return ResolvedSource(path=path, already_trimmed=True)

    path = workspace.path / download_filename(source.value)
    fetch.fetch_url(source.value, path, chunk_size=settings.chunk_size)
    return ResolvedSource(path=path, already_trimmed=False)
