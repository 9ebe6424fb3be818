"""Shared test fixtures."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cliptrim.settings import Settings


def fake_ffmpeg_process(stderr: str = "", returncode: int = 0) -> MagicMock:
    """A stand-in for ``subprocess.Popen`` running ffmpeg."""
    proc = MagicMock()
    proc.stderr = io.StringIO(stderr)
    proc.wait.return_value = returncode
    proc.poll.return_value = returncode
    return proc


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(output_dir=tmp_path / "Downloads")


@pytest.fixture
def local_clip(tmp_path: Path) -> Path:
    clip = tmp_path / "clip.mp4"
    clip.write_bytes(b"not really a video")
    return clip


@pytest.fixture
def ffmpeg_process():
    """Factory for fake ffmpeg processes: ``ffmpeg_process(stderr, returncode)``."""
    return fake_ffmpeg_process
