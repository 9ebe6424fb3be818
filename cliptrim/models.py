"""Shared data types used across ClipTrim."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SourceKind(Enum):
    LOCAL = "local"
    STREAMING = "streaming"
    GENERIC_URL = "generic_url"


@dataclass(frozen=True)
class SourceDescriptor:
    """A video source string together with how it will be acquired."""

    value: str
    kind: SourceKind

    @property
    def is_remote(self) -> bool:
        return self.kind is not SourceKind.LOCAL


@dataclass(frozen=True)
class TimeRange:
    """A start/end time pair in seconds.

    ``start_text``/``end_text`` keep the strings the user typed so ffmpeg
    receives them unchanged.
    """

    start: float
    end: float
    start_text: str = ""
    end_text: str = ""

    @property
    def duration(self) -> float:
        return self.end - self.start


class AspectRatio(Enum):
    ORIGINAL = "Original"
    WIDESCREEN = "16:9"
    VERTICAL = "9:16"
    SQUARE = "1:1"


# Output frame size (width, height) for each re-encoding target.
FRAME_SIZES: dict[AspectRatio, tuple[int, int]] = {
    AspectRatio.WIDESCREEN: (1280, 720),
    AspectRatio.VERTICAL: (720, 1280),
    AspectRatio.SQUARE: (720, 720),
}


@dataclass(frozen=True)
class TranscodePlan:
    """An ffmpeg argument list with the input and output it refers to."""

    args: tuple[str, ...]
    input_path: Path
    output_path: Path


@dataclass(frozen=True)
class ResolvedSource:
    """A local media file ready for ffmpeg."""

    path: Path
    already_trimmed: bool = False


@dataclass
class TrimResult:
    output_path: Path
    message: str


# ---------------------------------------------------------------------------
# Engine events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Progress:
    """Periodic ffmpeg stats line; ``time`` is the encoded position in seconds."""

    time: float
    line: str = ""


@dataclass(frozen=True)
class Done:
    """ffmpeg exited cleanly."""


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class Other:
    line: str


EngineEvent = Progress | Done | Error | Other


class Stage(Enum):
    """Pipeline states, entered strictly in this order (or FAILED)."""

    IDLE = "Idle"
    RESOLVING = "Resolving source"
    PLANNING = "Planning"
    TRANSCODING = "Transcoding"
    SUCCEEDED = "Done"
    FAILED = "Failed"
