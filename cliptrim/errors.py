"""Error types raised by the trim pipeline.

Every error carries a display message; ``str(err)`` is what callers show.
"""


class ClipTrimError(Exception):
    """Base error for ClipTrim."""


class InvalidTime(ClipTrimError, ValueError):
    """Raised when a time string cannot be parsed."""


class InvalidTimeFormat(InvalidTime):
    pass


class InvalidTimeComponent(InvalidTime):
    pass


class InvalidTimeRange(ClipTrimError, ValueError):
    """Raised when the end of a range lies before its start."""


class UnsupportedRatio(ClipTrimError, ValueError):
    pass


class InvalidSource(ClipTrimError, ValueError):
    """Raised when a source URL cannot be parsed."""


class SourceNotFound(ClipTrimError, FileNotFoundError):
    pass


class OutputDirUnavailable(ClipTrimError):
    """Raised when the output folder cannot be created or written to."""


class ExternalToolMissing(ClipTrimError):
    pass


class ExternalToolFailed(ClipTrimError):
    pass


class OutputMissing(ClipTrimError):
    pass


class FetchError(ClipTrimError):
    """Raised when a remote video cannot be downloaded."""


class FetchHttpError(FetchError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FetchNetworkError(FetchError):
    pass


class FetchIoError(FetchError):
    pass


class EngineError(ClipTrimError):
    """Raised when ffmpeg could not produce the output file."""


class EngineSpawnFailed(EngineError):
    pass


class EngineFailed(EngineError):
    def __init__(self, errors: list[str]):
        super().__init__(f"FFmpeg failed: {'; '.join(errors)}")
        self.errors = errors


class EngineIncomplete(EngineError):
    pass
