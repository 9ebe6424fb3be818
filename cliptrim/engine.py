"""Orchestrator: resolves the source, then plans and runs the ffmpeg trim."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from cliptrim import ffutil
from cliptrim.errors import (
    ClipTrimError,
    EngineIncomplete,
    EngineSpawnFailed,
    OutputDirUnavailable,
)
from cliptrim.logging_utils import get_logger
from cliptrim.models import Stage, TrimResult
from cliptrim.planner import build_plan, parse_ratio
from cliptrim.settings import Settings, resolve_output_dir
from cliptrim.sources import TemporaryWorkspace, classify, resolve_source
from cliptrim.timecode import parse_range

log = get_logger(__name__)

STATUS_READY = "FFmpeg is ready."
STATUS_BROKEN = "FFmpeg not working properly."
STATUS_MISSING = "FFmpeg not found. Please install FFmpeg manually."


def ensure_ready(
    settings: Settings | None = None,
    on_status: Callable[[str], None] | None = None,
) -> None:
    """Check that ffmpeg runs, reporting a status line through *on_status*."""
    settings = settings or Settings()

    def _status(text: str) -> None:
        log.info(text)
        if on_status:
            on_status(text)

    try:
        ok = ffutil.check_ffmpeg(settings.ffmpeg_bin)
    except EngineSpawnFailed:
        _status(STATUS_MISSING)
        raise

    if not ok:
        _status(STATUS_BROKEN)
        raise EngineIncomplete("FFmpeg did not complete successfully.")
    _status(STATUS_READY)


def output_path_for(output_dir: Path, now: datetime | None = None) -> Path:
    """Reserve ``trimmed_<UTC timestamp>.mp4`` in *output_dir*.

    The file is created empty so a concurrent or same-second run picks a
    different name (``trimmed_<ts>_1.mp4`` and so on). ffmpeg overwrites it.
    """
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    candidate = output_dir / f"trimmed_{stamp}.mp4"
    n = 0
    while True:
        try:
            candidate.open("x").close()
            return candidate
        except FileExistsError:
            n += 1
            candidate = output_dir / f"trimmed_{stamp}_{n}.mp4"


def _discard_placeholder(output_path: Path | None) -> None:
    """Remove a reserved output file that ffmpeg never wrote to."""
    if output_path is None:
        return
    try:
        if output_path.stat().st_size == 0:
            output_path.unlink()
    except OSError as e:
        log.warning("Could not remove empty output %s: %s", output_path, e)


def trim(
    source: str,
    start: str,
    end: str,
    ratio: str = "Original",
    settings: Settings | None = None,
    on_progress: Callable[[str, float], None] | None = None,
) -> TrimResult:
    """Trim *source* to ``[start, end]`` and save it to the output folder.

    Args:
        source: Local path, direct video URL, or YouTube URL.
        start: Start time as ``HH:MM:SS``.
        end: End time as ``HH:MM:SS``.
        ratio: ``"Original"``, ``"16:9"``, ``"9:16"`` or ``"1:1"``.
        settings: Tool locations and output directory; defaults if omitted.
        on_progress: Optional callback(stage_name, fraction_complete).
    """
    settings = settings or Settings()

    def _progress(stage: Stage, frac: float) -> None:
        if on_progress:
            on_progress(stage.value, frac)

    # Nothing is spawned or downloaded until the inputs are known to be valid.
    time_range = parse_range(start, end)
    aspect = parse_ratio(ratio)
    descriptor = classify(source)

    stage = Stage.IDLE
    output_path = None
    try:
        with TemporaryWorkspace() as workspace:
            stage = Stage.RESOLVING
            log.info("%s: %s (%s)", stage.value, descriptor.value, descriptor.kind.value)
            _progress(stage, 0.0)
            resolved = resolve_source(descriptor, time_range, workspace, settings)

            stage = Stage.PLANNING
            _progress(stage, 0.3)
            try:
                output_path = output_path_for(resolve_output_dir(settings))
            except OSError as e:
                raise OutputDirUnavailable(f"Failed to create output file: {e}") from e
            plan = build_plan(
                resolved.path, resolved.already_trimmed, time_range, aspect, output_path
            )

            stage = Stage.TRANSCODING
            _progress(stage, 0.35)
            log.info("%s %s -> %s", stage.value, resolved.path, output_path)

            def on_time(seconds: float) -> None:
                if time_range.duration > 0:
                    frac = min(seconds / time_range.duration, 1.0)
                    _progress(Stage.TRANSCODING, 0.35 + 0.6 * frac)

            ffutil.run_plan(plan, ffmpeg_bin=settings.ffmpeg_bin, on_progress=on_time)
    except ClipTrimError as e:
        log.error("Trim failed during %s: %s", stage.value.lower(), e)
        _discard_placeholder(output_path)
        _progress(Stage.FAILED, 1.0)
        raise

    output_path = output_path.resolve()
    message = f"Video trimmed successfully! Saved to: {output_path}"
    log.info(message)
    _progress(Stage.SUCCEEDED, 1.0)
    return TrimResult(output_path=output_path, message=message)
